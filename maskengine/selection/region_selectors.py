"""
SelectMask Pro - Seletores de Região

Seletores que produzem uma Selection a partir da imagem:
- quick_select: crescimento BFS guiado por bordas a partir de uma semente
- select_subject: região de maior saliência (heurística, sem ML)
- select_color_range: pertinência suave por distância de cor
- magic_wand_select: tolerância por canal, contígua ou global
- select_rectangle / select_all

Determinismo: a ordem de visita do flood fill nunca altera o resultado.
No Quick Select cada célula é avaliada uma única vez, na sua profundidade
mínima (BFS), e aceitação depende apenas de posição, cor e profundidade.
"""

import math
from collections import deque
from typing import Optional, Tuple

import cv2
import numpy as np

from config.settings import (
    COLOR_RANGE_FUZZINESS_SCALE,
    DEFAULT_FUZZINESS,
    MAGIC_WAND_DEFAULT_TOLERANCE,
    MAGIC_WAND_MAX_TOLERANCE,
    MASK_FULL,
    QUICK_SELECT_COLOR_TOLERANCE,
    QUICK_SELECT_EDGE_THRESHOLD,
    QUICK_SELECT_ENHANCE_RADIUS,
    QUICK_SELECT_FREE_DEPTH,
    QUICK_SELECT_RADIUS_FACTOR,
    SALIENCY_CENTER_FALLOFF,
    SALIENCY_CENTER_WEIGHT,
    SALIENCY_EDGE_WEIGHT,
    SALIENCY_SATURATION_WEIGHT,
    SUBJECT_CLOSE_RADIUS,
    SUBJECT_EXPAND_FACTOR,
    SUBJECT_MIN_REGION_SIZE,
    SUBJECT_SEED_THRESHOLD,
)
from maskengine.constants import ColorRangeKind, SelectionMode
from maskengine.logging.setup import get_logger
from maskengine.selection.algebra import ModeLike, coerce_mode, invert_selection, smooth_selection
from maskengine.selection.edge_detector import resolve_edge_map
from maskengine.selection.morphology import gaussian_blur, morph_close
from maskengine.selection.types import (
    RGBA,
    ColorRangeOptions,
    EdgeDetectionOptions,
    Selection,
    clamp_option,
)
from maskengine.utils.pixel_buffer import (
    buffer_size,
    check_same_size,
    compose_mask,
    empty_mask,
    ensure_rgba,
    in_bounds,
    to_strength,
)

logger = get_logger("RegionSelectors")


# =========================================================================
# Quick Select
# =========================================================================

def _grow_region(
    image: np.ndarray,
    edges: np.ndarray,
    seed_x: int,
    seed_y: int,
    radius: float
) -> np.ndarray:
    """
    BFS (4-vizinhos) a partir da semente. Retorna máscara booleana (H, W)
    das células aceitas.

    Células com profundidade <= 1 são sempre aceitas. Acima disso são
    rejeitadas se: distância euclidiana da semente > radius * 3, borda >
    0.3, ou |dr|+|dg|+|db| > 150. Células rejeitadas não expandem.
    """
    height, width = image.shape[:2]
    max_radius = radius * QUICK_SELECT_RADIUS_FACTOR

    rgb = image[..., :3].astype(np.int32)
    seed_rgb = rgb[seed_y, seed_x]
    color_diff = np.abs(rgb - seed_rgb).sum(axis=-1)
    # Critérios independentes da profundidade, pré-calculados uma vez
    passable = ((edges <= QUICK_SELECT_EDGE_THRESHOLD)
                & (color_diff <= QUICK_SELECT_COLOR_TOLERANCE)).ravel().tolist()

    visited = bytearray(width * height)
    accepted = np.zeros(width * height, dtype=bool)

    queue = deque([(seed_x, seed_y, 0)])
    while queue:
        x, y, depth = queue.popleft()
        if x < 0 or x >= width or y < 0 or y >= height:
            continue

        pos = y * width + x
        if visited[pos]:
            continue
        visited[pos] = 1

        if depth > QUICK_SELECT_FREE_DEPTH:
            dx = x - seed_x
            dy = y - seed_y
            if math.sqrt(dx * dx + dy * dy) > max_radius:
                continue
            if not passable[pos]:
                continue

        accepted[pos] = True

        if depth < max_radius:
            next_depth = depth + 1
            queue.append((x - 1, y, next_depth))
            queue.append((x + 1, y, next_depth))
            queue.append((x, y - 1, next_depth))
            queue.append((x, y + 1, next_depth))

    return accepted.reshape(height, width)


def quick_select(
    image: np.ndarray,
    start_x: float,
    start_y: float,
    radius: Optional[float] = None,
    mode: ModeLike = SelectionMode.NEW,
    existing_selection: Optional[Selection] = None,
    options: Optional[EdgeDetectionOptions] = None,
    edge_map: Optional[np.ndarray] = None,
    auto_enhance: bool = False
) -> Selection:
    """
    Quick Selection: expande a seleção a partir de (start_x, start_y)
    seguindo as bordas da imagem.

    Args:
        image: Buffer RGBA8 da composição
        start_x, start_y: Ponto da semente (truncado com floor)
        radius: Raio do pincel; None usa options.radius
        mode: new/add escrevem 255, subtract escreve 0, intersect mantém
            apenas a parte da seleção existente dentro da região crescida
        existing_selection: Seleção base (copiada, nunca alterada)
        options: EdgeDetectionOptions (sensitivity/contiguous reservados)
        edge_map: Edge map pré-calculado da mesma imagem (opcional)
        auto_enhance: Suaviza o resultado com mediana de raio 1

    Returns:
        Nova Selection. Semente fora da imagem retorna a seleção existente
        (ou vazia) inalterada.
    """
    ensure_rgba(image)
    width, height = buffer_size(image)

    if options is None:
        options = EdgeDetectionOptions() if radius is None else None
    if radius is None:
        radius = options.radius
    radius = clamp_option(float(radius), 0, float("inf"), "radius")
    mode = coerce_mode(mode)

    if existing_selection is not None:
        check_same_size(image, existing_selection.mask, "quick_select")
        mask = existing_selection.copy_mask()
    else:
        mask = empty_mask(width, height)

    seed_x = int(math.floor(start_x))
    seed_y = int(math.floor(start_y))
    if not in_bounds(image, seed_x, seed_y):
        logger.warning(f"Quick Select: semente ({seed_x}, {seed_y}) fora da imagem {width}x{height}")
        return Selection.from_mask(mask)

    edges = resolve_edge_map(image, edge_map)
    region = _grow_region(image, edges, seed_x, seed_y, radius)

    if mode in (None, SelectionMode.NEW, SelectionMode.ADD):
        mask[region] = MASK_FULL
    elif mode == SelectionMode.SUBTRACT:
        mask[region] = 0
    elif mode == SelectionMode.INTERSECT:
        mask[~region] = 0

    selection = Selection.from_mask(mask)
    logger.debug(
        f"Quick Select ({seed_x}, {seed_y}) r={radius} modo={mode}: "
        f"{int(region.sum())} pixels, bounds={selection.bounds.to_dict()}"
    )

    if auto_enhance:
        selection = smooth_selection(selection, QUICK_SELECT_ENHANCE_RADIUS)
    return selection


# =========================================================================
# Select Subject
# =========================================================================

def compute_saliency_map(image: np.ndarray, edge_map: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Mapa de saliência heurístico (H, W) float64:

        saliency = 0.3 * edge + 0.4 * center_bias + 0.3 * (saturation / 255)
        center_bias = 1 - 0.5 * (dist_centro / dist_max)
        saturation = max(r, g, b) - min(r, g, b)
    """
    ensure_rgba(image)
    height, width = image.shape[:2]
    edges = resolve_edge_map(image, edge_map)

    center_x = width / 2
    center_y = height / 2
    max_dist = math.sqrt(center_x ** 2 + center_y ** 2)

    ys, xs = np.mgrid[0:height, 0:width]
    if max_dist > 0:
        dist = np.sqrt((xs - center_x) ** 2 + (ys - center_y) ** 2)
        center_bias = 1 - (dist / max_dist) * SALIENCY_CENTER_FALLOFF
    else:
        center_bias = np.ones((height, width), dtype=np.float64)

    rgb = image[..., :3].astype(np.int16)
    saturation = (rgb.max(axis=-1) - rgb.min(axis=-1)).astype(np.float64)

    return (edges * SALIENCY_EDGE_WEIGHT
            + center_bias * SALIENCY_CENTER_WEIGHT
            + (saturation / 255) * SALIENCY_SATURATION_WEIGHT)


def select_subject(image: np.ndarray, edge_map: Optional[np.ndarray] = None) -> Selection:
    """
    Seleciona o "assunto principal" por saliência.

    Regiões: componentes 4-conexas de saliência >= 0.28 que contenham ao
    menos um pixel interior (fora da moldura de 1 px) com saliência >= 0.35.
    Regiões com menos de 100 pixels são descartadas; vence a de maior
    saliência SOMADA. O resultado passa por morph_close(3).
    """
    ensure_rgba(image)
    width, height = buffer_size(image)
    if width < 3 or height < 3:
        return empty_selection(width, height)

    saliency = compute_saliency_map(image, edge_map)
    expand_threshold = SUBJECT_SEED_THRESHOLD * SUBJECT_EXPAND_FACTOR

    expandable = (saliency >= expand_threshold).astype(np.uint8)
    num_labels, labels = cv2.connectedComponents(expandable, connectivity=4, ltype=cv2.CV_32S)

    seeds = np.zeros((height, width), dtype=bool)
    seeds[1:-1, 1:-1] = saliency[1:-1, 1:-1] >= SUBJECT_SEED_THRESHOLD
    # Indexação booleana percorre em ordem raster: primeira semente de cada região
    seed_labels, first_seed = np.unique(labels[seeds], return_index=True)

    sizes = np.bincount(labels.ravel(), minlength=num_labels)
    scores = np.bincount(labels.ravel(), weights=saliency.ravel(), minlength=num_labels)

    best_label = None
    best_key: Tuple[float, int] = (-math.inf, 0)
    for label, first in zip(seed_labels.tolist(), first_seed.tolist()):
        if sizes[label] < SUBJECT_MIN_REGION_SIZE:
            continue
        # Empate no score: vence a região cuja semente aparece primeiro
        key = (float(scores[label]), -first)
        if key > best_key:
            best_key = key
            best_label = label

    if best_label is None:
        logger.debug(f"Select Subject: nenhuma região qualificada ({len(seed_labels)} candidatas)")
        return empty_selection(width, height)

    region = labels == best_label
    painted = compose_mask(region.astype(np.uint8) * MASK_FULL, alpha=None)
    selection = Selection.from_mask(morph_close(painted, SUBJECT_CLOSE_RADIUS))

    logger.debug(
        f"Select Subject: região {best_label} com {int(sizes[best_label])} pixels "
        f"(score={best_key[0]:.2f}), bounds={selection.bounds.to_dict()}"
    )
    return selection


# =========================================================================
# Color Range / Magic Wand
# =========================================================================

def sample_color(image: np.ndarray, x: float, y: float) -> Optional[RGBA]:
    """Cor do pixel (floor(x), floor(y)) ou None se fora da imagem."""
    ensure_rgba(image)
    px = int(math.floor(x))
    py = int(math.floor(y))
    if not in_bounds(image, px, py):
        return None
    return RGBA(*(int(c) for c in image[py, px]))


def select_color_range(image: np.ndarray, options: ColorRangeOptions) -> Selection:
    """
    Seleção suave por distância de cor (sem restrição de conectividade).

        dist = ||rgb - alvo||
        max_dist = fuzziness * 2.55
        força = clamp(1 - dist / max_dist, 0, 1)

    Com max_dist == 0 apenas cores idênticas ao alvo recebem força 1.
    round(força * 255) é escrito nos quatro canais.
    """
    ensure_rgba(image)
    if options.range != ColorRangeKind.SAMPLED:
        logger.debug(f"Color Range: faixa '{options.range.value}' avaliada como 'sampled'")

    target = np.array(options.target_color[:3], dtype=np.float64)
    diff = image[..., :3].astype(np.float64) - target
    dist = np.sqrt((diff * diff).sum(axis=-1))

    max_dist = options.fuzziness * COLOR_RANGE_FUZZINESS_SCALE
    if max_dist > 0:
        strength = np.clip(1 - dist / max_dist, 0, 1)
    else:
        strength = (dist == 0).astype(np.float64)

    selection = Selection.from_mask(compose_mask(to_strength(strength * MASK_FULL), alpha=None))
    logger.debug(
        f"Color Range alvo={tuple(options.target_color)} fuzziness={options.fuzziness}: "
        f"bounds={selection.bounds.to_dict()}"
    )

    if options.invert:
        selection = invert_selection(selection)
    return selection


def select_color_range_at(
    image: np.ndarray,
    x: float,
    y: float,
    fuzziness: float = DEFAULT_FUZZINESS,
    invert: bool = False
) -> Selection:
    """
    Amostra a cor em (x, y) e executa o Color Range com ela.

    Ponto fora da imagem retorna seleção vazia.
    """
    target = sample_color(image, x, y)
    if target is None:
        width, height = buffer_size(image)
        logger.warning(f"Color Range: ponto ({x}, {y}) fora da imagem {width}x{height}")
        return empty_selection(width, height)

    return select_color_range(
        image,
        ColorRangeOptions(target_color=target, fuzziness=fuzziness, invert=invert)
    )


def magic_wand_select(
    image: np.ndarray,
    x: float,
    y: float,
    tolerance: float = MAGIC_WAND_DEFAULT_TOLERANCE,
    contiguous: bool = True
) -> Selection:
    """
    Varinha mágica: pixels com |dR|, |dG|, |dB| e |dA| <= tolerance em
    relação à semente. Em modo contíguo, apenas a componente 4-conexa que
    contém a semente.
    """
    ensure_rgba(image)
    width, height = buffer_size(image)
    tolerance = clamp_option(tolerance, 0, MAGIC_WAND_MAX_TOLERANCE, "tolerance")

    seed_x = int(math.floor(x))
    seed_y = int(math.floor(y))
    if not in_bounds(image, seed_x, seed_y):
        logger.warning(f"Magic Wand: semente ({seed_x}, {seed_y}) fora da imagem {width}x{height}")
        return empty_selection(width, height)

    pixels = image.astype(np.int16)
    matches = (np.abs(pixels - pixels[seed_y, seed_x]) <= tolerance).all(axis=-1)

    if contiguous:
        _, labels = cv2.connectedComponents(matches.astype(np.uint8), connectivity=4, ltype=cv2.CV_32S)
        region = labels == labels[seed_y, seed_x]
    else:
        region = matches

    return Selection.from_mask(compose_mask(region.astype(np.uint8) * MASK_FULL, alpha=None))


# =========================================================================
# Seleções geométricas
# =========================================================================

def select_rectangle(
    width: int,
    height: int,
    x: float,
    y: float,
    rect_width: float,
    rect_height: float,
    feather: float = 0
) -> Selection:
    """
    Seleção retangular (mínimo 1x1), recortada ao canvas, com feather
    gaussiano opcional.
    """
    x0 = int(math.floor(x))
    y0 = int(math.floor(y))
    x1 = x0 + max(1, int(math.floor(rect_width)))
    y1 = y0 + max(1, int(math.floor(rect_height)))

    mask = empty_mask(width, height)
    mask[max(0, y0):max(0, min(y1, height)), max(0, x0):max(0, min(x1, width))] = MASK_FULL

    if feather > 0:
        mask = gaussian_blur(mask, feather)
    return Selection.from_mask(mask)


def select_all(width: int, height: int) -> Selection:
    """Seleção do canvas inteiro com força 255."""
    return Selection.from_mask(np.full((height, width, 4), MASK_FULL, dtype=np.uint8))


def empty_selection(width: int, height: int) -> Selection:
    """Seleção vazia (máscara zerada, bounds degenerados)."""
    return Selection.from_mask(empty_mask(width, height))
