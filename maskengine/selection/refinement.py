"""
SelectMask Pro - Refine Edge

Pipeline de refinamento de bordas (cabelo, pelos, contornos complexos).
Os estágios são sequenciais e a ordem é significativa:

1. Zona de borda: pixels parcialmente selecionados ou com vizinho (8-conexo)
   diferindo mais de 128, expandidos por um disco de raio `radius`
2. Smart radius (radius > 0): binariza a máscara na zona de borda onde a
   borda da imagem é forte (> 0.5)
3. Smooth: blur gaussiano de raio smooth / 20
4. Feather: blur gaussiano de raio feather
5. Contrast: curva S, amount = contrast / 50
6. Shift: dilate (shift > 0) ou erode (shift < 0) por |shift| / 10

Todos os estágios operam sobre uma cópia privada da máscara de entrada.
"""

from typing import Optional

import cv2
import numpy as np

from config.settings import (
    MASK_FULL,
    REFINE_BINARIZE_THRESHOLD,
    REFINE_CONTRAST_DIVISOR,
    REFINE_EDGE_ZONE_DIFF,
    REFINE_SHIFT_DIVISOR,
    REFINE_SMART_EDGE_THRESHOLD,
    REFINE_SMOOTH_DIVISOR,
)
from maskengine.logging.setup import get_logger
from maskengine.selection.edge_detector import resolve_edge_map
from maskengine.selection.morphology import dilate, erode, gaussian_blur
from maskengine.selection.types import RefineEdgeOptions, Selection
from maskengine.utils.pixel_buffer import (
    check_same_size,
    disk_kernel,
    ensure_rgba,
    mask_strength,
    to_strength,
)

logger = get_logger("RefineEdge")

_NEIGHBOR_OFFSETS = [(dy, dx) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if dy or dx]


def find_edge_zone(mask: np.ndarray, radius: float) -> np.ndarray:
    """
    Calcula a zona de borda da máscara.

    Sementes: força estritamente entre 0 e 255, ou algum vizinho 8-conexo
    (dentro da imagem) com diferença > 128. Cada semente é expandida por
    um disco de raio `radius`.

    Returns:
        Máscara booleana (H, W)
    """
    strength = mask_strength(mask).astype(np.int16)
    height, width = strength.shape
    if strength.size == 0:
        return np.zeros((height, width), dtype=bool)

    partial = (strength > 0) & (strength < MASK_FULL)

    # Replicar a borda só introduz valores de vizinhos reais (ou do próprio
    # pixel), equivalente a ignorar vizinhos fora da imagem.
    padded = np.pad(strength, 1, mode='edge')
    transition = np.zeros((height, width), dtype=bool)
    for dy, dx in _NEIGHBOR_OFFSETS:
        neighbor = padded[1 + dy:1 + dy + height, 1 + dx:1 + dx + width]
        transition |= np.abs(neighbor - strength) > REFINE_EDGE_ZONE_DIFF

    seeds = partial | transition
    if radius <= 0 or not seeds.any():
        return seeds

    return cv2.dilate(seeds.astype(np.uint8), disk_kernel(radius)) > 0


def apply_smart_radius(mask: np.ndarray, edges: np.ndarray, edge_zone: np.ndarray) -> int:
    """
    Binariza a máscara (IN PLACE, cópia privada do pipeline) onde a zona de
    borda coincide com borda forte da imagem. Bordas suaves mantêm o
    gradiente. Alpha não é alterado.

    Returns:
        Número de pixels binarizados
    """
    target = edge_zone & (edges > REFINE_SMART_EDGE_THRESHOLD)
    strength = mask_strength(mask)
    binary = np.where(strength > REFINE_BINARIZE_THRESHOLD, MASK_FULL, 0).astype(np.uint8)

    for channel in range(3):
        mask[..., channel][target] = binary[target]
    return int(target.sum())


def apply_contrast(mask: np.ndarray, amount: float) -> None:
    """
    Curva S de contraste (IN PLACE) sobre R, G, B:

        v' = clamp(round(((v/255 - 0.5) * (1 + amount) + 0.5) * 255), 0, 255)
    """
    value = mask_strength(mask).astype(np.float64) / MASK_FULL
    curved = (value - 0.5) * (1 + amount) + 0.5
    mask[..., :3] = to_strength(curved * MASK_FULL)[..., None]


def refine_edge(
    selection: Selection,
    image: np.ndarray,
    options: Optional[RefineEdgeOptions] = None,
    edge_map: Optional[np.ndarray] = None
) -> Selection:
    """
    Refina as bordas de uma seleção.

    Args:
        selection: Seleção de entrada (não é alterada)
        image: Buffer RGBA8 usado pelo smart radius
        options: RefineEdgeOptions; decontaminate/decontaminate_amount/output
            não alteram pixels e ficam a cargo do consumidor
        edge_map: Edge map pré-calculado da mesma imagem (opcional)

    Returns:
        Nova Selection com bounds recalculados
    """
    ensure_rgba(image)
    check_same_size(selection.mask, image, "refine_edge")
    options = options or RefineEdgeOptions()

    mask = selection.copy_mask()

    # 1. Zona de borda
    edge_zone = find_edge_zone(mask, options.radius)

    # 2. Smart radius
    binarized = 0
    if options.radius > 0:
        edges = resolve_edge_map(image, edge_map)
        binarized = apply_smart_radius(mask, edges, edge_zone)

    # 3. Smooth
    if options.smooth > 0:
        mask = gaussian_blur(mask, options.smooth / REFINE_SMOOTH_DIVISOR)

    # 4. Feather
    if options.feather > 0:
        mask = gaussian_blur(mask, options.feather)

    # 5. Contrast
    if options.contrast > 0:
        apply_contrast(mask, options.contrast / REFINE_CONTRAST_DIVISOR)

    # 6. Shift
    if options.shift > 0:
        mask = dilate(mask, abs(options.shift) / REFINE_SHIFT_DIVISOR)
    elif options.shift < 0:
        mask = erode(mask, abs(options.shift) / REFINE_SHIFT_DIVISOR)

    result = Selection.from_mask(mask)
    logger.debug(
        f"Refine Edge: zona={int(edge_zone.sum())} px, binarizados={binarized}, "
        f"opções={options}, bounds={result.bounds.to_dict()}"
    )
    return result
