"""
SelectMask Pro - Álgebra de Seleções

Operações entre seleções e conversões de alpha:
- combine_selections: add / subtract / intersect / replace
- invert_selection
- grow / shrink / feather / smooth (wrappers sobre a morfologia)
- apply_levels: níveis de entrada + gamma sobre a força da máscara
- selection_from_alpha / apply_selection_as_alpha

Fórmulas por pixel (força a, b em [0, 255]):
    add       = min(255, a + b)
    subtract  = max(0, a - b)
    intersect = min(a, b)
    (outros)  = b
"""

from typing import Optional, Union

import numpy as np

from config.settings import MASK_FULL
from maskengine.constants import CHANNEL_A, SelectionMode
from maskengine.logging.setup import get_logger
from maskengine.selection.morphology import dilate, erode, gaussian_blur, median_filter
from maskengine.selection.types import Rect, Selection, clamp_option
from maskengine.utils.pixel_buffer import (
    buffer_size,
    check_same_size,
    compose_mask,
    ensure_rgba,
    mask_strength,
    to_strength,
)

logger = get_logger("SelectionAlgebra")

ModeLike = Union[SelectionMode, str]


def coerce_mode(mode: ModeLike) -> Optional[SelectionMode]:
    """
    Converte string/enum em SelectionMode.

    Modos desconhecidos retornam None, que os chamadores tratam como
    substituição (replace), sem levantar exceção.
    """
    try:
        return SelectionMode(mode)
    except ValueError:
        logger.warning(f"Modo de seleção desconhecido '{mode}', tratado como substituição")
        return None


def combine_selections(a: Selection, b: Selection, mode: ModeLike) -> Selection:
    """
    Combina duas seleções pixel a pixel.

    O resultado é escrito em R, G e B com alpha = 255.
    """
    check_same_size(a.mask, b.mask, "combine_selections")
    a_val = mask_strength(a.mask).astype(np.int16)
    b_val = mask_strength(b.mask).astype(np.int16)

    mode = coerce_mode(mode)
    if mode == SelectionMode.ADD:
        result = np.minimum(MASK_FULL, a_val + b_val)
    elif mode == SelectionMode.SUBTRACT:
        result = np.maximum(0, a_val - b_val)
    elif mode == SelectionMode.INTERSECT:
        result = np.minimum(a_val, b_val)
    else:
        result = b_val

    return Selection.from_mask(compose_mask(result))


def invert_selection(selection: Selection, tight_bounds: bool = False) -> Selection:
    """
    Inverte a seleção: 255 - v em cada canal R, G, B; alpha = 255.

    Por padrão os bounds do resultado são o canvas inteiro, sem recalcular a
    extensão real. Com tight_bounds=True, os bounds são recalculados como
    nas demais operações.
    """
    mask = selection.copy_mask()
    mask[..., :3] = MASK_FULL - mask[..., :3]
    mask[..., CHANNEL_A] = MASK_FULL

    if tight_bounds:
        return Selection.from_mask(mask)

    width, height = buffer_size(mask)
    return Selection(mask=mask, bounds=Rect(0, 0, width, height), active=True)


def grow_selection(selection: Selection, pixels: float) -> Selection:
    """Expande a seleção (dilatação circular)."""
    return Selection.from_mask(dilate(selection.mask, pixels))


def shrink_selection(selection: Selection, pixels: float) -> Selection:
    """Contrai a seleção (erosão circular)."""
    return Selection.from_mask(erode(selection.mask, pixels))


def feather_selection(selection: Selection, radius: float) -> Selection:
    """Suaviza as bordas com blur gaussiano."""
    return Selection.from_mask(gaussian_blur(selection.mask, radius))


def smooth_selection(selection: Selection, radius: float) -> Selection:
    """Suaviza contornos com filtro de mediana."""
    return Selection.from_mask(median_filter(selection.mask, radius))


def apply_levels(
    selection: Selection,
    input_black: float = 0,
    input_white: float = 255,
    gamma: float = 1.0
) -> Selection:
    """
    Aplica níveis à força da máscara.

        v = max(0, v - black)
        v = min(255, v / (white - black) * 255)
        v = (v / 255) ^ (1 / gamma) * 255

    white é ajustado para ficar acima de black e gamma para > 0, evitando
    divisão por zero. Alpha é preservado.
    """
    input_black = clamp_option(input_black, 0, MASK_FULL - 1, "input_black")
    input_white = clamp_option(input_white, input_black + 1, MASK_FULL, "input_white")
    gamma = clamp_option(gamma, 0.01, 10.0, "gamma")

    value = mask_strength(selection.mask).astype(np.float64)
    value = np.maximum(0, value - input_black)
    value = np.minimum(MASK_FULL, (value / (input_white - input_black)) * MASK_FULL)
    value = np.power(value / MASK_FULL, 1.0 / gamma) * MASK_FULL

    mask = selection.copy_mask()
    mask[..., :3] = to_strength(value)[..., None]
    return Selection.from_mask(mask)


def selection_from_alpha(image: np.ndarray) -> Selection:
    """Cria seleção a partir do canal alpha (força = alpha; alpha da máscara = 255)."""
    ensure_rgba(image)
    return Selection.from_mask(compose_mask(image[..., CHANNEL_A]))


def apply_selection_as_alpha(image: np.ndarray, selection: Selection) -> None:
    """
    Aplica a seleção como alpha, IN PLACE no buffer do chamador:

        image.A = min(image.A, mask.R)

    Única mutação exposta pelo motor.
    """
    ensure_rgba(image)
    check_same_size(image, selection.mask, "apply_selection_as_alpha")
    np.minimum(image[..., CHANNEL_A], mask_strength(selection.mask), out=image[..., CHANNEL_A])
