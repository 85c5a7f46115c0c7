"""
SelectMask Pro - Morfologia e Convolução

Primitivas usadas por todos os componentes de nível superior:
- dilate / erode com elemento estruturante circular exato
- morph_close (dilate + erode)
- gaussian_blur separável (horizontal depois vertical, clamp-to-edge)
- median_filter com vizinhança quadrada (apenas amostras dentro da imagem)

Todas leem a força (canal R) e escrevem o resultado em R, G e B com
alpha = 255: estas operações atuam sobre força, não sobre transparência.
"""

import cv2
import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from config.settings import GAUSSIAN_MIN_RADIUS, GAUSSIAN_SUPPORT_FACTOR, MASK_FULL
from maskengine.utils.pixel_buffer import (
    compose_mask,
    disk_kernel,
    ensure_rgba,
    mask_strength,
    to_strength,
)

# Linhas processadas por bloco no median (limita memória das janelas)
_MEDIAN_ROW_BLOCK = 128
# Sentinela maior que qualquer força; ordena para o fim da janela
_MEDIAN_OUT_OF_BOUNDS = MASK_FULL + 1


def _strength_u8(mask: np.ndarray) -> np.ndarray:
    ensure_rgba(mask, "mask")
    return np.ascontiguousarray(mask_strength(mask))


# =========================================================================
# Operações Morfológicas
# =========================================================================

def dilate(mask: np.ndarray, radius: float) -> np.ndarray:
    """
    Dilatação: cada pixel recebe o máximo da vizinhança circular
    dx² + dy² <= radius².

    Vizinhos fora da imagem são ignorados (não contam como 0). Raio <= 0
    é identidade sobre a força.
    """
    strength = _strength_u8(mask)
    if strength.size == 0:
        return compose_mask(strength)

    # O valor de borda padrão do OpenCV em dilate/erode não participa do
    # máximo/mínimo, equivalente a pular vizinhos fora da imagem.
    result = cv2.dilate(strength, disk_kernel(radius))
    return compose_mask(result)


def erode(mask: np.ndarray, radius: float) -> np.ndarray:
    """Erosão: mínimo da mesma vizinhança circular usada em dilate."""
    strength = _strength_u8(mask)
    if strength.size == 0:
        return compose_mask(strength)

    result = cv2.erode(strength, disk_kernel(radius))
    return compose_mask(result)


def morph_close(mask: np.ndarray, radius: float) -> np.ndarray:
    """
    Fechamento morfológico (dilate + erode).

    Remove pequenos buracos e fecha frestas sem crescer a forma.
    """
    return erode(dilate(mask, radius), radius)


# =========================================================================
# Convolução
# =========================================================================

def gaussian_kernel(radius: float) -> np.ndarray:
    """
    Kernel gaussiano 1D normalizado.

    Suporte ceil(radius * 3) para cada lado, sigma = radius.
    """
    r = int(np.ceil(radius * GAUSSIAN_SUPPORT_FACTOR))
    sigma = float(radius)
    offsets = np.arange(-r, r + 1, dtype=np.float64)
    kernel = np.exp(-(offsets * offsets) / (2 * sigma * sigma))
    total = kernel.sum()
    if total <= 0:
        # Não ocorre para radius >= 0.5
        kernel = np.zeros_like(kernel)
        kernel[r] = 1.0
        return kernel
    return kernel / total


def gaussian_blur(mask: np.ndarray, radius: float) -> np.ndarray:
    """
    Blur gaussiano separável sobre a força.

    Se radius < 0.5 retorna a máscara inalterada (cópia). Caso contrário,
    passe horizontal e depois vertical com amostragem clamp-to-edge,
    arredondando o resultado com empate para cima.
    """
    ensure_rgba(mask, "mask")
    if radius < GAUSSIAN_MIN_RADIUS:
        return np.array(mask, copy=True)

    strength = mask_strength(mask).astype(np.float64)
    if strength.size == 0:
        return compose_mask(strength)

    kernel = gaussian_kernel(radius)
    r = kernel.size // 2

    # Pré-padding com replicação de borda: todas as amostras do kernel caem
    # dentro do array, inclusive quando o suporte excede a imagem.
    padded = np.pad(strength, r, mode='edge')
    blurred = cv2.sepFilter2D(
        padded, cv2.CV_64F, kernel, kernel,
        borderType=cv2.BORDER_REPLICATE
    )[r:-r, r:-r]

    return compose_mask(to_strength(blurred))


def median_filter(mask: np.ndarray, radius: float) -> np.ndarray:
    """
    Filtro de mediana com janela quadrada (2*ceil(radius)+1)².

    Considera apenas amostras dentro da imagem; com contagem par, usa a
    mediana superior (índice floor(count/2) da lista ordenada).
    """
    strength = _strength_u8(mask)
    r = int(np.ceil(max(0.0, float(radius))))
    if r == 0 or strength.size == 0:
        return compose_mask(strength)

    height, width = strength.shape
    padded = np.pad(
        strength.astype(np.uint16), r,
        mode='constant', constant_values=_MEDIAN_OUT_OF_BOUNDS
    )

    ys = np.arange(height)
    xs = np.arange(width)
    row_counts = np.minimum(ys + r, height - 1) - np.maximum(ys - r, 0) + 1
    col_counts = np.minimum(xs + r, width - 1) - np.maximum(xs - r, 0) + 1
    median_index = (row_counts[:, None] * col_counts[None, :]) // 2

    size = 2 * r + 1
    result = np.empty((height, width), dtype=np.uint8)
    for y0 in range(0, height, _MEDIAN_ROW_BLOCK):
        y1 = min(y0 + _MEDIAN_ROW_BLOCK, height)
        windows = sliding_window_view(padded[y0:y1 + 2 * r], (size, size))
        ordered = np.sort(windows.reshape(y1 - y0, width, size * size), axis=-1)
        picked = np.take_along_axis(ordered, median_index[y0:y1, :, None], axis=-1)
        result[y0:y1] = picked[..., 0]

    return compose_mask(result)
