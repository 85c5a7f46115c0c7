"""
SelectMask Pro - Pixel Buffer Utilities
Funções comuns sobre buffers RGBA8 para evitar duplicação entre componentes.

Representação: numpy array (H, W, 4) uint8, canais R, G, B, A, origem no
canto superior esquerdo. Máscaras usam o mesmo formato; a força da seleção
é lida do canal R.
"""

from typing import Optional, Tuple, Union

import numpy as np

from config.settings import LUMA_WEIGHTS, MASK_FULL
from maskengine.constants import CHANNEL_A, CHANNEL_R
from maskengine.exceptions import ImageFormatError, SelectionSizeMismatchError


def ensure_rgba(buffer: np.ndarray, name: str = "image") -> np.ndarray:
    """
    Garante que o buffer esteja no formato RGBA8.

    Args:
        buffer: Array a validar
        name: Nome usado na mensagem de erro

    Returns:
        O próprio buffer (sem cópia)

    Raises:
        ImageFormatError se shape ou dtype forem inválidos
    """
    if not isinstance(buffer, np.ndarray):
        raise ImageFormatError(f"{name} deve ser numpy.ndarray, recebido {type(buffer).__name__}")

    if buffer.ndim != 3 or buffer.shape[2] != 4:
        raise ImageFormatError(
            f"{name} deve ter shape (H, W, 4), recebido {buffer.shape}",
            shape=buffer.shape
        )

    if buffer.dtype != np.uint8:
        raise ImageFormatError(
            f"{name} deve ser uint8, recebido {buffer.dtype}",
            shape=buffer.shape
        )

    return buffer


def buffer_size(buffer: np.ndarray) -> Tuple[int, int]:
    """Retorna (width, height) do buffer."""
    return int(buffer.shape[1]), int(buffer.shape[0])


def check_same_size(a: np.ndarray, b: np.ndarray, what: str = "buffers") -> None:
    """Levanta SelectionSizeMismatchError se os buffers diferirem em tamanho."""
    size_a = buffer_size(a)
    size_b = buffer_size(b)
    if size_a != size_b:
        raise SelectionSizeMismatchError(
            f"Tamanhos incompatíveis para {what}: {size_a} vs {size_b}",
            expected=size_a,
            actual=size_b
        )


def mask_strength(mask: np.ndarray) -> np.ndarray:
    """Canal de força (R) de uma máscara, como view 2D."""
    return mask[..., CHANNEL_R]


def compose_mask(
    strength: np.ndarray,
    alpha: Optional[Union[int, np.ndarray]] = MASK_FULL
) -> np.ndarray:
    """
    Monta máscara RGBA replicando a força em R, G e B.

    Args:
        strength: Array 2D (H, W), qualquer dtype numérico já em [0, 255]
        alpha: Valor escalar ou array 2D para o canal A. None replica a força
            também no alpha.

    Returns:
        Máscara (H, W, 4) uint8 recém-alocada
    """
    h, w = strength.shape[:2]
    out = np.empty((h, w, 4), dtype=np.uint8)
    s = strength.astype(np.uint8, copy=False)
    out[..., 0] = s
    out[..., 1] = s
    out[..., 2] = s
    out[..., CHANNEL_A] = s if alpha is None else alpha
    return out


def empty_mask(width: int, height: int) -> np.ndarray:
    """Máscara totalmente zerada (inclusive alpha)."""
    return np.zeros((max(0, height), max(0, width), 4), dtype=np.uint8)


def compute_bounds(mask: np.ndarray) -> Tuple[int, int, int, int]:
    """
    Retângulo mínimo (x, y, width, height) que contém todos os pixels com
    força > 0. Retorna (0, 0, 0, 0) se não houver nenhum.
    """
    selected = mask_strength(mask) > 0

    rows = np.flatnonzero(selected.any(axis=1))
    if rows.size == 0:
        return (0, 0, 0, 0)
    cols = np.flatnonzero(selected.any(axis=0))

    y0, y1 = int(rows[0]), int(rows[-1])
    x0, x1 = int(cols[0]), int(cols[-1])
    return (x0, y0, x1 - x0 + 1, y1 - y0 + 1)


def round_half_up(values: np.ndarray) -> np.ndarray:
    """
    Arredondamento com empate para cima (floor(v + 0.5)).

    np.round usa empate-para-par; os contratos numéricos do motor exigem
    empate-para-cima.
    """
    return np.floor(np.asarray(values, dtype=np.float64) + 0.5)


def to_strength(values: np.ndarray) -> np.ndarray:
    """Arredonda (half-up) e satura em [0, 255], retornando uint8."""
    return np.clip(round_half_up(values), 0, MASK_FULL).astype(np.uint8)


def luminance(image: np.ndarray) -> np.ndarray:
    """Luminância float64 (H, W): 0.299R + 0.587G + 0.114B."""
    wr, wg, wb = LUMA_WEIGHTS
    rgb = image[..., :3].astype(np.float64)
    return wr * rgb[..., 0] + wg * rgb[..., 1] + wb * rgb[..., 2]


def disk_kernel(radius: float) -> np.ndarray:
    """
    Elemento estruturante circular: (2r+1)x(2r+1) com r = ceil(radius),
    marcando os offsets com dx² + dy² <= radius².
    """
    radius = max(0.0, float(radius))
    r = int(np.ceil(radius))
    dy, dx = np.mgrid[-r:r + 1, -r:r + 1]
    return ((dx * dx + dy * dy) <= radius * radius).astype(np.uint8)


def in_bounds(buffer: np.ndarray, x: int, y: int) -> bool:
    """True se (x, y) estiver dentro do buffer."""
    width, height = buffer_size(buffer)
    return 0 <= x < width and 0 <= y < height
