"""
SelectMask Pro - Entrada/Saída de Imagens

Conversão entre arquivos/PIL e o buffer RGBA8 do motor. Usado apenas pela
CLI; o motor em si nunca toca o disco.
"""

from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

from maskengine.exceptions import ImageLoadError
from maskengine.logging.setup import get_logger
from maskengine.utils.pixel_buffer import ensure_rgba, mask_strength

logger = get_logger("ImageIO")


def pil_to_rgba(image: Image.Image) -> np.ndarray:
    """
    Converte imagem PIL para buffer RGBA8.

    Modos L, P, LA e RGB são convertidos para RGBA; pixels sem alpha
    tornam-se opacos.
    """
    if image.mode != 'RGBA':
        image = image.convert('RGBA')
    return np.array(image, dtype=np.uint8)


def load_rgba(path: Union[str, Path]) -> np.ndarray:
    """
    Carrega imagem do disco como buffer RGBA8.

    Raises:
        ImageLoadError se o arquivo não existir ou não puder ser decodificado
    """
    path = Path(path)
    if not path.exists():
        raise ImageLoadError(f"Arquivo não encontrado: {path}", path=str(path))

    try:
        with Image.open(path) as image:
            buffer = pil_to_rgba(image)
    except OSError as e:
        raise ImageLoadError(f"Falha ao decodificar {path}: {e}", path=str(path)) from e

    logger.debug(f"Carregado {path} ({buffer.shape[1]}x{buffer.shape[0]})")
    return buffer


def load_mask(path: Union[str, Path]) -> np.ndarray:
    """
    Carrega máscara em escala de cinza como buffer RGBA8 (força em R, G, B;
    alpha opaco).
    """
    path = Path(path)
    if not path.exists():
        raise ImageLoadError(f"Arquivo não encontrado: {path}", path=str(path))

    try:
        with Image.open(path) as image:
            gray = np.array(image.convert('L'), dtype=np.uint8)
    except OSError as e:
        raise ImageLoadError(f"Falha ao decodificar {path}: {e}", path=str(path)) from e

    mask = np.empty(gray.shape + (4,), dtype=np.uint8)
    mask[..., :3] = gray[..., None]
    mask[..., 3] = 255
    return mask


def save_mask(mask: np.ndarray, path: Union[str, Path]) -> Path:
    """
    Salva a força da máscara como PNG 8-bit em escala de cinza.

    Returns:
        Caminho efetivamente escrito
    """
    ensure_rgba(mask, "mask")
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    Image.fromarray(np.ascontiguousarray(mask_strength(mask))).save(path)
    logger.debug(f"Máscara salva em {path}")
    return path
