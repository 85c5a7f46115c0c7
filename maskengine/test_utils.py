"""
SelectMask Pro - Test Utilities

Helpers para criação de dados de teste e utilitários de verificação.
Todos os dados são sintéticos (não usam imagens reais).
"""

from typing import Tuple

import numpy as np
from PIL import Image, ImageDraw

from maskengine.utils.image_io import pil_to_rgba
from maskengine.utils.pixel_buffer import compose_mask

Color = Tuple[int, int, int, int]


def make_uniform_image(width: int, height: int, color: Color = (255, 0, 0, 255)) -> np.ndarray:
    """
    Cria buffer RGBA8 de cor única.

    Args:
        width, height: Dimensões
        color: (r, g, b, a)

    Returns:
        Array (H, W, 4) uint8
    """
    image = np.empty((height, width, 4), dtype=np.uint8)
    image[...] = color
    return image


def make_framed_image(
    size: int = 5,
    inner: Color = (200, 200, 200, 255),
    frame: Color = (0, 0, 0, 255)
) -> np.ndarray:
    """Imagem quadrada com moldura de 1 px de cor diferente do interior."""
    image = make_uniform_image(size, size, frame)
    image[1:-1, 1:-1] = inner
    return image


def make_subject_image(
    size: Tuple[int, int] = (64, 64),
    background: Color = (128, 128, 128, 255),
    subject: Color = (230, 30, 30, 255),
    radius: int = 14
) -> np.ndarray:
    """
    Fundo cinza (sem saturação) com um disco saturado no centro.

    Simula um "assunto" para o Select Subject: saliência alta pelo centro,
    pela saturação e pela borda do disco.
    """
    width, height = size
    img = Image.new('RGBA', size, background)
    draw = ImageDraw.Draw(img)
    cx, cy = width // 2, height // 2
    draw.ellipse([(cx - radius, cy - radius), (cx + radius, cy + radius)], fill=subject)
    return pil_to_rgba(img)


def make_split_image(
    size: Tuple[int, int] = (20, 20),
    left: Color = (0, 0, 0, 255),
    right: Color = (255, 255, 255, 255)
) -> np.ndarray:
    """Metade esquerda de uma cor, metade direita de outra (borda vertical forte)."""
    width, height = size
    image = make_uniform_image(width, height, left)
    image[:, width // 2:] = right
    return image


def make_mask(strength: np.ndarray) -> np.ndarray:
    """Máscara RGBA8 a partir de força 2D (alpha opaco)."""
    return compose_mask(np.asarray(strength, dtype=np.uint8))


def make_square_mask(
    width: int,
    height: int,
    x: int,
    y: int,
    side: int,
    value: int = 255
) -> np.ndarray:
    """Máscara com um quadrado de força `value` em (x, y)."""
    strength = np.zeros((height, width), dtype=np.uint8)
    strength[y:y + side, x:x + side] = value
    return make_mask(strength)


def selected_count(mask: np.ndarray) -> int:
    """Número de pixels com força > 0."""
    return int((mask[..., 0] > 0).sum())
