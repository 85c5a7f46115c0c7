"""
SelectMask Pro - Edge Detector

Mapa de bordas normalizado a partir da luminância (Sobel 3x3):

    L = 0.299R + 0.587G + 0.114B
    |∇L| = sqrt(gx² + gy²)
    E = |∇L| / max(|∇L|)

A borda de 1 pixel da imagem recebe magnitude 0. Se o máximo for 0 (imagem
sem gradiente), todo o mapa permanece 0.
"""

from typing import Optional

import cv2
import numpy as np

from maskengine.exceptions import SelectionSizeMismatchError
from maskengine.logging.setup import get_logger
from maskengine.utils.pixel_buffer import buffer_size, ensure_rgba, luminance

logger = get_logger("EdgeDetector")


def compute_edge_map(image: np.ndarray) -> np.ndarray:
    """
    Calcula o mapa de bordas de uma imagem RGBA.

    Args:
        image: Buffer RGBA8 (H, W, 4)

    Returns:
        Array float64 (H, W) com valores em [0, 1]
    """
    ensure_rgba(image)
    height, width = image.shape[:2]
    edges = np.zeros((height, width), dtype=np.float64)

    # Sem interior: nenhum pixel tem vizinhança 3x3 completa
    if width < 3 or height < 3:
        return edges

    gray = luminance(image)

    # cv2.Sobel (ksize=3) aplica exatamente [-1,0,1;-2,0,2;-1,0,1] e a transposta.
    # A extrapolação de borda do OpenCV só afeta a moldura, que é zerada abaixo.
    gx = cv2.Sobel(gray, cv2.CV_64F, 1, 0, ksize=3)
    gy = cv2.Sobel(gray, cv2.CV_64F, 0, 1, ksize=3)

    edges[1:-1, 1:-1] = np.sqrt(gx[1:-1, 1:-1] ** 2 + gy[1:-1, 1:-1] ** 2)

    max_edge = float(edges.max())
    if max_edge > 0:
        edges /= max_edge

    logger.debug(f"Edge map {width}x{height} (max bruto={max_edge:.2f})")
    return edges


def resolve_edge_map(image: np.ndarray, edge_map: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Usa o edge map pré-calculado pelo chamador ou calcula um novo.

    Raises:
        SelectionSizeMismatchError se o edge map não tiver o tamanho da imagem
    """
    if edge_map is None:
        return compute_edge_map(image)
    if edge_map.shape != image.shape[:2]:
        expected = buffer_size(image)
        actual = (int(edge_map.shape[1]), int(edge_map.shape[0])) if edge_map.ndim == 2 else tuple(edge_map.shape)
        raise SelectionSizeMismatchError(
            f"edge_map com shape {edge_map.shape} não corresponde à imagem {image.shape[:2]}",
            expected=expected,
            actual=actual
        )
    return edge_map
