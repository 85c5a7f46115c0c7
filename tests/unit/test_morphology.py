"""
Testes unitários para Morfologia e Convolução

Testa:
- Dilatação / erosão com disco exato
- Fechamento morfológico
- Blur gaussiano separável
- Filtro de mediana
"""

import math
import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from maskengine.selection.morphology import (
    dilate,
    erode,
    gaussian_blur,
    gaussian_kernel,
    median_filter,
    morph_close,
)
from maskengine.test_utils import make_mask, make_square_mask, selected_count


def _point_mask(size: int, x: int, y: int) -> np.ndarray:
    strength = np.zeros((size, size), dtype=np.uint8)
    strength[y, x] = 255
    return make_mask(strength)


class TestMorphologicalOperations:
    """Testes para dilate / erode / close."""

    def test_dilate_radius_one_is_plus(self):
        """Disco de raio 1 não inclui diagonais."""
        dilated = dilate(_point_mask(7, 3, 3), 1)
        assert selected_count(dilated) == 5
        assert dilated[3, 4, 0] == 255
        assert dilated[4, 4, 0] == 0

    def test_dilate_fractional_radius(self):
        """Raio 1.5 cobre o quadrado 3x3."""
        assert selected_count(dilate(_point_mask(7, 3, 3), 1.5)) == 9

    def test_dilate_ignores_out_of_bounds(self):
        """Vizinhos fora da imagem são ignorados no canto."""
        dilated = dilate(_point_mask(5, 0, 0), 1)
        assert selected_count(dilated) == 3

    def test_dilate_zero_radius(self):
        """Raio 0 é identidade sobre a força."""
        mask = make_square_mask(20, 20, 5, 5, 4)
        assert np.array_equal(dilate(mask, 0), mask)

    def test_output_writes_rgb_and_opaque_alpha(self):
        strength = np.zeros((5, 5), dtype=np.uint8)
        strength[2, 2] = 90
        mask = make_mask(strength)
        mask[..., 3] = 0
        dilated = dilate(mask, 1)
        assert np.array_equal(dilated[..., 0], dilated[..., 1])
        assert np.array_equal(dilated[..., 0], dilated[..., 2])
        assert np.all(dilated[..., 3] == 255)

    def test_erode_shrinks_mask(self):
        mask = make_square_mask(30, 30, 10, 10, 10)
        eroded = erode(mask, 2)
        assert selected_count(eroded) < selected_count(mask)
        assert eroded[15, 15, 0] == 255

    def test_erode_full_canvas_stays_full(self):
        """Bordas da imagem não contam como 0 na erosão."""
        mask = make_square_mask(6, 6, 0, 0, 6)
        assert np.all(erode(mask, 2)[..., 0] == 255)

    def test_close_removes_holes(self):
        """Fechamento preenche pequenos buracos."""
        strength = np.full((50, 50), 255, dtype=np.uint8)
        strength[24:26, 24:26] = 0
        closed = morph_close(make_mask(strength), 3)
        assert closed[25, 25, 0] == 255

    def test_close_never_loses_pixels(self):
        """Todo pixel selecionado na entrada continua selecionado."""
        rng = np.random.RandomState(7)
        strength = (rng.rand(24, 24) > 0.7).astype(np.uint8) * 255
        mask = make_mask(strength)
        closed = morph_close(mask, 2)
        assert np.all(closed[..., 0] >= mask[..., 0])


class TestGaussianBlur:
    """Testes para blur gaussiano."""

    def test_kernel_normalized(self):
        kernel = gaussian_kernel(2.0)
        assert kernel.size == 2 * 6 + 1
        assert kernel.sum() == pytest.approx(1.0)
        assert kernel.argmax() == 6

    def test_small_radius_is_identity(self):
        """Raio < 0.5 retorna a máscara inalterada."""
        mask = make_square_mask(20, 20, 5, 5, 6)
        blurred = gaussian_blur(mask, 0.4)
        assert np.array_equal(blurred, mask)
        assert blurred is not mask

    def test_blur_softens_edges(self):
        mask = make_square_mask(50, 50, 20, 20, 10)
        blurred = gaussian_blur(mask, 2.0)
        edge_value = blurred[25, 20, 0]
        assert 0 < edge_value < 255
        assert blurred[25, 25, 0] > 200

    def test_uniform_mask_unchanged(self):
        """Amostragem clamp-to-edge preserva máscara uniforme."""
        mask = make_mask(np.full((12, 12), 128, dtype=np.uint8))
        blurred = gaussian_blur(mask, 3.0)
        assert np.all(blurred[..., 0] == 128)

    def test_radius_larger_than_image(self):
        mask = make_square_mask(5, 5, 2, 2, 1)
        blurred = gaussian_blur(mask, 4.0)
        assert blurred.shape == (5, 5, 4)
        assert np.all(blurred[..., 3] == 255)

    def test_blur_is_symmetric(self):
        blurred = gaussian_blur(_point_mask(21, 10, 10), 2.0)
        left = int(blurred[10, 8, 0])
        right = int(blurred[10, 12, 0])
        assert abs(left - right) <= 1


class TestMedianFilter:
    """Testes para filtro de mediana."""

    def test_removes_isolated_pixel(self):
        smoothed = median_filter(_point_mask(5, 2, 2), 1)
        assert selected_count(smoothed) == 0

    def test_zero_radius_is_identity(self):
        mask = make_square_mask(10, 10, 2, 2, 3)
        assert np.array_equal(median_filter(mask, 0), mask)

    def test_even_count_picks_upper_middle(self):
        """Com 4 amostras [0, 0, 255, 255] o índice floor(4/2) escolhe 255."""
        strength = np.array([[0, 0], [255, 255]], dtype=np.uint8)
        smoothed = median_filter(make_mask(strength), 1)
        assert np.all(smoothed[..., 0] == 255)

    def test_keeps_large_regions(self):
        mask = make_square_mask(30, 30, 5, 5, 20)
        smoothed = median_filter(mask, 2)
        assert smoothed[15, 15, 0] == 255
        assert smoothed[0, 0, 0] == 0


def _random_strength(height: int, width: int, seed: int = 7) -> np.ndarray:
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=(height, width), dtype=np.uint8)


def _direct_blur(strength: np.ndarray, radius: float) -> np.ndarray:
    """Convolução direta: horizontal, depois vertical, coordenadas presas à borda."""
    height, width = strength.shape
    r = math.ceil(radius * 3)
    weights = [math.exp(-(i * i) / (2 * radius * radius)) for i in range(-r, r + 1)]
    total = sum(weights)
    weights = [w / total for w in weights]

    temp = np.zeros((height, width))
    for y in range(height):
        for x in range(width):
            temp[y, x] = sum(
                float(strength[y, min(max(x + i, 0), width - 1)]) * weights[i + r]
                for i in range(-r, r + 1)
            )

    result = np.zeros((height, width), dtype=np.uint8)
    for y in range(height):
        for x in range(width):
            value = sum(
                temp[min(max(y + i, 0), height - 1), x] * weights[i + r]
                for i in range(-r, r + 1)
            )
            result[y, x] = min(max(math.floor(value + 0.5), 0), 255)
    return result


def _direct_neighborhood(strength: np.ndarray, radius: float, pick, disk: bool) -> np.ndarray:
    """Aplica `pick` às amostras dentro da imagem de cada vizinhança."""
    height, width = strength.shape
    r = math.ceil(radius)
    result = np.zeros((height, width), dtype=np.uint8)
    for y in range(height):
        for x in range(width):
            samples = [
                int(strength[y + dy, x + dx])
                for dy in range(-r, r + 1)
                for dx in range(-r, r + 1)
                if 0 <= y + dy < height and 0 <= x + dx < width
                and (not disk or dx * dx + dy * dy <= radius * radius)
            ]
            result[y, x] = pick(samples)
    return result


def _upper_median(samples):
    return sorted(samples)[len(samples) // 2]


class TestDirectFormulas:
    """Comparação exata com a definição pixel a pixel de cada filtro."""

    def test_gaussian_blur_matches_direct_convolution(self):
        strength = _random_strength(9, 11)
        for radius in (0.5, 1.0, 1.7, 3.3):
            blurred = gaussian_blur(make_mask(strength), radius)
            assert np.array_equal(blurred[..., 0], _direct_blur(strength, radius)), radius

    def test_median_matches_direct_sort(self):
        strength = _random_strength(8, 9, seed=11)
        for radius in (0.5, 1.0, 2.2):
            smoothed = median_filter(make_mask(strength), radius)
            expected = _direct_neighborhood(strength, radius, _upper_median, disk=False)
            assert np.array_equal(smoothed[..., 0], expected), radius

    def test_dilate_erode_match_direct_disk(self):
        strength = _random_strength(10, 8, seed=3)
        for radius in (0.7, 1.5, 2.3):
            grown = dilate(make_mask(strength), radius)
            shrunk = erode(make_mask(strength), radius)
            assert np.array_equal(grown[..., 0], _direct_neighborhood(strength, radius, max, disk=True)), radius
            assert np.array_equal(shrunk[..., 0], _direct_neighborhood(strength, radius, min, disk=True)), radius
