"""
Testes unitários para utilitários de Pixel Buffer

Testa:
- Arredondamento half-up
- Cálculo de bounds
- Composição de máscaras
- Elemento estruturante circular
"""

import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from maskengine.utils.pixel_buffer import (
    buffer_size,
    compose_mask,
    compute_bounds,
    disk_kernel,
    empty_mask,
    in_bounds,
    luminance,
    round_half_up,
    to_strength,
)


class TestRounding:
    """Testes para arredondamento."""

    def test_ties_round_up(self):
        """Empates sobem (diferente do np.round, que usa par)."""
        values = np.array([0.5, 1.5, 2.5, 127.5])
        assert round_half_up(values).tolist() == [1.0, 2.0, 3.0, 128.0]

    def test_to_strength_clamps(self):
        """Valores fora de [0, 255] são saturados."""
        result = to_strength(np.array([-10.0, 12.4, 300.0]))
        assert result.dtype == np.uint8
        assert result.tolist() == [0, 12, 255]


class TestBounds:
    """Testes para compute_bounds."""

    def test_empty_mask_degenerate(self):
        assert compute_bounds(empty_mask(6, 4)) == (0, 0, 0, 0)

    def test_tight_rectangle(self):
        strength = np.zeros((10, 10), dtype=np.uint8)
        strength[2, 3] = 1
        strength[6, 8] = 200
        assert compute_bounds(compose_mask(strength)) == (3, 2, 6, 5)

    def test_only_red_channel_counts(self):
        """A força é lida apenas do canal R."""
        mask = empty_mask(5, 5)
        mask[2, 2, 1:] = 255
        assert compute_bounds(mask) == (0, 0, 0, 0)


class TestComposeMask:
    """Testes para compose_mask."""

    def test_replicates_rgb_with_opaque_alpha(self):
        strength = np.array([[0, 100], [200, 255]], dtype=np.uint8)
        mask = compose_mask(strength)
        assert mask.shape == (2, 2, 4)
        for channel in range(3):
            assert np.array_equal(mask[..., channel], strength)
        assert np.all(mask[..., 3] == 255)

    def test_alpha_none_copies_strength(self):
        strength = np.array([[0, 100]], dtype=np.uint8)
        mask = compose_mask(strength, alpha=None)
        assert np.array_equal(mask[..., 3], strength)


class TestHelpers:
    """Testes para helpers diversos."""

    def test_disk_kernel_radius_one_is_plus(self):
        kernel = disk_kernel(1)
        expected = np.array([[0, 1, 0], [1, 1, 1], [0, 1, 0]], dtype=np.uint8)
        assert np.array_equal(kernel, expected)

    def test_disk_kernel_fractional_radius(self):
        """radius 1.5 inclui as diagonais (1 + 1 <= 2.25)."""
        assert disk_kernel(1.5).sum() == 9

    def test_disk_kernel_zero_is_identity(self):
        assert np.array_equal(disk_kernel(0), np.ones((1, 1), dtype=np.uint8))

    def test_negative_radius_clamped(self):
        assert np.array_equal(disk_kernel(-3), disk_kernel(0))

    def test_buffer_size_and_in_bounds(self):
        buffer = empty_mask(7, 3)
        assert buffer_size(buffer) == (7, 3)
        assert in_bounds(buffer, 6, 2)
        assert not in_bounds(buffer, 7, 0)
        assert not in_bounds(buffer, -1, 0)

    def test_luminance_weights(self):
        image = np.zeros((1, 3, 4), dtype=np.uint8)
        image[0, 0, 0] = 100
        image[0, 1, 1] = 100
        image[0, 2, 2] = 100
        assert luminance(image)[0].tolist() == pytest.approx([29.9, 58.7, 11.4])
