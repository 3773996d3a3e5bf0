# Copyright (c) 2026 Ohmlens
# SPDX-License-Identifier: MIT

"""Tests for color space conversions (sRGB → XYZ → CIE Lab) and ΔE."""

import numpy as np
import pytest

from ohmlens.schema import LabColor, RGBColor
from ohmlens.measure.colorspace import (
    chroma,
    color_distance,
    delta_e_batch,
    hue_angle,
    lab_distance,
    rgb_to_hex,
    rgb_to_lab,
    srgb_to_linear,
    srgb_uint8_to_lab,
)


class TestSRGBLinear:
    """sRGB gamma decoding."""

    def test_gamma_threshold(self):
        """Values below 0.04045 use linear segment."""
        val = 0.03
        linear = srgb_to_linear(np.array([val]))
        assert float(linear[0]) == pytest.approx(val / 12.92, abs=1e-10)

    def test_power_segment(self):
        val = 0.5
        linear = srgb_to_linear(np.array([val]))
        assert float(linear[0]) == pytest.approx(((val + 0.055) / 1.055) ** 2.4)

    def test_endpoints(self):
        np.testing.assert_allclose(srgb_to_linear(np.array([0.0, 1.0])), [0.0, 1.0], atol=1e-12)


class TestLab:
    """Known Lab values for reference colors."""

    def test_white(self):
        lab = rgb_to_lab(255, 255, 255)
        assert lab.l == pytest.approx(100.0, abs=0.01)
        assert lab.a == pytest.approx(0.0, abs=0.01)
        assert lab.b == pytest.approx(0.0, abs=0.01)

    def test_black(self):
        lab = rgb_to_lab(0, 0, 0)
        assert lab.l == pytest.approx(0.0, abs=1e-9)
        assert lab.a == pytest.approx(0.0, abs=1e-9)
        assert lab.b == pytest.approx(0.0, abs=1e-9)

    def test_mid_gray_is_achromatic(self):
        lab = rgb_to_lab(128, 128, 128)
        assert lab.l == pytest.approx(53.59, abs=0.05)
        assert chroma(lab) < 0.01

    def test_red(self):
        lab = rgb_to_lab(255, 0, 0)
        assert lab.l == pytest.approx(53.24, abs=0.05)
        assert lab.a == pytest.approx(80.09, abs=0.05)
        assert lab.b == pytest.approx(67.20, abs=0.05)

    def test_metallic_gold_is_saturated_yellow(self):
        lab = rgb_to_lab(212, 175, 55)
        assert chroma(lab) > 30
        assert 60 < hue_angle(lab) < 100

    def test_batch_matches_scalar(self):
        pixels = np.random.RandomState(7).randint(0, 256, (50, 3))
        batch = srgb_uint8_to_lab(pixels)
        for (r, g, b), row in zip(pixels, batch):
            lab = rgb_to_lab(int(r), int(g), int(b))
            np.testing.assert_allclose(row, [lab.l, lab.a, lab.b], atol=1e-9)


class TestHue:

    def test_range(self):
        for r, g, b in np.random.RandomState(3).randint(0, 256, (200, 3)):
            h = hue_angle(rgb_to_lab(int(r), int(g), int(b)))
            assert -180.0 < h <= 180.0

    def test_negative_a_axis_is_180(self):
        assert LabColor(50.0, -10.0, 0.0).hue == 180.0
        assert LabColor(50.0, -10.0, -0.0).hue == 180.0

    def test_quadrant(self):
        assert LabColor(50.0, 0.0, 10.0).hue == pytest.approx(90.0)
        assert LabColor(50.0, 0.0, -10.0).hue == pytest.approx(-90.0)

    def test_chroma(self):
        assert chroma(LabColor(50.0, 3.0, 4.0)) == pytest.approx(5.0)


class TestHex:

    def test_format(self):
        assert rgb_to_hex(212, 175, 55) == "#D4AF37"
        assert rgb_to_hex(0, 0, 0) == "#000000"

    def test_matches_rgbcolor(self):
        assert rgb_to_hex(1, 2, 255) == RGBColor(1, 2, 255).hex


class TestDeltaE:

    def test_self_distance_zero(self):
        for r, g, b in np.random.RandomState(11).randint(0, 256, (50, 3)):
            c = RGBColor(int(r), int(g), int(b))
            assert color_distance(c, c) == pytest.approx(0.0, abs=1e-12)

    def test_symmetry(self):
        pairs = np.random.RandomState(5).randint(0, 256, (100, 2, 3))
        for p1, p2 in pairs:
            c1 = RGBColor(*(int(v) for v in p1))
            c2 = RGBColor(*(int(v) for v in p2))
            assert color_distance(c1, c2) == pytest.approx(color_distance(c2, c1), abs=1e-12)

    def test_black_white(self):
        d = color_distance(RGBColor(0, 0, 0), RGBColor(255, 255, 255))
        assert d == pytest.approx(100.0, abs=0.01)

    def test_lab_distance(self):
        assert lab_distance(LabColor(0, 0, 0), LabColor(3, 4, 0)) == pytest.approx(5.0)

    def test_batch_matches_scalar(self):
        rng = np.random.RandomState(9)
        lab1 = rng.uniform(-50, 100, (20, 3))
        lab2 = rng.uniform(-50, 100, (20, 3))
        batch = delta_e_batch(lab1, lab2)
        for i in range(20):
            expected = lab_distance(LabColor(*lab1[i]), LabColor(*lab2[i]))
            assert batch[i] == pytest.approx(expected)
