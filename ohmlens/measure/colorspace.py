# Copyright (c) 2026 Ohmlens
# SPDX-License-Identifier: MIT

"""
Color space conversions.

Conversion chain: sRGB → Linear RGB → CIE XYZ (D65) → CIE Lab

Distances are CIE76 ΔE (Euclidean distance in Lab), on the 0-100 scale:
- ΔE ≈ 2: barely perceptible
- ΔE ≈ 10: clearly different shades
- ΔE ≈ 50+: unrelated colors

All conversions are pure NumPy; scalar helpers wrap the vectorized forms.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

from ohmlens.schema import LabColor, RGBColor


# =============================================================================
# sRGB → Linear RGB
# =============================================================================


def srgb_to_linear(srgb: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Convert sRGB values [0,1] to linear RGB.

    sRGB uses a piecewise gamma curve:
    - For values <= 0.04045: linear/12.92
    - For values > 0.04045: ((value + 0.055) / 1.055) ^ 2.4
    """
    srgb = np.asarray(srgb, dtype=np.float64)
    linear = np.where(
        srgb <= 0.04045,
        srgb / 12.92,
        np.power((srgb + 0.055) / 1.055, 2.4)
    )
    return linear


# =============================================================================
# Linear RGB → XYZ → Lab
# =============================================================================

# sRGB primaries, D65
_RGB_TO_XYZ = np.array([
    [0.4124564, 0.3575761, 0.1804375],
    [0.2126729, 0.7151522, 0.0721750],
    [0.0193339, 0.1191920, 0.9503041],
], dtype=np.float64)

# D65 reference white (2° observer), XYZ scaled to Y = 100
_WHITE_D65 = np.array([95.047, 100.0, 108.883], dtype=np.float64)

_LAB_EPSILON = 0.008856
_LAB_KAPPA_SLOPE = 7.787


def linear_rgb_to_xyz(rgb: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Convert linear RGB to CIE XYZ, scaled so that white has Y = 100.

    Args:
        rgb: Array of shape (..., 3) with linear RGB values

    Returns:
        Array of shape (..., 3) with XYZ values
    """
    rgb = np.asarray(rgb, dtype=np.float64)
    return np.einsum('...j,ij->...i', rgb, _RGB_TO_XYZ) * 100.0


def xyz_to_lab(xyz: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Convert CIE XYZ (D65, Y = 100 scale) to CIE Lab.

    Args:
        xyz: Array of shape (..., 3)

    Returns:
        Array of shape (..., 3) with (L, a, b)
    """
    t = np.asarray(xyz, dtype=np.float64) / _WHITE_D65
    f = np.where(
        t > _LAB_EPSILON,
        np.cbrt(t),
        _LAB_KAPPA_SLOPE * t + 16.0 / 116.0,
    )
    fx, fy, fz = f[..., 0], f[..., 1], f[..., 2]

    L = 116.0 * fy - 16.0
    a = 500.0 * (fx - fy)
    b = 200.0 * (fy - fz)

    return np.stack([L, a, b], axis=-1)


def srgb_uint8_to_lab(pixels: NDArray[np.uint8]) -> NDArray[np.float64]:
    """
    Convert 8-bit sRGB pixels [0,255] to CIE Lab.

    Full chain: sRGB → Linear RGB → XYZ → Lab

    Args:
        pixels: Array of shape (..., 3) with sRGB values [0, 255]

    Returns:
        Array of shape (..., 3) with Lab values
    """
    srgb = np.asarray(pixels, dtype=np.float64) / 255.0
    return xyz_to_lab(linear_rgb_to_xyz(srgb_to_linear(srgb)))


# =============================================================================
# Scalar helpers
# =============================================================================


def rgb_to_lab(r: int, g: int, b: int) -> LabColor:
    """Convert a single sRGB triple to a LabColor."""
    L, a, b_ = srgb_uint8_to_lab(np.array([r, g, b], dtype=np.float64))
    return LabColor(l=float(L), a=float(a), b=float(b_))


def chroma(lab: LabColor) -> float:
    """Perceptual saturation, sqrt(a² + b²)."""
    return math.hypot(lab.a, lab.b)


def hue_angle(lab: LabColor) -> float:
    """Perceptual hue atan2(b, a) in degrees, range (-180, 180]."""
    return lab.hue


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Format an sRGB triple as ``#RRGGBB``."""
    return f"#{int(r):02X}{int(g):02X}{int(b):02X}"


# =============================================================================
# ΔE Distance (Perceptual Color Difference)
# =============================================================================


def color_distance(c1: RGBColor, c2: RGBColor) -> float:
    """
    CIE76 ΔE between two sRGB colors.

    Symmetric; zero for identical colors.
    """
    lab = srgb_uint8_to_lab(np.array([c1.as_tuple(), c2.as_tuple()], dtype=np.float64))
    return float(np.sqrt(np.sum((lab[0] - lab[1]) ** 2)))


def lab_distance(lab1: LabColor, lab2: LabColor) -> float:
    """Euclidean distance between two LabColors."""
    return math.sqrt(
        (lab1.l - lab2.l) ** 2 + (lab1.a - lab2.a) ** 2 + (lab1.b - lab2.b) ** 2
    )


def delta_e_batch(
    lab1: NDArray[np.float64],
    lab2: NDArray[np.float64],
) -> NDArray[np.float64]:
    """
    Vectorized ΔE for arrays of Lab colors.

    Args:
        lab1: Array of shape (N, 3) with Lab values
        lab2: Array of shape (N, 3) with Lab values

    Returns:
        Array of shape (N,) with ΔE values
    """
    delta = np.asarray(lab1, dtype=np.float64) - np.asarray(lab2, dtype=np.float64)
    return np.sqrt(np.sum(delta ** 2, axis=-1))
