# Copyright (c) 2026 Ohmlens
# SPDX-License-Identifier: MIT

"""
Pixel-side pipeline for Ohmlens.

Turns a cropped resistor image into an ordered sequence of named bands.
All operations are deterministic and pixel-based.
"""

from ohmlens.measure.extract import load_pixels, read_bands, scan_slices

__all__ = ["read_bands", "scan_slices", "load_pixels"]
