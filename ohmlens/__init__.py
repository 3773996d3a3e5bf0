# Copyright (c) 2026 Ohmlens
# SPDX-License-Identifier: MIT

"""
Ohmlens -- Resistor color band reader.

Classifies the bands of a photographed through-hole resistor and decodes
them into a resistance value, or encodes a value into its band colors.

Quick start::

    from ohmlens import read_bands, resistance_to_colors

    reading = read_bands("resistor.png")
    reading.detected_bands     # ('Brown', 'Black', 'Red', 'Gold')
    reading.resistor_value     # '1kΩ ±5%'

    resistance_to_colors(4700, "5")  # ('Yellow', 'Violet', 'Red', 'Gold')
"""

from __future__ import annotations

__version__ = "1.0.0"

# measure must load before codec: codec modules import the catalog
from ohmlens.measure import read_bands
from ohmlens.measure.classify import find_closest_color
from ohmlens.measure.segments import Orientation, extract_bands
from ohmlens.codec import calculate_resistor_value, resistance_to_colors
from ohmlens.schema import (
    Band,
    BandReading,
    CustomColor,
    ReferenceColor,
    RGBColor,
)

__all__ = [
    # Core API
    "read_bands",
    "extract_bands",
    "find_closest_color",
    "calculate_resistor_value",
    "resistance_to_colors",
    "Orientation",
    # Types (commonly needed)
    "Band",
    "BandReading",
    "RGBColor",
    "ReferenceColor",
    "CustomColor",
    # Version
    "__version__",
]
