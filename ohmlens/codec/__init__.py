# Copyright (c) 2026 Ohmlens
# SPDX-License-Identifier: MIT

"""
Band sequence ↔ resistance value.

Decoding reports insufficient data as a value, never as an exception.
"""

from ohmlens.codec.decode import calculate_resistor_value
from ohmlens.codec.encode import parse_resistance, resistance_to_colors
from ohmlens.codec.body import (
    find_dominant_color,
    remove_body_names,
    remove_dominant_color,
)

__all__ = [
    "calculate_resistor_value",
    "resistance_to_colors",
    "parse_resistance",
    "find_dominant_color",
    "remove_dominant_color",
    "remove_body_names",
]
