# Copyright (c) 2026 Ohmlens
# SPDX-License-Identifier: MIT

"""
Schema definitions for band reading.

All types in this module are immutable (frozen dataclasses).
"""

from ohmlens.schema.bands import (
    Band,
    BandReading,
    ColorCluster,
    ColorRole,
    CustomColor,
    ExtractedColor,
    LabColor,
    ReferenceColor,
    RGBColor,
    Segment,
    Swatch,
)

__all__ = [
    # Core color types
    "RGBColor",
    "LabColor",
    # Reference catalog
    "ColorRole",
    "Swatch",
    "ReferenceColor",
    "CustomColor",
    # Pipeline types
    "Segment",
    "Band",
    "ColorCluster",
    "ExtractedColor",
    "BandReading",
]
