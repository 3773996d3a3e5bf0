# Copyright (c) 2026 Ohmlens
# SPDX-License-Identifier: MIT

"""
Band schema: value types flowing through the band reading pipeline.

Design principles:
- Immutable: All types are frozen dataclasses
- Deterministic: Same pixels → same bands
- Serializable: ``to_dict`` produces the JSON shapes used on the wire

Lab Color Space (CIE 1976, D65 white):
- l (Lightness): 0 = black, 100 = white
- a: green (-) ↔ red (+)
- b: blue (-) ↔ yellow (+)
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


# =============================================================================
# Core Color Types
# =============================================================================


@dataclass(frozen=True, slots=True)
class RGBColor:
    """
    An 8-bit sRGB triple.

    Attributes:
        r, g, b: Channel values, integers in [0, 255]
    """
    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        """Validate channel values are within 0-255."""
        for channel, value in (("r", self.r), ("g", self.g), ("b", self.b)):
            if not 0 <= value <= 255:
                raise ValueError(f"Channel {channel} must be 0-255, got {value}")

    @property
    def hex(self) -> str:
        """Hex color string like ``#D4AF37``."""
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {"r": self.r, "g": self.g, "b": self.b}

    @classmethod
    def from_dict(cls, data: dict) -> RGBColor:
        """Deserialize from dictionary, coercing numeric channels to int."""
        return cls(r=int(data["r"]), g=int(data["g"]), b=int(data["b"]))


@dataclass(frozen=True, slots=True)
class LabColor:
    """
    A color in CIE Lab space.

    Always derived from an RGBColor, never persisted on its own.
    """
    l: float
    a: float
    b: float

    @property
    def chroma(self) -> float:
        """Perceptual saturation: sqrt(a² + b²)."""
        return math.hypot(self.a, self.b)

    @property
    def hue(self) -> float:
        """Hue angle atan2(b, a) in degrees, range (-180, 180]."""
        angle = math.degrees(math.atan2(self.b, self.a))
        return 180.0 if angle == -180.0 else angle

    def to_dict(self) -> dict:
        return {"l": self.l, "a": self.a, "b": self.b}


# =============================================================================
# Reference Catalog Types
# =============================================================================


class ColorRole(Enum):
    """
    Role a reference color plays in a band sequence.

    Roles are disjoint; which one applies is implied by the populated fields.
    """
    DIGIT = "digit"        # Black…White: value (+ multiplier, tolerance)
    METALLIC = "metallic"  # Gold, Silver: fractional multiplier + tolerance
    BODY = "body"          # Resistor body shades: matched, then excluded
    CUSTOM = "custom"      # Learned name with no catalog counterpart


@dataclass(frozen=True, slots=True)
class Swatch:
    """A named RGB reference point used only for matching."""
    name: str
    rgb: RGBColor


@dataclass(frozen=True, slots=True)
class ReferenceColor:
    """
    A canonical named color with its decoding attributes.

    Attributes:
        name: Unique canonical name (e.g. "Gold", "Tan (Body)")
        rgb: Primary reference swatch color
        role: DIGIT, METALLIC, BODY or CUSTOM
        value: Digit value 0-9 (digit colors only)
        multiplier: Decimal multiplier (digit and metallic colors)
        tolerance: Tolerance percentage, when the color can be a tolerance band
        neutral: True for achromatic swatches (Black, Gray, White, Silver, bodies)
        aliases: Extra swatches that widen the matching net. Aliases are
            never surfaced as output; a match resolves to this color.
    """
    name: str
    rgb: RGBColor
    role: ColorRole
    value: Optional[int] = None
    multiplier: Optional[float] = None
    tolerance: Optional[float] = None
    neutral: bool = False
    aliases: tuple[Swatch, ...] = ()

    def __post_init__(self) -> None:
        if self.value is not None and not 0 <= self.value <= 9:
            raise ValueError(f"Digit value must be 0-9, got {self.value}")
        if self.multiplier is not None and self.multiplier < 0.01:
            raise ValueError(f"Multiplier must be >= 0.01, got {self.multiplier}")

    @property
    def swatches(self) -> tuple[Swatch, ...]:
        """Primary swatch followed by aliases, in matching order."""
        return (Swatch(self.name, self.rgb),) + self.aliases

    @property
    def is_body(self) -> bool:
        return self.role is ColorRole.BODY

    @property
    def is_metallic(self) -> bool:
        return self.role is ColorRole.METALLIC


@dataclass(frozen=True, slots=True)
class CustomColor:
    """
    A user-taught color correction.

    Stored externally as a flat ``{name, r, g, b}`` record and matched by
    exact RGB when a new correction is learned.
    """
    name: str
    rgb: RGBColor

    def to_dict(self) -> dict:
        return {"name": self.name, **self.rgb.to_dict()}

    @classmethod
    def from_dict(cls, data: dict) -> CustomColor:
        return cls(name=str(data["name"]), rgb=RGBColor.from_dict(data))


# =============================================================================
# Pipeline Types
# =============================================================================


@dataclass(frozen=True, slots=True)
class Segment:
    """
    A contiguous run of similar colors along the scan axis.

    ``end_x`` is inclusive. ``pixels`` holds the averaged line colors of the
    run as an ``(n, 3)`` array.
    """
    start_x: int
    end_x: int
    pixels: Any = field(compare=False, repr=False)

    @property
    def width(self) -> int:
        return self.end_x - self.start_x + 1


@dataclass(frozen=True, slots=True)
class Band:
    """
    A classified color band, the unit returned by segmentation.

    Attributes:
        x: Center coordinate along the scan axis
        color_name: Canonical color name
        rgb: Average color of the segment
        l: Lab lightness of the average color
        width: Segment width in pixels
        chroma: Lab chroma of the average color
    """
    x: int
    color_name: str
    rgb: RGBColor
    l: float
    width: int
    chroma: float

    def to_dict(self) -> dict:
        """Serialize to the wire shape ``{x, colorName, rgb, l, width, chroma}``."""
        return {
            "x": self.x,
            "colorName": self.color_name,
            "rgb": self.rgb.to_dict(),
            "l": self.l,
            "width": self.width,
            "chroma": self.chroma,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Band:
        return cls(
            x=int(data["x"]),
            color_name=data["colorName"],
            rgb=RGBColor.from_dict(data["rgb"]),
            l=float(data["l"]),
            width=int(data["width"]),
            chroma=float(data.get("chroma", 0.0)),
        )


@dataclass(frozen=True, slots=True)
class ColorCluster:
    """A median-cut bucket: average color, pixel count and mean x."""
    rgb: RGBColor
    count: int
    avg_x: int


@dataclass(frozen=True, slots=True)
class ExtractedColor:
    """
    A quantized cluster after classification and position refinement.

    Attributes:
        position: avg_x normalized by image width (0.0-1.0)
        is_at_edge: True when position < 0.2 or > 0.8
    """
    rgb: RGBColor
    name: str
    count: int
    avg_x: int
    position: float
    is_at_edge: bool

    def to_dict(self) -> dict:
        return {
            **self.rgb.to_dict(),
            "hex": self.rgb.hex,
            "name": self.name,
            "count": self.count,
            "avgX": self.avg_x,
            "position": self.position,
            "isAtEdge": self.is_at_edge,
        }


@dataclass(frozen=True, slots=True)
class BandReading:
    """
    Result of reading one resistor image.

    Attributes:
        bands: Surviving bands after body removal, ordered by x
        resistor_value: Decoded value string, a diagnostic string, or None
        orientation: Scan axis that was used ("horizontal" / "vertical")
    """
    bands: tuple[Band, ...]
    resistor_value: Optional[str]
    orientation: str = "horizontal"

    @property
    def detected_bands(self) -> tuple[str, ...]:
        return tuple(b.color_name for b in self.bands)

    def to_dict(self) -> dict:
        return {
            "orientation": self.orientation,
            "bands": [b.to_dict() for b in self.bands],
            "detected_bands": list(self.detected_bands),
            "resistor_value": self.resistor_value,
        }
