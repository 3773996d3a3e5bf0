# Copyright (c) 2026 Ohmlens
# SPDX-License-Identifier: MIT

"""
Reference color catalog.

Standard EIA band colors plus the resistor body shades they are confused
with. Each canonical color may own alias swatches (shadow, highlight and
metallic variants) that widen the matching net. Matching runs against every
swatch, but only canonical colors are ever returned.

The catalog is built once at import time and never mutated.
"""

from __future__ import annotations

from typing import Iterator, Optional

from ohmlens.schema import ColorRole, ReferenceColor, RGBColor, Swatch


def _digit(name, rgb, value, multiplier, tolerance=None, neutral=False, aliases=()):
    return ReferenceColor(
        name=name,
        rgb=RGBColor(*rgb),
        role=ColorRole.DIGIT,
        value=value,
        multiplier=multiplier,
        tolerance=tolerance,
        neutral=neutral,
        aliases=tuple(Swatch(n, RGBColor(*c)) for n, c in aliases),
    )


def _metallic(name, rgb, multiplier, tolerance, neutral=False, aliases=()):
    return ReferenceColor(
        name=name,
        rgb=RGBColor(*rgb),
        role=ColorRole.METALLIC,
        multiplier=multiplier,
        tolerance=tolerance,
        neutral=neutral,
        aliases=tuple(Swatch(n, RGBColor(*c)) for n, c in aliases),
    )


def _body(name, rgb):
    return ReferenceColor(
        name=f"{name} (Body)",
        rgb=RGBColor(*rgb),
        role=ColorRole.BODY,
        neutral=True,
    )


# =============================================================================
# Catalog
# =============================================================================

CATALOG: tuple[ReferenceColor, ...] = (
    _digit("Black", (0, 0, 0), 0, 1, neutral=True),
    _digit("Brown", (165, 42, 42), 1, 10, tolerance=1),
    _digit("Red", (255, 0, 0), 2, 100, tolerance=2),
    _digit("Orange", (255, 165, 0), 3, 1_000),
    _digit("Yellow", (255, 255, 0), 4, 10_000),
    _digit("Green", (0, 128, 0), 5, 100_000, tolerance=0.5),
    _digit("Blue", (0, 0, 255), 6, 1_000_000, tolerance=0.25),
    _digit(
        "Violet", (238, 130, 238), 7, 10_000_000, tolerance=0.1,
        aliases=[("Violet_Dark", (100, 50, 150))],  # shadowed violet
    ),
    _digit("Gray", (128, 128, 128), 8, 100_000_000, tolerance=0.05, neutral=True),
    _digit("White", (255, 255, 255), 9, 1_000_000_000, neutral=True),
    _metallic(
        "Gold", (255, 215, 0), 0.1, 5,
        aliases=[
            ("Gold_Light", (255, 220, 100)),     # blown-out highlight
            ("Gold_Metallic", (212, 175, 55)),
            ("Gold_Dark", (184, 134, 11)),       # shadowed side
            ("Gold_Ochre", (204, 119, 34)),
        ],
    ),
    _metallic("Silver", (192, 192, 192), 0.01, 10, neutral=True),
    _body("Beige", (245, 245, 220)),
    _body("Tan", (210, 180, 140)),
    _body("Sandy", (244, 164, 96)),
    _body("Cream", (255, 253, 208)),
    _body("Khaki", (195, 176, 145)),
    _body("Light Blue", (173, 216, 230)),
)

GOLD = "Gold"
SILVER = "Silver"

# Every name (canonical or alias) → canonical color
_BY_NAME: dict[str, ReferenceColor] = {}
for _color in CATALOG:
    for _swatch in _color.swatches:
        if _swatch.name in _BY_NAME:
            raise ValueError(f"Duplicate catalog name: {_swatch.name}")
        _BY_NAME[_swatch.name] = _color
del _color, _swatch

# Digit value → canonical color name
DIGIT_COLORS: dict[int, str] = {
    c.value: c.name for c in CATALOG if c.role is ColorRole.DIGIT
}

# Tolerance code (percent, as entered) → band name; None means "no band"
TOLERANCE_CODES: dict[str, Optional[str]] = {
    "1": "Brown",
    "2": "Red",
    "0.5": "Green",
    "0.25": "Blue",
    "0.1": "Violet",
    "5": "Gold",
    "10": "Silver",
    "20": None,
}


# =============================================================================
# Lookup
# =============================================================================


def lookup(name: str) -> Optional[ReferenceColor]:
    """
    Resolve a canonical or alias name to its canonical color.

    Returns None for names that are not in the catalog.
    """
    return _BY_NAME.get(name)


def get(name: str) -> ReferenceColor:
    """Like lookup(), but raises KeyError for unknown names."""
    color = _BY_NAME.get(name)
    if color is None:
        raise KeyError(f"Unknown reference color: {name}")
    return color


def canonical_name(name: str) -> str:
    """Map alias names ("Gold_Dark", "Violet_Dark") to their canonical name."""
    color = _BY_NAME.get(name)
    return color.name if color is not None else name


def is_body_name(name: str) -> bool:
    """
    True if the name denotes a resistor body color.

    Catalog body colors are recognized by role; learned names that were
    not in the catalog count as body when they carry a "(Body)" suffix.
    """
    color = _BY_NAME.get(name)
    if color is not None:
        return color.is_body
    return name.lower().endswith("(body)")


def is_metallic_name(name: str) -> bool:
    color = _BY_NAME.get(name)
    return color is not None and color.is_metallic


def swatches() -> Iterator[tuple[Swatch, ReferenceColor]]:
    """Yield (swatch, owning color) pairs in catalog order."""
    for color in CATALOG:
        for swatch in color.swatches:
            yield swatch, color
