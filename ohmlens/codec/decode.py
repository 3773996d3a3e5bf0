# Copyright (c) 2026 Ohmlens
# SPDX-License-Identifier: MIT

"""
Band sequence → resistance value.

Layouts:
- 3 bands: digit, digit, multiplier (tolerance ±20%, unmarked)
- 4+ bands ending in a tolerance color: digits…, multiplier, tolerance
- 4+ bands otherwise: digits…, multiplier (±20%)

Insufficient data is reported as a descriptive string, not an exception,
so callers can return it alongside whatever bands were detected.
"""

from __future__ import annotations

from typing import Iterable, Optional

from ohmlens.schema import ReferenceColor
from ohmlens.measure import catalog


NOT_ENOUGH_BANDS = "Not enough valid bands"
INVALID_SEQUENCE = "Invalid band sequence"

DEFAULT_TOLERANCE = 20.0


def _format_number(value: float, decimals: int) -> str:
    text = f"{value:.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_resistance(ohms: float) -> str:
    """
    Format ohms with a metric suffix.

    ``MΩ`` from 1e6 and ``kΩ`` from 1e3 use one decimal; plain ``Ω`` keeps
    up to two decimals so sub-ohm values (0.22Ω) survive. Trailing zeros
    are trimmed.
    """
    if ohms >= 1_000_000:
        return _format_number(ohms / 1_000_000, 1) + "MΩ"
    if ohms >= 1_000:
        return _format_number(ohms / 1_000, 1) + "kΩ"
    return _format_number(ohms, 2) + "Ω"


def format_tolerance(tolerance: float) -> str:
    return f"±{tolerance:g}%"


def resolve_bands(names: Iterable[str]) -> list[ReferenceColor]:
    """Resolve names to catalog colors, dropping names that are unknown."""
    resolved = []
    for name in names:
        color = catalog.lookup(name)
        if color is not None:
            resolved.append(color)
    return resolved


def calculate_resistor_value(names: Iterable[str]) -> Optional[str]:
    """
    Decode an ordered band sequence into a formatted resistance.

    The last band is read as a tolerance band only when the sequence has
    at least 4 bands and that band carries a tolerance. In a 3-band code
    the last band is always the multiplier at ±20%, so
    ``["Yellow", "Violet", "Gold"]`` reads as 4.7Ω, not 40MΩ ±5%. This
    keeps every sequence from ``resistance_to_colors`` decodable back to
    its value.

    Args:
        names: Band names in reading order (body already removed)

    Returns:
        ``"4.7kΩ ±5%"``-style string; ``NOT_ENOUGH_BANDS`` or
        ``INVALID_SEQUENCE`` when the sequence cannot be decoded;
        None when fewer than 3 names were given.

    Example:
        >>> calculate_resistor_value(["Brown", "Black", "Red", "Gold"])
        '1kΩ ±5%'
    """
    names = list(names)
    if len(names) < 3:
        return None

    colors = resolve_bands(names)
    if len(colors) < 3:
        return NOT_ENOUGH_BANDS

    tolerance = DEFAULT_TOLERANCE
    last = colors[-1]

    # A 3-band code has no tolerance band: treating its last band as one
    # would leave a single digit, which no standard layout has.
    if len(colors) >= 4 and last.tolerance is not None:
        tolerance = last.tolerance
        multiplier = colors[-2]
        digits = colors[:-2]
    else:
        multiplier = last
        digits = colors[:-1]

    if (not digits
            or any(d.value is None for d in digits)
            or multiplier.multiplier is None):
        return INVALID_SEQUENCE

    digit_value = int("".join(str(d.value) for d in digits))
    ohms = digit_value * multiplier.multiplier

    return f"{format_resistance(ohms)} {format_tolerance(tolerance)}"
