# Copyright (c) 2026 Ohmlens
# SPDX-License-Identifier: MIT

"""
Resistance value → canonical band sequence.

Used by "teach from value" flows: the user enters the true value and the
canonical sequence is reported next to what was detected.
"""

from __future__ import annotations

import math
from typing import Optional, Union

from ohmlens.measure.catalog import DIGIT_COLORS, GOLD, SILVER, TOLERANCE_CODES


# Fractional multipliers; positive exponents map onto the digit colors
_FRACTIONAL_MULTIPLIERS = {-1: GOLD, -2: SILVER}


def normalize_tolerance_code(code: Union[str, float, int, None]) -> Optional[str]:
    """
    Normalize a tolerance code to its table key.

    Numbers and numeric strings are rendered without trailing zeros, so
    5, 5.0 and "5.0" all become "5". Non-numeric codes pass through.
    """
    if code is None:
        return None
    if isinstance(code, (int, float)):
        return f"{code:g}"
    text = str(code).strip().rstrip("%")
    try:
        return f"{float(text):g}"
    except ValueError:
        return text


def multiplier_color(exponent: int) -> Optional[str]:
    """Band color for a power-of-ten multiplier, or None outside [-2, 9]."""
    if exponent in _FRACTIONAL_MULTIPLIERS:
        return _FRACTIONAL_MULTIPLIERS[exponent]
    return DIGIT_COLORS.get(exponent)


def resistance_to_colors(
    ohms: float,
    tolerance_code: Union[str, float, int, None] = None,
) -> tuple[str, ...]:
    """
    Derive the canonical 3- or 4-band sequence for a resistance.

    The value is rounded to two significant digits. A tolerance band is
    appended when the code maps to a color ("20" maps to no band).

    Args:
        ohms: Resistance in ohms (>= 0.1)
        tolerance_code: Tolerance percent as entered, e.g. "5" or 0.25

    Returns:
        Band names, or an empty tuple when the value cannot be encoded

    Example:
        >>> resistance_to_colors(1000, "5")
        ('Brown', 'Black', 'Red', 'Gold')
    """
    if not ohms >= 0.1 or math.isinf(ohms):
        return ()

    exponent = math.floor(math.log10(ohms))
    first_two = math.floor(ohms / 10 ** (exponent - 1) + 0.5)
    if first_two == 100:
        # 99.5 and up carries into the next decade
        first_two = 10

    first_digit, second_digit = divmod(first_two, 10)
    multiplier_exponent = round(math.log10(ohms / first_two))

    first = DIGIT_COLORS.get(first_digit)
    second = DIGIT_COLORS.get(second_digit)
    multiplier = multiplier_color(multiplier_exponent)
    if first is None or second is None or multiplier is None:
        return ()

    sequence = [first, second, multiplier]

    key = normalize_tolerance_code(tolerance_code)
    if key is not None:
        band = TOLERANCE_CODES.get(key)
        if band is not None:
            sequence.append(band)

    return tuple(sequence)


def parse_resistance(text: Union[str, float, int, None]) -> Optional[float]:
    """
    Parse a human-entered resistance like "4.7k", "220" or "1M".

    Returns:
        Ohms, or None when the text is not a number
    """
    if text is None:
        return None
    value = str(text).strip().upper()
    if not value:
        return None

    scale = 1
    if value.endswith("K"):
        scale, value = 1_000, value[:-1]
    elif value.endswith("M"):
        scale, value = 1_000_000, value[:-1]

    try:
        number = float(value)
    except ValueError:
        return None
    if math.isnan(number):
        return None
    return number * scale
