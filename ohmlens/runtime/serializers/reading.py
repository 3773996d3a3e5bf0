# Copyright (c) 2026 Ohmlens
# SPDX-License-Identifier: MIT

"""
Serializer for band readings.

Formats a BandReading as wire JSON (the detect-edges response body) or as
a one-line human summary.
"""

from __future__ import annotations

from ohmlens.runtime.serializers.base import SerializerFormat, dump_json
from ohmlens.schema import BandReading


def to_reading_output(
    reading: BandReading,
    *,
    format: SerializerFormat = SerializerFormat.JSON,
    precision: int | None = None,
) -> str:
    """Serialize a BandReading.

    Args:
        reading: The reading to serialize.
        format: JSON, JSON_PRETTY or NATURAL.
        precision: Round ``l`` and ``chroma`` to this many decimals.
            None keeps full precision.

    Returns:
        Serialized string.

    Example (NATURAL)::

        Brown, Black, Red, Gold → 1kΩ ±5% (horizontal scan)
    """
    if format == SerializerFormat.NATURAL:
        return _to_natural(reading)

    data = {"success": True, **reading.to_dict()}
    if precision is not None:
        for band in data["bands"]:
            band["l"] = round(band["l"], precision)
            band["chroma"] = round(band["chroma"], precision)

    return dump_json(data, format)


def _to_natural(reading: BandReading) -> str:
    if not reading.bands:
        return f"No bands detected ({reading.orientation} scan)"
    names = ", ".join(reading.detected_bands)
    value = reading.resistor_value or "no value"
    return f"{names} → {value} ({reading.orientation} scan)"
