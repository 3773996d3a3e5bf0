# Copyright (c) 2026 Ohmlens
# SPDX-License-Identifier: MIT

"""
Serializers for band readings.

Serializers format results without modifying them.
"""

from ohmlens.runtime.serializers.base import SerializerFormat, dump_json
from ohmlens.runtime.serializers.reading import to_reading_output

__all__ = [
    "SerializerFormat",
    "dump_json",
    "to_reading_output",
]
