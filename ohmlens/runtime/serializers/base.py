# Copyright (c) 2026 Ohmlens
# SPDX-License-Identifier: MIT

"""Base types and utilities for serializers."""

import json
from enum import Enum


class SerializerFormat(Enum):
    """Output format for serializers."""

    JSON = "json"
    JSON_PRETTY = "json_pretty"
    NATURAL = "natural"


def dump_json(data: object, format: SerializerFormat = SerializerFormat.JSON) -> str:
    """Encode a JSON-ready structure in the requested JSON flavor."""
    if format == SerializerFormat.JSON_PRETTY:
        return json.dumps(data, indent=2, ensure_ascii=False)
    if format == SerializerFormat.JSON:
        return json.dumps(data, separators=(",", ":"), ensure_ascii=False)
    raise ValueError(f"{format.value} is not a JSON format")
