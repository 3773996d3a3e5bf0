# Copyright (c) 2026 Ohmlens
# SPDX-License-Identifier: MIT

"""
Request runtime for Ohmlens.

Route handlers, the custom color store and JSON serialization. The
runtime never changes what the pipeline measured; it validates input,
snapshots learned colors per request and shapes the response.
"""

from ohmlens.runtime.handlers import ROUTES, RequestError, Response, dispatch
from ohmlens.runtime.serializers import SerializerFormat, to_reading_output
from ohmlens.runtime.store import JSONFileStore, MemoryStore, open_store

__all__ = [
    "dispatch",
    "ROUTES",
    "Response",
    "RequestError",
    "MemoryStore",
    "JSONFileStore",
    "open_store",
    "to_reading_output",
    "SerializerFormat",
]
