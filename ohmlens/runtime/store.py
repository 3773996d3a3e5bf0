# Copyright (c) 2026 Ohmlens
# SPDX-License-Identifier: MIT

"""
Custom color persistence.

The store is an external key-value collaborator exposing ``get(key)`` and
``put(key, value)``. Only one key is used: the list of learned colors.
When no store is configured every request sees an empty list.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Optional, Protocol, Union

from ohmlens.schema import CustomColor, RGBColor

logger = logging.getLogger(__name__)

CUSTOM_COLORS_KEY = "custom_colors"


class KeyValueStore(Protocol):
    """Minimal JSON key-value store interface."""

    def get(self, key: str) -> Any:
        """Return the JSON value stored under ``key``, or None."""
        ...

    def put(self, key: str, value: Any) -> None:
        """Store a JSON-serializable value under ``key``."""
        ...


class MemoryStore:
    """In-process store, mainly for tests and single-process use."""

    def __init__(self, initial: Optional[dict] = None):
        self._data: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.put(key, value)

    def get(self, key: str) -> Any:
        raw = self._data.get(key)
        return None if raw is None else json.loads(raw)

    def put(self, key: str, value: Any) -> None:
        # Round-trip through JSON so callers never share mutable state
        self._data[key] = json.dumps(value)


class JSONFileStore:
    """
    Store backed by a single JSON document on disk.

    Every ``put`` rewrites the whole document. Writes within one process
    are serialized; across processes the last writer wins.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Store file {self.path} does not hold a JSON object")
        return data

    def get(self, key: str) -> Any:
        return self._read().get(key)

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp.open("w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            tmp.replace(self.path)


def open_store(path: Union[str, Path, None]) -> Optional[KeyValueStore]:
    """File store at ``path``, or None (no persistence) when path is empty."""
    if not path:
        return None
    return JSONFileStore(path)


def load_custom_colors(store: Optional[KeyValueStore]) -> tuple[CustomColor, ...]:
    """
    Snapshot the learned colors for one request.

    Malformed entries are skipped with a warning rather than failing
    the whole request.
    """
    if store is None:
        return ()
    raw = store.get(CUSTOM_COLORS_KEY) or []
    if not isinstance(raw, list):
        logger.warning("Ignoring %s: expected a list, got %s",
                       CUSTOM_COLORS_KEY, type(raw).__name__)
        return ()

    colors = []
    for entry in raw:
        try:
            colors.append(CustomColor.from_dict(entry))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping malformed custom color %r: %s", entry, e)
    return tuple(colors)


def learn_color(
    store: Optional[KeyValueStore],
    rgb: RGBColor,
    name: str,
) -> bool:
    """
    Upsert a learned color, keyed by exact RGB.

    Returns:
        True if the change was persisted, False when no store is configured
    """
    if store is None:
        logger.warning("No custom color store configured; %s → %s not persisted",
                       rgb.hex, name)
        return False

    definitions = [c.to_dict() for c in load_custom_colors(store)]
    learned = CustomColor(name=name, rgb=rgb).to_dict()

    for i, existing in enumerate(definitions):
        if (existing["r"], existing["g"], existing["b"]) == rgb.as_tuple():
            definitions[i] = learned
            break
    else:
        definitions.append(learned)

    store.put(CUSTOM_COLORS_KEY, definitions)
    return True
