# Copyright (c) 2026 Ohmlens
# SPDX-License-Identifier: MIT

"""
Body-band exclusion for band name sequences.

Two strategies, used by different callers:

- ``remove_body_names``: drops bands whose name denotes a body color.
  Used after run-length segmentation, where every run is one physical
  region and a repeated digit (Brown-Black-Black) is legitimate.
- ``remove_dominant_color``: drops the most frequent name when it repeats.
  Used after quantization, where one body shade typically splits into
  several clusters that classify to the same name.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Optional, Sequence

from ohmlens.measure.catalog import is_body_name


def find_dominant_color(names: Iterable[str]) -> Optional[str]:
    """
    Most frequent name, if it occurs more than once.

    Ties go to the name that appears first. A sequence of distinct names
    has no dominant color.
    """
    counts = Counter(names)
    if not counts:
        return None
    # Counter preserves first-seen order and most_common() is stable
    name, count = counts.most_common(1)[0]
    return name if count > 1 else None


def remove_dominant_color(names: Sequence[str]) -> list[str]:
    """Drop every occurrence of the dominant name; no-op when there is none."""
    dominant = find_dominant_color(names)
    if dominant is None:
        return list(names)
    return [n for n in names if n != dominant]


def remove_body_names(names: Iterable[str]) -> list[str]:
    """Drop names that denote a body color."""
    return [n for n in names if not is_body_name(n)]
