# Copyright (c) 2026 Ohmlens
# SPDX-License-Identifier: MIT

"""
Median-cut quantization and quantized-color band extraction.

An alternative to run-length segmentation for crops where the bands are
not cleanly aligned with one axis: pixels are clustered by color only,
and each cluster's mean x stands in for its position on the resistor.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from ohmlens.schema import ColorCluster, CustomColor, ExtractedColor, RGBColor
from ohmlens.measure import catalog
from ohmlens.measure.classify import find_closest_color
from ohmlens.measure.colorspace import rgb_to_lab


@dataclass(frozen=True)
class QuantizeConfig:
    """Configuration for quantized-color extraction."""

    # Clusters whose mean x lies within this fraction of either end are edge clusters
    edge_fraction: float = 0.2

    # A cluster holding more than this share of all pixels is the body
    dominance: float = 0.7


def _as_rgbx(pixels: Sequence) -> NDArray[np.float64]:
    """Coerce pixels to an (N, 4) array of r, g, b, x (x defaults to 0)."""
    if isinstance(pixels, np.ndarray):
        arr = np.asarray(pixels, dtype=np.float64)
        if arr.ndim != 2 or arr.shape[1] not in (3, 4):
            raise ValueError(f"Expected (N, 3) or (N, 4) pixels, got shape {arr.shape}")
        if arr.shape[1] == 3:
            arr = np.hstack([arr, np.zeros((len(arr), 1))])
        return arr

    rows = []
    for p in pixels:
        if isinstance(p, dict):
            rows.append((p["r"], p["g"], p["b"], p.get("x") or 0))
        else:
            rows.append((*p[:3], p[3] if len(p) > 3 else 0))
    return np.asarray(rows, dtype=np.float64).reshape(-1, 4)


def quantize(pixels: Sequence, k: int) -> tuple[ColorCluster, ...]:
    """
    Median-cut color quantization.

    Repeatedly splits the bucket with the largest single-channel range at
    its median along that channel, until there are ``k`` buckets or no
    bucket is left to split.

    Args:
        pixels: (N, 3) / (N, 4) array, triples, or ``{r, g, b, x?}`` mappings
        k: Target number of clusters

    Returns:
        Tuple of ColorCluster, ordered by pixel count descending
    """
    data = _as_rgbx(pixels)
    if len(data) == 0 or k <= 0:
        return ()

    buckets: list[NDArray[np.float64]] = [data]

    while len(buckets) < k:
        largest_index = -1
        largest_range = -1.0
        channel = -1

        for i, bucket in enumerate(buckets):
            if len(bucket) == 0:
                continue
            ranges = bucket[:, :3].max(axis=0) - bucket[:, :3].min(axis=0)
            if ranges.max() > largest_range:
                largest_range = float(ranges.max())
                largest_index = i
                # First channel with the largest range: r, then g, then b
                channel = int(np.argmax(ranges))

        if largest_index == -1:
            break

        bucket = buckets[largest_index]
        ordered = bucket[np.argsort(bucket[:, channel], kind="stable")]
        mid = len(ordered) // 2
        buckets[largest_index:largest_index + 1] = [ordered[:mid], ordered[mid:]]

    clusters = []
    for bucket in buckets:
        if len(bucket) == 0:
            continue
        mean = np.floor(bucket.mean(axis=0) + 0.5).astype(int)
        clusters.append(ColorCluster(
            rgb=RGBColor(int(mean[0]), int(mean[1]), int(mean[2])),
            count=len(bucket),
            avg_x=int(mean[3]),
        ))

    clusters.sort(key=lambda c: c.count, reverse=True)
    return tuple(clusters)


def _refine_at_edge(name: str, rgb: RGBColor) -> str:
    lab = rgb_to_lab(rgb.r, rgb.g, rgb.b)
    if abs(lab.a) < 3 and abs(lab.b) < 3 and 60 < lab.l < 95:
        return catalog.SILVER
    if lab.a > -5 and lab.b > 20 and 25 < lab.l < 90:
        return catalog.GOLD
    return name


def extract_colors(
    pixels: Sequence,
    color_count: int,
    width: Optional[int] = None,
    custom_colors: Iterable[CustomColor] = (),
    *,
    config: Optional[QuantizeConfig] = None,
) -> tuple[ExtractedColor, ...]:
    """
    Quantize, classify and filter the colors of a resistor crop.

    Clusters near either end are refined toward Silver/Gold. Body clusters
    are removed by name and by overwhelming dominance.

    Args:
        pixels: Pixels with optional ``x`` coordinates
        color_count: Number of clusters to cut
        width: Image width used to normalize positions (default √N)
        custom_colors: User-taught corrections
        config: Quantization settings

    Returns:
        Surviving colors ordered by mean x
    """
    cfg = config or QuantizeConfig()
    customs = tuple(custom_colors)
    data = _as_rgbx(pixels)
    total = len(data)
    if total == 0:
        return ()

    image_width = width or math.sqrt(total)
    clusters = quantize(data, color_count)

    enriched = []
    for cluster in clusters:
        name = find_closest_color(cluster.rgb, customs).name
        position = cluster.avg_x / image_width
        is_at_edge = position < cfg.edge_fraction or position > 1.0 - cfg.edge_fraction
        if is_at_edge:
            name = _refine_at_edge(name, cluster.rgb)
        enriched.append(ExtractedColor(
            rgb=cluster.rgb,
            name=name,
            count=cluster.count,
            avg_x=cluster.avg_x,
            position=position,
            is_at_edge=is_at_edge,
        ))

    kept = [
        c for c in enriched
        if not catalog.is_body_name(c.name)
        and c.count <= total * cfg.dominance
    ]
    kept.sort(key=lambda c: c.avg_x)
    return tuple(kept)
