# Copyright (c) 2026 Ohmlens
# SPDX-License-Identifier: MIT

"""
Band segmentation along a single scan axis.

Pipeline:
1. Average the central half of the cross axis into one line of colors
2. Split the line into runs wherever adjacent ΔE exceeds a threshold
3. Admit runs by width, classify them, then apply the lightness cut
4. Reclassify edge runs (Silver/Gold candidates, body → Gold rescue)
5. Drop wide body runs away from the edges

Each decision (is this run the body, a digit, or a tolerance band?) uses
three weak signals together: color similarity, position and relative width.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Union

import numpy as np
from numpy.typing import NDArray

from ohmlens.schema import Band, CustomColor, LabColor, RGBColor, Segment
from ohmlens.measure import catalog
from ohmlens.measure.classify import find_closest_color
from ohmlens.measure.colorspace import delta_e_batch, srgb_uint8_to_lab

logger = logging.getLogger(__name__)


class Orientation(Enum):
    """Scan axis of the resistor in the image."""
    HORIZONTAL = "horizontal"  # scan along x, average over y
    VERTICAL = "vertical"      # scan along y, average over x


@dataclass(frozen=True)
class SegmentationConfig:
    """Configuration for band segmentation."""

    # Cross-axis averaging window, as fractions of the cross dimension.
    # The central half avoids edge blur and specular glare.
    cross_start: float = 0.25
    cross_end: float = 0.75

    # Runs narrower than this are noise
    min_band_width: int = 3

    # ΔE between adjacent line pixels that starts a new run
    default_change_threshold: float = 10.0

    # Non-metallic runs outside (floor, ceiling) lightness are rejected
    lightness_floor: float = 5.0
    lightness_ceiling: float = 99.0

    # Edge reclassification: max width relative to the median run width
    silver_width_factor: float = 1.5
    gold_width_factor: float = 1.2
    rescue_width_factor: float = 1.2

    # Non-edge body runs wider than this × median are dropped
    body_width_factor: float = 2.5

    # Median used when no run is wide enough to be admitted
    fallback_median_width: int = 10


def estimate_orientation(width: int, height: int) -> Orientation:
    """
    Guess the scan axis from the crop's aspect ratio.

    A crop at least 1.5× longer in one dimension is scanned along it;
    near-square crops default to horizontal.
    """
    if width > height * 1.5:
        return Orientation.HORIZONTAL
    if height > width * 1.5:
        return Orientation.VERTICAL
    return Orientation.HORIZONTAL


def _round_half_up(values: NDArray[np.float64]) -> NDArray[np.int64]:
    return np.floor(np.asarray(values, dtype=np.float64) + 0.5).astype(np.int64)


def to_grid(
    pixels: Union[NDArray, Iterable],
    width: int,
    height: int,
) -> NDArray[np.int64]:
    """
    Coerce row-major pixels into an (height, width, 3) integer grid.

    Accepts an (H, W, 3) array, an (N, 3) array/sequence of triples,
    or a sequence of ``{"r", "g", "b"}`` mappings.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")

    if not isinstance(pixels, np.ndarray):
        pixels = [
            (p["r"], p["g"], p["b"]) if isinstance(p, dict) else tuple(p)
            for p in pixels
        ]
    arr = np.asarray(pixels)

    if arr.ndim == 3:
        if arr.shape != (height, width, 3):
            raise ValueError(
                f"Expected ({height}, {width}, 3) array, got shape {arr.shape}"
            )
        return arr.astype(np.int64)

    if arr.ndim != 2 or arr.shape[1] != 3:
        raise ValueError(f"Expected (N, 3) pixels, got shape {arr.shape}")
    if arr.shape[0] != width * height:
        raise ValueError(
            f"Pixel count {arr.shape[0]} does not match {width}x{height}"
        )
    return arr.reshape(height, width, 3).astype(np.int64)


def average_line(
    grid: NDArray[np.int64],
    orientation: Orientation = Orientation.HORIZONTAL,
    config: Optional[SegmentationConfig] = None,
) -> NDArray[np.int64]:
    """
    Collapse the cross axis of a pixel grid into one line of colors.

    Only the central window of the cross axis is averaged. The window always
    holds at least one row, so 1-pixel-high slices average their only row.

    Args:
        grid: (H, W, 3) pixel grid
        orientation: Scan axis
        config: Segmentation settings

    Returns:
        (length, 3) int array of rounded average colors along the scan axis
    """
    cfg = config or SegmentationConfig()
    if orientation is Orientation.VERTICAL:
        grid = grid.transpose(1, 0, 2)

    cross = grid.shape[0]
    start = int(np.floor(cross * cfg.cross_start))
    end = int(np.floor(cross * cfg.cross_end))
    if end <= start:
        end = min(start + 1, cross)

    window = grid[start:end].astype(np.float64)
    return _round_half_up(window.mean(axis=0))


def segment_line(
    line: NDArray[np.int64],
    change_threshold: float,
) -> list[Segment]:
    """
    Split a line of colors into runs of similar color.

    A new run starts wherever the ΔE between neighbours exceeds
    ``change_threshold``. The runs exactly partition ``[0, len(line))``.
    """
    if len(line) == 0:
        return []

    lab = srgb_uint8_to_lab(line)
    steps = delta_e_batch(lab[:-1], lab[1:])
    starts = [0] + [int(i) + 1 for i in np.flatnonzero(steps > change_threshold)]
    ends = starts[1:] + [len(line)]

    return [
        Segment(start_x=s, end_x=e - 1, pixels=line[s:e])
        for s, e in zip(starts, ends)
    ]


def median_width(
    segments: Iterable[Segment],
    config: Optional[SegmentationConfig] = None,
) -> int:
    """Upper median of admitted run widths, or the fallback when none qualify."""
    cfg = config or SegmentationConfig()
    widths = sorted(s.width for s in segments if s.width >= cfg.min_band_width)
    if not widths:
        return cfg.fallback_median_width
    return widths[len(widths) // 2]


def _reclassify_at_edge(
    name: str,
    lab: LabColor,
    width: int,
    median: int,
    cfg: SegmentationConfig,
) -> str:
    """
    Position-aware correction for runs at either end of the resistor.

    Tolerance and multiplier bands sit near the ends, so metallic
    candidates are promoted there. A body match with a saturated, warm,
    narrow signature is rescued to Gold.
    """
    chroma = lab.chroma
    is_low_chroma = abs(lab.a) < 3 and abs(lab.b) < 3
    is_warm = lab.a > -5 and lab.b > 20

    if (is_low_chroma
            and 60 < lab.l < 95
            and width < median * cfg.silver_width_factor):
        name = catalog.SILVER
    elif (is_warm
            and chroma > 30
            and 25 < lab.l < 90
            and width < median * cfg.gold_width_factor):
        name = catalog.GOLD

    if (catalog.is_body_name(name)
            and chroma > 30
            and lab.b > 25
            and width < median * cfg.rescue_width_factor):
        name = catalog.GOLD

    return name


def extract_bands(
    pixels: Union[NDArray, Iterable],
    width: int,
    height: int,
    change_threshold: Optional[float] = None,
    custom_colors: Iterable[CustomColor] = (),
    *,
    orientation: Orientation = Orientation.HORIZONTAL,
    config: Optional[SegmentationConfig] = None,
) -> tuple[Band, ...]:
    """
    Segment a cropped resistor image into classified color bands.

    Args:
        pixels: Row-major pixels, (H, W, 3) or (W·H, 3), or {r,g,b} dicts
        width: Image width in pixels
        height: Image height in pixels
        change_threshold: ΔE that starts a new run (default from config)
        custom_colors: User-taught corrections
        orientation: Scan axis
        config: Segmentation settings

    Returns:
        Bands ordered by center coordinate, strictly increasing
    """
    cfg = config or SegmentationConfig()
    threshold = cfg.default_change_threshold if change_threshold is None else change_threshold
    customs = tuple(custom_colors)

    grid = to_grid(pixels, width, height)
    line = average_line(grid, orientation, cfg)
    segments = segment_line(line, threshold)
    median = median_width(segments, cfg)
    last = len(segments)

    logger.debug("%d segments, median width %d", last, median)

    bands: list[Band] = []
    for index, seg in enumerate(segments):
        if seg.width < cfg.min_band_width:
            continue

        avg = _round_half_up(seg.pixels.mean(axis=0))
        rgb = RGBColor(int(avg[0]), int(avg[1]), int(avg[2]))
        L, a, b = srgb_uint8_to_lab(avg)
        lab = LabColor(l=float(L), a=float(a), b=float(b))

        # Classify before the lightness cut: metallic bands may be blown
        # out or shadowed and must survive it.
        name = find_closest_color(rgb, customs).name

        is_at_edge = index == 0 or index >= last - 2
        if is_at_edge:
            name = _reclassify_at_edge(name, lab, seg.width, median, cfg)

        is_metallic = catalog.is_metallic_name(name)
        if not is_metallic and not cfg.lightness_floor <= lab.l <= cfg.lightness_ceiling:
            logger.debug("segment %d-%d rejected: lightness %.1f",
                         seg.start_x, seg.end_x, lab.l)
            continue

        if (not is_at_edge
                and seg.width > median * cfg.body_width_factor
                and catalog.is_body_name(name)):
            logger.debug("segment %d-%d rejected: wide body (%d px)",
                         seg.start_x, seg.end_x, seg.width)
            continue

        bands.append(Band(
            x=int(np.floor((seg.start_x + seg.end_x) / 2 + 0.5)),
            color_name=name,
            rgb=rgb,
            l=lab.l,
            width=seg.width,
            chroma=lab.chroma,
        ))

    bands.sort(key=lambda band: band.x)
    return tuple(bands)
