# Copyright (c) 2026 Ohmlens
# SPDX-License-Identifier: MIT

"""
Main band reading API.

This is the primary entry point for Ohmlens's pixel pipeline.
"""

from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

import numpy as np
from numpy.typing import NDArray

from ohmlens.schema import BandReading, CustomColor
from ohmlens.codec.body import remove_body_names
from ohmlens.codec.decode import calculate_resistor_value
from ohmlens.measure.catalog import is_body_name
from ohmlens.measure.segments import (
    Orientation,
    SegmentationConfig,
    estimate_orientation,
    extract_bands,
)


def read_bands(
    image: Union[str, Path, NDArray[np.uint8]],
    *,
    threshold: Optional[float] = None,
    custom_colors: Iterable[CustomColor] = (),
    orientation: Union[Orientation, str, None] = None,
    config: Optional[SegmentationConfig] = None,
) -> BandReading:
    """
    Read the color bands of a cropped resistor image.

    Args:
        image: One of:
            - Path to image file (str or Path); embedded ICC profiles are
              converted to sRGB.
            - NumPy array of shape (H, W, 3) with uint8 sRGB values.
        threshold: ΔE that starts a new band (default from config)
        custom_colors: User-taught corrections
        orientation: Scan axis; None estimates it from the aspect ratio
        config: Segmentation settings

    Returns:
        BandReading with body bands removed and the decoded value

    Example:
        >>> from ohmlens import read_bands
        >>> reading = read_bands("resistor.png")
        >>> reading.detected_bands
        ('Brown', 'Black', 'Red', 'Gold')
        >>> reading.resistor_value
        '1kΩ ±5%'
    """
    pixels, height, width = load_pixels(image)
    axis = resolve_orientation(orientation, width, height)

    bands = extract_bands(
        pixels, width, height, threshold, custom_colors,
        orientation=axis, config=config,
    )
    kept = tuple(b for b in bands if not is_body_name(b.color_name))

    return BandReading(
        bands=kept,
        resistor_value=calculate_resistor_value([b.color_name for b in kept]),
        orientation=axis.value,
    )


def scan_slices(
    slices: Iterable[Sequence],
    custom_colors: Iterable[CustomColor] = (),
    threshold: float = 10.0,
    *,
    body_width_factor: float = 2.5,
    config: Optional[SegmentationConfig] = None,
) -> tuple[list[tuple], tuple[str, ...]]:
    """
    Vote on the band sequence across several 1-pixel-high scan lines.

    Each slice is segmented on its own and loses its body bands: first by
    name, then any name belonging to a band wider than
    ``body_width_factor`` × the median width. The most frequent surviving
    sequence of 3+ bands wins; ties go to the sequence seen first.

    Returns:
        (per-slice bands, winning sequence); the sequence is empty when no
        slice produced 3 bands
    """
    customs = tuple(custom_colors)
    per_slice = []
    votes: Counter = Counter()

    for line in slices:
        line = list(line)
        if not line:
            per_slice.append(())
            continue
        bands = extract_bands(line, len(line), 1, threshold, customs, config=config)
        per_slice.append(bands)

        names = remove_body_names(b.color_name for b in bands)
        if len(names) < 3:
            continue
        widths = sorted(b.width for b in bands if b.color_name in names)
        median = widths[len(widths) // 2]
        widest = widths[-1]
        if widest > median * body_width_factor:
            body = next(
                b.color_name for b in bands
                if b.color_name in names and b.width == widest
            )
            names = [n for n in names if n != body]
        if len(names) >= 3:
            votes[tuple(names)] += 1

    if not votes:
        return per_slice, ()
    best, _ = votes.most_common(1)[0]
    return per_slice, best


def resolve_orientation(
    orientation: Union[Orientation, str, None],
    width: int,
    height: int,
) -> Orientation:
    """Coerce an orientation argument; None or "auto" estimates it."""
    if orientation is None or orientation == "auto":
        return estimate_orientation(width, height)
    if isinstance(orientation, Orientation):
        return orientation
    try:
        return Orientation(orientation)
    except ValueError:
        raise ValueError(
            f"Unknown orientation {orientation!r}: "
            f"expected 'horizontal', 'vertical' or 'auto'"
        ) from None


def load_pixels(
    image: Union[str, Path, NDArray[np.uint8]],
) -> tuple[NDArray[np.uint8], int, int]:
    """
    Load image from file or validate array.

    Applies ICC profile conversion to sRGB if the image has an embedded
    color profile, so band colors match what a color picker shows.

    Returns:
        (pixels, height, width) where pixels has shape (H, W, 3)
    """
    if isinstance(image, (str, Path)):
        try:
            from PIL import Image
        except ImportError as e:
            raise ImportError(
                "Pillow is required for image loading. "
                "Install with: pip install ohmlens[image]"
            ) from e

        img = Image.open(image)

        if 'icc_profile' in img.info:
            from PIL import ImageCms
            import io

            embedded_profile = ImageCms.ImageCmsProfile(
                io.BytesIO(img.info['icc_profile'])
            )
            srgb_profile = ImageCms.createProfile('sRGB')
            if img.mode != "RGB":
                img = img.convert("RGB")
            try:
                img = ImageCms.profileToProfile(img, embedded_profile, srgb_profile)
            except ImageCms.PyCMSError:
                # Unusable profile: keep the plain RGB conversion
                pass
        elif img.mode != "RGB":
            img = img.convert("RGB")

        pixels = np.array(img, dtype=np.uint8)
        height, width = pixels.shape[:2]

    elif isinstance(image, np.ndarray):
        pixels = image

        if pixels.ndim != 3 or pixels.shape[2] != 3:
            raise ValueError(
                f"Expected (H, W, 3) array, got shape {pixels.shape}"
            )

        if pixels.dtype != np.uint8:
            raise ValueError(
                f"Expected uint8 array, got {pixels.dtype}"
            )

        height, width = pixels.shape[:2]

    else:
        raise TypeError(
            f"Expected file path or numpy array, got {type(image)}"
        )

    if height == 0 or width == 0:
        raise ValueError(f"Image is empty ({width}x{height})")

    return pixels, height, width
