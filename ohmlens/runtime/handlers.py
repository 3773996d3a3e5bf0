# Copyright (c) 2026 Ohmlens
# SPDX-License-Identifier: MIT

"""
Request handlers for the band reading API.

Each handler takes a decoded JSON payload and the optional custom color
store, and returns a Response. ``dispatch`` routes a path to its handler
and is the single error boundary:

- RequestError (malformed input) → 400 ``{"error": message}``
- any other exception → logged, 500 ``{"error": message}``

No HTTP server lives here; any host framework can call ``dispatch``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from ohmlens.schema import BandReading, RGBColor
from ohmlens.codec.body import remove_dominant_color
from ohmlens.codec.decode import calculate_resistor_value
from ohmlens.codec.encode import parse_resistance, resistance_to_colors
from ohmlens.measure.catalog import is_body_name
from ohmlens.measure.extract import resolve_orientation, scan_slices
from ohmlens.measure.quantize import extract_colors
from ohmlens.measure.segments import extract_bands
from ohmlens.runtime.serializers.base import SerializerFormat, dump_json
from ohmlens.runtime.store import KeyValueStore, learn_color, load_custom_colors

logger = logging.getLogger(__name__)

# Upper bound on requested median-cut clusters
MAX_COLOR_COUNT = 256


@dataclass(frozen=True)
class Response:
    """Status code plus JSON body."""
    status: int
    body: dict

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def to_json(self, format: SerializerFormat = SerializerFormat.JSON) -> str:
        return dump_json(self.body, format)


class RequestError(ValueError):
    """Malformed request input. Carries the status to report."""

    def __init__(self, message: str, status: int = 400):
        super().__init__(message)
        self.status = status


# =============================================================================
# Validation
# =============================================================================


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _channel(pixel: dict, key: str) -> int:
    value = pixel.get(key)
    if not _is_number(value) or not 0 <= value <= 255:
        raise RequestError(f"Pixel channel {key!r} must be a number 0-255, got {value!r}")
    return int(value)


def _pixel_rows(raw: Any, *, with_x: bool = False, allow_empty: bool = False) -> list[tuple]:
    """Validate ``[{r, g, b, x?}]`` and return plain tuples."""
    if not isinstance(raw, list) or (not raw and not allow_empty):
        raise RequestError("pixels must be a non-empty list")

    rows = []
    for pixel in raw:
        if not isinstance(pixel, dict):
            raise RequestError(f"Pixel must be an object with r, g, b, got {pixel!r}")
        rgb = (_channel(pixel, "r"), _channel(pixel, "g"), _channel(pixel, "b"))
        if with_x:
            x = pixel.get("x")
            rows.append(rgb + (x if _is_number(x) else 0,))
        else:
            rows.append(rgb)
    return rows


def _positive_int(payload: dict, key: str, *, required: bool = True) -> Optional[int]:
    value = payload.get(key)
    if value is None and not required:
        return None
    if not _is_number(value) or value <= 0 or int(value) != value:
        raise RequestError(f"{key} must be a positive integer, got {value!r}")
    return int(value)


def _number(payload: dict, key: str) -> float:
    value = payload.get(key)
    if not _is_number(value):
        raise RequestError(f"{key} must be a number, got {value!r}")
    return float(value)


# =============================================================================
# Handlers
# =============================================================================


def handle_detect_edges(payload: dict, store: Optional[KeyValueStore] = None) -> Response:
    """
    Segment a cropped image into bands and decode them.

    Payload: ``{pixels, width, height, threshold, orientation?}``.
    Body bands are removed by name; segmentation has already dropped wide
    body runs away from the edges.
    """
    pixels = _pixel_rows(payload.get("pixels"))
    width = _positive_int(payload, "width")
    height = _positive_int(payload, "height")
    threshold = _number(payload, "threshold")
    if len(pixels) != width * height:
        raise RequestError(
            f"Pixel count {len(pixels)} does not match {width}x{height}"
        )
    try:
        axis = resolve_orientation(payload.get("orientation", "horizontal"), width, height)
    except ValueError as e:
        raise RequestError(str(e)) from e

    customs = load_custom_colors(store)
    bands = extract_bands(pixels, width, height, threshold, customs, orientation=axis)
    kept = tuple(b for b in bands if not is_body_name(b.color_name))

    reading = BandReading(
        bands=kept,
        resistor_value=calculate_resistor_value([b.color_name for b in kept]),
        orientation=axis.value,
    )
    logger.info("detect-edges: %d/%d bands kept, value=%s",
                len(kept), len(bands), reading.resistor_value)
    return Response(200, {"success": True, **reading.to_dict()})


def handle_extract_colors(payload: dict, store: Optional[KeyValueStore] = None) -> Response:
    """
    Quantize the crop into colors and decode them in left-to-right order.

    Payload: ``{pixels: [{r, g, b, x?}], colorCount, width?, height?}``.
    """
    rows = _pixel_rows(payload.get("pixels"), with_x=True)
    color_count = _positive_int(payload, "colorCount")
    if color_count > MAX_COLOR_COUNT:
        raise RequestError(f"colorCount must be at most {MAX_COLOR_COUNT}, got {color_count}")
    width = _positive_int(payload, "width", required=False)
    _positive_int(payload, "height", required=False)

    colors = extract_colors(rows, color_count, width, load_custom_colors(store))
    # One body shade often splits into several same-named clusters
    names = remove_dominant_color([c.name for c in colors])
    value = calculate_resistor_value(names)

    logger.info("extract-colors: %d colors, %d bands, value=%s",
                len(colors), len(names), value)
    return Response(200, {
        "colors": [c.to_dict() for c in colors],
        "totalPixels": len(rows),
        "detected_bands": names,
        "resistor_value": value,
    })


def handle_scan(payload: dict, store: Optional[KeyValueStore] = None) -> Response:
    """
    Vote on the band sequence across several 1-pixel slices.

    Payload: ``{slices: [[{r, g, b}]]}``.
    """
    raw = payload.get("slices")
    if not isinstance(raw, list):
        raise RequestError("slices must be a list of pixel lists")
    lines = [_pixel_rows(s, allow_empty=True) for s in raw]

    per_slice, best = scan_slices(lines, load_custom_colors(store))
    value = calculate_resistor_value(best)

    logger.info("scan: %d slices, sequence=%s, value=%s",
                len(lines), ",".join(best) or "-", value)
    return Response(200, {
        "slices": [
            {
                "colors": [
                    {**b.rgb.to_dict(), "name": b.color_name,
                     "hex": b.rgb.hex, "count": b.width}
                    for b in bands
                ],
                "detected_bands": [b.color_name for b in bands],
            }
            for bands in per_slice
        ],
        "detected_bands": list(best),
        "resistor_value": value,
    })


def handle_learn(payload: dict, store: Optional[KeyValueStore] = None) -> Response:
    """
    Teach the classifier that an exact RGB is a given color.

    Payload: ``{detectedColor: {r, g, b}, correctColorName}``.
    """
    detected = payload.get("detectedColor")
    name = payload.get("correctColorName")
    if not isinstance(detected, dict):
        raise RequestError("detectedColor must be an object with r, g, b")
    if not isinstance(name, str) or not name.strip():
        raise RequestError("correctColorName must be a non-empty string")
    try:
        rgb = RGBColor.from_dict(detected)
    except (KeyError, TypeError, ValueError) as e:
        raise RequestError(f"Invalid detectedColor: {e}") from e

    persisted = learn_color(store, rgb, name)
    logger.info("learn: %s → %s (persisted=%s)", rgb.hex, name, persisted)
    return Response(200, {
        "success": True,
        "message": f"Learned that rgb({rgb.r},{rgb.g},{rgb.b}) is {name}",
    })


def handle_learn_from_value(payload: dict, store: Optional[KeyValueStore] = None) -> Response:
    """
    Report the canonical sequence for a known value next to the detected one.

    Payload: ``{detectedBands, correctValue, correctTolerance?}``.
    Nothing is persisted.
    """
    detected = payload.get("detectedBands")
    if not isinstance(detected, list) or not payload.get("correctValue"):
        raise RequestError("Invalid input data.")

    ohms = parse_resistance(payload["correctValue"])
    if ohms is None:
        raise RequestError("Invalid resistance value format.")

    sequence = resistance_to_colors(ohms, payload.get("correctTolerance"))
    if not sequence:
        raise RequestError("Could not determine sequence.")

    logger.info("learn-from-value: %s Ω → %s", ohms, ",".join(sequence))
    return Response(200, {
        "success": True,
        "message": "Value parsed, correct sequence determined.",
        "correctColorSequence": list(sequence),
        "yourDetectedBands": detected,
    })


# =============================================================================
# Dispatch
# =============================================================================

Handler = Callable[[dict, Optional[KeyValueStore]], Response]

ROUTES: dict[str, Handler] = {
    "/api/detect-edges": handle_detect_edges,
    "/api/extract-colors": handle_extract_colors,
    "/api/analyze": handle_extract_colors,
    "/api/scan": handle_scan,
    "/api/learn": handle_learn,
    "/api/learn-from-value": handle_learn_from_value,
}


def dispatch(
    path: str,
    payload: Union[dict, str, bytes, None],
    store: Optional[KeyValueStore] = None,
) -> Response:
    """
    Route one request and convert failures into error responses.

    Args:
        path: Request path, e.g. ``/api/detect-edges``
        payload: Decoded JSON object, or the raw JSON text
        store: Custom color store; None behaves as an empty color list

    Returns:
        Response; never raises
    """
    handler = ROUTES.get(path)
    if handler is None:
        logger.warning("No route for %s", path)
        return Response(404, {"error": f"Not found: {path}"})

    try:
        if isinstance(payload, (str, bytes)):
            try:
                payload = json.loads(payload)
            except json.JSONDecodeError as e:
                raise RequestError(f"Request body is not valid JSON: {e}") from e
        if not isinstance(payload, dict):
            raise RequestError("Request body must be a JSON object")
        return handler(payload, store)
    except RequestError as e:
        logger.warning("%s rejected: %s", path, e)
        return Response(e.status, {"error": str(e)})
    except Exception as e:
        logger.exception("%s failed", path)
        return Response(500, {"error": str(e)})
