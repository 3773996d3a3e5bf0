# Copyright (c) 2026 Ohmlens
# SPDX-License-Identifier: MIT

"""Tests for request handlers and dispatch."""

import json

import pytest

from ohmlens.runtime.handlers import ROUTES, RequestError, Response, dispatch
from ohmlens.runtime.store import CUSTOM_COLORS_KEY, MemoryStore

TAN = (210, 180, 140)
BROWN = (165, 42, 42)
DARK = (40, 40, 40)
RED = (255, 0, 0)
GOLD = (255, 215, 0)

STANDARD = [
    (TAN, 20), (BROWN, 12), (TAN, 8), (DARK, 12), (TAN, 8),
    (RED, 12), (TAN, 8), (GOLD, 12), (TAN, 20),
]


def _pixel_dicts(runs, rows=1):
    line = [
        {"r": rgb[0], "g": rgb[1], "b": rgb[2]}
        for rgb, width in runs
        for _ in range(width)
    ]
    return line * rows


def _detect_payload(rows=2, **overrides):
    payload = {
        "pixels": _pixel_dicts(STANDARD, rows),
        "width": 112,
        "height": rows,
        "threshold": 10,
    }
    payload.update(overrides)
    return payload


class BrokenStore:
    def get(self, key):
        raise RuntimeError("store unavailable")

    def put(self, key, value):
        raise RuntimeError("store unavailable")


class TestDispatch:

    def test_routes(self):
        assert set(ROUTES) == {
            "/api/detect-edges",
            "/api/extract-colors",
            "/api/analyze",
            "/api/scan",
            "/api/learn",
            "/api/learn-from-value",
        }

    def test_unknown_path(self):
        response = dispatch("/api/nope", {})
        assert response.status == 404
        assert "error" in response.body

    def test_non_object_payload(self):
        response = dispatch("/api/detect-edges", [1, 2])
        assert response.status == 400

    def test_raw_json_payload(self):
        response = dispatch("/api/detect-edges", json.dumps(_detect_payload()))
        assert response.status == 200

    def test_invalid_json(self):
        response = dispatch("/api/detect-edges", "{nope")
        assert response.status == 400
        assert "not valid JSON" in response.body["error"]

    def test_unexpected_fault_is_500(self, caplog):
        response = dispatch("/api/detect-edges", _detect_payload(), BrokenStore())
        assert response.status == 500
        assert response.body == {"error": "store unavailable"}
        assert "failed" in caplog.text

    def test_response_json(self):
        assert Response(200, {"a": 1}).to_json() == '{"a":1}'
        assert Response(200, {}).ok
        assert not Response(404, {}).ok

    def test_request_error_status(self):
        assert RequestError("x").status == 400
        assert RequestError("x", status=422).status == 422


class TestDetectEdges:

    def test_reads_standard_resistor(self):
        response = dispatch("/api/detect-edges", _detect_payload())
        assert response.status == 200
        body = response.body
        assert body["success"] is True
        assert body["orientation"] == "horizontal"
        assert body["detected_bands"] == ["Brown", "Black", "Red", "Gold"]
        assert body["resistor_value"] == "1kΩ ±5%"
        assert [b["colorName"] for b in body["bands"]] == body["detected_bands"]
        assert set(body["bands"][0]) == {"x", "colorName", "rgb", "l", "width", "chroma"}

    def test_vertical(self):
        # Column-major resistor: every row is one color
        pixels = []
        for rgb, width in STANDARD:
            for _ in range(width):
                pixels.extend([{"r": rgb[0], "g": rgb[1], "b": rgb[2]}] * 2)
        payload = {"pixels": pixels, "width": 2, "height": 112,
                   "threshold": 10, "orientation": "vertical"}
        body = dispatch("/api/detect-edges", payload).body
        assert body["orientation"] == "vertical"
        assert body["detected_bands"] == ["Brown", "Black", "Red", "Gold"]

    def test_learned_color_changes_reading(self):
        store = MemoryStore()
        learned = dispatch("/api/learn", {
            "detectedColor": {"r": 40, "g": 40, "b": 40},
            "correctColorName": "Brown",
        }, store)
        assert learned.status == 200
        body = dispatch("/api/detect-edges", _detect_payload(), store).body
        assert body["detected_bands"] == ["Brown", "Brown", "Red", "Gold"]
        assert body["resistor_value"] == "1.1kΩ ±5%"

    @pytest.mark.parametrize("missing", ["pixels", "width", "height", "threshold"])
    def test_missing_field(self, missing):
        payload = _detect_payload()
        del payload[missing]
        response = dispatch("/api/detect-edges", payload)
        assert response.status == 400
        assert missing in response.body["error"]

    def test_pixel_count_mismatch(self):
        response = dispatch("/api/detect-edges", _detect_payload(height=3))
        assert response.status == 400

    def test_bad_channel(self):
        payload = _detect_payload()
        payload["pixels"][0] = {"r": 300, "g": 0, "b": 0}
        assert dispatch("/api/detect-edges", payload).status == 400

    def test_bad_orientation(self):
        response = dispatch("/api/detect-edges", _detect_payload(orientation="diagonal"))
        assert response.status == 400


class TestExtractColors:

    def _payload(self):
        pixels = (
            [{"r": 165, "g": 42, "b": 42, "x": 30}] * 50
            + [{"r": 255, "g": 0, "b": 0, "x": 60}] * 50
        )
        return {"pixels": pixels, "colorCount": 2, "width": 100, "height": 1}

    def test_extract(self):
        body = dispatch("/api/extract-colors", self._payload()).body
        assert body["totalPixels"] == 100
        assert [c["name"] for c in body["colors"]] == ["Brown", "Red"]
        assert body["detected_bands"] == ["Brown", "Red"]
        assert body["resistor_value"] is None

    def test_analyze_alias(self):
        assert dispatch("/api/analyze", self._payload()).body == \
            dispatch("/api/extract-colors", self._payload()).body

    def test_color_count_required(self):
        payload = self._payload()
        del payload["colorCount"]
        assert dispatch("/api/extract-colors", payload).status == 400

    def test_color_count_bounded(self):
        payload = self._payload()
        payload["colorCount"] = 1000
        assert dispatch("/api/extract-colors", payload).status == 400


class TestScan:

    def test_majority_sequence(self):
        line = _pixel_dicts(STANDARD)
        noisy = _pixel_dicts([(TAN, 20), (BROWN, 12), (TAN, 20)])
        body = dispatch("/api/scan", {"slices": [line, noisy, line, []]}).body
        assert body["detected_bands"] == ["Brown", "Black", "Red", "Gold"]
        assert body["resistor_value"] == "1kΩ ±5%"
        assert len(body["slices"]) == 4
        assert body["slices"][3] == {"colors": [], "detected_bands": []}
        first = body["slices"][0]["colors"][1]
        assert first == {"r": 165, "g": 42, "b": 42, "name": "Brown", "hex": "#A52A2A", "count": 12}

    def test_no_sequence(self):
        body = dispatch("/api/scan", {"slices": []}).body
        assert body["detected_bands"] == []
        assert body["resistor_value"] is None

    def test_invalid(self):
        assert dispatch("/api/scan", {"slices": "x"}).status == 400


class TestLearn:

    def test_message(self):
        response = dispatch("/api/learn", {
            "detectedColor": {"r": 1, "g": 2, "b": 3},
            "correctColorName": "Black",
        }, MemoryStore())
        assert response.body == {"success": True, "message": "Learned that rgb(1,2,3) is Black"}

    def test_without_store_still_succeeds(self):
        response = dispatch("/api/learn", {
            "detectedColor": {"r": 1, "g": 2, "b": 3},
            "correctColorName": "Black",
        })
        assert response.status == 200

    def test_upsert(self):
        store = MemoryStore()
        for name in ("Black", "Brown"):
            dispatch("/api/learn", {
                "detectedColor": {"r": 1, "g": 2, "b": 3},
                "correctColorName": name,
            }, store)
        assert store.get(CUSTOM_COLORS_KEY) == [{"name": "Brown", "r": 1, "g": 2, "b": 3}]

    @pytest.mark.parametrize("payload", [
        {"correctColorName": "Black"},
        {"detectedColor": {"r": 1, "g": 2}, "correctColorName": "Black"},
        {"detectedColor": {"r": 1, "g": 2, "b": 999}, "correctColorName": "Black"},
        {"detectedColor": {"r": 1, "g": 2, "b": 3}, "correctColorName": ""},
    ])
    def test_invalid(self, payload):
        assert dispatch("/api/learn", payload, MemoryStore()).status == 400

    def test_store_failure_is_500(self):
        response = dispatch("/api/learn", {
            "detectedColor": {"r": 1, "g": 2, "b": 3},
            "correctColorName": "Black",
        }, BrokenStore())
        assert response.status == 500


class TestLearnFromValue:

    def test_sequence(self):
        response = dispatch("/api/learn-from-value", {
            "detectedBands": ["Yellow", "Violet", "Orange", "Gold"],
            "correctValue": "4.7k",
            "correctTolerance": "5",
        })
        assert response.status == 200
        assert response.body == {
            "success": True,
            "message": "Value parsed, correct sequence determined.",
            "correctColorSequence": ["Yellow", "Violet", "Red", "Gold"],
            "yourDetectedBands": ["Yellow", "Violet", "Orange", "Gold"],
        }

    def test_nothing_persisted(self):
        store = MemoryStore()
        dispatch("/api/learn-from-value", {
            "detectedBands": ["Brown"], "correctValue": "1k",
        }, store)
        assert store.get(CUSTOM_COLORS_KEY) is None

    @pytest.mark.parametrize("payload,message", [
        ({"correctValue": "1k"}, "Invalid input data."),
        ({"detectedBands": ["Brown"]}, "Invalid input data."),
        ({"detectedBands": ["Brown"], "correctValue": "abc"}, "Invalid resistance value format."),
        ({"detectedBands": ["Brown"], "correctValue": "0.01"}, "Could not determine sequence."),
    ])
    def test_errors(self, payload, message):
        response = dispatch("/api/learn-from-value", payload)
        assert response.status == 400
        assert response.body == {"error": message}
