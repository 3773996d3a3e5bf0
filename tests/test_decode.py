# Copyright (c) 2026 Ohmlens
# SPDX-License-Identifier: MIT

"""Tests for band sequence decoding."""

import pytest

from ohmlens.codec.decode import (
    INVALID_SEQUENCE,
    NOT_ENOUGH_BANDS,
    calculate_resistor_value,
    format_resistance,
    format_tolerance,
    resolve_bands,
)


class TestCalculateResistorValue:

    def test_four_band(self):
        assert calculate_resistor_value(["Brown", "Black", "Red", "Gold"]) == "1kΩ ±5%"

    def test_three_band_defaults_to_twenty_percent(self):
        assert calculate_resistor_value(["Yellow", "Violet", "Orange"]) == "47kΩ ±20%"

    def test_decimal_kilo(self):
        assert calculate_resistor_value(["Yellow", "Violet", "Red", "Gold"]) == "4.7kΩ ±5%"

    def test_mega(self):
        assert calculate_resistor_value(["Brown", "Black", "Green"]) == "1MΩ ±20%"

    def test_five_band(self):
        names = ["Brown", "Black", "Black", "Brown", "Brown"]
        assert calculate_resistor_value(names) == "1kΩ ±1%"

    def test_four_band_without_tolerance_color(self):
        # Orange carries no tolerance, so it is the multiplier of three digits
        names = ["Brown", "Black", "Black", "Orange"]
        assert calculate_resistor_value(names) == "100kΩ ±20%"

    def test_gold_multiplier(self):
        assert calculate_resistor_value(["Yellow", "Violet", "Gold", "Gold"]) == "4.7Ω ±5%"

    def test_three_band_gold_is_multiplier(self):
        # Gold carries a tolerance, but a 3-band code has no tolerance band
        assert calculate_resistor_value(["Yellow", "Violet", "Gold"]) == "4.7Ω ±20%"

    def test_silver_multiplier(self):
        assert calculate_resistor_value(["Red", "Red", "Silver"]) == "0.22Ω ±20%"

    def test_aliases_canonicalized(self):
        assert calculate_resistor_value(["Brown", "Black", "Red", "Gold_Dark"]) == "1kΩ ±5%"

    def test_too_few_names(self):
        assert calculate_resistor_value([]) is None
        assert calculate_resistor_value(["Brown", "Black"]) is None

    def test_unresolvable_names_dropped(self):
        assert calculate_resistor_value(["Brown", "Mauve", "Teal", "Red"]) == NOT_ENOUGH_BANDS

    def test_metallic_digit_invalid(self):
        assert calculate_resistor_value(["Gold", "Black", "Red"]) == INVALID_SEQUENCE

    def test_body_multiplier_invalid(self):
        assert calculate_resistor_value(["Brown", "Black", "Tan (Body)"]) == INVALID_SEQUENCE

    def test_accepts_tuple(self):
        assert calculate_resistor_value(("Red", "Red", "Brown")) == "220Ω ±20%"


class TestFormatting:

    @pytest.mark.parametrize("ohms,expected", [
        (0.22, "0.22Ω"),
        (4.7, "4.7Ω"),
        (10, "10Ω"),
        (999, "999Ω"),
        (1000, "1kΩ"),
        (1500, "1.5kΩ"),
        (47000, "47kΩ"),
        (1_000_000, "1MΩ"),
        (2_200_000, "2.2MΩ"),
    ])
    def test_resistance(self, ohms, expected):
        assert format_resistance(ohms) == expected

    @pytest.mark.parametrize("tolerance,expected", [
        (5, "±5%"),
        (5.0, "±5%"),
        (0.25, "±0.25%"),
        (20.0, "±20%"),
    ])
    def test_tolerance(self, tolerance, expected):
        assert format_tolerance(tolerance) == expected


class TestResolveBands:

    def test_drops_unknown(self):
        assert [c.name for c in resolve_bands(["Gold_Light", "Mauve", "Red"])] == ["Gold", "Red"]
