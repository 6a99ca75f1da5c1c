"""Tests for Telegram message formatters."""

from __future__ import annotations

from src.engine.calculator import compute_manifest
from src.telegram.formatters import (
    format_help,
    format_manifest,
    format_meal_label,
    format_qty,
    format_trip_list,
    format_trip_summary,
    split_message,
)


class TestFormatQty:
    def test_float_noise_is_dropped(self):
        assert format_qty(0.1 * 2 * 3) == "0.6"

    def test_whole_numbers_have_no_decimals(self):
        assert format_qty(2.0) == "2"
        assert format_qty(3) == "3"

    def test_rounds_to_three_places(self):
        assert format_qty(0.12345) == "0.123"

    def test_large_totals_stay_positional(self):
        assert format_qty(1_000_000) == "1000000"
        assert format_qty(1234567.25) == "1234567.25"

    def test_tiny_positive_amount_is_not_shown_as_zero(self):
        assert format_qty(0.0004) == "<0.001"
        assert format_qty(0) == "0"


class TestFormatManifest:
    def test_sections_and_lines(self, catalog, make_trip):
        trip = make_trip(people=2, conditions={"rain": True, "temperature": "cold"})
        text = format_manifest(trip["name"], compute_manifest(trip, catalog))

        assert text.startswith("*Lake weekend*")
        gear_at = text.index("*Gear:*")
        food_at = text.index("*Food:*")
        assert gear_at < food_at
        assert "🍲 Pot: 1 pcs" in text[gear_at:food_at]
        assert "🧥 Rain jacket: 3 pcs" in text
        assert "🌾 Grain: 0\\.6 kg" in text[food_at:]

    def test_name_is_escaped(self, catalog, make_trip):
        trip = make_trip(name="Lake_trip (v2)")
        text = format_manifest(trip["name"], compute_manifest(trip, catalog))
        assert text.startswith("*Lake\\_trip \\(v2\\)*")


class TestTripSummary:
    def test_lists_active_conditions(self, make_trip):
        trip = make_trip(people=4, days=2, conditions={"rain": True, "temperature": "hot"})
        text = format_trip_summary(trip)
        assert "👥 People: 4" in text
        assert "📅 Days: 2" in text
        assert "☔ Rain" in text
        assert "Swimming" not in text
        assert "🔥 Temperature: Hot" in text
        assert "🍳 Meals: 6" in text

    def test_trip_list_numbers_trips(self, make_trip):
        text = format_trip_list([make_trip(name="A"), make_trip(name="B")])
        assert "1\\. A" in text
        assert "2\\. B" in text

    def test_empty_trip_list(self):
        assert "/newlist" in format_trip_list([])


def test_meal_label(make_trip):
    meal = make_trip()["meals"][1]
    assert format_meal_label(meal) == "Day 1 - 🥘 - Porridge 🥣"


def test_help_lists_commands():
    text = format_help()
    for cmd in ("/newlist", "/mylists", "/help"):
        assert cmd in text


class TestSplitMessage:
    def test_short_message_untouched(self):
        assert split_message("hello") == ["hello"]

    def test_splits_at_paragraphs(self):
        text = "a" * 30 + "\n\n" + "b" * 30
        parts = split_message(text, max_length=40)
        assert parts == ["a" * 30, "b" * 30]

    def test_long_list_keeps_lines_whole(self):
        lines = [f"🎒 Item {i}: {i} pcs" for i in range(300)]
        parts = split_message("\n".join(lines), max_length=500)
        assert len(parts) > 1
        assert all(len(p) <= 500 for p in parts)
        assert [line for p in parts for line in p.split("\n")] == lines

    def test_hard_splits_long_lines(self):
        parts = split_message("x" * 95, max_length=40)
        assert all(len(p) <= 40 for p in parts)
        assert "".join(parts) == "x" * 95
