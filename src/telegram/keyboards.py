"""Inline keyboards for trip editing. Callback data is ``action:arg[:arg...]``."""

from __future__ import annotations

from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from src.state import Dish, Temperature, TripRecord
from src.telegram.formatters import TEMPERATURE_EMOJI, TEMPERATURE_LABELS, format_meal_label

BUTTON_TEXT_LIMIT = 64


def _button(text: str, data: str) -> InlineKeyboardButton:
    return InlineKeyboardButton(text[:BUTTON_TEXT_LIMIT], callback_data=data)


def trip_keyboard(trip_id: int) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup([
        [_button("✏️ Rename", f"edit_name:{trip_id}"), _button("👥 People", f"edit_people:{trip_id}")],
        [_button("📅 Days", f"edit_days:{trip_id}"), _button("🌦️ Conditions", f"edit_conditions:{trip_id}")],
        [_button("🍳 Meals", f"edit_dishes:{trip_id}"), _button("📝 Generate list", f"generate:{trip_id}")],
        [_button("❌ Delete list", f"delete:{trip_id}"), _button("⬅️ All lists", "back_to_lists")],
    ])


def conditions_keyboard(trip: TripRecord) -> InlineKeyboardMarkup:
    """Toggle buttons with a check mark on the active options."""
    trip_id = trip["id"]
    conditions = trip["conditions"]

    def mark(active: bool) -> str:
        return "✅ " if active else ""

    temperature_row = [
        _button(
            f"{mark(conditions['temperature'] == band.value)}{TEMPERATURE_EMOJI[band.value]} {TEMPERATURE_LABELS[band.value]}",
            f"set_temp:{band.value}:{trip_id}",
        )
        for band in Temperature
    ]
    return InlineKeyboardMarkup([
        [
            _button(f"{mark(conditions['rain'])}☔ Rain", f"toggle_rain:{trip_id}"),
            _button(f"{mark(conditions['swimming'])}🏊 Swimming", f"toggle_swimming:{trip_id}"),
        ],
        [_button(f"{mark(conditions['minimize_weight'])}⚖️ Minimize weight", f"toggle_weight:{trip_id}")],
        temperature_row[:2],
        temperature_row[2:],
        [_button("⬅️ Back", f"back_to_list:{trip_id}")],
    ])


def meals_keyboard(trip: TripRecord) -> InlineKeyboardMarkup:
    trip_id = trip["id"]
    rows = [
        [_button(format_meal_label(meal), f"select_meal:{trip_id}:{index}")]
        for index, meal in enumerate(trip["meals"])
    ]
    rows.append([_button("⬅️ Back", f"back_to_list:{trip_id}")])
    return InlineKeyboardMarkup(rows)


def dishes_keyboard(trip_id: int, meal_index: int, dishes: list[Dish]) -> InlineKeyboardMarkup:
    rows = [
        [_button(f"{dish['emoji']} {dish['name']}", f"select_dish:{trip_id}:{meal_index}:{dish['id']}")]
        for dish in dishes
    ]
    rows.append([_button("⬅️ Back to meals", f"back_to_meals:{trip_id}")])
    return InlineKeyboardMarkup(rows)


def trips_keyboard(trips: list[TripRecord]) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup([
        [_button(f'Open "{trip["name"]}"', f"open_list:{trip['id']}")] for trip in trips
    ])
