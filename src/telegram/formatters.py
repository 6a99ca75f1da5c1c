"""Telegram message formatters — trip summaries and the final gear/food list.

All text is produced for ``parse_mode="MarkdownV2"``.
"""

from __future__ import annotations

from telegram.helpers import escape_markdown

from src.state import Manifest, Meal, TripRecord

TEMPERATURE_EMOJI = {"cold": "❄️", "cool": "🌡️", "warm": "☀️", "hot": "🔥"}
TEMPERATURE_LABELS = {"cold": "Cold", "cool": "Cool", "warm": "Warm", "hot": "Hot"}
TIME_OF_DAY_EMOJI = {"breakfast": "🍳", "lunch": "🥘", "dinner": "🍖"}
CONDITION_LABELS = {
    "rain": "☔ Rain",
    "swimming": "🏊 Swimming",
    "minimize_weight": "⚖️ Minimize weight",
}


def md(text: object) -> str:
    """Escape any value for MarkdownV2."""
    return escape_markdown(str(text), version=2)


def format_qty(qty: float) -> str:
    """Drop float noise and trailing zeros: 0.6000000000000001 -> '0.6', 2.0 -> '2'."""
    text = f"{round(qty, 3):.3f}".rstrip("0").rstrip(".")
    if text == "0" and qty > 0:
        return "<0.001"
    return text


def format_manifest(trip_name: str, manifest: Manifest) -> str:
    """Render the aggregated list as two sections, gear then food."""
    lines = [f"*{md(trip_name)}*", "", "*Gear:*"]
    for item in manifest["gear"]:
        lines.append(md(f"{item['emoji']} {item['name']}: {format_qty(item['qty'])} pcs"))

    lines.extend(["", "*Food:*"])
    for item in manifest["products"]:
        lines.append(md(f"{item['emoji']} {item['name']}: {format_qty(item['qty'])} {item['unit']}"))

    return "\n".join(lines)


def format_meal_label(meal: Meal) -> str:
    """Plain-text label used on meal buttons, e.g. 'Day 1 - 🍳 - Oatmeal 🥣'."""
    dish = meal["dish"]
    icon = TIME_OF_DAY_EMOJI.get(meal["time_of_day"], "🍽️")
    return f"Day {meal['day_number']} - {icon} - {dish['name']} {dish['emoji']}".rstrip()


def format_trip_summary(trip: TripRecord) -> str:
    """Build the trip card shown above the trip keyboard."""
    conditions = trip["conditions"]
    active = [label for key, label in CONDITION_LABELS.items() if conditions.get(key)]
    band = conditions["temperature"]
    active.append(f"{TEMPERATURE_EMOJI.get(band, '')} Temperature: {TEMPERATURE_LABELS.get(band, band)}")

    lines = [
        f"*{md(trip['name'])}*",
        "",
        md(f"👥 People: {trip['people']}"),
        md(f"📅 Days: {trip['days']}"),
        "",
        "🌦️ *Conditions:*",
        *(md(line) for line in active),
        "",
        md(f"🍳 Meals: {len(trip['meals'])}"),
    ]
    return "\n".join(lines)


def format_trip_list(trips: list[TripRecord]) -> str:
    if not trips:
        return md("You don't have any lists yet. Create one with /newlist")
    lines = ["*Your lists:*", ""]
    lines.extend(md(f"{i}. {trip['name']}") for i, trip in enumerate(trips, start=1))
    return "\n".join(lines)


def format_start() -> str:
    return (
        "Hi! I'll help you put together a gear and food list for your camping trip. 🏕️\n\n"
        "Main commands:\n"
        "/newlist — Create a new list\n"
        "/mylists — Show your lists\n"
        "/help — Help\n\n"
        "Create your first list with /newlist"
    )


def format_help() -> str:
    """Return the help text listing all available commands."""
    return (
        "🏕️ Camping List Bot — your camping prep helper!\n\n"
        "Commands:\n"
        "/newlist — Create a new gear list\n"
        "/mylists — Show all your lists\n"
        "/help — Show this message\n\n"
        "How it works:\n"
        "1. Create a list with /newlist\n"
        "2. Set the trip parameters (people, days, conditions)\n"
        "3. Pick a dish for every meal\n"
        "4. Generate the final gear and food list!"
    )


def split_message(text: str, max_length: int = 4096) -> list[str]:
    """Split a long message at line boundaries to fit Telegram's limit.

    Manifest lines are short, so lines are packed greedily; a single line over
    the limit is cut into fixed-size pieces.
    """
    if len(text) <= max_length:
        return [text]

    parts: list[str] = []
    current = ""
    for line in text.split("\n"):
        while len(line) > max_length:
            if current.strip():
                parts.append(current.strip())
            current = ""
            parts.append(line[:max_length])
            line = line[max_length:]
        candidate = f"{current}\n{line}" if current else line
        if len(candidate) > max_length:
            if current.strip():
                parts.append(current.strip())
            candidate = line
        current = candidate

    if current.strip():
        parts.append(current.strip())
    return parts
