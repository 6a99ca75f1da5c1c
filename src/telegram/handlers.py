"""Telegram handlers — bridge between chat updates and the trip service."""

from __future__ import annotations

import logging

from telegram import CallbackQuery, Update
from telegram.constants import ParseMode
from telegram.error import BadRequest
from telegram.ext import ContextTypes

from src.errors import CapacityError, CatalogError, NotFoundError, ValidationError
from src.services.trip_service import TripService, parse_positive_int
from src.telegram.formatters import (
    format_help,
    format_manifest,
    format_start,
    format_trip_list,
    format_trip_summary,
    md,
    split_message,
)
from src.telegram.keyboards import (
    conditions_keyboard,
    dishes_keyboard,
    meals_keyboard,
    trip_keyboard,
    trips_keyboard,
)

logger = logging.getLogger(__name__)

NOT_FOUND_TEXT = "List not found. It may have been deleted."

EDIT_PROMPTS = {
    "name": "Enter a new name for the list:",
    "people": "Enter the number of people (a number greater than 0):",
    "days": "Enter the number of days (a number greater than 0):",
}

TOGGLE_ACTIONS = {
    "toggle_rain": ("rain", "Rain ☔"),
    "toggle_swimming": ("swimming", "Swimming 🏊"),
    "toggle_weight": ("minimize_weight", "Minimize weight ⚖️"),
}


def _service(context: ContextTypes.DEFAULT_TYPE) -> TripService:
    return context.bot_data["service"]


def _owner_id(update: Update) -> str:
    return str(update.effective_user.id)


async def _safe_edit(query: CallbackQuery, text: str | None = None, reply_markup=None) -> None:
    """Edit the callback message, ignoring Telegram's 'message is not modified'."""
    try:
        if text is None:
            await query.edit_message_reply_markup(reply_markup=reply_markup)
        else:
            await query.edit_message_text(text, parse_mode=ParseMode.MARKDOWN_V2, reply_markup=reply_markup)
    except BadRequest as exc:
        if "not modified" not in str(exc).lower():
            raise
        logger.debug("Edit skipped, message unchanged")


# ─── Commands ────────────────────────────────────


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await update.message.reply_text(format_start())


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await update.message.reply_text(format_help())


async def new_list(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /newlist — create a trip with default settings."""
    owner_id = _owner_id(update)
    service = _service(context)
    try:
        trip = await service.create_trip(owner_id)
    except CapacityError as exc:
        await update.message.reply_text(
            f"You already have the maximum number of lists ({exc.limit}). "
            "Delete the ones you no longer need via /mylists"
        )
        return

    await update.message.reply_text(
        f"Created a new list *{md(trip['name'])}*\\!\n\nNow you can set it up:",
        parse_mode=ParseMode.MARKDOWN_V2,
        reply_markup=trip_keyboard(trip["id"]),
    )


async def my_lists(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /mylists — list the user's trips with open buttons."""
    trips = await _service(context).list_trips(_owner_id(update))
    await update.message.reply_text(
        format_trip_list(trips),
        parse_mode=ParseMode.MARKDOWN_V2,
        reply_markup=trips_keyboard(trips) if trips else None,
    )


# ─── Free-text edits ─────────────────────────────


async def handle_text(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Complete the pending edit (name, people or days) with the typed value.

    Invalid input keeps the edit open and asks again.
    """
    editing = context.user_data.get("editing")
    if not editing:
        await update.message.reply_text("Use /newlist to create a list or /mylists to open one.")
        return

    owner_id = _owner_id(update)
    service = _service(context)
    trip_id = editing["trip_id"]
    field = editing["field"]
    text = update.message.text or ""

    try:
        if field == "name":
            trip = await service.rename(owner_id, trip_id, text)
        elif field == "people":
            trip = await service.set_people(owner_id, trip_id, parse_positive_int(text, field))
        elif field == "days":
            trip = await service.set_days(owner_id, trip_id, parse_positive_int(text, field))
        else:
            logger.warning("Unknown editing field %r for user %s", field, owner_id)
            context.user_data.pop("editing", None)
            return
    except ValidationError as exc:
        await update.message.reply_text(f"{exc.message}\n{EDIT_PROMPTS[field]}")
        return
    except NotFoundError:
        context.user_data.pop("editing", None)
        await update.message.reply_text(NOT_FOUND_TEXT)
        return

    context.user_data.pop("editing", None)
    logger.info("User %s updated %s of trip %s", owner_id, field, trip_id)
    await update.message.reply_text(
        format_trip_summary(trip),
        parse_mode=ParseMode.MARKDOWN_V2,
        reply_markup=trip_keyboard(trip["id"]),
    )


# ─── Callback actions ────────────────────────────


async def _open_list(query, context, owner_id, args) -> None:
    trip = await _service(context).get_trip(owner_id, int(args[0]))
    await _safe_edit(query, format_trip_summary(trip), trip_keyboard(trip["id"]))


async def _start_edit(query, context, owner_id, args, field: str) -> None:
    trip_id = int(args[0])
    await _service(context).get_trip(owner_id, trip_id)
    # One pending edit per user; a new request replaces the old one
    context.user_data["editing"] = {"trip_id": trip_id, "field": field}
    await query.message.reply_text(EDIT_PROMPTS[field])


async def _edit_conditions(query, context, owner_id, args) -> None:
    trip = await _service(context).get_trip(owner_id, int(args[0]))
    await _safe_edit(query, reply_markup=conditions_keyboard(trip))


async def _toggle(query, context, owner_id, args, action: str) -> str:
    name, label = TOGGLE_ACTIONS[action]
    trip = await _service(context).toggle_condition(owner_id, int(args[0]), name)
    await _safe_edit(query, format_trip_summary(trip), conditions_keyboard(trip))
    return f"{label} {'on' if trip['conditions'][name] else 'off'}"


async def _set_temperature(query, context, owner_id, args) -> str:
    band, trip_id = args[0], int(args[1])
    trip = await _service(context).set_temperature(owner_id, trip_id, band)
    await _safe_edit(query, format_trip_summary(trip), conditions_keyboard(trip))
    return f"Temperature: {band}"


async def _edit_dishes(query, context, owner_id, args) -> None:
    trip = await _service(context).get_trip(owner_id, int(args[0]))
    await _safe_edit(query, md("Pick a meal to change its dish:"), meals_keyboard(trip))


async def _select_meal(query, context, owner_id, args) -> None:
    trip_id, meal_index = int(args[0]), int(args[1])
    service = _service(context)
    trip = await service.get_trip(owner_id, trip_id)
    if not 0 <= meal_index < len(trip["meals"]):
        raise ValidationError("meal", "This meal no longer exists.")
    await _safe_edit(
        query,
        md(f"Pick a dish for meal #{meal_index + 1}:"),
        dishes_keyboard(trip_id, meal_index, service.catalog.dishes),
    )


async def _select_dish(query, context, owner_id, args) -> str:
    trip_id, meal_index, dish_id = int(args[0]), int(args[1]), args[2]
    trip = await _service(context).set_meal_dish(owner_id, trip_id, meal_index, dish_id)
    await _safe_edit(query, md("Pick a meal to change its dish:"), meals_keyboard(trip))
    return f"{trip['meals'][meal_index]['dish']['name']} selected"


async def _generate(query, context, owner_id, args) -> None:
    trip, manifest = await _service(context).build_manifest(owner_id, int(args[0]))
    for part in split_message(format_manifest(trip["name"], manifest)):
        await query.message.reply_text(part, parse_mode=ParseMode.MARKDOWN_V2)
    logger.info("Generated list for trip %s (%d gear, %d food)", trip["id"], len(manifest["gear"]), len(manifest["products"]))


async def _delete(query, context, owner_id, args) -> None:
    trip_id = int(args[0])
    await _service(context).delete_trip(owner_id, trip_id)
    editing = context.user_data.get("editing")
    if editing and editing["trip_id"] == trip_id:
        context.user_data.pop("editing", None)
    await query.message.reply_text("List deleted.")
    await query.message.delete()


async def _back_to_lists(query, context, owner_id, args) -> None:
    trips = await _service(context).list_trips(owner_id)
    await _safe_edit(query, format_trip_list(trips), trips_keyboard(trips) if trips else None)


CALLBACK_ACTIONS = {
    "open_list": _open_list,
    "back_to_list": _open_list,
    "edit_name": lambda q, c, o, a: _start_edit(q, c, o, a, "name"),
    "edit_people": lambda q, c, o, a: _start_edit(q, c, o, a, "people"),
    "edit_days": lambda q, c, o, a: _start_edit(q, c, o, a, "days"),
    "edit_conditions": _edit_conditions,
    "toggle_rain": lambda q, c, o, a: _toggle(q, c, o, a, "toggle_rain"),
    "toggle_swimming": lambda q, c, o, a: _toggle(q, c, o, a, "toggle_swimming"),
    "toggle_weight": lambda q, c, o, a: _toggle(q, c, o, a, "toggle_weight"),
    "set_temp": _set_temperature,
    "edit_dishes": _edit_dishes,
    "back_to_meals": _edit_dishes,
    "select_meal": _select_meal,
    "select_dish": _select_dish,
    "generate": _generate,
    "delete": _delete,
    "back_to_lists": _back_to_lists,
}


async def handle_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Route an inline button press to its action and answer the query once."""
    query = update.callback_query
    owner_id = _owner_id(update)
    action, _, rest = (query.data or "").partition(":")
    args = rest.split(":") if rest else []

    handler = CALLBACK_ACTIONS.get(action)
    if handler is None:
        logger.warning("Unknown callback %r from user %s", query.data, owner_id)
        await query.answer()
        return

    try:
        answer = await handler(query, context, owner_id, args)
    except NotFoundError:
        await query.answer()
        await query.message.reply_text(NOT_FOUND_TEXT)
        return
    except ValidationError as exc:
        await query.answer(exc.message, show_alert=True)
        return
    except CatalogError:
        # Corrupt stored or catalog data; left for error_handler to report
        await query.answer()
        raise
    except (ValueError, IndexError):
        logger.warning("Malformed callback %r from user %s", query.data, owner_id, exc_info=True)
        await query.answer()
        return

    await query.answer(answer)


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Log unexpected errors and tell the user something went wrong."""
    logger.error("Error while handling update %s", update, exc_info=context.error)
    if isinstance(update, Update) and update.effective_message:
        await update.effective_message.reply_text(
            "Something went wrong. Please try again, or use /help to see available commands."
        )
