"""
Domain schema — trips, meals, dishes and the catalog rules they draw from.

Records are TypedDicts so they stay JSON-serialisable end to end.
Enums use str mixin for easy serialisation.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TypedDict


# ─── Enums ────────────────────────────────────────



class Temperature(str, Enum):
    COLD = "cold"
    COOL = "cool"
    WARM = "warm"
    HOT = "hot"


class TimeOfDay(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"


class Unit(str, Enum):
    PIECES = "pcs"
    KILOGRAMS = "kg"
    LITERS = "l"


class Condition(str, Enum):
    """Boolean trip conditions that can be toggled from the chat."""

    RAIN = "rain"
    SWIMMING = "swimming"
    MINIMIZE_WEIGHT = "minimize_weight"


MEALS_PER_DAY = tuple(TimeOfDay)


# ─── Items ────────────────────────────────────────


class Gear(TypedDict):
    name: str
    qty: float
    emoji: str


class Product(TypedDict):
    name: str
    qty: float
    unit: str  # Unit value
    emoji: str


class GearRule(TypedDict):
    """Catalog gear entry. Flagged rules scale with headcount."""

    item: Gear
    dependant_on_people: bool


class ProductRule(TypedDict):
    """Catalog food entry. Food is always scaled by headcount."""

    item: Product
    dependant_on_people: bool


class GearSet(TypedDict):
    gear: list[GearRule]
    products: list[ProductRule]


# ─── Dishes & Meals ───────────────────────────────


class Dish(TypedDict):
    id: str
    name: str
    emoji: str
    gear: list[Gear]  # per trip
    products: list[Product]  # per person


class Meal(TypedDict):
    day_number: int
    time_of_day: str  # TimeOfDay value
    dish: Dish  # value copy taken at assignment time


# ─── Trip Record ──────────────────────────────────


class Conditions(TypedDict):
    rain: bool
    swimming: bool
    minimize_weight: bool  # stored and toggleable, not read by the calculator
    temperature: str  # Temperature value


class TripRecord(TypedDict):
    id: int | None  # assigned by the store
    owner_id: str
    name: str
    people: int
    days: int
    conditions: Conditions
    meals: list[Meal]
    created_at: datetime
    updated_at: datetime


class TripPatch(TypedDict, total=False):
    """Partial update for a TripRecord. Absent keys are left unchanged."""

    name: str
    people: int
    days: int
    conditions: Conditions
    meals: list[Meal]


# ─── Aggregation Result ───────────────────────────


class Manifest(TypedDict):
    gear: list[Gear]
    products: list[Product]


def default_conditions() -> Conditions:
    return Conditions(
        rain=False,
        swimming=False,
        minimize_weight=False,
        temperature=Temperature.COOL.value,
    )
