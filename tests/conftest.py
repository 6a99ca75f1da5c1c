"""Shared test fixtures — a small deterministic catalog and trip builders."""

from __future__ import annotations

import copy
import random
from datetime import datetime, timezone

import pytest
import pytest_asyncio

from src.catalog.loader import Catalog
from src.state import Meal, TripRecord


def _gear(name, qty, per_person, emoji="•"):
    return {"item": {"name": name, "qty": qty, "emoji": emoji}, "dependant_on_people": per_person}


def _food(name, qty, unit, emoji="•"):
    return {"item": {"name": name, "qty": qty, "unit": unit, "emoji": emoji}, "dependant_on_people": True}


CATALOG_DATA = {
    "base": {
        "gear": [_gear("Tent", 1, False, "⛺"), _gear("Sleeping bag", 1, True, "🛏️")],
        "products": [_food("Tea", 0.02, "kg", "🍵")],
    },
    "conditional": {
        "rain": {
            "gear": [_gear("Rain jacket", 1, True, "🧥"), _gear("Tarp", 1, False)],
            "products": [_food("Tea", 0.01, "kg", "🍵")],
        },
        "swimming": {"gear": [_gear("Towel", 1, True)], "products": []},
    },
    "temperature": {
        "cold": {
            "gear": [_gear("Warm jacket", 1, True), _gear("Rain jacket", 3, False, "🧥")],
            "products": [_food("Chocolate", 0.1, "kg")],
        },
        "cool": {"gear": [_gear("Warm jacket", 1, True)], "products": []},
        "warm": {"gear": [_gear("Sun hat", 1, True)], "products": []},
        "hot": {"gear": [_gear("Sun hat", 1, True)], "products": [_food("Water", 1, "l")]},
    },
    "dishes": [
        {
            "id": "porridge",
            "name": "Porridge",
            "emoji": "🥣",
            "gear": [{"name": "Pot", "qty": 1, "emoji": "🍲"}],
            "products": [{"name": "Grain", "qty": 0.1, "unit": "kg", "emoji": "🌾"}],
        },
        {
            "id": "stew",
            "name": "Stew",
            "emoji": "🍛",
            "gear": [{"name": "Pot", "qty": 2, "emoji": "🍲"}, {"name": "Stove", "qty": 1, "emoji": "🔥"}],
            "products": [
                {"name": "Canned meat", "qty": 1, "unit": "pcs", "emoji": "🥫"},
                {"name": "Grain", "qty": 0.05, "unit": "kg", "emoji": "🌾"},
            ],
        },
        {
            "id": "sandwich",
            "name": "Sandwich",
            "emoji": "🥪",
            "gear": [],
            "products": [{"name": "Bread", "qty": 0.2, "unit": "kg", "emoji": "🍞"}],
        },
    ],
}


@pytest.fixture
def catalog_data() -> dict:
    return copy.deepcopy(CATALOG_DATA)


@pytest.fixture
def catalog(catalog_data) -> Catalog:
    return Catalog.from_dict(catalog_data)


@pytest.fixture
def make_trip(catalog):
    """Build an in-memory TripRecord; meals default to porridge for every slot."""

    def _make(dish_ids: list[str] | None = None, **overrides) -> TripRecord:
        days = overrides.pop("days", 1)
        dish_ids = dish_ids or ["porridge"] * (days * 3)
        slots = ("breakfast", "lunch", "dinner")
        meals = [
            Meal(day_number=i // 3 + 1, time_of_day=slots[i % 3], dish=catalog.get_dish(dish_id))
            for i, dish_id in enumerate(dish_ids)
        ]
        now = datetime(2024, 6, 1, 12, 0, 0, 123456, tzinfo=timezone.utc)
        trip = TripRecord(
            id=None,
            owner_id="user-1",
            name="Lake weekend",
            people=1,
            days=days,
            conditions={"rain": False, "swimming": False, "minimize_weight": False, "temperature": "cool"},
            meals=meals,
            created_at=now,
            updated_at=now,
        )
        conditions = overrides.pop("conditions", {})
        trip["conditions"] = {**trip["conditions"], **conditions}
        trip.update(overrides)
        return trip

    return _make


@pytest_asyncio.fixture
async def async_db(tmp_path):
    """Create a throwaway SQLite database for testing."""
    from src.db.persistence import TripRepository

    db_url = f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"
    repo = TripRepository(db_url)
    await repo.init_db()
    yield repo
    await repo.close()


@pytest.fixture
def service(async_db, catalog):
    from src.services.trip_service import TripService

    return TripService(async_db, catalog, random.Random(42), max_people=30, max_days=14, max_trips=3)
