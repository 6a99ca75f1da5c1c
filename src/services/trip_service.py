"""Trip lifecycle — create, configure and aggregate camping trips."""

from __future__ import annotations

import logging
import random

from src.catalog.loader import Catalog
from src.db.models import utcnow
from src.db.persistence import TripRepository
from src.engine.calculator import compute_manifest
from src.errors import CapacityError, NotFoundError, ValidationError
from src.state import (
    MEALS_PER_DAY,
    Condition,
    Manifest,
    Meal,
    Temperature,
    TripPatch,
    TripRecord,
    default_conditions,
)

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 64


def parse_positive_int(text: str, field: str) -> int:
    """Parse chat input as a whole number greater than zero."""
    try:
        value = int(text.strip())
    except (ValueError, AttributeError):
        raise ValidationError(field, "Please enter a whole number greater than 0.") from None
    if value <= 0:
        raise ValidationError(field, "Please enter a whole number greater than 0.")
    return value


def validate_range(value: int, maximum: int, field: str) -> int:
    if value <= 0:
        raise ValidationError(field, f"The {field} count must be greater than 0.")
    if value > maximum:
        raise ValidationError(field, f"The {field} count can't be more than {maximum}.")
    return value


class TripService:
    """Operations on a single owner's trips.

    The repository is the single source of truth: every mutation re-reads the
    current record first, and returns the freshly stored record afterwards.

    Args:
        repo: TripRepository instance.
        catalog: Validated, read-only catalog.
        rng: Source of randomness for initial dish picks. Inject a seeded
            ``random.Random`` for reproducible assignments.
    """

    def __init__(
        self,
        repo: TripRepository,
        catalog: Catalog,
        rng: random.Random | None = None,
        *,
        max_people: int = 30,
        max_days: int = 14,
        max_trips: int = 10,
    ) -> None:
        self.repo = repo
        self.catalog = catalog
        self.rng = rng or random.Random()
        self.max_people = max_people
        self.max_days = max_days
        self.max_trips = max_trips

    def generate_meals(self, days: int) -> list[Meal]:
        """Build days * 3 meal slots, each with a randomly picked dish."""
        dish_ids = self.catalog.dish_ids
        return [
            Meal(
                day_number=day,
                time_of_day=time_of_day.value,
                dish=self.catalog.get_dish(self.rng.choice(dish_ids)),
            )
            for day in range(1, days + 1)
            for time_of_day in MEALS_PER_DAY
        ]

    # ─── Queries ─────────────────────────────────

    async def get_trip(self, owner_id: str, trip_id: int) -> TripRecord:
        trip = await self.repo.get_trip(owner_id, trip_id)
        if trip is None:
            raise NotFoundError(trip_id)
        return trip

    async def list_trips(self, owner_id: str) -> list[TripRecord]:
        return await self.repo.list_trips(owner_id)

    async def build_manifest(self, owner_id: str, trip_id: int) -> tuple[TripRecord, Manifest]:
        trip = await self.get_trip(owner_id, trip_id)
        return trip, compute_manifest(trip, self.catalog)

    # ─── Mutations ───────────────────────────────

    async def create_trip(self, owner_id: str) -> TripRecord:
        count = await self.repo.count_trips(owner_id)
        if count >= self.max_trips:
            raise CapacityError(self.max_trips)

        now = utcnow()
        record = TripRecord(
            id=None,
            owner_id=owner_id,
            name=f"Trip #{count + 1}",
            people=1,
            days=1,
            conditions=default_conditions(),
            meals=self.generate_meals(1),
            created_at=now,
            updated_at=now,
        )
        return await self.repo.create_trip(record)

    async def _update(self, owner_id: str, trip_id: int, patch: TripPatch) -> TripRecord:
        await self.repo.update_trip(owner_id, trip_id, patch)
        return await self.get_trip(owner_id, trip_id)

    async def rename(self, owner_id: str, trip_id: int, name: str) -> TripRecord:
        name = (name or "").strip()
        if not name:
            raise ValidationError("name", "The name can't be empty.")
        if len(name) > MAX_NAME_LENGTH:
            raise ValidationError("name", f"The name can't be longer than {MAX_NAME_LENGTH} characters.")
        await self.get_trip(owner_id, trip_id)
        return await self._update(owner_id, trip_id, {"name": name})

    async def set_people(self, owner_id: str, trip_id: int, people: int) -> TripRecord:
        validate_range(people, self.max_people, "people")
        await self.get_trip(owner_id, trip_id)
        return await self._update(owner_id, trip_id, {"people": people})

    async def set_days(self, owner_id: str, trip_id: int, days: int) -> TripRecord:
        """Change the trip length. All meal assignments are regenerated."""
        validate_range(days, self.max_days, "days")
        await self.get_trip(owner_id, trip_id)
        return await self._update(owner_id, trip_id, {"days": days, "meals": self.generate_meals(days)})

    async def set_meal_dish(self, owner_id: str, trip_id: int, meal_index: int, dish_id: str) -> TripRecord:
        trip = await self.get_trip(owner_id, trip_id)
        meals = trip["meals"]
        if not 0 <= meal_index < len(meals):
            raise ValidationError("meal", f"Meal #{meal_index + 1} does not exist in this trip.")
        if not self.catalog.has_dish(dish_id):
            raise ValidationError("dish", f"Unknown dish '{dish_id}'.")

        meals = [dict(meal) for meal in meals]
        meals[meal_index]["dish"] = self.catalog.get_dish(dish_id)
        return await self._update(owner_id, trip_id, {"meals": meals})

    async def toggle_condition(self, owner_id: str, trip_id: int, name: str) -> TripRecord:
        try:
            condition = Condition(name)
        except ValueError:
            raise ValidationError("conditions", f"Unknown condition '{name}'.") from None

        trip = await self.get_trip(owner_id, trip_id)
        conditions = dict(trip["conditions"])
        conditions[condition.value] = not conditions[condition.value]
        return await self._update(owner_id, trip_id, {"conditions": conditions})

    async def set_temperature(self, owner_id: str, trip_id: int, band: str) -> TripRecord:
        try:
            temperature = Temperature(band)
        except ValueError:
            raise ValidationError("temperature", f"Unknown temperature '{band}'.") from None

        trip = await self.get_trip(owner_id, trip_id)
        conditions = dict(trip["conditions"])
        conditions["temperature"] = temperature.value
        return await self._update(owner_id, trip_id, {"conditions": conditions})

    async def delete_trip(self, owner_id: str, trip_id: int) -> None:
        await self.repo.delete_trip(owner_id, trip_id)
