"""Error taxonomy shared by the calculator, the service layer and the handlers."""

from __future__ import annotations


class CampingListError(Exception):
    """Base class for every error raised by the camping list domain."""


class ValidationError(CampingListError, ValueError):
    """User input out of range. Recovered by re-prompting for the same field."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class CapacityError(CampingListError):
    """Owner already has the maximum number of trips."""

    def __init__(self, limit: int) -> None:
        super().__init__(f"Trip limit reached ({limit})")
        self.limit = limit


class NotFoundError(CampingListError, LookupError):
    """Trip id absent, or not owned by the requesting user."""

    def __init__(self, trip_id: int) -> None:
        super().__init__(f"Trip {trip_id} not found")
        self.trip_id = trip_id


class CatalogError(CampingListError):
    """Corrupt or malformed catalog data. Fatal at startup."""


class InvalidUnitError(CatalogError, ValueError):
    def __init__(self, unit: str, item_name: str = "") -> None:
        where = f" on '{item_name}'" if item_name else ""
        super().__init__(f"Invalid unit: {unit!r}{where}")
        self.unit = unit


class MissingDishError(CatalogError, LookupError):
    def __init__(self, dish_id: str | None, meal_index: int | None = None) -> None:
        where = f" (meal #{meal_index})" if meal_index is not None else ""
        super().__init__(f"Dish {dish_id!r} not found in catalog{where}")
        self.dish_id = dish_id
        self.meal_index = meal_index
