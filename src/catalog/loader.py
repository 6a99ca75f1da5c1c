"""Catalog loading and validation — base rules, conditional rules, dishes."""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any

from src.errors import CatalogError, InvalidUnitError, MissingDishError
from src.state import Dish, GearSet, Temperature, Unit

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "catalog.json"

CONDITIONAL_SETS = ("rain", "swimming")


def ensure_unit(unit: str, item_name: str = "") -> Unit:
    """Return the Unit for a raw unit string, or raise InvalidUnitError."""
    try:
        return Unit(unit)
    except ValueError:
        raise InvalidUnitError(unit, item_name) from None


class Catalog:
    """Read-only rule sets and dish library, validated once at load."""

    def __init__(
        self,
        base: GearSet,
        conditional: dict[str, GearSet],
        temperature: dict[str, GearSet],
        dishes: list[Dish],
    ) -> None:
        self.base = base
        self.conditional = conditional
        self.temperature = temperature
        self.dishes = dishes
        self._dishes_by_id = {d["id"]: d for d in dishes}

    def __repr__(self) -> str:
        return f"<Catalog dishes={len(self.dishes)} bands={sorted(self.temperature)}>"

    @property
    def dish_ids(self) -> list[str]:
        return [d["id"] for d in self.dishes]

    def has_dish(self, dish_id: str) -> bool:
        return dish_id in self._dishes_by_id

    def get_dish(self, dish_id: str) -> Dish:
        """Return an independent copy of a catalog dish.

        Meals embed the copy, so later catalog changes never reach existing trips.
        """
        dish = self._dishes_by_id.get(dish_id)
        if dish is None:
            raise MissingDishError(dish_id)
        return copy.deepcopy(dish)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Catalog:
        """Build and validate a catalog from its JSON structure."""
        if not isinstance(data, dict):
            raise CatalogError("Catalog must be a JSON object")
        try:
            base = _parse_gear_set(data["base"], "base")
            conditional_raw = _section(data, "conditional")
            conditional = {
                name: _parse_gear_set(conditional_raw[name], f"conditional.{name}")
                for name in CONDITIONAL_SETS
            }
            temperature_raw = _section(data, "temperature")
            temperature = {
                band.value: _parse_gear_set(temperature_raw[band.value], f"temperature.{band.value}")
                for band in Temperature
            }
            raw_dishes = data["dishes"]
        except KeyError as exc:
            raise CatalogError(f"Catalog is missing section {exc}") from exc

        if not isinstance(raw_dishes, list):
            raise CatalogError("dishes: expected a list")
        dishes = [_parse_dish(raw) for raw in raw_dishes]
        if not dishes:
            raise CatalogError("Catalog has no dishes")

        seen: set[str] = set()
        for dish in dishes:
            if dish["id"] in seen:
                raise CatalogError(f"Duplicate dish id {dish['id']!r}")
            seen.add(dish["id"])

        return cls(base=base, conditional=conditional, temperature=temperature, dishes=dishes)


def load_catalog(path: str | Path | None = None) -> Catalog:
    """Read the catalog JSON from disk. Raises CatalogError on malformed data."""
    catalog_path = Path(path) if path else DEFAULT_CATALOG_PATH
    try:
        data = json.loads(catalog_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise CatalogError(f"Cannot read catalog at {catalog_path}: {exc}") from exc

    catalog = Catalog.from_dict(data)
    logger.info("Catalog loaded from %s (%d dishes)", catalog_path, len(catalog.dishes))
    return catalog


# ─── Parsing helpers ─────────────────────────────


def _section(data: dict, key: str) -> dict:
    value = data[key]
    if not isinstance(value, dict):
        raise CatalogError(f"{key}: expected an object")
    return value


def _list(raw: dict, key: str, where: str) -> list:
    value = raw.get(key, [])
    if not isinstance(value, list):
        raise CatalogError(f"{where}: '{key}' must be a list")
    return value


def _require(raw: dict, key: str, kind: type | tuple[type, ...], where: str) -> Any:
    if not isinstance(raw, dict) or key not in raw:
        raise CatalogError(f"{where}: missing '{key}'")
    value = raw[key]
    # bool is an int subclass; never accept it as a quantity
    if isinstance(value, bool) and kind is not bool:
        raise CatalogError(f"{where}: '{key}' has wrong type")
    if not isinstance(value, kind):
        raise CatalogError(f"{where}: '{key}' has wrong type")
    return value


def _parse_gear(raw: dict, where: str) -> dict:
    qty = _require(raw, "qty", (int, float), where)
    if qty < 0:
        raise CatalogError(f"{where}: negative qty")
    return {
        "name": _require(raw, "name", str, where),
        "qty": qty,
        "emoji": raw.get("emoji", ""),
    }


def _parse_product(raw: dict, where: str) -> dict:
    item = _parse_gear(raw, where)
    unit = _require(raw, "unit", str, where)
    item["unit"] = ensure_unit(unit, item["name"]).value
    return item


def _parse_gear_set(raw: dict, where: str) -> GearSet:
    if not isinstance(raw, dict):
        raise CatalogError(f"{where}: expected an object")
    gear = [
        {
            "item": _parse_gear(_require(rule, "item", dict, where), where),
            "dependant_on_people": _require(rule, "dependant_on_people", bool, where),
        }
        for rule in _list(raw, "gear", where)
    ]
    products = [
        {
            "item": _parse_product(_require(rule, "item", dict, where), where),
            "dependant_on_people": rule.get("dependant_on_people", True),
        }
        for rule in _list(raw, "products", where)
    ]
    return GearSet(gear=gear, products=products)


def _parse_dish(raw: dict) -> Dish:
    if not isinstance(raw, dict):
        raise CatalogError("dish: expected an object")
    dish_id = _require(raw, "id", str, "dish")
    where = f"dish {dish_id!r}"
    return Dish(
        id=dish_id,
        name=_require(raw, "name", str, where),
        emoji=raw.get("emoji", ""),
        gear=[_parse_gear(g, where) for g in _list(raw, "gear", where)],
        products=[_parse_product(p, where) for p in _list(raw, "products", where)],
    )
