"""Gear and food list calculator.

Merges the catalog's base rules, condition rules, temperature rules and the
dishes of every meal into one manifest for a trip.

Gear is reusable, so the same item requested by several layers resolves to the
largest requested quantity. Food is consumed, so quantities for the same
(name, unit) are summed. Both maps keep first-insertion order.
"""

from __future__ import annotations

from src.catalog.loader import CONDITIONAL_SETS, Catalog, ensure_unit
from src.errors import MissingDishError
from src.state import Gear, GearSet, Manifest, Product, TripRecord

GearMap = dict[str, Gear]
ProductMap = dict[tuple[str, str], Product]


# ─── Merge helpers ───────────────────────────────


def merge_gear(gear: GearMap, item: Gear, qty: float) -> None:
    """Merge a gear item by name, keeping the larger quantity."""
    existing = gear.get(item["name"])
    if existing is None:
        gear[item["name"]] = Gear(name=item["name"], qty=qty, emoji=item["emoji"])
    elif qty > existing["qty"]:
        existing["qty"] = qty


def merge_product(products: ProductMap, item: Product, qty: float) -> None:
    """Merge a food item by (name, unit), adding quantities."""
    unit = ensure_unit(item["unit"], item["name"]).value
    key = (item["name"], unit)
    existing = products.get(key)
    if existing is None:
        products[key] = Product(name=item["name"], qty=qty, unit=unit, emoji=item["emoji"])
    else:
        existing["qty"] += qty


def apply_gear_set(gear_set: GearSet, people: int, gear: GearMap, products: ProductMap) -> None:
    """Merge one catalog rule layer into the accumulators."""
    for rule in gear_set["gear"]:
        item = rule["item"]
        qty = item["qty"] * people if rule["dependant_on_people"] else item["qty"]
        merge_gear(gear, item, qty)

    for rule in gear_set["products"]:
        item = rule["item"]
        merge_product(products, item, item["qty"] * people)


def apply_meals(trip: TripRecord, gear: GearMap, products: ProductMap) -> None:
    """Merge the dish of every meal, in meal order."""
    people = trip["people"]
    for index, meal in enumerate(trip["meals"]):
        dish = meal.get("dish")
        if not dish or not dish.get("id"):
            raise MissingDishError(None, index)

        for item in dish["gear"]:
            merge_gear(gear, item, item["qty"])
        for item in dish["products"]:
            merge_product(products, item, item["qty"] * people)


# ─── Public API ──────────────────────────────────


def compute_manifest(trip: TripRecord, catalog: Catalog) -> Manifest:
    """Compute the total gear and food required for a trip.

    Neither the trip nor the catalog is modified. The same inputs always give
    the same manifest, in the same order.
    """
    people = trip["people"]
    conditions = trip["conditions"]
    gear: GearMap = {}
    products: ProductMap = {}

    apply_gear_set(catalog.base, people, gear, products)

    for name in CONDITIONAL_SETS:
        if conditions.get(name):
            apply_gear_set(catalog.conditional[name], people, gear, products)
    # minimize_weight does not affect the manifest

    apply_gear_set(catalog.temperature[conditions["temperature"]], people, gear, products)

    apply_meals(trip, gear, products)

    return Manifest(gear=list(gear.values()), products=list(products.values()))
