"""Tests for the gear and food list calculator."""

from __future__ import annotations

import copy

import pytest

from src.engine.calculator import compute_manifest, merge_gear, merge_product
from src.errors import InvalidUnitError, MissingDishError


def _gear(manifest) -> dict:
    return {item["name"]: item["qty"] for item in manifest["gear"]}


def _food(manifest) -> dict:
    return {(item["name"], item["unit"]): item["qty"] for item in manifest["products"]}


class TestMergeHelpers:
    def test_gear_merge_keeps_maximum(self):
        gear = {}
        merge_gear(gear, {"name": "Pot", "qty": 1, "emoji": "🍲"}, 1)
        merge_gear(gear, {"name": "Pot", "qty": 1, "emoji": "🍲"}, 3)
        merge_gear(gear, {"name": "Pot", "qty": 1, "emoji": "🍲"}, 2)
        assert gear["Pot"]["qty"] == 3

    def test_product_merge_adds(self):
        products = {}
        item = {"name": "Rice", "qty": 0.1, "unit": "kg", "emoji": "🍚"}
        merge_product(products, item, 0.5)
        merge_product(products, item, 0.25)
        assert products[("Rice", "kg")]["qty"] == pytest.approx(0.75)

    def test_product_merge_separates_units(self):
        products = {}
        merge_product(products, {"name": "Milk", "qty": 1, "unit": "l", "emoji": ""}, 1)
        merge_product(products, {"name": "Milk", "qty": 1, "unit": "pcs", "emoji": ""}, 2)
        assert set(products) == {("Milk", "l"), ("Milk", "pcs")}

    def test_product_merge_rejects_unknown_unit(self):
        with pytest.raises(InvalidUnitError):
            merge_product({}, {"name": "Salt", "qty": 1, "unit": "spoon", "emoji": ""}, 1)


class TestConcreteScenario:
    def test_two_people_rain_cold_three_porridge_meals(self, catalog, make_trip):
        trip = make_trip(people=2, conditions={"rain": True, "temperature": "cold"})
        manifest = compute_manifest(trip, catalog)
        gear = _gear(manifest)
        food = _food(manifest)

        assert food[("Grain", "kg")] == pytest.approx(0.6)
        assert gear["Pot"] == 1
        # Rain and cold both request a rain jacket: 1 per person (2) vs 3 flat
        assert gear["Rain jacket"] == 3
        assert gear["Tarp"] == 1
        assert gear["Warm jacket"] == 2
        assert food[("Chocolate", "kg")] == pytest.approx(0.2)
        assert "Towel" not in gear


class TestScaling:
    def test_doubling_people_doubles_food_and_keeps_flat_gear(self, catalog, make_trip):
        small = compute_manifest(make_trip(["porridge", "stew", "sandwich"], people=3), catalog)
        large = compute_manifest(make_trip(["porridge", "stew", "sandwich"], people=6), catalog)

        small_food, large_food = _food(small), _food(large)
        assert small_food.keys() == large_food.keys()
        for key, qty in small_food.items():
            assert large_food[key] == pytest.approx(qty * 2)

        assert _gear(small)["Tent"] == _gear(large)["Tent"] == 1
        assert _gear(small)["Pot"] == _gear(large)["Pot"] == 2
        assert _gear(large)["Sleeping bag"] == 6

    def test_flagged_gear_scales_with_people(self, catalog, make_trip):
        manifest = compute_manifest(make_trip(people=4, conditions={"swimming": True}), catalog)
        assert _gear(manifest)["Towel"] == 4


class TestMergePolicies:
    def test_gear_overlap_takes_max_not_sum(self, catalog, make_trip):
        trip = make_trip(people=5, conditions={"rain": True, "temperature": "cold"})
        assert _gear(compute_manifest(trip, catalog))["Rain jacket"] == 5

    def test_food_overlap_across_layers_adds(self, catalog, make_trip):
        trip = make_trip(people=2, conditions={"rain": True})
        # base 0.02 * 2 + rain 0.01 * 2
        assert _food(compute_manifest(trip, catalog))[("Tea", "kg")] == pytest.approx(0.06)

    def test_dish_gear_not_multiplied_across_meals(self, catalog, make_trip):
        trip = make_trip(["porridge", "stew", "porridge"], people=4)
        gear = _gear(compute_manifest(trip, catalog))
        assert gear["Pot"] == 2
        assert gear["Stove"] == 1

    def test_dish_food_sums_across_meals(self, catalog, make_trip):
        trip = make_trip(["porridge", "stew", "stew"], people=2)
        food = _food(compute_manifest(trip, catalog))
        assert food[("Grain", "kg")] == pytest.approx((0.1 + 0.05 + 0.05) * 2)
        assert food[("Canned meat", "pcs")] == 4


class TestConditions:
    def test_only_selected_temperature_band_applies(self, catalog, make_trip):
        hot = _gear(compute_manifest(make_trip(conditions={"temperature": "hot"}), catalog))
        assert "Sun hat" in hot
        assert "Warm jacket" not in hot

        cold = _food(compute_manifest(make_trip(conditions={"temperature": "cold"}), catalog))
        assert ("Water", "l") not in cold
        assert ("Chocolate", "kg") in cold

    def test_minimize_weight_does_not_change_manifest(self, catalog, make_trip):
        plain = compute_manifest(make_trip(people=3), catalog)
        light = compute_manifest(make_trip(people=3, conditions={"minimize_weight": True}), catalog)
        assert plain == light

    def test_rain_off_adds_nothing(self, catalog, make_trip):
        gear = _gear(compute_manifest(make_trip(), catalog))
        assert "Tarp" not in gear
        assert "Rain jacket" not in gear


class TestDeterminismAndPurity:
    def test_same_inputs_same_manifest(self, catalog, make_trip):
        trip = make_trip(["stew", "sandwich", "porridge"], people=2, conditions={"rain": True})
        assert compute_manifest(trip, catalog) == compute_manifest(trip, catalog)

    def test_first_insertion_order(self, catalog, make_trip):
        trip = make_trip(["stew", "porridge", "sandwich"], conditions={"rain": True})
        manifest = compute_manifest(trip, catalog)
        assert [g["name"] for g in manifest["gear"]] == [
            "Tent", "Sleeping bag", "Rain jacket", "Tarp", "Warm jacket", "Pot", "Stove",
        ]
        assert [p["name"] for p in manifest["products"]] == ["Tea", "Canned meat", "Grain", "Bread"]

    def test_inputs_are_not_mutated(self, catalog, make_trip):
        trip = make_trip(["stew", "stew", "stew"], people=3, conditions={"rain": True, "temperature": "cold"})
        trip_before = copy.deepcopy(trip)
        base_before = copy.deepcopy(catalog.base)

        compute_manifest(trip, catalog)
        compute_manifest(trip, catalog)

        assert trip == trip_before
        assert catalog.base == base_before
        assert catalog.get_dish("stew")["products"][0]["qty"] == 1

    def test_embedded_dish_survives_catalog_changes(self, catalog, make_trip):
        trip = make_trip(["porridge", "porridge", "porridge"])
        catalog.dishes[0]["products"][0]["qty"] = 10
        food = _food(compute_manifest(trip, catalog))
        assert food[("Grain", "kg")] == pytest.approx(0.3)


class TestErrors:
    def test_meal_without_dish_raises(self, catalog, make_trip):
        trip = make_trip()
        del trip["meals"][1]["dish"]
        with pytest.raises(MissingDishError) as exc_info:
            compute_manifest(trip, catalog)
        assert exc_info.value.meal_index == 1

    def test_dish_with_invalid_unit_raises(self, catalog, make_trip):
        trip = make_trip()
        trip["meals"][0]["dish"]["products"][0]["unit"] = "cup"
        with pytest.raises(InvalidUnitError):
            compute_manifest(trip, catalog)
