"""Tests for calorie resolution."""

import pytest

from food_facts.domain.nutrition import EnergyEstimate
from food_facts.services.energy import energy_per_100g, macro_grams, resolve_energy
from food_facts.services.nutrients import read_nutrients


def _nutrient(nutrient_id: int, value: float, name: str = "", unit: str = "") -> dict:
    return {
        "nutrient": {"id": nutrient_id, "name": name, "unitName": unit},
        "amount": value,
    }


def test_branded_label_calories_without_serving_size() -> None:
    record = {"dataType": "Branded", "labelNutrients": {"calories": {"value": 200}}}

    assert resolve_energy(record) == EnergyEstimate(calories=200, per="serving")


def test_branded_label_calories_with_serving_size() -> None:
    record = {
        "dataType": "Branded",
        "servingSize": 28,
        "servingSizeUnit": "g",
        "labelNutrients": {"calories": {"value": 150.4}},
        "foodNutrients": [_nutrient(1008, 536)],
    }

    assert resolve_energy(record) == EnergyEstimate(calories=150, per="28 g")


def test_identifier_energy_scaled_to_gram_serving() -> None:
    record = {
        "dataType": "Foundation",
        "servingSize": 150,
        "servingSizeUnit": "g",
        "foodNutrients": [_nutrient(1008, 120, "Energy", "kcal")],
    }

    assert resolve_energy(record) == EnergyEstimate(calories=180, per="150 g")


def test_non_gram_serving_is_not_scaled() -> None:
    record = {
        "dataType": "SR Legacy",
        "servingSize": 240,
        "servingSizeUnit": "ml",
        "foodNutrients": [_nutrient(1008, 42)],
    }

    assert resolve_energy(record) == EnergyEstimate(calories=42, per="100 g")


def test_legacy_number_energy() -> None:
    record = {"foodNutrients": [{"nutrientNumber": "208", "value": 89}]}

    assert resolve_energy(record) == EnergyEstimate(calories=89, per="100 g")


def test_zero_identifier_energy_falls_through_to_name() -> None:
    record = {
        "foodNutrients": [
            _nutrient(1008, 0),
            {"nutrientName": "Energy", "unitName": "KCAL", "value": 61},
        ]
    }

    assert resolve_energy(record).calories == 61


def test_kilojoules_are_converted() -> None:
    record = {
        "foodNutrients": [{"nutrientName": "Energy", "unitName": "kJ", "value": 418.4}]
    }

    assert energy_per_100g(record) == pytest.approx(100)
    assert resolve_energy(record) == EnergyEstimate(calories=100, per="100 g")


def test_kcal_entry_wins_over_kilojoules() -> None:
    record = {
        "foodNutrients": [
            {"nutrientName": "Energy", "unitName": "kJ", "value": 1000},
            {"nutrientName": "Energy", "unitName": "kcal", "value": 239},
        ]
    }

    assert resolve_energy(record).calories == 239


def test_macro_estimate_when_no_energy_field() -> None:
    record = {
        "dataType": "Foundation",
        "foodNutrients": [
            _nutrient(1003, 20),
            _nutrient(1004, 10),
            _nutrient(1005, 30),
            _nutrient(1018, 0),
        ],
    }

    assert resolve_energy(record) == EnergyEstimate(calories=290, per="100 g")


def test_macro_estimate_uses_nitrogen_when_protein_missing() -> None:
    record = {"foodNutrients": [{"nutrientNumber": "202", "amount": 2}]}

    # 2 g nitrogen -> 12.5 g protein -> 50 kcal
    assert resolve_energy(record).calories == 50


def test_macro_estimate_uses_nlea_fat_and_alcohol() -> None:
    record = {
        "foodNutrients": [
            {"nutrientNumber": "298", "amount": 1},
            {"nutrientNumber": "221", "amount": 10},
        ]
    }

    assert macro_grams(read_nutrients(record)) == {
        "protein": 0.0,
        "fat": 1.0,
        "carbohydrate": 0.0,
        "alcohol": 10.0,
    }
    assert resolve_energy(record).calories == 79


def test_macro_names_match_case_insensitively() -> None:
    record = {
        "foodNutrients": [
            {"nutrientName": "PROTEIN", "value": 5},
            {"nutrientName": "Total Fat (NLEA)", "value": 2},
        ]
    }

    assert resolve_energy(record).calories == 38


def test_unknown_non_branded_record_is_zero_per_100g() -> None:
    assert resolve_energy({"dataType": "Foundation"}) == EnergyEstimate(0, "100 g")
    assert resolve_energy({}) == EnergyEstimate(0, "100 g")


def test_unknown_branded_record_is_zero_per_serving() -> None:
    record = {"dataType": "Branded", "labelNutrients": {"calories": {"value": 0}}}

    assert resolve_energy(record) == EnergyEstimate(0, "serving")


def test_resolve_energy_is_total_for_malformed_input() -> None:
    malformed = {
        "foodNutrients": "oops",
        "labelNutrients": ["calories"],
        "servingSize": "large",
    }

    assert resolve_energy(malformed) == EnergyEstimate(0, "100 g")
    assert resolve_energy(None) == EnergyEstimate(0, "100 g")


def test_fractional_serving_basis() -> None:
    record = {
        "servingSize": 28.35,
        "servingSizeUnit": "GRM",
        "foodNutrients": [_nutrient(1008, 100)],
    }

    assert resolve_energy(record) == EnergyEstimate(calories=28, per="28.4 g")


def test_direct_energy_prefers_identifier_then_number_then_name() -> None:
    by_name = {"nutrientName": "Energy", "unitName": "KCAL", "value": 300}
    by_number = {"nutrientNumber": "208", "value": 200}
    by_id = {"nutrientId": 1008, "value": 100}
    all_three = {"foodNutrients": [by_name, by_number, by_id]}

    assert resolve_energy(all_three).calories == 100
    assert resolve_energy({"foodNutrients": [by_name, by_number]}).calories == 200
    assert resolve_energy({"foodNutrients": [by_name]}).calories == 300


def test_zero_protein_is_not_replaced_by_nitrogen() -> None:
    record = {
        "foodNutrients": [
            _nutrient(1003, 0),
            _nutrient(1002, 2),
            _nutrient(1005, 10),
        ]
    }

    assert macro_grams(read_nutrients(record))["protein"] == 0
    assert resolve_energy(record).calories == 40


def test_overflowing_serving_scale_resolves_to_zero() -> None:
    record = {
        "servingSize": 1e300,
        "servingSizeUnit": "g",
        "foodNutrients": [{"nutrientId": 1008, "value": 1e300}],
    }

    assert resolve_energy(record) == EnergyEstimate(0, "100 g")


def test_overflowing_macro_estimate_is_ignored() -> None:
    record = {"foodNutrients": [{"nutrientId": 1004, "value": 1e308}]}

    assert resolve_energy(record) == EnergyEstimate(0, "100 g")


def test_string_label_calories_are_not_numbers() -> None:
    record = {"dataType": "Branded", "labelNutrients": {"calories": {"value": "200"}}}

    assert resolve_energy(record) == EnergyEstimate(0, "serving")


def test_branded_basis_matches_serving_text() -> None:
    record = {
        "dataType": "Branded",
        "servingSize": "30",
        "servingSizeUnit": " ml ",
        "labelNutrients": {"calories": {"value": 15}},
    }

    assert resolve_energy(record) == EnergyEstimate(15, "30 ml")
