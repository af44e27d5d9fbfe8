"""Canonical nutrient tables for FDC detail records."""

import locale
from collections.abc import Iterable

from food_facts.domain.nutrition import CanonicalNutrient
from food_facts.services.energy import KJ_PER_KCAL
from food_facts.services.nutrients import (
    as_mapping,
    as_number,
    read_label,
    read_nutrient,
)

LABEL_NUTRIENT_NAMES = {
    "calories": "Energy",
    "totalFat": "Total lipid (fat)",
    "saturatedFat": "Fatty acids, total saturated",
    "transFat": "Fatty acids, total trans",
    "cholesterol": "Cholesterol",
    "sodium": "Sodium, Na",
    "totalCarbohydrate": "Carbohydrate, by difference",
    "dietaryFiber": "Fiber, total dietary",
    "totalSugars": "Sugars, total",
    "addedSugars": "Added sugars",
    "protein": "Protein",
    "vitaminD": "Vitamin D",
    "calcium": "Calcium, Ca",
    "iron": "Iron, Fe",
    "potassium": "Potassium, K",
}

LABEL_NUTRIENT_UNITS = {
    "calories": "kcal",
    "totalFat": "g",
    "saturatedFat": "g",
    "transFat": "g",
    "cholesterol": "mg",
    "sodium": "mg",
    "totalCarbohydrate": "g",
    "dietaryFiber": "g",
    "totalSugars": "g",
    "addedSugars": "g",
    "protein": "g",
    "vitaminD": "mcg",
    "calcium": "mg",
    "iron": "mg",
    "potassium": "mg",
}


def nutrients_from_list(detail: object) -> list[CanonicalNutrient]:
    """Read named, numeric entries of ``foodNutrients``; energy in kJ becomes kcal."""
    entries = as_mapping(detail).get("foodNutrients")
    if not isinstance(entries, list):
        return []
    nutrients: list[CanonicalNutrient] = []
    for entry in entries:
        name, unit = read_label(entry)
        value = read_nutrient(entry).value
        if name is None or value is None:
            continue
        if name.lower() == "energy" and unit.lower() == "kj":
            value, unit = value / KJ_PER_KCAL, "kcal"
        nutrients.append(CanonicalNutrient(name=name, value=value, unit=unit))
    return nutrients


def nutrients_from_label(detail: object) -> list[CanonicalNutrient]:
    """Translate Branded ``labelNutrients`` into canonical FDC names."""
    label = as_mapping(as_mapping(detail).get("labelNutrients"))
    nutrients: list[CanonicalNutrient] = []
    for key, entry in label.items():
        if key not in LABEL_NUTRIENT_NAMES:
            continue
        value = as_number(as_mapping(entry).get("value"))
        if value is None:
            continue
        nutrients.append(
            CanonicalNutrient(
                name=LABEL_NUTRIENT_NAMES[key],
                value=value,
                unit=LABEL_NUTRIENT_UNITS[key],
            )
        )
    return nutrients


def merge_nutrients(nutrients: Iterable[CanonicalNutrient]) -> list[CanonicalNutrient]:
    """Keep one entry per trimmed name.

    The first entry wins unless it is exactly 0 and a later one is nonzero.
    Two different nonzero values keep the first.
    """
    merged: dict[str, CanonicalNutrient] = {}
    for nutrient in nutrients:
        key = nutrient.name.strip()
        existing = merged.get(key)
        if existing is None or (existing.value == 0 and nutrient.value != 0):
            merged[key] = nutrient
    return list(merged.values())


def normalize_nutrients(detail: object) -> list[CanonicalNutrient]:
    """Return the deduplicated nutrient table of a detail record, sorted by name."""
    merged = merge_nutrients(
        [*nutrients_from_list(detail), *nutrients_from_label(detail)]
    )
    return sorted(merged, key=_name_sort_key)


def _name_sort_key(nutrient: CanonicalNutrient) -> tuple[str, str]:
    # Case-insensitive locale collation first; raw name keeps ties deterministic.
    # strxfrm rejects NUL characters, which JSON allows.
    collated = nutrient.name.casefold().replace("\x00", "")
    return locale.strxfrm(collated), nutrient.name
