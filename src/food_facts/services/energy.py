"""Calorie resolution for raw FDC food records."""

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from food_facts.domain.nutrition import EnergyEstimate, NutrientReading
from food_facts.services.nutrients import (
    as_mapping,
    as_number,
    format_number,
    parse_number,
    read_nutrients,
    round_half_up,
)
from food_facts.services.serving import declared_serving

KJ_PER_KCAL = 4.184
NITROGEN_TO_PROTEIN = 6.25
GRAM_UNITS = frozenset({"g", "gram", "grams", "grm"})


@dataclass(frozen=True)
class NutrientMatcher:
    """Identifies one nutrient across the FDC identifier conventions."""

    ids: tuple[int, ...] = ()
    numbers: tuple[str, ...] = ()
    names: tuple[str, ...] = ()
    unit: str | None = None

    def find(self, readings: Sequence[NutrientReading]) -> float | None:
        """Return the first value matched by id, then number, then name."""
        probes: tuple[Callable[[NutrientReading], bool], ...] = (
            lambda reading: reading.id in self.ids,
            lambda reading: reading.number in self.numbers,
            lambda reading: reading.name in self.names
            and (self.unit is None or reading.unit == self.unit),
        )
        for probe in probes:
            for reading in readings:
                if reading.value is not None and probe(reading):
                    return reading.value
        return None


ENERGY_KCAL_BY_ID = NutrientMatcher(ids=(1008,))
ENERGY_KCAL_BY_NUMBER = NutrientMatcher(numbers=("208",))
ENERGY_KCAL_BY_NAME = NutrientMatcher(names=("energy",), unit="kcal")
ENERGY_KJ_BY_NAME = NutrientMatcher(names=("energy",), unit="kj")

PROTEIN = NutrientMatcher(ids=(1003,), numbers=("203",), names=("protein",))
NITROGEN = NutrientMatcher(ids=(1002,), numbers=("202",), names=("nitrogen",))
TOTAL_FAT = NutrientMatcher(
    ids=(1004,),
    numbers=("204",),
    names=("total lipid (fat)", "total fat (nlea)"),
)
TOTAL_FAT_NLEA = NutrientMatcher(ids=(1085,), numbers=("298",))
CARBOHYDRATE = NutrientMatcher(ids=(1005,), numbers=("205",))
ALCOHOL = NutrientMatcher(ids=(1006, 1018), numbers=("221",))

ATWATER_FACTORS = {
    "protein": 4.0,
    "fat": 9.0,
    "carbohydrate": 4.0,
    "alcohol": 7.0,
}

EnergyAttempt = Callable[[Sequence[NutrientReading]], float | None]


def _positive(value: float | None) -> float | None:
    if value is not None and value > 0:
        return value
    return None


def _energy_by_id(readings: Sequence[NutrientReading]) -> float | None:
    return _find_positive(ENERGY_KCAL_BY_ID, readings)


def _energy_by_number(readings: Sequence[NutrientReading]) -> float | None:
    return _find_positive(ENERGY_KCAL_BY_NUMBER, readings)


def _energy_by_name_kcal(readings: Sequence[NutrientReading]) -> float | None:
    return _find_positive(ENERGY_KCAL_BY_NAME, readings)


def _energy_by_name_kj(readings: Sequence[NutrientReading]) -> float | None:
    kilojoules = _find_positive(ENERGY_KJ_BY_NAME, readings)
    if kilojoules is None:
        return None
    return kilojoules / KJ_PER_KCAL


def _energy_from_macros(readings: Sequence[NutrientReading]) -> float | None:
    """Estimate kcal per 100 g from macronutrients with Atwater factors."""
    macros = macro_grams(readings)
    if not any(grams > 0 for grams in macros.values()):
        return None
    total = sum(grams * ATWATER_FACTORS[name] for name, grams in macros.items())
    if not math.isfinite(total):
        return None
    return _positive(float(round_half_up(total)))


DIRECT_ENERGY_ATTEMPTS: tuple[EnergyAttempt, ...] = (
    _energy_by_id,
    _energy_by_number,
    _energy_by_name_kcal,
    _energy_by_name_kj,
)
ENERGY_ATTEMPTS: tuple[EnergyAttempt, ...] = (
    *DIRECT_ENERGY_ATTEMPTS,
    _energy_from_macros,
)


def macro_grams(readings: Sequence[NutrientReading]) -> dict[str, float]:
    """Return protein, fat, carbohydrate and alcohol grams; missing ones are 0."""
    protein = PROTEIN.find(readings)
    if protein is None:
        nitrogen = NITROGEN.find(readings)
        if nitrogen is not None:
            protein = nitrogen * NITROGEN_TO_PROTEIN
    fat = TOTAL_FAT.find(readings)
    if fat is None:
        fat = TOTAL_FAT_NLEA.find(readings)
    return {
        "protein": protein or 0.0,
        "fat": fat or 0.0,
        "carbohydrate": CARBOHYDRATE.find(readings) or 0.0,
        "alcohol": ALCOHOL.find(readings) or 0.0,
    }


def energy_per_100g(record: object) -> float | None:
    """Return kcal per 100 g from direct energy fields or macros, if any."""
    readings = read_nutrients(record)
    for attempt in ENERGY_ATTEMPTS:
        energy = attempt(readings)
        if energy is not None:
            return energy
    return None


def label_calories(record: object) -> float | None:
    """Return positive Branded label calories (per serving), if present."""
    label = as_mapping(as_mapping(record).get("labelNutrients"))
    calories = as_number(as_mapping(label.get("calories")).get("value"))
    return _positive(calories)


def is_branded(record: object) -> bool:
    data_type = as_mapping(record).get("dataType")
    return isinstance(data_type, str) and data_type.strip().lower() == "branded"


def resolve_energy(record: object) -> EnergyEstimate:
    """Resolve a best-effort calorie count and the basis it is expressed per.

    Branded label calories win. Otherwise energy per 100 g comes from the
    direct energy fields or, failing those, an Atwater estimate, and is scaled
    to the declared serving when that serving is given in grams.
    """
    calories = label_calories(record)
    if calories is not None:
        return EnergyEstimate(round_half_up(calories), _serving_basis(record))

    energy = energy_per_100g(record)
    serving_grams = _serving_grams(record)
    if energy is not None and serving_grams is not None:
        scaled = energy * serving_grams / 100
        if math.isfinite(scaled):
            return EnergyEstimate(
                round_half_up(scaled), f"{format_number(serving_grams)} g"
            )
    elif energy is not None:
        return EnergyEstimate(round_half_up(energy), "100 g")

    if is_branded(record):
        return EnergyEstimate(0, _serving_basis(record))
    return EnergyEstimate(0, "100 g")


def _find_positive(
    matcher: NutrientMatcher, readings: Sequence[NutrientReading]
) -> float | None:
    positive = [reading for reading in readings if (reading.value or 0) > 0]
    return matcher.find(positive)


def _serving_size(record: object) -> float | None:
    return _positive(parse_number(as_mapping(record).get("servingSize")))


def _serving_unit(record: object) -> str:
    unit = as_mapping(record).get("servingSizeUnit")
    return unit.strip() if isinstance(unit, str) else ""


def _serving_grams(record: object) -> float | None:
    size = _serving_size(record)
    if size is None or _serving_unit(record).lower() not in GRAM_UNITS:
        return None
    return size


def _serving_basis(record: object) -> str:
    return declared_serving(record) or "serving"
