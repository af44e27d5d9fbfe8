"""Readers that absorb the schema variance of raw FDC records."""

import math
from collections.abc import Mapping

from food_facts.domain.nutrition import NutrientReading


def as_mapping(value: object) -> Mapping[str, object]:
    """Return the value if it is a mapping, otherwise an empty dict."""
    if isinstance(value, Mapping):
        return value
    return {}


def as_number(value: object) -> float | None:
    """Return a finite float for numeric values, otherwise None.

    Booleans are rejected even though they subclass ``int``.
    """
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    number = float(value)
    if not math.isfinite(number):
        return None
    return number


def parse_number(value: object) -> float | None:
    """Like :func:`as_number` but also accepts numeric strings."""
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    return as_number(value)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up."""
    return math.floor(value + 0.5)


def format_number(value: float) -> str:
    """Render integral values without decimals, others with one decimal."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.1f}"


def read_nutrient(entry: object) -> NutrientReading:
    """Build a :class:`NutrientReading` from one raw nutrient entry.

    FDC nests nutrient metadata under ``nutrient`` in detail records and
    flattens it (``nutrientId``, ``nutrientNumber``, ``nutrientName``,
    ``unitName``) in search results. The nested field wins when both exist.
    """
    raw = as_mapping(entry)
    nested = as_mapping(raw.get("nutrient"))

    nutrient_id = _first_present(nested.get("id"), raw.get("nutrientId"))
    number = _first_present(nested.get("number"), raw.get("nutrientNumber"))
    name = _first_present(nested.get("name"), raw.get("nutrientName"))
    unit = _first_present(nested.get("unitName"), raw.get("unitName"))

    value = as_number(raw.get("amount"))
    if value is None:
        value = as_number(raw.get("value"))

    return NutrientReading(
        id=_as_identifier(nutrient_id),
        number="" if number is None else str(number),
        name="" if name is None else str(name).lower(),
        unit="" if unit is None else str(unit).lower(),
        value=value,
    )


def read_label(entry: object) -> tuple[str | None, str]:
    """Return the original-case name and unit of a raw nutrient entry."""
    raw = as_mapping(entry)
    nested = as_mapping(raw.get("nutrient"))
    name = _first_present(nested.get("name"), raw.get("nutrientName"))
    unit = _first_present(nested.get("unitName"), raw.get("unitName"))
    return (
        name if isinstance(name, str) else None,
        "" if unit is None else str(unit),
    )


def read_nutrients(record: object) -> list[NutrientReading]:
    """Read every entry of a record's ``foodNutrients`` list."""
    entries = as_mapping(record).get("foodNutrients")
    if not isinstance(entries, list):
        return []
    return [read_nutrient(entry) for entry in entries]


def _first_present(*values: object) -> object | None:
    for value in values:
        if value is not None and value != "":
            return value
    return None


def _as_identifier(value: object) -> int | None:
    number = as_number(value)
    if number is None or not number.is_integer():
        return None
    return int(number)
