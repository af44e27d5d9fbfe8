"""Human-readable serving descriptions for FDC records."""

from collections.abc import Callable

from food_facts.services.nutrients import as_mapping, format_number, parse_number

DEFAULT_SERVING = "100 g"

ServingAttempt = Callable[[object], str | None]


def declared_serving(record: object) -> str | None:
    """Return "<size> <unit>" for a finite positive ``servingSize``, else None."""
    raw = as_mapping(record)
    size = parse_number(raw.get("servingSize"))
    if size is None or size <= 0:
        return None
    unit = raw.get("servingSizeUnit")
    unit = unit.strip() if isinstance(unit, str) else ""
    return f"{format_number(size)} {unit}" if unit else format_number(size)


def _household_serving(record: object) -> str | None:
    text = as_mapping(record).get("householdServingFullText")
    if not isinstance(text, str):
        return None
    return text.strip() or None


def _first_portion(record: object) -> str | None:
    portions = as_mapping(record).get("foodPortions")
    if not isinstance(portions, list) or not portions:
        return None
    weight = parse_number(as_mapping(portions[0]).get("gramWeight"))
    if weight is None or weight <= 0:
        return None
    return f"{format_number(weight)} g"


SERVING_ATTEMPTS: tuple[ServingAttempt, ...] = (
    declared_serving,
    _household_serving,
    _first_portion,
)


def format_serving(record: object, fallback: str | None = None) -> str:
    """Describe a record's serving, e.g. "150 g" or "1 cup".

    Falls back to ``fallback`` (usually the calorie basis) and then to
    "100 g" when the record declares nothing usable.
    """
    for attempt in SERVING_ATTEMPTS:
        text = attempt(record)
        if text:
            return text
    return fallback or DEFAULT_SERVING
