"""Compact search rows and query-aware ranking."""

from collections.abc import Iterable

from food_facts.domain.nutrition import CompactFoodRow
from food_facts.services.energy import resolve_energy
from food_facts.services.nutrients import as_mapping
from food_facts.services.serving import format_serving

UNKNOWN_NAME = "Unknown"


def compact_row(record: object) -> CompactFoodRow:
    """Build the compact search row for one raw record."""
    raw = as_mapping(record)
    energy = resolve_energy(raw)
    description = raw.get("description")
    data_type = raw.get("dataType")
    return CompactFoodRow(
        fdc_id=raw.get("fdcId"),
        name=str(description) if description else UNKNOWN_NAME,
        calories=max(energy.calories, 0),
        unit=format_serving(raw, fallback=energy.per),
        data_type=str(data_type) if data_type else "",
        brand_name=_optional_text(raw.get("brandName")),
        gtin_upc=_optional_text(raw.get("gtinUpc")),
    )


def rank_rows(query: str, rows: Iterable[CompactFoodRow]) -> list[CompactFoodRow]:
    """Order rows by exact, prefix, then substring match against the query.

    Rows within a tier are alphabetical; equal names keep their input order.
    """
    needle = query.strip().lower()

    def sort_key(row: CompactFoodRow) -> tuple[int, str]:
        name = row.name.lower()
        if name == needle:
            tier = 0
        elif name.startswith(needle):
            tier = 1
        elif needle in name:
            tier = 2
        else:
            tier = 3
        return tier, name

    return sorted(rows, key=sort_key)


def compact_search_results(
    query: str, records: Iterable[object]
) -> list[CompactFoodRow]:
    """Compact and rank raw search records for display."""
    return rank_rows(query, [compact_row(record) for record in records])


def _optional_text(value: object) -> str | None:
    if value is None or value == "":
        return None
    return str(value)
