"""Nutrition domain models."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class NutrientReading:
    """Schema-independent view of one raw FDC nutrient entry."""

    id: int | None = None
    number: str = ""
    name: str = ""
    unit: str = ""
    value: float | None = None


@dataclass(frozen=True)
class EnergyEstimate:
    """Calories and the basis they are expressed per, e.g. "100 g"."""

    calories: int
    per: str


@dataclass(frozen=True)
class CompactFoodRow:
    """Compact search result row."""

    fdc_id: int | None
    name: str
    calories: int
    unit: str
    data_type: str
    brand_name: str | None
    gtin_upc: str | None

    def to_payload(self) -> dict[str, object]:
        """Serialize using the upstream camelCase keys."""
        return {
            "fdcId": self.fdc_id,
            "name": self.name,
            "calories": self.calories,
            "unit": self.unit,
            "dataType": self.data_type,
            "brandName": self.brand_name,
            "gtinUpc": self.gtin_upc,
        }


@dataclass(frozen=True)
class CanonicalNutrient:
    """Single row of a normalized nutrient table."""

    name: str
    value: float
    unit: str

    def to_payload(self) -> dict[str, object]:
        return {"name": self.name, "value": self.value, "unit": self.unit}


@dataclass(frozen=True)
class SearchPage:
    """One page of compact search results from a single FDC data type."""

    foods: list[CompactFoodRow] = field(default_factory=list)
    page: int = 1
    page_size: int = 25
    total_hits: int = 0
    data_type: str | None = None

    def to_payload(self) -> dict[str, object]:
        return {
            "foods": [row.to_payload() for row in self.foods],
            "page": self.page,
            "pageSize": self.page_size,
            "totalHits": self.total_hits,
        }
