"""Models for meal photo ingredient scans."""

from pydantic import BaseModel, Field


class ScanItem(BaseModel):
    """Single ingredient detected in a meal photo."""

    name: str
    portion_desc: str
    portion_grams: float = Field(ge=0.0)


class ScanResult(BaseModel):
    """Structured output for an ingredient scan."""

    items: list[ScanItem]
