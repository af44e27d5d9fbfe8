"""Shared test fixtures."""

from dataclasses import dataclass, field

import pytest

from food_facts.adapters.fdc_client import FdcClient
from food_facts.config import Settings
from food_facts.containers import AppContainer
from food_facts.errors import FetchFailedError
from food_facts.services.lookup import FoodLookupService
from food_facts.services.scan import ScanService, VisionClient


@dataclass
class FakeFdcClient(FdcClient):
    """FDC client returning canned payloads keyed by data type."""

    search_payloads: dict[str, dict[str, object]] = field(default_factory=dict)
    details: dict[int, dict[str, object]] = field(default_factory=dict)
    search_calls: list[tuple[str, int, str | None, int]] = field(default_factory=list)
    detail_calls: list[int] = field(default_factory=list)
    failures_remaining: int = 0

    async def search_foods(
        self,
        query: str,
        *,
        page: int = 1,
        data_type: str | None = None,
        page_size: int = 25,
    ) -> dict[str, object]:
        self.search_calls.append((query, page, data_type, page_size))
        self._maybe_fail()
        return self.search_payloads.get(data_type or "", {"foods": [], "totalHits": 0})

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        self.detail_calls.append(fdc_id)
        self._maybe_fail()
        if fdc_id not in self.details:
            raise FetchFailedError(f"FDC detail {fdc_id} failed: 404")
        return self.details[fdc_id]

    def _maybe_fail(self) -> None:
        if self.failures_remaining > 0:
            self.failures_remaining -= 1
            raise FetchFailedError("FDC request timed out")


@dataclass
class FakeVisionClient(VisionClient):
    """Vision client returning a canned scan."""

    response: dict[str, object] = field(
        default_factory=lambda: {
            "items": [
                {
                    "name": "Chicken breast",
                    "portion_desc": "1 piece",
                    "portion_grams": 150,
                },
                {"name": "brown rice", "portion_desc": "1 cup", "portion_grams": 195},
                {
                    "name": "chicken breast ",
                    "portion_desc": "1 piece",
                    "portion_grams": 140,
                },
            ]
        }
    )
    calls: list[dict[str, object]] = field(default_factory=list)

    async def extract(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        image_data_url: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        self.calls.append(
            {
                "model": model,
                "image_data_url": image_data_url,
                "schema": schema,
                "prompt": prompt,
            }
        )
        return self.response


def chicken_search_payload() -> dict[str, object]:
    return {
        "totalHits": 3,
        "foods": [
            {
                "fdcId": 3,
                "description": "Fried Chicken",
                "dataType": "Foundation",
                "foodNutrients": [
                    {
                        "nutrientId": 1008,
                        "nutrientName": "Energy",
                        "unitName": "KCAL",
                        "value": 250,
                    },
                ],
            },
            {
                "fdcId": 2,
                "description": "Chicken Breast, Raw",
                "dataType": "Foundation",
                "foodNutrients": [
                    {
                        "nutrientNumber": "208",
                        "nutrientName": "Energy",
                        "unitName": "KCAL",
                        "value": 120,
                    },
                ],
            },
            {
                "fdcId": 1,
                "description": "Chicken",
                "dataType": "Foundation",
                "foodNutrients": [],
            },
        ],
    }


@pytest.fixture
def settings() -> Settings:
    return Settings(
        fdc_api_key="fdc-key",
        openai_api_key="openai-key",
    )


@pytest.fixture
def fdc_client() -> FakeFdcClient:
    return FakeFdcClient()


@pytest.fixture
def vision_client() -> FakeVisionClient:
    return FakeVisionClient()


@pytest.fixture
def container(
    settings: Settings,
    fdc_client: FakeFdcClient,
    vision_client: FakeVisionClient,
) -> AppContainer:
    lookup_service = FoodLookupService(
        fdc_client=fdc_client,
        page_size=settings.search_page_size,
        retry_delay_seconds=0,
    )
    scan_service = ScanService(
        client=vision_client,
        model=settings.openai_model,
        reasoning_effort=settings.openai_reasoning_effort,
        store=settings.openai_store,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        lookup_service=lookup_service,
        scan_service=scan_service,
        close_resources=close_resources,
    )
