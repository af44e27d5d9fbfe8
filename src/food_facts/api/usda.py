"""FoodData Central endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request

from food_facts.api.models import NormalizeRequest
from food_facts.errors import InvalidInputError
from food_facts.services.normalizer import normalize_nutrients

if TYPE_CHECKING:
    from food_facts.containers import AppContainer

router = APIRouter(prefix="/usda", tags=["usda"])


@router.get("/search")
async def search(request: Request, q: str = "", page: int = 1) -> dict[str, object]:
    """Search Foundation foods, or SR Legacy when Foundation has no match."""
    container: AppContainer = request.app.state.container
    result = await container.lookup_service.search(q, page=page)
    return result.to_payload()


@router.get("/detail/{fdc_id}")
async def detail(fdc_id: int, request: Request) -> dict[str, object]:
    """Return the raw FDC detail record."""
    container: AppContainer = request.app.state.container
    return await container.lookup_service.get_detail(fdc_id)


@router.get("/detail/{fdc_id}/nutrients")
async def detail_nutrients(fdc_id: int, request: Request) -> dict[str, object]:
    """Return the normalized nutrient table of an FDC food."""
    container: AppContainer = request.app.state.container
    nutrients = await container.lookup_service.get_nutrients(fdc_id)
    return {"nutrients": [nutrient.to_payload() for nutrient in nutrients]}


@router.post("/normalize")
async def normalize(body: NormalizeRequest) -> dict[str, object]:
    """Normalize a client-supplied raw detail record."""
    if body.detail is None:
        raise InvalidInputError("detail object required")
    nutrients = normalize_nutrients(body.detail)
    return {"nutrients": [nutrient.to_payload() for nutrient in nutrients]}
