"""Meal photo scan endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request

from food_facts.api.models import ScanRequest
from food_facts.errors import InvalidInputError

if TYPE_CHECKING:
    from food_facts.containers import AppContainer

router = APIRouter(prefix="/scan", tags=["scan"])


@router.post("/analyze")
async def analyze(body: ScanRequest, request: Request) -> dict[str, object]:
    """Detect ingredients and portion estimates in a meal photo."""
    if not body.image_base64:
        raise InvalidInputError("image_base64 required")
    container: AppContainer = request.app.state.container
    result = await container.scan_service.analyze(body.image_base64)
    return result.model_dump()
