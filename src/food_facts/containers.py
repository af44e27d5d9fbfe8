"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from food_facts.adapters.fdc_client import HttpxFdcClient
from food_facts.adapters.openai_vision_client import OpenAIVisionClient
from food_facts.config import Settings
from food_facts.services.lookup import FoodLookupService
from food_facts.services.scan import ScanService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    lookup_service: FoodLookupService
    scan_service: ScanService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
        timeout_seconds=resolved_settings.fdc_timeout_seconds,
    )
    lookup_service = FoodLookupService(
        fdc_client=fdc_client,
        page_size=resolved_settings.search_page_size,
        debug=resolved_settings.debug,
        retry_attempts=resolved_settings.fdc_retry_attempts,
    )
    vision_client = OpenAIVisionClient.create(
        resolved_settings.openai_api_key,
        timeout_seconds=resolved_settings.openai_timeout_seconds,
    )
    scan_service = ScanService(
        client=vision_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )

    async def close_resources() -> None:
        await fdc_client.close()
        await vision_client.client.close()

    return AppContainer(
        settings=resolved_settings,
        lookup_service=lookup_service,
        scan_service=scan_service,
        close_resources=close_resources,
    )
