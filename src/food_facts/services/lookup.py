"""Food lookup service integrating USDA FDC."""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from food_facts.adapters.fdc_client import FdcClient
from food_facts.domain.nutrition import CanonicalNutrient, SearchPage
from food_facts.errors import FetchFailedError, InvalidInputError
from food_facts.services.compactor import compact_search_results
from food_facts.services.normalizer import normalize_nutrients

SEARCH_DATA_TYPES = ("Foundation", "SR Legacy")

_logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


@dataclass
class FoodLookupService:
    """Searches and fetches FDC foods and shapes them for display."""

    fdc_client: FdcClient
    page_size: int = 25
    debug: bool = False
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def search(self, query: str, page: int = 1) -> SearchPage:
        """Search Foundation foods, falling back to SR Legacy when empty.

        Results from the two data types are never merged.
        """
        cleaned = query.strip()
        if not cleaned:
            raise InvalidInputError("query must not be empty")
        if page < 1:
            raise InvalidInputError("page must be a positive integer")

        result = SearchPage(page=page, page_size=self.page_size)
        for data_type in SEARCH_DATA_TYPES:
            payload = await self._call_with_retry(
                lambda data_type=data_type: self.fdc_client.search_foods(
                    cleaned,
                    page=page,
                    data_type=data_type,
                    page_size=self.page_size,
                ),
                action=f"search:{data_type}",
            )
            records = payload.get("foods")
            if not isinstance(records, list) or not records:
                continue
            total_hits = payload.get("totalHits")
            result = SearchPage(
                foods=compact_search_results(cleaned, records),
                page=page,
                page_size=self.page_size,
                total_hits=(
                    total_hits
                    if isinstance(total_hits, int) and not isinstance(total_hits, bool)
                    else len(records)
                ),
                data_type=data_type,
            )
            break
        if self.debug:
            _logger.info(
                "Food search: query=%s page=%s source=%s results=%s",
                cleaned,
                page,
                result.data_type,
                len(result.foods),
            )
        return result

    async def get_detail(self, fdc_id: int) -> dict[str, object]:
        """Fetch the raw detail record for an FDC id."""
        if fdc_id < 1:
            raise InvalidInputError("fdc_id must be a positive integer")
        detail = await self._call_with_retry(
            lambda: self.fdc_client.get_food(fdc_id),
            action=f"get_food:{fdc_id}",
        )
        if self.debug:
            _logger.info("Food detail: fdc_id=%s", fdc_id)
        return detail

    async def get_nutrients(self, fdc_id: int) -> list[CanonicalNutrient]:
        """Fetch a detail record and return its normalized nutrient table."""
        return normalize_nutrients(await self.get_detail(fdc_id))

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except FetchFailedError as exc:
                attempt += 1
                _logger.warning(
                    "FDC %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    _status_code_from_exception(exc),
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def _status_code_from_exception(exc: Exception) -> str:
    """Extract the upstream HTTP status code behind a fetch failure, if any."""
    response = getattr(exc.__cause__, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
