"""USDA FoodData Central API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from food_facts.errors import FetchFailedError


class FdcClient(Protocol):
    """Raw record source backed by FoodData Central."""

    async def search_foods(
        self,
        query: str,
        *,
        page: int = 1,
        data_type: str | None = None,
        page_size: int = 25,
    ) -> dict[str, object]:
        """Search foods and return the raw API payload."""

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        """Fetch a food by FDC id and return the raw API payload."""


@dataclass
class HttpxFdcClient(FdcClient):
    """HTTPX-backed FDC client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 8.0

    @classmethod
    def create(
        cls, api_key: str, base_url: str, timeout_seconds: float = 8.0
    ) -> "HttpxFdcClient":
        """Create an FDC client with a managed httpx session."""
        return cls(
            api_key=api_key,
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def search_foods(
        self,
        query: str,
        *,
        page: int = 1,
        data_type: str | None = None,
        page_size: int = 25,
    ) -> dict[str, object]:
        """Search foods, optionally restricted to one data type."""
        params: dict[str, str | int] = {
            "api_key": self.api_key,
            "query": query,
            "pageNumber": page,
            "pageSize": page_size,
        }
        if data_type:
            params["dataType"] = data_type
        return await self._get_json(f"{self.base_url}/foods/search", params, "search")

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        """Fetch a food by FDC id."""
        return await self._get_json(
            f"{self.base_url}/food/{fdc_id}",
            {"api_key": self.api_key},
            f"detail {fdc_id}",
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _get_json(
        self, url: str, params: dict[str, str | int], action: str
    ) -> dict[str, object]:
        try:
            response = await self.http_client.get(
                url, params=params, timeout=self.timeout_seconds
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise FetchFailedError(
                f"FDC {action} failed: {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise FetchFailedError(f"FDC {action} failed: {exc}") from exc
        except ValueError as exc:
            raise FetchFailedError(f"FDC {action} returned invalid JSON") from exc
        if not isinstance(payload, dict):
            raise FetchFailedError(f"FDC {action} returned a non-object payload")
        return payload
