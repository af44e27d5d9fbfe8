"""Meal photo ingredient scan using a vision LLM."""

import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from food_facts.domain.scan import ScanItem, ScanResult
from food_facts.errors import FetchFailedError, InvalidInputError

SCAN_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "items": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "portion_desc": {"type": "string"},
                    "portion_grams": {"type": "number", "minimum": 0},
                },
                "required": ["name", "portion_desc", "portion_grams"],
                "additionalProperties": False,
            },
        }
    },
    "required": ["items"],
    "additionalProperties": False,
}

SCAN_PROMPT = (
    "You are analyzing a photo of a meal for nutrition tracking. "
    "List every individual ingredient you can see rather than the dish name, "
    "for example chicken breast, brown rice and broccoli instead of stir fry. "
    "Use specific names that would match a USDA FoodData Central search. "
    "Include visible cooking oils, sauces and seasonings, and break mixed "
    "dishes into their components. For each ingredient give a short "
    'human-friendly portion such as "1 cup" or "1 medium piece" and your best '
    "estimate of its weight in grams. Report each ingredient once; a typical "
    "meal has between 2 and 12."
)

_logger = logging.getLogger(__name__)


class VisionClient(Protocol):
    """Interface for LLM vision extraction."""

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
        """Return structured vision extraction data."""


@dataclass
class ScanService:
    """Service that prepares scan prompts and validates results."""

    client: VisionClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def analyze(self, image_base64: str) -> ScanResult:
        """Detect ingredients and portions in a base64-encoded meal photo."""
        image_bytes = _decode_image(image_base64)
        raw = await self.client.extract(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            image_data_url=_to_data_url(image_bytes),
            schema=SCAN_SCHEMA,
            prompt=SCAN_PROMPT,
        )
        try:
            result = ScanResult.model_validate(raw)
        except ValidationError as exc:
            raise FetchFailedError("Vision model returned an invalid scan") from exc
        items = dedupe_items(result.items)
        _logger.info(
            "Scan analyzed: items=%s duplicates=%s",
            len(items),
            len(result.items) - len(items),
        )
        return ScanResult(items=items)


def dedupe_items(items: list[ScanItem]) -> list[ScanItem]:
    """Drop repeated ingredients by trimmed, lowercased name; first wins."""
    seen: set[str] = set()
    unique: list[ScanItem] = []
    for item in items:
        key = item.name.strip().lower()
        if key in seen:
            continue
        seen.add(key)
        unique.append(item)
    return unique


def _decode_image(image_base64: str) -> bytes:
    """Decode a base64 payload, tolerating a data URL prefix."""
    payload = image_base64.strip()
    if payload.startswith("data:") and "," in payload:
        payload = payload.split(",", 1)[1]
    if not payload:
        raise InvalidInputError("image_base64 required")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidInputError("image_base64 is not valid base64") from exc


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
