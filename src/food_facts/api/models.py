"""Pydantic request models for the HTTP API."""

from pydantic import BaseModel


class NormalizeRequest(BaseModel):
    """Raw FDC detail record to normalize."""

    detail: dict[str, object] | None = None


class ScanRequest(BaseModel):
    """Base64-encoded meal photo."""

    image_base64: str | None = None
