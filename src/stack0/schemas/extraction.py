"""Request models for the extraction resource."""

from typing import Any, Literal

from pydantic import Field

from stack0.schemas.base import ApiRequest, Environment
from stack0.schemas.screenshots import Cookie

ExtractionStatus = Literal["pending", "processing", "completed", "failed"]
ExtractionMode = Literal["auto", "schema", "markdown", "raw"]


class CreateExtractionRequest(ApiRequest):
    """
    Extract content from one URL.

    ``extraction_schema`` is sent as ``schema`` (a JSON schema used with
    ``mode="schema"``).
    """

    url: str = Field(..., min_length=1)
    environment: Environment | None = None
    project_id: str | None = None
    mode: ExtractionMode | None = None
    extraction_schema: dict[str, Any] | None = Field(default=None, alias="schema")
    prompt: str | None = None
    include_links: bool | None = None
    include_images: bool | None = None
    include_metadata: bool | None = None
    wait_for_selector: str | None = None
    wait_for_timeout: int | None = Field(default=None, ge=0)
    headers: dict[str, str] | None = None
    cookies: list[Cookie] | None = None
    webhook_url: str | None = None
    webhook_secret: str | None = None
    metadata: dict[str, Any] | None = None
