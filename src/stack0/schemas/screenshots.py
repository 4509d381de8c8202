"""Request models for the screenshot resource."""

from typing import Any, Literal

from pydantic import Field

from stack0.schemas.base import ApiRequest, Environment

ScreenshotStatus = Literal["pending", "processing", "completed", "failed"]
ScreenshotFormat = Literal["png", "jpeg", "webp", "pdf"]
DeviceType = Literal["desktop", "tablet", "mobile"]
ResourceType = Literal["image", "stylesheet", "script", "font", "media", "xhr", "fetch", "websocket"]


class Clip(ApiRequest):
    x: float
    y: float
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)


class Cookie(ApiRequest):
    name: str
    value: str
    domain: str | None = None


class CreateScreenshotRequest(ApiRequest):
    """
    Capture one URL.

    Only ``url`` is required; everything else falls back to server defaults.

    Example:
        >>> CreateScreenshotRequest(url="https://example.com", format="png", full_page=True)
    """

    url: str = Field(..., min_length=1)
    environment: Environment | None = None
    project_id: str | None = None
    format: ScreenshotFormat | None = None
    quality: int | None = Field(default=None, ge=0, le=100)
    full_page: bool | None = None
    device_type: DeviceType | None = None
    viewport_width: int | None = Field(default=None, gt=0)
    viewport_height: int | None = Field(default=None, gt=0)
    device_scale_factor: float | None = Field(default=None, gt=0)
    wait_for_selector: str | None = None
    wait_for_timeout: int | None = Field(default=None, ge=0)
    block_ads: bool | None = None
    block_cookie_banners: bool | None = None
    block_chat_widgets: bool | None = None
    block_trackers: bool | None = None
    block_urls: list[str] | None = None
    block_resources: list[ResourceType] | None = None
    dark_mode: bool | None = None
    custom_css: str | None = None
    custom_js: str | None = None
    headers: dict[str, str] | None = None
    cookies: list[Cookie] | None = None
    selector: str | None = None
    hide_selectors: list[str] | None = None
    click_selector: str | None = None
    omit_background: bool | None = None
    user_agent: str | None = None
    clip: Clip | None = None
    thumbnail_width: int | None = Field(default=None, gt=0)
    thumbnail_height: int | None = Field(default=None, gt=0)
    cache_key: str | None = None
    cache_ttl: int | None = Field(default=None, ge=0)
    webhook_url: str | None = None
    webhook_secret: str | None = None
    metadata: dict[str, Any] | None = None
