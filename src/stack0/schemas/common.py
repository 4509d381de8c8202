"""Request models shared by the screenshot and extraction resources."""

from typing import Any, ClassVar, Literal

from pydantic import Field

from stack0.schemas.base import ApiRequest, Environment

BatchJobStatus = Literal["pending", "processing", "completed", "failed", "cancelled"]
ScheduleFrequency = Literal["hourly", "daily", "weekly", "monthly"]

BATCH_TERMINAL_STATUSES = frozenset({"completed", "failed", "cancelled"})


class CreateBatchRequest(ApiRequest):
    """Batch job over many URLs. ``config`` holds the per-URL render/extract options."""

    urls: list[str] = Field(..., min_length=1)
    environment: Environment | None = None
    project_id: str | None = None
    name: str | None = None
    config: dict[str, Any] | None = None
    webhook_url: str | None = None
    webhook_secret: str | None = None
    metadata: dict[str, Any] | None = None


class CreateScheduleRequest(ApiRequest):
    """Recurring capture/extraction of one URL."""

    name: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    environment: Environment | None = None
    project_id: str | None = None
    frequency: ScheduleFrequency | None = None
    config: dict[str, Any] = Field(default_factory=dict)
    detect_changes: bool | None = None
    change_threshold: float | None = None
    webhook_url: str | None = None
    webhook_secret: str | None = None
    metadata: dict[str, Any] | None = None


class UpdateScheduleRequest(ApiRequest):
    """Partial schedule update; ``id``, ``environment`` and ``project_id`` address the schedule."""

    send_explicit_nulls: ClassVar[bool] = True

    id: str = Field(..., min_length=1)
    environment: Environment | None = None
    project_id: str | None = None
    name: str | None = None
    frequency: ScheduleFrequency | None = None
    config: dict[str, Any] | None = None
    is_active: bool | None = None
    detect_changes: bool | None = None
    change_threshold: float | None = None
    webhook_url: str | None = None
    webhook_secret: str | None = None
    metadata: dict[str, Any] | None = None
