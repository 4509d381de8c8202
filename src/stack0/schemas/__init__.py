"""Typed request models (pydantic) for every resource."""

from stack0.schemas.base import ApiRequest, Environment
from stack0.schemas.common import (
    BATCH_TERMINAL_STATUSES,
    BatchJobStatus,
    CreateBatchRequest,
    CreateScheduleRequest,
    ScheduleFrequency,
    UpdateScheduleRequest,
)
from stack0.schemas.extraction import (
    CreateExtractionRequest,
    ExtractionMode,
    ExtractionStatus,
)
from stack0.schemas.screenshots import (
    Clip,
    Cookie,
    CreateScreenshotRequest,
    DeviceType,
    ScreenshotFormat,
    ScreenshotStatus,
)
from stack0.schemas.workflows import (
    RUN_TERMINAL_STATUSES,
    CreateWorkflowRequest,
    RetryConfig,
    RunStatus,
    RunWorkflowRequest,
    StepDefinition,
    UpdateWorkflowRequest,
    VariableDefinition,
    WebhookConfig,
)

__all__ = [
    "ApiRequest",
    "Environment",
    # Shared
    "BatchJobStatus",
    "ScheduleFrequency",
    "BATCH_TERMINAL_STATUSES",
    "CreateBatchRequest",
    "CreateScheduleRequest",
    "UpdateScheduleRequest",
    # Screenshots
    "ScreenshotStatus",
    "ScreenshotFormat",
    "DeviceType",
    "Clip",
    "Cookie",
    "CreateScreenshotRequest",
    # Extraction
    "ExtractionStatus",
    "ExtractionMode",
    "CreateExtractionRequest",
    # Workflows
    "RunStatus",
    "RUN_TERMINAL_STATUSES",
    "RetryConfig",
    "StepDefinition",
    "VariableDefinition",
    "WebhookConfig",
    "CreateWorkflowRequest",
    "UpdateWorkflowRequest",
    "RunWorkflowRequest",
]
