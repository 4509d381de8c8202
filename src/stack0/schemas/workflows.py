"""Request models for the workflow resource."""

from typing import Any, ClassVar, Literal

from pydantic import Field, model_validator

from stack0.schemas.base import ApiRequest, Environment

RunStatus = Literal["pending", "running", "completed", "failed", "cancelled"]
StepType = Literal["llm", "image", "video", "audio", "code", "http", "transform", "condition", "loop"]
Provider = Literal["anthropic", "openai", "gemini", "replicate", "stack0"]

RUN_TERMINAL_STATUSES = frozenset({"completed", "failed", "cancelled"})


class RetryConfig(ApiRequest):
    max_attempts: int = Field(..., ge=1)
    backoff_ms: int = Field(..., ge=0)


class StepDefinition(ApiRequest):
    """
    One step of a workflow.

    ``config`` is passed through untouched (prompt, model parameters,
    nested ``subSteps`` / ``thenSteps`` / ``elseSteps``...).
    """

    id: str = Field(..., min_length=1)
    name: str
    type: StepType
    provider: Provider
    model: str
    config: dict[str, Any] = Field(default_factory=dict)
    depends_on: list[str] | None = None
    output_variable: str | None = None
    retry_config: RetryConfig | None = None


class VariableDefinition(ApiRequest):
    name: str = Field(..., min_length=1)
    type: Literal["string", "number", "boolean", "array", "object", "image"]
    required: bool
    default: Any = None
    description: str | None = None


class WebhookConfig(ApiRequest):
    url: str = Field(..., min_length=1)
    secret: str | None = None


class CreateWorkflowRequest(ApiRequest):
    project_slug: str | None = None
    environment: Environment | None = None
    slug: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    description: str | None = None
    steps: list[StepDefinition] = Field(..., min_length=1)
    variables: list[VariableDefinition] | None = None


class UpdateWorkflowRequest(ApiRequest):
    """Partial workflow update; ``id`` addresses the workflow and is not sent in the body."""

    send_explicit_nulls: ClassVar[bool] = True

    id: str = Field(..., min_length=1)
    project_slug: str | None = None
    name: str | None = None
    description: str | None = None
    steps: list[StepDefinition] | None = None
    variables: list[VariableDefinition] | None = None
    is_active: bool | None = None


class RunWorkflowRequest(ApiRequest):
    """
    Start a workflow run, addressed by id or slug.

    Example:
        >>> RunWorkflowRequest(workflow_slug="content-pipeline", variables={"topic": "AI"})
    """

    workflow_id: str | None = None
    workflow_slug: str | None = None
    project_slug: str | None = None
    environment: Environment | None = None
    variables: dict[str, Any] | None = None
    metadata: dict[str, Any] | None = None
    webhook: WebhookConfig | None = None

    @model_validator(mode="after")
    def require_workflow_reference(self) -> "RunWorkflowRequest":
        if not self.workflow_id and not self.workflow_slug:
            raise ValueError("either workflow_id or workflow_slug is required")
        return self
