"""Workflow definition and execution client."""

import logging
from collections.abc import Mapping
from typing import Any

from core.hydration import hydrate, hydrate_page
from core.polling import WORKFLOW_POLICY, CancellationToken, StatusPoller
from stack0.resources.base import Resource
from stack0.schemas.workflows import (
    RUN_TERMINAL_STATUSES,
    CreateWorkflowRequest,
    RunWorkflowRequest,
    UpdateWorkflowRequest,
)

logger = logging.getLogger(__name__)

WORKFLOW_DATE_FIELDS = ("createdAt", "updatedAt")
RUN_DATE_FIELDS = ("createdAt", "startedAt", "completedAt")

# A cancelled run is a deliberate outcome and is returned, not raised
RUN_POLLER = StatusPoller(
    "workflow_run",
    terminal_statuses=RUN_TERMINAL_STATUSES,
    success_statuses={"completed", "cancelled"},
    policy=WORKFLOW_POLICY,
    failure_message="Workflow execution failed",
)


class Workflows(Resource):
    """
    Create, run and monitor multi-step AI workflows.

    Example:
        async with Workflows(api_key="sk_live_...") as workflows:
            run = await workflows.run_and_wait(
                {"workflow_slug": "content-pipeline", "variables": {"topic": "AI"}}
            )
            print(run["output"])
    """

    async def create(self, request: CreateWorkflowRequest | Mapping[str, Any]) -> dict[str, Any]:
        """Create a workflow. Returns ``{id, slug, version}``."""
        request = CreateWorkflowRequest.coerce(request)
        return await self.transport.post("/workflows/workflows", request.to_body())

    async def get(
        self,
        id: str | None = None,
        slug: str | None = None,
        project_slug: str | None = None,
        environment: str | None = None,
    ) -> dict[str, Any]:
        """Get a workflow by id, or by slug (optionally scoped to a project)."""
        if id:
            workflow = await self.transport.get(f"/workflows/workflows/{id}")
        elif slug:
            workflow = await self.transport.get(
                "/workflows/workflows",
                params={"slug": slug, "environment": environment, "projectSlug": project_slug},
            )
        else:
            raise ValueError("Workflows.get requires 'id' or 'slug'")
        return hydrate(workflow, WORKFLOW_DATE_FIELDS)

    async def list(
        self,
        project_slug: str | None = None,
        environment: str | None = None,
        is_active: bool | None = None,
        limit: int | None = None,
        cursor: str | None = None,
    ) -> dict[str, Any]:
        response = await self.transport.get(
            "/workflows/workflows",
            params={
                "projectSlug": project_slug,
                "environment": environment,
                "isActive": is_active,
                "limit": limit,
                "cursor": cursor,
            },
        )
        return hydrate_page(response, WORKFLOW_DATE_FIELDS)

    async def update(self, request: UpdateWorkflowRequest | Mapping[str, Any]) -> dict[str, Any]:
        """Update a workflow. Returns ``{success, version}``."""
        request = UpdateWorkflowRequest.coerce(request)
        return await self.transport.post(
            f"/workflows/workflows/{request.id}", request.to_body(exclude=("id",))
        )

    async def delete(self, id: str, project_slug: str | None = None) -> dict[str, Any]:
        return await self.transport.delete_with_body(
            f"/workflows/workflows/{id}",
            self._without_none({"id": id, "projectSlug": project_slug}),
        )

    # Execution

    async def run(self, request: RunWorkflowRequest | Mapping[str, Any]) -> dict[str, Any]:
        """Start a run. Returns ``{id, status, workflowId}``."""
        request = RunWorkflowRequest.coerce(request)
        created = await self.transport.post("/workflows/workflows/run", request.to_body())
        logger.info(
            "Workflow run started",
            extra={
                "operation": "workflow_run",
                "operation_id": created.get("id") if isinstance(created, dict) else None,
                "workflow_slug": request.workflow_slug or request.workflow_id,
            },
        )
        return created

    async def get_run(
        self,
        id: str,
        environment: str | None = None,
        project_slug: str | None = None,
    ) -> dict[str, Any]:
        run = await self.transport.get(
            f"/workflows/workflows/runs/{id}",
            params={"environment": environment, "projectSlug": project_slug},
        )
        return hydrate(run, RUN_DATE_FIELDS)

    async def list_runs(
        self,
        workflow_id: str | None = None,
        workflow_slug: str | None = None,
        project_slug: str | None = None,
        environment: str | None = None,
        status: str | None = None,
        limit: int | None = None,
        cursor: str | None = None,
    ) -> dict[str, Any]:
        response = await self.transport.get(
            "/workflows/workflows/runs",
            params={
                "workflowId": workflow_id,
                "workflowSlug": workflow_slug,
                "projectSlug": project_slug,
                "environment": environment,
                "status": status,
                "limit": limit,
                "cursor": cursor,
            },
        )
        return hydrate_page(response, RUN_DATE_FIELDS)

    async def cancel_run(self, id: str) -> dict[str, Any]:
        return await self.transport.post(f"/workflows/workflows/runs/{id}/cancel", {})

    async def run_and_wait(
        self,
        request: RunWorkflowRequest | Mapping[str, Any],
        poll_interval: float | None = None,
        timeout: float | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> dict[str, Any]:
        """
        Start a run and poll until it finishes.

        A completed or cancelled run is returned. Tripping ``cancel_token``
        only stops waiting; the remote run keeps going unless cancel_run()
        is called.

        Args:
            request: Workflow reference, variables, webhook...
            poll_interval: Seconds between polls (default 2)
            timeout: Overall deadline in seconds (default 600)
            cancel_token: Optional token to stop waiting early

        Raises:
            OperationFailed: The run failed (reason from the run's ``error``)
            OperationTimeout: Still running at the deadline
            OperationCancelled: ``cancel_token`` was tripped
        """
        request = RunWorkflowRequest.coerce(request)
        policy = self._policy("workflows", RUN_POLLER, poll_interval, timeout)

        async def submit() -> str:
            return self._handle_of(await self.run(request))

        async def fetch(run_id: str) -> dict[str, Any]:
            return await self.get_run(run_id, request.environment, request.project_slug)

        return await RUN_POLLER.wait(submit, fetch, policy=policy, cancel_token=cancel_token)
