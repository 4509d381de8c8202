"""
Batch jobs and schedules.

Both the screenshot and the extraction resources expose the same batch
and schedule endpoints, distinguished only by a ``type`` discriminator.
"""

import logging
from collections.abc import Mapping
from typing import Any, ClassVar

from core.hydration import hydrate, hydrate_page
from core.polling import BATCH_POLICY, CancellationToken, StatusPoller
from stack0.resources.base import Resource
from stack0.schemas.common import (
    BATCH_TERMINAL_STATUSES,
    CreateBatchRequest,
    CreateScheduleRequest,
    UpdateScheduleRequest,
)

logger = logging.getLogger(__name__)

BATCH_DATE_FIELDS = ("createdAt", "startedAt", "completedAt")
SCHEDULE_DATE_FIELDS = ("createdAt", "updatedAt", "lastRunAt", "nextRunAt")

# A finished job is always returned: per-URL outcomes live in the job record
BATCH_POLLER = StatusPoller(
    "batch_job",
    terminal_statuses=BATCH_TERMINAL_STATUSES,
    success_statuses=BATCH_TERMINAL_STATUSES,
    policy=BATCH_POLICY,
)


class WebdataJobs(Resource):
    """
    Batch and schedule operations for one job type.

    Subclasses set ``job_type`` ("screenshot" or "extraction") and
    ``batch_path`` (the batch create endpoint).
    """

    job_type: ClassVar[str]
    batch_path: ClassVar[str]

    # Batch jobs

    async def batch(self, request: CreateBatchRequest | Mapping[str, Any]) -> dict[str, Any]:
        """Create a batch job. Returns ``{id, status, totalUrls}``."""
        request = CreateBatchRequest.coerce(request)
        created = await self.transport.post(self.batch_path, request.to_body())
        logger.info(
            "Batch job created",
            extra={
                "operation": f"{self.job_type}_batch",
                "operation_id": created.get("id") if isinstance(created, dict) else None,
                "batch_size": len(request.urls),
            },
        )
        return created

    async def get_batch_job(
        self,
        id: str,
        environment: str | None = None,
        project_id: str | None = None,
    ) -> dict[str, Any]:
        job = await self.transport.get(
            f"/webdata/batch/{id}", params=self._scope(environment, project_id)
        )
        return hydrate(job, BATCH_DATE_FIELDS)

    async def list_batch_jobs(
        self,
        environment: str | None = None,
        project_id: str | None = None,
        status: str | None = None,
        limit: int | None = None,
        cursor: str | None = None,
    ) -> dict[str, Any]:
        response = await self.transport.get(
            "/webdata/batch",
            params={
                **self._scope(environment, project_id),
                "status": status,
                "type": self.job_type,
                "limit": limit,
                "cursor": cursor,
            },
        )
        return hydrate_page(response, BATCH_DATE_FIELDS)

    async def cancel_batch_job(
        self,
        id: str,
        environment: str | None = None,
        project_id: str | None = None,
    ) -> dict[str, Any]:
        return await self.transport.post(
            f"/webdata/batch/{id}/cancel", {}, params=self._scope(environment, project_id)
        )

    async def batch_and_wait(
        self,
        request: CreateBatchRequest | Mapping[str, Any],
        poll_interval: float | None = None,
        timeout: float | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> dict[str, Any]:
        """
        Create a batch job and poll it until it finishes.

        Returns the job for any terminal status (completed, failed or
        cancelled); inspect ``successfulUrls`` / ``failedUrls`` for outcomes.

        Raises:
            OperationTimeout: Job still running after ``timeout`` seconds (default 300)
            OperationCancelled: ``cancel_token`` was tripped
        """
        request = CreateBatchRequest.coerce(request)
        policy = self._policy("batch", BATCH_POLLER, poll_interval, timeout)

        async def submit() -> str:
            return self._handle_of(await self.batch(request))

        async def fetch(job_id: str) -> dict[str, Any]:
            return await self.get_batch_job(job_id, request.environment, request.project_id)

        return await BATCH_POLLER.wait(submit, fetch, policy=policy, cancel_token=cancel_token)

    # Schedules

    async def create_schedule(
        self, request: CreateScheduleRequest | Mapping[str, Any]
    ) -> dict[str, Any]:
        """Create a recurring job. Returns ``{id}``."""
        request = CreateScheduleRequest.coerce(request)
        body = {**request.to_body(), "type": self.job_type}
        return await self.transport.post("/webdata/schedules", body)

    async def update_schedule(
        self, request: UpdateScheduleRequest | Mapping[str, Any]
    ) -> dict[str, Any]:
        """
        Update a schedule.

        ``id``, ``environment`` and ``project_id`` address the schedule; every
        other field that was set (including explicit None) goes in the body.
        """
        request = UpdateScheduleRequest.coerce(request)
        body = request.to_body(exclude=("id", "environment", "project_id"))
        return await self.transport.post(
            f"/webdata/schedules/{request.id}",
            body,
            params=self._scope(request.environment, request.project_id),
        )

    async def get_schedule(
        self,
        id: str,
        environment: str | None = None,
        project_id: str | None = None,
    ) -> dict[str, Any]:
        schedule = await self.transport.get(
            f"/webdata/schedules/{id}", params=self._scope(environment, project_id)
        )
        return hydrate(schedule, SCHEDULE_DATE_FIELDS)

    async def list_schedules(
        self,
        environment: str | None = None,
        project_id: str | None = None,
        is_active: bool | None = None,
        limit: int | None = None,
        cursor: str | None = None,
    ) -> dict[str, Any]:
        response = await self.transport.get(
            "/webdata/schedules",
            params={
                **self._scope(environment, project_id),
                "type": self.job_type,
                "isActive": is_active,
                "limit": limit,
                "cursor": cursor,
            },
        )
        return hydrate_page(response, SCHEDULE_DATE_FIELDS)

    async def delete_schedule(
        self,
        id: str,
        environment: str | None = None,
        project_id: str | None = None,
    ) -> dict[str, Any]:
        scope = self._scope(environment, project_id)
        return await self.transport.delete_with_body(
            f"/webdata/schedules/{id}",
            self._without_none({"id": id, **scope}),
            params=scope,
        )

    async def toggle_schedule(
        self,
        id: str,
        environment: str | None = None,
        project_id: str | None = None,
    ) -> dict[str, Any]:
        """Flip a schedule on or off. Returns ``{isActive}``."""
        return await self.transport.post(
            f"/webdata/schedules/{id}/toggle", {}, params=self._scope(environment, project_id)
        )
