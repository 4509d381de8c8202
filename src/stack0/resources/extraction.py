"""Content extraction client."""

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from core.hydration import hydrate, hydrate_page
from core.polling import RENDER_POLICY, CancellationToken, StatusPoller
from stack0.resources.webdata import WebdataJobs
from stack0.schemas.extraction import CreateExtractionRequest

logger = logging.getLogger(__name__)

EXTRACTION_DATE_FIELDS = ("createdAt", "completedAt")
USAGE_DATE_FIELDS = ("periodStart", "periodEnd")

EXTRACTION_POLLER = StatusPoller(
    "extraction",
    terminal_statuses={"completed", "failed"},
    success_statuses={"completed"},
    policy=RENDER_POLICY,
    failure_message="Extraction failed",
)


class Extraction(WebdataJobs):
    """Extract markdown, structured data or raw HTML from web pages."""

    job_type = "extraction"
    batch_path = "/webdata/batch/extractions"

    async def extract(
        self, request: CreateExtractionRequest | Mapping[str, Any]
    ) -> dict[str, Any]:
        """Start an extraction. Returns ``{id, status}``."""
        request = CreateExtractionRequest.coerce(request)
        return await self.transport.post("/webdata/extractions", request.to_body())

    async def get(
        self,
        id: str,
        environment: str | None = None,
        project_id: str | None = None,
    ) -> dict[str, Any]:
        result = await self.transport.get(
            f"/webdata/extractions/{id}", params=self._scope(environment, project_id)
        )
        return hydrate(result, EXTRACTION_DATE_FIELDS)

    async def list(
        self,
        environment: str | None = None,
        project_id: str | None = None,
        status: str | None = None,
        url: str | None = None,
        limit: int | None = None,
        cursor: str | None = None,
    ) -> dict[str, Any]:
        response = await self.transport.get(
            "/webdata/extractions",
            params={
                **self._scope(environment, project_id),
                "status": status,
                "url": url,
                "limit": limit,
                "cursor": cursor,
            },
        )
        return hydrate_page(response, EXTRACTION_DATE_FIELDS)

    async def delete(
        self,
        id: str,
        environment: str | None = None,
        project_id: str | None = None,
    ) -> dict[str, Any]:
        scope = self._scope(environment, project_id)
        return await self.transport.delete_with_body(
            f"/webdata/extractions/{id}",
            self._without_none({"id": id, **scope}),
            params=scope,
        )

    async def extract_and_wait(
        self,
        request: CreateExtractionRequest | Mapping[str, Any],
        poll_interval: float | None = None,
        timeout: float | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> dict[str, Any]:
        """
        Extract content and poll until it completes (defaults: 1s interval, 60s timeout).

        Raises:
            OperationFailed: The extraction failed server-side
            OperationTimeout: Still pending at the deadline
            OperationCancelled: ``cancel_token`` was tripped
        """
        request = CreateExtractionRequest.coerce(request)
        policy = self._policy("extraction", EXTRACTION_POLLER, poll_interval, timeout)

        async def submit() -> str:
            return self._handle_of(await self.extract(request))

        async def fetch(extraction_id: str) -> dict[str, Any]:
            return await self.get(extraction_id, request.environment, request.project_id)

        logger.debug("Extracting content", extra={"url": request.url})
        return await EXTRACTION_POLLER.wait(
            submit, fetch, policy=policy, cancel_token=cancel_token
        )

    # Usage

    async def get_usage(
        self,
        environment: str | None = None,
        period_start: str | datetime | None = None,
        period_end: str | datetime | None = None,
    ) -> dict[str, Any]:
        """Usage totals for a billing period."""
        usage = await self.transport.get(
            "/webdata/usage",
            params={
                "environment": environment,
                "periodStart": period_start,
                "periodEnd": period_end,
            },
        )
        return hydrate(usage, USAGE_DATE_FIELDS)

    async def get_usage_daily(
        self,
        environment: str | None = None,
        period_start: str | datetime | None = None,
        period_end: str | datetime | None = None,
    ) -> dict[str, Any]:
        """Per-day usage breakdown. Returns ``{days: [...]}``; dates are left as strings."""
        return await self.transport.get(
            "/webdata/usage/daily",
            params={
                "environment": environment,
                "periodStart": period_start,
                "periodEnd": period_end,
            },
        )
