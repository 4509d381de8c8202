"""Screenshot capture client."""

import logging
from collections.abc import Mapping
from typing import Any

from core.hydration import hydrate, hydrate_page
from core.polling import RENDER_POLICY, CancellationToken, StatusPoller
from stack0.resources.webdata import WebdataJobs
from stack0.schemas.screenshots import CreateScreenshotRequest

logger = logging.getLogger(__name__)

SCREENSHOT_DATE_FIELDS = ("createdAt", "completedAt")

SCREENSHOT_POLLER = StatusPoller(
    "screenshot",
    terminal_statuses={"completed", "failed"},
    success_statuses={"completed"},
    policy=RENDER_POLICY,
    failure_message="Screenshot failed",
)


class Screenshots(WebdataJobs):
    """
    Capture screenshots of web pages.

    Example:
        async with Screenshots(api_key="sk_live_...") as screenshots:
            shot = await screenshots.capture_and_wait(
                {"url": "https://example.com", "format": "png", "full_page": True}
            )
            print(shot["imageUrl"])
    """

    job_type = "screenshot"
    batch_path = "/webdata/batch/screenshots"

    async def capture(
        self, request: CreateScreenshotRequest | Mapping[str, Any]
    ) -> dict[str, Any]:
        """Start a capture. Returns ``{id, status}``; poll with get()."""
        request = CreateScreenshotRequest.coerce(request)
        return await self.transport.post("/webdata/screenshots", request.to_body())

    async def get(
        self,
        id: str,
        environment: str | None = None,
        project_id: str | None = None,
    ) -> dict[str, Any]:
        screenshot = await self.transport.get(
            f"/webdata/screenshots/{id}", params=self._scope(environment, project_id)
        )
        return hydrate(screenshot, SCREENSHOT_DATE_FIELDS)

    async def list(
        self,
        environment: str | None = None,
        project_id: str | None = None,
        status: str | None = None,
        url: str | None = None,
        limit: int | None = None,
        cursor: str | None = None,
    ) -> dict[str, Any]:
        """List screenshots. Returns ``{items, nextCursor}``."""
        response = await self.transport.get(
            "/webdata/screenshots",
            params={
                **self._scope(environment, project_id),
                "status": status,
                "url": url,
                "limit": limit,
                "cursor": cursor,
            },
        )
        return hydrate_page(response, SCREENSHOT_DATE_FIELDS)

    async def delete(
        self,
        id: str,
        environment: str | None = None,
        project_id: str | None = None,
    ) -> dict[str, Any]:
        scope = self._scope(environment, project_id)
        return await self.transport.delete_with_body(
            f"/webdata/screenshots/{id}",
            self._without_none({"id": id, **scope}),
            params=scope,
        )

    async def capture_and_wait(
        self,
        request: CreateScreenshotRequest | Mapping[str, Any],
        poll_interval: float | None = None,
        timeout: float | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> dict[str, Any]:
        """
        Capture a screenshot and poll until it completes.

        Args:
            request: Capture options
            poll_interval: Seconds between polls (default 1)
            timeout: Overall deadline in seconds (default 60)
            cancel_token: Optional token to stop waiting early

        Returns:
            The completed screenshot (``imageUrl``, dimensions, timestamps...)

        Raises:
            OperationFailed: The capture failed server-side
            OperationTimeout: Still pending at the deadline
            OperationCancelled: ``cancel_token`` was tripped
        """
        request = CreateScreenshotRequest.coerce(request)
        policy = self._policy("screenshots", SCREENSHOT_POLLER, poll_interval, timeout)

        async def submit() -> str:
            return self._handle_of(await self.capture(request))

        async def fetch(screenshot_id: str) -> dict[str, Any]:
            return await self.get(screenshot_id, request.environment, request.project_id)

        logger.debug("Capturing screenshot", extra={"url": request.url})
        return await SCREENSHOT_POLLER.wait(
            submit, fetch, policy=policy, cancel_token=cancel_token
        )
