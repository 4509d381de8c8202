"""Top-level client bundling every resource."""

import asyncio
from collections.abc import Mapping

from config import ClientConfig
from core.polling import BATCH_POLICY, RENDER_POLICY, WORKFLOW_POLICY, PollPolicy
from core.transport import DEFAULT_REQUEST_TIMEOUT
from stack0.resources import Extraction, Screenshots, Workflows


class Stack0:
    """
    Stack0 API client.

    Each resource gets its own transport built from the same settings, so
    closing one never affects another.

    Example:
        async with Stack0(api_key="sk_live_...") as client:
            shot = await client.screenshots.capture_and_wait({"url": "https://example.com"})
            page = await client.extraction.extract_and_wait(
                {"url": "https://example.com/article", "mode": "markdown"}
            )
            run = await client.workflows.run_and_wait({"workflow_slug": "content-pipeline"})
    """

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        poll_policies: Mapping[str, PollPolicy] | None = None,
    ):
        if not api_key:
            raise ValueError("Stack0 requires 'api_key'")

        settings = {
            "api_key": api_key,
            "base_url": base_url,
            "request_timeout": request_timeout,
            "poll_policies": poll_policies,
        }
        self.screenshots = Screenshots(**settings)
        self.extraction = Extraction(**settings)
        self.workflows = Workflows(**settings)

    @classmethod
    def from_config(cls, config: ClientConfig) -> "Stack0":
        """Build a client from a loaded ClientConfig, applying its poll overrides."""
        config.validate()
        defaults = {
            "screenshots": RENDER_POLICY,
            "extraction": RENDER_POLICY,
            "batch": BATCH_POLICY,
            "workflows": WORKFLOW_POLICY,
        }
        policies = {
            kind: config.poll_policy(kind, default)
            for kind, default in defaults.items()
            if kind in config.polling
        }
        return cls(
            api_key=config.api_key,
            base_url=config.base_url,
            request_timeout=config.request_timeout_seconds,
            poll_policies=policies,
        )

    async def __aenter__(self) -> "Stack0":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        await asyncio.gather(
            self.screenshots.close(),
            self.extraction.close(),
            self.workflows.close(),
        )
