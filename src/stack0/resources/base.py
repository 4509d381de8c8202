"""Base class for resource clients: owns (or borrows) an HttpTransport."""

from collections.abc import Mapping
from typing import Any

from core.errors import ApiError
from core.polling import PollPolicy, StatusPoller
from core.transport import DEFAULT_REQUEST_TIMEOUT, HttpTransport


class Resource:
    """
    One remote resource family (screenshots, extraction, workflows...).

    Either pass a ready ``transport`` (shared or externally configured) or
    the connection settings to build a private one. A borrowed transport is
    never closed by the resource.

    ``poll_policies`` replaces the default poll policy per operation kind
    ("screenshots", "extraction", "batch", "workflows"); per-call
    ``poll_interval`` / ``timeout`` arguments still take precedence.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        transport: HttpTransport | None = None,
        poll_policies: Mapping[str, PollPolicy] | None = None,
    ):
        if transport is None:
            if not api_key:
                raise ValueError(f"{type(self).__name__} requires 'api_key' or 'transport'")
            transport = HttpTransport(api_key, base_url=base_url, request_timeout=request_timeout)
            self._owns_transport = True
        else:
            self._owns_transport = False
        self.transport = transport
        self.poll_policies = dict(poll_policies or {})

    async def __aenter__(self) -> "Resource":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_transport:
            await self.transport.close()

    def _policy(
        self,
        kind: str,
        poller: StatusPoller,
        poll_interval: float | None = None,
        timeout: float | None = None,
    ) -> PollPolicy:
        base = self.poll_policies.get(kind, poller.policy)
        return base.with_overrides(interval=poll_interval, timeout=timeout)

    @staticmethod
    def _scope(environment: str | None = None, project_id: str | None = None) -> dict[str, Any]:
        """Query parameters addressing one environment/project."""
        return {"environment": environment, "projectId": project_id}

    @staticmethod
    def _without_none(body: dict[str, Any]) -> dict[str, Any]:
        return {key: value for key, value in body.items() if value is not None}

    @staticmethod
    def _handle_of(created: Any) -> str:
        """The operation id from a create response."""
        if isinstance(created, dict) and created.get("id"):
            return created["id"]
        raise ApiError("Create response did not include an 'id'", response=created)
