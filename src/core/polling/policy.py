"""Poll policy and cooperative cancellation for long-running operations."""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class PollPolicy:
    """
    How often to poll and when to give up.

    Attributes:
        interval: Seconds to wait after a non-terminal snapshot before polling again
        timeout: Overall deadline in seconds, measured from submission
        fetch_timeout: Optional bound in seconds on each individual status fetch,
            so one hung request cannot stall the deadline check

    ``interval`` may exceed ``timeout``; that simply allows at most one fetch.
    """

    interval: float
    timeout: float
    fetch_timeout: float | None = None

    def __post_init__(self) -> None:
        if self.interval < 0:
            raise ValueError(f"interval must be >= 0, got {self.interval}")
        if self.timeout < 0:
            raise ValueError(f"timeout must be >= 0, got {self.timeout}")
        if self.fetch_timeout is not None and self.fetch_timeout <= 0:
            raise ValueError(f"fetch_timeout must be > 0, got {self.fetch_timeout}")

    def with_overrides(
        self,
        interval: float | None = None,
        timeout: float | None = None,
        fetch_timeout: float | None = None,
    ) -> "PollPolicy":
        """Copy of this policy with any non-None argument replaced."""
        changes: dict[str, float] = {}
        if interval is not None:
            changes["interval"] = interval
        if timeout is not None:
            changes["timeout"] = timeout
        if fetch_timeout is not None:
            changes["fetch_timeout"] = fetch_timeout
        return replace(self, **changes) if changes else self


# Defaults observed for each operation kind
RENDER_POLICY = PollPolicy(interval=1.0, timeout=60.0)
BATCH_POLICY = PollPolicy(interval=2.0, timeout=300.0)
WORKFLOW_POLICY = PollPolicy(interval=2.0, timeout=600.0)


class CancellationToken:
    """
    Cooperative cancellation signal for a wait.

    The poller checks the token before each fetch; tripping it makes the
    wait raise OperationCancelled at the next check. An in-flight fetch is
    never interrupted.

    Usage:
        token = CancellationToken()
        task = asyncio.create_task(client.workflows.run_and_wait(req, cancel_token=token))
        ...
        token.cancel("user closed the dialog")
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._reason: str | None = None

    def cancel(self, reason: str | None = None) -> None:
        """Trip the token. Later calls keep the first reason."""
        if not self._cancelled:
            self._cancelled = True
            self._reason = reason

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def reason(self) -> str | None:
        return self._reason

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self._cancelled}, reason={self._reason!r})"
