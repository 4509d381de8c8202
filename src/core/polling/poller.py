"""
Generic long-running-operation poller.

Turns a "create, then repeatedly fetch" pair into one awaited terminal
result. Every resource that exposes an async job (screenshots,
extractions, batch jobs, workflow runs) waits through this module instead
of carrying its own loop.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Collection, Mapping
from typing import Any, Generic, TypeVar

from core.errors.exceptions import (
    NetworkError,
    OperationCancelled,
    OperationFailed,
    OperationTimeout,
)
from core.logging.context_managers import LogContext
from core.polling.policy import CancellationToken, PollPolicy

logger = logging.getLogger(__name__)

H = TypeVar("H")
S = TypeVar("S")


def _field(snapshot: Any, name: str) -> Any:
    if isinstance(snapshot, Mapping):
        return snapshot.get(name)
    return getattr(snapshot, name, None)


async def _fetch_once(
    fetch: Callable[[H], Awaitable[S]],
    handle: H,
    fetch_timeout: float | None,
    operation: str,
) -> S:
    if fetch_timeout is None:
        return await fetch(handle)
    try:
        return await asyncio.wait_for(fetch(handle), timeout=fetch_timeout)
    except TimeoutError as e:
        raise NetworkError(
            f"Status fetch for {operation} {handle} exceeded {fetch_timeout}s",
            cause=e,
            context={"operation": operation, "operation_id": str(handle)},
        ) from e


async def wait_until_terminal(
    submit: Callable[[], Awaitable[H]],
    fetch: Callable[[H], Awaitable[S]],
    is_terminal: Callable[[S], bool],
    is_success: Callable[[S], bool],
    policy: PollPolicy,
    *,
    failure_reason: Callable[[S], str | None] | None = None,
    status_of: Callable[[S], Any] | None = None,
    cancel_token: CancellationToken | None = None,
    operation: str = "operation",
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> S:
    """
    Submit one unit of work and poll it until it reaches a terminal state.

    Algorithm:
        1. deadline = now + policy.timeout
        2. submit() exactly once; its errors propagate and nothing is polled
        3. loop: cancelled? -> OperationCancelled; past deadline? ->
           OperationTimeout; fetch (errors propagate); non-terminal -> sleep
           interval and loop; terminal failure -> OperationFailed; terminal
           success -> return the snapshot

    Terminality is checked before sleeping, so an operation that is already
    done on the first fetch returns with no sleep at all. The deadline is
    checked before each fetch, so a fetch that straddles the deadline still
    completes and the next iteration raises.

    Args:
        submit: Creates the operation and returns its handle
        fetch: Returns the current snapshot for a handle
        is_terminal: True once the snapshot will no longer change
        is_success: For terminal snapshots, True if the result should be returned
        policy: Interval, deadline and optional per-fetch timeout
        failure_reason: Extracts the failure message from a failed snapshot;
            defaults to its ``error`` field
        status_of: Extracts the status for log records
        cancel_token: Optional cooperative cancellation signal
        operation: Name used in messages and log context
        clock: Monotonic clock (seconds), injectable for tests
        sleep: Awaitable sleep, injectable for tests

    Returns:
        The successful terminal snapshot

    Raises:
        OperationFailed: Terminal snapshot that is not a success
        OperationTimeout: Deadline passed while non-terminal
        OperationCancelled: Token tripped before a fetch
        NetworkError / ApiError: From submit or fetch, unchanged
    """
    start = clock()
    deadline = start + policy.timeout

    with LogContext(operation=operation) as log_ctx:
        if cancel_token is not None and cancel_token.cancelled:
            raise OperationCancelled(
                f"{operation} cancelled before submission",
                reason=cancel_token.reason,
            )

        handle = await submit()
        log_ctx.update(operation_id=str(handle))
        logger.debug(
            "Operation submitted",
            extra={
                "operation": operation,
                "operation_id": str(handle),
                "interval_seconds": policy.interval,
                "timeout_seconds": policy.timeout,
            },
        )

        snapshot: S | None = None
        polls = 0
        while True:
            if cancel_token is not None and cancel_token.cancelled:
                logger.info(
                    "Operation wait cancelled",
                    extra={
                        "operation": operation,
                        "operation_id": str(handle),
                        "poll_count": polls,
                        "cancel_reason": cancel_token.reason,
                    },
                )
                raise OperationCancelled(
                    f"Wait for {operation} {handle} cancelled",
                    handle=handle,
                    snapshot=snapshot,
                    reason=cancel_token.reason,
                )

            if clock() >= deadline:
                logger.warning(
                    "Operation timed out",
                    extra={
                        "operation": operation,
                        "operation_id": str(handle),
                        "poll_count": polls,
                        "status": status_of(snapshot) if status_of and snapshot is not None else None,
                        "timeout_seconds": policy.timeout,
                    },
                )
                raise OperationTimeout(
                    f"{operation} {handle} timed out after {policy.timeout}s",
                    handle=handle,
                    snapshot=snapshot,
                    timeout=policy.timeout,
                )

            snapshot = await _fetch_once(fetch, handle, policy.fetch_timeout, operation)
            polls += 1
            status = status_of(snapshot) if status_of else None

            if not is_terminal(snapshot):
                logger.debug(
                    "Operation still running",
                    extra={
                        "operation": operation,
                        "operation_id": str(handle),
                        "status": status,
                        "poll_count": polls,
                    },
                )
                await sleep(policy.interval)
                continue

            elapsed = round(clock() - start, 3)
            if not is_success(snapshot):
                reason = failure_reason(snapshot) if failure_reason else _field(snapshot, "error")
                reason = reason or f"{operation} failed"
                logger.warning(
                    "Operation failed",
                    extra={
                        "operation": operation,
                        "operation_id": str(handle),
                        "status": status,
                        "poll_count": polls,
                        "elapsed_seconds": elapsed,
                        "error_message": reason,
                    },
                )
                raise OperationFailed(reason, handle=handle, snapshot=snapshot)

            logger.info(
                "Operation completed",
                extra={
                    "operation": operation,
                    "operation_id": str(handle),
                    "status": status,
                    "poll_count": polls,
                    "elapsed_seconds": elapsed,
                },
            )
            return snapshot


class StatusPoller(Generic[H]):
    """
    Binds a status vocabulary and default policy for one operation kind.

    Snapshots are decoded JSON objects; the status and failure message are
    read from ``status_field`` and ``error_field``.

    Example:
        screenshot_poller = StatusPoller(
            "screenshot",
            terminal_statuses={"completed", "failed"},
            success_statuses={"completed"},
            policy=RENDER_POLICY,
            failure_message="Screenshot failed",
        )
        shot = await screenshot_poller.wait(submit, fetch)
    """

    def __init__(
        self,
        operation: str,
        terminal_statuses: Collection[str],
        success_statuses: Collection[str],
        policy: PollPolicy,
        failure_message: str | None = None,
        status_field: str = "status",
        error_field: str = "error",
    ):
        self.operation = operation
        self.terminal_statuses = frozenset(terminal_statuses)
        self.success_statuses = frozenset(success_statuses)
        if not self.success_statuses <= self.terminal_statuses:
            extra = sorted(self.success_statuses - self.terminal_statuses)
            raise ValueError(f"success statuses {extra} are not terminal for {operation}")
        self.policy = policy
        self.failure_message = failure_message or f"{operation} failed"
        self.status_field = status_field
        self.error_field = error_field

    def status_of(self, snapshot: Any) -> Any:
        return _field(snapshot, self.status_field)

    def is_terminal(self, snapshot: Any) -> bool:
        return self.status_of(snapshot) in self.terminal_statuses

    def is_success(self, snapshot: Any) -> bool:
        return self.status_of(snapshot) in self.success_statuses

    def failure_reason(self, snapshot: Any) -> str:
        return _field(snapshot, self.error_field) or self.failure_message

    async def wait(
        self,
        submit: Callable[[], Awaitable[H]],
        fetch: Callable[[H], Awaitable[Any]],
        policy: PollPolicy | None = None,
        cancel_token: CancellationToken | None = None,
        **kwargs: Any,
    ) -> Any:
        """Run wait_until_terminal with this kind's predicates."""
        return await wait_until_terminal(
            submit,
            fetch,
            self.is_terminal,
            self.is_success,
            policy or self.policy,
            failure_reason=self.failure_reason,
            status_of=self.status_of,
            cancel_token=cancel_token,
            operation=self.operation,
            **kwargs,
        )
