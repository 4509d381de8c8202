"""
Long-running operation polling.

Provides the generic submit-then-poll algorithm, the poll policy value and
a cooperative cancellation token.
"""

from core.polling.policy import (
    BATCH_POLICY,
    RENDER_POLICY,
    WORKFLOW_POLICY,
    CancellationToken,
    PollPolicy,
)
from core.polling.poller import StatusPoller, wait_until_terminal

__all__ = [
    "PollPolicy",
    "CancellationToken",
    "RENDER_POLICY",
    "BATCH_POLICY",
    "WORKFLOW_POLICY",
    "StatusPoller",
    "wait_until_terminal",
]
