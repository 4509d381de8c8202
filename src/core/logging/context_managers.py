"""Context managers for structured logging."""

from typing import Dict, Optional

from core.logging.context import get_log_context, set_log_context


class LogContext:
    """
    Context manager for temporary log context.

    Usage:
        with LogContext(operation="screenshot", operation_id=handle):
            # All logs in this block will have operation and operation_id
            await poll()
    """

    def __init__(
        self,
        operation: Optional[str] = None,
        operation_id: Optional[str] = None,
        trace_id: Optional[str] = None,
    ):
        self.new_context = {
            "operation": operation,
            "operation_id": operation_id,
            "trace_id": trace_id,
        }
        self.old_context: Dict[str, str] = {}

    def __enter__(self) -> "LogContext":
        self.old_context = get_log_context()
        for key, value in self.new_context.items():
            if value is not None:
                set_log_context(**{key: value})
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        # Restore old context
        set_log_context(
            operation=self.old_context.get("operation", ""),
            operation_id=self.old_context.get("operation_id", ""),
            trace_id=self.old_context.get("trace_id", ""),
        )
        return False

    def update(self, **kwargs: Optional[str]) -> None:
        """Set more context fields while inside the block (e.g. once a handle is known)."""
        for key, value in kwargs.items():
            if key in self.new_context and value is not None:
                set_log_context(**{key: value})

