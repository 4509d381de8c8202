"""Context variables for structured logging."""

from contextvars import ContextVar
from typing import Dict, Optional

_operation: ContextVar[str] = ContextVar("operation", default="")
_operation_id: ContextVar[str] = ContextVar("operation_id", default="")
_trace_id: ContextVar[str] = ContextVar("trace_id", default="")


def set_log_context(
    operation: Optional[str] = None,
    operation_id: Optional[str] = None,
    trace_id: Optional[str] = None,
) -> None:
    if operation is not None:
        _operation.set(operation)
    if operation_id is not None:
        _operation_id.set(operation_id)
    if trace_id is not None:
        _trace_id.set(trace_id)


def get_log_context() -> Dict[str, str]:
    return {
        "operation": _operation.get(),
        "operation_id": _operation_id.get(),
        "trace_id": _trace_id.get(),
    }


def clear_log_context() -> None:
    _operation.set("")
    _operation_id.set("")
    _trace_id.set("")
