"""
Tests for exception hierarchy and error classification.
"""

import pytest

from core.errors.exceptions import (
    ApiError,
    AuthenticationError,
    ErrorCategory,
    NetworkError,
    NotFoundError,
    OperationCancelled,
    OperationError,
    OperationFailed,
    OperationTimeout,
    RateLimitError,
    Stack0Error,
    ValidationError,
    classify_http_status,
    error_for_status,
    is_retryable_error,
)


class TestStack0Error:
    """Test base Stack0Error class."""

    def test_basic_error(self):
        """Can create basic error with message."""
        err = Stack0Error("Something went wrong")
        assert err.message == "Something went wrong"
        assert err.cause is None
        assert err.context == {}
        assert err.category == ErrorCategory.UNKNOWN
        assert str(err) == "Something went wrong"

    def test_error_with_cause(self):
        """Can wrap another exception."""
        cause = ValueError("Invalid value")
        err = Stack0Error("Wrapper message", cause=cause)
        assert err.cause is cause
        assert str(err) == "Wrapper message | Caused by: Invalid value"

    def test_error_with_context(self):
        err = Stack0Error("Error", context={"path": "/webdata/screenshots"})
        assert err.context["path"] == "/webdata/screenshots"

    def test_unknown_is_not_retryable(self):
        assert Stack0Error("Error").is_retryable is False


class TestApiError:
    """Test HTTP error classes."""

    def test_attributes(self):
        err = ApiError("Bad thing", status_code=418, code="TEAPOT", response={"message": "Bad thing"})
        assert err.status_code == 418
        assert err.code == "TEAPOT"
        assert err.response == {"message": "Bad thing"}

    def test_category_follows_status(self):
        assert ApiError("x", status_code=500).category == ErrorCategory.TRANSIENT
        assert ApiError("x", status_code=418).category == ErrorCategory.PERMANENT
        assert ApiError("x", status_code=401).category == ErrorCategory.AUTH

    def test_category_without_status(self):
        assert ApiError("x").category == ErrorCategory.UNKNOWN

    def test_rate_limit_is_retryable(self):
        assert RateLimitError("slow down", status_code=429).is_retryable is True

    def test_not_found_is_not_retryable(self):
        assert NotFoundError("gone", status_code=404).is_retryable is False

    def test_subclasses_are_api_errors(self):
        for cls in (AuthenticationError, NotFoundError, ValidationError, RateLimitError):
            assert issubclass(cls, ApiError)
            assert issubclass(cls, Stack0Error)


class TestNetworkError:
    def test_transient(self):
        err = NetworkError("Network error: GET /x", cause=OSError("refused"))
        assert err.category == ErrorCategory.TRANSIENT
        assert err.is_retryable is True
        assert "refused" in str(err)


class TestOperationErrors:
    """Test errors raised while waiting on long-running operations."""

    def test_failed_carries_reason_and_snapshot(self):
        snapshot = {"id": "ss_1", "status": "failed", "error": "DNS lookup failed"}
        err = OperationFailed("DNS lookup failed", handle="ss_1", snapshot=snapshot)
        assert isinstance(err, OperationError)
        assert err.reason == "DNS lookup failed"
        assert err.handle == "ss_1"
        assert err.snapshot is snapshot
        assert err.category == ErrorCategory.PERMANENT

    def test_timeout(self):
        err = OperationTimeout("timed out", handle="run_1", snapshot={"status": "running"}, timeout=600)
        assert err.timeout == 600
        assert err.snapshot == {"status": "running"}
        assert err.is_retryable is True

    def test_cancelled(self):
        err = OperationCancelled("cancelled", handle=None, reason="user abort")
        assert err.handle is None
        assert err.reason == "user abort"
        assert err.is_retryable is False

    def test_operation_errors_are_distinct(self):
        assert not issubclass(OperationCancelled, OperationFailed)
        assert not issubclass(OperationTimeout, OperationFailed)


class TestClassifyHttpStatus:
    @pytest.mark.parametrize(
        "status,expected",
        [
            (200, ErrorCategory.UNKNOWN),
            (204, ErrorCategory.UNKNOWN),
            (400, ErrorCategory.PERMANENT),
            (401, ErrorCategory.AUTH),
            (403, ErrorCategory.AUTH),
            (404, ErrorCategory.PERMANENT),
            (408, ErrorCategory.TRANSIENT),
            (422, ErrorCategory.PERMANENT),
            (429, ErrorCategory.TRANSIENT),
            (500, ErrorCategory.TRANSIENT),
            (503, ErrorCategory.TRANSIENT),
        ],
    )
    def test_classification(self, status, expected):
        assert classify_http_status(status) == expected


class TestErrorForStatus:
    @pytest.mark.parametrize(
        "status,expected_class",
        [
            (400, ValidationError),
            (401, AuthenticationError),
            (403, AuthenticationError),
            (404, NotFoundError),
            (409, ValidationError),
            (422, ValidationError),
            (429, RateLimitError),
        ],
    )
    def test_mapped_statuses(self, status, expected_class):
        err = error_for_status(status, "message", code="CODE", response={"message": "message"})
        assert type(err) is expected_class
        assert err.status_code == status
        assert err.code == "CODE"
        assert err.response == {"message": "message"}

    def test_unmapped_4xx_is_plain_api_error(self):
        err = error_for_status(418, "teapot")
        assert type(err) is ApiError
        assert err.category == ErrorCategory.PERMANENT

    def test_5xx_is_plain_transient_api_error(self):
        err = error_for_status(502, "bad gateway")
        assert type(err) is ApiError
        assert err.is_retryable is True


class TestIsRetryableError:
    def test_library_errors(self):
        assert is_retryable_error(NetworkError("down")) is True
        assert is_retryable_error(OperationFailed("failed")) is False

    def test_foreign_exceptions_are_not_retryable(self):
        assert is_retryable_error(ValueError("nope")) is False
        assert is_retryable_error(ConnectionError("reset")) is False
