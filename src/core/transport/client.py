"""Async JSON-over-HTTP transport with bearer auth and error classification."""

import asyncio
import json
import logging
import time
from collections.abc import Mapping
from typing import Any

import aiohttp

from core import __version__
from core.errors.exceptions import ApiError, NetworkError, error_for_status
from core.logging.context import get_log_context
from core.transport.query import build_params
from core.utils.json_serializers import json_serializer

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.stack0.dev/v1"
DEFAULT_REQUEST_TIMEOUT = 30.0
SLOW_REQUEST_SECONDS = 2.0
USER_AGENT = f"stack0-python/{__version__}"


class _NoBody:
    """Marker for "send no request body" (distinct from a JSON ``null``)."""

    def __repr__(self) -> str:
        return "NO_BODY"


NO_BODY: Any = _NoBody()


def _truncate(text: str, limit: int = 500) -> str:
    return text[:limit] + "..." if len(text) > limit else text


class HttpTransport:
    """
    Executes exactly one HTTP request per call against the API.

    Non-2xx responses become classified ApiError subclasses, failures to get
    any response become NetworkError. Nothing is retried.

    The aiohttp session is created lazily on first use (unless one is passed
    in) and closed by close() or by leaving ``async with``. Configuration is
    read-only after construction, so one transport can be shared by any
    number of concurrent callers on the same event loop.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: aiohttp.ClientSession | None = None,
    ):
        if not api_key:
            raise ValueError("HttpTransport requires 'api_key'")

        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError(
                f"HttpTransport base_url must start with http:// or https://, got: {self.base_url!r}"
            )
        if request_timeout <= 0:
            raise ValueError(f"request_timeout must be > 0, got {request_timeout}")

        self._auth_header = f"Bearer {api_key}"
        self.request_timeout = request_timeout

        self._session = session
        self._owns_session = session is None
        self._closed = False

    async def __aenter__(self) -> "HttpTransport":
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._closed:
            raise RuntimeError("HttpTransport is closed, cannot create new session")
        if self._session is None or self._session.closed:
            if not self._owns_session:
                raise RuntimeError("Externally provided aiohttp session is closed")
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self) -> None:
        """Close the owned session. An externally provided session is left open."""
        self._closed = True
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
            # Let the connector finish closing its transports
            await asyncio.sleep(0)
        self._session = None

    @property
    def closed(self) -> bool:
        return self._closed

    def _build_headers(self, has_body: bool) -> dict[str, str]:
        headers = {
            "Authorization": self._auth_header,
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }
        # Some server frameworks reject a JSON content type on an empty body
        if has_body:
            headers["Content-Type"] = "application/json"
        return headers

    @staticmethod
    def _serialize_body(body: Any) -> str:
        return json.dumps(body, default=json_serializer, ensure_ascii=False)

    @staticmethod
    def _context_ids() -> dict[str, str]:
        return {k: v for k, v in get_log_context().items() if v}

    async def _handle_error_response(
        self,
        response: aiohttp.ClientResponse,
        method: str,
        path: str,
        duration: float,
    ) -> None:
        """Parse the error payload, classify by status and raise."""
        try:
            raw_body = await response.text()
        except (aiohttp.ClientError, UnicodeDecodeError):
            raw_body = ""

        payload: Any = None
        if raw_body:
            try:
                payload = json.loads(raw_body)
            except ValueError:
                payload = None

        status = response.status
        if isinstance(payload, dict):
            message = payload.get("message") or f"HTTP {status}"
            code = payload.get("code")
            error_body: Any = payload
        else:
            message = response.reason or f"HTTP {status}"
            code = None
            error_body = payload if payload is not None else raw_body

        error = error_for_status(
            status,
            str(message),
            code=str(code) if code is not None else None,
            response=error_body,
        )

        logger.warning(
            "API request failed",
            extra={
                **self._context_ids(),
                "api_method": method,
                "api_endpoint": path,
                "http_status": status,
                "error_code": error.code,
                "error_category": error.category.value,
                "is_retryable": error.is_retryable,
                "response_body": _truncate(raw_body) if raw_body else None,
                "duration_seconds": round(duration, 3),
            },
        )
        raise error

    @staticmethod
    async def _decode_success(response: aiohttp.ClientResponse) -> Any:
        try:
            raw_body = await response.text()
        except UnicodeDecodeError as e:
            raise ApiError(
                "Invalid JSON in response body",
                status_code=response.status,
                cause=e,
            ) from e
        if not raw_body.strip():
            return None
        try:
            return json.loads(raw_body)
        except ValueError as e:
            raise ApiError(
                "Invalid JSON in response body",
                status_code=response.status,
                response=_truncate(raw_body),
                cause=e,
            ) from e

    async def execute(
        self,
        method: str,
        path: str,
        body: Any = NO_BODY,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        """
        Issue one request and return the decoded JSON body.

        Args:
            method: HTTP verb
            path: Path below base_url, starting with "/"
            body: JSON-serializable request body; NO_BODY sends none
            params: Query parameters (None values are dropped)

        Returns:
            Decoded JSON (dict, list, scalar) or None for an empty body.
            No schema validation is applied.

        Raises:
            ApiError: Non-2xx response (subclass chosen by status)
            NetworkError: No response was received
        """
        session = await self._ensure_session()

        method = method.upper()
        url = f"{self.base_url}{path}"
        has_body = body is not NO_BODY
        data = self._serialize_body(body) if has_body else None
        query = build_params(params) if params else None
        ctx = self._context_ids()

        logger.debug(
            "API request starting",
            extra={
                **ctx,
                "api_method": method,
                "api_endpoint": path,
                "has_params": bool(query),
                "has_body": has_body,
            },
        )

        start_time = time.perf_counter()
        try:
            async with session.request(
                method,
                url,
                params=query,
                data=data,
                headers=self._build_headers(has_body),
                timeout=aiohttp.ClientTimeout(total=self.request_timeout),
            ) as response:
                duration = time.perf_counter() - start_time

                # Classify failures before touching the success path
                if not 200 <= response.status < 300:
                    await self._handle_error_response(response, method, path, duration)

                result = await self._decode_success(response)

                slow = duration > SLOW_REQUEST_SECONDS
                logger.log(
                    logging.INFO if slow else logging.DEBUG,
                    "Slow API request" if slow else "API request succeeded",
                    extra={
                        **ctx,
                        "api_method": method,
                        "api_endpoint": path,
                        "http_status": response.status,
                        "duration_seconds": round(duration, 3),
                    },
                )
                return result

        except TimeoutError as e:
            duration = time.perf_counter() - start_time
            logger.warning(
                "API request timeout",
                extra={
                    **ctx,
                    "api_method": method,
                    "api_endpoint": path,
                    "request_timeout_seconds": self.request_timeout,
                    "duration_seconds": round(duration, 3),
                    "error_category": "transient",
                },
            )
            raise NetworkError(
                f"Timeout after {self.request_timeout}s: {method} {path}",
                cause=e,
                context={"method": method, "path": path},
            ) from e

        except aiohttp.ClientError as e:
            duration = time.perf_counter() - start_time
            logger.error(
                "API connection error",
                exc_info=True,
                extra={
                    **ctx,
                    "api_method": method,
                    "api_endpoint": path,
                    "duration_seconds": round(duration, 3),
                    "error_category": "transient",
                },
            )
            raise NetworkError(
                f"Network error: {method} {path}",
                cause=e,
                context={"method": method, "path": path},
            ) from e

    async def get(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        return await self.execute("GET", path, params=params)

    async def post(self, path: str, body: Any, params: Mapping[str, Any] | None = None) -> Any:
        return await self.execute("POST", path, body=body, params=params)

    async def put(self, path: str, body: Any, params: Mapping[str, Any] | None = None) -> Any:
        return await self.execute("PUT", path, body=body, params=params)

    async def patch(self, path: str, body: Any, params: Mapping[str, Any] | None = None) -> Any:
        return await self.execute("PATCH", path, body=body, params=params)

    async def delete(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        return await self.execute("DELETE", path, params=params)

    async def delete_with_body(
        self, path: str, body: Any, params: Mapping[str, Any] | None = None
    ) -> Any:
        """DELETE carrying a JSON body, for endpoints that require one."""
        return await self.execute("DELETE", path, body=body, params=params)
