"""
pytest configuration for the Stack0 client tests.

Adds src directory to Python path for imports and isolates tests from the
developer's environment.
"""

import json
import sys
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

# Add src directory to Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))

STACK0_ENV_VARS = (
    "STACK0_API_KEY",
    "STACK0_BASE_URL",
    "STACK0_REQUEST_TIMEOUT_SECONDS",
    "STACK0_CONFIG",
)


@pytest.fixture(autouse=True)
def _clean_stack0_env(monkeypatch):
    """Make sure a developer's STACK0_* variables never leak into tests."""
    for name in STACK0_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_response():
    """
    Factory for mocked aiohttp responses usable as ``async with`` targets.

    ``body`` may be a dict/list (JSON-encoded), a raw string, or None for an
    empty body.
    """

    def _make(status=200, body=None, reason="OK"):
        if body is None:
            text = ""
        elif isinstance(body, str):
            text = body
        else:
            text = json.dumps(body)

        mock_response = AsyncMock()
        mock_response.status = status
        mock_response.reason = reason
        mock_response.text = AsyncMock(return_value=text)
        mock_response.__aenter__ = AsyncMock(return_value=mock_response)
        mock_response.__aexit__ = AsyncMock(return_value=None)
        return mock_response

    return _make
