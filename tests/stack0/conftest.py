from unittest.mock import AsyncMock

import pytest

from core.transport import HttpTransport


@pytest.fixture
def transport():
    """Stand-in transport; resources only ever call its async verb methods."""
    return AsyncMock(spec=HttpTransport)
