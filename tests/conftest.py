from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import httpx
import pytest

from tests.helpers import ScriptedHandler

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def mock_sleep() -> Generator[Mock, None, None]:
    """Patch time.sleep to make tests run faster."""
    with patch("time.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def mock_asleep() -> Generator[Mock, None, None]:
    """Patch asyncio.sleep to make tests run faster."""
    with patch("asyncio.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def ok_handler() -> ScriptedHandler:
    """Create a handler that always answers 200."""
    return ScriptedHandler(200)


@pytest.fixture
def mock_transport() -> httpx.BaseTransport:
    """Create a mock httpx.BaseTransport for testing."""
    return Mock(spec=httpx.BaseTransport)
