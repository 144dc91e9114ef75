r"""Unit tests for the retryable client factories."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, Mock, call

import httpx
import pytest

from aretransport import (
    AsyncRetryingTransport,
    RetryingTransport,
    TransportConfig,
    new_async_retryable_client,
    new_retryable_client,
)
from aretransport.config import DEFAULT_TIMEOUT
from tests.helpers import TEST_URL, ScriptedHandler

##########################################
#     Tests for new_retryable_client     #
##########################################


def test_new_retryable_client_returns_httpx_client() -> None:
    with new_retryable_client() as client:
        assert isinstance(client, httpx.Client)
        assert isinstance(client._transport, RetryingTransport)  # noqa: SLF001
        assert client.timeout == httpx.Timeout(DEFAULT_TIMEOUT)


def test_new_retryable_client_uses_config() -> None:
    config = TransportConfig(max_retries=7)
    with new_retryable_client(config=config) as client:
        assert client._transport.config is config  # noqa: SLF001


def test_new_retryable_client_forwards_kwargs() -> None:
    handler = ScriptedHandler(200)
    with new_retryable_client(
        transport=httpx.MockTransport(handler),
        base_url="https://api.example.com",
        headers={"Authorization": "Bearer token"},
        timeout=3.0,
    ) as client:
        assert client.timeout == httpx.Timeout(3.0)
        client.get("/data")
    assert str(handler.requests[0].url) == TEST_URL
    assert handler.requests[0].headers["Authorization"] == "Bearer token"


@pytest.mark.parametrize("timeout", [0, -1.0])
def test_new_retryable_client_invalid_timeout(timeout: float) -> None:
    with pytest.raises(ValueError, match=r"timeout must be > 0"):
        new_retryable_client(timeout=timeout)


def test_new_retryable_client_get_retries(mock_sleep: Mock) -> None:
    handler = ScriptedHandler(503, httpx.ConnectError("refused"), 200)
    with new_retryable_client(transport=httpx.MockTransport(handler)) as client:
        response = client.get(TEST_URL)
    assert response.status_code == 200
    assert response.text == "status 200"
    assert handler.call_count == 3
    assert mock_sleep.call_args_list == [call(1.0), call(2.0)]


def test_new_retryable_client_post_json_replayed(mock_sleep: Mock) -> None:
    handler = ScriptedHandler(502, 201)
    with new_retryable_client(transport=httpx.MockTransport(handler)) as client:
        response = client.post(TEST_URL, json={"key": "value"})
    assert response.status_code == 201
    assert [json.loads(body) for body in handler.bodies] == [{"key": "value"}] * 2
    mock_sleep.assert_called_once_with(1.0)


def test_new_retryable_client_send_request(mock_sleep: Mock) -> None:
    handler = ScriptedHandler(504, 204)
    with new_retryable_client(transport=httpx.MockTransport(handler)) as client:
        response = client.send(client.build_request("DELETE", TEST_URL))
    assert response.status_code == 204
    assert [request.method for request in handler.requests] == ["DELETE", "DELETE"]
    mock_sleep.assert_called_once_with(1.0)


def test_new_retryable_client_exhausted_returns_response(mock_sleep: Mock) -> None:
    handler = ScriptedHandler(503)
    with new_retryable_client(
        config=TransportConfig(max_retries=1), transport=httpx.MockTransport(handler)
    ) as client:
        response = client.get(TEST_URL)
    assert response.status_code == 503
    assert handler.call_count == 2
    mock_sleep.assert_called_once_with(1.0)


def test_new_retryable_client_exhausted_raises_transport_error(mock_sleep: Mock) -> None:
    handler = ScriptedHandler(httpx.ConnectError("refused"))
    with (
        new_retryable_client(
            config=TransportConfig(max_retries=2), transport=httpx.MockTransport(handler)
        ) as client,
        pytest.raises(httpx.ConnectError, match=r"refused"),
    ):
        client.get(TEST_URL)
    assert handler.call_count == 3
    assert mock_sleep.call_count == 2


def test_new_retryable_client_close_closes_wrapped(mock_transport: httpx.BaseTransport) -> None:
    client = new_retryable_client(transport=mock_transport)
    client.close()
    mock_transport.close.assert_called_once_with()


################################################
#     Tests for new_async_retryable_client     #
################################################


@pytest.mark.asyncio
async def test_new_async_retryable_client_returns_httpx_client() -> None:
    async with new_async_retryable_client() as client:
        assert isinstance(client, httpx.AsyncClient)
        assert isinstance(client._transport, AsyncRetryingTransport)  # noqa: SLF001
        assert client.timeout == httpx.Timeout(DEFAULT_TIMEOUT)


def test_new_async_retryable_client_invalid_timeout() -> None:
    with pytest.raises(ValueError, match=r"timeout must be > 0"):
        new_async_retryable_client(timeout=0)


@pytest.mark.asyncio
async def test_new_async_retryable_client_get_retries(mock_asleep: Mock) -> None:
    handler = ScriptedHandler(httpx.ReadTimeout("timeout"), 503, 200)
    async with new_async_retryable_client(transport=httpx.MockTransport(handler)) as client:
        response = await client.get(TEST_URL)
    assert response.status_code == 200
    assert handler.call_count == 3
    assert mock_asleep.call_args_list == [call(1.0), call(2.0)]


@pytest.mark.asyncio
async def test_new_async_retryable_client_put_replayed(mock_asleep: Mock) -> None:
    handler = ScriptedHandler(503, 200)
    async with new_async_retryable_client(transport=httpx.MockTransport(handler)) as client:
        response = await client.put(TEST_URL, content=b"replace")
    assert response.status_code == 200
    assert handler.bodies == [b"replace", b"replace"]
    mock_asleep.assert_called_once_with(1.0)


@pytest.mark.asyncio
async def test_new_async_retryable_client_aclose_closes_wrapped() -> None:
    wrapped = Mock(spec=httpx.AsyncBaseTransport, aclose=AsyncMock())
    client = new_async_retryable_client(transport=wrapped)
    await client.aclose()
    wrapped.aclose.assert_awaited_once_with()
