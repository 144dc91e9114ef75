r"""Factories for ``httpx`` clients routed through a retrying transport.

The returned objects are ordinary ``httpx.Client`` and
``httpx.AsyncClient`` instances, so ``get``, ``post``, ``send``,
``request`` and the rest of the ``httpx`` API behave as usual, with
transient failures retried underneath.
"""

from __future__ import annotations

__all__ = ["new_async_retryable_client", "new_retryable_client"]

from typing import Any

import httpx

from aretransport.config import DEFAULT_TIMEOUT, TransportConfig
from aretransport.transport import RetryingTransport
from aretransport.transport_async import AsyncRetryingTransport
from aretransport.validation import validate_timeout


def new_retryable_client(
    *,
    config: TransportConfig | None = None,
    transport: httpx.BaseTransport | None = None,
    **kwargs: Any,
) -> httpx.Client:
    r"""Create an ``httpx.Client`` whose requests are retried.

    Args:
        config: Optional retry configuration. If ``None``, a default
            ``TransportConfig`` is used.
        transport: Optional transport that actually sends the requests.
            If ``None``, ``httpx.HTTPTransport()`` is used.
        **kwargs: Additional keyword arguments passed to
            ``httpx.Client`` (headers, auth, base_url, ...). ``timeout``
            defaults to ``DEFAULT_TIMEOUT``.

    Returns:
        The client. Closing it closes the wrapped transport.

    Raises:
        ValueError: If ``timeout`` is a non-positive number.

    Example:
        ```pycon
        >>> from aretransport import TransportConfig, new_retryable_client
        >>> with new_retryable_client(config=TransportConfig(max_retries=5)) as client:  # doctest: +SKIP
        ...     response = client.get("https://api.example.com/data")
        ...

        ```
    """
    kwargs.setdefault("timeout", DEFAULT_TIMEOUT)
    validate_timeout(kwargs["timeout"])
    return httpx.Client(transport=RetryingTransport(transport, config=config), **kwargs)


def new_async_retryable_client(
    *,
    config: TransportConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    **kwargs: Any,
) -> httpx.AsyncClient:
    r"""Create an ``httpx.AsyncClient`` whose requests are retried.

    Args:
        config: Optional retry configuration. If ``None``, a default
            ``TransportConfig`` is used.
        transport: Optional transport that actually sends the requests.
            If ``None``, ``httpx.AsyncHTTPTransport()`` is used.
        **kwargs: Additional keyword arguments passed to
            ``httpx.AsyncClient``. ``timeout`` defaults to
            ``DEFAULT_TIMEOUT``.

    Returns:
        The async client. Closing it closes the wrapped transport.

    Raises:
        ValueError: If ``timeout`` is a non-positive number.

    Example:
        ```pycon
        >>> import asyncio
        >>> from aretransport import new_async_retryable_client
        >>> async def main():
        ...     async with new_async_retryable_client() as client:
        ...         return await client.get("https://api.example.com/data")
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """
    kwargs.setdefault("timeout", DEFAULT_TIMEOUT)
    validate_timeout(kwargs["timeout"])
    return httpx.AsyncClient(transport=AsyncRetryingTransport(transport, config=config), **kwargs)
