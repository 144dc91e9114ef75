r"""Asynchronous retrying transport.

This module provides ``AsyncRetryingTransport``, the ``asyncio`` twin of
``RetryingTransport``. Backoff delays use ``asyncio.sleep`` so only the
task running the request is suspended.
"""

from __future__ import annotations

__all__ = ["AsyncRetryingTransport"]

import asyncio
import logging
import time

import httpx

from aretransport.body import ReplayableBody
from aretransport.config import TransportConfig
from aretransport.policy import AttemptOutcome, RetryPolicy
from aretransport.retry_core import deadline_exceeded, finalize_outcome, log_deadline, log_retry

logger: logging.Logger = logging.getLogger(__name__)


class AsyncRetryingTransport(httpx.AsyncBaseTransport):
    """Async transport that retries transport errors and transient
    statuses.

    See ``RetryingTransport`` for the retry loop. The behavior is the
    same, with the async methods of the wrapped transport and responses.

    Args:
        transport: The wrapped transport. Defaults to
            ``httpx.AsyncHTTPTransport()``.
        config: The retry configuration. Defaults to ``TransportConfig()``.
        policy: The retry policy. Defaults to
            ``RetryPolicy.from_config(config)``.

    Example:
        ```pycon
        >>> import asyncio
        >>> import httpx
        >>> from aretransport import AsyncRetryingTransport
        >>> async def main():
        ...     async with httpx.AsyncClient(transport=AsyncRetryingTransport()) as client:
        ...         return await client.get("https://api.example.com/data")
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        transport: httpx.AsyncBaseTransport | None = None,
        *,
        config: TransportConfig | None = None,
        policy: RetryPolicy | None = None,
    ) -> None:
        self._transport: httpx.AsyncBaseTransport = transport or httpx.AsyncHTTPTransport()
        self._config: TransportConfig = config or TransportConfig()
        self._policy: RetryPolicy = policy or RetryPolicy.from_config(self._config)

    @property
    def config(self) -> TransportConfig:
        return self._config

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        """Send a request, retrying according to the policy.

        Args:
            request: The request to send.

        Returns:
            The final response. Its stream is open and owned by the
            caller.

        Raises:
            BodyReadError: If the request body cannot be buffered.
            httpx.TransportError: The error of the last attempt, if the
                last attempt failed at the transport level.
        """
        body = await ReplayableBody.afrom_request(request)
        max_retries = self._config.max_retries
        start_time = time.monotonic()
        attempt = 0

        while True:
            outcome = await self._send(body.attach(request))
            try:
                if not self._policy.should_retry(outcome) or attempt >= max_retries:
                    return finalize_outcome(outcome)
                delay = self._policy.backoff_delay(attempt)
                if deadline_exceeded(self._config, start_time, delay):
                    log_deadline(request, attempt, self._config.max_total_time)
                    return finalize_outcome(outcome)
                log_retry(request, outcome, attempt, max_retries)
            except BaseException:
                # Only a returned response may stay open
                if outcome.response is not None:
                    await outcome.response.aclose()
                raise

            if outcome.response is not None:
                await _adrain(outcome.response)

            await asyncio.sleep(delay)
            attempt += 1

    async def _send(self, request: httpx.Request) -> AttemptOutcome:
        try:
            return AttemptOutcome.from_response(await self._transport.handle_async_request(request))
        except httpx.TransportError as exc:
            return AttemptOutcome.from_error(exc)

    async def aclose(self) -> None:
        await self._transport.aclose()


async def _adrain(response: httpx.Response) -> None:
    """Read a discarded response to completion and release it."""
    try:
        await response.aread()
    except (httpx.HTTPError, httpx.StreamError) as exc:
        logger.debug(f"Failed to drain discarded response with status {response.status_code}: {exc}")
    finally:
        await response.aclose()
