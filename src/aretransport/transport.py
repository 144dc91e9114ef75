r"""Synchronous retrying transport.

This module provides ``RetryingTransport``, an ``httpx`` transport that
wraps another transport and transparently retries failed attempts
according to a ``RetryPolicy``.
"""

from __future__ import annotations

__all__ = ["RetryingTransport"]

import logging
import time

import httpx

from aretransport.body import ReplayableBody
from aretransport.config import TransportConfig
from aretransport.policy import AttemptOutcome, RetryPolicy
from aretransport.retry_core import deadline_exceeded, finalize_outcome, log_deadline, log_retry

logger: logging.Logger = logging.getLogger(__name__)


class RetryingTransport(httpx.BaseTransport):
    """Transport that retries transport errors and transient statuses.

    Each call to ``handle_request`` runs one logical request:

    1. The request body, if any, is read once into memory.
    2. The wrapped transport is called with a clone of the request that
       carries a fresh stream over the buffered body.
    3. If the policy says the outcome is final, or ``max_retries`` has
       been reached, the response is returned (its stream still open)
       or the transport error is re-raised unchanged.
    4. Otherwise a discarded response is drained and closed, the backoff
       delay is slept, and the next attempt starts at step 2.

    Exhausting the retries does not raise a dedicated error: the caller
    gets the last response or the last transport error.

    Args:
        transport: The wrapped transport. Defaults to
            ``httpx.HTTPTransport()``.
        config: The retry configuration. Defaults to ``TransportConfig()``.
        policy: The retry policy. Defaults to
            ``RetryPolicy.from_config(config)``.

    Example:
        ```pycon
        >>> import httpx
        >>> from aretransport import RetryingTransport, TransportConfig
        >>> transport = RetryingTransport(config=TransportConfig(max_retries=5))
        >>> with httpx.Client(transport=transport) as client:  # doctest: +SKIP
        ...     response = client.get("https://api.example.com/data")
        ...

        ```
    """

    def __init__(
        self,
        transport: httpx.BaseTransport | None = None,
        *,
        config: TransportConfig | None = None,
        policy: RetryPolicy | None = None,
    ) -> None:
        self._transport: httpx.BaseTransport = transport or httpx.HTTPTransport()
        self._config: TransportConfig = config or TransportConfig()
        self._policy: RetryPolicy = policy or RetryPolicy.from_config(self._config)

    @property
    def config(self) -> TransportConfig:
        return self._config

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    def handle_request(self, request: httpx.Request) -> httpx.Response:
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
        body = ReplayableBody.from_request(request)
        max_retries = self._config.max_retries
        start_time = time.monotonic()
        attempt = 0

        while True:
            outcome = self._send(body.attach(request))
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
                    outcome.response.close()
                raise

            if outcome.response is not None:
                _drain(outcome.response)

            time.sleep(delay)
            attempt += 1

    def _send(self, request: httpx.Request) -> AttemptOutcome:
        try:
            return AttemptOutcome.from_response(self._transport.handle_request(request))
        except httpx.TransportError as exc:
            return AttemptOutcome.from_error(exc)

    def close(self) -> None:
        self._transport.close()


def _drain(response: httpx.Response) -> None:
    """Read a discarded response to completion and release it."""
    try:
        response.read()
    except (httpx.HTTPError, httpx.StreamError) as exc:
        logger.debug(f"Failed to drain discarded response with status {response.status_code}: {exc}")
    finally:
        response.close()
