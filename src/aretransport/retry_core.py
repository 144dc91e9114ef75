r"""Shared core logic for the sync and async retrying transports.

This module provides helper functions used by both ``RetryingTransport``
and ``AsyncRetryingTransport``: turning the final outcome into a return
value or an exception, checking the time budget, and building retry log
messages.
"""

from __future__ import annotations

__all__ = ["deadline_exceeded", "finalize_outcome", "log_deadline", "log_retry"]

import logging
import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from aretransport.config import TransportConfig
    from aretransport.policy import AttemptOutcome

logger: logging.Logger = logging.getLogger(__name__)


def finalize_outcome(outcome: AttemptOutcome) -> httpx.Response:
    """Return the response of a final outcome or re-raise its error.

    Args:
        outcome: The outcome of the last attempt.

    Returns:
        The response, with its stream still open.

    Raises:
        httpx.TransportError: The unchanged error of the last attempt.
    """
    if outcome.error is not None:
        raise outcome.error
    return outcome.response  # type: ignore[return-value]


def deadline_exceeded(config: TransportConfig, start_time: float, delay: float) -> bool:
    """Check if sleeping ``delay`` would cross the time budget.

    Args:
        config: The transport configuration holding ``max_total_time``.
        start_time: ``time.monotonic()`` value taken before the first
            attempt.
        delay: The delay about to be slept, in seconds.

    Returns:
        ``True`` if a budget is configured and would be exceeded.
    """
    if config.max_total_time is None:
        return False
    return time.monotonic() - start_time + delay > config.max_total_time


def log_retry(request: httpx.Request, outcome: AttemptOutcome, attempt: int, max_retries: int) -> None:
    logger.debug(
        f"{request.method} request to {request.url} will be retried "
        f"({outcome.describe()}) after attempt {attempt + 1}/{max_retries + 1}"
    )


def log_deadline(request: httpx.Request, attempt: int, max_total_time: float | None) -> None:
    logger.debug(
        f"{request.method} request to {request.url} stopped after "
        f"{attempt + 1} attempts (max_total_time={max_total_time}s)"
    )
