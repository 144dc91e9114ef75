r"""Retry decision logic for the retrying transport.

This module provides the ``AttemptOutcome`` value describing the result
of one attempt, and the ``RetryPolicy`` that decides whether an outcome
should be retried and how long to wait before the next attempt. The
policy performs no I/O and keeps no per-request state.
"""

from __future__ import annotations

__all__ = ["AttemptOutcome", "RetryPolicy"]

import logging
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING

from aretransport.backoff.exponential import ExponentialBackoff
from aretransport.config import DEFAULT_BACKOFF_BASE, RETRY_STATUS_CODES

if TYPE_CHECKING:
    from collections.abc import Iterable

    import httpx

    from aretransport.backoff.base import BaseBackoffStrategy
    from aretransport.config import TransportConfig

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttemptOutcome:
    """Result of a single attempt: either a response or a transport
    error.

    Exactly one of ``response`` and ``error`` is set. Use
    ``from_response`` and ``from_error`` to build instances.

    Example:
        ```pycon
        >>> import httpx
        >>> from aretransport.policy import AttemptOutcome
        >>> outcome = AttemptOutcome.from_response(httpx.Response(503))
        >>> outcome.status_code
        503
        >>> outcome.is_error
        False
        >>> AttemptOutcome.from_error(httpx.ConnectError("refused")).is_error
        True

        ```
    """

    response: httpx.Response | None = None
    error: httpx.TransportError | None = None

    def __post_init__(self) -> None:
        if (self.response is None) == (self.error is None):
            msg = "exactly one of response or error must be set"
            raise ValueError(msg)

    @classmethod
    def from_response(cls, response: httpx.Response) -> AttemptOutcome:
        return cls(response=response)

    @classmethod
    def from_error(cls, error: httpx.TransportError) -> AttemptOutcome:
        return cls(error=error)

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def status_code(self) -> int | None:
        """The response status code, or ``None`` for an error
        outcome."""
        if self.response is None:
            return None
        return self.response.status_code

    def describe(self) -> str:
        """Return a short label used in log messages."""
        if self.error is not None:
            return type(self.error).__name__
        return f"status {self.status_code}"


class RetryPolicy:
    """Decides whether an attempt should be retried and computes the
    delay before the next one.

    An outcome is retried when it is a transport error, or a response
    whose status code is in ``retryable_status_codes``. Every other
    status code (2xx, 3xx, 4xx, 500, 501, ...) is final.

    The delay comes from ``backoff_strategy`` (exponential by default,
    ``base * 2 ** attempt``). When ``jitter_factor`` is positive a random
    amount up to ``jitter_factor * delay`` is added to it.

    Args:
        retryable_status_codes: HTTP status codes treated as transient.
        backoff_strategy: Strategy computing the delay for an attempt.
            Defaults to ``ExponentialBackoff(DEFAULT_BACKOFF_BASE)``.
        jitter_factor: Factor for adding random jitter to delays.

    Example:
        ```pycon
        >>> import httpx
        >>> from aretransport.policy import AttemptOutcome, RetryPolicy
        >>> policy = RetryPolicy()
        >>> policy.should_retry(AttemptOutcome.from_response(httpx.Response(503)))
        True
        >>> policy.should_retry(AttemptOutcome.from_response(httpx.Response(404)))
        False
        >>> [policy.backoff_delay(attempt) for attempt in range(4)]
        [1.0, 2.0, 4.0, 8.0]

        ```
    """

    def __init__(
        self,
        retryable_status_codes: Iterable[int] = RETRY_STATUS_CODES,
        backoff_strategy: BaseBackoffStrategy | None = None,
        jitter_factor: float = 0.0,
    ) -> None:
        if jitter_factor < 0:
            msg = f"jitter_factor must be >= 0, got {jitter_factor}"
            raise ValueError(msg)
        self.retryable_status_codes: frozenset[int] = frozenset(retryable_status_codes)
        self.backoff_strategy: BaseBackoffStrategy = (
            backoff_strategy
            if backoff_strategy is not None
            else ExponentialBackoff(base_delay=DEFAULT_BACKOFF_BASE)
        )
        self.jitter_factor = jitter_factor

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}("
            f"retryable_status_codes={sorted(self.retryable_status_codes)}, "
            f"backoff_strategy={self.backoff_strategy!r}, "
            f"jitter_factor={self.jitter_factor})"
        )

    @classmethod
    def from_config(cls, config: TransportConfig) -> RetryPolicy:
        """Build a policy from a transport configuration.

        Args:
            config: The transport configuration.

        Returns:
            A policy using exponential backoff with ``config.backoff_base``
            and ``config.max_delay``.
        """
        return cls(
            retryable_status_codes=config.retryable_status_codes,
            backoff_strategy=ExponentialBackoff(
                base_delay=config.backoff_base, max_delay=config.max_delay
            ),
            jitter_factor=config.jitter_factor,
        )

    def should_retry(self, outcome: AttemptOutcome) -> bool:
        """Determine if an attempt outcome should be retried.

        Args:
            outcome: The outcome of the attempt.

        Returns:
            ``True`` for a transport error or a retryable status code,
            otherwise ``False``.
        """
        if outcome.is_error:
            return True
        return outcome.status_code in self.retryable_status_codes

    def backoff_delay(self, attempt: int) -> float:
        """Calculate the delay before the attempt following ``attempt``.

        Args:
            attempt: The attempt that just failed (0-indexed).

        Returns:
            The delay in seconds, including any jitter.

        Raises:
            ValueError: If ``attempt`` is negative.
        """
        delay = self.backoff_strategy.calculate(attempt)
        if self.jitter_factor > 0:
            jitter = random.uniform(0, self.jitter_factor) * delay  # noqa: S311
            logger.debug(f"Backoff delay {delay + jitter:.2f}s (base={delay:.2f}s, jitter={jitter:.2f}s)")
            return delay + jitter
        logger.debug(f"Backoff delay {delay:.2f}s")
        return delay
