r"""Exponential backoff strategy."""

from __future__ import annotations

__all__ = ["ExponentialBackoff"]

import math

from aretransport.backoff.base import BaseBackoffStrategy
from aretransport.config import DEFAULT_BACKOFF_BASE


class ExponentialBackoff(BaseBackoffStrategy):
    """Exponential backoff strategy.

    Calculates delay as: base_delay * (2 ** attempt), with optional max_delay cap.
    Once the exponent is too large for a float the uncapped delay is
    ``math.inf``, so ``max_delay`` still applies.

    Args:
        base_delay: The base delay in seconds (default: 1.0).
        max_delay: Optional maximum delay cap in seconds. If specified,
            delays will not exceed this value.

    Example:
        ```pycon
        >>> from aretransport.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff()
        >>> [backoff.calculate(attempt) for attempt in range(4)]
        [1.0, 2.0, 4.0, 8.0]
        >>> backoff = ExponentialBackoff(base_delay=1.0, max_delay=5.0)
        >>> backoff.calculate(10)
        5.0

        ```
    """

    def __init__(
        self, base_delay: float = DEFAULT_BACKOFF_BASE, max_delay: float | None = None
    ) -> None:
        if base_delay < 0:
            msg = f"base_delay must be non-negative, got {base_delay}"
            raise ValueError(msg)
        if max_delay is not None and max_delay <= 0:
            msg = f"max_delay must be positive if specified, got {max_delay}"
            raise ValueError(msg)

        self.base_delay = base_delay
        self.max_delay = max_delay

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(base_delay={self.base_delay}, max_delay={self.max_delay})"

    def calculate(self, attempt: int) -> float:
        if attempt < 0:
            msg = f"attempt must be >= 0, got {attempt}"
            raise ValueError(msg)
        try:
            delay = self.base_delay * (2**attempt)
        except OverflowError:
            # 2**attempt no longer fits in a float
            delay = 0.0 if self.base_delay == 0 else math.inf
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        return delay
