r"""Abstract base class for backoff strategies."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy"]

from abc import ABC, abstractmethod


class BaseBackoffStrategy(ABC):
    """Abstract base class for backoff strategies.

    A backoff strategy maps a 0-indexed attempt number to the delay, in
    seconds, to wait before the next attempt. Implementations must not
    keep per-request state so one instance can serve concurrent requests.
    """

    @abstractmethod
    def calculate(self, attempt: int) -> float:
        """Calculate the backoff delay for a given attempt.

        Args:
            attempt: The attempt that just failed (0-indexed). attempt=0
                is the delay before the first retry.

        Returns:
            The delay in seconds before the next attempt.
        """
