r"""Parameter validation utilities for the retrying transport.

This module provides validation functions for retry parameters to ensure
they meet the required constraints before being used by the retry
policy and the retrying transports.
"""

from __future__ import annotations

__all__ = ["validate_retry_params", "validate_timeout"]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


def validate_timeout(timeout: float | httpx.Timeout) -> None:
    """Check the timeout passed to the client factories.

    ``httpx.Timeout`` instances are accepted as they are; a plain number
    must be positive.

    Raises:
        ValueError: If timeout is a number <= 0.
    """
    if isinstance(timeout, (int, float)) and timeout <= 0:
        msg = f"timeout must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_retry_params(
    max_retries: int,
    backoff_base: float = 1.0,
    jitter_factor: float = 0.0,
    max_delay: float | None = None,
    max_total_time: float | None = None,
    retryable_status_codes: tuple[int, ...] = (),
) -> None:
    """Validate retry parameters.

    Args:
        max_retries: Maximum number of retry attempts. Must be >= 0.
            A value of 0 means no retries (only the initial attempt).
        backoff_base: Base delay in seconds of the exponential backoff.
            Must be >= 0.
        jitter_factor: Factor for adding random jitter to backoff delays.
            Must be >= 0.
        max_delay: Maximum backoff delay cap in seconds.
            Must be > 0 if provided.
        max_total_time: Overall time budget in seconds for all attempts.
            Must be > 0 if provided.
        retryable_status_codes: HTTP status codes that trigger a retry.
            Every code must be in the range 100-599.

    Raises:
        ValueError: If any parameter fails validation.

    Example:
        ```pycon
        >>> from aretransport.validation import validate_retry_params
        >>> validate_retry_params(max_retries=3)
        >>> validate_retry_params(max_retries=3, jitter_factor=0.1)
        >>> validate_retry_params(max_retries=0, max_total_time=30.0)

        ```
    """
    if max_retries < 0:
        msg = f"max_retries must be >= 0, got {max_retries}"
        raise ValueError(msg)
    if backoff_base < 0:
        msg = f"backoff_base must be >= 0, got {backoff_base}"
        raise ValueError(msg)
    if jitter_factor < 0:
        msg = f"jitter_factor must be >= 0, got {jitter_factor}"
        raise ValueError(msg)
    if max_delay is not None and max_delay <= 0:
        msg = f"max_delay must be > 0, got {max_delay}"
        raise ValueError(msg)
    if max_total_time is not None and max_total_time <= 0:
        msg = f"max_total_time must be > 0, got {max_total_time}"
        raise ValueError(msg)
    for status_code in retryable_status_codes:
        if not 100 <= status_code <= 599:
            msg = f"retryable status codes must be in [100, 599], got {status_code}"
            raise ValueError(msg)
