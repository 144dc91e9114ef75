r"""Configuration dataclass and defaults for the retrying transport.

This module provides configuration constants and a dataclass-based
configuration object shared by ``RetryingTransport``,
``AsyncRetryingTransport`` and the client factories.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_BACKOFF_BASE",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_TIMEOUT",
    "RETRY_STATUS_CODES",
    "TransportConfig",
]

from dataclasses import dataclass, replace
from typing import Any

from aretransport.validation import validate_retry_params

# Default timeout in seconds for HTTP requests sent by the client factories
DEFAULT_TIMEOUT = 10.0

# Default maximum number of retry attempts
# Total attempts = max_retries + 1 (initial attempt)
DEFAULT_MAX_RETRIES = 3

# Default base delay for exponential backoff
# Wait time = backoff_base * (2 ** attempt)
# With 1.0: 1st retry waits 1s, 2nd waits 2s, 3rd waits 4s
DEFAULT_BACKOFF_BASE = 1.0

# HTTP status codes that should trigger automatic retry
# 502: Bad Gateway - Upstream server error
# 503: Service Unavailable - Server overloaded or down
# 504: Gateway Timeout - Upstream server timeout
RETRY_STATUS_CODES = (502, 503, 504)


@dataclass(frozen=True)
class TransportConfig:
    """Configuration for the retrying transport.

    Args:
        max_retries: Maximum number of retry attempts. Must be >= 0.
        retryable_status_codes: HTTP status codes that should trigger a retry.
        backoff_base: Base delay in seconds for exponential backoff.
            Must be >= 0.
        max_delay: Optional cap in seconds on a single backoff delay.
            Must be > 0 if provided.
        jitter_factor: Factor for adding random jitter to backoff delays.
            Must be >= 0. ``0.0`` disables jitter.
        max_total_time: Optional overall time budget in seconds. Remaining
            retries are abandoned once the next backoff would exceed it.
            Must be > 0 if provided.

    Example:
        ```pycon
        >>> from aretransport.config import TransportConfig
        >>> config = TransportConfig()
        >>> config.max_retries
        3
        >>> config.retryable_status_codes
        (502, 503, 504)
        >>> merged = config.merge(max_retries=5)
        >>> merged.max_retries
        5
        >>> config.max_retries
        3

        ```
    """

    max_retries: int = DEFAULT_MAX_RETRIES
    retryable_status_codes: tuple[int, ...] = RETRY_STATUS_CODES
    backoff_base: float = DEFAULT_BACKOFF_BASE
    max_delay: float | None = None
    jitter_factor: float = 0.0
    max_total_time: float | None = None

    def __post_init__(self) -> None:
        """Validate configuration parameters after initialization.

        Raises:
            ValueError: If any parameter fails validation.
        """
        # Accept any iterable of codes (e.g. a set) but store a tuple
        object.__setattr__(self, "retryable_status_codes", tuple(self.retryable_status_codes))
        validate_retry_params(
            max_retries=self.max_retries,
            backoff_base=self.backoff_base,
            jitter_factor=self.jitter_factor,
            max_delay=self.max_delay,
            max_total_time=self.max_total_time,
            retryable_status_codes=self.retryable_status_codes,
        )

    def merge(self, **overrides: Any) -> TransportConfig:
        """Create a new config with specified parameters overridden.

        Only non-None override values are applied.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new TransportConfig instance with overrides applied.

        Example:
            ```pycon
            >>> from aretransport.config import TransportConfig
            >>> config = TransportConfig(max_retries=3)
            >>> config.merge(max_retries=5, max_delay=None).max_retries
            5

            ```
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)
