r"""aretransport - Retrying transport for httpx.

This package provides ``httpx`` transports that wrap another transport
and transparently retry transport errors and transient status codes
(502, 503, 504) with exponential backoff. Request bodies are buffered
once and replayed byte-for-byte on every attempt, and discarded
responses are drained and closed so connections go back to the pool.

Example:
    ```pycon
    >>> from aretransport import TransportConfig, new_retryable_client
    >>> with new_retryable_client(config=TransportConfig(max_retries=5)) as client:  # doctest: +SKIP
    ...     response = client.get("https://api.example.com/data")
    ...

    ```
"""

from __future__ import annotations

__all__ = [
    "AsyncRetryingTransport",
    "AttemptOutcome",
    "BodyReadError",
    "RetryPolicy",
    "RetryingTransport",
    "TransportConfig",
    "__version__",
    "new_async_retryable_client",
    "new_retryable_client",
]

from importlib.metadata import PackageNotFoundError, version

from aretransport.client import new_async_retryable_client, new_retryable_client
from aretransport.config import TransportConfig
from aretransport.exceptions import BodyReadError
from aretransport.policy import AttemptOutcome, RetryPolicy
from aretransport.transport import RetryingTransport
from aretransport.transport_async import AsyncRetryingTransport

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
