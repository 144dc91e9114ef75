r"""Exceptions raised by the retrying transport."""

from __future__ import annotations

__all__ = ["BodyReadError"]


class BodyReadError(Exception):
    """Raised when a request body cannot be buffered for replay.

    A body that cannot be read once will not become readable on a later
    attempt, so this error is never retried. The underlying error is
    available as ``__cause__``.

    Args:
        method: The HTTP method of the request.
        url: The URL of the request.
        message: Human-readable description of the failure.

    Example:
        ```pycon
        >>> from aretransport.exceptions import BodyReadError
        >>> error = BodyReadError(
        ...     method="POST",
        ...     url="https://api.example.com/upload",
        ...     message="failed to read the request body",
        ... )
        >>> error.method
        'POST'
        >>> str(error)
        'failed to read the request body'

        ```
    """

    def __init__(self, method: str, url: str, message: str) -> None:
        super().__init__(message)
        self.method = method
        self.url = url
