r"""Request body buffering for replay across retry attempts.

This module provides ``ReplayableBody``, which reads a request body once
into immutable bytes and hands out a fresh, independent stream over those
bytes for every attempt. The original stream of the request is never
rewound or reused.
"""

from __future__ import annotations

__all__ = ["ReplayableBody", "has_body"]

import logging

import httpx

from aretransport.exceptions import BodyReadError

logger: logging.Logger = logging.getLogger(__name__)


def has_body(request: httpx.Request) -> bool:
    """Indicate if a request carries a body.

    ``httpx`` sets ``Content-Length`` or ``Transfer-Encoding`` whenever
    a request is built with content, so a request without either header
    has no body to replay.

    Args:
        request: The request to inspect.

    Returns:
        ``True`` if the request has a body, otherwise ``False``.

    Example:
        ```pycon
        >>> import httpx
        >>> from aretransport.body import has_body
        >>> has_body(httpx.Request("GET", "https://example.com"))
        False
        >>> has_body(httpx.Request("POST", "https://example.com", content=b"data"))
        True

        ```
    """
    return "Content-Length" in request.headers or "Transfer-Encoding" in request.headers


class ReplayableBody:
    """Immutable request body plus a factory of fresh streams.

    Args:
        content: The buffered body, or ``None`` if the request has no body.

    Example:
        ```pycon
        >>> from aretransport.body import ReplayableBody
        >>> body = ReplayableBody(b"payload")
        >>> b"".join(body.stream())
        b'payload'
        >>> b"".join(body.stream())
        b'payload'

        ```
    """

    def __init__(self, content: bytes | None = None) -> None:
        self._content = content

    def __repr__(self) -> str:
        size = None if self._content is None else len(self._content)
        return f"{self.__class__.__qualname__}(size={size})"

    @property
    def content(self) -> bytes | None:
        return self._content

    @classmethod
    def from_request(cls, request: httpx.Request) -> ReplayableBody:
        """Buffer the body of a synchronous request.

        A request without ``Content-Length`` or ``Transfer-Encoding`` is
        treated as bodiless, like ``httpcore`` frames it: a stream attached
        to such a request is not read and every attempt is sent empty.

        Args:
            request: The request whose body is read.

        Returns:
            The buffered body. The stream of a request without body is
            not touched.

        Raises:
            BodyReadError: If the body cannot be fully read.
        """
        if not has_body(request):
            _log_unframed_stream(request)
            return cls()
        try:
            content = b"".join(request.stream)  # type: ignore[arg-type]
        except Exception as exc:
            raise _body_read_error(request, exc) from exc
        logger.debug(f"Buffered {len(content)} bytes of {request.method} request body to {request.url}")
        return cls(content)

    @classmethod
    async def afrom_request(cls, request: httpx.Request) -> ReplayableBody:
        """Buffer the body of an asynchronous request.

        See ``from_request`` for the bodiless case.

        Args:
            request: The request whose body is read.

        Returns:
            The buffered body. The stream of a request without body is
            not touched.

        Raises:
            BodyReadError: If the body cannot be fully read.
        """
        if not has_body(request):
            _log_unframed_stream(request)
            return cls()
        try:
            content = b"".join([part async for part in request.stream])  # type: ignore[union-attr]
        except Exception as exc:
            raise _body_read_error(request, exc) from exc
        logger.debug(f"Buffered {len(content)} bytes of {request.method} request body to {request.url}")
        return cls(content)

    def stream(self) -> httpx.ByteStream:
        """Create a new stream over the buffered bytes.

        ``httpx.ByteStream`` supports both sync and async iteration, so
        the same stream type serves both transports.

        Returns:
            A stream that does not share read state with any other
            stream returned by this method.
        """
        return httpx.ByteStream(self._content or b"")

    def attach(self, request: httpx.Request) -> httpx.Request:
        """Clone a request with a fresh stream over the buffered body.

        Method, URL, headers and extensions are preserved unchanged.

        Args:
            request: The original request.

        Returns:
            The cloned request.
        """
        return httpx.Request(
            method=request.method,
            url=request.url,
            headers=request.headers,
            stream=self.stream(),
            extensions=request.extensions,
        )


def _body_read_error(request: httpx.Request, exc: Exception) -> BodyReadError:
    logger.debug(f"Failed to read {request.method} request body to {request.url}: {exc}")
    return BodyReadError(
        method=request.method,
        url=str(request.url),
        message=f"failed to read the body of {request.method} request to {request.url}: {exc}",
    )


def _log_unframed_stream(request: httpx.Request) -> None:
    # httpx attaches an empty ByteStream to requests built without content
    if not isinstance(request.stream, httpx.ByteStream):
        logger.debug(
            f"Ignoring {type(request.stream).__name__} of {request.method} request to "
            f"{request.url}: no Content-Length or Transfer-Encoding header"
        )
