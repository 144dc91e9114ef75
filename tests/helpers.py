r"""Shared test helpers for the retrying transport tests.

``ScriptedHandler`` is plugged into ``httpx.MockTransport`` and plays a
fixed list of outcomes, recording every request it receives.
``RecordingStream`` records when a response body is read and closed so
tests can check that discarded responses are drained before the next
attempt.
"""

from __future__ import annotations

import threading
from collections import defaultdict
from typing import TYPE_CHECKING

import httpx

from aretransport.backoff import BaseBackoffStrategy

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator

TEST_URL = "https://api.example.com/data"


class RecordingStream(httpx.SyncByteStream, httpx.AsyncByteStream):
    """Response stream that appends ``read`` and ``close`` to
    ``events``."""

    def __init__(self, content: bytes, events: list[str]) -> None:
        self._content = content
        self._events = events

    def __iter__(self) -> Iterator[bytes]:
        self._events.append("read")
        yield self._content

    def close(self) -> None:
        self._events.append("close")

    async def __aiter__(self) -> AsyncIterator[bytes]:
        self._events.append("read")
        yield self._content

    async def aclose(self) -> None:
        self._events.append("close")


class FailingStream(httpx.SyncByteStream, httpx.AsyncByteStream):
    """Stream whose iteration raises ``error``."""

    def __init__(self, error: Exception, events: list[str] | None = None) -> None:
        self._error = error
        self._events = events if events is not None else []
        self.iterated = False

    def __iter__(self) -> Iterator[bytes]:
        self.iterated = True
        raise self._error

    def close(self) -> None:
        self._events.append("close")

    async def __aiter__(self) -> AsyncIterator[bytes]:
        self.iterated = True
        raise self._error
        yield b""  # pragma: no cover

    async def aclose(self) -> None:
        self._events.append("close")


class ScriptedHandler:
    """Handler for ``httpx.MockTransport`` replaying scripted outcomes.

    Each outcome is a status code, an ``httpx.Response`` or an exception
    to raise. The last outcome repeats once the script is exhausted.

    Args:
        *outcomes: The outcomes, one per attempt.
        events: Optional shared event log. ``send`` is appended for every
            request received.
    """

    def __init__(
        self,
        *outcomes: int | httpx.Response | Exception,
        events: list[str] | None = None,
    ) -> None:
        self._outcomes = list(outcomes)
        self.events = events if events is not None else []
        self.requests: list[httpx.Request] = []
        self.bodies: list[bytes] = []

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.bodies.append(request.content)
        self.events.append("send")
        outcome = self._outcomes[min(len(self.requests), len(self._outcomes)) - 1]
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, int):
            return httpx.Response(
                outcome, stream=RecordingStream(f"status {outcome}".encode(), self.events)
            )
        return outcome


def one_shot_body(*chunks: bytes) -> Iterator[bytes]:
    """Generator body that can only be iterated once."""
    yield from chunks


class FirstAttemptFails:
    """Handler answering 503 to the first attempt of each distinct body
    and echoing the body with a 200 afterwards.

    Bodies are recorded per payload so requests running at the same time
    can be checked independently.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.bodies: dict[bytes, list[bytes]] = defaultdict(list)

    def record(self, request: httpx.Request) -> httpx.Response:
        # The payload identifies the logical request
        with self._lock:
            self.bodies[request.content].append(request.content)
            attempts = len(self.bodies[request.content])
        if attempts == 1:
            return httpx.Response(503)
        return httpx.Response(200, content=request.content)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        return self.record(request)


class RaisingBackoff(BaseBackoffStrategy):
    """Backoff strategy that fails on every call."""

    def calculate(self, attempt: int) -> float:
        msg = f"cannot compute delay for attempt {attempt}"
        raise RuntimeError(msg)
