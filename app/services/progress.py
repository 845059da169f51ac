"""
app/services/progress.py

Progress sinks for report generation.

The orchestrator only knows the ``ProgressSink`` interface. Transports (the
server-sent events endpoint, the buffered compatibility endpoint, the CLI)
subscribe to a ``ProgressChannel`` and map events onto their own wire format.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Protocol


class ProgressSink(Protocol):
    async def emit(self, message: str) -> None:
        ...

    async def close(self, error: str | None = None) -> None:
        ...


@dataclass(frozen=True)
class ProgressEvent:
    """
    One ordered progress notification.

    ``sequence`` is the emission index within the request, starting at 0.
    """

    sequence: int
    message: str

    def to_sse(self) -> str:
        return f"data: {json.dumps({'message': self.message})}\n\n"


def error_frame(message: str) -> str:
    return f"data: {json.dumps({'error': message})}\n\n"


class ProgressChannel:
    """
    In-process progress sink that keeps the full event history.

    Any number of subscribers may attach at any time; each receives every
    event from the first one, in emission order, and stops once the channel
    is closed.
    """

    def __init__(self) -> None:
        self._events: list[ProgressEvent] = []
        self._subscribers: list[asyncio.Queue[ProgressEvent | None]] = []
        self._closed = False
        self._error: str | None = None

    @property
    def events(self) -> list[ProgressEvent]:
        return list(self._events)

    @property
    def messages(self) -> list[str]:
        return [event.message for event in self._events]

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def error(self) -> str | None:
        return self._error

    async def emit(self, message: str) -> None:
        if self._closed:
            raise RuntimeError("Cannot emit progress on a closed channel.")
        event = ProgressEvent(sequence=len(self._events), message=message)
        self._events.append(event)
        for queue in self._subscribers:
            queue.put_nowait(event)

    async def close(self, error: str | None = None) -> None:
        if self._closed:
            return
        self._closed = True
        self._error = error
        for queue in self._subscribers:
            queue.put_nowait(None)

    async def subscribe(self) -> AsyncIterator[ProgressEvent]:
        queue: asyncio.Queue[ProgressEvent | None] = asyncio.Queue()
        for event in self._events:
            queue.put_nowait(event)
        if self._closed:
            queue.put_nowait(None)
        else:
            self._subscribers.append(queue)

        try:
            while True:
                event = await queue.get()
                if event is None:
                    return
                yield event
        finally:
            if queue in self._subscribers:
                self._subscribers.remove(queue)
