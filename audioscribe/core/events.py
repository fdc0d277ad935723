"""Event Bus and typed event definitions for the decode worker.

The worker never calls back into the surface; it publishes events here and
surfaces subscribe to the types they care about.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import AsyncIterator, TypeVar

T = TypeVar("T")


class EventBus:
    """In-process pub/sub keyed by event type.

    The worker publishes DecodeResult; the orchestrator publishes engine and
    decode-start events. request_decode() waits on a subscribe() queue, the
    surface's ActivityWatcher consumes through iter_events().
    """

    def __init__(self) -> None:
        self._subscribers: dict[type, list[asyncio.Queue]] = {}

    def subscribe(self, event_type: type[T]) -> asyncio.Queue[T]:
        """Subscribe to events of a specific type. Returns a Queue."""
        queue: asyncio.Queue = asyncio.Queue()
        self._subscribers.setdefault(event_type, []).append(queue)
        return queue

    def unsubscribe(self, event_type: type[T], queue: asyncio.Queue) -> None:
        """Remove a subscription."""
        queues = self._subscribers.get(event_type, [])
        if queue in queues:
            queues.remove(queue)

    def subscriber_count(self, event_type: type) -> int:
        return len(self._subscribers.get(event_type, []))

    def publish(self, event: object) -> None:
        """Publish an event to all subscribers of its type.

        Subscriber queues are unbounded, so publishing never blocks or drops.
        """
        for queue in self._subscribers.get(type(event), []):
            queue.put_nowait(event)

    async def iter_events(self, event_type: type[T]) -> AsyncIterator[T]:
        """Async iterator for events of a specific type."""
        queue = self.subscribe(event_type)
        try:
            while True:
                yield await queue.get()
        finally:
            self.unsubscribe(event_type, queue)


# ---------------------------------------------------------------------------
# Event types (DecodeResult from core.messages is published as-is)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EngineReadyEvent:
    """The decoding engine was constructed."""
    asset_bytes: int
    load_seconds: float


@dataclass(frozen=True)
class DecodeStartedEvent:
    """The engine's decode call for a request is about to run."""
    request_id: str
    audio_source: str
