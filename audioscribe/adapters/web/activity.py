"""Surface-side view of worker activity, fed by the event bus."""
from __future__ import annotations

import asyncio
import logging

from audioscribe.core.events import DecodeStartedEvent, EngineReadyEvent, EventBus
from audioscribe.core.messages import DecodeResult

logger = logging.getLogger(__name__)


class ActivityWatcher:
    """Subscribes to worker events and keeps a status snapshot for the surface."""

    def __init__(self, event_bus: EventBus) -> None:
        self._bus = event_bus
        self._tasks: list[asyncio.Task] = []
        self.engine_ready = False
        self.decoding: str | None = None
        self.completed = 0
        self.failed = 0

    def snapshot(self) -> dict:
        return {
            "engine": "ready" if self.engine_ready else "uninitialized",
            "decoding": self.decoding,
            "completed": self.completed,
            "failed": self.failed,
        }

    def start(self) -> None:
        """Start background tasks that consume events."""
        self._tasks.append(asyncio.create_task(self._watch_engine()))
        self._tasks.append(asyncio.create_task(self._watch_started()))
        self._tasks.append(asyncio.create_task(self._watch_results()))

    async def stop(self) -> None:
        for t in self._tasks:
            t.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()

    async def _watch_engine(self) -> None:
        try:
            async for ev in self._bus.iter_events(EngineReadyEvent):
                self.engine_ready = True
                logger.info(
                    "Engine ready: %.1f MB of assets in %.1fs",
                    ev.asset_bytes / (1024 * 1024), ev.load_seconds,
                )
        except asyncio.CancelledError:
            pass

    async def _watch_started(self) -> None:
        try:
            async for ev in self._bus.iter_events(DecodeStartedEvent):
                self.decoding = ev.request_id
                logger.info("Decoding %s (%s)", ev.request_id, ev.audio_source)
        except asyncio.CancelledError:
            pass

    async def _watch_results(self) -> None:
        try:
            async for ev in self._bus.iter_events(DecodeResult):
                if self.decoding == ev.request_id:
                    self.decoding = None
                if ev.ok:
                    self.completed += 1
                else:
                    self.failed += 1
        except asyncio.CancelledError:
            pass
