"""Decode worker — the background context that owns the orchestrator.

Inbound decode-request messages are queued and consumed one at a time by a
single task; each result is published on the event bus before the next
request is taken off the queue. Callers only ever post messages and
subscribe to results.
"""
from __future__ import annotations

import asyncio
import logging

from audioscribe.core.events import EventBus
from audioscribe.core.messages import (
    STATUS_INTERNAL_ERROR,
    STATUS_INVALID_REQUEST,
    DecodeRequest,
    DecodeResult,
)
from audioscribe.core.orchestrator import DecodeOrchestrator

logger = logging.getLogger(__name__)


class DecodeWorker:
    """Single-consumer request loop around a DecodeOrchestrator."""

    def __init__(self, orchestrator: DecodeOrchestrator, event_bus: EventBus) -> None:
        self._orchestrator = orchestrator
        self._event_bus = event_bus
        self._inbox: asyncio.Queue[object] = asyncio.Queue()
        self._task: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def pending(self) -> int:
        return self._inbox.qsize()

    def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info("Decode worker started")

    async def stop(self) -> None:
        """Stop consuming. An in-flight decode is abandoned, not awaited."""
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        self._orchestrator.close()
        logger.info("Decode worker stopped")

    def post_message(self, payload: object) -> None:
        """Enqueue a raw decode-request message. Never blocks."""
        self._inbox.put_nowait(payload)

    async def request_decode(self, audio_source: str) -> DecodeResult:
        """Post a request and wait for its result without blocking the loop."""
        request = DecodeRequest(audio_source=audio_source)
        results = self._event_bus.subscribe(DecodeResult)
        try:
            self.post_message(request.to_message())
            while True:
                result = await results.get()
                if result.request_id == request.request_id:
                    return result
        finally:
            self._event_bus.unsubscribe(DecodeResult, results)

    # -- Loop ------------------------------------------------------------------

    async def _run(self) -> None:
        while True:
            payload = await self._inbox.get()
            try:
                result = await self._handle(payload)
                self._event_bus.publish(result)
            finally:
                self._inbox.task_done()

    async def _handle(self, payload: object) -> DecodeResult:
        request_id = payload.get("requestId") if isinstance(payload, dict) else None
        if not isinstance(request_id, str):
            request_id = ""
        try:
            request = DecodeRequest.from_message(payload)
        except ValueError as e:
            logger.warning("Rejected decode request: %s", e)
            return DecodeResult.failed(request_id, STATUS_INVALID_REQUEST, str(e))

        logger.info(
            "Decode request %s received: %s", request.request_id, request.audio_source,
        )
        try:
            return await self._orchestrator.handle_request(request)
        except Exception as e:
            logger.exception("Decode request %s crashed", request.request_id)
            return DecodeResult.failed(request.request_id, STATUS_INTERNAL_ERROR, str(e))
