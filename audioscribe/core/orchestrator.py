"""Decode orchestration against a single, lazily built decoding engine.

The first request pays for asset loading and engine construction; later
requests reuse the engine. Requests are serialized on one lock, so engine
construction and decode calls never overlap.
"""
from __future__ import annotations

import asyncio
import functools
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Sequence

from audioscribe.core.assets import load_assets
from audioscribe.core.config import EngineModeFlags
from audioscribe.core.errors import (
    AudioFetchError,
    DecodeEngineError,
    EngineInitError,
    TranscriptionError,
)
from audioscribe.core.events import DecodeStartedEvent, EngineReadyEvent, EventBus
from audioscribe.core.messages import STATUS_INTERNAL_ERROR, DecodeRequest, DecodeResult
from audioscribe.core.transcript import TranscriptSegment, join_segments, parse_segments
from audioscribe.ports.engine import DecodingEngine, EngineFactory
from audioscribe.ports.fetcher import FetchPort

logger = logging.getLogger(__name__)


class EngineState(Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"


class DecodeOrchestrator:
    """Serves decode requests against one engine instance it owns."""

    def __init__(
        self,
        fetcher: FetchPort,
        engine_factory: EngineFactory,
        asset_locations: Sequence[str],
        mode_flags: EngineModeFlags | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._engine_factory = engine_factory
        self._asset_locations = tuple(asset_locations)
        self._flags = mode_flags or EngineModeFlags()
        self._event_bus = event_bus
        self._state = EngineState.UNINITIALIZED
        self._engine: DecodingEngine | None = None
        self._lock = asyncio.Lock()
        # Blocking engine calls run here, one at a time
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="audioscribe-engine",
        )

    @property
    def state(self) -> EngineState:
        return self._state

    async def handle_request(self, request: DecodeRequest) -> DecodeResult:
        """Decode one request. Never raises; failures become error results."""
        async with self._lock:
            start = time.monotonic()
            try:
                segments = await self._process(request)
            except TranscriptionError as e:
                logger.warning(
                    "Decode %s failed [%s]: %s", request.request_id, e.status, e,
                )
                return DecodeResult.failed(request.request_id, e.status, str(e))
            except Exception as e:
                logger.exception("Unexpected failure decoding %s", request.request_id)
                return DecodeResult.failed(
                    request.request_id, STATUS_INTERNAL_ERROR, str(e),
                )

            text = join_segments(segments)
            logger.info(
                "Decode %s complete: %d segments, %d chars (%.1fs)",
                request.request_id, len(segments), len(text),
                time.monotonic() - start,
            )
            return DecodeResult.complete(request.request_id, segments, text)

    def close(self) -> None:
        """Release the engine thread. The orchestrator is unusable afterwards."""
        self._executor.shutdown(wait=False)

    # -- Steps -----------------------------------------------------------------

    async def _process(self, request: DecodeRequest) -> list[TranscriptSegment]:
        engine = await self._ensure_engine()
        audio = await self._fetch_audio(request.audio_source)
        if self._event_bus:
            self._event_bus.publish(DecodeStartedEvent(
                request_id=request.request_id,
                audio_source=request.audio_source,
            ))
        payload = await self._decode(engine, audio)
        return parse_segments(payload)

    async def _ensure_engine(self) -> DecodingEngine:
        """Uninitialized → Ready, exactly once. Failures leave state untouched."""
        if self._state is EngineState.READY and self._engine is not None:
            return self._engine

        start = time.monotonic()
        bundle = await load_assets(self._asset_locations, self._fetcher)

        flags = self._flags
        build = functools.partial(
            self._engine_factory,
            bundle.weights,
            bundle.tokenizer,
            bundle.mel_filters,
            bundle.config,
            flags.quantized,
            flags.timestamps,
            flags.is_multilingual,
            flags.language,
            flags.task,
        )
        loop = asyncio.get_running_loop()
        try:
            engine = await loop.run_in_executor(self._executor, build)
        except Exception as e:
            raise EngineInitError(e) from e
        if not callable(getattr(engine, "decode", None)):
            raise EngineInitError(TypeError("engine object has no decode()"))

        self._engine = engine
        self._state = EngineState.READY
        elapsed = time.monotonic() - start
        logger.info("Decoding engine ready (%.1fs)", elapsed)
        if self._event_bus:
            self._event_bus.publish(EngineReadyEvent(
                asset_bytes=bundle.total_size, load_seconds=elapsed,
            ))
        return engine

    async def _fetch_audio(self, locator: str) -> bytes:
        try:
            audio = await self._fetcher.fetch(locator)
        except Exception as e:
            raise AudioFetchError(locator, e) from e
        if not audio:
            raise AudioFetchError(locator, ValueError("empty audio body"))
        logger.debug("Fetched %d audio bytes from %s", len(audio), locator)
        return audio

    async def _decode(self, engine: DecodingEngine, audio: bytes) -> str:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(self._executor, engine.decode, audio)
        except Exception as e:
            raise DecodeEngineError(f"Engine failed to decode audio: {e}", e) from e
