"""Web surface — pick an audio source, request a decode, show the transcript.

All decoding happens in the DecodeWorker; handlers only post requests and
await the matching result, so the server stays responsive while the engine
runs.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from aiohttp import web

from audioscribe.adapters.web.activity import ActivityWatcher
from audioscribe.core.events import EventBus
from audioscribe.core.sources import AudioSource, AudioSourceRegistry

if TYPE_CHECKING:
    from audioscribe.core.worker import DecodeWorker

logger = logging.getLogger(__name__)

_HTML_PATH = Path(__file__).parent / "index.html"
_MAX_UPLOAD_BYTES = 200 * 1024 * 1024


def _serialize_source(source: AudioSource) -> dict:
    data = {"audioSource": source.locator, "origin": source.origin.value}
    if source.name:
        data["name"] = source.name
    return data


# ---------------------------------------------------------------------------
# Route handlers
# ---------------------------------------------------------------------------

async def _handle_index(request: web.Request) -> web.Response:
    html = _HTML_PATH.read_text(encoding="utf-8")
    return web.Response(text=html, content_type="text/html")


async def _handle_select_source(request: web.Request) -> web.Response:
    """POST /api/source — multipart ``file`` upload or JSON ``{"url": ...}``."""
    registry: AudioSourceRegistry = request.app["registry"]

    if request.content_type.startswith("multipart/"):
        form = await request.post()
        upload = form.get("file")
        if not isinstance(upload, web.FileField):
            return web.json_response({"error": "file is required"}, status=400)
        data = upload.file.read()
        if not data:
            return web.json_response({"error": "file is empty"}, status=400)
        source = registry.select_file(data, name=upload.filename)
        return web.json_response(_serialize_source(source))

    try:
        body = await request.json()
    except ValueError:
        return web.json_response({"error": "invalid JSON body"}, status=400)
    url = body.get("url") if isinstance(body, dict) else None
    if not isinstance(url, str) or not url.strip():
        return web.json_response({"error": "url is required"}, status=400)
    # Server-side paths and file: URLs are never selectable from the surface
    try:
        source = registry.select_url(url.strip())
    except ValueError as e:
        return web.json_response({"error": str(e)}, status=400)
    return web.json_response(_serialize_source(source))


async def _handle_get_source(request: web.Request) -> web.Response:
    """GET /api/source — current selection."""
    registry: AudioSourceRegistry = request.app["registry"]
    if registry.selected is None:
        return web.json_response({"error": "no audio source selected"}, status=404)
    return web.json_response(_serialize_source(registry.selected))


async def _handle_decode(request: web.Request) -> web.Response:
    """POST /api/decode — transcribe the selected source."""
    registry: AudioSourceRegistry = request.app["registry"]
    worker: DecodeWorker = request.app["worker"]

    source = registry.selected
    if source is None:
        return web.json_response({"error": "no audio source selected"}, status=400)

    result = await worker.request_decode(source.locator)
    if result.ok:
        request.app["state"]["transcript"] = result.text
        return web.json_response(result.to_message())
    # Anything but "complete" means no transcript; keep the previous one
    return web.json_response(result.to_message(), status=502)


async def _handle_transcript(request: web.Request) -> web.Response:
    """GET /api/transcript — last completed transcript."""
    return web.json_response({"text": request.app["state"]["transcript"]})


async def _handle_status(request: web.Request) -> web.Response:
    """GET /api/status — engine state and queue depth."""
    activity: ActivityWatcher = request.app["activity"]
    worker: DecodeWorker = request.app["worker"]
    return web.json_response({**activity.snapshot(), "pending": worker.pending})


async def _start_activity(app: web.Application) -> None:
    app["activity"].start()


async def _stop_activity(app: web.Application) -> None:
    await app["activity"].stop()


# ---------------------------------------------------------------------------
# App factory & server class
# ---------------------------------------------------------------------------

def build_app(
    worker: DecodeWorker,
    registry: AudioSourceRegistry,
    event_bus: EventBus,
) -> web.Application:
    app = web.Application(client_max_size=_MAX_UPLOAD_BYTES)
    app["worker"] = worker
    app["registry"] = registry
    app["state"] = {"transcript": ""}
    app["activity"] = ActivityWatcher(event_bus)
    app.on_startup.append(_start_activity)
    app.on_cleanup.append(_stop_activity)

    app.router.add_get("/", _handle_index)
    app.router.add_get("/api/source", _handle_get_source)
    app.router.add_post("/api/source", _handle_select_source)
    app.router.add_post("/api/decode", _handle_decode)
    app.router.add_get("/api/transcript", _handle_transcript)
    app.router.add_get("/api/status", _handle_status)

    return app


class WebSurface:
    """aiohttp-based interactive surface."""

    def __init__(
        self,
        worker: DecodeWorker,
        registry: AudioSourceRegistry,
        event_bus: EventBus,
        port: int = 7777,
    ) -> None:
        self._registry = registry
        self._app = build_app(worker, registry, event_bus)
        self._port = port
        self._runner: web.AppRunner | None = None

    async def start(self) -> None:
        self._runner = web.AppRunner(self._app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, "127.0.0.1", self._port)
        await site.start()
        logger.info("Web surface running at http://localhost:%d", self._port)

    async def stop(self) -> None:
        if self._runner:
            await self._runner.cleanup()
            logger.info("Web surface stopped")
        self._registry.clear()
