from __future__ import annotations

import asyncio
import logging
import signal

from audioscribe.adapters.engine.loader import load_engine_factory
from audioscribe.adapters.http.fetcher import HttpFetcher
from audioscribe.adapters.web.server import WebSurface
from audioscribe.config import Config
from audioscribe.core.events import EventBus
from audioscribe.core.orchestrator import DecodeOrchestrator
from audioscribe.core.sources import AudioSourceRegistry
from audioscribe.core.worker import DecodeWorker

logger = logging.getLogger("audioscribe")


def _setup_logging(log_file: str) -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_file),
        ],
    )


async def main() -> None:
    config = Config.from_env()
    _setup_logging(config.log_file)
    logger.info("audioscribe starting...")

    core = config.core_config()
    engine_factory = load_engine_factory(config.engine_factory)
    logger.info(
        "Model assets: %s (relative to %s)",
        ", ".join(core.asset_locations), config.asset_dir,
    )

    # -- Initialize core infrastructure --
    event_bus = EventBus()
    registry = AudioSourceRegistry()
    fetcher = HttpFetcher(
        base_dir=config.asset_dir,
        registry=registry,
        timeout=config.fetch_timeout,
    )
    orchestrator = DecodeOrchestrator(
        fetcher,
        engine_factory,
        core.asset_locations,
        mode_flags=core.mode_flags,
        event_bus=event_bus,
    )
    worker = DecodeWorker(orchestrator, event_bus)
    surface = WebSurface(worker, registry, event_bus, port=config.port)

    # Handle shutdown signals
    stop_event = asyncio.Event()

    def handle_signal() -> None:
        logger.info("Shutdown signal received")
        stop_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, handle_signal)

    worker.start()
    await surface.start()
    logger.info("audioscribe is running. Press Ctrl+C to stop.")

    await stop_event.wait()

    logger.info("Shutting down...")
    await surface.stop()
    await worker.stop()
    await fetcher.close()
    logger.info("audioscribe stopped.")


def run() -> None:
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
