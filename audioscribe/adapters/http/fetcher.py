"""FetchPort implementation over aiohttp, local files and in-memory blobs.

Locator forms:
- ``http://`` / ``https://`` — downloaded with aiohttp
- ``blob:<id>`` — bytes registered in an AudioSourceRegistry
- ``file://<path>``, absolute paths, or paths relative to ``base_dir``
  (configured model assets only; the surface never selects these)
"""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from urllib.parse import unquote, urlparse

import aiohttp

from audioscribe.core.errors import FetchError
from audioscribe.core.sources import BLOB_SCHEME, AudioSourceRegistry
from audioscribe.ports.fetcher import FetchPort

logger = logging.getLogger(__name__)


class HttpFetcher(FetchPort):
    """Resolves locators to bytes. Success means a 2xx HTTP status."""

    def __init__(
        self,
        base_dir: Path | None = None,
        registry: AudioSourceRegistry | None = None,
        timeout: float = 300.0,
    ) -> None:
        self._base_dir = base_dir or Path.cwd()
        self._registry = registry
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None

    async def fetch(self, locator: str) -> bytes:
        if locator.startswith(BLOB_SCHEME):
            return self._fetch_blob(locator)
        scheme = urlparse(locator).scheme.lower()
        if scheme in ("http", "https"):
            return await self._fetch_http(locator)
        if scheme == "file":
            return await self._read_file(Path(unquote(urlparse(locator).path)), locator)
        if scheme and len(scheme) > 1:
            raise FetchError(locator, f"unsupported scheme '{scheme}'")
        # No scheme (or a Windows drive letter): treat as a filesystem path
        path = Path(locator)
        if not path.is_absolute():
            path = self._base_dir / path
        return await self._read_file(path, locator)

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    # -- Backends --------------------------------------------------------------

    def _fetch_blob(self, locator: str) -> bytes:
        data = self._registry.resolve(locator) if self._registry else None
        if data is None:
            raise FetchError(locator, "object URL was revoked or never created")
        return data

    async def _fetch_http(self, url: str) -> bytes:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        try:
            async with self._session.get(url) as resp:
                if resp.status < 200 or resp.status >= 300:
                    raise FetchError(url, f"HTTP {resp.status} {resp.reason or ''}".strip())
                data = await resp.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise FetchError(url, f"{type(e).__name__}: {e}") from e
        logger.debug("Fetched %s (%d bytes)", url, len(data))
        return data

    async def _read_file(self, path: Path, locator: str) -> bytes:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, path.read_bytes)
        except OSError as e:
            raise FetchError(locator, f"cannot read {path}: {e.strerror or e}") from e
