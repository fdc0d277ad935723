"""Audio sources selected on the surface, and the local "object URL" registry.

Uploaded files are held in memory under a ``blob:<id>`` locator until they
are released. The registry tracks the current selection; selecting a new
source revokes the previous local one.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

BLOB_SCHEME = "blob:"
REMOTE_SCHEMES = ("http", "https")


class SourceOrigin(Enum):
    LOCAL_FILE = "local-file"
    URL = "url"


@dataclass(frozen=True)
class AudioSource:
    origin: SourceOrigin
    locator: str
    name: str | None = None


class AudioSourceRegistry:
    """Holds local audio blobs and the currently selected source."""

    def __init__(self) -> None:
        self._blobs: dict[str, bytes] = {}
        self._selected: AudioSource | None = None

    @property
    def selected(self) -> AudioSource | None:
        return self._selected

    def create_object_url(self, data: bytes) -> str:
        """Register bytes and return a ``blob:`` locator for them."""
        locator = f"{BLOB_SCHEME}{uuid.uuid4().hex}"
        self._blobs[locator] = bytes(data)
        return locator

    def revoke_object_url(self, locator: str) -> None:
        """Drop a blob. Unknown locators are ignored."""
        if self._blobs.pop(locator, None) is not None:
            logger.debug("Revoked %s", locator)

    def resolve(self, locator: str) -> bytes | None:
        return self._blobs.get(locator)

    def select_file(self, data: bytes, name: str | None = None) -> AudioSource:
        source = AudioSource(
            origin=SourceOrigin.LOCAL_FILE,
            locator=self.create_object_url(data),
            name=name,
        )
        self._replace_selection(source)
        return source

    def select_url(self, url: str) -> AudioSource:
        """Select a remote audio URL. Only http(s) locators are accepted."""
        parsed = urlparse(url)
        if parsed.scheme.lower() not in REMOTE_SCHEMES or not parsed.netloc:
            raise ValueError(f"audio URL must be http(s), got {url!r}")
        source = AudioSource(origin=SourceOrigin.URL, locator=url)
        self._replace_selection(source)
        return source

    def clear(self) -> None:
        """Release every blob and the selection (surface teardown)."""
        count = len(self._blobs)
        self._blobs.clear()
        self._selected = None
        if count:
            logger.info("Released %d local audio source(s)", count)

    def _replace_selection(self, source: AudioSource) -> None:
        previous = self._selected
        self._selected = source
        if previous and previous.origin is SourceOrigin.LOCAL_FILE:
            self.revoke_object_url(previous.locator)
        logger.info("Selected audio source (%s): %s", source.origin.value, source.locator)
