from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class FetchPort(Protocol):
    """Byte retrieval interface used for model assets and audio.

    Core logic never performs network or disk I/O directly; it goes through
    an implementation of this protocol so tests can swap in fakes.
    """

    async def fetch(self, locator: str) -> bytes:
        """Return the full body behind ``locator``.

        Raises FetchError when the locator cannot be resolved or the
        response is not a success.
        """
        ...
