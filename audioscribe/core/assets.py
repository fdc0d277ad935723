"""Model asset loading.

The model bundle is four files fetched from fixed locations. Positions in
the location list are significant: weights, tokenizer, config, mel filters.
"""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Sequence

from audioscribe.core.errors import AssetFetchError
from audioscribe.ports.fetcher import FetchPort

logger = logging.getLogger(__name__)

ASSET_NAMES = ("weights", "tokenizer", "config", "mel_filters")


@dataclass(frozen=True)
class ModelAssetBundle:
    """Raw buffers needed to construct a decoding engine."""
    weights: bytes
    tokenizer: bytes
    config: bytes
    mel_filters: bytes

    @classmethod
    def from_buffers(cls, buffers: Sequence[bytes]) -> ModelAssetBundle:
        """Build a bundle from buffers ordered like ASSET_NAMES."""
        if len(buffers) != len(ASSET_NAMES):
            raise ValueError(
                f"Expected {len(ASSET_NAMES)} asset buffers, got {len(buffers)}"
            )
        return cls(*(bytes(b) for b in buffers))

    @property
    def total_size(self) -> int:
        return sum(len(getattr(self, name)) for name in ASSET_NAMES)


async def _fetch_asset(fetcher: FetchPort, location: str) -> bytes:
    try:
        data = await fetcher.fetch(location)
    except Exception as e:
        raise AssetFetchError(location, e) from e
    if not data:
        raise AssetFetchError(location, ValueError("empty response body"))
    return data


async def fetch_all(fetcher: FetchPort, locations: Sequence[str]) -> list[bytes]:
    """Fetch every location concurrently. Result order matches ``locations``.

    The first failure cancels the outstanding fetches and is re-raised, so
    callers never see a partial result.
    """
    tasks = [
        asyncio.ensure_future(_fetch_asset(fetcher, location))
        for location in locations
    ]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        raise


async def load_assets(
    locations: Sequence[str], fetcher: FetchPort
) -> ModelAssetBundle:
    """Resolve the ordered asset locations into a ModelAssetBundle.

    Raises AssetFetchError naming the first location that failed.
    """
    if len(locations) != len(ASSET_NAMES):
        raise ValueError(
            f"Expected {len(ASSET_NAMES)} asset locations "
            f"({', '.join(ASSET_NAMES)}), got {len(locations)}"
        )

    start = time.monotonic()
    logger.info("Loading %d model assets", len(locations))
    buffers = await fetch_all(fetcher, locations)
    bundle = ModelAssetBundle.from_buffers(buffers)
    logger.info(
        "Model assets loaded (%d bytes, %.1fs)",
        bundle.total_size, time.monotonic() - start,
    )
    return bundle
