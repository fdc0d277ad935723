from __future__ import annotations

from pathlib import Path

import pytest

from tests.fakes import ASSETS, FakeFetcher


@pytest.fixture
def fetcher() -> FakeFetcher:
    """Serves the model assets plus two local audio blobs."""
    resources = dict(ASSETS)
    resources["blob:audio-1"] = b"RIFF....WAVEfmt "
    resources["blob:audio-2"] = b"RIFF....WAVEdata"
    return FakeFetcher(resources)


@pytest.fixture
def asset_dir(tmp_path: Path) -> Path:
    """Directory holding the bundled (relative) model assets."""
    d = tmp_path / "assets"
    (d / "model").mkdir(parents=True)
    for location, data in ASSETS.items():
        if not location.startswith("http"):
            (d / location).write_bytes(data)
    return d
