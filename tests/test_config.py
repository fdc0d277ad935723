from __future__ import annotations

from pathlib import Path

import pytest

from audioscribe.config import Config
from audioscribe.core.config import DEFAULT_ASSET_LOCATIONS, EngineModeFlags

_VARS = (
    "AUDIOSCRIBE_ENGINE_FACTORY",
    "AUDIOSCRIBE_WEIGHTS_URL",
    "AUDIOSCRIBE_TOKENIZER_URL",
    "AUDIOSCRIBE_CONFIG_URL",
    "AUDIOSCRIBE_MEL_FILTERS_URL",
    "AUDIOSCRIBE_ASSET_DIR",
    "AUDIOSCRIBE_PORT",
    "AUDIOSCRIBE_FETCH_TIMEOUT",
    "AUDIOSCRIBE_LOG_FILE",
    "AUDIOSCRIBE_QUANTIZED",
    "AUDIOSCRIBE_TIMESTAMPS",
    "AUDIOSCRIBE_MULTILINGUAL",
    "AUDIOSCRIBE_LANGUAGE",
    "AUDIOSCRIBE_TASK",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.setattr("audioscribe.config.load_dotenv", lambda **_: None)
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AUDIOSCRIBE_ENGINE_FACTORY", "whisper_engine:Decoder")


class TestFromEnv:
    def test_defaults(self):
        config = Config.from_env()
        assert config.engine_factory == "whisper_engine:Decoder"
        assert config.asset_locations == DEFAULT_ASSET_LOCATIONS
        assert config.port == 7777
        assert config.fetch_timeout == 300.0
        assert config.mode_flags == EngineModeFlags()

    def test_missing_engine_factory_fails(self, monkeypatch):
        monkeypatch.delenv("AUDIOSCRIBE_ENGINE_FACTORY")
        with pytest.raises(ValueError, match="AUDIOSCRIBE_ENGINE_FACTORY"):
            Config.from_env()

    def test_asset_overrides_keep_positions(self, monkeypatch):
        monkeypatch.setenv("AUDIOSCRIBE_CONFIG_URL", "https://cdn.test/config.json")
        config = Config.from_env()
        assert config.asset_locations[2] == "https://cdn.test/config.json"
        assert config.asset_locations[0] == DEFAULT_ASSET_LOCATIONS[0]
        assert config.asset_locations[3] == DEFAULT_ASSET_LOCATIONS[3]

    def test_mode_flags_from_env(self, monkeypatch):
        monkeypatch.setenv("AUDIOSCRIBE_QUANTIZED", "yes")
        monkeypatch.setenv("AUDIOSCRIBE_TIMESTAMPS", "0")
        monkeypatch.setenv("AUDIOSCRIBE_LANGUAGE", "de")
        monkeypatch.setenv("AUDIOSCRIBE_TASK", "Translate")
        flags = Config.from_env().mode_flags
        assert flags == EngineModeFlags(
            quantized=True, timestamps=False, is_multilingual=True,
            language="de", task="translate",
        )

    def test_invalid_bool_fails(self, monkeypatch):
        monkeypatch.setenv("AUDIOSCRIBE_QUANTIZED", "maybe")
        with pytest.raises(ValueError, match="AUDIOSCRIBE_QUANTIZED"):
            Config.from_env()

    def test_invalid_task_fails(self, monkeypatch):
        monkeypatch.setenv("AUDIOSCRIBE_TASK", "summarize")
        with pytest.raises(ValueError, match="AUDIOSCRIBE_TASK"):
            Config.from_env()

    def test_language_requires_multilingual(self, monkeypatch):
        monkeypatch.setenv("AUDIOSCRIBE_MULTILINGUAL", "false")
        monkeypatch.setenv("AUDIOSCRIBE_LANGUAGE", "en")
        with pytest.raises(ValueError, match="multilingual"):
            Config.from_env()

    def test_asset_dir_resolved(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("AUDIOSCRIBE_ASSET_DIR", str(tmp_path))
        monkeypatch.setenv("AUDIOSCRIBE_PORT", "8080")
        config = Config.from_env()
        assert config.asset_dir == tmp_path.resolve()
        assert config.port == 8080

    def test_core_config(self):
        config = Config.from_env()
        core = config.core_config()
        assert core.asset_locations == config.asset_locations
        assert core.mode_flags is config.mode_flags
