from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from audioscribe.core.config import DEFAULT_ASSET_LOCATIONS, CoreConfig, EngineModeFlags

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")
_TASKS = ("transcribe", "translate")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


@dataclass
class Config:
    engine_factory: str
    asset_locations: tuple[str, ...] = DEFAULT_ASSET_LOCATIONS
    asset_dir: Path = field(default_factory=Path.cwd)
    port: int = 7777
    fetch_timeout: float = 300.0
    log_file: str = "/tmp/audioscribe.log"
    mode_flags: EngineModeFlags = field(default_factory=EngineModeFlags)

    @classmethod
    def from_env(cls) -> Config:
        load_dotenv()
        factory = os.environ.get("AUDIOSCRIBE_ENGINE_FACTORY", "").strip()
        if not factory:
            raise ValueError("AUDIOSCRIBE_ENGINE_FACTORY is required")

        weights, tokenizer, config, mel_filters = DEFAULT_ASSET_LOCATIONS
        locations = (
            os.environ.get("AUDIOSCRIBE_WEIGHTS_URL", "") or weights,
            os.environ.get("AUDIOSCRIBE_TOKENIZER_URL", "") or tokenizer,
            os.environ.get("AUDIOSCRIBE_CONFIG_URL", "") or config,
            os.environ.get("AUDIOSCRIBE_MEL_FILTERS_URL", "") or mel_filters,
        )

        task = os.environ.get("AUDIOSCRIBE_TASK", "").strip().lower() or None
        if task is not None and task not in _TASKS:
            raise ValueError(f"AUDIOSCRIBE_TASK must be one of {_TASKS}, got {task!r}")

        flags = EngineModeFlags(
            quantized=_env_bool("AUDIOSCRIBE_QUANTIZED", False),
            timestamps=_env_bool("AUDIOSCRIBE_TIMESTAMPS", True),
            is_multilingual=_env_bool("AUDIOSCRIBE_MULTILINGUAL", True),
            language=os.environ.get("AUDIOSCRIBE_LANGUAGE", "").strip() or None,
            task=task,
        )
        if flags.language and not flags.is_multilingual:
            raise ValueError("AUDIOSCRIBE_LANGUAGE requires a multilingual model")

        asset_dir = os.environ.get("AUDIOSCRIBE_ASSET_DIR", "")
        return cls(
            engine_factory=factory,
            asset_locations=locations,
            asset_dir=Path(asset_dir).expanduser().resolve() if asset_dir else Path.cwd(),
            port=int(os.environ.get("AUDIOSCRIBE_PORT", "7777")),
            fetch_timeout=float(os.environ.get("AUDIOSCRIBE_FETCH_TIMEOUT", "300")),
            log_file=os.environ.get("AUDIOSCRIBE_LOG_FILE", "") or "/tmp/audioscribe.log",
            mode_flags=flags,
        )

    def core_config(self) -> CoreConfig:
        return CoreConfig(asset_locations=self.asset_locations, mode_flags=self.mode_flags)
