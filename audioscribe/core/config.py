"""Core configuration — decode settings independent of adapters."""
from __future__ import annotations

from dataclasses import dataclass, field

# Ordered: weights, tokenizer, config, mel filters. Relative entries are
# resolved against the asset directory by the fetch adapter.
DEFAULT_ASSET_LOCATIONS: tuple[str, ...] = (
    "https://huggingface.co/openai/whisper-tiny/resolve/main/model.safetensors",
    "model/tokenizer.json",
    "model/config.json",
    "model/mel_filters.safetensors",
)


@dataclass(frozen=True)
class EngineModeFlags:
    """Static decoding-mode flags passed to the engine at construction."""
    quantized: bool = False
    timestamps: bool = True
    is_multilingual: bool = True
    language: str | None = None
    task: str | None = None  # "transcribe" | "translate"; None → transcribe


@dataclass
class CoreConfig:
    asset_locations: tuple[str, ...] = DEFAULT_ASSET_LOCATIONS
    mode_flags: EngineModeFlags = field(default_factory=EngineModeFlags)
