from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class DecodingEngine(Protocol):
    """An instantiated speech-to-text engine. Opaque to the orchestrator."""

    def decode(self, audio: bytes) -> str:
        """Decode raw audio file bytes. Returns a JSON-encoded segment list."""
        ...


class EngineFactory(Protocol):
    """Builds a DecodingEngine from raw asset buffers and mode flags.

    Arguments are positional, in the order the engine expects them.
    """

    def __call__(
        self,
        weights: bytes,
        tokenizer: bytes,
        mel_filters: bytes,
        config: bytes,
        quantized: bool,
        timestamps: bool,
        is_multilingual: bool,
        language: str | None,
        task: str | None,
    ) -> DecodingEngine:
        ...
