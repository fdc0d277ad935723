"""Normalization of engine output into transcript segments and text.

The engine returns a JSON document: an ordered list of segments, each with a
nested result object carrying ``text``. Current engines name that object
``result``; older builds name it ``dr`` (decoding result).
"""
from __future__ import annotations

import json
from dataclasses import dataclass

from audioscribe.core.errors import DecodeEngineError

_RESULT_KEYS = ("result", "dr")


@dataclass(frozen=True)
class TranscriptSegment:
    text: str
    start: float | None = None
    duration: float | None = None

    def to_dict(self) -> dict:
        data: dict = {"result": {"text": self.text}}
        if self.start is not None:
            data["start"] = self.start
        if self.duration is not None:
            data["duration"] = self.duration
        return data


def _nested_result(entry: object, index: int) -> dict:
    if not isinstance(entry, dict):
        raise DecodeEngineError(f"Segment {index} is not an object")
    for key in _RESULT_KEYS:
        nested = entry.get(key)
        if isinstance(nested, dict):
            return nested
    raise DecodeEngineError(f"Segment {index} has no result object")


def _optional_float(value: object) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def parse_segments(payload: str | bytes) -> list[TranscriptSegment]:
    """Parse an engine payload. Raises DecodeEngineError on schema mismatch."""
    try:
        data = json.loads(payload)
    except (TypeError, ValueError) as e:
        raise DecodeEngineError("Engine returned invalid JSON", e) from e

    if not isinstance(data, list):
        raise DecodeEngineError(
            f"Engine output must be a list, got {type(data).__name__}"
        )

    segments: list[TranscriptSegment] = []
    for i, entry in enumerate(data):
        result = _nested_result(entry, i)
        text = result.get("text")
        if not isinstance(text, str):
            raise DecodeEngineError(f"Segment {i} text is not a string")
        segments.append(TranscriptSegment(
            text=text,
            start=_optional_float(entry.get("start")),
            duration=_optional_float(entry.get("duration")),
        ))
    return segments


def join_segments(segments: list[TranscriptSegment]) -> str:
    """Space-join segment texts in engine order."""
    return " ".join(s.text for s in segments)
