"""Decode-request / decode-result messages exchanged with the worker."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from audioscribe.core.transcript import TranscriptSegment

STATUS_COMPLETE = "complete"
STATUS_INVALID_REQUEST = "invalid-request"
STATUS_INTERNAL_ERROR = "internal-error"


def _make_request_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass(frozen=True)
class DecodeRequest:
    audio_source: str
    request_id: str = field(default_factory=_make_request_id)

    @classmethod
    def from_message(cls, payload: object) -> DecodeRequest:
        """Parse an inbound ``{"audioSource": ...}`` message.

        Raises ValueError when the locator is missing or not a string.
        """
        if not isinstance(payload, dict):
            raise ValueError("decode request must be an object")
        source = payload.get("audioSource")
        if not isinstance(source, str) or not source.strip():
            raise ValueError("audioSource is required")
        request_id = payload.get("requestId")
        if isinstance(request_id, str) and request_id:
            return cls(audio_source=source.strip(), request_id=request_id)
        return cls(audio_source=source.strip())

    def to_message(self) -> dict:
        return {"audioSource": self.audio_source, "requestId": self.request_id}


@dataclass(frozen=True)
class DecodeResult:
    request_id: str
    status: str
    segments: tuple[TranscriptSegment, ...] = ()
    text: str = ""
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == STATUS_COMPLETE

    @classmethod
    def complete(
        cls, request_id: str, segments: list[TranscriptSegment], text: str
    ) -> DecodeResult:
        return cls(
            request_id=request_id,
            status=STATUS_COMPLETE,
            segments=tuple(segments),
            text=text,
        )

    @classmethod
    def failed(cls, request_id: str, status: str, error: str) -> DecodeResult:
        return cls(request_id=request_id, status=status, error=error)

    def to_message(self) -> dict:
        data: dict = {"requestId": self.request_id, "status": self.status}
        if self.ok:
            data["output"] = [s.to_dict() for s in self.segments]
            data["text"] = self.text
        else:
            data["error"] = self.error
        return data
