"""Failure kinds of a decode request.

Each error carries the ``status`` tag it is reported under in a
decode-result message.
"""
from __future__ import annotations


class TranscriptionError(Exception):
    """Base class for failures that end a decode request."""

    status = "error"

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.cause = cause
        super().__init__(message)


class AssetFetchError(TranscriptionError):
    """A model asset location could not be retrieved."""

    status = "asset-fetch-error"

    def __init__(self, location: str, cause: Exception | None = None) -> None:
        self.location = location
        super().__init__(f"Failed to fetch model asset '{location}'", cause)


class EngineInitError(TranscriptionError):
    """Assets were retrieved but the decoding engine could not be built."""

    status = "engine-init-error"

    def __init__(self, cause: Exception | None = None) -> None:
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to construct decoding engine{detail}", cause)


class AudioFetchError(TranscriptionError):
    """The requested audio locator could not be read."""

    status = "audio-fetch-error"

    def __init__(self, locator: str, cause: Exception | None = None) -> None:
        self.locator = locator
        super().__init__(f"Failed to fetch audio '{locator}'", cause)


class DecodeEngineError(TranscriptionError):
    """The engine rejected the audio or returned an unusable payload."""

    status = "decode-engine-error"

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message, cause)


class FetchError(Exception):
    """Raised by fetch adapters when a locator cannot be resolved."""

    def __init__(self, locator: str, reason: str) -> None:
        self.locator = locator
        self.reason = reason
        super().__init__(f"{locator}: {reason}")
