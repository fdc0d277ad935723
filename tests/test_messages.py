from __future__ import annotations

import pytest

from audioscribe.core.messages import DecodeRequest, DecodeResult
from audioscribe.core.transcript import TranscriptSegment


class TestDecodeRequest:
    def test_from_message(self):
        req = DecodeRequest.from_message({"audioSource": " blob:abc ", "requestId": "r1"})
        assert req.audio_source == "blob:abc"
        assert req.request_id == "r1"

    def test_generates_request_id(self):
        req = DecodeRequest.from_message({"audioSource": "https://x.test/a.wav"})
        assert req.request_id
        assert req.request_id != DecodeRequest("https://x.test/a.wav").request_id

    @pytest.mark.parametrize("payload", [None, [], {}, {"audioSource": None}, {"audioSource": "  "}])
    def test_rejects_missing_locator(self, payload):
        with pytest.raises(ValueError):
            DecodeRequest.from_message(payload)

    def test_round_trip_message(self):
        req = DecodeRequest("blob:abc", request_id="r1")
        assert DecodeRequest.from_message(req.to_message()) == req


class TestDecodeResult:
    def test_complete_message(self):
        result = DecodeResult.complete("r1", [TranscriptSegment(text="test")], "test")
        assert result.ok
        assert result.to_message() == {
            "requestId": "r1",
            "status": "complete",
            "output": [{"result": {"text": "test"}}],
            "text": "test",
        }

    def test_failed_message(self):
        result = DecodeResult.failed("r2", "decode-engine-error", "bad wav")
        assert not result.ok
        assert result.to_message() == {
            "requestId": "r2",
            "status": "decode-engine-error",
            "error": "bad wav",
        }
