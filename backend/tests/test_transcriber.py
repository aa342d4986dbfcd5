"""
Unit tests for the Whisper transcription adapter with a MOCKED OpenAI client.
"""

import pytest
from unittest.mock import MagicMock, Mock

from minutes.config import Settings
from minutes.errors import CapabilityUnavailable, PayloadTooLarge, TranscriptionFailed
from minutes.services.transcriber import (
    MAX_AUDIO_BYTES,
    build_transcription_client,
    transcribe,
)


@pytest.fixture()
def whisper_client():
    client = MagicMock()
    client.audio.transcriptions.create.return_value = Mock(text="We agreed to launch in June.")
    return client


class TestBuildClient:

    def test_none_without_key(self):
        assert build_transcription_client(Settings()) is None

    def test_none_for_placeholder_key(self):
        settings = Settings(openai_api_key="your_openai_api_key_here")
        assert build_transcription_client(settings) is None

    def test_client_with_real_key(self, mocker):
        mock_ctor = mocker.patch("openai.OpenAI")
        client = build_transcription_client(Settings(openai_api_key="sk-test"))
        mock_ctor.assert_called_once_with(api_key="sk-test", max_retries=0)
        assert client is mock_ctor.return_value


class TestTranscribe:

    def test_returns_transcript_verbatim(self, whisper_client):
        text = transcribe(b"audio-bytes", "meeting.m4a", whisper_client)
        assert text == "We agreed to launch in June."

    def test_sends_named_stream(self, whisper_client):
        transcribe(b"audio-bytes", "meeting.m4a", whisper_client)

        call_kwargs = whisper_client.audio.transcriptions.create.call_args[1]
        assert call_kwargs["model"] == "whisper-1"
        filename, stream = call_kwargs["file"]
        assert filename == "meeting.m4a"
        assert stream.read() == b"audio-bytes"

    def test_missing_client_fails_with_guidance(self):
        with pytest.raises(CapabilityUnavailable) as exc_info:
            transcribe(b"audio", "a.mp3", None)
        assert "OPENAI_API_KEY" in exc_info.value.message
        assert "paste your transcript" in exc_info.value.message

    def test_over_limit_fails_before_network(self, whisper_client):
        with pytest.raises(PayloadTooLarge):
            transcribe(b"\x00" * (MAX_AUDIO_BYTES + 1), "big.wav", whisper_client)
        whisper_client.audio.transcriptions.create.assert_not_called()

    def test_exactly_at_limit_is_sent(self, whisper_client):
        transcribe(b"\x00" * MAX_AUDIO_BYTES, "edge.wav", whisper_client)
        whisper_client.audio.transcriptions.create.assert_called_once()

    def test_remote_failure_is_wrapped_once(self, whisper_client):
        whisper_client.audio.transcriptions.create.side_effect = Exception("Invalid file format")

        with pytest.raises(TranscriptionFailed) as exc_info:
            transcribe(b"audio", "a.ogg", whisper_client)

        assert "Invalid file format" in exc_info.value.message
        assert "smaller audio file" in exc_info.value.message
        # no retry
        assert whisper_client.audio.transcriptions.create.call_count == 1
