"""
Audio transcription adapter (OpenAI Whisper).

Speech-to-text is optional: when OPENAI_API_KEY is not configured the client
is None and transcribe() fails fast with CapabilityUnavailable.
"""

import io
import logging
from typing import Optional

import openai

from minutes.config import Settings
from minutes.errors import CapabilityUnavailable, PayloadTooLarge, TranscriptionFailed

logger = logging.getLogger(__name__)

MODEL = "whisper-1"
MAX_AUDIO_BYTES = 2 * 1024 * 1024

CAPABILITY_HINT = (
    "Audio transcription requires an OpenAI API key. Please either:\n"
    "1. Add OPENAI_API_KEY to your .env file, or\n"
    "2. Use the text input field to paste your transcript manually "
    "after transcribing the audio file."
)


def build_transcription_client(settings: Settings) -> Optional[openai.OpenAI]:
    """Return an OpenAI client, or None when transcription is not configured."""
    if not settings.has_transcription_key:
        return None
    return openai.OpenAI(api_key=settings.openai_api_key, max_retries=0)


def transcribe(
    buffer: bytes,
    filename: str,
    client: Optional[openai.OpenAI],
    max_bytes: int = MAX_AUDIO_BYTES,
    model: str = MODEL,
) -> str:
    """
    Send an audio buffer to Whisper and return the transcript verbatim.

    The filename travels with the stream so the API can infer the audio
    format from its extension. Exactly one remote call is made.

    Raises:
        CapabilityUnavailable: no client configured
        PayloadTooLarge: buffer above max_bytes (checked before any network call)
        TranscriptionFailed: the remote call raised
    """
    if client is None:
        raise CapabilityUnavailable(CAPABILITY_HINT)

    if len(buffer) > max_bytes:
        raise PayloadTooLarge(
            f"Audio file too large. Please use files smaller than "
            f"{max_bytes // (1024 * 1024)}MB or use text input instead."
        )

    logger.info(f"Transcribing audio {filename!r} ({len(buffer)} bytes)")

    try:
        transcription = client.audio.transcriptions.create(
            model=model,
            file=(filename, io.BytesIO(buffer)),
        )
    except Exception as e:
        logger.error(f"Audio transcription error for {filename!r}: {e}")
        raise TranscriptionFailed(e) from e

    return transcription.text
