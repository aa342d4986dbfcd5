"""
Summary generation service.
Sends the transcript, prefixed by an instruction template, to Claude in a
single request and returns the generated text unchanged.
"""

import logging
from typing import Optional

import anthropic

from minutes.config import Settings
from minutes.errors import ConfigurationError, EmptyInput, RemoteCapabilityError

logger = logging.getLogger(__name__)

DEFAULT_INSTRUCTION = """\
CRITICAL FORMATTING RULES:
1. Use descriptive labels followed by hyphens and content
2. Use **bold** for research tasks and action items
3. Keep formatting clean with descriptive categories
4. Use hyphens (-) after labels

Format example:

Discussion point:
 - Quantum computers and their ability to factor large numbers efficiently.
Key concept:
 - Quantum computers' efficiency in factoring is not directly related to quantum mechanics, but rather to their ability to find periods of periodic functions.
Discussion point:
 - The connection between period finding and factoring large numbers.
Key point:
 - Efficient period finding allows for efficient factoring.
**Research: Further investigate the purely arithmetic reasons connecting period finding and factoring.**
Key application:
 - The implication of efficient factoring for breaking RSA encryption.
Historical note:
 - Peter Shor's discovery of quantum computers' super efficiency in period finding (1994-1995).
Key concern:
 - The potential threat to internet security posed by quantum computers.

STRICT REQUIREMENTS:
Use descriptive labels like "Discussion point:", "Key concept:", "Key point:", "Historical note:", etc.
Follow each label with a line break and hyphen (-) with content
Use **bold** for research tasks and action items
No bullet points (•) or other symbols"""


def build_prompt(instruction: str, transcript_text: str) -> str:
    """Instruction, blank line, 'Transcript:' label, newline, transcript."""
    return f"{instruction}\n\nTranscript:\n{transcript_text}"


def require_generation_key(settings: Settings) -> None:
    """Raise ConfigurationError unless a real ANTHROPIC_API_KEY is set."""
    if not settings.has_generation_key:
        logger.error("Anthropic API key not configured")
        raise ConfigurationError(
            "Anthropic API key not configured. "
            "Please set ANTHROPIC_API_KEY in your .env file."
        )


def summarize(
    transcript_text: str,
    settings: Settings,
    custom_instruction: Optional[str] = None,
) -> str:
    """
    Generate a structured meeting summary with Claude.

    The whole transcript goes out in one call; there is no chunking, so very
    long transcripts are bounded only by the model's context window.

    Raises:
        ConfigurationError: ANTHROPIC_API_KEY missing or a placeholder
        EmptyInput: transcript is blank
        RemoteCapabilityError: the API rejected or failed the request
    """
    require_generation_key(settings)

    if not transcript_text or not transcript_text.strip():
        raise EmptyInput()

    instruction = custom_instruction if custom_instruction and custom_instruction.strip() else DEFAULT_INSTRUCTION
    prompt = build_prompt(instruction, transcript_text)

    logger.info(f"Generating summary for transcript of length: {len(transcript_text)}")

    # max_retries=0: one attempt per request, the caller resubmits
    client = anthropic.Anthropic(api_key=settings.anthropic_api_key, max_retries=0)

    try:
        response = client.messages.create(
            model=settings.anthropic_model,
            max_tokens=settings.max_tokens,
            messages=[{"role": "user", "content": prompt}],
        )
    except anthropic.AuthenticationError as e:
        logger.error(f"Anthropic authentication failed: {e}")
        raise RemoteCapabilityError(
            "Invalid Anthropic API key. Please check your API key.",
            code="invalid_api_key",
        ) from e
    except anthropic.PermissionDeniedError as e:
        logger.error(f"Anthropic permission denied: {e}")
        raise RemoteCapabilityError(
            "Permission denied. Please check your Anthropic API key permissions.",
            code="permission_denied",
        ) from e
    except anthropic.APIError as e:
        logger.error(f"Anthropic request failed: {e}")
        raise RemoteCapabilityError(f"Failed to generate summary: {e}") from e

    summary = "".join(
        block.text for block in response.content if getattr(block, "type", None) == "text"
    )
    if not summary:
        logger.error(f"Anthropic returned no text (stop_reason={getattr(response, 'stop_reason', None)})")
        raise RemoteCapabilityError("Failed to generate summary: the model returned no text")

    logger.info("Summary generated successfully")
    return summary
