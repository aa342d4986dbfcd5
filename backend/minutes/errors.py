"""
Error taxonomy for the summarizer.

Every error carries a user-facing ``message`` and the HTTP ``status_code`` the
request boundary should answer with. The exception handler in main.py turns
any ``SummarizerError`` into ``{"error": message}``.
"""

from typing import Optional


class SummarizerError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# ---------------------------------------------------------------------------
# Caller input (4xx)
# ---------------------------------------------------------------------------

class InputError(SummarizerError):
    """Missing or malformed request input."""
    status_code = 400


class EmptyInput(InputError):
    """Transcript is empty after trimming whitespace."""

    def __init__(self, message: str = "Transcript text is empty"):
        super().__init__(message)


class UploadTooLarge(InputError):
    """Upload or request body exceeds the configured ceiling."""
    status_code = 413

    def __init__(self, size: int, limit: int, what: str = "File"):
        super().__init__(
            f"{what} too large ({size / 1024 / 1024:.1f} MB). "
            f"Maximum size is {limit // (1024 * 1024)} MB."
        )
        self.size = size
        self.limit = limit


# ---------------------------------------------------------------------------
# Server-side failures (5xx)
# ---------------------------------------------------------------------------

class ConfigurationError(SummarizerError):
    """A required credential is missing or still a placeholder."""


class UnsupportedType(SummarizerError):
    """The declared content type has no registered extractor."""

    def __init__(self, mimetype: str):
        super().__init__(
            f"File type not supported: {mimetype or 'unknown'}. "
            "Please upload text, PDF, DOC, DOCX, or audio files."
        )
        self.mimetype = mimetype


class ExtractionFailed(SummarizerError):
    """An extractor raised while converting an upload to text."""

    def __init__(self, mimetype: str, cause: BaseException):
        detail = getattr(cause, "message", None) or str(cause) or type(cause).__name__
        super().__init__(f"Failed to extract text from {mimetype}: {detail}")
        self.mimetype = mimetype
        self.cause = cause


class CapabilityUnavailable(SummarizerError):
    """Speech-to-text was requested but is not configured."""


class PayloadTooLarge(SummarizerError):
    """Audio buffer exceeds the transcription ceiling."""


class TranscriptionFailed(SummarizerError):
    """The remote transcription call failed."""

    def __init__(self, cause: BaseException):
        super().__init__(
            f"Audio transcription failed: {cause}. "
            "Please try a smaller audio file or use text input instead."
        )
        self.cause = cause


class RemoteCapabilityError(SummarizerError):
    """A generative-text or mail provider call failed."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code
