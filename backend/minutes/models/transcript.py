"""
Data structures for uploads and normalized transcripts.

Neither is persisted: an Upload lives for one extraction call and a
NormalizedTranscript for one request.
"""

from dataclasses import dataclass, field
from enum import Enum


class SourceKind(str, Enum):
    PLAIN = "plain"
    PDF = "pdf"
    DOCX = "docx"
    AUDIO = "audio"


@dataclass
class Upload:
    """A single in-memory file submitted with a request."""
    content: bytes
    content_type: str
    filename: str = "upload"
    size: int = field(default=-1)

    def __post_init__(self):
        if self.size < 0:
            self.size = len(self.content)

    def release(self) -> None:
        """Drop the byte buffer so it can be reclaimed."""
        self.content = b""


@dataclass(frozen=True)
class NormalizedTranscript:
    """Plain-text transcript plus the format it was extracted from."""
    text: str
    source: SourceKind
