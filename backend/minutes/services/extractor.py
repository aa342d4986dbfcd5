"""
Transcript extraction service.

Turns an uploaded file into plain text. The content type selects one of four
extraction strategies (plain text, PDF, Word document, audio); adding a new
format means one entry in EXTRACTOR_KINDS and, for a new kind, one handler in
_EXTRACTORS.

Public API:
  resolve_kind(content_type)                  -> SourceKind
  extract(upload, settings, client=None)      -> NormalizedTranscript
"""

import io
import logging
import zipfile
import xml.etree.ElementTree as ET
from typing import Callable, Optional

import pdfplumber

from minutes.config import Settings
from minutes.errors import (
    EmptyInput,
    ExtractionFailed,
    InputError,
    UnsupportedType,
    UploadTooLarge,
)
from minutes.models.transcript import NormalizedTranscript, SourceKind, Upload
from minutes.services.transcriber import build_transcription_client, transcribe

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

EXTRACTOR_KINDS: dict[str, SourceKind] = {
    "text/plain": SourceKind.PLAIN,
    "application/pdf": SourceKind.PDF,
    "application/msword": SourceKind.DOCX,
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": SourceKind.DOCX,
    "audio/mpeg": SourceKind.AUDIO,
    "audio/wav": SourceKind.AUDIO,
    "audio/mp4": SourceKind.AUDIO,
    "audio/m4a": SourceKind.AUDIO,
    "audio/webm": SourceKind.AUDIO,
    "audio/ogg": SourceKind.AUDIO,
}

SUPPORTED_CONTENT_TYPES = frozenset(EXTRACTOR_KINDS)


def _base_content_type(content_type: Optional[str]) -> str:
    """'text/plain; charset=utf-8' -> 'text/plain'"""
    return (content_type or "").split(";", 1)[0].strip().lower()


def resolve_kind(content_type: Optional[str]) -> SourceKind:
    """
    Map a declared MIME type to its extraction strategy.

    Raises UnsupportedType for anything outside the allow-list.
    """
    kind = EXTRACTOR_KINDS.get(_base_content_type(content_type))
    if kind is None:
        raise UnsupportedType(content_type or "")
    return kind


# ---------------------------------------------------------------------------
# Extractors
# ---------------------------------------------------------------------------

def extract_text_from_plain(content: bytes) -> str:
    # utf-8-sig drops a leading BOM if the editor wrote one
    return content.decode("utf-8-sig")


def extract_text_from_pdf(content: bytes) -> str:
    """
    Extract text from a PDF using pdfplumber.
    Does NOT support scanned PDFs (no OCR).
    """
    text_parts = []

    with pdfplumber.open(io.BytesIO(content)) as pdf:
        for page in pdf.pages:
            page_text = page.extract_text()
            if page_text:
                text_parts.append(page_text)

    full_text = "\n\n".join(text_parts)

    if not full_text.strip():
        raise EmptyInput(
            "No text extracted from PDF. "
            "The PDF may be scanned/image-based (OCR not supported)."
        )

    return full_text


_W_NS = "{http://schemas.openxmlformats.org/wordprocessingml/2006/main}"

# document.xml may inflate to at most this multiple of the upload ceiling
DOCX_EXPANSION_FACTOR = 4


def extract_text_from_docx(content: bytes, max_xml_bytes: int) -> str:
    """
    Extract raw text from a Word document.

    Reads word/document.xml straight out of the OOXML zip container and emits
    one line per paragraph. Legacy binary .doc files are not zip archives and
    fail here with zipfile.BadZipFile.

    Raises ValueError when document.xml inflates past max_xml_bytes, so a
    small, highly compressed upload cannot expand without bound.
    """
    with zipfile.ZipFile(io.BytesIO(content)) as archive:
        info = archive.getinfo("word/document.xml")
        if info.file_size > max_xml_bytes:
            raise ValueError(
                f"Document body too large when decompressed "
                f"({info.file_size} bytes, limit {max_xml_bytes})"
            )
        # The declared size can lie; never inflate more than the limit
        with archive.open(info) as member:
            xml_payload = member.read(max_xml_bytes + 1)
        if len(xml_payload) > max_xml_bytes:
            raise ValueError(
                f"Document body too large when decompressed (limit {max_xml_bytes})"
            )

    root = ET.fromstring(xml_payload)

    paragraphs = []
    for para in root.iter(f"{_W_NS}p"):
        pieces = []
        for node in para.iter():
            if node.tag == f"{_W_NS}t" and node.text:
                pieces.append(node.text)
            elif node.tag == f"{_W_NS}tab":
                pieces.append("\t")
            elif node.tag in (f"{_W_NS}br", f"{_W_NS}cr"):
                pieces.append("\n")
        paragraphs.append("".join(pieces))

    return "\n".join(paragraphs)


def _extract_audio(upload: Upload, settings: Settings, client) -> str:
    if client is None:
        client = build_transcription_client(settings)
    return transcribe(
        upload.content,
        upload.filename,
        client,
        max_bytes=settings.max_audio_bytes,
        model=settings.transcription_model,
    )


_EXTRACTORS: dict[SourceKind, Callable[[Upload, Settings, object], str]] = {
    SourceKind.PLAIN: lambda upload, settings, client: extract_text_from_plain(upload.content),
    SourceKind.PDF: lambda upload, settings, client: extract_text_from_pdf(upload.content),
    SourceKind.DOCX: lambda upload, settings, client: extract_text_from_docx(
        upload.content, settings.max_upload_bytes * DOCX_EXPANSION_FACTOR
    ),
    SourceKind.AUDIO: _extract_audio,
}


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

def extract(
    upload: Upload,
    settings: Settings,
    transcription_client=None,
) -> NormalizedTranscript:
    """
    Full normalization pipeline: size gate -> dispatch -> plain text.

    The upload's buffer is released before returning, whether extraction
    succeeded or failed.

    Raises:
        UploadTooLarge: upload.size above settings.max_upload_bytes
        UnsupportedType: content type not in the allow-list
        ExtractionFailed: the extractor raised (wraps the original error)
        EmptyInput: extraction produced only whitespace (including a PDF
            with no text layer)
    """
    try:
        if upload.size > settings.max_upload_bytes:
            raise UploadTooLarge(upload.size, settings.max_upload_bytes)

        kind = resolve_kind(upload.content_type)
        mimetype = _base_content_type(upload.content_type)

        logger.info(
            f"Processing file: {upload.filename!r}, type={mimetype}, "
            f"size={upload.size} bytes"
        )

        try:
            text = _EXTRACTORS[kind](upload, settings, transcription_client)
        except InputError:
            raise
        except Exception as e:
            logger.error(f"Extraction failed for {upload.filename!r} ({mimetype}): {e}")
            raise ExtractionFailed(mimetype, e) from e
    finally:
        upload.release()

    if not text.strip():
        raise EmptyInput()

    logger.info(f"Extracted {len(text)} characters from {upload.filename!r}")
    return NormalizedTranscript(text=text, source=kind)
