"""
Summary API endpoints.

Endpoints:
  POST /generate-summary   transcript (file upload or JSON text) -> summary
  POST /share-summary      email a summary to a list of recipients

Errors are raised as SummarizerError subclasses; the handler registered in
main.py renders them as {"error": message} with the matching status code.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError
from starlette.datastructures import UploadFile

from minutes.config import Settings, get_settings
from minutes.errors import (
    EmptyInput,
    InputError,
    RemoteCapabilityError,
    SummarizerError,
    UploadTooLarge,
)
from minutes.models.summary import (
    GenerateSummaryRequest,
    GenerateSummaryResponse,
    ShareSummaryRequest,
    ShareSummaryResponse,
)
from minutes.models.transcript import Upload
from minutes.services.extractor import extract
from minutes.services.mailer import share_summary as send_summary_email
from minutes.services.summarizer import require_generation_key, summarize

logger = logging.getLogger(__name__)

router = APIRouter()


async def _read_upload(file: UploadFile, settings: Settings) -> Upload:
    """Read a multipart file into an Upload, refusing oversized files early."""
    if file.size is not None and file.size > settings.max_upload_bytes:
        raise UploadTooLarge(file.size, settings.max_upload_bytes)

    # Read at most one byte past the ceiling; anything longer is rejected
    content = await file.read(settings.max_upload_bytes + 1)
    if len(content) > settings.max_upload_bytes:
        raise UploadTooLarge(file.size or len(content), settings.max_upload_bytes)

    return Upload(
        content=content,
        content_type=file.content_type or "",
        filename=file.filename or "upload",
    )


async def _transcript_from_form(request: Request, settings: Settings) -> tuple[str, Optional[str]]:
    form = await request.form()
    file = form.get("transcript")
    custom_prompt = form.get("customPrompt") or None
    transcript_text = form.get("transcriptText") or ""

    try:
        if isinstance(file, UploadFile) and file.filename:
            logger.info(f"Processing file: {file.filename!r} Type: {file.content_type!r}")
            upload = await _read_upload(file, settings)
            normalized = await run_in_threadpool(extract, upload, settings)
            transcript_text = normalized.text
    finally:
        await form.close()

    return transcript_text, custom_prompt


async def _read_json_body(request: Request, settings: Settings) -> bytes:
    """Read a JSON request body, refusing anything above the JSON ceiling."""
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > settings.max_json_bytes:
        raise UploadTooLarge(int(declared), settings.max_json_bytes, what="Request body")

    body = await request.body()
    if len(body) > settings.max_json_bytes:
        raise UploadTooLarge(len(body), settings.max_json_bytes, what="Request body")
    return body


async def _transcript_from_json(request: Request, settings: Settings) -> tuple[str, Optional[str]]:
    body = await _read_json_body(request, settings)

    try:
        payload = (
            GenerateSummaryRequest.model_validate_json(body)
            if body.strip()
            else GenerateSummaryRequest()
        )
    except ValidationError:
        raise InputError("Request body must be valid JSON")

    return payload.transcriptText or "", payload.customPrompt


@router.post("/generate-summary", response_model=GenerateSummaryResponse)
async def generate_summary(
    request: Request,
    settings: Settings = Depends(get_settings),
):
    """
    Generate a structured summary from a meeting transcript.

    Accepts either multipart/form-data (``transcript`` file, optional
    ``customPrompt``) or JSON ``{transcriptText, customPrompt}``. An uploaded
    file takes precedence over inline text.
    """
    try:
        require_generation_key(settings)

        content_type = request.headers.get("content-type", "")
        if content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
            transcript_text, custom_prompt = await _transcript_from_form(request, settings)
        else:
            transcript_text, custom_prompt = await _transcript_from_json(request, settings)

        if not transcript_text:
            raise InputError("No transcript provided")
        if not transcript_text.strip():
            raise EmptyInput()

        summary = await run_in_threadpool(summarize, transcript_text, settings, custom_prompt)
    except SummarizerError:
        raise
    except Exception as e:
        logger.exception("Error generating summary")
        raise RemoteCapabilityError(f"Failed to generate summary: {e}") from e

    return GenerateSummaryResponse(summary=summary)


@router.post("/share-summary", response_model=ShareSummaryResponse)
async def share_summary(
    request: Request,
    settings: Settings = Depends(get_settings),
):
    """
    Email a generated summary to every recipient in one message.

    Expects JSON ``{summary, recipients, subject?}``; the body is held to the
    same ceiling as /generate-summary before it is parsed.
    """
    body = await _read_json_body(request, settings)
    try:
        payload = (
            ShareSummaryRequest.model_validate_json(body)
            if body.strip()
            else ShareSummaryRequest()
        )
    except ValidationError:
        raise InputError("Invalid request body")

    recipient_count = len(payload.recipients or [])
    logger.info(f"Email share request received for {recipient_count} recipient(s)")

    try:
        message = await run_in_threadpool(
            send_summary_email,
            payload.summary,
            payload.recipients,
            settings,
            subject=payload.subject,
        )
    except SummarizerError:
        raise
    except Exception as e:
        logger.exception("Error sharing summary")
        raise RemoteCapabilityError(f"Failed to share summary: {e}") from e

    return ShareSummaryResponse(message=message)
