"""
Pydantic request/response models for the summary API.

Field names follow the browser client's camelCase JSON keys.
"""

from typing import List, Optional
from pydantic import BaseModel


class GenerateSummaryRequest(BaseModel):
    """JSON body for POST /api/generate-summary."""
    model_config = {"extra": "ignore"}

    transcriptText: Optional[str] = None
    customPrompt: Optional[str] = None


class GenerateSummaryResponse(BaseModel):
    summary: str


class ShareSummaryRequest(BaseModel):
    """
    JSON body for POST /api/share-summary.

    summary and recipients are optional here so that missing values reach the
    service and produce the standard 400 error body instead of a 422.
    """
    model_config = {"extra": "ignore"}

    summary: Optional[str] = None
    recipients: Optional[List[str]] = None
    subject: Optional[str] = None


class ShareSummaryResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str
    message: str


class ErrorResponse(BaseModel):
    error: str
