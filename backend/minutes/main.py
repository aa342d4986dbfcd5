"""
Meeting Notes Summarizer API
FastAPI application for transcript ingestion, AI summaries, and email sharing.
"""

import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.datastructures import Headers
from starlette.types import Receive, Scope, Send

from minutes.config import get_settings
from minutes.errors import SummarizerError
from minutes.models.summary import ErrorResponse, HealthResponse
from minutes.routers import summary

# Configure logging to output to console
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

APP_VERSION = "0.1.0"

app = FastAPI(
    title="Meeting Notes Summarizer API",
    description="AI-powered meeting transcript summaries with email sharing",
    version=APP_VERSION,
)


class EmptyPreflightCORSMiddleware(CORSMiddleware):
    """
    CORSMiddleware that answers every OPTIONS request with an empty body.

    Starlette's preflight reply carries a plain-text "OK" body, and an OPTIONS
    request without CORS headers would otherwise fall through to routing and
    get a 405.
    """

    def preflight_response(self, request_headers: Headers) -> Response:
        response = super().preflight_response(request_headers=request_headers)
        headers = {
            key: value
            for key, value in response.headers.items()
            if key not in ("content-length", "content-type")
        }
        return Response(status_code=response.status_code, headers=headers)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["method"] == "OPTIONS":
            headers = Headers(scope=scope)
            if "origin" in headers and "access-control-request-method" in headers:
                response = self.preflight_response(request_headers=headers)
            else:
                response = Response(
                    status_code=200,
                    headers=self.simple_headers if "origin" in headers else None,
                )
            await response(scope, receive, send)
            return
        await super().__call__(scope, receive, send)


# The browser client may be served from anywhere (static host, file://, LAN)
app.add_middleware(
    EmptyPreflightCORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

app.include_router(summary.router, prefix="/api", tags=["summary"])


@app.exception_handler(SummarizerError)
async def summarizer_error_handler(request: Request, exc: SummarizerError) -> JSONResponse:
    """Render any taxonomy error as {"error": message}."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.message).model_dump(),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed JSON bodies get the same error shape as every other failure."""
    logger.info(f"{request.method} {request.url.path} invalid body: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(error="Invalid request body").model_dump(),
    )


@app.on_event("startup")
async def log_startup_configuration() -> None:
    """
    Log which remote capabilities are configured.

    Only presence is logged, never the credentials themselves.
    """
    settings = get_settings()
    host_port = os.getenv("HOST_PORT", "8000")
    logger.info(
        "Meeting Notes Summarizer running at http://localhost:%s\n"
        "  Summaries (ANTHROPIC_API_KEY):     %s\n"
        "  Transcription (OPENAI_API_KEY):    %s\n"
        "  Email sharing (EMAIL_USER/PASS):   %s",
        host_port,
        "configured" if settings.has_generation_key else "NOT configured",
        "configured" if settings.has_transcription_key else "disabled",
        "configured" if settings.has_mail_credentials else "NOT configured",
    )


@app.get("/")
async def root():
    return {"message": "Meeting Notes Summarizer API", "version": APP_VERSION}


@app.get("/api/health", response_model=HealthResponse)
async def health():
    return HealthResponse(status="OK", message="Server is running")
