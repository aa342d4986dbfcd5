"""
Process-wide configuration.

Settings are read from the environment (and a local .env file) once, frozen,
and handed to each service through the ``get_settings`` dependency. Tests
substitute their own ``Settings`` via ``app.dependency_overrides``.

Environment variables
---------------------
ANTHROPIC_API_KEY   Key for the summary model (required for summaries).
ANTHROPIC_MODEL     Optional model override.
OPENAI_API_KEY      Key for Whisper transcription (optional; audio only).
EMAIL_USER          Sender mailbox used for sharing summaries.
EMAIL_PASS          Password / App Password for EMAIL_USER.
SMTP_HOST           Defaults to smtp.gmail.com.
SMTP_PORT           Defaults to 465 (implicit TLS).
"""

import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

MB = 1024 * 1024

# Values shipped in .env.example; treated the same as "not set".
PLACEHOLDER_VALUES = frozenset({
    "your_anthropic_api_key_here",
    "your_openai_api_key_here",
    "your_gmail_address@gmail.com",
    "your_gmail_app_password",
})


def _is_real(value: Optional[str]) -> bool:
    return bool(value and value.strip()) and value.strip() not in PLACEHOLDER_VALUES


class Settings(BaseModel):
    """Immutable runtime configuration."""

    model_config = {"frozen": True}

    anthropic_api_key: Optional[str] = None
    anthropic_model: str = "claude-sonnet-4-5-20250929"
    max_tokens: int = 4096

    openai_api_key: Optional[str] = None
    transcription_model: str = "whisper-1"

    email_user: Optional[str] = None
    email_pass: Optional[str] = None
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 465

    max_upload_bytes: int = 5 * MB
    max_audio_bytes: int = 2 * MB
    max_json_bytes: int = 2 * MB

    @property
    def has_generation_key(self) -> bool:
        return _is_real(self.anthropic_api_key)

    @property
    def has_transcription_key(self) -> bool:
        return _is_real(self.openai_api_key)

    @property
    def has_mail_credentials(self) -> bool:
        return _is_real(self.email_user) and _is_real(self.email_pass)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from os.environ after loading a .env file if present."""
        load_dotenv()

        overrides = {
            "anthropic_api_key": os.getenv("ANTHROPIC_API_KEY"),
            "openai_api_key": os.getenv("OPENAI_API_KEY"),
            "email_user": os.getenv("EMAIL_USER"),
            "email_pass": os.getenv("EMAIL_PASS"),
        }
        if os.getenv("ANTHROPIC_MODEL"):
            overrides["anthropic_model"] = os.getenv("ANTHROPIC_MODEL")
        if os.getenv("SMTP_HOST"):
            overrides["smtp_host"] = os.getenv("SMTP_HOST")
        if os.getenv("SMTP_PORT"):
            overrides["smtp_port"] = int(os.getenv("SMTP_PORT"))

        return cls(**overrides)


@lru_cache()
def get_settings() -> Settings:
    """FastAPI dependency returning the settings loaded at first use."""
    return Settings.from_env()
