"""
Summary sharing over SMTP (Gmail by default).

One message per share request, addressed to every recipient in a single
comma-separated To header. Recipients therefore see each other's addresses;
there is no BCC or per-recipient fan-out. One submission attempt, no retry.
"""

import html
import logging
import smtplib
from email.message import EmailMessage
from typing import Optional, Sequence

from minutes.config import Settings
from minutes.errors import ConfigurationError, InputError, RemoteCapabilityError

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = "Meeting Summary"
SUCCESS_MESSAGE = "Summary shared successfully"

_CONNECTION_FAILED = (
    "Failed to connect to email server. Please check your internet connection."
)

_HTML_TEMPLATE = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #333;">Meeting Summary</h2>
  <div style="background-color: #f5f5f5; padding: 20px; border-radius: 5px;">
    {body}
  </div>
  <p style="color: #666; font-size: 12px; margin-top: 20px;">
    This summary was generated using AI-powered meeting notes summarizer.
  </p>
</div>
"""


def render_summary_html(summary: str) -> str:
    """Embed the summary in the HTML card, newlines rendered as <br>."""
    body = html.escape(summary).replace("\n", "<br>")
    return _HTML_TEMPLATE.format(body=body)


def _clean_recipients(recipients: Optional[Sequence[str]]) -> list[str]:
    return [r.strip() for r in (recipients or []) if r and r.strip()]


def build_message(
    summary: str,
    recipients: Sequence[str],
    sender: str,
    subject: Optional[str] = None,
) -> EmailMessage:
    """Build the single outgoing message (plain-text + HTML alternatives)."""
    msg = EmailMessage()
    msg["From"] = sender
    msg["To"] = ", ".join(recipients)
    msg["Subject"] = subject or DEFAULT_SUBJECT
    msg.set_content(summary)
    msg.add_alternative(render_summary_html(summary), subtype="html")
    return msg


def share_summary(
    summary: Optional[str],
    recipients: Optional[Sequence[str]],
    settings: Settings,
    subject: Optional[str] = None,
) -> str:
    """
    Email a summary to a list of recipients.

    Credentials are checked before the request fields, so a misconfigured
    server reports that first.

    Returns:
        Confirmation message

    Raises:
        ConfigurationError: EMAIL_USER / EMAIL_PASS missing or placeholders
        InputError: empty summary or no recipients
        RemoteCapabilityError: SMTP authentication, connection, or other failure
    """
    logger.info(f"EMAIL_USER configured: {bool(settings.email_user)}")
    logger.info(f"EMAIL_PASS configured: {bool(settings.email_pass)}")

    if not settings.has_mail_credentials:
        raise ConfigurationError(
            "Email credentials not configured. "
            "Please set EMAIL_USER and EMAIL_PASS in your .env file."
        )

    cleaned = _clean_recipients(recipients)
    if not summary or not summary.strip() or not cleaned:
        raise InputError("Summary and recipients are required")

    msg = build_message(summary, cleaned, settings.email_user, subject)

    logger.info(f"Attempting to send email to {len(cleaned)} recipient(s)")

    try:
        with smtplib.SMTP_SSL(settings.smtp_host, settings.smtp_port) as server:
            server.login(settings.email_user, settings.email_pass)
            server.send_message(msg)
    except smtplib.SMTPAuthenticationError as e:
        logger.error(f"SMTP authentication failed: {e}")
        raise RemoteCapabilityError(
            "Email authentication failed. Please check your Gmail credentials "
            "and ensure you are using an App Password, not your regular password.",
            code="auth_failed",
        ) from e
    except (smtplib.SMTPConnectError, smtplib.SMTPServerDisconnected) as e:
        logger.error(f"SMTP connection failed: {e}")
        raise RemoteCapabilityError(_CONNECTION_FAILED, code="connection_failed") from e
    except smtplib.SMTPException as e:
        logger.error(f"Error sharing summary: {e}")
        raise RemoteCapabilityError(f"Failed to share summary: {e}") from e
    except OSError as e:
        # socket-level failures: DNS, refused, timeout
        logger.error(f"SMTP connection failed: {e}")
        raise RemoteCapabilityError(_CONNECTION_FAILED, code="connection_failed") from e

    logger.info("Email sent successfully")
    return SUCCESS_MESSAGE
