"""
Summary email tests. smtplib.SMTP_SSL is mocked; no mail is sent.
"""

import smtplib
from email.message import EmailMessage

import pytest
from unittest.mock import MagicMock

from minutes.config import Settings
from minutes.errors import ConfigurationError, InputError, RemoteCapabilityError
from minutes.services.mailer import (
    DEFAULT_SUBJECT,
    SUCCESS_MESSAGE,
    build_message,
    render_summary_html,
    share_summary,
)


@pytest.fixture()
def mock_smtp(mocker):
    """Patch SMTP_SSL; returns (constructor_mock, server_mock)."""
    ctor = mocker.patch("minutes.services.mailer.smtplib.SMTP_SSL")
    server = MagicMock()
    ctor.return_value.__enter__.return_value = server
    return ctor, server


def _html_part(msg) -> str:
    parts = msg.get_payload()
    html_parts = [p for p in parts if p.get_content_type() == "text/html"]
    return html_parts[0].get_payload(decode=True).decode("utf-8")


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

class TestRenderSummaryHtml:

    def test_newlines_become_line_breaks(self):
        rendered = render_summary_html("Key point:\n - Ship it.")
        assert "Key point:<br> - Ship it." in rendered

    def test_fixed_template(self):
        rendered = render_summary_html("x")
        assert "<h2 style=\"color: #333;\">Meeting Summary</h2>" in rendered
        assert "AI-powered meeting notes summarizer" in rendered

    def test_markup_in_summary_is_escaped(self):
        rendered = render_summary_html("<script>alert(1)</script>")
        assert "<script>" not in rendered
        assert "&lt;script&gt;" in rendered


class TestBuildMessage:

    def test_single_message_with_comma_joined_recipients(self):
        msg = build_message("Summary", ["a@x.com", "b@y.com"], "sender@example.com")
        assert msg["To"] == "a@x.com, b@y.com"
        assert msg["From"] == "sender@example.com"

    def test_default_subject(self):
        msg = build_message("Summary", ["a@x.com"], "sender@example.com")
        assert msg["Subject"] == DEFAULT_SUBJECT == "Meeting Summary"

    def test_custom_subject(self):
        msg = build_message("Summary", ["a@x.com"], "s@example.com", subject="Sprint 12 recap")
        assert msg["Subject"] == "Sprint 12 recap"

    def test_plain_and_html_alternatives(self):
        msg = build_message("Line one\nLine two", ["a@x.com"], "s@example.com")
        content_types = [p.get_content_type() for p in msg.get_payload()]
        assert content_types == ["text/plain", "text/html"]
        assert "Line one<br>Line two" in _html_part(msg)

    def test_is_multipart_alternative_email_message(self):
        msg = build_message("Résumé: café ☕", ["a@x.com"], "s@example.com")

        assert isinstance(msg, EmailMessage)
        assert msg.get_content_type() == "multipart/alternative"
        assert msg.get_body(preferencelist=("plain",)).get_content().rstrip("\n") == "Résumé: café ☕"
        assert "Résumé: café ☕" in _html_part(msg)


# ---------------------------------------------------------------------------
# share_summary
# ---------------------------------------------------------------------------

class TestShareSummary:

    def test_sends_one_message_to_all_recipients(self, mock_smtp, settings):
        ctor, server = mock_smtp

        result = share_summary("Summary text", ["a@x.com", "b@y.com"], settings)

        assert result == SUCCESS_MESSAGE
        ctor.assert_called_once_with("smtp.gmail.com", 465)
        server.login.assert_called_once_with("sender@example.com", "test-app-password")
        server.send_message.assert_called_once()
        sent = server.send_message.call_args[0][0]
        assert sent["To"] == "a@x.com, b@y.com"

    def test_blank_recipients_are_dropped(self, mock_smtp, settings):
        _, server = mock_smtp
        share_summary("Summary", ["a@x.com", "  ", ""], settings)
        assert server.send_message.call_args[0][0]["To"] == "a@x.com"

    @pytest.mark.parametrize("recipients", [[], None, ["", " "]])
    def test_no_recipients_is_input_error(self, mock_smtp, settings, recipients):
        ctor, _ = mock_smtp
        with pytest.raises(InputError) as exc_info:
            share_summary("Summary", recipients, settings)
        assert exc_info.value.status_code == 400
        ctor.assert_not_called()

    @pytest.mark.parametrize("summary", ["", None, "   "])
    def test_empty_summary_is_input_error(self, mock_smtp, settings, summary):
        with pytest.raises(InputError):
            share_summary(summary, ["a@x.com"], settings)

    def test_missing_password_is_configuration_error(self, mock_smtp):
        ctor, _ = mock_smtp
        settings = Settings(email_user="sender@example.com", email_pass=None)

        with pytest.raises(ConfigurationError) as exc_info:
            share_summary("Summary", ["a@x.com"], settings)
        assert "EMAIL_PASS" in exc_info.value.message
        ctor.assert_not_called()

    def test_placeholder_credentials_are_configuration_error(self, mock_smtp):
        settings = Settings(
            email_user="your_gmail_address@gmail.com",
            email_pass="your_gmail_app_password",
        )
        with pytest.raises(ConfigurationError):
            share_summary("Summary", ["a@x.com"], settings)

    def test_configuration_checked_before_input(self, mock_smtp):
        with pytest.raises(ConfigurationError):
            share_summary("", [], Settings())


class TestShareSummaryErrors:

    def test_authentication_failure(self, mock_smtp, settings):
        _, server = mock_smtp
        server.login.side_effect = smtplib.SMTPAuthenticationError(535, b"Bad credentials")

        with pytest.raises(RemoteCapabilityError) as exc_info:
            share_summary("Summary", ["a@x.com"], settings)
        assert exc_info.value.code == "auth_failed"
        assert "App Password" in exc_info.value.message

    def test_connection_failure(self, mock_smtp, settings):
        ctor, _ = mock_smtp
        ctor.side_effect = ConnectionRefusedError("Connection refused")

        with pytest.raises(RemoteCapabilityError) as exc_info:
            share_summary("Summary", ["a@x.com"], settings)
        assert exc_info.value.code == "connection_failed"

    def test_server_disconnect_is_connection_failure(self, mock_smtp, settings):
        _, server = mock_smtp
        server.send_message.side_effect = smtplib.SMTPServerDisconnected("gone")

        with pytest.raises(RemoteCapabilityError) as exc_info:
            share_summary("Summary", ["a@x.com"], settings)
        assert exc_info.value.code == "connection_failed"

    def test_other_smtp_errors_are_wrapped_once(self, mock_smtp, settings):
        _, server = mock_smtp
        server.send_message.side_effect = smtplib.SMTPRecipientsRefused({"a@x.com": (550, b"no")})

        with pytest.raises(RemoteCapabilityError) as exc_info:
            share_summary("Summary", ["a@x.com"], settings)
        assert exc_info.value.message.startswith("Failed to share summary:")
        assert server.send_message.call_count == 1
