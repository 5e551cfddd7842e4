"""Tests for the EmailService and OTP email templates."""

from unittest.mock import AsyncMock, patch

import pytest

from fitora.config import Settings
from fitora.services.email_service import EmailNotConfiguredError, EmailService
from fitora.services.email_templates import OTPPurpose, render_otp_email


@pytest.fixture
def smtp_settings():
    return Settings(
        _env_file=None,
        smtp_host="smtp.test",
        smtp_port=2525,
        smtp_username="mailer@fitora.test",
        smtp_password="secret",
        app_name="Fitora",
    )


def test_registration_template_mentions_code_and_expiry():
    template = render_otp_email("482913", OTPPurpose.REGISTRATION, "Fitora", 300)

    assert template.subject == "Registration OTP Verification Code - Fitora"
    assert "482913" in template.html
    assert "482913" in template.text
    assert "5 minutes" in template.text


def test_password_reset_template_warns_user():
    template = render_otp_email("482913", OTPPurpose.PASSWORD_RESET, "Fitora", 600)

    assert template.subject == "Password Reset OTP Code - Fitora"
    assert "10 minutes" in template.text
    assert "did not request a password reset" in template.html


@pytest.mark.asyncio
async def test_send_otp_requires_credentials():
    svc = EmailService(Settings(_env_file=None, smtp_username="", smtp_password=""))

    with patch("fitora.services.email_service.aiosmtplib.send", new=AsyncMock()) as send:
        with pytest.raises(EmailNotConfiguredError):
            await svc.send_otp("to@example.com", "123456", OTPPurpose.REGISTRATION)

    send.assert_not_called()


@pytest.mark.asyncio
async def test_send_otp_builds_multipart_message(smtp_settings):
    svc = EmailService(smtp_settings)

    with patch("fitora.services.email_service.aiosmtplib.send", new=AsyncMock()) as send:
        await svc.send_otp("to@example.com", "654321", OTPPurpose.PASSWORD_RESET)

    send.assert_awaited_once()
    msg = send.await_args.args[0]
    kwargs = send.await_args.kwargs
    assert msg["To"] == "to@example.com"
    assert msg["Subject"] == "Password Reset OTP Code - Fitora"
    assert "mailer@fitora.test" in msg["From"]
    assert msg.is_multipart()
    assert "654321" in msg.get_body(preferencelist=("plain",)).get_content()
    assert kwargs["hostname"] == "smtp.test"
    assert kwargs["port"] == 2525
    assert kwargs["username"] == "mailer@fitora.test"
    assert kwargs["start_tls"] is True
