"""Email service — sends OTP emails via async SMTP."""

from __future__ import annotations

import logging
from email.message import EmailMessage

import aiosmtplib

from fitora.config import Settings, settings as default_settings
from fitora.services.email_templates import OTPPurpose, render_otp_email

logger = logging.getLogger(__name__)


class EmailNotConfiguredError(Exception):
    """Raised when SMTP credentials are missing from the settings."""


class EmailService:
    """Sends transactional emails using the configured SMTP server."""

    def __init__(self, config: Settings | None = None) -> None:
        self._settings = config or default_settings

    async def send_otp(self, to_email: str, code: str, purpose: OTPPurpose) -> None:
        """Send a one-time passcode email.

        Parameters
        ----------
        to_email:
            Recipient email address.
        code:
            The 6-digit code to deliver.
        purpose:
            Selects the registration or password-reset template.

        Raises
        ------
        EmailNotConfiguredError
            If SMTP username or password is not set.
        aiosmtplib.SMTPException
            If the relay rejects or drops the message.
        """
        cfg = self._settings
        if not cfg.email_configured:
            logger.warning("SMTP credentials missing — email to %s not sent", to_email)
            raise EmailNotConfiguredError(
                "Email configuration is missing. Set SMTP_USERNAME and SMTP_PASSWORD."
            )

        template = render_otp_email(code, purpose, cfg.app_name, cfg.otp_ttl_seconds)

        msg = EmailMessage()
        msg["Subject"] = template.subject
        msg["From"] = cfg.sender
        msg["To"] = to_email
        msg.set_content(template.text)
        msg.add_alternative(template.html, subtype="html")

        logger.info("Sending %s OTP email to %s", purpose.value, to_email)

        await aiosmtplib.send(
            msg,
            hostname=cfg.smtp_host,
            port=cfg.smtp_port,
            username=cfg.smtp_username or None,
            password=cfg.smtp_password or None,
            start_tls=True,
        )

        logger.info("OTP email sent to %s", to_email)
