"""Email templates for OTP delivery."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class OTPPurpose(str, enum.Enum):
    REGISTRATION = "registration"
    PASSWORD_RESET = "password-reset"


@dataclass
class EmailTemplate:
    subject: str
    html: str
    text: str


_HTML_LAYOUT = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px; background-color: #f9f9f9;">
  <div style="background-color: #ffffff; padding: 30px; border-radius: 8px;">
    <h2 style="color: #000; margin-top: 0;">{heading}</h2>
    <p style="color: #333; font-size: 16px;">Hello,</p>
    <p style="color: #666; font-size: 14px;">{intro} Your OTP code is:</p>
    <div style="background-color: #FFE5E5; padding: 20px; text-align: center; border-radius: 8px; margin: 20px 0;">
      <h1 style="color: #000; font-size: 32px; letter-spacing: 8px; margin: 0;">{code}</h1>
    </div>
    <p style="color: #666; font-size: 14px;">This code will expire in <strong>{minutes} minutes</strong>.</p>
    <p style="color: #999; font-size: 12px; margin-top: 30px;">{footer}</p>
    <hr style="border: none; border-top: 1px solid #eee; margin: 30px 0;">
    <p style="color: #666; font-size: 12px; margin: 0;">Best regards,<br><strong>The {app_name} Team</strong></p>
  </div>
</div>
"""


def render_otp_email(
    code: str, purpose: OTPPurpose, app_name: str, ttl_seconds: float
) -> EmailTemplate:
    """Build the subject and bodies for an OTP email."""
    minutes = max(1, round(ttl_seconds / 60))

    if purpose is OTPPurpose.PASSWORD_RESET:
        subject = f"Password Reset OTP Code - {app_name}"
        heading = "Password Reset"
        intro = "We received a request to reset the password for your account."
        footer = (
            "If you did not request a password reset, please ignore this email "
            "and ensure your account is secure."
        )
        text = (
            f"Your password reset OTP code is: {code}. "
            f"This code will expire in {minutes} minutes. {footer}"
        )
    else:
        subject = f"Registration OTP Verification Code - {app_name}"
        heading = "Account Registration Verification"
        intro = f"Thank you for registering an account with {app_name}."
        footer = "If you did not request this code, please ignore this email."
        text = (
            f"Your registration OTP verification code is: {code}. "
            f"This code will expire in {minutes} minutes."
        )

    html = _HTML_LAYOUT.format(
        heading=heading,
        intro=intro,
        code=code,
        minutes=minutes,
        footer=footer,
        app_name=app_name,
    )
    return EmailTemplate(subject=subject, html=html, text=text)
