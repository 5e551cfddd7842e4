"""Request / response models for the HTTP API."""

from __future__ import annotations

import re

from pydantic import BaseModel, Field

from fitora.services.email_templates import OTPPurpose

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
OTP_RE = re.compile(r"[0-9]{6}")
MIN_PASSWORD_LENGTH = 6


# ── Requests ─────────────────────────────────────────────

class OTPSendRequest(BaseModel):
    email: str = ""


class OTPVerifyRequest(BaseModel):
    email: str = ""
    otp: str = ""
    type: OTPPurpose | None = None


class PasswordResetRequest(BaseModel):
    email: str = ""
    otp: str = ""
    new_password: str = Field("", alias="newPassword")

    model_config = {"populate_by_name": True}


class CheckEmailRequest(BaseModel):
    email: str = ""


# ── Responses ────────────────────────────────────────────

class APIResponse(BaseModel):
    success: bool
    message: str


class OTPSendResponse(APIResponse):
    otp: str | None = None


class CheckEmailResponse(APIResponse):
    exists: bool
