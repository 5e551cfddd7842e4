"""FastAPI dependencies — shared instances live on ``app.state``."""

from fastapi import HTTPException, Request

from fitora.api.schemas import EMAIL_RE
from fitora.config import Settings
from fitora.otp.store import OTPStore
from fitora.services.email_service import EmailService


def get_otp_store(request: Request) -> OTPStore:
    return request.app.state.otp_store


def get_email_service(request: Request) -> EmailService:
    return request.app.state.email_service


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def require_email(email: str) -> str:
    """Return the trimmed email or raise a 400 if it is missing or malformed."""
    email = email.strip()
    if not email:
        raise HTTPException(status_code=400, detail="Email is required!")
    if not EMAIL_RE.match(email):
        raise HTTPException(status_code=400, detail="Invalid email format!")
    return email
