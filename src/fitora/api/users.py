"""User router — account lookups and OTP-gated password reset."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from fitora.api.dependencies import get_otp_store, require_email
from fitora.api.schemas import (
    MIN_PASSWORD_LENGTH,
    APIResponse,
    CheckEmailRequest,
    CheckEmailResponse,
    PasswordResetRequest,
)
from fitora.database.engine import get_session
from fitora.database.repository import UserRepository
from fitora.otp.store import OTPStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("/check-email", response_model=CheckEmailResponse)
async def check_email(
    body: CheckEmailRequest, session: AsyncSession = Depends(get_session)
):
    """Tell the registration form whether an account already uses the email."""
    email = require_email(body.email)
    exists = await UserRepository(session).email_exists(email)
    message = "This email is already in use." if exists else "Email is available."
    return CheckEmailResponse(success=True, message=message, exists=exists)


@router.post("/reset-password", response_model=APIResponse)
async def reset_password(
    body: PasswordResetRequest,
    store: OTPStore = Depends(get_otp_store),
    session: AsyncSession = Depends(get_session),
):
    """Set a new password once the email's reset code has been verified.

    The code is checked in retain mode so a failure further down (unknown
    user, database error) leaves it usable for another try. It is consumed
    only after the new password is stored.
    """
    if not body.email.strip() or not body.otp or not body.new_password:
        raise HTTPException(
            status_code=400, detail="Email, OTP, and new password are required!"
        )
    if len(body.new_password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters long!",
        )
    email = require_email(body.email)

    result = store.verify(email, body.otp, consume_on_success=False)
    if not result.valid:
        raise HTTPException(status_code=400, detail=result.message)

    record = store.peek(email)
    if record is None or not record.verified:
        raise HTTPException(
            status_code=400,
            detail="OTP must be verified first. Please verify OTP before resetting password.",
        )

    repo = UserRepository(session)
    user = await repo.find_by_email(email)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found in the system!")

    await repo.set_password(user, body.new_password)
    await session.commit()
    store.consume(email)

    logger.info("Password reset for %s", email)
    return APIResponse(success=True, message="Password has been reset successfully!")
