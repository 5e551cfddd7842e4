"""OTP router — issue and verify email passcodes.

Endpoints
---------
POST /api/otp/send?type=registration|password-reset   → issue + email a code
POST /api/otp/verify?type=...                          → check a code
"""

from __future__ import annotations

import logging

import aiosmtplib
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from fitora.api.dependencies import (
    get_email_service,
    get_otp_store,
    get_settings,
    require_email,
)
from fitora.api.schemas import (
    OTP_RE,
    APIResponse,
    OTPSendRequest,
    OTPSendResponse,
    OTPVerifyRequest,
)
from fitora.config import Settings
from fitora.otp.store import OTPStore
from fitora.services.email_service import EmailNotConfiguredError, EmailService
from fitora.services.email_templates import OTPPurpose

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/otp", tags=["otp"])


@router.post("/send", response_model=OTPSendResponse, response_model_exclude_none=True)
async def send_otp(
    body: OTPSendRequest,
    purpose: OTPPurpose = Query(OTPPurpose.REGISTRATION, alias="type"),
    store: OTPStore = Depends(get_otp_store),
    email_service: EmailService = Depends(get_email_service),
    config: Settings = Depends(get_settings),
):
    """Issue a fresh code for the email and deliver it.

    The code stays valid even when delivery fails; outside production it is
    echoed back so the flow can be completed without a mailbox.
    """
    email = require_email(body.email)
    code = store.issue(email)
    echoed = code if config.expose_otp else None

    try:
        await email_service.send_otp(email, code, purpose)
    except EmailNotConfiguredError:
        if echoed is None:
            logger.error("OTP for %s issued but email is not configured", email)
            return JSONResponse(
                status_code=500,
                content={"success": False, "message": "Email service is not configured."},
            )
        logger.warning("Email not configured; returning OTP for %s in response", email)
        return OTPSendResponse(
            success=True,
            message="OTP code has been generated (email not configured, check server logs).",
            otp=echoed,
        )
    except (aiosmtplib.SMTPException, OSError) as exc:
        logger.exception("Failed to email OTP to %s: %s", email, exc)
        content = {
            "success": False,
            "message": "Unable to send email. Please try again later.",
        }
        if echoed is not None:
            content["otp"] = echoed
        return JSONResponse(status_code=500, content=content)

    return OTPSendResponse(
        success=True,
        message="OTP code has been sent to your email!",
        otp=echoed,
    )


@router.post("/verify", response_model=APIResponse)
async def verify_otp(
    body: OTPVerifyRequest,
    purpose: OTPPurpose | None = Query(None, alias="type"),
    store: OTPStore = Depends(get_otp_store),
):
    """Validate a code.

    Registration codes are single use. Password-reset codes stay on file,
    marked verified, until the reset itself succeeds.
    """
    if not body.email.strip() or not body.otp:
        raise HTTPException(status_code=400, detail="Email and OTP are required!")
    if not OTP_RE.fullmatch(body.otp):
        raise HTTPException(status_code=400, detail="OTP must be 6 digits!")
    email = require_email(body.email)

    is_reset = OTPPurpose.PASSWORD_RESET in (purpose, body.type)
    result = store.verify(email, body.otp, consume_on_success=not is_reset)
    if not result.valid:
        logger.info("OTP verification failed for %s: %s", email, result.outcome.value)
        raise HTTPException(status_code=400, detail=result.message)

    return APIResponse(success=True, message=result.message)
