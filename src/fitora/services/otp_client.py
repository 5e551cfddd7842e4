"""OTP API client — async HTTP wrapper around the Fitora OTP endpoints.

Used by the interactive simulator and handy for smoke-testing a deployed
instance. ``base_url`` defaults to ``settings.api_base_url``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from fitora.config import settings

logger = logging.getLogger(__name__)


@dataclass
class APIResult:
    """Lightweight value object returned by every client call."""

    success: bool
    message: str
    otp: str | None = None


class OTPAPIClient:
    """Async HTTP client for the OTP and password-reset API."""

    def __init__(
        self,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = (base_url or settings.api_base_url).rstrip("/")
        self._transport = transport

    async def send_otp(self, email: str, purpose: str = "registration") -> APIResult:
        """Ask the server to issue and email a code."""
        return await self._post("/otp/send", {"email": email}, params={"type": purpose})

    async def verify_otp(self, email: str, otp: str, purpose: str = "registration") -> APIResult:
        """Check a code; password-reset codes stay on file after a match."""
        return await self._post(
            "/otp/verify", {"email": email, "otp": otp}, params={"type": purpose}
        )

    async def reset_password(self, email: str, otp: str, new_password: str) -> APIResult:
        return await self._post(
            "/users/reset-password",
            {"email": email, "otp": otp, "newPassword": new_password},
        )

    async def _post(self, path: str, payload: dict, params: dict | None = None) -> APIResult:
        url = f"{self._base_url}{path}"
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                resp = await client.post(url, json=payload, params=params)
        except httpx.HTTPError as exc:
            logger.exception("Request to %s failed: %s", url, exc)
            return APIResult(success=False, message=f"Request failed: {exc}")

        try:
            data = resp.json()
        except ValueError:
            logger.error("Non-JSON response from %s: %s %s", url, resp.status_code, resp.text)
            return APIResult(success=False, message=f"Unexpected response ({resp.status_code})")

        if resp.status_code >= 400:
            logger.info("%s returned %s: %s", path, resp.status_code, data.get("message"))
        return APIResult(
            success=bool(data.get("success", False)),
            message=data.get("message", ""),
            otp=data.get("otp"),
        )
