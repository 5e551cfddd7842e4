"""Background task that reclaims expired OTP records."""

from __future__ import annotations

import asyncio
import contextlib
import logging

from fitora.otp.store import OTPStore

logger = logging.getLogger(__name__)


class ExpirySweeper:
    """Periodically calls :meth:`OTPStore.purge_expired` on the event loop."""

    def __init__(self, store: OTPStore, interval_seconds: float) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._store = store
        self._interval = interval_seconds
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="otp-expiry-sweeper")
        logger.info("OTP sweeper started (every %ss)", self._interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("OTP sweeper stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            removed = self._store.purge_expired()
            if removed:
                logger.debug("Purged %d expired OTP record(s)", removed)
