"""OTP store and verifier — issues, checks and retires email passcodes."""

from __future__ import annotations

import enum
import hmac
import itertools
import logging
import secrets
import time
from collections.abc import Callable
from dataclasses import dataclass, replace
from random import Random

from fitora.otp.backends import InMemoryOTPBackend, OTPBackend, OTPRecord
from fitora.otp.locks import KeyedLock

logger = logging.getLogger(__name__)

# Code space: always six digits, never a leading zero
CODE_MIN = 100000
CODE_MAX = 999999

# OTP validity period in seconds
OTP_TTL_SECONDS = 300  # 5 minutes
MAX_ATTEMPTS = 5

MSG_VALID = "OTP is valid."
MSG_NOT_FOUND = "OTP does not exist or has expired. Please request a new code."
MSG_TOO_MANY = "Too many failed attempts. Please request a new code."


def generate_code(rng: Random | None = None) -> str:
    """Return a random 6-digit code drawn uniformly from the code space."""
    rng = rng or secrets.SystemRandom()
    return str(rng.randint(CODE_MIN, CODE_MAX))


def normalize_identity(identity: str) -> str:
    """Trim and lowercase an email address so lookups are case-insensitive."""
    return identity.strip().lower()


class VerifyOutcome(enum.Enum):
    VALID = "valid"
    MISMATCH = "mismatch"
    ATTEMPTS_EXHAUSTED = "attempts_exhausted"
    NOT_FOUND_OR_EXPIRED = "not_found_or_expired"


@dataclass(frozen=True)
class VerifyResult:
    """Value object returned by :meth:`OTPStore.verify`."""

    valid: bool
    message: str
    outcome: VerifyOutcome


class OTPStore:
    """Keyed OTP state machine with attempt limiting and expiry.

    Each identity has at most one record. Issuing always replaces it.
    Expired records are treated as absent on every read, so the
    optional background purge (:meth:`purge_expired`) only reclaims memory.

    Every operation on an identity runs under that identity's lock, which
    makes concurrent verify / issue / consume calls for the same email
    behave as if they ran one after another.
    """

    def __init__(
        self,
        backend: OTPBackend | None = None,
        *,
        ttl_seconds: float = OTP_TTL_SECONDS,
        max_attempts: int = MAX_ATTEMPTS,
        clock: Callable[[], float] = time.time,
        rng: Random | None = None,
    ) -> None:
        self._backend = backend if backend is not None else InMemoryOTPBackend()
        self._ttl = ttl_seconds
        self._max_attempts = max_attempts
        self._clock = clock
        self._rng = rng or secrets.SystemRandom()
        self._locks = KeyedLock()
        self._versions = itertools.count(1)

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def issue(self, identity: str) -> str:
        """Generate and store a fresh code for *identity*, returning it.

        Any existing record for the identity, verified or not, is discarded.
        """
        key = self._key(identity)
        code = generate_code(self._rng)
        with self._locks.hold(key):
            now = self._clock()
            self._backend.put(
                OTPRecord(
                    identity=key,
                    code=code,
                    issued_at=now,
                    expires_at=now + self._ttl,
                    version=next(self._versions),
                )
            )
        logger.info("OTP issued for %s", key)
        logger.debug("OTP for %s: %s", key, code)
        return code

    def verify(
        self, identity: str, code: str, consume_on_success: bool = True
    ) -> VerifyResult:
        """Check *code* against the record on file for *identity*.

        With ``consume_on_success=False`` a match leaves the record in
        place with ``verified=True``; repeating the call keeps succeeding
        until the record expires or is consumed.
        """
        key = self._key(identity)
        with self._locks.hold(key):
            record = self._backend.get(key)
            if record is None:
                return VerifyResult(False, MSG_NOT_FOUND, VerifyOutcome.NOT_FOUND_OR_EXPIRED)

            if record.is_expired(self._clock()):
                self._backend.delete(key)
                logger.info("OTP expired for %s", key)
                return VerifyResult(False, MSG_NOT_FOUND, VerifyOutcome.NOT_FOUND_OR_EXPIRED)

            if record.attempts >= self._max_attempts:
                self._backend.delete(key)
                logger.warning("OTP attempts exhausted for %s", key)
                return VerifyResult(False, MSG_TOO_MANY, VerifyOutcome.ATTEMPTS_EXHAUSTED)

            if not hmac.compare_digest(code.encode(), record.code.encode()):
                # a record at the limit is dropped on the next check
                record.attempts += 1
                self._backend.put(record)
                remaining = self._max_attempts - record.attempts
                return VerifyResult(
                    False,
                    f"Invalid OTP. {remaining} attempts remaining.",
                    VerifyOutcome.MISMATCH,
                )

            record.verified = True
            if consume_on_success:
                self._backend.delete(key)
            else:
                self._backend.put(record)

        logger.info("OTP verified for %s (consumed=%s)", key, consume_on_success)
        return VerifyResult(True, MSG_VALID, VerifyOutcome.VALID)

    def peek(self, identity: str) -> OTPRecord | None:
        """Return a copy of the live record for *identity* without touching it.

        Expired records and records that used up their attempts count as
        absent.
        """
        key = self._key(identity)
        with self._locks.hold(key):
            record = self._backend.get(key)
            if record is None or record.is_expired(self._clock()):
                return None
            if record.attempts >= self._max_attempts:
                return None
            return replace(record)

    def consume(self, identity: str) -> None:
        """Forget the record for *identity*. Missing records are fine."""
        key = self._key(identity)
        with self._locks.hold(key):
            self._backend.delete(key)
        logger.info("OTP consumed for %s", key)

    def purge_expired(self) -> int:
        """Delete every expired record and return how many were removed."""
        removed = 0
        for key in self._backend.identities():
            with self._locks.hold(key):
                record = self._backend.get(key)
                if record is None or not record.is_expired(self._clock()):
                    continue
                if self._backend.delete_if_version(key, record.version):
                    removed += 1
        return removed

    def _key(self, identity: str) -> str:
        key = normalize_identity(identity)
        if not key:
            raise ValueError("identity must be a non-empty string")
        return key
