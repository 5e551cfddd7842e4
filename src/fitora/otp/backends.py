"""Storage backends for OTP records."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class OTPRecord:
    """The outstanding code for one identity."""

    identity: str
    code: str
    issued_at: float
    expires_at: float
    version: int
    attempts: int = 0
    verified: bool = False

    def is_expired(self, now: float) -> bool:
        return now > self.expires_at


class OTPBackend(ABC):
    """Key-value storage for :class:`OTPRecord` objects keyed by identity.

    Backends only store and fetch. Read-modify-write atomicity is the
    store's job (see :class:`fitora.otp.store.OTPStore`), so a backend for a
    shared external store must be paired with a lock that spans instances.
    """

    @abstractmethod
    def get(self, identity: str) -> OTPRecord | None:
        """Return the record for *identity*, or ``None``."""

    @abstractmethod
    def put(self, record: OTPRecord) -> None:
        """Insert or replace the record for ``record.identity``."""

    @abstractmethod
    def delete(self, identity: str) -> None:
        """Remove the record for *identity*; a missing key is not an error."""

    @abstractmethod
    def delete_if_version(self, identity: str, version: int) -> bool:
        """Remove the record only if it is still the given instance."""

    @abstractmethod
    def identities(self) -> list[str]:
        """Snapshot of the identities currently holding a record."""


class InMemoryOTPBackend(OTPBackend):
    """Process-local dict backend.

    Records are lost on restart and not shared between workers.
    """

    def __init__(self) -> None:
        self._records: dict[str, OTPRecord] = {}
        self._lock = threading.Lock()

    def get(self, identity: str) -> OTPRecord | None:
        with self._lock:
            return self._records.get(identity)

    def put(self, record: OTPRecord) -> None:
        with self._lock:
            self._records[record.identity] = record

    def delete(self, identity: str) -> None:
        with self._lock:
            self._records.pop(identity, None)

    def delete_if_version(self, identity: str, version: int) -> bool:
        with self._lock:
            record = self._records.get(identity)
            if record is None or record.version != version:
                return False
            del self._records[identity]
            return True

    def identities(self) -> list[str]:
        with self._lock:
            return list(self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
