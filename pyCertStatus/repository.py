"""The certificate repository the engine reads from and writes to."""

import threading
from typing import Protocol

from pyCertStatus.logs import get_logger
from pyCertStatus.models import Certificate, CertificateStatus

logger = get_logger(__name__)


class CertificateRepository(Protocol):
    """Lookup and persistence of certificates, provided by the storage layer."""

    def find_by_serial_number(self, serial_number: str) -> Certificate | None:
        """Find a certificate by serial number, ignoring case. Returns None if it isn't known."""

    def find_all_by_issuer_serial_number(self, serial_number: str) -> list[Certificate]:
        """Find every certificate whose issuer serial number reference equals `serial_number`."""

    def find_all_by_status(self, status: CertificateStatus) -> list[Certificate]:
        """Find every certificate currently in `status`."""

    def save(self, certificate: Certificate) -> None:
        """Persist the certificate's status, validation report and validation timestamp."""


class InMemoryCertificateRepository:
    """A thread-safe repository that keeps certificates in a dict keyed by lowercase serial number.

    Records are stored as given, so callers holding a `Certificate` see the engine's updates to it.
    """

    def __init__(self, certificates: list[Certificate] | None = None):
        self._lock = threading.Lock()
        self._certificates: dict[str, Certificate] = {}
        for certificate in certificates or []:
            self.save(certificate)

    def find_by_serial_number(self, serial_number: str) -> Certificate | None:
        with self._lock:
            return self._certificates.get(serial_number.lower())

    def find_all_by_issuer_serial_number(self, serial_number: str) -> list[Certificate]:
        with self._lock:
            serial_number = serial_number.lower()
            return [
                c
                for c in self._certificates.values()
                if c.issuer_serial_number and c.issuer_serial_number.lower() == serial_number
            ]

    def find_all_by_status(self, status: CertificateStatus) -> list[Certificate]:
        with self._lock:
            return [c for c in self._certificates.values() if c.status == status]

    def save(self, certificate: Certificate) -> None:
        with self._lock:
            self._certificates[certificate.serial_number.lower()] = certificate
        logger.debug(f"Saved {certificate} with status {certificate.status.name}")

    def __len__(self) -> int:
        with self._lock:
            return len(self._certificates)

    def __iter__(self):
        with self._lock:
            return iter(list(self._certificates.values()))
