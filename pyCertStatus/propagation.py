"""Cascade a revocation to the certificates issued by the revoked certificate."""

from pyCertStatus.logs import get_logger
from pyCertStatus.models import Certificate, CertificateStatus
from pyCertStatus.repository import CertificateRepository

logger = get_logger(__name__)


class RevocationPropagator:
    """Mark the certificates issued by a revoked certificate as REVOKED.

    Only direct children are updated; their own children are left to their next validation run.
    """

    def __init__(self, repository: CertificateRepository):
        self.repository = repository

    def on_revoked(self, serial_number: str) -> list[Certificate]:
        """Revoke every certificate whose issuer serial number reference equals `serial_number`.

        Args:
            serial_number (str): The serial number of the revoked certificate.

        Returns:
            list[Certificate]: The certificates whose status changed.

        """
        updated = []
        for certificate in self.repository.find_all_by_issuer_serial_number(serial_number):
            if certificate.serial_number.lower() == serial_number.lower():
                continue
            if certificate.status == CertificateStatus.REVOKED:
                continue
            logger.info(f"Revoking {certificate} since its issuer {serial_number} is revoked")
            certificate.status = CertificateStatus.REVOKED
            self.repository.save(certificate)
            updated.append(certificate)

        logger.debug("Propagated revocation of %s to %s certificate(s)", serial_number, len(updated))
        return updated
