"""Verify that the certificate's signature was made by its issuer's key. Self-signed certificates are verified
against their own key."""

from pyCertStatus.decoder import ParsedCertificate, verify_signature
from pyCertStatus.logs import get_logger
from pyCertStatus.models import CertificateStatus, Check, CheckOutcome, CheckStatus, ValidationCheckResult

logger = get_logger(__name__)

__all__ = ["signature"]

CHECK = Check.SIGNATURE


def signature(subject: ParsedCertificate, issuer: ParsedCertificate | None, **_) -> CheckOutcome:
    """Verify the subject's signature against the issuer's public key.

    Args:
        subject (ParsedCertificate): The certificate being validated.
        issuer (ParsedCertificate | None): Its issuer, or None if the issuer isn't known.

    Returns:
        CheckOutcome: SUCCESS, FAILED (INVALID and final), or NOT_CHECKED when there is no issuer.

    """
    logger.debug("Starting check: signature")
    if issuer is None:
        return CheckOutcome(CHECK, ValidationCheckResult(CheckStatus.NOT_CHECKED, "Issuer information unavailable"))

    if not verify_signature(subject, issuer.public_key):
        return CheckOutcome(
            CHECK,
            ValidationCheckResult(CheckStatus.FAILED, "Signature verification failed"),
            status=CertificateStatus.INVALID,
            final=True,
        )

    return CheckOutcome(CHECK, ValidationCheckResult(CheckStatus.SUCCESS, "Signature verification successful"))
