"""Look the certificate up in the CRLs listed in its CRL Distribution Points extension."""

from pyCertStatus.decoder import ParsedCertificate
from pyCertStatus.errors import RevocationCheckError, RevocationTimeoutError
from pyCertStatus.logs import get_logger
from pyCertStatus.models import CertificateStatus, Check, CheckOutcome, CheckStatus, ValidationCheckResult
from pyCertStatus.revocation import CrlClient

logger = get_logger(__name__)

__all__ = ["crl"]

CHECK = Check.CRL


def crl(subject: ParsedCertificate, crl_client: CrlClient, prior_status: CertificateStatus, **_) -> CheckOutcome:
    """Look the certificate up in each of its CRLs.

    A listed serial number ends the run with REVOKED. Failed downloads are recorded but never change the status, and
    a check with any failed download is not reported as SUCCESS. A certificate that was already REVOKED stays REVOKED
    when the CRLs don't list it, since the CRL may not have been updated yet.

    Args:
        subject (ParsedCertificate): The certificate being validated.
        crl_client (CrlClient): The client used to download the CRLs.
        prior_status (CertificateStatus): The status stored for the certificate before this run.

    Returns:
        CheckOutcome: The outcome of the CRL check.

    """
    logger.debug("Starting check: crl")
    urls = subject.crl_urls
    if not urls:
        return CheckOutcome(CHECK, ValidationCheckResult(CheckStatus.WARNING, "No CRL URL in certificate"))

    url_list = ", ".join(urls)
    failure = None
    answered = False
    for url in urls:
        logger.info(f"Checking for the CRL of the certificate {url}")
        try:
            record = crl_client.check(subject, url)
        except RevocationTimeoutError as err:
            logger.error(str(err))
            failure = failure or ValidationCheckResult(CheckStatus.WARNING, f"Connection timeout to CRL URL: {url}")
            continue
        except RevocationCheckError as err:
            logger.error(str(err))
            failure = ValidationCheckResult(
                CheckStatus.FAILED, f"Failed connecting to CRL URL: {url}. Error Message: {err}"
            )
            continue

        answered = True
        if record is not None:
            message = (
                f"Certificate was revoked on {record.revoked_at.isoformat()} according to the CRL.\n"
                f"Reason: {record.reason}.\n"
                f"CRL URL(s): {url_list}"
            )
            return CheckOutcome(
                CHECK,
                ValidationCheckResult(CheckStatus.REVOKED, message),
                status=CertificateStatus.REVOKED,
                final=True,
            )

    if prior_status == CertificateStatus.REVOKED and answered:
        message = (
            "Certificate revoked via platform. CRL returns valid. CRL may not be updated.\n"
            f"CRL URL(s): {url_list}"
        )
        return CheckOutcome(
            CHECK, ValidationCheckResult(CheckStatus.REVOKED, message), status=CertificateStatus.REVOKED
        )

    if failure is not None:
        return CheckOutcome(CHECK, failure)

    message = f"CRL verification completed successfully.\nCRL URL(s): {url_list}"
    return CheckOutcome(CHECK, ValidationCheckResult(CheckStatus.SUCCESS, message))
