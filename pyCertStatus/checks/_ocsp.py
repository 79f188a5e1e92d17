"""Ask the OCSP responders listed in the certificate's Authority Information Access extension whether it was
revoked."""

from pyCertStatus.decoder import ParsedCertificate
from pyCertStatus.errors import RevocationCheckError, RevocationTimeoutError
from pyCertStatus.logs import get_logger
from pyCertStatus.models import CertificateStatus, Check, CheckOutcome, CheckStatus, ValidationCheckResult
from pyCertStatus.revocation import OcspClient, OcspVerdict

logger = get_logger(__name__)

__all__ = ["ocsp"]

CHECK = Check.OCSP


def ocsp(subject: ParsedCertificate, issuer: ParsedCertificate | None, ocsp_client: OcspClient, **_) -> CheckOutcome:
    """Query each OCSP responder of the certificate in order.

    The first REVOKED verdict ends the run. Otherwise a single good verdict is enough for SUCCESS. When no responder
    gave a verdict, the entry is FAILED if any responder could not be reached and WARNING if they only timed out or
    didn't know the certificate; the status is left alone.

    Args:
        subject (ParsedCertificate): The certificate being validated.
        issuer (ParsedCertificate | None): Its issuer, needed to build the request.
        ocsp_client (OcspClient): The client used to query the responders.

    Returns:
        CheckOutcome: The outcome of the OCSP check.

    """
    logger.debug("Starting check: ocsp")
    urls = subject.ocsp_urls
    if not urls:
        return CheckOutcome(CHECK, ValidationCheckResult(CheckStatus.WARNING, "No OCSP URL in certificate"))

    if issuer is None:
        return CheckOutcome(CHECK, ValidationCheckResult(CheckStatus.NOT_CHECKED, "Issuer information unavailable"))

    messages = []
    succeeded = False
    transport_failed = False
    for url in urls:
        try:
            verdict = ocsp_client.check(subject, issuer, url)
        except RevocationTimeoutError as err:
            logger.warning(f"Not able to check OCSP: {err}")
            messages.append(f"Connection to OCSP responder timed out.\nOCSP URL: {url}")
            continue
        except RevocationCheckError as err:
            logger.warning(f"Not able to check OCSP: {err}")
            transport_failed = True
            messages.append(f"Error while checking OCSP.\nOCSP URL: {url}\nError: {err}")
            continue

        if verdict == OcspVerdict.REVOKED:
            messages.append(f"Certificate was revoked according to information from OCSP.\nOCSP URL: {url}")
            return CheckOutcome(
                CHECK,
                ValidationCheckResult(CheckStatus.REVOKED, "\n".join(messages)),
                status=CertificateStatus.REVOKED,
                final=True,
            )
        if verdict == OcspVerdict.SUCCESS:
            succeeded = True
            messages.append(f"OCSP verification successful from {url}")
        else:
            messages.append(f"OCSP check result is unknown.\nOCSP URL: {url}")

    message = "\n".join(messages)
    if succeeded:
        return CheckOutcome(CHECK, ValidationCheckResult(CheckStatus.SUCCESS, message), status=CertificateStatus.VALID)
    if transport_failed:
        return CheckOutcome(CHECK, ValidationCheckResult(CheckStatus.FAILED, message))
    return CheckOutcome(CHECK, ValidationCheckResult(CheckStatus.WARNING, message))
