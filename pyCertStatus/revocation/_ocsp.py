"""Query OCSP responders for the revocation status of a certificate."""

from enum import StrEnum, auto

import requests
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.x509 import ocsp

from pyCertStatus.decoder import ParsedCertificate
from pyCertStatus.errors import RevocationCheckError, RevocationTimeoutError
from pyCertStatus.logs import get_logger

logger = get_logger(__name__)

__all__ = ["OcspClient", "OcspVerdict"]


class OcspVerdict(StrEnum):
    """What an OCSP responder said about a certificate."""

    SUCCESS = auto()
    "The responder reported the certificate as good."

    REVOKED = auto()
    UNKNOWN = auto()
    "The responder does not know the certificate, or refused to answer."


class OcspClient:
    """Send OCSP requests over HTTP."""

    def __init__(self, timeout: float = 10, session: requests.Session | None = None):
        """Create a new client.

        Args:
            timeout (float, optional): Seconds to wait for the responder. Defaults to 10.
            session (requests.Session, optional): The session to send requests with. A new one is created if not given.

        """
        self.timeout = timeout
        self.session = session or requests.Session()

    def check(self, subject: ParsedCertificate, issuer: ParsedCertificate, url: str) -> OcspVerdict:
        """Ask the responder at `url` about `subject`.

        Args:
            subject (ParsedCertificate): The certificate to check.
            issuer (ParsedCertificate): The certificate that issued `subject`, used to build the request CertID.
            url (str): The responder URL.

        Raises:
            RevocationTimeoutError: If the responder didn't answer in time.
            RevocationCheckError: If the responder couldn't be reached or sent something that isn't an OCSP response,
                or the response is malformed.

        Returns:
            OcspVerdict: The responder's verdict.

        """
        builder = ocsp.OCSPRequestBuilder().add_certificate(subject.certificate, issuer.certificate, hashes.SHA1())
        request_data = builder.build().public_bytes(serialization.Encoding.DER)
        headers = {"Content-Type": "application/ocsp-request", "Accept": "application/ocsp-response"}

        logger.info(f"Querying OCSP responder {url} for serial {subject.serial_number}")
        try:
            response = self.session.post(url, data=request_data, headers=headers, timeout=self.timeout)
        except requests.Timeout as err:
            raise RevocationTimeoutError(url, "Connection to OCSP responder timed out") from err
        except requests.RequestException as err:
            raise RevocationCheckError(url, f"Unable to reach OCSP responder: {err}") from err

        if response.status_code != 200:
            raise RevocationCheckError(url, f"OCSP responder replied with HTTP {response.status_code}")

        try:
            ocsp_response = ocsp.load_der_ocsp_response(response.content)
        except ValueError as err:
            raise RevocationCheckError(url, f"Unable to parse OCSP response: {err}") from err

        try:
            return _verdict_from_response(ocsp_response, subject, url)
        except ValueError as err:
            raise RevocationCheckError(url, f"Malformed OCSP response: {err}") from err


def _verdict_from_response(ocsp_response: ocsp.OCSPResponse, subject: ParsedCertificate, url: str) -> OcspVerdict:
    if ocsp_response.response_status != ocsp.OCSPResponseStatus.SUCCESSFUL:
        logger.warning(f"OCSP responder {url} returned status {ocsp_response.response_status.name}")
        return OcspVerdict.UNKNOWN

    serial = subject.certificate.serial_number
    single = next((r for r in ocsp_response.responses if r.serial_number == serial), None)
    if single is None:
        logger.warning(f"OCSP response from {url} has no entry for serial {subject.serial_number}")
        return OcspVerdict.UNKNOWN

    if single.certificate_status == ocsp.OCSPCertStatus.GOOD:
        logger.debug(f"OCSP responder {url} reported {subject.serial_number} as good")
        return OcspVerdict.SUCCESS

    if single.certificate_status == ocsp.OCSPCertStatus.REVOKED:
        reason = single.revocation_reason.name if single.revocation_reason else "unspecified"
        logger.info(f"OCSP responder {url} reported {subject.serial_number} as revoked ({reason})")
        return OcspVerdict.REVOKED

    logger.debug(f"OCSP responder {url} doesn't know {subject.serial_number}")
    return OcspVerdict.UNKNOWN
