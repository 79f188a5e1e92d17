"""Look certificates up in the CRLs published at their distribution points."""

import threading
from dataclasses import dataclass
from datetime import datetime, timezone

import requests
from cryptography import x509

from pyCertStatus.decoder import ParsedCertificate
from pyCertStatus.errors import RevocationCheckError, RevocationTimeoutError
from pyCertStatus.logs import get_logger

logger = get_logger(__name__)

__all__ = ["CrlClient", "RevocationRecord"]


@dataclass(frozen=True)
class RevocationRecord:
    """A CRL entry for a revoked certificate."""

    reason: str
    revoked_at: datetime


class CrlClient:
    """Download CRLs over HTTP and look serial numbers up in them.

    A downloaded CRL is reused for further lookups until its `nextUpdate` time passes, so a batch of certificates
    sharing one distribution point downloads it once.
    """

    def __init__(self, timeout: float = 10, session: requests.Session | None = None, cache: bool = True):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.cache = cache
        self._crls: dict[str, x509.CertificateRevocationList] = {}
        self._lock = threading.Lock()

    def check(self, subject: ParsedCertificate, url: str) -> RevocationRecord | None:
        """Look `subject` up in the CRL published at `url`.

        Args:
            subject (ParsedCertificate): The certificate to look up.
            url (str): The CRL distribution point.

        Raises:
            RevocationTimeoutError: If the download timed out.
            RevocationCheckError: If the CRL couldn't be downloaded or parsed, or its entry for the certificate is
                malformed.

        Returns:
            RevocationRecord | None: The revocation entry, or None if the certificate is not on the list.

        """
        crl = self.get_crl(url)
        try:
            revoked = crl.get_revoked_certificate_by_serial_number(subject.certificate.serial_number)
            if revoked is None:
                logger.debug(f"Serial {subject.serial_number} is not listed in the CRL from {url}")
                return None
            record = RevocationRecord(reason=_revocation_reason(revoked), revoked_at=revoked.revocation_date_utc)
        except ValueError as err:
            raise RevocationCheckError(url, f"Unable to read the CRL entry: {err}") from err

        logger.info(f"Serial {subject.serial_number} is revoked according to {url}: {record.reason}")
        return record

    def get_crl(self, url: str) -> x509.CertificateRevocationList:
        """Return the CRL at `url`, from the cache if it is still current."""
        with self._lock:
            crl = self._crls.get(url)
        if crl is not None and crl.next_update_utc is not None and crl.next_update_utc > datetime.now(timezone.utc):
            logger.debug(f"Using cached CRL from {url}")
            return crl

        crl = self._download(url)
        if self.cache and crl.next_update_utc is not None:
            with self._lock:
                self._crls[url] = crl
        return crl

    def _download(self, url: str) -> x509.CertificateRevocationList:
        logger.info(f"Downloading CRL from {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.Timeout as err:
            raise RevocationTimeoutError(url, "Connection to CRL distribution point timed out") from err
        except requests.RequestException as err:
            raise RevocationCheckError(url, f"Unable to reach CRL distribution point: {err}") from err

        if response.status_code != 200:
            raise RevocationCheckError(url, f"CRL distribution point replied with HTTP {response.status_code}")

        try:
            return x509.load_der_x509_crl(response.content)
        except ValueError:
            pass
        try:
            return x509.load_pem_x509_crl(response.content)
        except ValueError as err:
            raise RevocationCheckError(url, "Response is not a CRL") from err


def _revocation_reason(revoked: x509.RevokedCertificate) -> str:
    try:
        return revoked.extensions.get_extension_for_class(x509.CRLReason).value.reason.value
    except x509.ExtensionNotFound:
        return x509.ReasonFlags.unspecified.value
