"""Helpers for turning PEM files into repository records.

The engine itself never ingests certificates; these are used by the command line harness and by callers that want to
fill an `InMemoryCertificateRepository`.
"""

from pathlib import Path

from cryptography.hazmat.primitives import serialization
from cryptography.x509 import load_pem_x509_certificates

from pyCertStatus.decoder import ParsedCertificate, decode_x509, verify_signature
from pyCertStatus.errors import CertificateDecodeError
from pyCertStatus.logs import get_logger
from pyCertStatus.models import Certificate

logger = get_logger(__name__)


def certificate_from_pem(content: str | bytes) -> Certificate:
    """Create a repository record for a PEM encoded certificate.

    Args:
        content (str | bytes): The PEM content.

    Raises:
        CertificateDecodeError: If the content isn't a certificate.

    Returns:
        Certificate: A record in UNKNOWN status, without an issuer reference.

    """
    parsed = decode_x509(content)
    return Certificate(
        serial_number=parsed.serial_number,
        subject_dn=parsed.subject_dn,
        issuer_dn=parsed.issuer_dn,
        content=parsed.certificate.public_bytes(serialization.Encoding.PEM).decode("ascii"),
        common_name=parsed.common_name,
    )


def load_certificates_from_path(fp: Path | str) -> list[Certificate]:
    """Load all the certificates in a folder. A file may hold several PEM certificates.

    Args:
        fp (Path | str): The folder to load certificates from.

    Raises:
        CertificateDecodeError: If a file holds something other than PEM certificates.

    Returns:
        list[Certificate]: The records, in file name order.

    """
    logger.debug("Loading certificates from path %s", str(fp))
    if isinstance(fp, str):
        fp = Path(fp)

    certificates = []
    for file in sorted(f for f in fp.glob("*") if f.is_file()):
        try:
            loaded = load_pem_x509_certificates(file.read_bytes())
        except ValueError as err:
            raise CertificateDecodeError(f"Unable to load certificates from {file.name}") from err
        for cert in loaded:
            certificates.append(certificate_from_pem(cert.public_bytes(serialization.Encoding.PEM)))
        logger.debug("Loaded %s certificate(s) from %s", len(loaded), file.name)
    return certificates


def link_issuers(certificates: list[Certificate]) -> list[Certificate]:
    """Fill in the issuer serial number reference of each certificate that doesn't have one.

    The issuer is a certificate whose subject matches the certificate's issuer name and whose key verifies its
    signature. Self-signed certificates reference themselves. Certificates with no such issuer are left unlinked.

    Args:
        certificates (list[Certificate]): The certificates to link, modified in place.

    Returns:
        list[Certificate]: The same certificates.

    """
    parsed = {c.serial_number: decode_x509(c.content) for c in certificates}
    for certificate in certificates:
        if certificate.issuer_serial_number:
            continue
        if certificate.is_self_signed:
            certificate.issuer_serial_number = certificate.serial_number
            continue

        issuer = _find_issuer(parsed[certificate.serial_number], certificates, parsed)
        if issuer is None:
            logger.debug(f"No known issuer for {certificate}")
            continue
        logger.debug(f"Linked {certificate} to issuer {issuer}")
        certificate.issuer_serial_number = issuer.serial_number
    return certificates


def _find_issuer(
    subject: ParsedCertificate, certificates: list[Certificate], parsed: dict[str, ParsedCertificate]
) -> Certificate | None:
    for candidate in certificates:
        if candidate.subject_dn != subject.issuer_dn or candidate.serial_number == subject.serial_number:
            continue
        if verify_signature(subject, parsed[candidate.serial_number].public_key):
            return candidate
    return None
