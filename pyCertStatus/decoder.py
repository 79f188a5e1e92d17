"""Decode certificate content into the fields needed for validation."""

import base64
import binascii
from dataclasses import dataclass
from datetime import datetime

from cryptography import x509
from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import dsa, ec, ed448, ed25519, rsa
from cryptography.x509.oid import AuthorityInformationAccessOID, ExtensionOID, NameOID

from pyCertStatus.errors import CertificateDecodeError
from pyCertStatus.logs import get_logger

logger = get_logger(__name__)

PEM_HEADER = "-----BEGIN CERTIFICATE-----"
PEM_FOOTER = "-----END CERTIFICATE-----"


@dataclass(frozen=True)
class ParsedCertificate:
    """A decoded X.509 certificate."""

    certificate: x509.Certificate

    @property
    def subject_dn(self) -> str:
        return self.certificate.subject.rfc4514_string()

    @property
    def issuer_dn(self) -> str:
        return self.certificate.issuer.rfc4514_string()

    @property
    def serial_number(self) -> str:
        """The serial number as lowercase hex, the way the repository stores it."""
        return format(self.certificate.serial_number, "x")

    @property
    def common_name(self) -> str | None:
        attributes = self.certificate.subject.get_attributes_for_oid(NameOID.COMMON_NAME)
        return str(attributes[0].value) if attributes else None

    @property
    def not_before(self) -> datetime:
        return self.certificate.not_valid_before_utc

    @property
    def not_after(self) -> datetime:
        return self.certificate.not_valid_after_utc

    @property
    def public_key(self):
        return self.certificate.public_key()

    @property
    def ocsp_urls(self) -> list[str]:
        """The OCSP responder URLs from the Authority Information Access extension."""
        try:
            aia = self.certificate.extensions.get_extension_for_oid(ExtensionOID.AUTHORITY_INFORMATION_ACCESS).value
        except x509.ExtensionNotFound:
            return []
        return [
            desc.access_location.value
            for desc in aia
            if desc.access_method == AuthorityInformationAccessOID.OCSP
            and isinstance(desc.access_location, x509.UniformResourceIdentifier)
        ]

    @property
    def crl_urls(self) -> list[str]:
        """The URLs from the CRL Distribution Points extension."""
        try:
            cdp = self.certificate.extensions.get_extension_for_oid(ExtensionOID.CRL_DISTRIBUTION_POINTS).value
        except x509.ExtensionNotFound:
            return []
        urls = []
        for point in cdp:
            for name in point.full_name or []:
                if isinstance(name, x509.UniformResourceIdentifier):
                    urls.append(name.value)
        return urls


def decode_x509(content: str | bytes) -> ParsedCertificate:
    """Decode a certificate.

    Accepts PEM text, the base64 body of a PEM without its header and footer, or DER bytes.

    Args:
        content (str | bytes): The certificate content.

    Raises:
        CertificateDecodeError: If the content is not a certificate.

    Returns:
        ParsedCertificate: The decoded certificate.

    """
    if isinstance(content, bytes) and not content.lstrip().startswith(b"-----"):
        der = content
    else:
        text = content.decode("ascii", errors="replace") if isinstance(content, bytes) else content
        body = "".join(text.replace(PEM_HEADER, "").replace(PEM_FOOTER, "").split())
        try:
            der = base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError) as err:
            raise CertificateDecodeError("Certificate content is not valid base64") from err

    try:
        return ParsedCertificate(x509.load_der_x509_certificate(der))
    except ValueError as err:
        raise CertificateDecodeError(f"Unable to decode the certificate: {err}") from err


def verify_signature(subject: ParsedCertificate, issuer_public_key) -> bool:
    """Verify that the subject's signature was made with the private key matching `issuer_public_key`.

    Only the key is checked. Issuer and subject names are not compared, since the issuer is already chosen by the
    chain builder.

    Args:
        subject (ParsedCertificate): The certificate whose signature to verify.
        issuer_public_key: The public key of the (believed) issuer.

    Returns:
        bool: True if the signature verifies.

    """
    cert = subject.certificate
    try:
        if isinstance(issuer_public_key, rsa.RSAPublicKey):
            issuer_public_key.verify(
                cert.signature,
                cert.tbs_certificate_bytes,
                cert.signature_algorithm_parameters,
                cert.signature_hash_algorithm,
            )
        elif isinstance(issuer_public_key, ec.EllipticCurvePublicKey):
            issuer_public_key.verify(cert.signature, cert.tbs_certificate_bytes, cert.signature_algorithm_parameters)
        elif isinstance(issuer_public_key, dsa.DSAPublicKey):
            issuer_public_key.verify(cert.signature, cert.tbs_certificate_bytes, cert.signature_hash_algorithm)
        elif isinstance(issuer_public_key, (ed25519.Ed25519PublicKey, ed448.Ed448PublicKey)):
            issuer_public_key.verify(cert.signature, cert.tbs_certificate_bytes)
        else:
            logger.warning(f"Unsupported issuer key type {type(issuer_public_key).__name__}")
            return False
    except InvalidSignature:
        logger.warning(f"Signature of {subject.subject_dn} does not verify against the issuer key")
        return False
    except (TypeError, ValueError, UnsupportedAlgorithm) as err:
        logger.warning(f"Unable to verify the signature of {subject.subject_dn}: {err}")
        return False

    logger.debug(f"Verified signature of {subject.subject_dn}")
    return True
