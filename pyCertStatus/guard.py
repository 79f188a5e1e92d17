"""Guard conditions."""

from pyCertStatus.errors import CertificateDecodeError
from pyCertStatus.models import Certificate


def value_is_certificate(value) -> None:
    """Raise a TypeError if the value is not a `Certificate` record.

    Args:
        value: The value handed to the engine.

    """
    if not isinstance(value, Certificate):
        raise TypeError(f"Expected a Certificate, got {type(value).__name__}")


def certificate_has_content(certificate: Certificate) -> None:
    """Raise a CertificateDecodeError if the certificate has no content to decode.

    Args:
        certificate (Certificate): The certificate to validate.

    """
    if not certificate.content or not certificate.content.strip():
        raise CertificateDecodeError(f"Certificate {certificate.serial_number} has no content")
