"""Clients for the revocation sources a certificate can point to."""

from pyCertStatus.revocation._crl import CrlClient, RevocationRecord
from pyCertStatus.revocation._ocsp import OcspClient, OcspVerdict

__all__ = [
    "CrlClient",
    "OcspClient",
    "OcspVerdict",
    "RevocationRecord",
]
