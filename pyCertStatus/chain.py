"""Rebuild the chain of issuers for a certificate from the certificates already in the repository."""

from pyCertStatus.config import Settings
from pyCertStatus.logs import get_logger
from pyCertStatus.models import Certificate
from pyCertStatus.repository import CertificateRepository

logger = get_logger(__name__)


def build_chain(
    leaf: Certificate, repository: CertificateRepository, settings: Settings | None = None
) -> list[Certificate]:
    """Build the chain of issuers for a certificate, leaf first.

    Each step follows the issuer serial number reference of the last certificate in the chain. The walk stops at a
    self-signed certificate, at a reference that is missing or too short, at a serial number the repository doesn't
    know, at a serial number already in the chain, or once `max_chain_depth` certificates have been collected.

    Args:
        leaf (Certificate): The certificate being validated.
        repository (CertificateRepository): Where to look issuers up.
        settings (Settings, optional): Limits for the walk. Defaults to `Settings()`.

    Returns:
        list[Certificate]: The chain. It always holds at least the leaf.

    """
    settings = settings or Settings()
    chain = [leaf]
    visited = {leaf.serial_number.lower()}

    while len(chain) < settings.max_chain_depth:
        current = chain[-1]
        if current.is_self_signed:
            logger.debug(f"Reached self-signed certificate {current}")
            break

        issuer_serial = current.issuer_serial_number
        if not issuer_serial or len(issuer_serial) < settings.min_issuer_serial_length:
            logger.debug(f"Received end of chain at {current}")
            break

        if issuer_serial.lower() in visited:
            logger.warning(f"Issuer reference of {current} loops back to {issuer_serial}; stopping the chain")
            break

        issuer = repository.find_by_serial_number(issuer_serial)
        if issuer is None:
            logger.error(f"Unable to find the issuer {issuer_serial} of {current}")
            break

        chain.append(issuer)
        visited.add(issuer.serial_number.lower())
    else:
        if not chain[-1].is_self_signed:
            logger.warning(f"Chain of {leaf} reached the maximum depth of {settings.max_chain_depth}")

    logger.debug("Built chain of %s certificate(s) for %s", len(chain), leaf)
    return chain


def is_complete(chain: list[Certificate]) -> bool:
    """Whether the chain ends in a self-signed certificate."""
    return chain[-1].is_self_signed
