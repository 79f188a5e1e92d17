"""Warn that the chain of issuers could not be completed up to a self-signed root."""

from pyCertStatus.logs import get_logger
from pyCertStatus.models import Certificate, Check, CheckOutcome, CheckStatus, ValidationCheckResult

logger = get_logger(__name__)

__all__ = ["chain_break"]

CHECK = Check.CHAIN


def chain_break(issuer: Certificate | None, tail: Certificate, **_) -> CheckOutcome:
    """Describe where the chain breaks.

    Args:
        issuer (Certificate | None): The issuer of the certificate being validated. None when it is the tail.
        tail (Certificate): The last certificate the chain could reach.

    Returns:
        CheckOutcome: A WARNING entry. It never changes the status.

    """
    logger.debug("Starting check: chain_break")
    if issuer is None:
        message = "Issuer certificate cannot be found. It is unavailable in the inventory"
    else:
        message = f"Certificate chain is incomplete. The issuer of {tail} is unavailable in the inventory"
    return CheckOutcome(CHECK, ValidationCheckResult(CheckStatus.WARNING, message))
