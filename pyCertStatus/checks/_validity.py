"""Verify that the current time falls within the certificate's validity window, and flag certificates that expire
soon."""

from datetime import datetime, timedelta

from pyCertStatus.decoder import ParsedCertificate
from pyCertStatus.logs import get_logger
from pyCertStatus.models import CertificateStatus, Check, CheckOutcome, CheckStatus, ValidationCheckResult

logger = get_logger(__name__)

__all__ = ["validity", "format_duration"]

CHECK = Check.VALIDITY


def validity(subject: ParsedCertificate, now: datetime, threshold: timedelta, **_) -> CheckOutcome:
    """Compare the validity window against `now`.

    A certificate is EXPIRING when the time left is positive and no more than `threshold`.

    Args:
        subject (ParsedCertificate): The certificate being validated.
        now (datetime): The current time, timezone aware.
        threshold (timedelta): How close to `notAfter` a certificate counts as expiring.

    Returns:
        CheckOutcome: The outcome. Not-yet-valid and expired certificates end the run.

    """
    logger.debug("Starting check: validity")
    if subject.not_before > now:
        return CheckOutcome(
            CHECK,
            ValidationCheckResult(CheckStatus.INVALID, "Not valid yet"),
            status=CertificateStatus.INVALID,
            final=True,
        )

    remaining = subject.not_after - now
    if remaining <= timedelta(0):
        return CheckOutcome(
            CHECK,
            ValidationCheckResult(CheckStatus.EXPIRED, f"Certificate expired {format_duration(-remaining)} ago"),
            status=CertificateStatus.EXPIRED,
            final=True,
        )

    if remaining <= threshold:
        return CheckOutcome(
            CHECK,
            ValidationCheckResult(CheckStatus.EXPIRING, f"Expiring within {format_duration(remaining)}"),
            status=CertificateStatus.EXPIRING,
        )

    return CheckOutcome(
        CHECK,
        ValidationCheckResult(CheckStatus.SUCCESS, "Certificate expiry status check successful"),
        status=CertificateStatus.VALID,
    )


def format_duration(delta: timedelta) -> str:
    """Format a duration as days, hours, minutes and seconds, e.g. `3 days 4 hours 0 minutes 12 seconds`."""
    total = int(delta.total_seconds())
    days, rest = divmod(total, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{days} days {hours} hours {minutes} minutes {seconds} seconds"
