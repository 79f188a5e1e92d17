"""Validate one certificate against its issuer and store the resulting status and report."""

from collections.abc import Callable, Iterator
from datetime import datetime, timezone

from pyCertStatus import checks
from pyCertStatus.config import Settings
from pyCertStatus.decoder import ParsedCertificate, decode_x509
from pyCertStatus.logs import get_logger
from pyCertStatus.models import (
    Certificate,
    CertificateStatus,
    Check,
    CheckOutcome,
    CheckStatus,
    ValidationCheckResult,
    ValidationReport,
)
from pyCertStatus.propagation import RevocationPropagator
from pyCertStatus.repository import CertificateRepository
from pyCertStatus.revocation import CrlClient, OcspClient

logger = get_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PairValidator:
    """Run the checks for a (subject, issuer) pair and persist the outcome on the subject.

    The checks run in report order: signature, validity, OCSP, CRL. Each check may raise the status; a lower status
    never replaces a higher one (REVOKED > INVALID > EXPIRED > EXPIRING > VALID). INVALID, EXPIRED and REVOKED end the
    run early. A certificate that was REVOKED before the run stays REVOKED whatever the checks find.
    """

    def __init__(
        self,
        repository: CertificateRepository,
        propagator: RevocationPropagator,
        ocsp_client: OcspClient,
        crl_client: CrlClient,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.repository = repository
        self.propagator = propagator
        self.ocsp_client = ocsp_client
        self.crl_client = crl_client
        self.settings = settings or Settings()
        self.clock = clock

    def validate_self_signed(self, certificate: Certificate) -> Certificate:
        """Validate a self-signed certificate against its own key.

        Raises:
            CertificateDecodeError: If the certificate content can't be decoded.

        """
        logger.debug(f"Validating self-signed certificate {certificate}")
        parsed = decode_x509(certificate.content)
        return self._run(certificate, self._self_signed_checks(parsed))

    def validate_pair(
        self, subject: Certificate, issuer: Certificate | None, tail: Certificate | None = None
    ) -> Certificate:
        """Validate a certificate against its issuer.

        Args:
            subject (Certificate): The certificate to validate.
            issuer (Certificate | None): Its issuer, or None when the issuer isn't in the repository.
            tail (Certificate, optional): For incomplete chains, the last certificate the chain reached. A
                `Certificate Chain` warning is added to the report when this is set.

        Raises:
            CertificateDecodeError: If the subject or issuer content can't be decoded.

        Returns:
            Certificate: The subject, with its status and report updated.

        """
        logger.debug(f"Validating {subject} against issuer {issuer}")
        parsed = decode_x509(subject.content)
        parsed_issuer = decode_x509(issuer.content) if issuer is not None else None
        return self._run(subject, self._linked_checks(subject, issuer, parsed, parsed_issuer, tail))

    def _self_signed_checks(self, parsed: ParsedCertificate) -> Iterator[CheckOutcome]:
        yield checks.signature(subject=parsed, issuer=parsed)
        yield checks.validity(subject=parsed, now=self.clock(), threshold=self.settings.expiring_threshold)
        for check in (Check.OCSP, Check.CRL):
            yield CheckOutcome(check, ValidationCheckResult(CheckStatus.NOT_CHECKED, "Self-signed Certificate"))

    def _linked_checks(
        self,
        subject: Certificate,
        issuer: Certificate | None,
        parsed: ParsedCertificate,
        parsed_issuer: ParsedCertificate | None,
        tail: Certificate | None,
    ) -> Iterator[CheckOutcome]:
        prior_status = subject.status
        if tail is not None:
            yield checks.chain_break(issuer=issuer, tail=tail)
        yield checks.signature(subject=parsed, issuer=parsed_issuer)
        yield checks.validity(subject=parsed, now=self.clock(), threshold=self.settings.expiring_threshold)
        yield checks.ocsp(subject=parsed, issuer=parsed_issuer, ocsp_client=self.ocsp_client)
        yield checks.crl(subject=parsed, crl_client=self.crl_client, prior_status=prior_status)

    def _run(self, certificate: Certificate, outcomes: Iterator[CheckOutcome]) -> Certificate:
        prior_status = certificate.status
        status = CertificateStatus.UNKNOWN
        report = ValidationReport.initial()

        for outcome in outcomes:
            report.record(outcome.check, outcome.result.status, outcome.result.message)
            if outcome.status is not None:
                status = CertificateStatus.most_severe(status, outcome.status)
            if outcome.final:
                logger.debug(f"{outcome.check} ended the validation of {certificate} with {status.name}")
                break

        report.log(logger)

        if prior_status == CertificateStatus.REVOKED and status != CertificateStatus.REVOKED:
            logger.info(f"Keeping {certificate} REVOKED although the checks found it {status.name}")
            status = CertificateStatus.REVOKED

        certificate.status = status
        certificate.validation_report = report
        certificate.status_validated_at = self.clock()
        self.repository.save(certificate)
        logger.info(f"Certificate {certificate} is {status.name}")

        if status == CertificateStatus.REVOKED:
            self.propagator.on_revoked(certificate.serial_number)

        return certificate
