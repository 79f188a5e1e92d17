"""Models used by the status engine."""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum, auto


class CertificateStatus(StrEnum):
    """The trust status derived for a certificate."""

    UNKNOWN = auto()
    "Never validated."

    VALID = auto()
    EXPIRING = auto()
    "Valid, but `notAfter` falls within the expiry warning window."

    EXPIRED = auto()
    INVALID = auto()
    "The signature does not verify, or the certificate is not valid yet."

    REVOKED = auto()

    @property
    def severity(self) -> int:
        """Rank used for precedence, higher wins."""
        return _SEVERITY[self]

    @classmethod
    def most_severe(cls, first: "CertificateStatus", second: "CertificateStatus") -> "CertificateStatus":
        """Return whichever of the two statuses takes precedence."""
        return first if first.severity >= second.severity else second


_SEVERITY = {
    CertificateStatus.UNKNOWN: 0,
    CertificateStatus.VALID: 1,
    CertificateStatus.EXPIRING: 2,
    CertificateStatus.EXPIRED: 3,
    CertificateStatus.INVALID: 4,
    CertificateStatus.REVOKED: 5,
}


class CheckStatus(StrEnum):
    """The outcome of a single check in a validation report."""

    NOT_CHECKED = auto()
    SUCCESS = auto()
    FAILED = auto()
    WARNING = auto()
    INVALID = auto()
    EXPIRING = auto()
    EXPIRED = auto()
    REVOKED = auto()


class Check(StrEnum):
    """The checks recorded in a validation report. The values are the names shown to users."""

    SIGNATURE = "Signature Verification"
    "Verify the signature against the issuer's public key (or its own key, for self-signed certificates)."

    VALIDITY = "Certificate Validity"
    "Verify that the current time falls within the validity window and warn when expiry is near."

    OCSP = "OCSP Verification"
    "Ask the OCSP responders listed in the AIA extension whether the certificate was revoked."

    CRL = "CRL Verification"
    "Look the certificate up in the CRLs listed in the CRL distribution points extension."

    CHAIN = "Certificate Chain"
    "Only present when the chain of issuers could not be completed up to a self-signed root."


@dataclass
class ValidationCheckResult:
    """The result of one check."""

    status: CheckStatus = CheckStatus.NOT_CHECKED
    message: str = ""

    def __rich_repr__(self):  # noqa: PLW3201
        yield self.status.name
        yield "Message", self.message, ""

    def to_dict(self) -> dict:
        return {"status": self.status.name, "message": self.message}

    @classmethod
    def from_dict(cls, data: dict) -> "ValidationCheckResult":
        return cls(status=CheckStatus[data["status"]], message=data.get("message", ""))


@dataclass
class ValidationReport:
    """An ordered mapping of check name to check result.

    The insertion order is part of the output: reports are serialized and displayed in that order.
    """

    results: dict[str, ValidationCheckResult] = field(default_factory=dict)

    @classmethod
    def initial(cls) -> "ValidationReport":
        """Create a report holding the four standard checks, all NOT_CHECKED."""
        report = cls()
        for check in (Check.SIGNATURE, Check.VALIDITY, Check.OCSP, Check.CRL):
            report.record(check, CheckStatus.NOT_CHECKED)
        return report

    def record(self, check: str, status: CheckStatus, message: str = "") -> None:
        """Set the result for a check. An existing check keeps its position in the report."""
        self.results[str(check)] = ValidationCheckResult(status, message)

    def __getitem__(self, check: str) -> ValidationCheckResult:
        return self.results[str(check)]

    def __contains__(self, check: str) -> bool:
        return str(check) in self.results

    def __iter__(self):
        return iter(self.results)

    def __len__(self) -> int:
        return len(self.results)

    def items(self):
        return self.results.items()

    def to_json(self) -> str:
        """Serialize the report, keeping the check order."""
        return json.dumps({name: result.to_dict() for name, result in self.results.items()})

    @classmethod
    def from_json(cls, data: str) -> "ValidationReport":
        """Load a report produced by `to_json`."""
        return cls(results={name: ValidationCheckResult.from_dict(value) for name, value in json.loads(data).items()})

    def log(self, logger: logging.Logger) -> None:
        for name, result in self.results.items():
            logger.debug("%s: %s %s", name, result.status.name, result.message)

    def __rich_repr__(self):  # noqa: PLW3201
        yield from self.results.items()


@dataclass
class CheckOutcome:
    """What one check contributes to a validation run."""

    check: Check
    result: ValidationCheckResult
    status: CertificateStatus | None = None
    "The status this check calls for, or None to leave the status as it is."

    final: bool = False
    "Whether the run stops after this check."


@dataclass
class Certificate:
    """A certificate known to the system, as handed over by the repository.

    Only `status`, `validation_report` and `status_validated_at` are written by the engine; everything else belongs
    to whatever ingested the certificate.
    """

    serial_number: str
    subject_dn: str
    issuer_dn: str
    content: str
    issuer_serial_number: str | None = None
    status: CertificateStatus = CertificateStatus.UNKNOWN
    validation_report: ValidationReport | None = None
    status_validated_at: datetime | None = None
    common_name: str | None = None

    @property
    def is_self_signed(self) -> bool:
        return self.subject_dn == self.issuer_dn

    def __str__(self) -> str:
        return f"{self.common_name or self.subject_dn} ({self.serial_number})"

    def __rich_repr__(self):  # noqa: PLW3201
        yield "Subject", self.subject_dn
        yield "Serial", self.serial_number
        yield "Status", self.status.name
        yield "Report", self.validation_report, None


@dataclass
class ValidationSuccess:
    """A certificate from a batch that was validated."""

    serial_number: str
    status: CertificateStatus


@dataclass
class ValidationFailure:
    """A certificate from a batch whose validation raised an error. Its stored status is left unchanged."""

    serial_number: str
    error: Exception

    @property
    def message(self) -> str:
        return f"{type(self.error).__name__}: {self.error}"


@dataclass
class BatchOutcome:
    """The results of validating a collection of certificates."""

    results: list[ValidationSuccess | ValidationFailure] = field(default_factory=list)

    @property
    def succeeded(self) -> list[ValidationSuccess]:
        return [r for r in self.results if isinstance(r, ValidationSuccess)]

    @property
    def failed(self) -> list[ValidationFailure]:
        return [r for r in self.results if isinstance(r, ValidationFailure)]

    def log_failures(self, logger: logging.Logger) -> None:
        """Write a warning for every certificate that could not be validated."""
        for failure in self.failed:
            logger.warning("Unable to validate the certificate %s: %s", failure.serial_number, failure.message)
