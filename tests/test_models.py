"""Tests for the models and settings."""

# pylint: disable=C0116:missing-function-docstring

import logging

import pytest
from pydantic import ValidationError

from pyCertStatus.config import Settings
from pyCertStatus.models import (
    BatchOutcome,
    CertificateStatus,
    Check,
    CheckStatus,
    ValidationFailure,
    ValidationReport,
    ValidationSuccess,
)


def test_initial_report_order():
    report = ValidationReport.initial()
    assert list(report) == ["Signature Verification", "Certificate Validity", "OCSP Verification", "CRL Verification"]
    assert all(result.status == CheckStatus.NOT_CHECKED for _, result in report.items())


def test_recording_keeps_position():
    report = ValidationReport.initial()
    report.record(Check.CHAIN, CheckStatus.WARNING, "Issuer certificate cannot be found")
    report.record(Check.SIGNATURE, CheckStatus.SUCCESS, "Signature verification successful")
    assert list(report)[0] == Check.SIGNATURE
    assert list(report)[-1] == Check.CHAIN
    assert report[Check.SIGNATURE].message == "Signature verification successful"


def test_report_json_round_trip():
    """Serializing and loading a report keeps the order and every status and message."""
    report = ValidationReport.initial()
    report.record(Check.CHAIN, CheckStatus.WARNING, "Issuer certificate cannot be found")
    report.record(Check.CRL, CheckStatus.REVOKED, "Certificate was revoked on 2025-12-24\nReason: keyCompromise.")
    report.record(Check.VALIDITY, CheckStatus.EXPIRING, "Expiring within 3 days 0 hours 0 minutes 0 seconds")

    loaded = ValidationReport.from_json(report.to_json())

    assert list(loaded.items()) == list(report.items())
    assert loaded == report


def test_status_precedence():
    S = CertificateStatus
    most_severe = CertificateStatus.most_severe
    assert most_severe(S.VALID, S.EXPIRING) == S.EXPIRING
    assert most_severe(S.EXPIRING, S.VALID) == S.EXPIRING
    assert most_severe(S.REVOKED, S.INVALID) == S.REVOKED
    assert most_severe(S.UNKNOWN, S.VALID) == S.VALID
    ordered = sorted(CertificateStatus, key=lambda s: s.severity)
    assert ordered[-3:] == [CertificateStatus.EXPIRED, CertificateStatus.INVALID, CertificateStatus.REVOKED]


def test_batch_outcome_split_and_logging(caplog):
    outcome = BatchOutcome(
        results=[
            ValidationSuccess("0a0b0c0d", CertificateStatus.VALID),
            ValidationFailure("0e0f1011", ValueError("bad content")),
        ]
    )
    assert [r.serial_number for r in outcome.succeeded] == ["0a0b0c0d"]
    assert outcome.failed[0].message == "ValueError: bad content"

    logger = logging.getLogger("pyCertStatus.tests")
    with caplog.at_level("WARNING", logger="pyCertStatus"):
        outcome.log_failures(logger)
    assert "0e0f1011" in caplog.text


def test_settings_from_env():
    settings = Settings.from_env({"PYCERTSTATUS_TIMEOUT": "2.5", "PYCERTSTATUS_EXPIRING_DAYS": "14"})
    assert settings.timeout == 2.5
    assert settings.expiring_days == 14
    assert settings.max_chain_depth == 15
    assert settings.expiring_threshold.days == 14


def test_settings_rejects_bad_values():
    with pytest.raises(ValueError):
        Settings.from_env({"PYCERTSTATUS_WORKERS": "many"})
    with pytest.raises(ValueError):
        Settings(timeout=0)
    with pytest.raises(ValidationError):
        Settings(max_chain_depth=0)
    with pytest.raises(ValidationError):
        Settings.from_env({"PYCERTSTATUS_EXPIRING_DAYS": "-1"})


def test_settings_read_process_environment(monkeypatch):
    monkeypatch.setenv("PYCERTSTATUS_WORKERS", "8")
    monkeypatch.setenv("PYCERTSTATUS_HOME", "/tmp/elsewhere")
    assert Settings().workers == 8
    assert Settings(workers=2).workers == 2
    assert Settings.from_env().workers == 8


def test_settings_are_frozen():
    settings = Settings()
    with pytest.raises(ValidationError):
        settings.timeout = 1
