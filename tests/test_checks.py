"""Tests for the individual checks, outside of a full validation run."""

# pylint: disable=C0116:missing-function-docstring

from datetime import timedelta

from conftest import NOW, FakeCrlClient, make_certificate

from pyCertStatus import checks
from pyCertStatus.checks._validity import format_duration
from pyCertStatus.decoder import decode_x509
from pyCertStatus.models import CertificateStatus, Check, CheckStatus


def test_get_checks_in_report_order():
    names = list(checks.get_checks())
    assert names == [
        "Signature Verification",
        "Certificate Validity",
        "OCSP Verification",
        "CRL Verification",
        "Certificate Chain",
    ]
    assert all(description for description in checks.get_checks().values())


def test_format_duration():
    assert format_duration(timedelta(days=3, hours=4, seconds=12)) == "3 days 4 hours 0 minutes 12 seconds"
    assert format_duration(timedelta(0)) == "0 days 0 hours 0 minutes 0 seconds"


def test_validity_outcomes():
    threshold = timedelta(days=30)
    current = decode_x509(make_certificate("current").pem)
    soon = decode_x509(make_certificate("soon", not_after=NOW + timedelta(days=5)).pem)
    future = decode_x509(make_certificate("future", not_before=NOW + timedelta(hours=1)).pem)

    outcome = checks.validity(current, now=NOW, threshold=threshold)
    assert outcome.result.status == CheckStatus.SUCCESS
    assert (outcome.status, outcome.final) == (CertificateStatus.VALID, False)

    outcome = checks.validity(soon, now=NOW, threshold=threshold)
    assert outcome.status == CertificateStatus.EXPIRING
    assert outcome.result.message == "Expiring within 5 days 0 hours 0 minutes 0 seconds"

    outcome = checks.validity(future, now=NOW, threshold=threshold)
    assert (outcome.status, outcome.final) == (CertificateStatus.INVALID, True)


def test_signature_without_issuer():
    subject = decode_x509(make_certificate("leaf").pem)
    outcome = checks.signature(subject, issuer=None)
    assert outcome.check == Check.SIGNATURE
    assert outcome.result.status == CheckStatus.NOT_CHECKED
    assert outcome.status is None


def test_crl_without_urls_is_a_warning():
    subject = decode_x509(make_certificate("leaf").pem)
    client = FakeCrlClient()

    outcome = checks.crl(subject, crl_client=client, prior_status=CertificateStatus.UNKNOWN)

    assert outcome.result.status == CheckStatus.WARNING
    assert outcome.result.message == "No CRL URL in certificate"
    assert client.calls == []
