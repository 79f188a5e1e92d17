"""Shared fixtures: certificates minted on the fly, and fake revocation clients."""

# pylint: disable=C0116:missing-function-docstring

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import AuthorityInformationAccessOID, NameOID

from pyCertStatus.config import Settings
from pyCertStatus.main import StatusEngine
from pyCertStatus.ops import certificate_from_pem
from pyCertStatus.repository import InMemoryCertificateRepository

NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@dataclass
class Issued:
    """A minted certificate together with its key and repository record."""

    cert: x509.Certificate
    key: ec.EllipticCurvePrivateKey
    record: object

    @property
    def pem(self) -> str:
        return self.cert.public_bytes(serialization.Encoding.PEM).decode("ascii")


def make_certificate(
    common_name: str,
    issuer: Issued | None = None,
    not_before: datetime = NOW - timedelta(days=1),
    not_after: datetime = NOW + timedelta(days=400),
    ocsp_urls: tuple[str, ...] = (),
    crl_urls: tuple[str, ...] = (),
    signing_key: ec.EllipticCurvePrivateKey | None = None,
) -> Issued:
    """Mint a certificate. Without an issuer the certificate is self-signed."""
    key = ec.generate_private_key(ec.SECP256R1())
    subject = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    builder = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(issuer.cert.subject if issuer else subject)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_before)
        .not_valid_after(not_after)
    )
    if ocsp_urls:
        builder = builder.add_extension(
            x509.AuthorityInformationAccess(
                [
                    x509.AccessDescription(AuthorityInformationAccessOID.OCSP, x509.UniformResourceIdentifier(url))
                    for url in ocsp_urls
                ]
            ),
            critical=False,
        )
    if crl_urls:
        builder = builder.add_extension(
            x509.CRLDistributionPoints(
                [
                    x509.DistributionPoint(
                        full_name=[x509.UniformResourceIdentifier(url)],
                        relative_name=None,
                        reasons=None,
                        crl_issuer=None,
                    )
                    for url in crl_urls
                ]
            ),
            critical=False,
        )

    sign_with = signing_key or (issuer.key if issuer else key)
    cert = builder.sign(sign_with, hashes.SHA256())

    record = certificate_from_pem(cert.public_bytes(serialization.Encoding.PEM))
    record.issuer_serial_number = issuer.record.serial_number if issuer else record.serial_number
    return Issued(cert=cert, key=key, record=record)


class FakeOcspClient:
    """Answers OCSP queries from a dict of url -> verdict (or exception to raise)."""

    def __init__(self, answers: dict | None = None):
        self.answers = answers or {}
        self.calls = []

    def check(self, subject, issuer, url):
        self.calls.append(url)
        answer = self.answers[url]
        if isinstance(answer, Exception):
            raise answer
        return answer


class FakeCrlClient:
    """Answers CRL lookups from a dict of url -> RevocationRecord | None (or exception to raise)."""

    def __init__(self, answers: dict | None = None):
        self.answers = answers or {}
        self.calls = []

    def check(self, subject, url):
        self.calls.append(url)
        answer = self.answers[url]
        if isinstance(answer, Exception):
            raise answer
        return answer


@dataclass
class EngineHarness:
    """An engine wired to an in-memory repository, fake revocation clients and a fixed clock."""

    repository: InMemoryCertificateRepository
    ocsp: FakeOcspClient
    crl: FakeCrlClient
    engine: StatusEngine
    added: list = field(default_factory=list)

    def add(self, *issued: Issued) -> None:
        for item in issued:
            self.repository.save(item.record)
            self.added.append(item)


@pytest.fixture
def harness():
    repository = InMemoryCertificateRepository()
    ocsp = FakeOcspClient()
    crl = FakeCrlClient()
    engine = StatusEngine(repository, settings=Settings(workers=2), ocsp_client=ocsp, crl_client=crl, clock=lambda: NOW)
    yield EngineHarness(repository=repository, ocsp=ocsp, crl=crl, engine=engine)
    engine.close()


@pytest.fixture
def root():
    return make_certificate("Test Root CA")
