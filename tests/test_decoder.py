"""Tests for decoding certificates and verifying signatures."""

# pylint: disable=C0116:missing-function-docstring

from datetime import timedelta

import pytest
from conftest import NOW, make_certificate
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import dsa, ec, ed448, ed25519, padding, rsa
from cryptography.x509.oid import NameOID

from pyCertStatus.decoder import decode_x509, verify_signature
from pyCertStatus.errors import CertificateDecodeError


def test_decode_pem_fields(root):
    leaf = make_certificate(
        "leaf.example.test",
        issuer=root,
        ocsp_urls=("http://ocsp.example.test",),
        crl_urls=("http://crl.example.test/a.crl", "http://crl.example.test/b.crl"),
    )
    parsed = decode_x509(leaf.pem)

    assert parsed.subject_dn == "CN=leaf.example.test"
    assert parsed.issuer_dn == "CN=Test Root CA"
    assert parsed.common_name == "leaf.example.test"
    assert parsed.serial_number == format(leaf.cert.serial_number, "x")
    assert parsed.not_after == leaf.cert.not_valid_after_utc
    assert parsed.ocsp_urls == ["http://ocsp.example.test"]
    assert parsed.crl_urls == ["http://crl.example.test/a.crl", "http://crl.example.test/b.crl"]


def test_decode_without_extensions(root):
    parsed = decode_x509(root.pem)
    assert parsed.ocsp_urls == []
    assert parsed.crl_urls == []


def test_decode_bare_base64_and_der(root):
    body = "".join(line for line in root.pem.splitlines() if not line.startswith("-----"))
    der = root.cert.public_bytes(serialization.Encoding.DER)

    assert decode_x509(body).serial_number == decode_x509(root.pem).serial_number
    assert decode_x509(der).serial_number == decode_x509(root.pem).serial_number
    assert decode_x509(root.pem.replace("\n", "\r\n").encode()).subject_dn == "CN=Test Root CA"


@pytest.mark.parametrize(
    "content",
    ["", "not a certificate", "-----BEGIN CERTIFICATE-----\nAAAA\n-----END CERTIFICATE-----"],
)
def test_decode_rejects_garbage(content):
    with pytest.raises(CertificateDecodeError):
        decode_x509(content)


def test_verify_signature(root):
    leaf = make_certificate("leaf", issuer=root)
    other = make_certificate("other")

    assert verify_signature(decode_x509(leaf.pem), root.cert.public_key())
    assert verify_signature(decode_x509(root.pem), root.cert.public_key())
    assert not verify_signature(decode_x509(leaf.pem), other.cert.public_key())


def test_decode_pem_with_stray_whitespace(root):
    lines = root.pem.splitlines()
    padded = "\n".join([lines[0]] + [f"  {line} \t" for line in lines[1:-1]] + [lines[-1]])

    assert decode_x509(padded).serial_number == decode_x509(root.pem).serial_number


KEY_TYPES = {
    "rsa-pkcs1v15": (lambda: rsa.generate_private_key(public_exponent=65537, key_size=2048), hashes.SHA256(), None),
    "rsa-pss": (
        lambda: rsa.generate_private_key(public_exponent=65537, key_size=2048),
        hashes.SHA256(),
        padding.PSS(mgf=padding.MGF1(hashes.SHA256()), salt_length=padding.PSS.DIGEST_LENGTH),
    ),
    "ecdsa-p384": (lambda: ec.generate_private_key(ec.SECP384R1()), hashes.SHA384(), None),
    "dsa": (lambda: dsa.generate_private_key(key_size=2048), hashes.SHA256(), None),
    "ed25519": (ed25519.Ed25519PrivateKey.generate, None, None),
    "ed448": (ed448.Ed448PrivateKey.generate, None, None),
}


def self_signed_with(key, algorithm, rsa_padding):
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "key type test")])
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(NOW - timedelta(days=1))
        .not_valid_after(NOW + timedelta(days=30))
        .sign(key, algorithm, rsa_padding=rsa_padding)
    )
    return decode_x509(cert.public_bytes(serialization.Encoding.DER))


@pytest.mark.parametrize("key_type", list(KEY_TYPES))
def test_verify_signature_per_key_type(key_type):
    generate, algorithm, rsa_padding = KEY_TYPES[key_type]
    key = generate()
    parsed = self_signed_with(key, algorithm, rsa_padding)

    assert verify_signature(parsed, key.public_key())
    assert not verify_signature(parsed, generate().public_key())
