"""Exceptions raised by the status engine."""


class CertificateDecodeError(ValueError):
    """The certificate content could not be decoded as an X.509 certificate.

    This is fatal to the validation of that one certificate and is raised to the direct caller. Batch validation
    catches it and records a failure for the certificate instead.
    """


class RevocationCheckError(ConnectionError):
    """A revocation source (OCSP responder or CRL distribution point) could not give an answer.

    Covers connection failures, unexpected HTTP replies and bodies that cannot be decoded. It never decides a status
    on its own; the checks turn it into a FAILED report entry.
    """

    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(f"{message} ({url})")


class RevocationTimeoutError(RevocationCheckError, TimeoutError):
    """The revocation source did not answer within the configured timeout. Reported as a WARNING."""
