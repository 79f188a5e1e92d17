"""The main entry point to the status engine.

Create a `StatusEngine` over a certificate repository, then call `.validate()` for one certificate, or
`.validate_all()` / `.validate_certificates()` for a batch. The `submit_*` variants run the batch in the background
and return a future.
"""

import threading
from collections.abc import Callable, Iterable
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime

from pyCertStatus import guard
from pyCertStatus.chain import build_chain, is_complete
from pyCertStatus.config import Settings
from pyCertStatus.logs import get_logger
from pyCertStatus.models import BatchOutcome, Certificate, CertificateStatus, ValidationFailure, ValidationSuccess
from pyCertStatus.propagation import RevocationPropagator
from pyCertStatus.repository import CertificateRepository
from pyCertStatus.revocation import CrlClient, OcspClient
from pyCertStatus.validator import PairValidator, utc_now

logger = get_logger(__name__)


class StatusEngine:
    """Derive and store the trust status of certificates known to a repository.

    Usage:
    -----

    >>> repository = InMemoryCertificateRepository(certificates)
    >>> engine = StatusEngine(repository)
    >>> engine.validate(repository.find_by_serial_number("4e1f2a9c01"))
    Certificate(serial_number='4e1f2a9c01', ..., status=<CertificateStatus.VALID: 'valid'>, ...)
    >>> outcome = engine.submit_all().result()
    >>> len(outcome.failed)
    0

    """

    def __init__(
        self,
        repository: CertificateRepository,
        settings: Settings | None = None,
        ocsp_client: OcspClient | None = None,
        crl_client: CrlClient | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Create a new engine.

        Args:
            repository (CertificateRepository): Where certificates are looked up and saved.

            settings (Settings, optional): Timeouts and limits. Defaults to `Settings()`.

            ocsp_client (OcspClient, optional): The client used for OCSP queries. Defaults to an `OcspClient` using
            the configured timeout.

            crl_client (CrlClient, optional): The client used for CRL downloads. Defaults to a `CrlClient` using the
            configured timeout.

            clock (Callable[[], datetime], optional): Returns the current UTC time.

        """
        self.repository = repository
        self.settings = settings or Settings()
        self.propagator = RevocationPropagator(repository)
        self.validator = PairValidator(
            repository=repository,
            propagator=self.propagator,
            ocsp_client=ocsp_client or OcspClient(timeout=self.settings.timeout),
            crl_client=crl_client or CrlClient(timeout=self.settings.timeout),
            settings=self.settings,
            clock=clock,
        )
        self._executor: ThreadPoolExecutor | None = None
        self._executor_lock = threading.Lock()

    def get_chain(self, certificate: Certificate) -> list[Certificate]:
        """Get the chain of issuers for a certificate, leaf first."""
        return build_chain(certificate, self.repository, self.settings)

    def validate(self, certificate: Certificate) -> Certificate:
        """Validate a certificate and every certificate in its chain.

        Each certificate in the chain gets its own status and report. When the chain doesn't end in a self-signed
        certificate, every link carries a chain warning and the last certificate is validated without an issuer.

        Args:
            certificate (Certificate): The certificate to validate.

        Raises:
            TypeError: If `certificate` is not a `Certificate`.
            CertificateDecodeError: If the content of a certificate in the chain can't be decoded.

        Returns:
            Certificate: The certificate, with its status and report updated.

        """
        guard.value_is_certificate(certificate)
        guard.certificate_has_content(certificate)
        logger.debug(f"Initiating the validation of {certificate}")

        chain = self.get_chain(certificate)
        complete = is_complete(chain)
        if not complete:
            logger.warning(f"Incomplete chain for {certificate}; the issuer of {chain[-1]} is unavailable")

        for position, current in enumerate(chain):
            issuer = chain[position + 1] if position + 1 < len(chain) else None
            if current.is_self_signed:
                self.validator.validate_self_signed(current)
            elif complete:
                self.validator.validate_pair(current, issuer)
            else:
                self.validator.validate_pair(current, issuer, tail=chain[-1])

        return certificate

    def validate_certificates(self, certificates: Iterable[Certificate]) -> BatchOutcome:
        """Validate a batch of certificates concurrently.

        A certificate that fails to validate is recorded in the outcome and logged; the rest of the batch carries on.

        Args:
            certificates (Iterable[Certificate]): The certificates to validate.

        Returns:
            BatchOutcome: One result per certificate, in the order given.

        """
        certificates = list(certificates)
        outcome = BatchOutcome()
        if not certificates:
            logger.debug("No certificates to validate")
            return outcome

        logger.info("Validating %s certificate(s)", len(certificates))
        with ThreadPoolExecutor(max_workers=self.settings.workers, thread_name_prefix="validate") as pool:
            outcome.results.extend(pool.map(self._validate_one, certificates))

        outcome.log_failures(logger)
        logger.info("Validated %s certificate(s), %s failed", len(outcome.succeeded), len(outcome.failed))
        return outcome

    def validate_all(self) -> BatchOutcome:
        """Validate every certificate that has never been validated."""
        return self.validate_certificates(self.repository.find_all_by_status(CertificateStatus.UNKNOWN))

    def submit_certificates(self, certificates: Iterable[Certificate]) -> Future:
        """Run `validate_certificates` in the background. The future resolves to the `BatchOutcome`."""
        return self._background().submit(self.validate_certificates, list(certificates))

    def submit_all(self) -> Future:
        """Run `validate_all` in the background. The future resolves to the `BatchOutcome`."""
        return self._background().submit(self.validate_all)

    def close(self) -> None:
        """Wait for background batches to finish and release the worker."""
        with self._executor_lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)

    def __enter__(self):
        return self

    def __exit__(self, *_):
        self.close()

    def _background(self) -> ThreadPoolExecutor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="batch")
            return self._executor

    def _validate_one(self, certificate: Certificate) -> ValidationSuccess | ValidationFailure:
        serial_number = getattr(certificate, "serial_number", repr(certificate))
        try:
            self.validate(certificate)
        except Exception as err:  # noqa: BLE001
            return ValidationFailure(serial_number=serial_number, error=err)
        return ValidationSuccess(serial_number=serial_number, status=certificate.status)
