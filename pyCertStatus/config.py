"""Runtime settings for the status engine."""

from collections.abc import Mapping
from datetime import timedelta

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "PYCERTSTATUS_"


class Settings(BaseSettings):
    """Tunable values used across a validation run.

    Each value can be set through a `PYCERTSTATUS_*` environment variable, e.g. `PYCERTSTATUS_TIMEOUT=5`. Values
    passed to the constructor take precedence. Out of range values raise a `pydantic.ValidationError`, which is a
    `ValueError`.
    """

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, frozen=True, extra="ignore")

    timeout: float = Field(default=10, gt=0, description="Seconds to wait for an OCSP responder or CRL endpoint.")
    expiring_days: int = Field(
        default=30, ge=0, description="A certificate with this many days (or fewer) left before notAfter is EXPIRING."
    )
    min_issuer_serial_length: int = Field(
        default=6, ge=1, description="Issuer serial number references shorter than this end the chain."
    )
    max_chain_depth: int = Field(default=15, ge=1, description="The most certificates collected for one chain.")
    workers: int = Field(default=4, ge=1, description="Number of certificates validated concurrently in a batch.")

    @property
    def expiring_threshold(self) -> timedelta:
        return timedelta(days=self.expiring_days)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from `PYCERTSTATUS_*` variables.

        Args:
            environ (Mapping[str, str], optional): Variables to read instead of the process environment.

        Raises:
            pydantic.ValidationError: If a variable can't be converted or is out of range.

        Returns:
            Settings: The loaded settings.

        """
        if environ is None:
            return cls()
        values = {}
        for name in cls.model_fields:
            raw = environ.get(ENV_PREFIX + name.upper())
            if raw is not None:
                values[name] = raw
        return cls(**values)
