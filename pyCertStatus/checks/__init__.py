"""All of the checks recorded in a validation report."""

import inspect

from pyCertStatus.checks._chain import chain_break
from pyCertStatus.checks._crl import crl
from pyCertStatus.checks._ocsp import ocsp
from pyCertStatus.checks._signature import signature
from pyCertStatus.checks._validity import validity

__all__ = [
    "signature",
    "validity",
    "ocsp",
    "crl",
    "chain_break",
]


def get_checks() -> dict[str, str]:
    """Return the available checks and their descriptions, in report order.

    Returns:
        dict: The checks, formatted as {check name: description}

    """
    checks = {}
    for name in __all__:
        module = inspect.getmodule(globals()[name])
        checks[str(module.CHECK)] = " ".join(module.__doc__.split())
    return checks
