"""The command line interface to the package."""

from pathlib import Path
from typing import Annotated

import rich
import rich.padding
import typer
from rich.padding import Padding
from typer import Typer

from pyCertStatus import checks, logs, ops
from pyCertStatus.config import Settings
from pyCertStatus.main import StatusEngine
from pyCertStatus.repository import InMemoryCertificateRepository

app = Typer()


@app.command()
def validate(
    path: Annotated[
        Path,
        typer.Argument(
            help="A folder of PEM files. Every certificate found is loaded into the inventory used to build chains.",
            exists=True,
            file_okay=False,
        ),
    ],
    serial: Annotated[
        str,
        typer.Option(
            "--serial",
            "-s",
            help="""
            The serial number (hex) of the certificate to validate. If omitted, every certificate loaded from the
            folder is validated.
            """,
        ),
    ] = None,
    timeout: Annotated[
        float,
        typer.Option("--timeout", "-t", show_default=True, help="Seconds to wait for OCSP responders and CRLs."),
    ] = 10,
    expiring_days: Annotated[
        int,
        typer.Option(
            "--expiring-days", show_default=True, help="Certificates expiring within this many days are EXPIRING."
        ),
    ] = 30,
    verbose: Annotated[int, typer.Option("--verbose", "-v", count=True)] = 0,
):
    """Load certificates from a folder, validate them and print the status and report of each one."""

    logs.set_logger_level(logs.console_level_for(verbose))

    try:
        certificates = ops.link_issuers(ops.load_certificates_from_path(path))
        settings = Settings(timeout=timeout, expiring_days=expiring_days)
    except Exception as err:
        _print_errors("Errors while loading certificates", err)
        raise typer.Exit(code=1)

    repository = InMemoryCertificateRepository(certificates)
    with StatusEngine(repository, settings=settings) as engine:
        if serial:
            certificate = repository.find_by_serial_number(serial)
            if certificate is None:
                rich.print(f"[bold red]No certificate with serial number {serial} in {path}")
                raise typer.Exit(code=1)
            try:
                engine.validate(certificate)
            except Exception as err:
                _print_errors("Errors during validation", err)
                raise typer.Exit(code=1)
        else:
            outcome = engine.validate_all()
            for failure in outcome.failed:
                rich.print(f"[bold red]Unable to validate {failure.serial_number}[/bold red]: {failure.message}")

    for certificate in repository:
        if serial and certificate.status_validated_at is None:
            continue
        rich.print(certificate)


@app.command(name="checks")
def list_checks():
    """List the checks that make up a validation report."""
    rich.print("[bold]Validation Checks")
    rich.print("[i]Reports list these checks in this order.")
    for k, v in checks.get_checks().items():
        rich.print(Padding(f"- [bold]{k}[/bold]: {v}", pad=(0, 0, 0, 2)))


def _print_errors(title: str, err: Exception) -> None:
    rich.print(f"[bold red]{title}")
    rich.print(f"[i]The log file may have more info, at {logs.log_file()}")
    exceptions = []
    while err:
        exceptions.append(err)
        err = err.__cause__
    for ex in reversed(exceptions):
        rich.print(rich.padding.Padding(f"[bold]- {type(ex).__name__}[/bold]: {ex}", (0, 0, 0, 2)))


if __name__ == "__main__":
    app()
