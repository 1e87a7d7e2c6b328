"""AppContext: shared Click context for all commands.

Created once by the root group and passed to subcommands with
``@click.pass_obj``. Owns the settings, loads input documents, and
routes every ServiceResult to stdout or stderr with the right exit code.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, NoReturn

import click

from scout.config.logging import configure_logging
from scout.domain.errors import DocumentError
from scout.infrastructure.documents import read_document, read_mapping
from scout.output.formatters import OutputSettings, format_result
from scout.services.result import ServiceResult

if TYPE_CHECKING:
    from scout.config.settings import ScoutSettings


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: ScoutSettings) -> None:
        self.settings = settings
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def load_spec(self, op: str, location: str | Path) -> dict[str, Any]:
        """Read a spec document; an unreadable one fails *op* with exit code 1."""
        try:
            return read_mapping(location)
        except DocumentError as exc:
            self.fail(op, exc)

    def load_payload(self, op: str, location: str | Path) -> Any:
        try:
            return read_document(location)
        except DocumentError as exc:
            self.fail(op, exc)

    def fail(self, op: str, exc: DocumentError) -> NoReturn:
        result = ServiceResult.failed(op, exc)
        click.echo(format_result(result, settings=self.output_settings), err=True)
        raise SystemExit(1)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult.

        * Success: stdout; warnings go to stderr outside JSON mode.
        * Failure: stderr, then exit code 1.
        """
        settings = self.output_settings
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
