"""Command: validate a data document against a spec's model."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from scout.commands._base import ScoutCommand

if TYPE_CHECKING:
    from scout.commands._context import AppContext


@click.command(
    cls=ScoutCommand,
    examples="""\
  scout validate listing.yaml extracted.json
  extractor page.html | scout validate listing.yaml -
  scout --json validate listing.yaml extracted.json""",
)
@click.argument("spec", type=click.Path(dir_okay=False))
@click.argument("data", type=click.Path(allow_dash=True))
@click.pass_obj
def validate(app: AppContext, spec: str, data: str) -> None:
    """Validate DATA against the model generated from SPEC."""
    from scout.services.compile import CompileService

    op = "validate_payload"
    spec_data = app.load_spec(op, spec)
    payload = app.load_payload(op, data)
    app.emit(CompileService(app.settings).validate_payload(spec_data, payload))
