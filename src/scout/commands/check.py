"""Command: validate a spec document without generating code."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from scout.commands._base import ScoutCommand

if TYPE_CHECKING:
    from scout.commands._context import AppContext


@click.command(
    cls=ScoutCommand,
    examples="""\
  scout check listing.yaml
  scout --json check listing.yaml""",
)
@click.argument("spec", type=click.Path(allow_dash=True))
@click.pass_obj
def check(app: AppContext, spec: str) -> None:
    """Check SPEC and print its field and embed tree."""
    from scout.services.compile import CompileService

    data = app.load_spec("check_spec", spec)
    app.emit(CompileService(app.settings).check(data))
