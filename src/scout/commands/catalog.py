"""Command: list the supported validations."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from scout.commands._base import ScoutCommand

if TYPE_CHECKING:
    from scout.commands._context import AppContext


@click.command(
    cls=ScoutCommand,
    examples="""\
  scout catalog
  scout -q catalog
  scout --json catalog""",
)
@click.pass_obj
def catalog(app: AppContext) -> None:
    """List every validation key, its value kind, and where it applies."""
    from scout.services.compile import CompileService

    app.emit(CompileService(app.settings).catalog())
