"""Command: compile a spec document into Python source."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from scout.commands._base import ScoutCommand

if TYPE_CHECKING:
    from scout.commands._context import AppContext


@click.command(
    cls=ScoutCommand,
    examples="""\
  scout generate listing.yaml
  scout generate listing.yaml --out models/listing.py
  scout generate listing.json --prefix Extract
  cat listing.yaml | scout generate -
  scout --json generate listing.yaml""",
)
@click.argument("spec", type=click.Path(allow_dash=True))
@click.option(
    "-o",
    "--out",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the source to this file instead of stdout.",
)
@click.option("--prefix", default=None, help="Namespace for the qualified type name.")
@click.pass_obj
def generate(app: AppContext, spec: str, out: Path | None, prefix: str | None) -> None:
    """Generate a pydantic model module from SPEC (JSON, YAML or TOML; - for stdin)."""
    from scout.services.compile import CompileService

    data = app.load_spec("compile_schema", spec)
    app.emit(CompileService(app.settings).compile(data, prefix=prefix, out=out))
