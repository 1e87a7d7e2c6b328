"""Root CLI group: global output flags, settings, and the subcommands."""

from __future__ import annotations

import click

from scout import __version__
from scout.commands import register_commands
from scout.commands._base import ScoutGroup
from scout.commands._context import AppContext
from scout.config.settings import ScoutSettings

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(
    cls=ScoutGroup,
    context_settings=CONTEXT_SETTINGS,
    invoke_without_command=True,
    examples="""
        scout catalog
        scout check listing.yaml
        scout generate listing.yaml --out models/listing.py
        scout validate listing.yaml extracted.json
    """,
)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Use this scout.toml instead of searching for one.",
)
@click.option("--json", "json_output", is_flag=True, help="Print the raw result as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print only the essential output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging and timing metadata.")
@click.option("--log-json", is_flag=True, help="Emit log records as JSON lines on stderr.")
@click.version_option(__version__, "-V", "--version", prog_name="scout")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, **flags: bool) -> None:
    """scout: compile extraction schema specs into pydantic models."""
    ctx.obj = AppContext(ScoutSettings.from_cli(config_path=config_path, **flags))
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
