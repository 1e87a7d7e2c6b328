"""Subcommand modules for scout.

:func:`register_commands` imports each command module lazily so
``scout --help`` stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register every standalone command on the root CLI group."""
    from scout.commands.catalog import catalog
    from scout.commands.check import check
    from scout.commands.generate import generate
    from scout.commands.validate import validate

    cli.add_command(generate)
    cli.add_command(check)
    cli.add_command(validate)
    cli.add_command(catalog)
