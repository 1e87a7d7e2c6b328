"""Click command classes carrying an ``--examples`` flag.

``--help`` stays short; ``--examples`` prints worked invocations and exits.
"""

from __future__ import annotations

import textwrap
from typing import Any

import click


def examples_option(examples: str) -> click.Option:
    """Eager ``--examples`` flag that prints *examples* and exits."""
    text = textwrap.dedent(examples).strip("\n")

    def _print(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if value and not ctx.resilient_parsing:
            click.echo(f"Examples for '{ctx.command_path}':\n\n{text}")
            ctx.exit()

    return click.Option(
        ["--examples"],
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=_print,
        help="Print usage examples and exit.",
    )


class ExamplesMixin:
    """Accept an ``examples=`` keyword and expose it as ``--examples``."""

    params: list[click.Parameter]

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(examples_option(examples))


class ScoutCommand(ExamplesMixin, click.Command):
    pass


class ScoutGroup(ExamplesMixin, click.Group):
    """Root group; subcommands default to :class:`ScoutCommand`."""

    command_class = ScoutCommand
