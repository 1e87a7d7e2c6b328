"""Adapt a ServiceResult to the requested output mode.

``--json`` dumps the whole result, ``--quiet`` prints one status line (or
the bare source / rule keys where that is the useful part), and the
default is a Rich rendering chosen by ``result.op``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from scout.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from scout.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2, exclude_none=True)
    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)
