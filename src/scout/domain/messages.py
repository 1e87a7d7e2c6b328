"""``%{token}`` message templating for validation failures."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

TOKEN_PATTERN = re.compile(r"%\{(\w+)\}")


def _stringify(value: Any) -> str:
    if isinstance(value, re.Pattern):
        return value.pattern
    if isinstance(value, (list, tuple)):
        return ", ".join(_stringify(v) for v in value)
    return str(value)


def render(template: str, options: Mapping[str, Any]) -> str:
    """Substitute every ``%{name}`` in *template* with ``options[name]``.

    A token without a matching option is replaced by its bare name, so the
    message still says which option was missing.

    Examples:
        >>> render("Value must be %{min}..%{max}", {"min": 1, "max": 10})
        'Value must be 1..10'
        >>> render("needs %{x}", {})
        'needs x'
    """

    def _replace(match: re.Match[str]) -> str:
        key = match.group(1)
        if key not in options:
            return key
        return _stringify(options[key])

    return TOKEN_PATTERN.sub(_replace, template)


def tokens(template: str) -> list[str]:
    """Names of the tokens in *template*, in order of appearance."""
    return TOKEN_PATTERN.findall(template)
