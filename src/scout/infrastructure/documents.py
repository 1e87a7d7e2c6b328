"""Spec and payload document loading.

Documents are JSON, YAML, or TOML, chosen by file suffix. ``-`` reads
standard input, parsed as YAML (a superset of JSON).
"""

from __future__ import annotations

import json
import sys
import tomllib
from io import StringIO
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from scout.domain.errors import DocumentError

STDIN = "-"
SUFFIXES = (".json", ".yaml", ".yml", ".toml")


def _new_yaml() -> YAML:
    """Fresh safe-mode parser per call; ruamel's YAML object is stateful."""
    return YAML(typ="safe", pure=True)


def parse_document(text: str, fmt: str, *, source: str | None = None) -> Any:
    """Parse *text* in the given format (``json``, ``yaml`` or ``toml``)."""
    try:
        if fmt == "json":
            return json.loads(text)
        if fmt == "toml":
            return tomllib.loads(text)
        if fmt == "yaml":
            return _new_yaml().load(StringIO(text))
    except (json.JSONDecodeError, tomllib.TOMLDecodeError, YAMLError) as exc:
        raise DocumentError(f"Invalid {fmt.upper()} document: {exc}", source=source) from exc
    raise DocumentError(f"Unsupported document format {fmt!r}", source=source)


def format_for(path: Path) -> str:
    """Document format implied by a file suffix."""
    suffix = path.suffix.lower()
    if suffix == ".json":
        return "json"
    if suffix == ".toml":
        return "toml"
    if suffix in (".yaml", ".yml"):
        return "yaml"
    raise DocumentError(
        f"Unsupported file type {suffix or '<none>'!r}; expected one of {', '.join(SUFFIXES)}",
        source=str(path),
    )


def read_document(location: str | Path) -> Any:
    """Read and parse a document from a path, or stdin for ``-``."""
    if str(location) == STDIN:
        return parse_document(sys.stdin.read(), "yaml", source="<stdin>")

    path = Path(location)
    fmt = format_for(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DocumentError(f"Cannot read {path}: {exc.strerror or exc}", source=str(path)) from exc
    return parse_document(text, fmt, source=str(path))


def read_mapping(location: str | Path) -> dict[str, Any]:
    """Read a document whose top level must be a mapping."""
    data = read_document(location)
    if not isinstance(data, dict):
        raise DocumentError(
            f"Expected a mapping at the top level, got {type(data).__name__}",
            source=str(location),
        )
    return data


def write_text(path: Path, text: str) -> Path:
    """Write *text* to *path*, creating parent directories."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise DocumentError(
            f"Cannot write {path}: {exc.strerror or exc}", source=str(path)
        ) from exc
    except UnicodeEncodeError as exc:
        raise DocumentError(f"Cannot encode {path} as UTF-8: {exc}", source=str(path)) from exc
    return path
