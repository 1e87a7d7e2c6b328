"""Shared pytest fixtures and spec builders for scout tests."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from scout.config.settings import ScoutSettings


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop ambient SCOUT_* variables so tests only see what they set."""
    for name in list(os.environ):
        if name.startswith("SCOUT_"):
            monkeypatch.delenv(name)


@pytest.fixture
def _isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run in an empty temp directory so no scout.toml is discovered.

    Use via ``@pytest.mark.usefixtures("_isolated")`` on command test classes.
    """
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings(tmp_path: Path) -> ScoutSettings:
    """Default settings rooted at an empty temp directory."""
    return ScoutSettings.from_cli(project_root=tmp_path)


# ---------------------------------------------------------------------------
# Spec builders
# ---------------------------------------------------------------------------


def field_spec(name: str, base_type: str = "string", **kwargs: Any) -> dict[str, Any]:
    return {"name": name, "base_type": base_type, **kwargs}


def embed_spec(
    field_name: str,
    type_name: str,
    cardinality: str = "one",
    **kwargs: Any,
) -> dict[str, Any]:
    return {
        "field_name": field_name,
        "type_name": type_name,
        "cardinality": cardinality,
        **kwargs,
    }


def listing_spec() -> dict[str, Any]:
    """A book listing with checks, one required author and optional offers."""
    return {
        "type_name": "Listing",
        "description": "A book listing page",
        "fields": [
            field_spec(
                "Title",
                required=True,
                description="Book title",
                validations=[{"key": "format", "value": r"\S"}],
            ),
            field_spec(
                "Price",
                "float",
                required=True,
                validations=[{"key": "greater_than", "value": 0}],
            ),
            field_spec(
                "Tags",
                composite="array",
                validations=[{"key": "min", "value": 1}],
            ),
            field_spec(
                "Condition",
                validations=[{"key": "in", "value": ["new", "used"]}],
            ),
        ],
        "embeds": [
            embed_spec(
                "Author",
                "Author",
                required=True,
                description="Who wrote it",
                fields=[field_spec("Name", required=True)],
            ),
            embed_spec(
                "Offers",
                "Offer",
                "many",
                fields=[
                    field_spec("Seller", required=True),
                    field_spec("Amount", "integer"),
                ],
            ),
        ],
    }


def write_spec(path: Path, spec: dict[str, Any] | None = None) -> Path:
    """Write *spec* (default: :func:`listing_spec`) as JSON to *path*."""
    path.write_text(json.dumps(spec if spec is not None else listing_spec()), encoding="utf-8")
    return path
