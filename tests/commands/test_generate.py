"""Tests for the generate CLI command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from scout.cli import cli
from tests.conftest import field_spec, listing_spec, write_spec


@pytest.mark.usefixtures("_isolated")
class TestGenerateCommand:
    def test_prints_source(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["generate", str(write_spec(tmp_path / "listing.json"))])
        assert result.exit_code == 0, result.output
        assert result.stdout.startswith("# Code generated by scout. DO NOT EDIT.\n")
        assert "class Listing(ScoutModel):" in result.stdout

    def test_source_compiles(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["generate", str(write_spec(tmp_path / "listing.json"))])
        compile(result.stdout, "listing.py", "exec")

    def test_json_output(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        spec = write_spec(tmp_path / "listing.json")
        result = cli_runner.invoke(cli, ["--json", "generate", str(spec), "--prefix", "books"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["ok"] is True
        assert data["op"] == "compile_schema"
        assert data["data"]["qualified_name"] == "books.Listing"
        assert data["data"]["attributes"] == 7
        assert data["data"]["nested_types"] == 2

    def test_out_writes_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        out = tmp_path / "models" / "listing.py"
        spec = write_spec(tmp_path / "listing.json")
        result = cli_runner.invoke(cli, ["generate", str(spec), "--out", str(out)])
        assert result.exit_code == 0
        assert "OK" in result.stdout
        assert str(out) in result.stdout
        assert "class Listing(ScoutModel):" in out.read_text(encoding="utf-8")

    def test_quiet_out_prints_path(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        out = tmp_path / "listing.py"
        spec = write_spec(tmp_path / "listing.json")
        result = cli_runner.invoke(cli, ["-q", "generate", str(spec), "-o", str(out)])
        assert result.exit_code == 0
        assert result.stdout.strip() == str(out)

    def test_yaml_spec(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        spec = tmp_path / "note.yaml"
        spec.write_text(
            "type_name: Note\nfields:\n  - name: body\n    base_type: string\n",
            encoding="utf-8",
        )
        result = cli_runner.invoke(cli, ["generate", str(spec)])
        assert result.exit_code == 0
        assert "class Note(ScoutModel):" in result.stdout

    def test_stdin(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli,
            ["generate", "-"],
            input=json.dumps({"type_name": "Note", "fields": [field_spec("body")]}),
        )
        assert result.exit_code == 0
        assert "class Note(ScoutModel):" in result.stdout

    def test_invalid_spec(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        data = listing_spec()
        data["fields"][1]["validations"] = [{"key": "greater_than", "value": "zero"}]
        spec = write_spec(tmp_path / "bad.json", data)
        result = cli_runner.invoke(cli, ["--json", "generate", str(spec)])
        assert result.exit_code == 1
        assert result.stdout == ""
        payload = json.loads(result.stderr)
        assert payload["ok"] is False
        assert payload["error"]["code"] == "VALUE_KIND_MISMATCH"
        assert payload["error"]["detail"]["path"] == "fields[1].validations[0].value"

    def test_invalid_spec_human_output(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        spec = write_spec(
            tmp_path / "bad.json",
            {"type_name": "Bad", "fields": [{"name": "a", "base_type": "int"}]},
        )
        result = cli_runner.invoke(cli, ["generate", str(spec)])
        assert result.exit_code == 1
        assert "ERROR" in result.stderr
        assert "[SCHEMA_INVALID]" in result.stderr
        assert "fields[0].base_type" in result.stderr

    def test_missing_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "generate", str(tmp_path / "nope.json")])
        assert result.exit_code == 1
        payload = json.loads(result.stderr)
        assert payload["op"] == "compile_schema"
        assert payload["error"]["code"] == "DOCUMENT_INVALID"

    def test_unsupported_suffix(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        spec = tmp_path / "listing.txt"
        spec.write_text("{}", encoding="utf-8")
        result = cli_runner.invoke(cli, ["generate", str(spec)])
        assert result.exit_code == 1
        assert "Unsupported file type" in result.stderr

    def test_config_prefix(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "scout.toml").write_text('[generate]\nprefix = "shop"\n', encoding="utf-8")
        spec = write_spec(tmp_path / "listing.json")
        result = cli_runner.invoke(cli, ["--json", "generate", str(spec)])
        assert json.loads(result.stdout)["data"]["qualified_name"] == "shop.Listing"
