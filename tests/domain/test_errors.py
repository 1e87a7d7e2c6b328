"""Tests for the error taxonomy."""

from __future__ import annotations

import pytest

from scout.domain.errors import (
    ERRORS_BY_CODE,
    DocumentError,
    NameCollisionError,
    PatternCompileError,
    SchemaValidationError,
    ScoutError,
    SpecError,
    SpecIssue,
    ValueKindMismatchError,
    format_path,
)


class TestFormatPath:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ((), "<root>"),
            (("type_name",), "type_name"),
            (("fields", 0, "name"), "fields[0].name"),
            (("embeds", 1, "fields", 0, "validations", 2, "value"),
             "embeds[1].fields[0].validations[2].value"),
            ((0,), "[0]"),
        ],
    )
    def test_render(self, path: tuple, expected: str) -> None:
        assert format_path(path) == expected


class TestHierarchy:
    @pytest.mark.parametrize(
        "cls",
        [SchemaValidationError, ValueKindMismatchError, PatternCompileError],
    )
    def test_spec_errors(self, cls: type[SpecError]) -> None:
        assert issubclass(cls, SpecError)
        assert issubclass(cls, ScoutError)
        assert ERRORS_BY_CODE[cls.code] is cls

    def test_codes_are_distinct(self) -> None:
        codes = [
            SchemaValidationError.code,
            ValueKindMismatchError.code,
            PatternCompileError.code,
            NameCollisionError.code,
            DocumentError.code,
        ]
        assert len(set(codes)) == len(codes)

    def test_default_issue(self) -> None:
        exc = SchemaValidationError("bad", path=("fields", 0))
        assert exc.issues == [SpecIssue(code="SCHEMA_INVALID", message="bad", path=("fields", 0))]
        assert str(exc) == "fields[0]: bad"

    def test_name_collision_detail(self) -> None:
        exc = NameCollisionError("shop.Listing")
        assert exc.detail() == {"name": "shop.Listing"}
        assert "shop.Listing" in exc.message

    def test_document_error_detail(self) -> None:
        assert DocumentError("nope", source="a.yaml").detail() == {"source": "a.yaml"}
        assert DocumentError("nope").detail() == {}

    def test_issue_to_dict(self) -> None:
        issue = SpecIssue(code="X", message="m", path=("a", 1))
        assert issue.to_dict() == {"code": "X", "path": "a[1]", "message": "m"}
