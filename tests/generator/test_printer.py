"""Tests for the Python source printer."""

from __future__ import annotations

import ast
import re
from pathlib import Path
from typing import Any

import pytest
from pydantic import BaseModel, ValidationError

from scout.domain.specs import parse_schema_spec
from scout.generator.builder import generate
from scout.generator.printer import (
    SourcePrinter,
    docstring_literal,
    keyword_name,
    split_base_class,
    value_source,
)
from tests.conftest import embed_spec, field_spec, listing_spec


def _render(spec: dict[str, Any], **kwargs: Any) -> str:
    return SourcePrinter(**kwargs).render(generate(parse_schema_spec(spec)))


def _load(source: str, name: str) -> type[BaseModel]:
    namespace: dict[str, Any] = {"__name__": "generated"}
    exec(compile(source, "<generated>", "exec", dont_inherit=True), namespace)
    return namespace[name]


class TestHelpers:
    def test_split_base_class(self) -> None:
        assert split_base_class("scout.runtime:ScoutModel") == ("scout.runtime", "ScoutModel")

    @pytest.mark.parametrize("value", ["scout.runtime.ScoutModel", ":Model", "pkg:", "pkg:a-b"])
    def test_split_base_class_rejects(self, value: str) -> None:
        with pytest.raises(ValueError):
            split_base_class(value)

    def test_docstring_literal(self) -> None:
        assert docstring_literal("A listing") == '"""A listing"""'
        assert docstring_literal('ends with "') == repr('ends with "')
        assert docstring_literal("two\nlines") == repr("two\nlines")
        assert docstring_literal('"""') == repr('"""')
        assert docstring_literal("a\x00b") == repr("a\x00b")
        assert docstring_literal("x\ud800") == "'x\\ud800'"

    def test_value_source(self) -> None:
        assert value_source(0) == "0"
        assert value_source(["new", "used"]) == "['new', 'used']"
        assert value_source(re.compile(r"\d")) == r"re.compile('\\d')"

    def test_keyword_name(self) -> None:
        assert keyword_name("in") == "in_"
        assert keyword_name("is") == "is_"
        assert keyword_name("not_in") == "not_in"


class TestRenderExact:
    def test_minimal_model(self) -> None:
        source = _render(
            {"type_name": "Book", "fields": [field_spec("Title", required=True)]}
        )
        assert source == (
            "# Code generated by scout. DO NOT EDIT.\n"
            '"""Book model."""\n'
            "\n"
            "from scout.runtime import ScoutModel\n"
            "\n"
            "\n"
            "class Book(ScoutModel):\n"
            "    title: str\n"
        )

    def test_checks_docs_and_nested_class(self) -> None:
        spec = {
            "type_name": "Listing",
            "description": "A listing",
            "fields": [
                field_spec(
                    "Price",
                    "float",
                    required=True,
                    description="Price",
                    validations=[{"key": "greater_than", "value": 0}],
                ),
                field_spec("Tags", composite="array", validations=[{"key": "min", "value": 1}]),
            ],
            "embeds": [
                embed_spec(
                    "Author",
                    "Author",
                    required=True,
                    fields=[field_spec("Name", required=True)],
                )
            ],
        }
        assert _render(spec, header=None) == (
            '"""Listing model."""\n'
            "\n"
            "from typing import Annotated\n"
            "\n"
            "from pydantic import Field\n"
            "\n"
            "from scout.runtime import Checks, ScoutModel\n"
            "\n"
            "\n"
            "class Listing(ScoutModel):\n"
            '    """A listing"""\n'
            "\n"
            "    price: Annotated[float, Checks(greater_than=0)] = Field(description='Price')\n"
            "    tags: Annotated[list[str], Checks(min=1)] | None = None\n"
            "\n"
            "    class Author(ScoutModel):\n"
            "        name: str\n"
            "\n"
            "    author: Author\n"
        )

    def test_empty_model(self) -> None:
        source = _render({"type_name": "Empty"}, header=None)
        assert source.endswith("class Empty(ScoutModel):\n    pass\n")


class TestRenderForms:
    @pytest.mark.parametrize(
        ("cardinality", "required", "line"),
        [
            ("one", True, "item: Item"),
            ("one", False, "item: Item | None = None"),
            ("many", True, "item: list[Item]"),
            ("many", False, "item: list[Item] = Field(default_factory=list)"),
        ],
    )
    def test_embed_lines(self, cardinality: str, required: bool, line: str) -> None:
        spec = {
            "type_name": "Root",
            "embeds": [embed_spec("item", "Item", cardinality, required=required)],
        }
        assert f"    {line}\n" in _render(spec)

    @pytest.mark.parametrize(
        ("required", "description", "line"),
        [
            (True, None, "note: str"),
            (True, "A note", "note: str = Field(description='A note')"),
            (False, None, "note: str | None = None"),
            (False, "A note", "note: str | None = Field(default=None, description='A note')"),
        ],
    )
    def test_field_lines(self, required: bool, description: str | None, line: str) -> None:
        field = field_spec("note", required=required)
        if description is not None:
            field["description"] = description
        assert f"    {line}\n" in _render({"type_name": "Root", "fields": [field]})

    def test_stdlib_imports_follow_types(self) -> None:
        spec = {
            "type_name": "Event",
            "fields": [
                field_spec("id", "binary_id", required=True),
                field_spec("at", "utc_datetime"),
                field_spec("day", "date"),
                field_spec("amount", "decimal"),
                field_spec("extra", "map"),
                field_spec("code", validations=[{"key": "format", "value": "^[A-Z]+$"}]),
            ],
        }
        source = _render(spec)
        assert "import datetime as dt\nimport decimal\nimport re\nimport uuid\n" in source
        assert "from typing import Annotated, Any\n" in source
        assert "from pydantic import AwareDatetime\n" in source
        assert "id: uuid.UUID\n" in source
        assert "day: dt.date | None = None\n" in source
        assert "code: Annotated[str, Checks(format=re.compile('^[A-Z]+$'))] | None = None" in source

    def test_keyword_checks(self) -> None:
        spec = {
            "type_name": "Root",
            "fields": [
                field_spec(
                    "condition",
                    validations=[
                        {"key": "in", "value": ["new", "used"]},
                        {"key": "not_in", "value": ["broken"]},
                    ],
                )
            ],
        }
        assert "Checks(in_=['new', 'used'], not_in=['broken'])" in _render(spec)

    def test_custom_base_class(self) -> None:
        source = _render({"type_name": "Root"}, base_class="myapp.models:Base")
        assert "from myapp.models import Base\n" in source
        assert "class Root(Base):" in source

    def test_base_class_shadowed_by_embed_type(self) -> None:
        spec = {
            "type_name": "Root",
            "embeds": [
                embed_spec(
                    "base", "base model", fields=[field_spec("x", "integer", required=True)]
                ),
                embed_spec("other", "Other", fields=[field_spec("y")]),
            ],
        }
        source = _render(spec, base_class="pydantic:BaseModel")
        assert "from pydantic import BaseModel as _BaseModel\n" in source
        assert "class BaseModel(_BaseModel):" in source
        assert "class Other(_BaseModel):" in source
        root = _load(source, "Root")
        assert set(root.Other.model_fields) == {"y"}
        assert set(root.BaseModel.model_fields) == {"x"}

    def test_base_class_shadowed_by_attribute(self) -> None:
        spec = {
            "type_name": "Root",
            "fields": [field_spec("base")],
            "embeds": [embed_spec("child", "Child")],
        }
        source = _render(spec, base_class="scout.runtime:base")
        assert "from scout.runtime import base as _base\n" in source
        assert "class Child(_base):" in source

    def test_indent(self) -> None:
        source = _render({"type_name": "Root", "fields": [field_spec("a")]}, indent=2)
        assert "\n  a: str | None = None\n" in source

    def test_project_template_override(self, tmp_path: Path) -> None:
        override = tmp_path / ".scout" / "templates" / "source"
        override.mkdir(parents=True)
        (override / "module.py.j2").write_text("# custom\n{{ body }}\n", encoding="utf-8")
        source = _render({"type_name": "Root"}, project_root=tmp_path)
        assert source.startswith("# custom\nclass Root(ScoutModel):")


class TestGeneratedSourceRuns:
    def test_parses(self) -> None:
        ast.parse(_render(listing_spec()))

    def test_deterministic(self) -> None:
        assert _render(listing_spec()) == _render(listing_spec())

    def test_hostile_text_stays_inert(self) -> None:
        spec = {
            "type_name": "Root",
            "description": 'x"""\nimport os\n"""',
            "fields": [field_spec("a", description="')\nraise SystemExit\n#")],
        }
        model = _load(_render(spec), "Root")
        assert model.__doc__ == 'x"""\nimport os\n"""'
        assert model.model_fields["a"].description == "')\nraise SystemExit\n#"

    @pytest.mark.parametrize("description", ["a\x00b", "x\ud800", "tab\there"])
    def test_unprintable_description_stays_inert(self, description: str) -> None:
        spec = {
            "type_name": "Root",
            "description": description,
            "fields": [field_spec("a", description=description)],
        }
        source = _render(spec)
        source.encode("utf-8")
        model = _load(source, "Root")
        assert model.__doc__ == description
        assert model.model_fields["a"].description == description

    def test_listing_validates(self) -> None:
        listing = _load(_render(listing_spec()), "Listing")
        item = listing.model_validate(
            {
                "title": "Dune",
                "price": 9.5,
                "tags": ["scifi"],
                "condition": "used",
                "author": {"name": "Frank Herbert"},
                "offers": [{"seller": "shop", "amount": 3}],
            }
        )
        assert item.author.name == "Frank Herbert"
        assert item.offers[0].amount == 3
        assert listing.Author.__name__ == "Author"

    def test_listing_defaults(self) -> None:
        listing = _load(_render(listing_spec()), "Listing")
        item = listing.model_validate({"title": "Dune", "price": 1, "author": {"name": "F"}})
        assert item.tags is None
        assert item.condition is None
        assert item.offers == []

    @pytest.mark.parametrize(
        ("patch", "error_type"),
        [
            ({"price": 0}, "greater_than"),
            ({"title": "   "}, "format"),
            ({"tags": []}, "min"),
            ({"condition": "mint"}, "in"),
            ({"author": None}, "model_type"),
        ],
    )
    def test_listing_rejects(self, patch: dict[str, Any], error_type: str) -> None:
        listing = _load(_render(listing_spec()), "Listing")
        data = {"title": "Dune", "price": 1, "author": {"name": "F"}, **patch}
        with pytest.raises(ValidationError) as exc_info:
            listing.model_validate(data)
        assert [e["type"] for e in exc_info.value.errors()] == [error_type]
