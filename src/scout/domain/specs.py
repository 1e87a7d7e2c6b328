"""Schema specification models: the input tree of the compiler.

A :class:`SchemaSpec` owns ordered :class:`FieldSpec` and
:class:`EmbedSpec` children; embeds own their own fields and may nest
further embeds. All models are frozen and reject unknown keys.

Construction runs the whole rule set: closed-set enum parsing, value-kind
checks, regular-expression compilation, catalog applicability, duplicate
attribute names, and self-referential type names. Use
:func:`parse_spec` (or ``<Model>.from_data``) to get a classified
:class:`~scout.domain.errors.SpecError` instead of a raw pydantic
``ValidationError``.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from enum import StrEnum
from typing import Any, Self, TypeVar

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictStr,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic_core import PydanticCustomError

from scout.domain.catalog import is_applicable, rule_for, value_matches
from scout.domain.errors import ERRORS_BY_CODE, SchemaValidationError, SpecIssue
from scout.domain.naming import capitalize, underscore
from scout.domain.types import (
    BaseType,
    Cardinality,
    Composite,
    ValidationKey,
    parse_choice,
)

# pydantic error types raised by this module, mapped to error codes.
_ERROR_CODES: dict[str, str] = {
    "value_kind_mismatch": "VALUE_KIND_MISMATCH",
    "pattern_compile": "PATTERN_COMPILE",
}


def _choice(enum_cls: type[StrEnum], raw: object, label: str) -> StrEnum:
    choice = parse_choice(enum_cls, raw)
    if choice.value is None:
        raise PydanticCustomError(
            "invalid_choice",
            "Invalid {label}: {reason}",
            {"label": label, "reason": choice.error or f"no {label} given"},
        )
    return choice.value


def _normalized(normalize: Any, raw: str, label: str) -> str:
    try:
        return normalize(raw)
    except ValueError as exc:
        raise PydanticCustomError(
            "invalid_name",
            "Invalid {label}: {reason}",
            {"label": label, "reason": str(exc)},
        ) from exc


class _SpecModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> Self:
        """Validate *data* into this model, raising a classified SpecError."""
        return parse_spec(cls, data)


class ValidationSpec(_SpecModel):
    """One named constraint on a field and its value."""

    key: ValidationKey
    value: Any

    @field_validator("key", mode="before")
    @classmethod
    def parse_key(cls, raw: object) -> StrEnum:
        return _choice(ValidationKey, raw, "validation key")

    @model_validator(mode="after")
    def check_value(self) -> Self:
        rule = rule_for(self.key)
        if not value_matches(self.key, self.value):
            raise PydanticCustomError(
                "value_kind_mismatch",
                "{message}",
                {"message": rule.value_kind_message(), "subpath": ("value",)},
            )
        if self.key == ValidationKey.FORMAT:
            try:
                re.compile(self.value)
            except re.error as exc:
                raise PydanticCustomError(
                    "pattern_compile",
                    "Invalid regular expression for validation `format`: {reason}",
                    {"reason": str(exc), "pattern": self.value, "subpath": ("value",)},
                ) from exc
        return self


class FieldSpec(_SpecModel):
    """Specification for one leaf attribute.

    ``name`` is normalized to snake_case. ``composite`` may be omitted,
    which means the same as ``"none"``.
    """

    name: StrictStr
    base_type: BaseType
    composite: Composite | None = None
    description: StrictStr | None = None
    required: StrictBool = False
    validations: tuple[ValidationSpec, ...] = ()

    @field_validator("name")
    @classmethod
    def normalize_name(cls, raw: str) -> str:
        return _normalized(underscore, raw, "field name")

    @field_validator("base_type", mode="before")
    @classmethod
    def parse_base_type(cls, raw: object) -> StrEnum:
        return _choice(BaseType, raw, "base type")

    @field_validator("composite", mode="before")
    @classmethod
    def parse_composite(cls, raw: object) -> StrEnum | None:
        if raw is None:
            return None
        return _choice(Composite, raw, "composite")

    @model_validator(mode="after")
    def check_validations(self) -> Self:
        seen: set[ValidationKey] = set()
        for index, validation in enumerate(self.validations):
            subpath = ("validations", index, "key")
            if validation.key in seen:
                raise PydanticCustomError(
                    "duplicate_validation",
                    "Validation {key} is declared more than once",
                    {"key": str(validation.key), "subpath": subpath},
                )
            seen.add(validation.key)
            if not is_applicable(validation.key, self.base_type, self.composite):
                raise PydanticCustomError(
                    "inapplicable_validation",
                    "{message}",
                    {
                        "message": rule_for(validation.key).applicability_message(),
                        "subpath": subpath,
                    },
                )
        return self

    @property
    def shape(self) -> Composite:
        """Composite shape with absence resolved to :attr:`Composite.NONE`."""
        return self.composite or Composite.NONE


class EmbedSpec(_SpecModel):
    """Specification for a nested object attribute (one or many)."""

    field_name: StrictStr
    type_name: StrictStr = Field(validation_alias=AliasChoices("type_name", "module_name"))
    cardinality: Cardinality
    required: StrictBool = False
    description: StrictStr | None = None
    fields: tuple[FieldSpec, ...] = ()
    embeds: tuple[EmbedSpec, ...] = ()

    @field_validator("field_name")
    @classmethod
    def normalize_field_name(cls, raw: str) -> str:
        return _normalized(underscore, raw, "embed field name")

    @field_validator("type_name")
    @classmethod
    def normalize_type_name(cls, raw: str) -> str:
        return _normalized(capitalize, raw, "embed type name")

    @field_validator("cardinality", mode="before")
    @classmethod
    def parse_cardinality(cls, raw: object) -> StrEnum:
        return _choice(Cardinality, raw, "cardinality")

    @model_validator(mode="after")
    def check_scope(self) -> Self:
        _validate_scope(self.type_name, self.fields, self.embeds)
        return self


class SchemaSpec(_SpecModel):
    """Root specification: one generated type with fields and embeds."""

    type_name: StrictStr = Field(validation_alias=AliasChoices("type_name", "module_name"))
    description: StrictStr | None = None
    fields: tuple[FieldSpec, ...] = ()
    embeds: tuple[EmbedSpec, ...] = ()

    @field_validator("type_name")
    @classmethod
    def normalize_type_name(cls, raw: str) -> str:
        return _normalized(capitalize, raw, "type name")

    @model_validator(mode="after")
    def check_scope(self) -> Self:
        _validate_scope(self.type_name, self.fields, self.embeds)
        return self

    def walk_embeds(self) -> Iterator[tuple[tuple[str, ...], EmbedSpec]]:
        """Yield ``(type path, embed)`` for every embed, depth first."""
        yield from _walk((self.type_name,), self.embeds)


def _walk(
    prefix: tuple[str, ...],
    embeds: tuple[EmbedSpec, ...],
) -> Iterator[tuple[tuple[str, ...], EmbedSpec]]:
    for embed in embeds:
        path = (*prefix, embed.type_name)
        yield path, embed
        yield from _walk(path, embed.embeds)


def _validate_scope(
    type_name: str,
    fields: tuple[FieldSpec, ...],
    embeds: tuple[EmbedSpec, ...],
) -> None:
    """Reject duplicate names and self-referential type names.

    Checked per scope: attribute names and sibling embed type names must be
    unique after normalization, and no embed below this scope may reuse
    this scope's type name.
    """
    seen: set[str] = set()
    names = [(("fields", i, "name"), f.name) for i, f in enumerate(fields)]
    names += [(("embeds", i, "field_name"), e.field_name) for i, e in enumerate(embeds)]
    for subpath, name in names:
        if name in seen:
            raise PydanticCustomError(
                "duplicate_attribute",
                "Attribute {name} is declared more than once in {type_name}",
                {"name": name, "type_name": type_name, "subpath": subpath},
            )
        seen.add(name)

    type_names: set[str] = set()
    for index, embed in enumerate(embeds):
        if embed.type_name in type_names:
            raise PydanticCustomError(
                "duplicate_type",
                "Embed type {name} is declared more than once in {type_name}",
                {
                    "name": embed.type_name,
                    "type_name": type_name,
                    "subpath": ("embeds", index, "type_name"),
                },
            )
        type_names.add(embed.type_name)

    for subpath, embed in _descendants(embeds):
        if embed.type_name == type_name:
            raise PydanticCustomError(
                "self_reference",
                "Embed type {type_name} refers back to an enclosing type of the same name",
                {"type_name": type_name, "subpath": subpath},
            )


def _descendants(
    embeds: tuple[EmbedSpec, ...],
    prefix: tuple[str | int, ...] = (),
) -> Iterator[tuple[tuple[str | int, ...], EmbedSpec]]:
    for index, embed in enumerate(embeds):
        subpath = (*prefix, "embeds", index)
        yield (*subpath, "type_name"), embed
        yield from _descendants(embed.embeds, subpath)


M = TypeVar("M", bound=BaseModel)


def issues_from(exc: ValidationError) -> list[SpecIssue]:
    """Classify every error in a pydantic ``ValidationError``."""
    issues: list[SpecIssue] = []
    for err in exc.errors():
        ctx = err.get("ctx") or {}
        path = tuple(err["loc"]) + tuple(ctx.get("subpath", ()))
        code = _ERROR_CODES.get(err["type"], SchemaValidationError.code)
        context = {k: v for k, v in ctx.items() if k != "subpath"}
        issues.append(SpecIssue(code=code, message=err["msg"], path=path, context=context))
    return issues


def parse_spec(model_cls: type[M], data: Mapping[str, Any]) -> M:
    """Validate *data* into *model_cls*.

    Raises:
        SpecError: subclass chosen from the first issue found; every issue
            is available on ``exc.issues``.
    """
    try:
        return model_cls.model_validate(data)
    except ValidationError as exc:
        issues = issues_from(exc)
        first = issues[0]
        error_cls = ERRORS_BY_CODE.get(first.code, SchemaValidationError)
        raise error_cls(first.message, path=first.path, issues=issues) from exc


def parse_schema_spec(data: Mapping[str, Any]) -> SchemaSpec:
    """Validate a root schema specification."""
    return parse_spec(SchemaSpec, data)
