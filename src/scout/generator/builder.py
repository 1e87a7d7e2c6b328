"""Structure generator: SchemaSpec tree -> TypeDefinition.

Emission order is part of the contract: a scope's fields come first, in
declaration order, followed by its embeds, in declaration order. The
same input always produces an equal tree.
"""

from __future__ import annotations

import logging
import re

from scout.domain.ast import (
    DOC_OPTION,
    AttributeDecl,
    CompiledOption,
    EmbedForm,
    NestedTypeDecl,
    TypeDefinition,
    TypeRef,
)
from scout.domain.errors import PatternCompileError
from scout.domain.specs import EmbedSpec, FieldSpec, SchemaSpec
from scout.domain.types import ValidationKey

logger = logging.getLogger(__name__)


def resolve_type(field: FieldSpec) -> TypeRef:
    """Wrap the field's base type according to its composite shape."""
    return TypeRef(base=field.base_type, wrapper=field.shape)


def compile_validations(field: FieldSpec) -> tuple[CompiledOption, ...]:
    """Documentation option (when described) followed by each validation.

    ``format`` values are compiled into ``re.Pattern`` objects; all other
    values pass through unchanged.

    Raises:
        PatternCompileError: a ``format`` value does not compile.
    """
    options: list[CompiledOption] = []
    if field.description is not None:
        options.append(CompiledOption(DOC_OPTION, field.description))
    for index, validation in enumerate(field.validations):
        value = validation.value
        if validation.key == ValidationKey.FORMAT:
            try:
                value = re.compile(value)
            except re.error as exc:
                raise PatternCompileError(
                    f"Invalid regular expression for validation `format`: {exc}",
                    path=("validations", index, "value"),
                ) from exc
        options.append(CompiledOption(str(validation.key), value))
    return tuple(options)


def emit_field(field: FieldSpec) -> AttributeDecl:
    """Build the attribute declaration for one field."""
    return AttributeDecl(
        name=field.name,
        type=resolve_type(field),
        required=field.required,
        options=compile_validations(field),
    )


def _emit_scope(
    type_name: str,
    doc: str | None,
    fields: tuple[FieldSpec, ...],
    embeds: tuple[EmbedSpec, ...],
) -> TypeDefinition:
    attributes: list[AttributeDecl] = []
    for index, field in enumerate(fields):
        try:
            attributes.append(emit_field(field))
        except PatternCompileError as exc:
            raise PatternCompileError(exc.message, path=("fields", index, *exc.path)) from exc
    nested: list[NestedTypeDecl] = []
    for index, embed in enumerate(embeds):
        try:
            nested.append(emit_embed(embed))
        except PatternCompileError as exc:
            raise PatternCompileError(exc.message, path=("embeds", index, *exc.path)) from exc
    return TypeDefinition(
        type_name=type_name,
        doc=doc,
        attributes=tuple(attributes),
        nested=tuple(nested),
    )


def emit_embed(embed: EmbedSpec) -> NestedTypeDecl:
    """Build the nested type declaration for one embed.

    The inner scope is generated the same way for all four wrapper forms;
    only :class:`EmbedForm` differs.
    """
    definition = _emit_scope(embed.type_name, embed.description, embed.fields, embed.embeds)
    return NestedTypeDecl(
        name=embed.field_name,
        form=EmbedForm.for_embed(embed.cardinality, embed.required),
        definition=definition,
    )


def generate(schema: SchemaSpec) -> TypeDefinition:
    """Generate the type definition for a root schema."""
    definition = _emit_scope(schema.type_name, schema.description, schema.fields, schema.embeds)
    logger.debug(
        "Generated %s: %d attributes, %d nested types, depth %d",
        definition.type_name,
        len(definition.attributes),
        len(definition.nested),
        definition.depth(),
    )
    return definition


def count_members(definition: TypeDefinition) -> dict[str, int]:
    """Totals of attributes and nested types across the whole tree."""
    totals = {"attributes": len(definition.attributes), "nested_types": len(definition.nested)}
    for nested in definition.nested:
        inner = count_members(nested.definition)
        totals["attributes"] += inner["attributes"]
        totals["nested_types"] += inner["nested_types"]
    return totals

