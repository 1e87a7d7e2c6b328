"""In-memory type definition tree produced by the structure generator.

The generator decides *what* to emit; printers in :mod:`scout.generator`
decide *how* (Python source text or a live pydantic class). Nodes are
frozen dataclasses so two generations of the same spec compare equal.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from scout.domain.types import BaseType, Cardinality, Composite

DOC_OPTION = "doc"


@dataclass(frozen=True)
class TypeRef:
    """Resolved attribute type: a base type, optionally wrapped."""

    base: BaseType
    wrapper: Composite = Composite.NONE

    def __str__(self) -> str:
        if self.wrapper == Composite.NONE:
            return str(self.base)
        return f"{self.wrapper}<{self.base}>"


@dataclass(frozen=True)
class CompiledOption:
    """One declaration option: documentation or a compiled validation."""

    name: str
    value: Any


@dataclass(frozen=True)
class AttributeDecl:
    """A leaf attribute declaration."""

    name: str
    type: TypeRef
    required: bool
    options: tuple[CompiledOption, ...] = ()

    @property
    def doc(self) -> str | None:
        for option in self.options:
            if option.name == DOC_OPTION:
                return option.value
        return None

    @property
    def checks(self) -> tuple[CompiledOption, ...]:
        """Options other than documentation, in declaration order."""
        return tuple(o for o in self.options if o.name != DOC_OPTION)


class EmbedForm(StrEnum):
    """Wrapper construct around a nested type attribute."""

    ONE_REQUIRED = "one_required"
    ONE_OPTIONAL = "one_optional"
    MANY_REQUIRED = "many_required"
    MANY_OPTIONAL = "many_optional"

    @classmethod
    def for_embed(cls, cardinality: Cardinality, required: bool) -> EmbedForm:
        if cardinality == Cardinality.ONE:
            return cls.ONE_REQUIRED if required else cls.ONE_OPTIONAL
        return cls.MANY_REQUIRED if required else cls.MANY_OPTIONAL

    @property
    def many(self) -> bool:
        return self in (EmbedForm.MANY_REQUIRED, EmbedForm.MANY_OPTIONAL)

    @property
    def required(self) -> bool:
        return self in (EmbedForm.ONE_REQUIRED, EmbedForm.MANY_REQUIRED)


@dataclass(frozen=True)
class NestedTypeDecl:
    """A nested type scope plus the attribute that holds it."""

    name: str
    form: EmbedForm
    definition: TypeDefinition

    @property
    def doc(self) -> str | None:
        return self.definition.doc


@dataclass(frozen=True)
class TypeDefinition:
    """A generated type: documentation, attributes, then nested types."""

    type_name: str
    doc: str | None = None
    attributes: tuple[AttributeDecl, ...] = ()
    nested: tuple[NestedTypeDecl, ...] = ()

    @property
    def members(self) -> tuple[AttributeDecl | NestedTypeDecl, ...]:
        """All declarations in emission order."""
        return (*self.attributes, *self.nested)

    def depth(self) -> int:
        """Number of type scopes on the deepest path, this one included."""
        return 1 + max((n.definition.depth() for n in self.nested), default=0)
