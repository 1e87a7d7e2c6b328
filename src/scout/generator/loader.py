"""Build generated type definitions directly into pydantic model classes.

The in-process counterpart of :class:`~scout.generator.printer.SourcePrinter`:
the same :class:`~scout.domain.ast.TypeDefinition` yields a model with the
same fields, defaults, and checks, without going through source text.
"""

from __future__ import annotations

import importlib
import logging
from typing import Annotated, Any

from pydantic import BaseModel, Field, create_model

from scout.domain.ast import AttributeDecl, EmbedForm, NestedTypeDecl, TypeDefinition, TypeRef
from scout.domain.types import Composite
from scout.generator.printer import DEFAULT_BASE_CLASS, split_base_class
from scout.runtime import PYTHON_TYPES, Checks

logger = logging.getLogger(__name__)


def resolve_base_class(base_class: str = DEFAULT_BASE_CLASS) -> type[BaseModel]:
    """Import the ``"module:Name"`` base class generated models extend."""
    module_name, name = split_base_class(base_class)
    module = importlib.import_module(module_name)
    base = getattr(module, name, None)
    if not (isinstance(base, type) and issubclass(base, BaseModel)):
        raise TypeError(f"{base_class!r} is not a pydantic BaseModel subclass")
    return base


def python_type(ref: TypeRef) -> Any:
    """Python annotation for a resolved attribute type."""
    inner = PYTHON_TYPES[ref.base]
    if ref.wrapper == Composite.ARRAY:
        return list[inner]
    if ref.wrapper == Composite.MAP:
        return dict[str, inner]
    return inner


def _attribute(attribute: AttributeDecl) -> tuple[Any, Any]:
    annotation = python_type(attribute.type)
    if attribute.checks:
        checks = Checks.from_options((o.name, o.value) for o in attribute.checks)
        annotation = Annotated[annotation, checks]
    if attribute.required:
        return annotation, Field(description=attribute.doc)
    return annotation | None, Field(default=None, description=attribute.doc)


def _nested(nested: NestedTypeDecl, model: type[BaseModel]) -> tuple[Any, Any]:
    if nested.form == EmbedForm.ONE_REQUIRED:
        return model, ...
    if nested.form == EmbedForm.ONE_OPTIONAL:
        return model | None, None
    if nested.form == EmbedForm.MANY_REQUIRED:
        return list[model], ...
    return list[model], Field(default_factory=list)


def build_model(
    definition: TypeDefinition,
    *,
    base: type[BaseModel] | None = None,
    qualname: str | None = None,
) -> type[BaseModel]:
    """Create the model class for *definition*, nested types first.

    Nested models are also exposed as class attributes under their type
    name, mirroring the nested classes of printed source.
    """
    base = base or resolve_base_class()
    qualname = qualname or definition.type_name

    fields: dict[str, Any] = {}
    nested_models: dict[str, type[BaseModel]] = {}
    for attribute in definition.attributes:
        fields[attribute.name] = _attribute(attribute)
    for nested in definition.nested:
        nested_name = nested.definition.type_name
        model = build_model(nested.definition, base=base, qualname=f"{qualname}.{nested_name}")
        nested_models[nested_name] = model
        fields[nested.name] = _nested(nested, model)

    model = create_model(
        definition.type_name,
        __base__=base,
        __doc__=definition.doc,
        **fields,
    )
    model.__qualname__ = qualname
    for nested_name, nested_model in nested_models.items():
        setattr(model, nested_name, nested_model)
    logger.debug("Built model %s with %d fields", qualname, len(model.model_fields))
    return model
