"""Python source printer for generated type definitions.

Renders a :class:`~scout.domain.ast.TypeDefinition` as a self-contained
module defining one pydantic model. Nested types become nested classes
declared just before the attribute that holds them.

Every piece of spec-supplied text reaches the output either as a
normalized identifier or through ``repr``, so the result always parses.
The configured base class is imported under a private alias whenever a
generated name would shadow it.
"""

from __future__ import annotations

import keyword
import re
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from jinja2 import Environment

from scout.domain.ast import AttributeDecl, EmbedForm, NestedTypeDecl, TypeDefinition, TypeRef
from scout.domain.naming import RESERVED_ATTRIBUTES
from scout.domain.types import BaseType, Composite
from scout.infrastructure.templates import build_template_environment

DEFAULT_BASE_CLASS = "scout.runtime:ScoutModel"
DEFAULT_HEADER = "Code generated by scout. DO NOT EDIT."

# Source expression and required import for each base type.
_BASE_SOURCE: dict[BaseType, tuple[str, str | None]] = {
    BaseType.INTEGER: ("int", None),
    BaseType.FLOAT: ("float", None),
    BaseType.BOOLEAN: ("bool", None),
    BaseType.STRING: ("str", None),
    BaseType.MAP: ("dict[str, Any]", "Any"),
    BaseType.BINARY: ("bytes", None),
    BaseType.DECIMAL: ("decimal.Decimal", "decimal"),
    BaseType.ID: ("int", None),
    BaseType.BINARY_ID: ("uuid.UUID", "uuid"),
    BaseType.UTC_DATETIME: ("AwareDatetime", "AwareDatetime"),
    BaseType.NAIVE_DATETIME: ("NaiveDatetime", "NaiveDatetime"),
    BaseType.DATE: ("dt.date", "dt"),
    BaseType.TIME: ("dt.time", "dt"),
    BaseType.ANY: ("Any", "Any"),
    BaseType.UTC_DATETIME_USEC: ("AwareDatetime", "AwareDatetime"),
    BaseType.NAIVE_DATETIME_USEC: ("NaiveDatetime", "NaiveDatetime"),
    BaseType.TIME_USEC: ("dt.time", "dt"),
}

_STDLIB_MODULES = {
    "dt": "import datetime as dt",
    "decimal": "import decimal",
    "re": "import re",
    "uuid": "import uuid",
}
_TYPING_NAMES = ("Annotated", "Any")
_PYDANTIC_NAMES = ("AwareDatetime", "Field", "NaiveDatetime")


def split_base_class(base_class: str) -> tuple[str, str]:
    """Split ``"package.module:Name"`` into module path and class name."""
    module, sep, name = base_class.partition(":")
    if not sep or not module or not name.isidentifier():
        raise ValueError(f"Base class must look like 'package.module:Name', got {base_class!r}")
    return module, name


def docstring_literal(text: str) -> str:
    """Triple-quoted literal for printable one-line text, ``repr`` otherwise.

    ``isprintable`` rules out line breaks, NUL and lone surrogates, none of
    which may appear raw in source text.
    """
    simple = text.isprintable() and "\\" not in text
    if simple and '"""' not in text and not text.endswith('"'):
        return f'"""{text}"""'
    return repr(text)


def value_source(value: Any) -> str:
    """Source expression for a compiled option value."""
    if isinstance(value, re.Pattern):
        return f"re.compile({value.pattern!r})"
    return repr(value)


def keyword_name(key: str) -> str:
    """Keyword-argument spelling of a validation key (``in`` -> ``in_``)."""
    return f"{key}_" if keyword.iskeyword(key) else key


def _bound_names(definition: TypeDefinition) -> Iterator[str]:
    """Class and attribute names the rendered classes bind."""
    yield definition.type_name
    for attribute in definition.attributes:
        yield attribute.name
    for nested in definition.nested:
        yield nested.name
        yield from _bound_names(nested.definition)


class SourcePrinter:
    """Render type definitions as Python modules.

    Args:
        base_class: ``"module:Name"`` of the class generated models extend.
        header: Comment placed at the top of the module (``None`` for none).
        indent: Spaces per indentation level.
        project_root: Directory searched for ``.scout/templates`` overrides.
    """

    template_name = "module.py.j2"

    def __init__(
        self,
        *,
        base_class: str = DEFAULT_BASE_CLASS,
        header: str | None = DEFAULT_HEADER,
        indent: int = 4,
        project_root: Path | None = None,
        environment: Environment | None = None,
    ) -> None:
        self._base_module, self._base_name = split_base_class(base_class)
        self._header = header
        self._pad = " " * indent
        self._env = environment or build_template_environment(
            "source", project_root=project_root
        )

    def render(self, definition: TypeDefinition) -> str:
        """Render *definition* as the text of a Python module."""
        used: set[str] = set()
        base = self._base_alias(definition)
        body = "\n".join(self._class_lines(definition, used, base))
        template = self._env.get_template(self.template_name)
        return template.render(
            header_lines=self._header.splitlines() if self._header else [],
            module_doc=f"{definition.type_name} model.",
            import_groups=self._import_groups(used, base),
            body=body,
        )

    # ------------------------------------------------------------------
    # Imports
    # ------------------------------------------------------------------

    def _base_alias(self, definition: TypeDefinition) -> str:
        """Name the base class is bound to in the generated module.

        A generated class, attribute, import or builtin with the same name
        as the base would shadow it, so the base is then imported as ``_Name``.
        """
        taken = {
            *_STDLIB_MODULES,
            *_TYPING_NAMES,
            *_PYDANTIC_NAMES,
            *RESERVED_ATTRIBUTES,
            "Checks",
            *_bound_names(definition),
        }
        return f"_{self._base_name}" if self._base_name in taken else self._base_name

    def _import_groups(self, used: set[str], base: str) -> list[list[str]]:
        stdlib = [line for name, line in _STDLIB_MODULES.items() if name in used]
        typing_names = [n for n in _TYPING_NAMES if n in used]
        if typing_names:
            stdlib.append(f"from typing import {', '.join(typing_names)}")

        names: dict[str, set[str]] = {"pydantic": {n for n in _PYDANTIC_NAMES if n in used}}
        base_import = self._base_name
        if base != self._base_name:
            base_import = f"{self._base_name} as {base}"
        names.setdefault(self._base_module, set()).add(base_import)
        if "Checks" in used:
            names.setdefault("scout.runtime", set()).add("Checks")

        third_party: list[str] = []
        local: list[str] = []
        for module, imported in sorted(names.items()):
            if not imported:
                continue
            line = f"from {module} import {', '.join(sorted(imported))}"
            if module == "scout" or module.startswith("scout."):
                local.append(line)
            else:
                third_party.append(line)

        return [group for group in (stdlib, third_party, local) if group]

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def _class_lines(self, definition: TypeDefinition, used: set[str], base: str) -> list[str]:
        body: list[str] = []
        if definition.doc:
            body.append(docstring_literal(definition.doc))
        if definition.attributes and body:
            body.append("")
        for attribute in definition.attributes:
            body.append(self._attribute_line(attribute, used))
        for nested in definition.nested:
            if body:
                body.append("")
            body.extend(self._class_lines(nested.definition, used, base))
            body.append("")
            body.append(self._nested_line(nested, used))
        if not body:
            body.append("pass")

        header = f"class {definition.type_name}({base}):"
        return [header, *(f"{self._pad}{line}" if line else "" for line in body)]

    def _type_source(self, ref: TypeRef, used: set[str]) -> str:
        source, needs = _BASE_SOURCE[ref.base]
        if needs:
            used.add(needs)
        if ref.wrapper == Composite.ARRAY:
            return f"list[{source}]"
        if ref.wrapper == Composite.MAP:
            return f"dict[str, {source}]"
        return source

    def _attribute_line(self, attribute: AttributeDecl, used: set[str]) -> str:
        annotation = self._type_source(attribute.type, used)
        if attribute.checks:
            used.update(("Annotated", "Checks"))
            args = []
            for option in attribute.checks:
                if isinstance(option.value, re.Pattern):
                    used.add("re")
                args.append(f"{keyword_name(option.name)}={value_source(option.value)}")
            annotation = f"Annotated[{annotation}, Checks({', '.join(args)})]"

        doc = attribute.doc
        if attribute.required:
            default = None
            if doc is not None:
                used.add("Field")
                default = f"Field(description={doc!r})"
        else:
            annotation = f"{annotation} | None"
            default = "None"
            if doc is not None:
                used.add("Field")
                default = f"Field(default=None, description={doc!r})"

        line = f"{attribute.name}: {annotation}"
        return f"{line} = {default}" if default else line

    def _nested_line(self, nested: NestedTypeDecl, used: set[str]) -> str:
        type_name = nested.definition.type_name
        if nested.form == EmbedForm.ONE_REQUIRED:
            return f"{nested.name}: {type_name}"
        if nested.form == EmbedForm.ONE_OPTIONAL:
            return f"{nested.name}: {type_name} | None = None"
        if nested.form == EmbedForm.MANY_REQUIRED:
            return f"{nested.name}: list[{type_name}]"
        used.add("Field")
        return f"{nested.name}: list[{type_name}] = Field(default_factory=list)"
