"""Identifier normalization for generated attribute and type names."""

from __future__ import annotations

import keyword
import re

from pydantic import BaseModel

# Names bound at module or builtin level by generated source; an attribute
# or type with one of these names would shadow them inside a class body.
RESERVED_ATTRIBUTES = frozenset(
    {"bool", "bytes", "decimal", "dict", "dt", "float", "int", "list", "re", "str", "uuid"}
)
RESERVED_TYPES = frozenset(
    {"Annotated", "Any", "AwareDatetime", "Checks", "Field", "NaiveDatetime", "ScoutModel"}
)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_NON_WORD = re.compile(r"[^0-9A-Za-z]+")


def underscore(name: str) -> str:
    """Normalize *name* to a lower-snake Python identifier.

    Camel-case boundaries and runs of non-alphanumeric characters become a
    single underscore. Leading digits get an ``f_`` prefix; Python keywords,
    builtins used in generated annotations, and ``BaseModel`` attributes get
    a trailing underscore. Raises ``ValueError`` if nothing
    usable remains.

    Examples:
        >>> underscore("FirstName")
        'first_name'
        >>> underscore("HTTPStatus code")
        'http_status_code'
        >>> underscore("class")
        'class_'
    """
    text = _CAMEL_BOUNDARY.sub("_", name.strip())
    text = _NON_WORD.sub("_", text).strip("_").lower()
    if not text:
        raise ValueError(f"{name!r} does not contain any identifier characters")
    if text[0].isdigit():
        text = f"f_{text}"
    if keyword.iskeyword(text) or text in RESERVED_ATTRIBUTES or hasattr(BaseModel, text):
        text = f"{text}_"
    return text


def capitalize(name: str) -> str:
    """Normalize *name* to a capitalized Python type name.

    Non-alphanumeric runs are removed and each separated word is
    capitalized: first letter upper, the rest lower.

    Examples:
        >>> capitalize("author")
        'Author'
        >>> capitalize("book listing")
        'BookListing'
        >>> capitalize("BookListing")
        'Booklisting'
    """
    words = [w for w in _NON_WORD.split(name.strip()) if w]
    if not words:
        raise ValueError(f"{name!r} does not contain any identifier characters")
    text = "".join(w.capitalize() for w in words)
    if text[0].isdigit():
        text = f"T{text}"
    if text in RESERVED_TYPES:
        text = f"{text}_"
    return text


def qualify(type_name: str, prefix: str | None = None) -> str:
    """Join an optional caller *prefix* with *type_name* as a dotted name.

    Examples:
        >>> qualify("Listing")
        'Listing'
        >>> qualify("Listing", "shop.v1")
        'shop.v1.Listing'
    """
    if not prefix:
        return type_name
    return f"{prefix.strip('.')}.{type_name}"
