"""Closed value sets for schema specifications.

Every enumeration a spec can reference lives here, together with
:func:`parse_choice`, the single place where raw input strings are turned
into enum members.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar


class BaseType(StrEnum):
    """Primitive scalar kind of a field."""

    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    STRING = "string"
    MAP = "map"
    BINARY = "binary"
    DECIMAL = "decimal"
    ID = "id"
    BINARY_ID = "binary_id"
    UTC_DATETIME = "utc_datetime"
    NAIVE_DATETIME = "naive_datetime"
    DATE = "date"
    TIME = "time"
    ANY = "any"
    UTC_DATETIME_USEC = "utc_datetime_usec"
    NAIVE_DATETIME_USEC = "naive_datetime_usec"
    TIME_USEC = "time_usec"


class Composite(StrEnum):
    """Whether a field's base type is wrapped as a bare value, array, or map."""

    ARRAY = "array"
    MAP = "map"
    NONE = "none"


class Cardinality(StrEnum):
    """Whether an embed holds one nested object or many."""

    ONE = "one"
    MANY = "many"


class ValidationKey(StrEnum):
    """Named constraints that may be attached to a field."""

    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    LESS_THAN_OR_EQUAL_TO = "less_than_or_equal_to"
    GREATER_THAN_OR_EQUAL_TO = "greater_than_or_equal_to"
    EQUAL_TO = "equal_to"
    NOT_EQUAL_TO = "not_equal_to"
    FORMAT = "format"
    SUBSET_OF = "subset_of"
    IN = "in"
    NOT_IN = "not_in"
    IS = "is"
    MIN = "min"
    MAX = "max"
    COUNT = "count"


class ValueKind(StrEnum):
    """Runtime kind a validation value must have."""

    NUMBER = "number"
    STRING = "string"
    LIST = "list"
    INTEGER = "integer"


E = TypeVar("E", bound=StrEnum)


@dataclass(frozen=True)
class Choice(Generic[E]):
    """Outcome of parsing a raw value against a closed set.

    Exactly one of ``value`` and ``error`` is set.
    """

    value: E | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def allowed_values(enum_cls: type[StrEnum]) -> list[str]:
    """Declared values of *enum_cls*, in declaration order."""
    return [member.value for member in enum_cls]


def parse_choice(enum_cls: type[E], raw: object) -> Choice[E]:
    """Parse *raw* into a member of *enum_cls* without coercion.

    Only exact string values (or existing members) are accepted; case is
    significant and no whitespace is stripped.

    Examples:
        >>> parse_choice(Cardinality, "one").value
        <Cardinality.ONE: 'one'>
        >>> parse_choice(Cardinality, "One").ok
        False
    """
    if isinstance(raw, enum_cls):
        return Choice(value=raw)
    if isinstance(raw, str):
        for member in enum_cls:
            if member.value == raw:
                return Choice(value=member)
    allowed = ", ".join(allowed_values(enum_cls))
    return Choice(error=f"{raw!r} is not one of: {allowed}")
