"""Runtime support imported by generated models.

Generated classes subclass :class:`ScoutModel` and attach compiled
validations to attributes with a :class:`Checks` marker inside
``Annotated``::

    class Listing(ScoutModel):
        price: Annotated[float, Checks(greater_than=0)] = Field(description="Price")

A failing check raises a ``PydanticCustomError`` whose type is the
validation key and whose context carries the option value named in the
catalog (``number``, ``count`` or ``enum``), so callers can render the
catalog's ``%{token}`` message with :func:`scout.domain.messages.render`.
"""

from __future__ import annotations

import datetime as dt
import decimal
import re
import uuid
from collections.abc import Callable, Iterable, Mapping, Sized
from typing import Any

from pydantic import AwareDatetime, BaseModel, ConfigDict, GetCoreSchemaHandler, NaiveDatetime
from pydantic_core import PydanticCustomError, core_schema

from scout.domain.catalog import rule_for
from scout.domain.types import BaseType, ValidationKey


class ScoutModel(BaseModel):
    """Default base class for generated models."""

    model_config = ConfigDict(protected_namespaces=())


# Python type used for each base type when building models in-process.
PYTHON_TYPES: dict[BaseType, Any] = {
    BaseType.INTEGER: int,
    BaseType.FLOAT: float,
    BaseType.BOOLEAN: bool,
    BaseType.STRING: str,
    BaseType.MAP: dict[str, Any],
    BaseType.BINARY: bytes,
    BaseType.DECIMAL: decimal.Decimal,
    BaseType.ID: int,
    BaseType.BINARY_ID: uuid.UUID,
    BaseType.UTC_DATETIME: AwareDatetime,
    BaseType.NAIVE_DATETIME: NaiveDatetime,
    BaseType.DATE: dt.date,
    BaseType.TIME: dt.time,
    BaseType.ANY: Any,
    BaseType.UTC_DATETIME_USEC: AwareDatetime,
    BaseType.NAIVE_DATETIME_USEC: NaiveDatetime,
    BaseType.TIME_USEC: dt.time,
}


def _strings(value: Any) -> Iterable[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, Mapping):
        return [v for v in value.values() if isinstance(v, str)]
    if isinstance(value, (list, tuple)):
        return [v for v in value if isinstance(v, str)]
    return []


def _entries(value: Any) -> list[Any]:
    if isinstance(value, Mapping):
        return list(value.values())
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


def _length(value: Any) -> int | None:
    if isinstance(value, Sized):
        return len(value)
    return None


def _count(value: Any, expected: int) -> bool:
    length = _length(value)
    return length is None or length == expected


_PREDICATES: dict[ValidationKey, Callable[[Any, Any], bool]] = {
    ValidationKey.GREATER_THAN: lambda v, x: v > x,
    ValidationKey.LESS_THAN: lambda v, x: v < x,
    ValidationKey.LESS_THAN_OR_EQUAL_TO: lambda v, x: v <= x,
    ValidationKey.GREATER_THAN_OR_EQUAL_TO: lambda v, x: v >= x,
    ValidationKey.EQUAL_TO: lambda v, x: v == x,
    ValidationKey.NOT_EQUAL_TO: lambda v, x: v != x,
    ValidationKey.FORMAT: lambda v, x: all(x.search(s) for s in _strings(v)),
    ValidationKey.SUBSET_OF: lambda v, x: all(e in x for e in _entries(v)),
    ValidationKey.IN: lambda v, x: v in x,
    ValidationKey.NOT_IN: lambda v, x: v not in x,
    ValidationKey.IS: lambda v, x: len(v) == x,
    ValidationKey.MIN: lambda v, x: len(v) >= x,
    ValidationKey.MAX: lambda v, x: len(v) <= x,
    ValidationKey.COUNT: _count,
}


class Checks:
    """Ordered validations attached to an attribute via ``Annotated``.

    Keyword names follow the validation keys; ``in`` and ``is`` are
    spelled ``in_`` and ``is_``. ``format`` accepts a pattern string or a
    compiled ``re.Pattern``.
    """

    __slots__ = ("options",)

    def __init__(self, **options: Any) -> None:
        compiled: list[tuple[ValidationKey, Any]] = []
        for name, value in options.items():
            try:
                key = ValidationKey(name.rstrip("_"))
            except ValueError:
                raise TypeError(f"Unknown validation {name!r}") from None
            if key == ValidationKey.FORMAT and isinstance(value, str):
                value = re.compile(value)
            compiled.append((key, value))
        self.options: tuple[tuple[ValidationKey, Any], ...] = tuple(compiled)

    @classmethod
    def from_options(cls, options: Iterable[tuple[str, Any]]) -> Checks:
        """Build from ``(key, value)`` pairs, e.g. compiled AST options."""
        checks = cls()
        checks.options = tuple((ValidationKey(k), v) for k, v in options)
        return checks

    def __repr__(self) -> str:
        inner = ", ".join(f"{k}={v!r}" for k, v in self.options)
        return f"Checks({inner})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Checks):
            return NotImplemented
        return self.options == other.options

    def __hash__(self) -> int:
        return hash(tuple((k, repr(v)) for k, v in self.options))

    def __get_pydantic_core_schema__(
        self,
        source_type: Any,
        handler: GetCoreSchemaHandler,
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_after_validator_function(self.validate, handler(source_type))

    def validate(self, value: Any) -> Any:
        """Run every check in order, raising on the first failure."""
        for key, expected in self.options:
            if not _PREDICATES[key](value, expected):
                rule = rule_for(key)
                context = {rule.option: expected} if rule.option else {}
                raise PydanticCustomError(
                    str(key),
                    rule.runtime_message.replace("%{", "{"),
                    context,
                )
        return value
