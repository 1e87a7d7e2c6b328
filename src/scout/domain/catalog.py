"""Validation rule catalog.

Declarative table of every validation key a field may carry: the value
kind it requires, which ``(base_type, composite)`` combinations it applies
to, and the messages used at spec-construction time and at runtime.

INVARIANT: ``min``, ``max`` and ``is`` apply to string *arrays* only, not
to plain strings or numeric arrays.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from scout.domain.types import BaseType, Composite, ValidationKey, ValueKind

Applicability = Callable[[BaseType, Composite], bool]


def _numeric_scalar(base_type: BaseType, composite: Composite) -> bool:
    return base_type in (BaseType.INTEGER, BaseType.FLOAT) and composite == Composite.NONE


def _string_array(base_type: BaseType, composite: Composite) -> bool:
    return base_type == BaseType.STRING and composite == Composite.ARRAY


def _string(base_type: BaseType, composite: Composite) -> bool:
    return base_type == BaseType.STRING


def _always(base_type: BaseType, composite: Composite) -> bool:
    return True


@dataclass(frozen=True)
class ValidationRule:
    """Catalog entry for one validation key.

    Attributes:
        key: The validation key.
        value_kind: Kind the validation value must have.
        applies: Predicate over ``(base_type, composite)``.
        applies_to: Human description of the legal field shapes.
        runtime_message: ``%{token}`` template used when a value fails the
            check at runtime.
        option: Name of the runtime option the value is exposed as when
            rendering ``runtime_message`` (``None`` for no option).
    """

    key: ValidationKey
    value_kind: ValueKind
    applies: Applicability
    applies_to: str
    runtime_message: str
    option: str | None = None

    def applicability_message(self) -> str:
        return f"Validation {self.key} only applies to {self.applies_to}"

    def value_kind_message(self) -> str:
        if self.key == ValidationKey.FORMAT:
            return (
                "When validation is `format` the value must be a string "
                "holding a regular expression"
            )
        article = "an" if self.value_kind == ValueKind.INTEGER else "a"
        return f"The value must be {article} {self.value_kind} for validation `{self.key}`"


_NUMERIC_FIELDS = "fields with non-composite integer and float types"

_RULES: tuple[ValidationRule, ...] = (
    ValidationRule(
        ValidationKey.GREATER_THAN,
        ValueKind.NUMBER,
        _numeric_scalar,
        _NUMERIC_FIELDS,
        "must be greater than %{number}",
        "number",
    ),
    ValidationRule(
        ValidationKey.LESS_THAN,
        ValueKind.NUMBER,
        _numeric_scalar,
        _NUMERIC_FIELDS,
        "must be less than %{number}",
        "number",
    ),
    ValidationRule(
        ValidationKey.LESS_THAN_OR_EQUAL_TO,
        ValueKind.NUMBER,
        _numeric_scalar,
        _NUMERIC_FIELDS,
        "must be less than or equal to %{number}",
        "number",
    ),
    ValidationRule(
        ValidationKey.GREATER_THAN_OR_EQUAL_TO,
        ValueKind.NUMBER,
        _numeric_scalar,
        _NUMERIC_FIELDS,
        "must be greater than or equal to %{number}",
        "number",
    ),
    ValidationRule(
        ValidationKey.EQUAL_TO,
        ValueKind.NUMBER,
        _numeric_scalar,
        _NUMERIC_FIELDS,
        "must be equal to %{number}",
        "number",
    ),
    ValidationRule(
        ValidationKey.NOT_EQUAL_TO,
        ValueKind.NUMBER,
        _numeric_scalar,
        _NUMERIC_FIELDS,
        "must be not equal to %{number}",
        "number",
    ),
    ValidationRule(
        ValidationKey.FORMAT,
        ValueKind.STRING,
        _string,
        "string fields",
        "has invalid format",
    ),
    ValidationRule(
        ValidationKey.SUBSET_OF,
        ValueKind.LIST,
        _always,
        "any field",
        "has an invalid entry",
        "enum",
    ),
    ValidationRule(
        ValidationKey.IN,
        ValueKind.LIST,
        _always,
        "any field",
        "is invalid",
        "enum",
    ),
    ValidationRule(
        ValidationKey.NOT_IN,
        ValueKind.LIST,
        _always,
        "any field",
        "is reserved",
        "enum",
    ),
    ValidationRule(
        ValidationKey.IS,
        ValueKind.INTEGER,
        _string_array,
        "string array fields",
        "should have %{count} item(s)",
        "count",
    ),
    ValidationRule(
        ValidationKey.MIN,
        ValueKind.INTEGER,
        _string_array,
        "string array fields",
        "should have at least %{count} item(s)",
        "count",
    ),
    ValidationRule(
        ValidationKey.MAX,
        ValueKind.INTEGER,
        _string_array,
        "string array fields",
        "should have at most %{count} item(s)",
        "count",
    ),
    ValidationRule(
        ValidationKey.COUNT,
        ValueKind.INTEGER,
        _always,
        "any field",
        "should have %{count} item(s)",
        "count",
    ),
)

CATALOG: dict[ValidationKey, ValidationRule] = {rule.key: rule for rule in _RULES}


def rule_for(key: ValidationKey) -> ValidationRule:
    """Return the catalog entry for *key*."""
    return CATALOG[key]


def iter_rules() -> Iterator[ValidationRule]:
    """Iterate catalog entries in declaration order."""
    return iter(_RULES)


def required_value_kind(key: ValidationKey) -> ValueKind:
    """Kind of value *key* requires."""
    return CATALOG[key].value_kind


def is_applicable(key: ValidationKey, base_type: BaseType, composite: Composite | None) -> bool:
    """Whether *key* may be attached to a field of this shape.

    An absent *composite* is treated as :attr:`Composite.NONE`.
    """
    return CATALOG[key].applies(base_type, composite or Composite.NONE)


def is_literal(value: object) -> bool:
    """Whether *value* is a plain data literal (JSON-like, finite numbers)."""
    if value is None or isinstance(value, (bool, str, int)):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, list):
        return all(is_literal(item) for item in value)
    if isinstance(value, dict):
        return all(isinstance(k, str) and is_literal(v) for k, v in value.items())
    return False


def value_matches(key: ValidationKey, value: object) -> bool:
    """Whether *value* has the runtime kind required by *key*.

    Booleans are never numbers or integers, and non-finite floats are
    rejected.
    """
    kind = CATALOG[key].value_kind
    if kind == ValueKind.NUMBER:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        return math.isfinite(value)
    if kind == ValueKind.INTEGER:
        return isinstance(value, int) and not isinstance(value, bool)
    if kind == ValueKind.STRING:
        return isinstance(value, str)
    return isinstance(value, list) and is_literal(value)
