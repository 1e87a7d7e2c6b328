"""Error taxonomy for spec construction, compilation, and registration.

Every failure carries a stable ``code`` so the service layer can turn it
into a :class:`~scout.services.result.ServiceError` without inspecting
message text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

Path = tuple[str | int, ...]


def format_path(path: Path) -> str:
    """Render a location tuple as a dotted path.

    Examples:
        >>> format_path(("fields", 0, "validations", 1, "value"))
        'fields[0].validations[1].value'
        >>> format_path(())
        '<root>'
    """
    if not path:
        return "<root>"
    out = ""
    for part in path:
        if isinstance(part, int):
            out += f"[{part}]"
        else:
            out += f".{part}" if out else str(part)
    return out


@dataclass(frozen=True)
class SpecIssue:
    """One problem found while constructing a spec tree."""

    code: str
    message: str
    path: Path = ()
    context: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "path": format_path(self.path),
            "message": self.message,
        }


class ScoutError(Exception):
    """Base class for all classified scout failures."""

    code = "SCOUT_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def detail(self) -> dict[str, Any]:
        return {}


class SpecError(ScoutError):
    """A spec tree could not be constructed.

    ``path`` locates the first issue; ``issues`` holds every issue found in
    the same pass so a producer can correct all of them at once.
    """

    code = "SPEC_INVALID"

    def __init__(
        self,
        message: str,
        *,
        path: Path = (),
        issues: list[SpecIssue] | None = None,
    ) -> None:
        super().__init__(message)
        self.path = path
        self.issues = issues or [SpecIssue(code=self.code, message=message, path=path)]

    def __str__(self) -> str:
        return f"{format_path(self.path)}: {self.message}"

    def detail(self) -> dict[str, Any]:
        return {
            "path": format_path(self.path),
            "issues": [issue.to_dict() for issue in self.issues],
        }


class SchemaValidationError(SpecError):
    """Inapplicable validation, out-of-set enum value, or malformed tree."""

    code = "SCHEMA_INVALID"


class ValueKindMismatchError(SpecError):
    """A validation value does not have the kind its key requires."""

    code = "VALUE_KIND_MISMATCH"


class PatternCompileError(SpecError):
    """A ``format`` validation value is not a valid regular expression."""

    code = "PATTERN_COMPILE"


class NameCollisionError(ScoutError):
    """A generated type name is already registered."""

    code = "NAME_COLLISION"

    def __init__(self, name: str) -> None:
        super().__init__(f"Type {name!r} is already registered")
        self.name = name

    def detail(self) -> dict[str, Any]:
        return {"name": self.name}


class DocumentError(ScoutError):
    """A spec or payload document could not be read or parsed."""

    code = "DOCUMENT_INVALID"

    def __init__(self, message: str, *, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source

    def detail(self) -> dict[str, Any]:
        return {"source": self.source} if self.source else {}


ERRORS_BY_CODE: dict[str, type[SpecError]] = {
    SchemaValidationError.code: SchemaValidationError,
    ValueKindMismatchError.code: ValueKindMismatchError,
    PatternCompileError.code: PatternCompileError,
}
