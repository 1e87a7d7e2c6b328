"""The value every service operation returns.

INVARIANT: a classified failure never leaves a service as an exception;
it comes back as ``ServiceResult(ok=False, error=...)``. Front ends only
read this type.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from scout.domain.errors import ScoutError


class ServiceError(BaseModel):
    """Why an operation failed.

    ``code`` is stable and machine-matchable (``"VALUE_KIND_MISMATCH"``,
    ``"PAYLOAD_INVALID"``, ...); ``detail`` locates the problem.
    """

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_error(cls, exc: ScoutError) -> ServiceError:
        return cls(code=exc.code, message=exc.message, detail=exc.detail())


class ServiceResult(BaseModel):
    """Outcome of one operation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Operation name, e.g. ``"compile_schema"``.
        data: Payload on success.
        warnings: Non-fatal notes.
        error: Set exactly when ``ok`` is False.
        meta: Timing and other diagnostics, only in verbose mode.
    """

    model_config = ConfigDict(frozen=True)

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failed(cls, op: str, exc: ScoutError) -> ServiceResult:
        """Failure result for a classified error."""
        return cls(ok=False, op=op, error=ServiceError.from_error(exc))
