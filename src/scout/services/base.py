"""BaseService: shared plumbing for scout services.

Every service receives the frozen :class:`ScoutSettings` at construction
and turns classified failures into ``ServiceResult(ok=False)``.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from scout.domain.errors import ScoutError
from scout.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from scout.config.settings import ScoutSettings

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes.

    Usage::

        class CompileService(BaseService):
            def compile(self, data) -> ServiceResult:
                started = time.perf_counter()
                try:
                    ...
                except ScoutError as exc:
                    return self._failure("compile_schema", exc)
                return self._success("compile_schema", {...}, started)
    """

    def __init__(self, settings: ScoutSettings) -> None:
        self._settings = settings

    def _success(
        self,
        op: str,
        data: dict[str, Any],
        started: float | None = None,
        *,
        warnings: list[str] | None = None,
    ) -> ServiceResult:
        meta = None
        if self._settings.verbose and started is not None:
            meta = {"duration_ms": round((time.perf_counter() - started) * 1000, 2)}
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings or [], meta=meta)

    def _failure(self, op: str, exc: ScoutError) -> ServiceResult:
        logger.debug("%s failed: %s", op, exc)
        return ServiceResult.failed(op, exc)

    def _error(
        self,
        op: str,
        code: str,
        message: str,
        detail: dict[str, Any] | None = None,
    ) -> ServiceResult:
        logger.debug("%s failed: %s", op, message)
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(code=code, message=message, detail=detail or {}),
        )
