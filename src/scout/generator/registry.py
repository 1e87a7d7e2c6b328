"""Caller-owned registry of generated models, keyed by qualified name."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from enum import StrEnum

from pydantic import BaseModel

from scout.domain.errors import NameCollisionError
from scout.domain.naming import qualify

logger = logging.getLogger(__name__)


class ConflictPolicy(StrEnum):
    """What to do when a name is registered twice."""

    ERROR = "error"
    OVERWRITE = "overwrite"


class TypeRegistry:
    """Explicit namespace for generated models.

    Nothing is registered implicitly; callers pass the registry to
    whatever needs it. Registering a taken name raises
    :class:`NameCollisionError` unless the policy (or the call) says to
    overwrite.

    Usage::

        registry = TypeRegistry()
        registry.register("Listing", model, prefix="shop")
        registry.get("shop.Listing")
    """

    def __init__(self, *, on_conflict: ConflictPolicy = ConflictPolicy.ERROR) -> None:
        self._on_conflict = ConflictPolicy(on_conflict)
        self._types: dict[str, type[BaseModel]] = {}

    def register(
        self,
        type_name: str,
        model: type[BaseModel],
        *,
        prefix: str | None = None,
        overwrite: bool | None = None,
    ) -> str:
        """Register *model* and return its qualified name."""
        name = qualify(type_name, prefix)
        if overwrite is None:
            overwrite = self._on_conflict == ConflictPolicy.OVERWRITE
        if name in self._types:
            if not overwrite:
                raise NameCollisionError(name)
            logger.info("Overwriting registered type %s", name)
        self._types[name] = model
        return name

    def unregister(self, name: str) -> type[BaseModel]:
        """Remove and return the model registered under *name*."""
        return self._types.pop(name)

    def get(self, name: str) -> type[BaseModel] | None:
        return self._types.get(name)

    def names(self) -> list[str]:
        """Registered names, sorted."""
        return sorted(self._types)

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._types)
