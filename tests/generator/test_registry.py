"""Tests for the caller-owned type registry."""

from __future__ import annotations

import pytest
from pydantic import BaseModel

from scout.domain.errors import NameCollisionError
from scout.generator.registry import ConflictPolicy, TypeRegistry


class First(BaseModel):
    pass


class Second(BaseModel):
    pass


class TestTypeRegistry:
    def test_register_returns_qualified_name(self) -> None:
        registry = TypeRegistry()
        assert registry.register("Listing", First, prefix="shop") == "shop.Listing"
        assert registry.get("shop.Listing") is First
        assert "shop.Listing" in registry
        assert "Listing" not in registry

    def test_collision_raises(self) -> None:
        registry = TypeRegistry()
        registry.register("Listing", First)
        with pytest.raises(NameCollisionError) as exc_info:
            registry.register("Listing", Second)
        assert exc_info.value.name == "Listing"
        assert registry.get("Listing") is First

    def test_same_name_under_other_prefix(self) -> None:
        registry = TypeRegistry()
        registry.register("Listing", First, prefix="a")
        registry.register("Listing", Second, prefix="b")
        assert registry.names() == ["a.Listing", "b.Listing"]

    def test_overwrite_per_call(self) -> None:
        registry = TypeRegistry()
        registry.register("Listing", First)
        registry.register("Listing", Second, overwrite=True)
        assert registry.get("Listing") is Second

    def test_overwrite_policy(self) -> None:
        registry = TypeRegistry(on_conflict=ConflictPolicy.OVERWRITE)
        registry.register("Listing", First)
        registry.register("Listing", Second)
        assert registry.get("Listing") is Second

    def test_call_can_refuse_under_overwrite_policy(self) -> None:
        registry = TypeRegistry(on_conflict="overwrite")
        registry.register("Listing", First)
        with pytest.raises(NameCollisionError):
            registry.register("Listing", Second, overwrite=False)

    def test_unregister(self) -> None:
        registry = TypeRegistry()
        registry.register("Listing", First)
        assert registry.unregister("Listing") is First
        assert len(registry) == 0
        with pytest.raises(KeyError):
            registry.unregister("Listing")

    def test_iteration_sorted(self) -> None:
        registry = TypeRegistry()
        registry.register("B", First)
        registry.register("A", Second)
        assert list(registry) == ["A", "B"]
        assert registry.get("C") is None

    def test_registries_are_independent(self) -> None:
        one, two = TypeRegistry(), TypeRegistry()
        one.register("Listing", First)
        assert "Listing" not in two
