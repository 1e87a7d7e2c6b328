"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, scout.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from scout.generator.printer import DEFAULT_BASE_CLASS, DEFAULT_HEADER, split_base_class
from scout.generator.registry import ConflictPolicy


class GenerateConfig(BaseModel):
    """[generate] section."""

    model_config = {"frozen": True}

    prefix: str | None = None
    base_class: str = DEFAULT_BASE_CLASS

    @field_validator("base_class")
    @classmethod
    def check_base_class(cls, value: str) -> str:
        split_base_class(value)
        return value


class RegistryConfig(BaseModel):
    """[registry] section."""

    model_config = {"frozen": True}

    on_conflict: ConflictPolicy = ConflictPolicy.ERROR


class OutputConfig(BaseModel):
    """[output] section."""

    model_config = {"frozen": True}

    header: str | None = DEFAULT_HEADER
    indent: int = Field(default=4, ge=1, le=8)

