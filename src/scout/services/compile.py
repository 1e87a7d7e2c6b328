"""CompileService: spec checking, code generation, and payload validation.

Each public method takes a raw spec mapping (or an already parsed
:class:`SchemaSpec`) and returns a :class:`ServiceResult`:

- ``check``: validate a spec and summarize its tree.
- ``compile``: generate Python source, optionally writing it to a file.
- ``materialize``: build the model in-process and register it.
- ``validate_payload``: validate data (e.g. an extraction result) against
  the generated model, with catalog messages for failed checks.
- ``catalog``: list the validation rule table.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import BaseModel, ValidationError

from scout.domain.catalog import iter_rules, rule_for
from scout.domain.errors import ScoutError, format_path
from scout.domain.messages import render
from scout.domain.naming import qualify
from scout.domain.specs import EmbedSpec, FieldSpec, SchemaSpec, parse_schema_spec
from scout.domain.types import ValidationKey
from scout.generator.builder import count_members, generate, resolve_type
from scout.generator.loader import build_model, resolve_base_class
from scout.generator.printer import SourcePrinter
from scout.generator.registry import TypeRegistry
from scout.infrastructure.documents import write_text
from scout.services.base import BaseService

if TYPE_CHECKING:
    from scout.services.result import ServiceResult

log = structlog.get_logger("scout.compile")

SpecInput = SchemaSpec | Mapping[str, Any]

_CHECK_KEYS = frozenset(str(key) for key in ValidationKey)


def _parse(spec: SpecInput) -> SchemaSpec:
    if isinstance(spec, SchemaSpec):
        return spec
    return parse_schema_spec(spec)


def _field_summary(field: FieldSpec) -> dict[str, Any]:
    return {
        "name": field.name,
        "type": str(resolve_type(field)),
        "required": field.required,
        "validations": [str(v.key) for v in field.validations],
    }


def _scope_summary(
    type_name: str,
    fields: tuple[FieldSpec, ...],
    embeds: tuple[EmbedSpec, ...],
) -> dict[str, Any]:
    return {
        "type_name": type_name,
        "fields": [_field_summary(f) for f in fields],
        "embeds": [
            {
                "field_name": e.field_name,
                "cardinality": str(e.cardinality),
                "required": e.required,
                **_scope_summary(e.type_name, e.fields, e.embeds),
            }
            for e in embeds
        ],
    }


def payload_errors(exc: ValidationError) -> list[dict[str, str]]:
    """Flatten a model ``ValidationError`` into ``{path, key, message}``.

    Failed checks are reported with the catalog's runtime message rendered
    against the check's options; other errors keep pydantic's message.
    """
    errors: list[dict[str, str]] = []
    for err in exc.errors():
        key = err["type"]
        message = err["msg"]
        if key in _CHECK_KEYS:
            message = render(rule_for(ValidationKey(key)).runtime_message, err.get("ctx") or {})
        errors.append({"path": format_path(tuple(err["loc"])), "key": key, "message": message})
    return errors


class CompileService(BaseService):
    """Compile schema specifications into pydantic models."""

    def _printer(self) -> SourcePrinter:
        return SourcePrinter(
            base_class=self._settings.generate.base_class,
            header=self._settings.output.header,
            indent=self._settings.output.indent,
            project_root=self._settings.project_root,
        )

    def new_registry(self) -> TypeRegistry:
        """Empty registry using the configured conflict policy."""
        return TypeRegistry(on_conflict=self._settings.registry.on_conflict)

    def _model(self, spec: SchemaSpec) -> type[BaseModel]:
        base = resolve_base_class(self._settings.generate.base_class)
        return build_model(generate(spec), base=base)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def check(self, spec: SpecInput) -> ServiceResult:
        """Validate a spec without generating anything."""
        op = "check_spec"
        started = time.perf_counter()
        try:
            parsed = _parse(spec)
            definition = generate(parsed)
        except ScoutError as exc:
            return self._failure(op, exc)
        summary = _scope_summary(parsed.type_name, parsed.fields, parsed.embeds)
        return self._success(
            op,
            {**summary, **count_members(definition), "depth": definition.depth()},
            started,
        )

    def compile(
        self,
        spec: SpecInput,
        *,
        prefix: str | None = None,
        out: Path | None = None,
    ) -> ServiceResult:
        """Generate Python source for a spec.

        The source is returned in ``data["source"]``, or written to *out*
        when given (``data["path"]``).
        """
        op = "compile_schema"
        started = time.perf_counter()
        prefix = prefix if prefix is not None else self._settings.generate.prefix
        try:
            parsed = _parse(spec)
            definition = generate(parsed)
            source = self._printer().render(definition)
            data: dict[str, Any] = {
                "type_name": definition.type_name,
                "qualified_name": qualify(definition.type_name, prefix),
                **count_members(definition),
                "depth": definition.depth(),
            }
            if out is not None:
                data["path"] = str(write_text(out, source))
            else:
                data["source"] = source
        except ScoutError as exc:
            return self._failure(op, exc)
        log.info(
            "compiled",
            type_name=data["qualified_name"],
            attributes=data["attributes"],
            nested_types=data["nested_types"],
        )
        return self._success(op, data, started)

    def materialize(
        self,
        spec: SpecInput,
        registry: TypeRegistry,
        *,
        prefix: str | None = None,
        overwrite: bool | None = None,
    ) -> ServiceResult:
        """Build the model in-process and register it in *registry*."""
        op = "register_schema"
        started = time.perf_counter()
        prefix = prefix if prefix is not None else self._settings.generate.prefix
        try:
            parsed = _parse(spec)
            model = self._model(parsed)
            name = registry.register(parsed.type_name, model, prefix=prefix, overwrite=overwrite)
        except ScoutError as exc:
            return self._failure(op, exc)
        except (ImportError, TypeError, ValueError) as exc:
            return self._error(op, "BASE_CLASS_INVALID", str(exc))
        return self._success(
            op,
            {"name": name, "fields": list(model.model_fields), "registered": len(registry)},
            started,
        )

    def validate_payload(self, spec: SpecInput, payload: Any) -> ServiceResult:
        """Validate *payload* against the model generated from *spec*."""
        op = "validate_payload"
        started = time.perf_counter()
        try:
            parsed = _parse(spec)
            model = self._model(parsed)
        except ScoutError as exc:
            return self._failure(op, exc)
        except (ImportError, TypeError, ValueError) as exc:
            return self._error(op, "BASE_CLASS_INVALID", str(exc))

        try:
            instance = model.model_validate(payload)
        except ValidationError as exc:
            errors = payload_errors(exc)
            return self._error(
                op,
                "PAYLOAD_INVALID",
                f"{len(errors)} validation error(s) for {parsed.type_name}",
                {"type_name": parsed.type_name, "errors": errors},
            )
        return self._success(
            op,
            {
                "type_name": parsed.type_name,
                "valid": True,
                "data": instance.model_dump(mode="json"),
            },
            started,
        )

    def catalog(self) -> ServiceResult:
        """List every validation rule."""
        items = [
            {
                "key": str(rule.key),
                "value_kind": str(rule.value_kind),
                "applies_to": rule.applies_to,
                "message": rule.runtime_message,
            }
            for rule in iter_rules()
        ]
        return self._success("catalog", {"items": items, "count": len(items)})
