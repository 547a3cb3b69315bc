"""Schema & Types rule.

Recursively validates every schema reachable from components, parameters,
request bodies, responses and response headers: nested properties, array
items, ``additionalProperties`` and ``allOf``/``oneOf``/``anyOf`` branches.

Scoring:
    location_ratio = |schema locations with a scored violation| / schemas
    weighted_ratio = Σ severity_weight(v) / schemas
    score          = round(weight × (1 − (location_ratio + weighted_ratio) / 2))

A location enters the penalty set at most once no matter how many checks it
fails; informational findings and the missing-example warning are reported
but never enter the set. Any error caps the score at ``weight − 2``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from openapi_scorecard.core.location import Location
from openapi_scorecard.core.refs import as_reference, resolve
from openapi_scorecard.core.scoring import apply_error_cap, clamp_score, weighted_violations
from openapi_scorecard.core.types import RuleResult, Severity, Violation
from openapi_scorecard.rules.base import BaseRule
from openapi_scorecard.rules.helpers import (
    HTTP_METHODS,
    as_list,
    as_mapping,
    iter_operations,
    media_types,
    ref_or_name,
    response_items,
)
from openapi_scorecard.rules.registry import register_rule

logger = logging.getLogger(__name__)

PRIMITIVE_TYPES: tuple[str, ...] = ("string", "number", "integer", "boolean", "array", "object", "null")
STRING_FORMATS: tuple[str, ...] = (
    "date",
    "date-time",
    "password",
    "byte",
    "binary",
    "email",
    "uuid",
    "uri",
    "hostname",
    "ipv4",
    "ipv6",
)
NUMBER_FORMATS: tuple[str, ...] = ("float", "double", "int32", "int64")
COMPOSITION_KEYWORDS: tuple[str, ...] = ("allOf", "oneOf", "anyOf")

# Component schemas are validated once at their own location
COMPONENT_SCHEMA_PREFIX = "#/components/schemas/"


def _schema_types(schema: Mapping[str, Any]) -> list[str]:
    """``type`` as a list; OpenAPI 3.1 allows an array of type names."""
    declared = schema.get("type")
    if isinstance(declared, str):
        return [declared]
    if isinstance(declared, list):
        return [str(t) for t in declared]
    return []


def _is_component_schema_pointer(pointer: str) -> bool:
    tail = pointer[len(COMPONENT_SCHEMA_PREFIX) :]
    return pointer.startswith(COMPONENT_SCHEMA_PREFIX) and bool(tail) and "/" not in tail


@dataclass
class _SchemaAudit:
    """Accumulators for one evaluation. Never shared between calls."""

    spec: Mapping[str, Any]
    max_depth: int
    violations: list[Violation] = field(default_factory=list)
    flagged: set[str] = field(default_factory=set)
    total: int = 0

    def report(
        self,
        location: Location,
        severity: Severity,
        message: str,
        suggestion: str,
        *,
        scored: bool = True,
    ) -> None:
        path = location.root
        operation = None
        if path.startswith("/") and location.depth > 1 and location.segments[1] in HTTP_METHODS:
            operation = str(location.segments[1]).upper()
        self.violations.append(
            Violation(
                path=path,
                operation=operation,
                location=location.render(),
                message=message,
                severity=severity,
                suggestion=suggestion,
            )
        )
        if scored:
            self.flagged.add(location.render())


@register_rule
class SchemaTypesRule(BaseRule):
    """Proper use of data types, schema definitions and type constraints."""

    key = "schema_types"
    name = "Schema & Types"
    description = "Evaluates proper use of data types, schema definitions, and type constraints"

    def evaluate(self, spec: Mapping[str, Any]) -> RuleResult:
        audit = _SchemaAudit(spec=spec, max_depth=self.config.max_schema_depth)

        self._check_components(audit)
        self._check_paths(audit)

        logger.debug(
            "Schema audit: %d schemas, %d flagged locations, %d violations",
            audit.total,
            len(audit.flagged),
            len(audit.violations),
        )
        return self._score(audit)

    def _score(self, audit: _SchemaAudit) -> RuleResult:
        total = max(1, audit.total)
        location_ratio = min(1.0, len(audit.flagged) / total)
        weighted_ratio = weighted_violations(audit.violations, self.config.severity_weights) / total
        combined = (location_ratio + weighted_ratio) / 2

        score = clamp_score(self.weight * (1 - combined), self.weight)
        score = apply_error_cap(score, self.weight, audit.violations)
        return self.result(score, audit.violations)

    # =========================================================================
    # Roots
    # =========================================================================

    def _check_components(self, audit: _SchemaAudit) -> None:
        components = as_mapping(audit.spec.get("components"))
        base = Location.of("components")

        for name, schema in as_mapping(components.get("schemas")).items():
            self._validate(audit, schema, base.child("schemas", str(name)))

        for name, parameter in as_mapping(components.get("parameters")).items():
            self._check_parameter(audit, parameter, base.child("parameters", str(name)))

        for name, body in as_mapping(components.get("requestBodies")).items():
            self._check_content(audit, resolve(body, audit.spec), base.child("requestBodies", str(name)))

        for name, response in as_mapping(components.get("responses")).items():
            self._check_response(audit, response, base.child("responses", str(name)))

        for name, header in as_mapping(components.get("headers")).items():
            self._check_header(audit, header, base.child("headers", str(name)))

    def _check_paths(self, audit: _SchemaAudit) -> None:
        checked_path_params: set[str] = set()

        for op in iter_operations(audit.spec):
            op_location = op.location

            if op.path not in checked_path_params:
                checked_path_params.add(op.path)
                for index, parameter in enumerate(as_list(op.path_item.get("parameters"))):
                    name = ref_or_name(resolve(parameter, audit.spec) or parameter, f"index{index}")
                    self._check_parameter(audit, parameter, Location.of(op.path, "parameters", name))

            if "requestBody" in op.operation:
                self._check_content(
                    audit,
                    resolve(op.operation["requestBody"], audit.spec),
                    op_location.child("requestBody"),
                )

            for code, response in response_items(op.operation):
                self._check_response(audit, response, op_location.child("responses", code))

            for index, parameter in enumerate(as_list(op.operation.get("parameters"))):
                name = ref_or_name(resolve(parameter, audit.spec) or parameter, f"index{index}")
                self._check_parameter(audit, parameter, op_location.child("parameters", name))

    def _check_parameter(self, audit: _SchemaAudit, parameter: Any, location: Location) -> None:
        resolved = resolve(parameter, audit.spec)
        if resolved is not None and "schema" in resolved:
            self._validate(audit, resolved["schema"], location.child("schema"))

    def _check_content(self, audit: _SchemaAudit, body: Mapping[str, Any] | None, location: Location) -> None:
        if body is None:
            return
        for media_type, media in media_types(body):
            if "schema" in media:
                self._validate(audit, media["schema"], location.child("content", media_type, "schema"))

    def _check_response(self, audit: _SchemaAudit, response: Any, location: Location) -> None:
        resolved = resolve(response, audit.spec)
        if resolved is None:
            return
        self._check_content(audit, resolved, location)
        for name, header in as_mapping(resolved.get("headers")).items():
            self._check_header(audit, header, location.child("headers", str(name)))

    def _check_header(self, audit: _SchemaAudit, header: Any, location: Location) -> None:
        resolved = resolve(header, audit.spec)
        if resolved is None:
            ref = as_reference(header)
            if ref is not None:
                audit.report(
                    location,
                    Severity.ERROR,
                    f"Unresolved header reference: {ref.pointer}",
                    f"Ensure the reference '{ref.pointer}' points to a header in components.headers.",
                )
            return
        if "schema" in resolved:
            self._validate(audit, resolved["schema"], location.child("schema"))

    # =========================================================================
    # Recursive validation
    # =========================================================================

    def _validate(
        self,
        audit: _SchemaAudit,
        node: Any,
        location: Location,
        active_refs: frozenset[str] = frozenset(),
        depth: int = 0,
    ) -> None:
        ref = as_reference(node)
        if ref is not None:
            # A $ref already on this branch is a recursive schema; it was validated above
            if ref.pointer in active_refs:
                return
            # Component schemas are validated at their own location
            if _is_component_schema_pointer(ref.pointer) and resolve(node, audit.spec) is not None:
                return
            active_refs = active_refs | {ref.pointer}

        if isinstance(node, bool):
            # JSON Schema boolean schema (true/false)
            return

        audit.total += 1

        if depth >= audit.max_depth:
            audit.report(
                location,
                Severity.ERROR,
                f"Schema nesting exceeds maximum depth of {audit.max_depth}",
                "Flatten the schema or extract nested parts into components.",
            )
            return

        schema = resolve(node, audit.spec)
        if schema is None:
            if ref is not None:
                audit.report(
                    location,
                    Severity.ERROR,
                    f"Unresolved schema reference: {ref.pointer}",
                    f"Ensure the reference '{ref.pointer}' points to a valid schema in the components or elsewhere.",
                )
                return
            schema = {}

        types = _schema_types(schema)
        has_composition = any(kw in schema for kw in COMPOSITION_KEYWORDS)

        self._check_type(audit, types, has_composition, location)

        if "object" in types:
            self._check_object(audit, schema, has_composition, location, active_refs, depth)

        if "array" in types:
            if "items" not in schema:
                audit.report(
                    location,
                    Severity.ERROR,
                    "Array schema lacks a type definition for its elements (missing items)",
                    "Define items schema to specify the type of array elements",
                )
            else:
                self._validate(audit, schema["items"], location.child("items"), active_refs, depth + 1)

        self._check_format(audit, schema, types, location)
        self._check_enum(audit, schema, types, location)

        for keyword in COMPOSITION_KEYWORDS:
            for index, branch in enumerate(as_list(schema.get(keyword))):
                self._validate(audit, branch, location.child(keyword, index), active_refs, depth + 1)

        self._check_documentation(audit, schema, types, location)

    def _check_type(
        self,
        audit: _SchemaAudit,
        types: list[str],
        has_composition: bool,
        location: Location,
    ) -> None:
        if not types and not has_composition:
            audit.report(
                location,
                Severity.ERROR,
                "Schema lacks a type definition or composition keyword (allOf, oneOf, anyOf)",
                "Define an explicit type (string, number, object, etc.) or use a composition keyword.",
            )
            return

        invalid = [t for t in types if t not in PRIMITIVE_TYPES]
        if invalid:
            audit.report(
                location,
                Severity.ERROR,
                f"Schema uses invalid type: '{invalid[0]}'",
                f"Use standard OpenAPI types: {', '.join(PRIMITIVE_TYPES)}",
            )

    def _check_object(
        self,
        audit: _SchemaAudit,
        schema: Mapping[str, Any],
        has_composition: bool,
        location: Location,
        active_refs: frozenset[str],
        depth: int,
    ) -> None:
        properties = schema.get("properties")
        additional = schema.get("additionalProperties")
        has_structure = isinstance(properties, Mapping) or additional is True or isinstance(additional, Mapping)

        if not has_structure and not has_composition:
            audit.report(
                location,
                Severity.WARNING,
                "Object schema has no properties or additionalProperties defined and is not using composition",
                "Define properties, use additionalProperties, or use composition keywords to specify object structure",
            )

        for prop_name, prop_schema in as_mapping(properties).items():
            self._validate(
                audit,
                prop_schema,
                location.child("properties", str(prop_name)),
                active_refs,
                depth + 1,
            )

        if isinstance(additional, Mapping):
            self._validate(audit, additional, location.child("additionalProperties"), active_refs, depth + 1)

        if as_mapping(properties) and not as_list(schema.get("required")):
            audit.report(
                location,
                Severity.INFO,
                "Object schema has properties defined but none are marked as required",
                "Specify which properties are required for more precise validation",
                scored=False,
            )

        if additional is True and not as_mapping(properties) and not has_composition:
            audit.report(
                location,
                Severity.WARNING,
                "Schema defines a completely free-form object with no defined properties or composition",
                "Define specific properties or a schema for additionalProperties for better type safety and clarity.",
            )

    def _check_format(
        self,
        audit: _SchemaAudit,
        schema: Mapping[str, Any],
        types: list[str],
        location: Location,
    ) -> None:
        fmt = schema.get("format")
        if not isinstance(fmt, str) or not fmt:
            return

        if "string" in types and fmt not in STRING_FORMATS:
            audit.report(
                location,
                Severity.INFO,
                f"String uses non-standard format: '{fmt}'",
                f"Consider using standard formats: {', '.join(STRING_FORMATS)}",
                scored=False,
            )
        if ("number" in types or "integer" in types) and fmt not in NUMBER_FORMATS:
            audit.report(
                location,
                Severity.INFO,
                f"Number uses non-standard format: '{fmt}'",
                f"Consider using standard formats: {', '.join(NUMBER_FORMATS)}",
                scored=False,
            )

    def _check_enum(
        self,
        audit: _SchemaAudit,
        schema: Mapping[str, Any],
        types: list[str],
        location: Location,
    ) -> None:
        if "enum" not in schema or not isinstance(schema["enum"], list):
            return
        values = schema["enum"]

        if not values:
            audit.report(
                location,
                Severity.ERROR,
                "Schema has empty enum array",
                "Add enum values or remove the enum keyword",
            )

        if None in values and schema.get("nullable") is not True and "null" not in types:
            audit.report(
                location,
                Severity.WARNING,
                'Enum includes null but schema is not marked as nullable or does not include "null" in type array',
                'Add nullable: true or include "null" in the type array (for OpenAPI 3.1+).',
            )

    def _check_documentation(
        self,
        audit: _SchemaAudit,
        schema: Mapping[str, Any],
        types: list[str],
        location: Location,
    ) -> None:
        if not schema.get("description"):
            audit.report(
                location,
                Severity.INFO,
                "Schema is missing a description",
                "Add a description to explain the purpose of the schema.",
                scored=False,
            )

        if "example" not in schema and not schema.get("examples"):
            complex_shape = "object" in types or "array" in types
            audit.report(
                location,
                Severity.WARNING if complex_shape else Severity.INFO,
                "Schema is missing examples (example or examples)",
                "Add example or examples to improve documentation and understanding.",
                scored=False,
            )
