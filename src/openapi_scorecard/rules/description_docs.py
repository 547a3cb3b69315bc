"""Description & Documentation rule.

Every documented element counts as one examined item; a missing or too
short description yields one violation for that item. Severity per element:

    API info, operations, responses      error
    paths, parameters, request bodies,
    component schemas                    warning
    schema properties                    info

Score uses the shared severity-weighted formula with the error cap.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from openapi_scorecard.core.location import Location
from openapi_scorecard.core.refs import as_reference, resolve
from openapi_scorecard.core.scoring import calculate_score
from openapi_scorecard.core.types import RuleResult, Severity, Violation
from openapi_scorecard.rules.base import BaseRule
from openapi_scorecard.rules.helpers import (
    as_list,
    as_mapping,
    has_text,
    iter_path_operations,
    iter_paths,
    ref_or_name,
    response_items,
)
from openapi_scorecard.rules.registry import register_rule


@dataclass
class _DocsTally:
    violations: list[Violation] = field(default_factory=list)
    total: int = 0


@register_rule
class DescriptionDocsRule(BaseRule):
    """Meaningful descriptions on every path, operation, parameter, body and response."""

    key = "description_docs"
    name = "Description & Documentation"
    description = (
        "All paths, operations, parameters, request bodies, and responses include "
        "meaningful description fields."
    )

    def evaluate(self, spec: Mapping[str, Any]) -> RuleResult:
        tally = _DocsTally()

        self._check_info(spec, tally)
        self._check_paths(spec, tally)
        self._check_component_schemas(spec, tally)

        score = calculate_score(tally.violations, tally.total, self.weight, self.config.severity_weights)
        return self.result(score, tally.violations)

    def _described(self, value: Any) -> bool:
        return has_text(value, self.config.min_description_length)

    def _check_info(self, spec: Mapping[str, Any], tally: _DocsTally) -> None:
        tally.total += 1
        if not self._described(as_mapping(spec.get("info")).get("description")):
            tally.violations.append(
                self.violation(
                    Severity.ERROR,
                    "API info is missing a meaningful description",
                    location=Location.of("info", "description"),
                    suggestion="Add a detailed description explaining the purpose and usage of the API",
                )
            )

    def _check_paths(self, spec: Mapping[str, Any], tally: _DocsTally) -> None:
        for path, path_item in iter_paths(spec):
            tally.total += 1
            if not self._described(path_item.get("description")):
                tally.violations.append(
                    self.violation(
                        Severity.WARNING,
                        "Path is missing a meaningful description",
                        path=path,
                        location=Location.of(path, "description"),
                        suggestion="Add a description explaining the purpose of this path",
                    )
                )

            self._check_parameters(spec, path_item.get("parameters"), path, None, Location.of(path), tally)

            for op in iter_path_operations(path, path_item):
                operation = op.operation
                tally.total += 1
                if not self._described(operation.get("description")) and not self._described(
                    operation.get("summary")
                ):
                    tally.violations.append(
                        self.violation(
                            Severity.ERROR,
                            "Operation is missing both a meaningful description and summary",
                            path=path,
                            operation=op.verb,
                            location=op.location,
                            suggestion=(
                                "Add a detailed description or at least a summary explaining "
                                "what this operation does"
                            ),
                        )
                    )

                self._check_parameters(spec, operation.get("parameters"), path, op.verb, op.location, tally)

                if "requestBody" in operation:
                    self._check_request_body(spec, operation["requestBody"], path, op.verb, op.location, tally)

                for code, response in response_items(operation):
                    self._check_response(spec, response, code, path, op.verb, op.location, tally)

    def _unresolved(
        self,
        kind: str,
        pointer: str,
        path: str,
        verb: str | None,
        location: Location,
    ) -> Violation:
        return self.violation(
            Severity.ERROR,
            f"Unresolved {kind} reference: {pointer}",
            path=path,
            operation=verb,
            location=location,
            suggestion=f"Ensure the reference '{pointer}' points to an existing {kind} in components.",
        )

    def _check_parameters(
        self,
        spec: Mapping[str, Any],
        parameters: Any,
        path: str,
        verb: str | None,
        base: Location,
        tally: _DocsTally,
    ) -> None:
        for index, parameter in enumerate(as_list(parameters)):
            tally.total += 1
            name = ref_or_name(parameter, f"index{index}")
            location = base.child("parameters", name)
            resolved = resolve(parameter, spec)

            if resolved is None:
                ref = as_reference(parameter)
                if ref is not None:
                    tally.violations.append(self._unresolved("parameter", ref.pointer, path, verb, location))
                continue

            name = ref_or_name(resolved, name)
            if not self._described(resolved.get("description")):
                tally.violations.append(
                    self.violation(
                        Severity.WARNING,
                        f"Parameter '{name}' is missing a meaningful description",
                        path=path,
                        operation=verb,
                        location=location,
                        suggestion="Add a description explaining the purpose and expected values of this parameter",
                    )
                )

    def _check_request_body(
        self,
        spec: Mapping[str, Any],
        body: Any,
        path: str,
        verb: str,
        base: Location,
        tally: _DocsTally,
    ) -> None:
        tally.total += 1
        location = base.child("requestBody")
        resolved = resolve(body, spec)

        if resolved is None:
            ref = as_reference(body)
            if ref is not None:
                tally.violations.append(self._unresolved("request body", ref.pointer, path, verb, location))
            return

        if not self._described(resolved.get("description")):
            tally.violations.append(
                self.violation(
                    Severity.WARNING,
                    "Request body is missing a meaningful description",
                    path=path,
                    operation=verb,
                    location=location,
                    suggestion="Add a description explaining the expected structure and purpose of the request body",
                )
            )

    def _check_response(
        self,
        spec: Mapping[str, Any],
        response: Any,
        code: str,
        path: str,
        verb: str,
        base: Location,
        tally: _DocsTally,
    ) -> None:
        tally.total += 1
        location = base.child("responses", code)
        resolved = resolve(response, spec)

        if resolved is None:
            ref = as_reference(response)
            if ref is not None:
                tally.violations.append(self._unresolved("response", ref.pointer, path, verb, location))
            return

        if not self._described(resolved.get("description")):
            tally.violations.append(
                self.violation(
                    Severity.ERROR,
                    f"Response {code} is missing a meaningful description",
                    path=path,
                    operation=verb,
                    location=location,
                    suggestion="Add a description explaining the meaning of this response and when it occurs",
                )
            )

    def _check_component_schemas(self, spec: Mapping[str, Any], tally: _DocsTally) -> None:
        schemas = as_mapping(as_mapping(spec.get("components")).get("schemas"))
        for schema_name, schema in schemas.items():
            if not isinstance(schema, Mapping) or as_reference(schema) is not None:
                continue

            location = Location.of("components", "schemas", str(schema_name))
            tally.total += 1
            if not self._described(schema.get("description")):
                tally.violations.append(
                    self.violation(
                        Severity.WARNING,
                        "Schema is missing a meaningful description",
                        path="components",
                        location=location,
                        suggestion="Add a description explaining the purpose and structure of this schema",
                    )
                )

            if schema.get("type") != "object":
                continue
            for prop_name, prop in as_mapping(schema.get("properties")).items():
                if not isinstance(prop, Mapping) or as_reference(prop) is not None:
                    continue
                tally.total += 1
                if not self._described(prop.get("description")):
                    tally.violations.append(
                        self.violation(
                            Severity.INFO,
                            "Property is missing a meaningful description",
                            path="components",
                            location=location.child("properties", str(prop_name)),
                            suggestion="Add a description explaining the purpose and expected values of this property",
                        )
                    )
