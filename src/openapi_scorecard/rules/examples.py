"""Examples & Samples rule.

Items checked, each counted once:

- media types of request bodies on POST, PUT and PATCH (warning when missing)
- media types of 2xx responses (warning when missing)
- operation parameters (info when missing)

Score is ``round(with_examples / checked × weight)``; full weight when
nothing needs an example.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from openapi_scorecard.core.refs import resolve
from openapi_scorecard.core.scoring import round_half_up
from openapi_scorecard.core.types import RuleResult, Severity, Violation
from openapi_scorecard.rules.base import BaseRule
from openapi_scorecard.rules.helpers import (
    OperationRef,
    as_list,
    has_example,
    iter_operations,
    media_types,
    response_items,
)
from openapi_scorecard.rules.registry import register_rule

BODY_METHODS: frozenset[str] = frozenset({"post", "put", "patch"})


@register_rule
class ExamplesRule(BaseRule):
    """Request and response bodies and parameters carry examples."""

    key = "examples"
    name = "Examples & Samples"
    description = "Request and response bodies and parameters provide example values."

    def evaluate(self, spec: Mapping[str, Any]) -> RuleResult:
        violations: list[Violation] = []
        checked = 0
        with_examples = 0

        for op in iter_operations(spec):
            for found, violation in self._check_operation(spec, op):
                checked += 1
                if found:
                    with_examples += 1
                else:
                    violations.append(violation)

        if checked == 0:
            return self.full_marks(violations)
        return self.result(round_half_up(with_examples / checked * self.weight), violations)

    def _check_operation(self, spec: Mapping[str, Any], op: OperationRef) -> list[tuple[bool, Violation]]:
        """(has example, violation to report if not) for every item of one operation."""
        items: list[tuple[bool, Violation]] = []

        if op.method in BODY_METHODS and "requestBody" in op.operation:
            body = resolve(op.operation["requestBody"], spec)
            for media_type, media in media_types(body or {}):
                items.append(
                    (
                        has_example(media),
                        self.violation(
                            Severity.WARNING,
                            f"Request body for {media_type} is missing an example.",
                            path=op.path,
                            operation=op.verb,
                            location=op.location.child("requestBody", "content", media_type),
                            suggestion="Add an `example` or `examples` field to the request body content.",
                        ),
                    )
                )

        for code, response in response_items(op.operation):
            if not code.startswith("2"):
                continue
            for media_type, media in media_types(resolve(response, spec) or {}):
                items.append(
                    (
                        has_example(media),
                        self.violation(
                            Severity.WARNING,
                            f"Response body for status {code} ({media_type}) is missing an example.",
                            path=op.path,
                            operation=op.verb,
                            location=op.location.child("responses", code, "content", media_type),
                            suggestion="Add an `example` or `examples` field to the response body content.",
                        ),
                    )
                )

        for index, parameter in enumerate(as_list(op.operation.get("parameters"))):
            resolved = resolve(parameter, spec)
            if resolved is None:
                continue
            name = resolved.get("name") or f"param_at_index_{index}"
            items.append(
                (
                    has_example(resolved),
                    self.violation(
                        Severity.INFO,
                        f"Parameter '{name}' is missing an example.",
                        path=op.path,
                        operation=op.verb,
                        location=op.location.child("parameters", str(name)),
                        suggestion="Add an `example` or `examples` field to the parameter definition.",
                    ),
                )
            )

        return items
