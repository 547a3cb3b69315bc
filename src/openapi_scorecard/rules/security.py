"""Security rule.

Scoring:
    errors present   max(0, weight − errors × weight / 2)
    otherwise        round(secured / potential × weight), where potential
                     counts mutating operations plus referenced scheme names
    nothing to check full weight (read-only API with no schemes)

Without errors, every warning then costs a further 10% of the weight.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from openapi_scorecard.core.location import Location
from openapi_scorecard.core.scoring import round_half_up
from openapi_scorecard.core.types import RuleResult, Severity, Violation
from openapi_scorecard.rules.base import BaseRule
from openapi_scorecard.rules.helpers import MUTATING_METHODS, as_list, as_mapping, iter_operations
from openapi_scorecard.rules.registry import register_rule

WARNING_PENALTY = 0.1


def scheme_names(requirements: Any) -> list[str]:
    """Scheme names used by a list of security requirement objects."""
    return [str(name) for requirement in as_list(requirements) for name in as_mapping(requirement)]


@register_rule
class SecurityRule(BaseRule):
    """Mutating operations are secured by defined schemes."""

    key = "security"
    name = "Security"
    description = "Security schemes are defined and applied to operations, especially those that modify data."

    def evaluate(self, spec: Mapping[str, Any]) -> RuleResult:
        violations: list[Violation] = []
        defined = [str(name) for name in as_mapping(as_mapping(spec.get("components")).get("securitySchemes"))]
        global_security = as_list(spec.get("security"))

        # dict keeps first-reference order for stable reports
        referenced: dict[str, None] = dict.fromkeys(scheme_names(global_security))
        potential = 0
        secured = 0
        has_mutating = False

        for op in iter_operations(spec):
            mutating = op.method in MUTATING_METHODS
            if mutating:
                has_mutating = True
                potential += 1

            is_secured = False
            if "security" in op.operation:
                requirements = as_list(op.operation["security"])
                if requirements:
                    is_secured = True
                    referenced.update(dict.fromkeys(scheme_names(requirements)))
                elif mutating:
                    violations.append(
                        self.violation(
                            Severity.WARNING,
                            f"Mutating operation {op.verb} {op.path} explicitly disables security (security: []).",
                            path=op.path,
                            operation=op.verb,
                            location=op.location,
                            suggestion="Ensure this is intentional. Mutating operations should typically be secured.",
                        )
                    )
            elif global_security:
                is_secured = True

            if not mutating:
                continue
            if is_secured:
                secured += 1
            elif defined:
                violations.append(
                    self.violation(
                        Severity.WARNING,
                        f"Mutating operation {op.verb} {op.path} is not secured, but security schemes are defined.",
                        path=op.path,
                        operation=op.verb,
                        location=op.location,
                        suggestion="Apply a security requirement to this operation or define global security.",
                    )
                )

        for name in referenced:
            potential += 1
            if name in defined:
                secured += 1
                continue
            violations.append(
                self.violation(
                    Severity.ERROR,
                    f"Security scheme '{name}' is referenced but not defined in components.securitySchemes.",
                    location="components.securitySchemes / security definitions",
                    suggestion=f"Define '{name}' in components.securitySchemes or remove the reference.",
                )
            )

        for name in defined:
            if name not in referenced:
                violations.append(
                    self.violation(
                        Severity.INFO,
                        f"Security scheme '{name}' is defined but never referenced.",
                        location=Location.of("components", "securitySchemes", name),
                        suggestion="Remove the unused security scheme or apply it to operations/globally.",
                    )
                )

        if has_mutating and not defined:
            violations.append(
                self.violation(
                    Severity.ERROR,
                    "API has mutating operations but no security schemes are defined.",
                    location="components.securitySchemes / security",
                    suggestion=(
                        "Define security schemes in components.securitySchemes and apply them to "
                        "mutating operations or globally."
                    ),
                )
            )

        return self.result(self._score(violations, potential, secured), violations)

    def _score(self, violations: list[Violation], potential: int, secured: int) -> float:
        errors = sum(1 for v in violations if v.severity == Severity.ERROR)
        if errors:
            return max(0.0, self.weight - errors * self.weight / 2)

        score: float = self.weight
        if potential > 0:
            score = round_half_up(secured / potential * self.weight)

        warnings = sum(1 for v in violations if v.severity == Severity.WARNING)
        return max(0.0, score - warnings * self.weight * WARNING_PENALTY)
