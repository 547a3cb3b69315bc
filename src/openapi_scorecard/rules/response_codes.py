"""Response Codes rule.

Scores the proportion of operations whose responses raise no error or
warning. When any error is present the score is capped at 80% of the
weight, then reduced further by ``round(errors / operations × weight × 0.5)``.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from openapi_scorecard.core.location import Location
from openapi_scorecard.core.refs import resolve
from openapi_scorecard.core.scoring import has_errors, round_half_up
from openapi_scorecard.core.types import RuleResult, Severity, Violation
from openapi_scorecard.rules.base import BaseRule
from openapi_scorecard.rules.helpers import as_list, as_mapping, iter_operations, iter_paths, response_items
from openapi_scorecard.rules.registry import register_rule

ERROR_SCORE_CAP = 0.8
ERROR_DENSITY_PENALTY = 0.5

STATUS_CODE_PATTERN = re.compile(r"^[1-5][0-9][0-9]$")

EXPECTED_SUCCESS_CODES: dict[str, tuple[str, ...]] = {
    "get": ("200", "206", "304"),
    "post": ("200", "201", "202"),
    "put": ("200", "201", "204"),
    "patch": ("200", "204"),
    "delete": ("200", "202", "204"),
    "head": ("200", "304"),
    "options": ("200", "204"),
    "trace": ("200",),
}

UNCOMMON_STATUS_CODES: frozenset[str] = frozenset(
    {
        # 2xx
        "203", "205", "208", "226",
        # 3xx
        "300", "305", "306", "307", "308",
        # 4xx
        "402", "407", "408", "411", "414", "416", "417", "418",
        "421", "423", "424", "426", "428", "431", "451",
        # 5xx
        "505", "506", "507", "508", "510", "511",
    }
)  # fmt: skip

RESOURCE_METHODS: frozenset[str] = frozenset({"get", "put", "patch", "delete"})
BODY_METHODS: frozenset[str] = frozenset({"post", "put", "patch"})


def is_default(code: str) -> bool:
    return code.lower() == "default"


@dataclass
class _OperationCheck:
    """Violations reported for one operation, and whether any counts as an issue."""

    path: str
    verb: str
    location: Location
    violations: list[Violation]
    has_issues: bool = field(default=False)


@register_rule
class ResponseCodesRule(BaseRule):
    """Appropriate status codes, with success and error responses documented."""

    key = "response_codes"
    name = "Response Codes"
    description = "Appropriate use of standard HTTP status codes, with success and error responses documented."

    def evaluate(self, spec: Mapping[str, Any]) -> RuleResult:
        operations = list(iter_operations(spec))
        if not operations:
            message = (
                "No operations defined in the API specification"
                if next(iter_paths(spec), None) is not None
                else "No paths defined in the API specification"
            )
            return self.result(
                0,
                [
                    self.violation(
                        Severity.ERROR,
                        message,
                        location="paths",
                        suggestion="Define paths and operations for your API endpoints",
                    )
                ],
            )

        violations: list[Violation] = []
        total_operations = 0
        operations_with_issues = 0
        global_security = as_list(spec.get("security"))

        for op in operations:
            total_operations += 1
            check = _OperationCheck(op.path, op.verb, op.location, violations)

            if not response_items(op.operation):
                self._add(
                    check,
                    Severity.ERROR,
                    f"{op.verb} operation is missing response definitions",
                    "Define expected response status codes and their content",
                )
            else:
                # An explicit empty list opts out of the global requirement
                if "security" in op.operation:
                    secured = bool(as_list(op.operation["security"]))
                else:
                    secured = bool(global_security)
                self._check_operation(spec, op.method, op.operation, secured, check)

            if check.has_issues:
                operations_with_issues += 1

        clean = total_operations - operations_with_issues
        score = round_half_up(clean / max(1, total_operations) * self.weight)

        if has_errors(violations):
            error_count = sum(1 for v in violations if v.severity == Severity.ERROR)
            score = min(score, round_half_up(self.weight * ERROR_SCORE_CAP))
            penalty = round_half_up(error_count / max(1, total_operations) * self.weight * ERROR_DENSITY_PENALTY)
            score = max(0, score - penalty)

        return self.result(score, violations)

    def _add(
        self,
        check: _OperationCheck,
        severity: Severity,
        message: str,
        suggestion: str,
        *segments: str,
    ) -> None:
        check.violations.append(
            self.violation(
                severity,
                message,
                path=check.path,
                operation=check.verb,
                location=check.location.child(*segments),
                suggestion=suggestion,
            )
        )
        if severity != Severity.INFO:
            check.has_issues = True

    def _check_operation(
        self,
        spec: Mapping[str, Any],
        method: str,
        operation: Mapping[str, Any],
        secured: bool,
        check: _OperationCheck,
    ) -> None:
        responses = response_items(operation)
        codes = [code for code, _ in responses]
        verb = check.verb

        self._check_success_codes(method, codes, check)

        if not any(code.startswith("4") for code in codes):
            self._add(
                check,
                Severity.WARNING,
                f"{verb} operation is missing client error response codes",
                "Add appropriate client error codes (e.g., 400, 401, 403, 404)",
                "responses",
            )
        else:
            if secured and "401" not in codes and "403" not in codes:
                self._add(
                    check,
                    Severity.WARNING,
                    f"{verb} operation with security requirements is missing authentication/authorization error codes",
                    "Add 401 Unauthorized and/or 403 Forbidden response codes for secured endpoints",
                    "responses",
                )
            if method in RESOURCE_METHODS and "{" in check.path and "404" not in codes:
                self._add(
                    check,
                    Severity.WARNING,
                    f"{verb} operation on a resource should include a 404 Not Found response",
                    "Add a 404 Not Found response for when the requested resource does not exist",
                    "responses",
                )
            if (
                method in BODY_METHODS
                and operation.get("requestBody")
                and "400" not in codes
                and "422" not in codes
            ):
                self._add(
                    check,
                    Severity.WARNING,
                    f"{verb} operation with request body should include validation error responses",
                    "Add 400 Bad Request and/or 422 Unprocessable Entity for request validation failures",
                    "responses",
                )

        if not any(code.startswith("5") for code in codes):
            self._add(
                check,
                Severity.WARNING,
                f"{verb} operation is missing server error response codes",
                "Add a 500 Internal Server Error response for unexpected server errors",
                "responses",
            )

        if not any(is_default(code) for code in codes):
            self._add(
                check,
                Severity.INFO,
                f"{verb} operation is missing a default response",
                "Consider adding a default response to handle unexpected status codes",
                "responses",
            )

        for code, response in responses:
            self._check_response(spec, method, code, response, check)

        for code in codes:
            self._check_status_code(code, check)

    def _check_success_codes(self, method: str, codes: list[str], check: _OperationCheck) -> None:
        verb = check.verb
        expected = EXPECTED_SUCCESS_CODES.get(method, ())

        if not any(code.startswith("2") or is_default(code) for code in codes):
            self._add(
                check,
                Severity.ERROR,
                f"{verb} operation is missing success response codes",
                f"Add appropriate success response codes (e.g., {', '.join(expected)})",
                "responses",
            )
            return

        defined = [code for code in codes if code.startswith("2")]
        if defined and not any(code in expected for code in defined):
            self._add(
                check,
                Severity.WARNING,
                f"{verb} operation has unusual success response codes",
                f"Consider using standard success codes for {verb}: {', '.join(expected)}",
                "responses",
            )

        # POST to a collection (last segment literal) usually creates
        if method == "post" and "201" not in codes and re.search(r"/[^/]+$", check.path):
            self._add(
                check,
                Severity.INFO,
                "POST operation to create a resource should return 201 Created",
                "Add a 201 Created response for resource creation",
                "responses",
            )

        if method in ("put", "patch") and "200" not in codes and "204" not in codes:
            self._add(
                check,
                Severity.INFO,
                f"{verb} operation should return 200 OK or 204 No Content",
                "Add 200 (with response body) or 204 (without response body) for update operations",
                "responses",
            )

        if method == "delete" and "204" not in codes and "202" not in codes:
            self._add(
                check,
                Severity.INFO,
                "DELETE operation should typically return 204 No Content or 202 Accepted",
                "Consider using 204 No Content for immediate deletion or 202 Accepted for async deletion",
                "responses",
            )

    def _check_response(
        self,
        spec: Mapping[str, Any],
        method: str,
        code: str,
        response: Any,
        check: _OperationCheck,
    ) -> None:
        resolved = resolve(response, spec)
        if resolved is None:
            self._add(
                check,
                Severity.ERROR,
                "Could not resolve response reference",
                "Ensure the response reference is valid",
                "responses",
                code,
            )
            return

        description = resolved.get("description")
        if not isinstance(description, str) or not description.strip():
            self._add(
                check,
                Severity.WARNING,
                f"Response {code} is missing a description",
                "Add a meaningful description explaining the response",
                "responses",
                code,
            )

        content = as_mapping(resolved.get("content"))
        returns_content = method in ("get", "post") or (method == "put" and code == "200")
        if code.startswith("2") and code != "204" and not content and returns_content:
            self._add(
                check,
                Severity.WARNING,
                f"Success response {code} is missing content definition",
                "Define the response content structure or use 204 No Content if no response body is returned",
                "responses",
                code,
            )

        if code[:1] in ("4", "5") and not content:
            self._add(
                check,
                Severity.INFO,
                f"Error response {code} is missing content definition",
                "Consider defining the error response structure to help API consumers handle errors",
                "responses",
                code,
            )

        for media_type, media in content.items():
            if not as_mapping(media).get("schema"):
                self._add(
                    check,
                    Severity.WARNING,
                    "Response content is missing a schema definition",
                    "Define a schema for the response content",
                    "responses",
                    code,
                    "content",
                    str(media_type),
                )

    def _check_status_code(self, code: str, check: _OperationCheck) -> None:
        if is_default(code):
            return

        if not STATUS_CODE_PATTERN.match(code):
            self._add(
                check,
                Severity.ERROR,
                f"Invalid HTTP status code: {code}",
                "Use standard HTTP status codes (100-599)",
                "responses",
                code,
            )
            return

        if code.startswith("1"):
            self._add(
                check,
                Severity.INFO,
                f"Unusual use of 1xx informational status code: {code}",
                "1xx codes are rarely used in REST APIs and may not be well-supported by clients",
                "responses",
                code,
            )

        if code in UNCOMMON_STATUS_CODES:
            self._add(
                check,
                Severity.INFO,
                f"Uncommon HTTP status code: {code}",
                "Consider using more common status codes for better client compatibility",
                "responses",
                code,
            )
