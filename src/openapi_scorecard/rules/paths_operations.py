"""Paths & Operations rule.

Checks URL template naming, conflicting templates, CRUD conventions per
resource group, declaration of path parameters, and HTTP method usage.

Scoring (normalized by the number of paths):
    penalty = (0.7 × errors + 0.2 × warnings + 0.1 × info) / paths
    score   = round(weight × (1 − min(1, penalty)))
then the shared error cap (``weight − 2``) applies.
"""

from __future__ import annotations

import re
from collections import defaultdict
from collections.abc import Mapping
from typing import Any

from openapi_scorecard.core.location import Location
from openapi_scorecard.core.scoring import apply_error_cap, clamp_score
from openapi_scorecard.core.types import RuleResult, Severity, Violation
from openapi_scorecard.rules.base import BaseRule
from openapi_scorecard.rules.helpers import (
    HTTP_METHODS,
    declared_path_params,
    is_param_segment,
    iter_path_operations,
    iter_paths,
    path_param_names,
    path_segments,
    response_items,
)
from openapi_scorecard.rules.registry import register_rule

PENALTY_WEIGHTS: dict[Severity, float] = {
    Severity.ERROR: 0.7,
    Severity.WARNING: 0.2,
    Severity.INFO: 0.1,
}

KEBAB_SEGMENT = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
VERSION_SEGMENT = re.compile(r"^v\d+(?:\.\d+)*$", re.IGNORECASE)
CAMEL_CASE_ID = re.compile(r"^[a-z][a-zA-Z0-9]*Id$")
SNAKE_CASE_ID = re.compile(r"^[a-z][a-z0-9]*_id$")
WORD_BOUNDARY = re.compile(r"[-_.]|(?<=[a-z0-9])(?=[A-Z])")

VERBS: frozenset[str] = frozenset(
    {
        "get",
        "create",
        "update",
        "delete",
        "list",
        "search",
        "find",
        "fetch",
        "retrieve",
        "remove",
        "add",
        "edit",
        "modify",
        "process",
    }
)

# Singular collection names that are conventional as-is
NON_COLLECTION_NAMES: frozenset[str] = frozenset({"status", "health", "ping", "version", "info", "docs", "metrics"})

# Methods whose semantics carry no request body
BODYLESS_METHODS: frozenset[str] = frozenset({"get", "delete", "head", "options", "trace"})
BODY_REQUIRED_METHODS: frozenset[str] = frozenset({"post", "put"})

WILDCARD = "{*}"


def _leading_verb(segment: str) -> str | None:
    """Return the verb a static segment starts with, e.g. 'getUsers' → 'get'."""
    words = [w for w in WORD_BOUNDARY.split(segment) if w]
    if words and words[0].lower() in VERBS:
        return words[0].lower()
    return None


def normalize_path(path: str) -> str:
    """Replace every parameter segment with a wildcard token."""
    return "/" + "/".join(WILDCARD if is_param_segment(s) else s for s in path_segments(path))


def _is_action_path(path: str) -> bool:
    return "/actions/" in path or path.endswith("/actions")


@register_rule
class PathsOperationsRule(BaseRule):
    """Consistent naming and CRUD conventions; no overlapping or redundant paths."""

    key = "paths_operations"
    name = "Paths & Operations"
    description = "Consistent naming and CRUD conventions; no overlapping or redundant paths."

    def evaluate(self, spec: Mapping[str, Any]) -> RuleResult:
        paths = dict(iter_paths(spec))
        if not paths:
            return self.result(
                0,
                [
                    self.violation(
                        Severity.ERROR,
                        "No paths defined in the API specification",
                        location="paths",
                        suggestion="Define paths for your API endpoints",
                    )
                ],
            )

        violations: list[Violation] = []
        self._check_naming(paths, violations)
        self._check_conflicts(paths, violations)
        self._check_nesting(paths, violations)
        self._check_crud(paths, violations)
        self._check_path_parameters(spec, paths, violations)
        self._check_methods(paths, violations)

        return self._score(len(paths), violations)

    def _score(self, total_paths: int, violations: list[Violation]) -> RuleResult:
        penalty = sum(PENALTY_WEIGHTS[v.severity] for v in violations) / max(1, total_paths)
        score = clamp_score(self.weight * (1 - min(1.0, penalty)), self.weight)
        score = apply_error_cap(score, self.weight, violations)
        return self.result(score, violations)

    # =========================================================================
    # Naming
    # =========================================================================

    def _check_naming(self, paths: dict[str, Mapping[str, Any]], violations: list[Violation]) -> None:
        names = list(paths)

        with_slash = [p for p in names if p != "/" and p.endswith("/")]
        without_slash = [p for p in names if p != "/" and not p.endswith("/")]
        if with_slash and without_slash:
            violations.append(
                self.violation(
                    Severity.WARNING,
                    "Inconsistent use of trailing slashes in paths",
                    location="paths",
                    suggestion="Use trailing slashes consistently across all paths or remove them all",
                )
            )

        non_kebab = [
            p
            for p in names
            if any(not is_param_segment(s) and not KEBAB_SEGMENT.match(s) for s in path_segments(p))
        ]
        if non_kebab:
            violations.append(
                self.violation(
                    Severity.WARNING,
                    "Paths should follow kebab-case naming convention",
                    path=non_kebab[0],
                    location="paths",
                    suggestion=(
                        "Use kebab-case for path segments (e.g., /user-profiles instead of "
                        f"/userProfiles or /user_profiles); {len(non_kebab)} path(s) affected"
                    ),
                )
            )

        for path in names:
            if _is_action_path(path):
                continue
            for segment in path_segments(path):
                verb = None if is_param_segment(segment) else _leading_verb(segment)
                if verb:
                    violations.append(
                        self.violation(
                            Severity.WARNING,
                            f'Path contains verb "{verb}" which should be avoided in resource paths',
                            path=path,
                            location=Location.of(path),
                            suggestion=(
                                "Use nouns for resources and HTTP methods to indicate actions. For non-CRUD "
                                'operations, consider using a dedicated "actions" resource'
                            ),
                        )
                    )
                    break

        for path in names:
            segments = path_segments(path)
            if not segments or is_param_segment(segments[-1]):
                continue
            last = segments[-1]
            if (
                last.lower().endswith("s")
                or last.lower() in NON_COLLECTION_NAMES
                or VERSION_SEGMENT.match(last)
                or _leading_verb(last)
            ):
                continue
            violations.append(
                self.violation(
                    Severity.INFO,
                    "Collection endpoints should use plural nouns",
                    path=path,
                    location=Location.of(path),
                    suggestion=f"Consider renaming to use plural form (e.g., /{last}s)",
                )
            )

    # =========================================================================
    # Structure
    # =========================================================================

    def _check_conflicts(self, paths: dict[str, Mapping[str, Any]], violations: list[Violation]) -> None:
        by_method: dict[str, list[str]] = defaultdict(list)
        for path, path_item in paths.items():
            for op in iter_path_operations(path, path_item):
                by_method[op.method].append(path)

        for method in HTTP_METHODS:
            method_paths = by_method.get(method, [])
            seen: dict[str, str] = {}
            for path in method_paths:
                normalized = normalize_path(path)
                first = seen.setdefault(normalized, path)
                if first == path:
                    continue
                violations.append(
                    self.violation(
                        Severity.WARNING,
                        f'Potential path conflict for {method.upper()} method between "{first}" and "{path}"',
                        path=first,
                        operation=method.upper(),
                        location=f'paths["{first}"] and paths["{path}"]',
                        suggestion="Ensure these paths resolve to different resources or consider consolidating them",
                    )
                )

    def _check_nesting(self, paths: dict[str, Mapping[str, Any]], violations: list[Violation]) -> None:
        top_level: dict[str, str] = {}
        nested: set[str] = set()
        for path in paths:
            segments = [s.lower() for s in path_segments(path)]
            if segments and not is_param_segment(segments[0]):
                top_level.setdefault(segments[0], path)
            if len(segments) >= 3:
                nested.update(s for s in segments[1:] if not is_param_segment(s))

        for resource, first_path in top_level.items():
            if resource in nested:
                violations.append(
                    self.violation(
                        Severity.INFO,
                        f'Resource "{resource}" appears both as top-level and nested resource',
                        path=first_path,
                        location=f'paths with resource "{resource}"',
                        suggestion="Consider if this design is intentional or if the API structure could be simplified",
                    )
                )

    def _check_crud(self, paths: dict[str, Mapping[str, Any]], violations: list[Violation]) -> None:
        groups: dict[str, list[str]] = defaultdict(list)
        for path in paths:
            segments = path_segments(path)
            if segments:
                groups[segments[0].lower()].append(path)

        for resource, group in groups.items():
            collections = [p for p in group if not is_param_segment(path_segments(p)[-1])]
            if collections:
                root = min(collections, key=lambda p: len(path_segments(p)))
                self._check_collection(resource, root, paths[root], violations)

            for path in group:
                if is_param_segment(path_segments(path)[-1]):
                    self._check_resource(path, paths[path], violations)

    def _check_collection(
        self,
        resource: str,
        path: str,
        path_item: Mapping[str, Any],
        violations: list[Violation],
    ) -> None:
        location = Location.of(path)
        if "get" not in path_item:
            violations.append(
                self.violation(
                    Severity.INFO,
                    f'Collection endpoint for "{resource}" is missing GET operation for listing',
                    path=path,
                    location=location,
                    suggestion="Consider adding GET method to retrieve a list of resources",
                )
            )
        if "post" not in path_item:
            violations.append(
                self.violation(
                    Severity.INFO,
                    f'Collection endpoint for "{resource}" is missing POST operation for creation',
                    path=path,
                    location=location,
                    suggestion="Consider adding POST method to create new resources",
                )
            )
        if "put" in path_item:
            violations.append(
                self.violation(
                    Severity.WARNING,
                    f'PUT method on collection endpoint "{path}" is unusual',
                    path=path,
                    operation="PUT",
                    location=location.child("put"),
                    suggestion="PUT is typically used for replacing a specific resource, not for collections",
                )
            )
        if "delete" in path_item:
            violations.append(
                self.violation(
                    Severity.INFO,
                    f'DELETE method on collection endpoint "{path}" should be used carefully',
                    path=path,
                    operation="DELETE",
                    location=location.child("delete"),
                    suggestion="Ensure DELETE on a collection is intentional (bulk delete) and has appropriate safeguards",
                )
            )

    def _check_resource(self, path: str, path_item: Mapping[str, Any], violations: list[Violation]) -> None:
        location = Location.of(path)
        if "get" not in path_item:
            violations.append(
                self.violation(
                    Severity.INFO,
                    f'Resource endpoint "{path}" is missing GET operation for retrieval',
                    path=path,
                    location=location,
                    suggestion="Consider adding GET method to retrieve the resource",
                )
            )
        if "put" not in path_item and "patch" not in path_item:
            violations.append(
                self.violation(
                    Severity.INFO,
                    f'Resource endpoint "{path}" is missing PUT or PATCH operation for updates',
                    path=path,
                    location=location,
                    suggestion="Consider adding PUT (full replacement) or PATCH (partial update) method",
                )
            )
        if "delete" not in path_item:
            violations.append(
                self.violation(
                    Severity.INFO,
                    f'Resource endpoint "{path}" is missing DELETE operation for deletion',
                    path=path,
                    location=location,
                    suggestion="Consider adding DELETE method to remove the resource",
                )
            )
        if "post" in path_item:
            violations.append(
                self.violation(
                    Severity.INFO,
                    f'POST method on resource endpoint "{path}" is unusual',
                    path=path,
                    operation="POST",
                    location=location.child("post"),
                    suggestion=(
                        "POST is typically used for creation or actions. Consider using PUT/PATCH for updates "
                        "or adding a sub-resource or /actions segment"
                    ),
                )
            )

    # =========================================================================
    # Parameters and methods
    # =========================================================================

    def _check_path_parameters(
        self,
        spec: Mapping[str, Any],
        paths: dict[str, Mapping[str, Any]],
        violations: list[Violation],
    ) -> None:
        id_params: set[str] = set()
        for path in paths:
            id_params.update(name for name in path_param_names(path) if name.lower().endswith("id"))

        camel = sorted(p for p in id_params if CAMEL_CASE_ID.match(p))
        snake = sorted(p for p in id_params if SNAKE_CASE_ID.match(p))
        if camel and snake:
            violations.append(
                self.violation(
                    Severity.WARNING,
                    "Inconsistent ID parameter naming conventions",
                    location="paths",
                    suggestion=(
                        f"Standardize on either camelCase ({camel[0]}) or snake_case ({snake[0]}) for ID parameters"
                    ),
                )
            )

        for path, path_item in paths.items():
            tokens = path_param_names(path)
            if not tokens:
                continue
            for op in iter_path_operations(path, path_item):
                declared = declared_path_params(spec, path_item, op.operation)
                for token in tokens:
                    if token in declared:
                        continue
                    violations.append(
                        self.violation(
                            Severity.ERROR,
                            f"Path parameter {{{token}}} is not defined in {op.verb} operation",
                            path=path,
                            operation=op.verb,
                            location=op.location,
                            suggestion=f'Add the path parameter "{token}" (in: path, required: true) to the operation parameters',
                        )
                    )

    def _check_methods(self, paths: dict[str, Mapping[str, Any]], violations: list[Violation]) -> None:
        for path, path_item in paths.items():
            for op in iter_path_operations(path, path_item):
                operation = op.operation
                location = op.location

                if op.method in BODYLESS_METHODS and "requestBody" in operation:
                    violations.append(
                        self.violation(
                            Severity.WARNING,
                            f"{op.verb} method should not have a request body",
                            path=path,
                            operation=op.verb,
                            location=location.child("requestBody"),
                            suggestion=f"Remove the request body from the {op.verb} operation or change the HTTP method",
                        )
                    )

                if op.method in BODY_REQUIRED_METHODS and "requestBody" not in operation:
                    violations.append(
                        self.violation(
                            Severity.WARNING,
                            f"{op.verb} method is missing a request body",
                            path=path,
                            operation=op.verb,
                            location=location,
                            suggestion=(
                                f"Add a request body to the {op.verb} operation or consider if another "
                                "HTTP method is more appropriate"
                            ),
                        )
                    )

                if "responses" not in operation:
                    continue
                codes = {code for code, _ in response_items(operation)}
                responses_location = location.child("responses")

                if not any(code.startswith("2") or code == "default" for code in codes):
                    violations.append(
                        self.violation(
                            Severity.WARNING,
                            f"{op.verb} operation is missing success response",
                            path=path,
                            operation=op.verb,
                            location=responses_location,
                            suggestion="Add appropriate success response codes (e.g., 200, 201, 204)",
                        )
                    )

                if op.method == "post" and "201" not in codes:
                    violations.append(
                        self.violation(
                            Severity.INFO,
                            "POST operation should typically return 201 Created for resource creation",
                            path=path,
                            operation=op.verb,
                            location=responses_location,
                            suggestion="Consider adding a 201 response for resource creation operations",
                        )
                    )

                if op.method in ("put", "patch") and not codes & {"200", "204"}:
                    violations.append(
                        self.violation(
                            Severity.INFO,
                            f"{op.verb} operation should return 200 OK or 204 No Content",
                            path=path,
                            operation=op.verb,
                            location=responses_location,
                            suggestion="Consider adding 200 (with response body) or 204 (without response body) for update operations",
                        )
                    )

                if op.method == "delete" and "204" not in codes:
                    violations.append(
                        self.violation(
                            Severity.INFO,
                            "DELETE operation should typically return 204 No Content",
                            path=path,
                            operation=op.verb,
                            location=responses_location,
                            suggestion="Consider using 204 No Content for successful deletion operations",
                        )
                    )
