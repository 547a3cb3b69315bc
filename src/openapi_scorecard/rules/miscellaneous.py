"""Miscellaneous Best Practices rule.

A composite of independent sub-checks. Each returns ``(achieved, maximum)``
points; the rule score is ``round(Σ achieved / Σ maximum × weight)``.

    versioning       2   info.version present, semantic version
    servers          2   servers present, every URL valid
    tags             3   tags defined, all described, used by operations
    components       2   components defined, $ref used somewhere
    info             2   contact, license name
    operation ids    2   every operation has one, all unique
    external docs    1   a valid externalDocs url anywhere
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from openapi_scorecard.core.location import Location
from openapi_scorecard.core.scoring import round_half_up
from openapi_scorecard.core.types import RuleResult, Severity, Violation
from openapi_scorecard.rules.base import BaseRule
from openapi_scorecard.rules.helpers import as_list, as_mapping, has_text, iter_operations, iter_paths
from openapi_scorecard.rules.registry import register_rule

SEMVER_PATTERN = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)
# Absolute http(s) or urn URL, or a server-relative path
URL_PATTERN = re.compile(r"^(https?://|urn:)[^\s/$.?#].[^\s]*$|^/[^\s]*$", re.IGNORECASE)

MIN_PATHS_FOR_COMPONENTS = 5

Points = tuple[int, int]


def is_valid_url(value: Any) -> bool:
    return isinstance(value, str) and URL_PATTERN.match(value) is not None


def contains_ref(node: Any) -> bool:
    """True if any mapping in ``node`` has a ``$ref`` key."""
    stack = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, Mapping):
            if "$ref" in current:
                return True
            stack.extend(current.values())
        elif isinstance(current, list):
            stack.extend(current)
    return False


@register_rule
class MiscellaneousRule(BaseRule):
    """Versioning, servers, tags, reuse, contact and license, operation ids, external docs."""

    key = "miscellaneous"
    name = "Miscellaneous Best Practices"
    description = (
        "Versioning, server definitions, tags, reusable components, contact and license "
        "info, unique operationIds, and external documentation."
    )

    def evaluate(self, spec: Mapping[str, Any]) -> RuleResult:
        violations: list[Violation] = []
        checks = (
            self._check_versioning,
            self._check_servers,
            self._check_tags,
            self._check_components,
            self._check_info,
            self._check_operation_ids,
            self._check_external_docs,
        )

        achieved = 0
        maximum = 0
        for check in checks:
            points, max_points = check(spec, violations)
            achieved += points
            maximum += max_points

        if next(iter_paths(spec), None) is None or maximum == 0:
            return self.full_marks(violations)
        return self.result(round_half_up(achieved / maximum * self.weight), violations)

    def _check_versioning(self, spec: Mapping[str, Any], violations: list[Violation]) -> Points:
        version = as_mapping(spec.get("info")).get("version")
        if version is None or str(version).strip() == "":
            violations.append(
                self.violation(
                    Severity.WARNING,
                    "API version (`info.version`) is missing.",
                    location="info.version",
                    suggestion="Define the API version in `info.version`.",
                )
            )
            return 0, 2

        # YAML reads "1.0" as a float
        version = str(version)
        if SEMVER_PATTERN.match(version):
            return 2, 2
        violations.append(
            self.violation(
                Severity.INFO,
                f"API version '{version}' is not in a standard semantic version format.",
                location="info.version",
                suggestion="Use semantic versioning (e.g., 1.0.0, 2.1.0-beta).",
            )
        )
        return 1, 2

    def _check_servers(self, spec: Mapping[str, Any], violations: list[Violation]) -> Points:
        servers = as_list(spec.get("servers"))
        if not servers:
            violations.append(
                self.violation(
                    Severity.WARNING,
                    "The `servers` array is missing or empty.",
                    location="servers",
                    suggestion="Define at least one server URL for the API.",
                )
            )
            return 0, 2

        all_valid = True
        for index, server in enumerate(servers):
            server = as_mapping(server)
            url = server.get("url")
            if not is_valid_url(url):
                all_valid = False
                violations.append(
                    self.violation(
                        Severity.WARNING,
                        f"Server URL '{url or ''}' is invalid or missing.",
                        location=Location.of("servers", index, "url"),
                        suggestion="Ensure server URLs are valid (e.g., https://api.example.com/v1, /api/v1).",
                    )
                )
            if not has_text(server.get("description")):
                violations.append(
                    self.violation(
                        Severity.INFO,
                        f"Server at URL '{url or ''}' is missing a description.",
                        location=Location.of("servers", index),
                        suggestion='Add a description for each server (e.g., "Production", "Staging").',
                    )
                )
        return (2 if all_valid else 1), 2

    def _check_tags(self, spec: Mapping[str, Any], violations: list[Violation]) -> Points:
        points = 0
        tags = [as_mapping(tag) for tag in as_list(spec.get("tags"))]
        defined = {str(tag["name"]) for tag in tags if tag.get("name")}

        if tags:
            points += 1
            undescribed = [str(tag.get("name", "")) for tag in tags if not has_text(tag.get("description"))]
            if not undescribed:
                points += 1
            for name in undescribed:
                violations.append(
                    self.violation(
                        Severity.INFO,
                        f"Tag '{name}' is missing a description.",
                        location="tags",
                        suggestion="Describe each tag so readers know which operations it groups.",
                    )
                )

        operations = list(iter_operations(spec))
        used: dict[str, None] = {}
        for op in operations:
            used.update(dict.fromkeys(str(tag) for tag in as_list(op.operation.get("tags"))))

        if used:
            points += 1
            for name in used:
                if name in defined:
                    continue
                violations.append(
                    self.violation(
                        Severity.WARNING,
                        f"Tag '{name}' is used in an operation but not defined in the root `tags` array.",
                        location="operation.tags / spec.tags",
                        suggestion=f"Define tag '{name}' in the root `tags` array.",
                    )
                )
        elif operations and defined:
            violations.append(
                self.violation(
                    Severity.INFO,
                    "Tags are defined, but no operations use them.",
                    location="operations",
                    suggestion="Assign defined tags to operations for organization.",
                )
            )
        elif operations:
            violations.append(
                self.violation(
                    Severity.INFO,
                    "Operations exist but no tags are defined or used. Consider using tags.",
                    location="spec.tags / operations",
                    suggestion="Define and use tags for better API organization.",
                )
            )
        return points, 3

    def _check_components(self, spec: Mapping[str, Any], violations: list[Violation]) -> Points:
        components = as_mapping(spec.get("components"))
        defined = any(isinstance(section, Mapping) and section for section in components.values())
        points = 1 if defined else 0

        if contains_ref(spec):
            return points + 1, 2

        path_count = sum(1 for _ in iter_paths(spec))
        if path_count >= MIN_PATHS_FOR_COMPONENTS:
            if defined:
                violations.append(
                    self.violation(
                        Severity.INFO,
                        "Components are defined, but no `$ref` keywords were found, suggesting they might not be reused.",
                        location="components / various",
                        suggestion="Use `$ref` to reference items from `components` for reusability.",
                    )
                )
            else:
                violations.append(
                    self.violation(
                        Severity.INFO,
                        "API has several paths but does not define or use reusable components.",
                        location="components",
                        suggestion="Define reusable schemas, responses, parameters, etc., in the `components` section.",
                    )
                )
        return points, 2

    def _check_info(self, spec: Mapping[str, Any], violations: list[Violation]) -> Points:
        info = as_mapping(spec.get("info"))
        points = 0

        contact = as_mapping(info.get("contact"))
        if any(contact.get(field) for field in ("name", "email", "url")):
            points += 1
        else:
            violations.append(
                self.violation(
                    Severity.INFO,
                    "Contact information (`info.contact`) is missing or empty.",
                    location="info.contact",
                    suggestion="Add contact details (name, email, or URL) to `info.contact`.",
                )
            )

        if as_mapping(info.get("license")).get("name"):
            points += 1
        else:
            violations.append(
                self.violation(
                    Severity.INFO,
                    "License information (`info.license.name`) is missing.",
                    location="info.license",
                    suggestion="Add license details (at least `name`) to `info.license`.",
                )
            )
        return points, 2

    def _check_operation_ids(self, spec: Mapping[str, Any], violations: list[Violation]) -> Points:
        seen: set[str] = set()
        count = 0
        all_present = True
        duplicate = False

        for op in iter_operations(spec):
            count += 1
            operation_id = op.operation.get("operationId")
            if not has_text(operation_id):
                all_present = False
                violations.append(
                    self.violation(
                        Severity.WARNING,
                        f"Operation {op.verb} {op.path} is missing an `operationId`.",
                        path=op.path,
                        operation=op.verb,
                        location=op.location,
                        suggestion="Add a unique `operationId` to each operation.",
                    )
                )
            elif operation_id in seen:
                duplicate = True
                violations.append(
                    self.violation(
                        Severity.ERROR,
                        f"Duplicate operationId '{operation_id}'. Must be unique.",
                        path=op.path,
                        operation=op.verb,
                        location=op.location.child("operationId"),
                        suggestion="Ensure all operationIds are unique.",
                    )
                )
            else:
                seen.add(operation_id)

        if count == 0:
            return 2, 2
        if not all_present:
            return 0, 2
        return (1 if duplicate else 2), 2

    def _check_external_docs(self, spec: Mapping[str, Any], violations: list[Violation]) -> Points:
        candidates: list[tuple[Any, Location]] = [(spec.get("externalDocs"), Location.of("externalDocs"))]
        for index, tag in enumerate(as_list(spec.get("tags"))):
            candidates.append((as_mapping(tag).get("externalDocs"), Location.of("tags", index, "externalDocs")))
        for op in iter_operations(spec):
            candidates.append((op.operation.get("externalDocs"), op.location.child("externalDocs")))

        present = [(docs, location) for docs, location in candidates if docs is not None]
        valid = False
        for docs, location in present:
            if is_valid_url(as_mapping(docs).get("url")):
                valid = True
                continue
            violations.append(
                self.violation(
                    Severity.INFO,
                    f"ExternalDocumentation object at '{location}' is missing a valid 'url'.",
                    location=location,
                    suggestion="Provide a valid 'url' for the external documentation.",
                )
            )

        if valid:
            return 1, 1
        if not present:
            violations.append(
                self.violation(
                    Severity.INFO,
                    "Consider using `externalDocs` for links to additional documentation.",
                    location="spec",
                    suggestion="Use `externalDocs` at the root, tag, or operation level.",
                )
            )
        return 0, 1
