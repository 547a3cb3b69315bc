"""Core types for openapi-scorecard.

Rules produce ``Violation`` records collected into a ``RuleResult``; the
judge folds the seven rule results into one ``ScoreCard``. All models are
frozen and serialize with camelCase aliases (``maxScore``, ``overallScore``)
so the JSON report keeps the field names API consumers already know.

Example:
    >>> v = Violation(
    ...     path="/users",
    ...     operation="GET",
    ...     location="/users.get.responses",
    ...     message="GET operation is missing server error response codes",
    ...     severity=Severity.WARNING,
    ...     suggestion="Add a 500 Internal Server Error response",
    ... )
    >>> v.model_dump(mode="json", by_alias=True)["severity"]
    'warning'

"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Severity(StrEnum):
    """Severity of a violation.

    Severity is a quality signal about the document, not a program fault.
    Each level carries a scoring weight configured in ``SeverityWeights``.
    """

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class _FrozenModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class Violation(_FrozenModel):
    """A single best-practice violation.

    Attributes:
        path: Affected URL template, or "" for document-level issues.
        operation: Upper-case HTTP method, if the issue is operation scoped.
        location: Dotted/bracketed pointer into the document.
        message: Human-readable description of the defect.
        severity: error, warning or info.
        suggestion: Remediation hint.

    """

    path: str = ""
    operation: str | None = None
    location: str = ""
    message: str
    severity: Severity
    suggestion: str = ""


class RuleResult(_FrozenModel):
    """Outcome of one rule evaluator."""

    score: int = Field(ge=0)
    max_score: int = Field(ge=0)
    violations: tuple[Violation, ...] = ()

    def count(self, severity: Severity) -> int:
        """Number of violations with the given severity."""
        return sum(1 for v in self.violations if v.severity == severity)


class CategoryScore(_FrozenModel):
    """Per-rule breakdown entry of a scorecard."""

    key: str
    name: str
    description: str = ""
    score: int
    max_score: int
    percentage: int
    rule_result: RuleResult


class ScoreCard(_FrozenModel):
    """Final evaluation of one OpenAPI document.

    ``violations`` is the display list (info filtered out unless configured
    otherwise). Every severity stays available through each category's
    ``rule_result`` and :meth:`all_violations`.
    """

    overall_score: int = Field(ge=0, le=100)
    grade: str
    category_scores: tuple[CategoryScore, ...] = ()
    violations: tuple[Violation, ...] = ()

    def all_violations(self) -> list[Violation]:
        """Every violation from every rule, in rule order."""
        return [v for c in self.category_scores for v in c.rule_result.violations]

    def violations_by_severity(self, severity: Severity) -> list[Violation]:
        """All violations (including info) with the given severity."""
        return [v for v in self.all_violations() if v.severity == severity]

    def category(self, key: str) -> CategoryScore | None:
        """Look up a category by rule key."""
        for category in self.category_scores:
            if category.key == key:
                return category
        return None
