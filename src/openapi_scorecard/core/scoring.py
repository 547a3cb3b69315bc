"""Shared scoring helpers.

Formula used by the documentation-style rules:

    weighted = Σ severity_weight(v) / max(1, items_examined)
    score    = round(weight × (1 − weighted)), floored at 0

Where severity_weight is error=1.0, warning=0.2, info=0.0 by default.

Any error-severity violation caps the score at ``weight − 2``, so errors are
never diluted into a near-perfect score by a large denominator.

Grades (canonical 6-level table): ≥90 S, ≥80 A, ≥70 B, ≥60 C, ≥50 D, else F.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from openapi_scorecard.core.config import DEFAULT_CONFIG, GradeThresholds, SeverityWeights
from openapi_scorecard.core.types import Severity, Violation

# Points withheld from a rule that reports at least one error
ERROR_CAP_MARGIN = 2

FAIL_GRADE = "F"


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up.

    Python's built-in round() uses banker's rounding; scores follow the
    conventional rounding of the documented formulas.
    """
    return int(math.floor(value + 0.5))


def clamp_score(score: float, weight: int) -> int:
    """Round ``score`` and clamp it into ``[0, weight]``."""
    return max(0, min(weight, round_half_up(score)))


def weighted_violations(
    violations: Iterable[Violation],
    severity_weights: SeverityWeights = DEFAULT_CONFIG.severity_weights,
) -> float:
    """Sum of severity weights over ``violations``."""
    return sum(severity_weights.for_severity(v.severity) for v in violations)


def has_errors(violations: Iterable[Violation]) -> bool:
    return any(v.severity == Severity.ERROR for v in violations)


def apply_error_cap(score: int, weight: int, violations: Iterable[Violation]) -> int:
    """Cap ``score`` at ``weight - 2`` when any error is present."""
    if has_errors(violations) and score > weight - ERROR_CAP_MARGIN:
        score = weight - ERROR_CAP_MARGIN
    return max(0, score)


def calculate_score(
    violations: list[Violation],
    total_items: int,
    weight: int,
    severity_weights: SeverityWeights = DEFAULT_CONFIG.severity_weights,
) -> int:
    """Calculate a severity-weighted score for a rule.

    Args:
        violations: Violations reported by the rule.
        total_items: Number of items the rule examined (floored at 1).
        weight: The rule's maximum score.
        severity_weights: Penalty weight per severity.

    Returns:
        Integer score in ``[0, weight]``.

    Example:
        >>> # 10 items, one error and two warnings → 1.4 / 10 = 14% penalty
        >>> calculate_score(violations, 10, 20)
        17

    """
    total_items = max(1, total_items)
    weighted_percentage = weighted_violations(violations, severity_weights) / total_items
    score = clamp_score(weight * (1 - weighted_percentage), weight)
    return apply_error_cap(score, weight, violations)


def determine_grade(
    overall_score: int,
    thresholds: GradeThresholds = DEFAULT_CONFIG.grades,
) -> str:
    """Map an overall 0-100 score to a letter grade."""
    for grade, minimum in thresholds.ordered():
        if overall_score >= minimum:
            return grade
    return FAIL_GRADE
