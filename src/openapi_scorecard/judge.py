"""Judge: run every rule over a document and fold the results into a ScoreCard."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from openapi_scorecard.core.config import DEFAULT_CONFIG, ScorecardConfig
from openapi_scorecard.core.scoring import determine_grade, round_half_up
from openapi_scorecard.core.types import CategoryScore, RuleResult, ScoreCard, Severity, Violation
from openapi_scorecard.rules import BaseRule, get_rules

logger = logging.getLogger(__name__)


def percentage(score: int, max_score: int) -> int:
    """Score as a rounded 0-100 percentage; 0 when ``max_score`` is 0."""
    if max_score <= 0:
        return 0
    return round_half_up(score / max_score * 100)


class Judge:
    """Evaluate OpenAPI documents against the configured rules.

    A judge holds no per-document state, so one instance may score any
    number of documents.

    Args:
        config: Scorecard configuration. Defaults to the built-in weights.
        rules: Rules to run. Defaults to every registered rule in canonical
            order, built from ``config``.

    Example:
        >>> judge = Judge()
        >>> card = judge.evaluate(load_spec("petstore.yaml"))
        >>> card.grade
        'A'

    """

    def __init__(
        self,
        config: ScorecardConfig | None = None,
        rules: Sequence[BaseRule] | None = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self.rules: list[BaseRule] = list(rules) if rules is not None else get_rules(self.config)

    def evaluate(self, spec: Mapping[str, Any]) -> ScoreCard:
        """Score a parsed OpenAPI document.

        Args:
            spec: Parsed document. It is only read, never modified.

        Returns:
            ScoreCard with one category per rule.

        """
        categories: list[CategoryScore] = []
        for rule in self.rules:
            result = self._run_rule(rule, spec)
            categories.append(
                CategoryScore(
                    key=rule.key,
                    name=rule.name,
                    description=rule.description,
                    score=result.score,
                    max_score=result.max_score,
                    percentage=percentage(result.score, result.max_score),
                    rule_result=result,
                )
            )

        total = sum(c.score for c in categories)
        max_total = sum(c.max_score for c in categories)
        overall = min(100, percentage(total, max_total))
        grade = determine_grade(overall, self.config.grades)

        violations = [v for c in categories for v in c.rule_result.violations]
        if not self.config.include_info_in_summary:
            violations = [v for v in violations if v.severity != Severity.INFO]

        logger.debug("Evaluated %d rules: %d/%d -> %d (%s)", len(categories), total, max_total, overall, grade)
        return ScoreCard(
            overall_score=overall,
            grade=grade,
            category_scores=tuple(categories),
            violations=tuple(violations),
        )

    def _run_rule(self, rule: BaseRule, spec: Mapping[str, Any]) -> RuleResult:
        """Run one rule; an unexpected fault becomes a zero score for that rule only."""
        try:
            result = rule.evaluate(spec)
        except Exception as e:
            logger.exception("Rule %s failed during evaluation", rule.key)
            return RuleResult(
                score=0,
                max_score=rule.weight,
                violations=(
                    Violation(
                        location=rule.key,
                        message=f"Rule '{rule.name}' failed during evaluation: {e}",
                        severity=Severity.ERROR,
                        suggestion="Report this as a scorer bug; the document may contain an unexpected structure.",
                    ),
                ),
            )

        logger.debug(
            "Rule %s: %d/%d (%d violations)", rule.key, result.score, result.max_score, len(result.violations)
        )
        return result


def evaluate_spec(spec: Mapping[str, Any], config: ScorecardConfig | None = None) -> ScoreCard:
    """Score ``spec`` with a fresh Judge."""
    return Judge(config).evaluate(spec)
