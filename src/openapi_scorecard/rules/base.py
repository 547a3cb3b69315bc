"""BaseRule ABC - abstract base for all rule evaluators."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, ClassVar

from openapi_scorecard.core.config import DEFAULT_CONFIG, ScorecardConfig
from openapi_scorecard.core.location import Location
from openapi_scorecard.core.scoring import clamp_score
from openapi_scorecard.core.types import RuleResult, Severity, Violation


class BaseRule(ABC):
    """Abstract base class for rule evaluators.

    A rule is stateless between calls: everything it accumulates during
    ``evaluate`` lives in locals, so one instance may evaluate many
    documents, concurrently if the caller wishes.

    Subclasses set ``key`` (the config weight key), ``name`` and
    ``description``, and implement :meth:`evaluate`.
    """

    key: ClassVar[str]
    name: ClassVar[str]
    description: ClassVar[str] = ""

    def __init__(self, config: ScorecardConfig | None = None) -> None:
        self.config = config or DEFAULT_CONFIG

    @property
    def weight(self) -> int:
        """Maximum score of this rule."""
        return self.config.weights.for_rule(self.key)

    @abstractmethod
    def evaluate(self, spec: Mapping[str, Any]) -> RuleResult:
        """Evaluate the parsed document and return this rule's result."""

    # --- concrete helpers (shared logic) ---

    def result(self, score: float, violations: list[Violation]) -> RuleResult:
        """Build a RuleResult with the score clamped into ``[0, weight]``."""
        return RuleResult(
            score=clamp_score(score, self.weight),
            max_score=self.weight,
            violations=tuple(violations),
        )

    def full_marks(self, violations: list[Violation] | None = None) -> RuleResult:
        return self.result(self.weight, violations or [])

    @staticmethod
    def violation(
        severity: Severity,
        message: str,
        *,
        path: str = "",
        operation: str | None = None,
        location: Location | str = "",
        suggestion: str = "",
    ) -> Violation:
        """Create a Violation; ``location`` may be a Location or a string."""
        return Violation(
            path=path,
            operation=operation,
            location=str(location),
            message=message,
            severity=severity,
            suggestion=suggestion,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key={self.key!r}, weight={self.weight})"
