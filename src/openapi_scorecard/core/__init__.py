"""Core types, configuration, reference resolution and scoring."""

from openapi_scorecard.core.config import (
    DEFAULT_CONFIG,
    RULE_KEYS,
    GradeThresholds,
    RuleWeights,
    ScorecardConfig,
    SeverityWeights,
    load_config,
)
from openapi_scorecard.core.exceptions import ConfigError, ScorecardError, SpecLoadError
from openapi_scorecard.core.location import Location
from openapi_scorecard.core.refs import Reference, as_reference, classify, resolve, resolve_pointer
from openapi_scorecard.core.scoring import calculate_score, clamp_score, determine_grade
from openapi_scorecard.core.types import (
    CategoryScore,
    RuleResult,
    ScoreCard,
    Severity,
    Violation,
)

__all__ = [
    # Configuration
    "DEFAULT_CONFIG",
    "RULE_KEYS",
    "GradeThresholds",
    "RuleWeights",
    "ScorecardConfig",
    "SeverityWeights",
    "load_config",
    # Exceptions
    "ScorecardError",
    "ConfigError",
    "SpecLoadError",
    # Traversal
    "Location",
    "Reference",
    "as_reference",
    "classify",
    "resolve",
    "resolve_pointer",
    # Scoring
    "calculate_score",
    "clamp_score",
    "determine_grade",
    # Types
    "CategoryScore",
    "RuleResult",
    "ScoreCard",
    "Severity",
    "Violation",
]
