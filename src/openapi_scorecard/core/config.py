"""Scorecard configuration models.

The configuration is built once (defaults, or a YAML file) and passed by
reference into the judge and every rule constructor. All models are frozen,
so a rule can never change the weights another rule sees.

Usage:
    from openapi_scorecard.core.config import ScorecardConfig, load_config

    config = load_config(Path("scorecard.yaml"))
    judge = Judge(config)

Example YAML:
    weights:
      schema_types: 25
      description_docs: 15
    min_description_length: 8
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Self

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from openapi_scorecard.core.exceptions import ConfigError
from openapi_scorecard.core.types import Severity

logger = logging.getLogger(__name__)

# Canonical rule order; also the order of categories in a scorecard
RULE_KEYS: tuple[str, ...] = (
    "schema_types",
    "description_docs",
    "paths_operations",
    "response_codes",
    "examples",
    "security",
    "miscellaneous",
)

TOTAL_WEIGHT = 100


class RuleWeights(BaseModel):
    """Maximum score of each rule.

    Weights must sum to 100 so the overall score is directly a percentage.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    schema_types: int = Field(default=20, ge=0)
    description_docs: int = Field(default=20, ge=0)
    paths_operations: int = Field(default=15, ge=0)
    response_codes: int = Field(default=15, ge=0)
    examples: int = Field(default=10, ge=0)
    security: int = Field(default=10, ge=0)
    miscellaneous: int = Field(default=10, ge=0)

    @model_validator(mode="after")
    def validate_weights_sum(self) -> Self:
        """Ensure rule weights sum to 100."""
        total = sum(self.for_rule(key) for key in RULE_KEYS)
        if total != TOTAL_WEIGHT:
            raise ValueError(f"rule weights must sum to {TOTAL_WEIGHT}, got {total}")
        return self

    def for_rule(self, key: str) -> int:
        """Weight for a rule key."""
        return int(getattr(self, key))


class SeverityWeights(BaseModel):
    """Penalty units contributed by one violation of each severity."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    error: float = Field(default=1.0, ge=0.0, le=1.0)
    warning: float = Field(default=0.2, ge=0.0, le=1.0)
    info: float = Field(default=0.0, ge=0.0, le=1.0)

    def for_severity(self, severity: Severity) -> float:
        return float(getattr(self, severity.value))


class GradeThresholds(BaseModel):
    """Minimum overall score for each letter grade; anything lower is F."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    S: int = Field(default=90, ge=0, le=100)
    A: int = Field(default=80, ge=0, le=100)
    B: int = Field(default=70, ge=0, le=100)
    C: int = Field(default=60, ge=0, le=100)
    D: int = Field(default=50, ge=0, le=100)

    @model_validator(mode="after")
    def validate_descending(self) -> Self:
        """Ensure thresholds strictly decrease from S to D."""
        values = [self.S, self.A, self.B, self.C, self.D]
        if any(high <= low for high, low in zip(values, values[1:], strict=False)):
            raise ValueError("grade thresholds must strictly decrease from S to D")
        return self

    def ordered(self) -> list[tuple[str, int]]:
        """(grade, threshold) pairs from best to worst."""
        return [("S", self.S), ("A", self.A), ("B", self.B), ("C", self.C), ("D", self.D)]


class ScorecardConfig(BaseModel):
    """Root configuration for an evaluation.

    Attributes:
        weights: Per-rule maximum scores.
        severity_weights: Penalty weight per violation severity.
        grades: Letter grade thresholds.
        min_description_length: Trimmed length a description needs to count
            as meaningful.
        max_schema_depth: Deepest schema nesting the schema rule descends
            into before reporting an error.
        include_info_in_summary: Keep info violations in the top-level
            scorecard violation list.

    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    weights: RuleWeights = Field(default_factory=RuleWeights)
    severity_weights: SeverityWeights = Field(default_factory=SeverityWeights)
    grades: GradeThresholds = Field(default_factory=GradeThresholds)
    min_description_length: int = Field(default=5, ge=1)
    max_schema_depth: int = Field(default=64, ge=1)
    include_info_in_summary: bool = False


DEFAULT_CONFIG = ScorecardConfig()


def load_config(path: Path | None = None) -> ScorecardConfig:
    """Load configuration from a YAML file.

    Args:
        path: YAML file to read. None returns the defaults.

    Returns:
        Validated, frozen ScorecardConfig.

    Raises:
        ConfigError: If the file cannot be read, is not valid YAML, or fails
            validation.

    """
    if path is None:
        return DEFAULT_CONFIG

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    try:
        data = yaml.safe_load(raw) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping at the top level")

    try:
        config = ScorecardConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    logger.debug("Loaded config from %s", path)
    return config
