"""Tests for scorecard configuration models and YAML loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from openapi_scorecard.core.config import (
    DEFAULT_CONFIG,
    RULE_KEYS,
    GradeThresholds,
    RuleWeights,
    ScorecardConfig,
    load_config,
)
from openapi_scorecard.core.exceptions import ConfigError
from openapi_scorecard.core.types import Severity


class TestDefaults:
    """Test built-in default configuration."""

    def test_default_weights_sum_to_100(self) -> None:
        assert sum(DEFAULT_CONFIG.weights.for_rule(key) for key in RULE_KEYS) == 100

    def test_default_weights_per_rule(self) -> None:
        weights = DEFAULT_CONFIG.weights
        assert weights.schema_types == 20
        assert weights.description_docs == 20
        assert weights.paths_operations == 15
        assert weights.response_codes == 15
        assert weights.examples == 10
        assert weights.security == 10
        assert weights.miscellaneous == 10

    def test_default_severity_weights(self) -> None:
        severity_weights = DEFAULT_CONFIG.severity_weights
        assert severity_weights.for_severity(Severity.ERROR) == 1.0
        assert severity_weights.for_severity(Severity.WARNING) == 0.2
        assert severity_weights.for_severity(Severity.INFO) == 0.0

    def test_default_grades(self) -> None:
        assert DEFAULT_CONFIG.grades.ordered() == [("S", 90), ("A", 80), ("B", 70), ("C", 60), ("D", 50)]

    def test_config_is_frozen(self) -> None:
        """Rules cannot mutate the shared configuration."""
        with pytest.raises(ValidationError):
            DEFAULT_CONFIG.min_description_length = 1  # type: ignore[misc]


class TestValidation:
    """Test model validators."""

    def test_weights_must_sum_to_100(self) -> None:
        with pytest.raises(ValidationError, match="sum to 100"):
            RuleWeights(schema_types=30)

    def test_rebalanced_weights_accepted(self) -> None:
        weights = RuleWeights(schema_types=25, description_docs=15)
        assert weights.for_rule("schema_types") == 25

    def test_unknown_weight_key_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RuleWeights.model_validate({"schema_types": 20, "bogus": 0})

    def test_grades_must_descend(self) -> None:
        with pytest.raises(ValidationError, match="strictly decrease"):
            GradeThresholds(S=80, A=80)

    def test_min_description_length_positive(self) -> None:
        with pytest.raises(ValidationError):
            ScorecardConfig(min_description_length=0)


class TestLoadConfig:
    """Test loading configuration from YAML files."""

    def test_none_returns_defaults(self) -> None:
        assert load_config(None) is DEFAULT_CONFIG

    def test_loads_partial_override(self, tmp_path: Path) -> None:
        """Unspecified fields keep their defaults."""
        path = tmp_path / "scorecard.yaml"
        path.write_text(
            "weights:\n  schema_types: 25\n  description_docs: 15\nmin_description_length: 8\n",
            encoding="utf-8",
        )
        config = load_config(path)
        assert config.weights.schema_types == 25
        assert config.weights.security == 10
        assert config.min_description_length == 8
        assert config.grades.S == 90

    def test_empty_file_returns_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == DEFAULT_CONFIG

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Cannot read"):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_yaml_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("weights: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_non_mapping_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- one\n- two\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_validation_failure_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "weights.yaml"
        path.write_text("weights:\n  schema_types: 50\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_config(path)
