"""Tests for the shared scoring helpers."""

import pytest

from openapi_scorecard.core.config import GradeThresholds, SeverityWeights
from openapi_scorecard.core.scoring import (
    apply_error_cap,
    calculate_score,
    clamp_score,
    determine_grade,
    round_half_up,
)
from openapi_scorecard.core.types import Severity, Violation


def _violations(errors: int = 0, warnings: int = 0, infos: int = 0) -> list[Violation]:
    counts = {Severity.ERROR: errors, Severity.WARNING: warnings, Severity.INFO: infos}
    return [
        Violation(message=f"{severity} {i}", severity=severity)
        for severity, count in counts.items()
        for i in range(count)
    ]


class TestRoundHalfUp:
    """Test conventional rounding."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(0.5, 1), (1.5, 2), (2.5, 3), (2.49, 2), (0.0, 0), (9.999, 10)],
    )
    def test_rounding(self, value: float, expected: int) -> None:
        """.5 always rounds up, unlike the built-in round()."""
        assert round_half_up(value) == expected


class TestClampScore:
    """Test clamping into [0, weight]."""

    def test_clamps_negative(self) -> None:
        assert clamp_score(-3.2, 10) == 0

    def test_clamps_above_weight(self) -> None:
        assert clamp_score(12, 10) == 10


class TestCalculateScore:
    """Test the severity-weighted formula."""

    def test_no_violations_is_full_weight(self) -> None:
        assert calculate_score([], 10, 20) == 20

    def test_warnings_reduce_score(self) -> None:
        """Five warnings over ten items: 1.0 / 10 = 10% penalty."""
        assert calculate_score(_violations(warnings=5), 10, 20) == 18

    def test_info_carries_no_weight(self) -> None:
        assert calculate_score(_violations(infos=50), 10, 20) == 20

    def test_error_cap_applies(self) -> None:
        """One error over many items would be 19/20; the cap forces 18."""
        assert calculate_score(_violations(errors=1), 1000, 20) == 18

    def test_mixed_example(self) -> None:
        """10 items, one error and two warnings: 1.4 / 10 = 14% penalty."""
        assert calculate_score(_violations(errors=1, warnings=2), 10, 20) == 17

    def test_zero_items_floors_denominator(self) -> None:
        """No division by zero when nothing was examined."""
        assert calculate_score(_violations(warnings=1), 0, 10) == 8

    def test_never_negative(self) -> None:
        assert calculate_score(_violations(errors=30), 5, 20) == 0

    def test_custom_severity_weights(self) -> None:
        weights = SeverityWeights(error=1.0, warning=0.5, info=0.1)
        assert calculate_score(_violations(warnings=2, infos=10), 10, 10, weights) == 8


class TestApplyErrorCap:
    """Test the error cap in isolation."""

    def test_without_errors_unchanged(self) -> None:
        assert apply_error_cap(20, 20, _violations(warnings=3)) == 20

    def test_with_errors_capped(self) -> None:
        assert apply_error_cap(20, 20, _violations(errors=1)) == 18

    def test_lower_scores_unchanged(self) -> None:
        assert apply_error_cap(5, 20, _violations(errors=1)) == 5

    def test_small_weight_does_not_go_negative(self) -> None:
        assert apply_error_cap(1, 1, _violations(errors=1)) == 0


class TestDetermineGrade:
    """Test the six-level grade table."""

    @pytest.mark.parametrize(
        ("score", "grade"),
        [(100, "S"), (90, "S"), (89, "A"), (80, "A"), (79, "B"), (70, "B"), (60, "C"), (50, "D"), (49, "F"), (0, "F")],
    )
    def test_default_thresholds(self, score: int, grade: str) -> None:
        assert determine_grade(score) == grade

    def test_custom_thresholds(self) -> None:
        thresholds = GradeThresholds(S=95, A=85, B=75, C=65, D=55)
        assert determine_grade(90, thresholds) == "A"
        assert determine_grade(54, thresholds) == "F"
