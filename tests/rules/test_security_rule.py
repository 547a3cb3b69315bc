"""Tests for the Security rule."""

from typing import Any

from openapi_scorecard.core.types import RuleResult, Severity
from openapi_scorecard.rules.security import SecurityRule, scheme_names

_OK = {"responses": {"200": {"description": "OK"}}}
_API_KEY = {"securitySchemes": {"apiKey": {"type": "apiKey", "in": "header", "name": "X-API-Key"}}}


def _evaluate(make_spec, paths: dict[str, Any], **extra: Any) -> RuleResult:
    return SecurityRule().evaluate(make_spec(paths=paths, **extra))


def _messages(result: RuleResult, severity: Severity) -> list[str]:
    return [v.message for v in result.violations if v.severity == severity]


class TestSchemes:
    """Test scheme definitions and references."""

    def test_mutating_without_schemes_is_error(self, make_spec) -> None:
        result = _evaluate(make_spec, {"/users": {"post": _OK}})
        [error] = _messages(result, Severity.ERROR)
        assert "no security schemes are defined" in error
        assert result.score < 10
        assert result.score == 5

    def test_read_only_api_without_schemes_is_full(self, make_spec) -> None:
        result = _evaluate(make_spec, {"/users": {"get": _OK}})
        assert result.violations == ()
        assert result.score == 10

    def test_undefined_scheme_is_error(self, make_spec) -> None:
        result = _evaluate(make_spec, {"/users": {"get": _OK}}, components=_API_KEY, security=[{"oauth": []}])
        errors = _messages(result, Severity.ERROR)
        assert errors == ["Security scheme 'oauth' is referenced but not defined in components.securitySchemes."]
        assert result.score == 5

    def test_unused_scheme_is_info(self, make_spec) -> None:
        result = _evaluate(make_spec, {"/users": {"get": _OK}}, components=_API_KEY)
        [violation] = result.violations
        assert violation.severity == Severity.INFO
        assert violation.location == "components.securitySchemes.apiKey"

    def test_scheme_names(self) -> None:
        assert scheme_names([{"a": []}, {"b": [], "c": ["read"]}]) == ["a", "b", "c"]
        assert scheme_names(None) == []


class TestOperations:
    """Test how operations are secured."""

    def test_operation_level_security(self, make_spec) -> None:
        result = _evaluate(make_spec, {"/users": {"post": {**_OK, "security": [{"apiKey": []}]}}}, components=_API_KEY)
        assert result.violations == ()
        assert result.score == 10

    def test_global_security_covers_operations(self, make_spec) -> None:
        result = _evaluate(
            make_spec,
            {"/users": {"post": _OK, "delete": _OK}},
            components=_API_KEY,
            security=[{"apiKey": []}],
        )
        assert result.violations == ()
        assert result.score == 10

    def test_explicitly_disabled_security_warns(self, make_spec) -> None:
        result = _evaluate(
            make_spec,
            {"/users": {"post": {**_OK, "security": []}}},
            components=_API_KEY,
            security=[{"apiKey": []}],
        )
        warnings = _messages(result, Severity.WARNING)
        assert "Mutating operation POST /users explicitly disables security (security: [])." in warnings

    def test_disabled_security_on_read_is_fine(self, make_spec) -> None:
        result = _evaluate(
            make_spec,
            {"/health": {"get": {**_OK, "security": []}}},
            components=_API_KEY,
            security=[{"apiKey": []}],
        )
        assert _messages(result, Severity.WARNING) == []

    def test_unsecured_mutating_operation_warns(self, make_spec) -> None:
        result = _evaluate(
            make_spec,
            {
                "/users": {"post": {**_OK, "security": [{"apiKey": []}]}},
                "/teams": {"post": _OK},
            },
            components=_API_KEY,
        )
        [warning] = _messages(result, Severity.WARNING)
        assert warning == "Mutating operation POST /teams is not secured, but security schemes are defined."
        # 2 of 3 secured (7), minus 10% of the weight for the warning
        assert result.score == 6


class TestScoring:
    """Test scores on complete documents."""

    def test_petstore_scores_full(self, petstore_spec) -> None:
        result = SecurityRule().evaluate(petstore_spec)
        assert result.violations == ()
        assert result.score == 10

    def test_two_errors_score_zero(self, make_spec) -> None:
        result = _evaluate(make_spec, {"/users": {"post": {**_OK, "security": [{"oauth": []}]}}})
        assert len(_messages(result, Severity.ERROR)) == 2
        assert result.score == 0
