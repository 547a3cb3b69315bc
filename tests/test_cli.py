"""Tests for the openapi-scorecard command line interface."""

import json
from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from openapi_scorecard.cli import app
from openapi_scorecard.cli_utils import EXIT_CONFIG_ERROR, EXIT_ERROR, EXIT_SUCCESS

runner = CliRunner()


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def minimal_yaml(tmp_path: Path, minimal_spec) -> Path:
    """Minimal document written as YAML; scores 50."""
    path = tmp_path / "minimal.yaml"
    path.write_text(yaml.safe_dump(minimal_spec), encoding="utf-8")
    return path


@pytest.fixture
def bad_weights_config(tmp_path: Path) -> Path:
    path = tmp_path / "scorecard.yaml"
    path.write_text("weights:\n  schema_types: 50\n", encoding="utf-8")
    return path


# =============================================================================
# evaluate
# =============================================================================


class TestEvaluate:
    """Test the evaluate command."""

    def test_console_report(self, petstore_yaml: Path) -> None:
        result = runner.invoke(app, ["evaluate", str(petstore_yaml)])
        assert result.exit_code == EXIT_SUCCESS
        assert "OpenAPI Scorecard" in result.output
        assert "Category Scores" in result.output

    def test_json_report(self, petstore_json: Path) -> None:
        result = runner.invoke(app, ["evaluate", str(petstore_json), "--format", "json"])
        assert result.exit_code == EXIT_SUCCESS
        data = json.loads(result.output)
        assert data["grade"] == "S"
        assert len(data["categoryScores"]) == 7

    def test_format_is_case_insensitive(self, minimal_yaml: Path) -> None:
        result = runner.invoke(app, ["evaluate", str(minimal_yaml), "-f", "MARKDOWN"])
        assert result.exit_code == EXIT_SUCCESS
        assert "**Overall score:** 50/100" in result.output

    def test_include_info(self, minimal_yaml: Path) -> None:
        plain = json.loads(runner.invoke(app, ["evaluate", str(minimal_yaml), "-f", "json"]).output)
        with_info = json.loads(
            runner.invoke(app, ["evaluate", str(minimal_yaml), "-f", "json", "--include-info"]).output
        )
        assert all(v["severity"] != "info" for v in plain["violations"])
        assert any(v["severity"] == "info" for v in with_info["violations"])
        assert plain["overallScore"] == with_info["overallScore"]

    def test_output_file(self, minimal_yaml: Path, tmp_path: Path) -> None:
        output = tmp_path / "out" / "report.md"
        result = runner.invoke(app, ["evaluate", str(minimal_yaml), "-f", "markdown", "-o", str(output)])
        assert result.exit_code == EXIT_SUCCESS
        assert "Report written to" in result.output
        assert output.read_text(encoding="utf-8").startswith("# OpenAPI Scorecard")

    def test_debug_prints_document(self, minimal_yaml: Path) -> None:
        result = runner.invoke(app, ["evaluate", str(minimal_yaml), "-f", "markdown", "--debug"])
        assert result.exit_code == EXIT_SUCCESS
        assert '"openapi": "3.0.3"' in result.output

    def test_fail_under(self, minimal_yaml: Path) -> None:
        result = runner.invoke(app, ["evaluate", str(minimal_yaml), "-f", "json", "--fail-under", "70"])
        assert result.exit_code == EXIT_ERROR
        assert "below the required 70" in result.output

    def test_fail_under_met(self, minimal_yaml: Path) -> None:
        result = runner.invoke(app, ["evaluate", str(minimal_yaml), "-f", "json", "--fail-under", "50"])
        assert result.exit_code == EXIT_SUCCESS

    def test_fail_under_out_of_range(self, minimal_yaml: Path) -> None:
        result = runner.invoke(app, ["evaluate", str(minimal_yaml), "--fail-under", "101"])
        assert result.exit_code != EXIT_SUCCESS

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["evaluate", str(tmp_path / "missing.yaml")])
        assert result.exit_code == EXIT_ERROR
        assert "File not found" in result.output

    def test_swagger_document(self, tmp_path: Path) -> None:
        path = tmp_path / "swagger.json"
        path.write_text(json.dumps({"swagger": "2.0", "info": {}}), encoding="utf-8")
        result = runner.invoke(app, ["evaluate", str(path)])
        assert result.exit_code == EXIT_ERROR
        assert "Swagger 2.0" in result.output

    def test_invalid_config(self, minimal_yaml: Path, bad_weights_config: Path) -> None:
        result = runner.invoke(app, ["evaluate", str(minimal_yaml), "-c", str(bad_weights_config)])
        assert result.exit_code == EXIT_CONFIG_ERROR
        assert "Config error" in result.output


# =============================================================================
# rules / --version
# =============================================================================


class TestRules:
    """Test the rules command."""

    def test_lists_rules(self) -> None:
        result = runner.invoke(app, ["rules"])
        assert result.exit_code == EXIT_SUCCESS
        assert "Scorecard Rules" in result.output
        assert "Security" in result.output

    def test_invalid_config(self, bad_weights_config: Path) -> None:
        result = runner.invoke(app, ["rules", "--config", str(bad_weights_config)])
        assert result.exit_code == EXIT_CONFIG_ERROR


class TestVersion:
    """Test the --version flag."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == EXIT_SUCCESS
        assert "openapi-scorecard" in result.output
