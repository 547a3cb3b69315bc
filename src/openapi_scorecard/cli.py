"""Command line interface for openapi-scorecard.

Examples:
    openapi-scorecard evaluate petstore.yaml
    openapi-scorecard evaluate petstore.yaml -f markdown -o report.md
    openapi-scorecard evaluate petstore.yaml --fail-under 70
    openapi-scorecard rules -c scorecard.yaml

"""

import json
from pathlib import Path

import typer
from rich.table import Table

from openapi_scorecard import __version__
from openapi_scorecard.cli_utils import (
    EXIT_CONFIG_ERROR,
    EXIT_ERROR,
    _error,
    _setup_logging,
    _success,
    _warning,
    console,
)
from openapi_scorecard.core.config import ScorecardConfig, load_config
from openapi_scorecard.core.exceptions import ConfigError, SpecLoadError
from openapi_scorecard.judge import Judge
from openapi_scorecard.loader import load_spec
from openapi_scorecard.reporting import ReportFormat, print_scorecard, render_report, write_report
from openapi_scorecard.rules import get_rules

app = typer.Typer(
    name="openapi-scorecard",
    help="Score OpenAPI 3 documents against API design best practices",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"openapi-scorecard {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Score OpenAPI 3 documents against API design best practices."""


def _load_config_or_exit(config_path: Path | None) -> ScorecardConfig:
    try:
        return load_config(config_path)
    except ConfigError as e:
        _error(f"Config error: {e}")
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from None


@app.command("evaluate")
def evaluate_command(
    spec: str = typer.Argument(
        ...,
        help="Path to an OpenAPI 3 document (.yaml, .yml or .json)",
    ),
    fmt: ReportFormat = typer.Option(
        ReportFormat.CONSOLE,
        "--format",
        "-f",
        help="Report format",
        case_sensitive=False,
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the report to this file instead of stdout",
    ),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML file overriding weights, severity weights and grade thresholds",
    ),
    include_info: bool = typer.Option(
        False,
        "--include-info",
        help="Include info-level violations in the violation list",
    ),
    fail_under: int | None = typer.Option(
        None,
        "--fail-under",
        min=0,
        max=100,
        help="Exit with code 1 when the overall score is below this value",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Print the parsed document as JSON before the report",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """Evaluate an OpenAPI document and print its scorecard.

    The overall score is 0-100 with a letter grade: S (90+), A (80+),
    B (70+), C (60+), D (50+), F otherwise.
    """
    _setup_logging(verbose=verbose)

    config = _load_config_or_exit(config_path)
    if include_info:
        config = config.model_copy(update={"include_info_in_summary": True})

    try:
        document = load_spec(spec)
    except SpecLoadError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_ERROR) from None

    if debug:
        typer.echo(json.dumps(document, indent=2, default=str))

    scorecard = Judge(config).evaluate(document)

    if output is not None:
        try:
            write_report(scorecard, fmt, output)
        except OSError as e:
            _error(f"Cannot write report to {output}: {e}")
            raise typer.Exit(code=EXIT_ERROR) from None
        _success(f"Report written to {output} (score {scorecard.overall_score}/100, grade {scorecard.grade})")
    elif fmt == ReportFormat.CONSOLE:
        print_scorecard(scorecard, console)
    else:
        typer.echo(render_report(scorecard, fmt))

    if fail_under is not None and scorecard.overall_score < fail_under:
        _warning(f"Overall score {scorecard.overall_score} is below the required {fail_under}")
        raise typer.Exit(code=EXIT_ERROR)


@app.command("rules")
def rules_command(
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML file overriding rule weights",
    ),
) -> None:
    """List the rules with their weights."""
    config = _load_config_or_exit(config_path)

    table = Table(title="Scorecard Rules", show_header=True)
    table.add_column("Key", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Weight", justify="right", style="green")
    table.add_column("Description")

    for rule in get_rules(config):
        table.add_row(rule.key, rule.name, str(rule.weight), rule.description)

    console.print(table)


if __name__ == "__main__":
    app()
