"""Rich console rendering of a scorecard."""

from __future__ import annotations

import io

from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from openapi_scorecard.core.types import ScoreCard, Severity, Violation

GOOD_PERCENTAGE = 70
FAIR_PERCENTAGE = 50

SEVERITY_STYLES: dict[Severity, str] = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "yellow",
    Severity.INFO: "blue",
}

GRADE_STYLES: dict[str, str] = {
    "S": "bold magenta",
    "A": "bold green",
    "B": "green",
    "C": "yellow",
    "D": "red",
    "F": "bold red",
}


def percentage_style(percentage: int) -> str:
    """green ≥ 70%, yellow ≥ 50%, red otherwise."""
    if percentage >= GOOD_PERCENTAGE:
        return "green"
    if percentage >= FAIR_PERCENTAGE:
        return "yellow"
    return "red"


def violation_target(violation: Violation) -> str:
    """``path (OPERATION) -> location``, omitting the empty parts."""
    target = violation.path
    if violation.operation:
        target = f"{target} ({violation.operation})".strip()
    if violation.location and violation.location != violation.path:
        target = f"{target} -> {violation.location}" if target else violation.location
    return target


def _header(scorecard: ScoreCard) -> Panel:
    grade_style = GRADE_STYLES.get(scorecard.grade, "bold")
    text = Text.assemble(
        ("Overall score: ", "bold"),
        (f"{scorecard.overall_score}/100", percentage_style(scorecard.overall_score)),
        ("   Grade: ", "bold"),
        (scorecard.grade, grade_style),
    )
    return Panel(text, title="[bold blue]OpenAPI Scorecard[/bold blue]", expand=False)


def _category_table(scorecard: ScoreCard) -> Table:
    table = Table(title="Category Scores", show_header=True)
    table.add_column("Category", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("%", justify="right")
    table.add_column("Errors", justify="right", style="red")
    table.add_column("Warnings", justify="right", style="yellow")
    table.add_column("Info", justify="right", style="blue")

    for category in scorecard.category_scores:
        result = category.rule_result
        style = percentage_style(category.percentage)
        table.add_row(
            category.name,
            f"[{style}]{category.score}/{category.max_score}[/{style}]",
            f"[{style}]{category.percentage}%[/{style}]",
            str(result.count(Severity.ERROR)),
            str(result.count(Severity.WARNING)),
            str(result.count(Severity.INFO)),
        )
    return table


def _violation_lines(scorecard: ScoreCard) -> list[RenderableType]:
    if not scorecard.violations:
        return [Text("No violations found.", style="green")]

    lines: list[RenderableType] = [Text(f"Violations ({len(scorecard.violations)})", style="bold")]
    for violation in scorecard.violations:
        style = SEVERITY_STYLES[violation.severity]
        line = Text.assemble(
            (f"[{violation.severity.value.upper()}]", style),
            " ",
            (violation_target(violation), "cyan"),
        )
        lines.append(line)
        lines.append(Text(f"    {violation.message}"))
        if violation.suggestion:
            lines.append(Text(f"    → {violation.suggestion}", style="dim"))
    return lines


def build_renderables(scorecard: ScoreCard) -> Group:
    """Header panel, category table and violation list as one renderable."""
    return Group(_header(scorecard), _category_table(scorecard), Text(), *_violation_lines(scorecard))


def print_scorecard(scorecard: ScoreCard, console: Console) -> None:
    """Print the scorecard to a live console, with colors."""
    console.print(build_renderables(scorecard))


def render_console(scorecard: ScoreCard, width: int = 100) -> str:
    """Render the console report as plain text."""
    console = Console(file=io.StringIO(), width=width, record=True, color_system=None)
    print_scorecard(scorecard, console)
    return console.export_text()
