"""Markdown rendering of a scorecard."""

from __future__ import annotations

from openapi_scorecard.core.types import ScoreCard, Severity

SEVERITY_ORDER = (Severity.ERROR, Severity.WARNING, Severity.INFO)


def _escape_cell(value: str) -> str:
    return value.replace("|", "\\|").replace("\n", " ")


def render_markdown(scorecard: ScoreCard) -> str:
    """Render a Markdown report: summary, category table, violations by severity."""
    lines = [
        "# OpenAPI Scorecard",
        "",
        f"**Overall score:** {scorecard.overall_score}/100",
        "",
        f"**Grade:** {scorecard.grade}",
        "",
        "## Category Scores",
        "",
        "| Category | Score | Percentage | Errors | Warnings | Info |",
        "|----------|------:|-----------:|-------:|---------:|-----:|",
    ]
    for category in scorecard.category_scores:
        result = category.rule_result
        lines.append(
            f"| {_escape_cell(category.name)} | {category.score}/{category.max_score} | {category.percentage}% "
            f"| {result.count(Severity.ERROR)} | {result.count(Severity.WARNING)} | {result.count(Severity.INFO)} |"
        )

    lines += ["", "## Violations", ""]
    if not scorecard.violations:
        lines.append("No violations found.")
        return "\n".join(lines) + "\n"

    for severity in SEVERITY_ORDER:
        matching = [v for v in scorecard.violations if v.severity == severity]
        if not matching:
            continue
        lines += [f"### {severity.value.capitalize()} ({len(matching)})", ""]
        for violation in matching:
            where = violation.location or violation.path or "document"
            operation = f" `{violation.operation}`" if violation.operation else ""
            lines.append(f"- **`{where}`**{operation}: {violation.message}")
            if violation.suggestion:
                lines.append(f"  - *Suggestion:* {violation.suggestion}")
        lines.append("")

    return "\n".join(lines).rstrip("\n") + "\n"
