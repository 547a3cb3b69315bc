"""HTML rendering of a scorecard through a jinja2 template."""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from openapi_scorecard.core.types import ScoreCard, Severity
from openapi_scorecard.reporting.console import percentage_style

TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_NAME = "report.html.j2"


def _environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(TEMPLATE_DIR),
        autoescape=select_autoescape(["html", "j2"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["band"] = percentage_style
    return env


def render_html(scorecard: ScoreCard) -> str:
    """Render a standalone HTML page."""
    template = _environment().get_template(TEMPLATE_NAME)
    return template.render(
        scorecard=scorecard,
        severities=[Severity.ERROR, Severity.WARNING, Severity.INFO],
    )
