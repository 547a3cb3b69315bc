"""Scorecard reports.

Rendering is presentation only; nothing here feeds back into scoring.

Usage:
    from openapi_scorecard.reporting import ReportFormat, render_report, write_report

    text = render_report(scorecard, ReportFormat.MARKDOWN)
    write_report(scorecard, ReportFormat.HTML, Path("report.html"))
"""

from __future__ import annotations

import logging
import os
import tempfile
from enum import StrEnum
from pathlib import Path

from openapi_scorecard.core.types import ScoreCard
from openapi_scorecard.reporting.console import print_scorecard, render_console
from openapi_scorecard.reporting.html import render_html
from openapi_scorecard.reporting.markdown import render_markdown

logger = logging.getLogger(__name__)


class ReportFormat(StrEnum):
    """Output formats for a scorecard report."""

    CONSOLE = "console"
    MARKDOWN = "markdown"
    JSON = "json"
    HTML = "html"


def render_json(scorecard: ScoreCard) -> str:
    """Serialize with camelCase keys (``overallScore``, ``categoryScores``)."""
    return scorecard.model_dump_json(by_alias=True, indent=2)


def render_report(scorecard: ScoreCard, fmt: ReportFormat | str) -> str:
    """Render a scorecard in the requested format.

    Raises:
        ValueError: If ``fmt`` is not a known format.

    """
    fmt = ReportFormat(fmt)
    if fmt == ReportFormat.CONSOLE:
        return render_console(scorecard)
    if fmt == ReportFormat.MARKDOWN:
        return render_markdown(scorecard)
    if fmt == ReportFormat.JSON:
        return render_json(scorecard)
    return render_html(scorecard)


def write_report(scorecard: ScoreCard, fmt: ReportFormat | str, output: Path) -> Path:
    """Render and write a report to ``output``.

    The write is atomic using temp file + rename, so a reader never sees a
    half-written report.

    Returns:
        The path written.

    """
    content = render_report(scorecard, fmt)
    output.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(mode="w", delete=False, encoding="utf-8", dir=output.parent) as temp_file:
        temp_path = Path(temp_file.name)
        try:
            temp_file.write(content)
            if not content.endswith("\n"):
                temp_file.write("\n")
        except OSError:
            temp_file.close()
            temp_path.unlink(missing_ok=True)
            raise

    try:
        os.replace(temp_path, output)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise

    logger.debug("Wrote %s report to %s", ReportFormat(fmt).value, output)
    return output


__all__ = [
    "ReportFormat",
    "print_scorecard",
    "render_console",
    "render_html",
    "render_json",
    "render_markdown",
    "render_report",
    "write_report",
]
