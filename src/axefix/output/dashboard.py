"""Static HTML dashboard generator: renders AuditReport to a self-contained HTML file."""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from axefix.schemas.report import AuditReport

_TEMPLATE_DIR = Path(__file__).parent / "templates"


def render_dashboard(report: AuditReport) -> str:
    """Render an AuditReport into a self-contained HTML dashboard."""
    env = Environment(loader=FileSystemLoader(str(_TEMPLATE_DIR)), autoescape=True)
    template = env.get_template("dashboard.html")

    return template.render(
        url=report.url,
        generated_at=report.generated_at,
        level=report.conformance_level.value,
        tags=report.tags,
        summary=report.summary.model_dump(),
        fixes=[f.model_dump() for f in report.copy_paste_fixes],
        keyboard=report.keyboard.model_dump(mode="json") if report.keyboard else None,
        focus_fixes=report.focus_fixes,
        video=report.video_accessibility.model_dump() if report.video_accessibility else None,
    )
