"""Markdown report builder: renders AuditReport to a structured Markdown document."""

from __future__ import annotations

from axefix.schemas.report import AuditReport

_IMPACT_ICONS = {"critical": "🔴", "serious": "🟠", "moderate": "🟡", "minor": "🟢"}


def _fence(text: str) -> str:
    lang = "css" if text.lstrip().startswith("/*") else "html"
    return f"```{lang}\n{text.rstrip()}\n```\n"


def render_markdown_report(report: AuditReport) -> str:
    """Render an AuditReport into a Markdown string."""
    sections: list[str] = []
    s = report.summary

    sections.append(f"# Accessibility Report: {report.url}\n")
    sections.append(f"*Generated: {report.generated_at}*\n")
    sections.append(f"**Conformance target:** WCAG {report.conformance_level.value}  ")
    sections.append(f"**Rule tags:** {', '.join(report.tags) or 'none'}\n")

    # Summary
    sections.append("## Summary\n")
    sections.append("| Impact | Violations |")
    sections.append("|--------|-----------:|")
    for level in ("critical", "serious", "moderate", "minor"):
        sections.append(f"| {_IMPACT_ICONS[level]} {level} | {getattr(s, level)} |")
    if s.unknown:
        sections.append(f"| ⚪ unknown | {s.unknown} |")
    sections.append(f"| **total** | **{s.total_violations}** |")
    sections.append("")
    sections.append(
        f"{s.affected_nodes} affected element(s). "
        f"Rules passed: {s.passes}, needs review: {s.incomplete}, not applicable: {s.inapplicable}.\n"
    )

    # Fixes
    if report.copy_paste_fixes:
        sections.append("## Copy-Paste Fixes\n")
        for i, fix in enumerate(report.copy_paste_fixes, 1):
            icon = _IMPACT_ICONS.get(fix.impact, "⚪")
            sections.append(f"### {i}. {icon} {fix.issue} (`{fix.rule_id}`)\n")
            sections.append(
                f"**Impact:** {fix.impact} | **Elements:** {fix.affected_element_count} | "
                f"**Tags:** {', '.join(fix.wcag_criteria) or 'none'}\n"
            )
            if fix.help_url:
                sections.append(f"[Rule documentation]({fix.help_url})\n")
            sections.append(_fence(fix.fix_text))
    else:
        sections.append("No violations found for the selected rule tags.\n")

    # Keyboard
    if report.keyboard is not None:
        kb = report.keyboard
        sections.append("## Keyboard Navigation\n")
        sections.append(
            f"Walk ended **{kb.state.value}** after {kb.steps_taken} Tab press(es); "
            f"{len(kb.tab_order)} focus stop(s) recorded.\n"
        )
        if kb.abort_reason:
            sections.append(f"> Walk aborted: {kb.abort_reason}\n")
        if kb.tab_order:
            sections.append("| # | Element | Text | Focus indicator |")
            sections.append("|---|---------|------|-----------------|")
            for step in kb.tab_order:
                indicator = "yes" if step.has_focus_indicator else "**missing**"
                text = step.text_snippet.replace("|", "\\|") or "-"
                sections.append(f"| {step.sequence_index} | `{step.label}` | {text} | {indicator} |")
            sections.append("")
        if kb.focus_traps:
            sections.append("### Focus Traps\n")
            for step in kb.focus_traps:
                sections.append(
                    f"- Focus stuck on `{step.label}` at step {step.sequence_index} "
                    "(WCAG 2.1.2 No Keyboard Trap, Level A)"
                )
            sections.append("")
        if report.focus_fixes:
            sections.append("### Focus Indicator Fixes\n")
            for fix_text in report.focus_fixes:
                sections.append(_fence(fix_text))

    # Media
    video = report.video_accessibility
    if video is not None:
        sections.append("## Video Accessibility\n")
        sections.append(
            f"{len(video.elements)} media element(s) found, "
            f"{len(video.remediations)} without caption tracks.\n"
        )
        for rem in video.remediations:
            src = rem.element.source_url or "(no source)"
            sections.append(f"### {rem.element.kind}: {src}\n")
            sections.append(f"Caption file to author: `{rem.caption_file_name}`\n")
            sections.append(_fence(rem.markup))

    return "\n".join(sections)
