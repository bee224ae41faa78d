"""Tests for Markdown report generation."""

from __future__ import annotations

from axefix.output.markdown import render_markdown_report
from axefix.schemas.report import AuditReport


class TestMarkdownReport:
    def test_header_and_summary(self, sample_report: AuditReport) -> None:
        md = render_markdown_report(sample_report)
        assert md.startswith("# Accessibility Report: https://example.com")
        assert "**Conformance target:** WCAG AA" in md
        assert "| 🔴 critical | 1 |" in md
        assert "| 🟠 serious | 1 |" in md
        assert "| **total** | **2** |" in md
        assert "3 affected element(s)" in md

    def test_fixes_in_order_with_fences(self, sample_report: AuditReport) -> None:
        md = render_markdown_report(sample_report)
        assert md.index("`image-alt`") < md.index("`color-contrast`")
        assert "```html" in md
        assert "[Rule documentation](https://dequeuniversity.com/rules/axe/4.10/image-alt)" in md

    def test_keyboard_section(self, sample_report: AuditReport) -> None:
        md = render_markdown_report(sample_report)
        assert "Walk ended **trapped** after 3 Tab press(es)" in md
        assert "| 0 | `button#save` | save text | **missing** |" in md
        assert "Focus stuck on `button#menu` at step 2" in md
        assert "2.1.2" in md
        assert "```css" in md

    def test_video_section(self, sample_report: AuditReport) -> None:
        md = render_markdown_report(sample_report)
        assert "## Video Accessibility" in md
        assert "### VIDEO: /media/intro.mp4" in md
        assert "Caption file to author: `intro.vtt`" in md

    def test_empty_report(self) -> None:
        md = render_markdown_report(AuditReport(url="https://example.com"))
        assert "No violations found" in md
        assert "## Keyboard Navigation" not in md
        assert "## Video Accessibility" not in md

    def test_unknown_impact_row_only_when_present(self, sample_report: AuditReport) -> None:
        assert "unknown" not in render_markdown_report(sample_report).split("## Copy-Paste Fixes")[0]
