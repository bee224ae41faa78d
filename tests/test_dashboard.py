"""Tests for HTML dashboard generation."""

from __future__ import annotations

from axefix.output.dashboard import render_dashboard
from axefix.schemas.report import AuditReport


class TestDashboard:
    def test_renders_sections(self, sample_report: AuditReport) -> None:
        html = render_dashboard(sample_report)
        assert html.startswith("<!DOCTYPE html>")
        assert '<html lang="en">' in html
        assert "Accessibility Report: https://example.com" in html
        assert 'id="keyboard-heading"' in html
        assert 'id="video-heading"' in html
        assert "Walk ended <strong>trapped</strong>" in html

    def test_fix_markup_is_escaped(self, sample_report: AuditReport) -> None:
        html = render_dashboard(sample_report)
        assert "&lt;img" in html
        assert '<img src="hero.jpg"' not in html

    def test_trap_listed(self, sample_report: AuditReport) -> None:
        html = render_dashboard(sample_report)
        assert "Focus stuck on <code>button#menu</code> at step 2" in html

    def test_empty_report(self) -> None:
        html = render_dashboard(AuditReport(url="https://example.com"))
        assert "No violations found" in html
        assert 'id="keyboard-heading"' not in html
        assert 'id="video-heading"' not in html

    def test_report_json_round_trip_renders_identically(self, sample_report: AuditReport) -> None:
        restored = AuditReport.model_validate_json(sample_report.model_dump_json())
        assert render_dashboard(restored) == render_dashboard(sample_report)
