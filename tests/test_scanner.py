"""Tests for axe result normalization and media discovery."""

from __future__ import annotations

import pytest

from axefix.remediation.templates import build_fix
from axefix.scanner import detect_media, parse_media, parse_scan_result, run_axe
from axefix.schemas.violations import DomNodeDescriptor, Violation

from conftest import AXE_RESULT, FakeSession


class TestParseScanResult:
    def test_counts_and_violations(self) -> None:
        result = parse_scan_result(AXE_RESULT)
        assert [v.rule_id for v in result.violations] == ["image-alt", "color-contrast"]
        assert result.passes == 2
        assert result.incomplete == 0
        assert result.inapplicable == 1

    def test_camel_case_fields(self) -> None:
        v = parse_scan_result(AXE_RESULT).violations[0]
        assert v.help_url.endswith("image-alt")
        assert v.nodes[0].failure_summary == "Fix any"
        assert v.nodes[0].selector == "img.hero"

    def test_malformed_violation_dropped(self) -> None:
        raw = {"violations": ["not a record", {"id": "region"}], "passes": 3}
        result = parse_scan_result(raw)
        assert [v.rule_id for v in result.violations] == ["region"]
        assert result.passes == 3

    def test_missing_rule_id_kept_as_unknown(self) -> None:
        raw = {"violations": [{"impact": "minor", "description": "Something odd"}, {"id": None}]}
        result = parse_scan_result(raw)
        assert [v.rule_id for v in result.violations] == ["unknown", "unknown"]
        fix = build_fix(result.violations[0])
        assert "Manual fix required for: unknown" in fix.fix_text
        assert "Something odd" in fix.fix_text

    def test_unreadable_counts_become_zero(self) -> None:
        result = parse_scan_result({"violations": [], "passes": {}, "incomplete": "n/a", "inapplicable": None})
        assert result.passes == 0
        assert result.incomplete == 0
        assert result.inapplicable == 0

    def test_numeric_string_count(self) -> None:
        assert parse_scan_result({"passes": "12"}).passes == 12

    def test_non_dict_result(self) -> None:
        result = parse_scan_result(None)
        assert result.violations == []
        assert result.passes == 0

    def test_null_fields_tolerated(self) -> None:
        raw = {"violations": [{"id": "x", "description": None, "tags": None, "nodes": None}]}
        v = parse_scan_result(raw).violations[0]
        assert v.description == ""
        assert v.tags == []
        assert v.nodes == []


class TestDomNodeDescriptor:
    def test_nested_iframe_target_flattened(self) -> None:
        node = DomNodeDescriptor.model_validate({"target": [["iframe#embed", "button.play"]]})
        assert node.selector == "iframe#embed >>> button.play"

    def test_string_target(self) -> None:
        assert DomNodeDescriptor.model_validate({"target": "#main"}).target == ["#main"]

    def test_violation_is_immutable(self) -> None:
        v = Violation.model_validate({"id": "x"})
        with pytest.raises(Exception):
            v.rule_id = "y"  # type: ignore[misc]


class TestRunAxe:
    @pytest.mark.asyncio
    async def test_injects_then_runs(self) -> None:
        session = FakeSession()
        result = await run_axe(session, ["wcag2a"], script_url="https://cdn.example/axe.js")
        assert "inject_script" in session.calls
        assert len(result.violations) == 2

    @pytest.mark.asyncio
    async def test_skips_injection_when_present(self) -> None:
        session = FakeSession(has_axe=True)
        await run_axe(session, ["wcag2a"], script_url="https://cdn.example/axe.js")
        assert "inject_script" not in session.calls


class TestMedia:
    @pytest.mark.asyncio
    async def test_detect_media(self) -> None:
        session = FakeSession(media=[
            {"type": "VIDEO", "src": "/media/intro.mp4", "hasTrack": False, "trackKinds": []},
            {"type": "VIDEO", "src": "/media/ok.mp4", "hasTrack": True,
             "trackKinds": [{"kind": "captions", "label": "English", "src": "/c/ok.vtt"}]},
        ])
        elements = await detect_media(session)
        assert [e.source_url for e in elements] == ["/media/intro.mp4", "/media/ok.mp4"]
        assert elements[1].track_descriptors[0].source_url == "/c/ok.vtt"

    def test_malformed_media_dropped(self) -> None:
        elements = parse_media([{"type": "AUDIO", "src": "/a.mp3"}, {"type": "VIDEO", "src": None}])
        assert len(elements) == 1
        assert elements[0].source_url == ""

    def test_none_payload(self) -> None:
        assert parse_media(None) == []
