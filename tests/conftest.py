"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from axefix.errors import BrowserInteractionError
from axefix.keyboard.walker import ACTIVE_ELEMENT_SCRIPT
from axefix.scanner import AXE_RUN_SCRIPT, MEDIA_SCRIPT


def focus_snapshot(element_id: str, *, tag: str = "BUTTON", indicator: bool = True, class_name: str = "") -> dict:
    return {
        "tagName": tag,
        "id": element_id,
        "className": class_name,
        "text": f"{element_id} text",
        "hasFocusIndicator": indicator,
        "identity": element_id,
    }


AXE_RESULT: dict[str, Any] = {
    "violations": [
        {
            "id": "image-alt",
            "impact": "critical",
            "description": "Ensures <img> elements have alternate text",
            "help": "Images must have alternate text",
            "helpUrl": "https://dequeuniversity.com/rules/axe/4.10/image-alt",
            "tags": ["cat.text-alternatives", "wcag2a", "wcag111"],
            "nodes": [{"html": '<img src="hero.jpg">', "target": ["img.hero"], "failureSummary": "Fix any"}],
        },
        {
            "id": "color-contrast",
            "impact": "serious",
            "description": "Ensures the contrast between foreground and background colors meets WCAG 2 AA",
            "help": "Elements must meet minimum color contrast ratio thresholds",
            "helpUrl": "https://dequeuniversity.com/rules/axe/4.10/color-contrast",
            "tags": ["cat.color", "wcag2aa", "wcag143"],
            "nodes": [
                {"html": "<p class=\"low\">x</p>", "target": [".low"], "data": {"contrastRatio": 2.1}},
                {"html": "<p class=\"low\">y</p>", "target": [".low:nth-child(2)"], "data": {"contrastRatio": 2.4}},
            ],
        },
    ],
    "passes": [{"id": "document-title"}, {"id": "html-has-lang"}],
    "incomplete": [],
    "inapplicable": [{"id": "video-caption"}],
}


class FakeSession:
    """In-memory stand-in for ``BrowserSession``.

    ``focus_ids`` drives what ``document.activeElement`` reports after each
    Tab (``None`` means focus is on ``<body>``). Set ``fail_on`` to the name
    of a method to make it raise ``BrowserInteractionError``.
    """

    def __init__(
        self,
        *,
        focus: list[dict | None] | None = None,
        axe_result: dict | None = None,
        media: list[dict] | None = None,
        fail_on: str = "",
        fail_after_presses: int | None = None,
        has_axe: bool = False,
    ) -> None:
        self.focus = list(focus or [])
        self.axe_result = AXE_RESULT if axe_result is None else axe_result
        self.media = media or []
        self.fail_on = fail_on
        self.fail_after_presses = fail_after_presses
        self.has_axe = has_axe
        self.calls: list[str] = []
        self.presses = 0
        self.closed = False
        self.entered = False

    async def __aenter__(self) -> "FakeSession":
        self.entered = True
        return self

    async def __aexit__(self, *exc: object) -> None:
        self.closed = True

    def _check(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_on == name:
            raise BrowserInteractionError(f"{name} failed: boom")

    async def navigate(self, url: str, **kwargs: Any) -> None:
        self._check("navigate")

    async def wait_for(self, selector: str, **kwargs: Any) -> None:
        self._check("wait_for")

    async def inject_script(self, *, path: str = "", url: str = "") -> None:
        self._check("inject_script")
        self.has_axe = True

    async def dispatch_key(self, key: str) -> None:
        self._check("dispatch_key")
        if self.fail_after_presses is not None and self.presses >= self.fail_after_presses:
            raise BrowserInteractionError("press Tab failed: Target page has been closed")
        self.presses += 1

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        self._check("evaluate")
        if script == ACTIVE_ELEMENT_SCRIPT:
            index = self.presses - 1
            return self.focus[index] if index < len(self.focus) else None
        if script == AXE_RUN_SCRIPT:
            return self.axe_result
        if script == MEDIA_SCRIPT:
            return self.media
        if "typeof window.axe" in script:
            return self.has_axe
        return None


@pytest.fixture
def tmp_config(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    cfg = tmp_path / "audit-config.yml"
    cfg.write_text(
        """\
target_url: "https://example.com"
output_directory: "{out}"
""".format(out=str(tmp_path / "output"))
    )
    return cfg


@pytest.fixture
def sample_report() -> "AuditReport":  # noqa: F821
    """A report with one fix per section, built without a browser."""
    from axefix.orchestrator import build_summary
    from axefix.remediation.captions import analyze_captions
    from axefix.remediation.focus import focus_fixes
    from axefix.remediation.templates import build_fixes
    from axefix.scanner import parse_scan_result
    from axefix.schemas.keyboard import FocusStep, KeyboardWalkResult, WalkState
    from axefix.schemas.media import MediaElement
    from axefix.schemas.report import AuditReport, VideoAccessibility

    scan = parse_scan_result(AXE_RESULT)
    save = FocusStep.model_validate({**focus_snapshot("save", indicator=False), "sequence_index": 0})
    menu = FocusStep.model_validate({**focus_snapshot("menu"), "sequence_index": 1})
    menu_again = FocusStep.model_validate({**focus_snapshot("menu"), "sequence_index": 2})
    walk = KeyboardWalkResult(
        state=WalkState.TRAPPED,
        steps_taken=3,
        tab_order=[save, menu, menu_again],
        missing_focus_indicators=[save],
        focus_traps=[menu_again],
    )
    elements = [MediaElement(kind="VIDEO", source_url="/media/intro.mp4")]
    return AuditReport(
        url="https://example.com",
        generated_at="2026-01-01T00:00:00",
        tags=["wcag2a", "wcag21a", "wcag2aa", "wcag21aa", "wcag22aa"],
        summary=build_summary(scan),
        copy_paste_fixes=build_fixes(scan.violations),
        keyboard=walk,
        keyboard_issues=[save, menu_again],
        focus_fixes=focus_fixes(walk.missing_focus_indicators),
        video_accessibility=VideoAccessibility(
            elements=elements, remediations=analyze_captions(elements).remediations,
        ),
        violations=scan.violations,
    )
