"""axe-core injection and result normalization, plus media discovery scripts."""

from __future__ import annotations

import logging
from typing import Any, Protocol

from pydantic import ValidationError

from axefix.schemas.media import MediaElement
from axefix.schemas.violations import ScanResult, Violation

logger = logging.getLogger(__name__)

AXE_RUN_SCRIPT = """(tags) => axe.run(document, {
    runOnly: { type: 'tag', values: tags }
})"""

MEDIA_SCRIPT = """() => Array.from(document.querySelectorAll(
    'video, iframe[src*="youtube"], iframe[src*="vimeo"], iframe[src*="wistia"]'
)).map(el => ({
    type: el.tagName,
    src: el.currentSrc || el.src || (el.querySelector('source') || {}).src || '',
    hasTrack: el.tagName === 'VIDEO' ? el.querySelectorAll('track').length > 0 : false,
    trackKinds: el.tagName === 'VIDEO'
        ? Array.from(el.querySelectorAll('track')).map(t => ({
            kind: t.kind, label: t.label, src: t.src
        }))
        : []
}))"""


class ScriptSession(Protocol):
    async def evaluate(self, script: str, arg: Any = None) -> Any: ...

    async def inject_script(self, *, path: str = "", url: str = "") -> None: ...


def parse_scan_result(raw: Any) -> ScanResult:
    """Normalize a raw ``axe.run`` result into a ``ScanResult``.

    Individual violations that fail validation are logged and dropped so one
    odd record cannot sink the whole report.
    """
    if not isinstance(raw, dict):
        logger.warning("axe returned %s instead of a result object", type(raw).__name__)
        return ScanResult()

    violations: list[Violation] = []
    for item in raw.get("violations") or []:
        try:
            violations.append(Violation.model_validate(item))
        except ValidationError as exc:
            logger.warning("Skipping malformed violation: %s", exc)

    return ScanResult(
        violations=violations,
        passes=raw.get("passes"),
        incomplete=raw.get("incomplete"),
        inapplicable=raw.get("inapplicable"),
    )


async def run_axe(
    session: ScriptSession,
    tags: list[str],
    *,
    script_path: str = "",
    script_url: str = "",
) -> ScanResult:
    """Inject axe-core (unless the page already has it) and run it for ``tags``."""
    has_axe = await session.evaluate("() => typeof window.axe !== 'undefined'")
    if not has_axe:
        logger.debug("Injecting axe-core from %s", script_path or script_url)
        await session.inject_script(path=script_path, url=script_url)
    raw = await session.evaluate(AXE_RUN_SCRIPT, tags)
    result = parse_scan_result(raw)
    logger.info(
        "axe: %d violation(s), %d pass(es), %d incomplete",
        len(result.violations), result.passes, result.incomplete,
    )
    return result


def parse_media(raw: Any) -> list[MediaElement]:
    """Validate discovered media records, dropping any that are malformed."""
    elements: list[MediaElement] = []
    for item in raw or []:
        try:
            elements.append(MediaElement.model_validate(item))
        except ValidationError as exc:
            logger.warning("Skipping malformed media element: %s", exc)
    return elements


async def detect_media(session: ScriptSession) -> list[MediaElement]:
    """Find ``<video>`` elements and known embedded players on the page."""
    return parse_media(await session.evaluate(MEDIA_SCRIPT))
