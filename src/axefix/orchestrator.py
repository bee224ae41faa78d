"""Audit orchestrator: runs every analysis over one browser session."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from axefix.errors import AuditPhaseError, AuditTimeoutError, BrowserInteractionError, BrowserLaunchError
from axefix.keyboard.walker import FocusWalker
from axefix.remediation.captions import analyze_captions
from axefix.remediation.focus import focus_fixes
from axefix.remediation.tags import resolve_tags
from axefix.remediation.templates import build_fixes
from axefix.scanner import detect_media, run_axe
from axefix.schemas.config import AuditConfig, ConformanceLevel
from axefix.schemas.keyboard import FocusStep, KeyboardWalkResult, WalkState
from axefix.schemas.report import AuditReport, ImpactSummary, VideoAccessibility
from axefix.schemas.violations import ScanResult
from axefix.shared.browser import BrowserSession
from axefix.shared.progress import AuditProgress

logger = logging.getLogger(__name__)

SessionFactory = Callable[[AuditConfig], BrowserSession]


def _default_session_factory(config: AuditConfig) -> BrowserSession:
    return BrowserSession(viewport=config.viewport, headless=config.headless)


def build_summary(scan: ScanResult) -> ImpactSummary:
    """Count violations per impact level and carry the scanner's tallies."""
    counts = {"critical": 0, "serious": 0, "moderate": 0, "minor": 0, "unknown": 0}
    for v in scan.violations:
        key = v.impact if v.impact in counts else "unknown"
        counts[key] += 1
    return ImpactSummary(
        **counts,
        total_violations=len(scan.violations),
        affected_nodes=sum(len(v.nodes) for v in scan.violations),
        passes=scan.passes,
        incomplete=scan.incomplete,
        inapplicable=scan.inapplicable,
    )


def keyboard_issues(result: KeyboardWalkResult) -> list[FocusStep]:
    """Steps missing a focus indicator plus trap steps, in walk order."""
    by_index = {s.sequence_index: s for s in result.missing_focus_indicators}
    by_index.update({s.sequence_index: s for s in result.focus_traps})
    return [by_index[i] for i in sorted(by_index)]


class AuditOrchestrator:
    """Coordinates one audit.

    Flow (all against a single exclusively-owned session)::

        launch → navigate → wait → scan → keyboard → media → report

    The session is closed on every exit path: success, phase failure, or
    the overall timeout cancelling whatever phase was running.
    """

    def __init__(
        self,
        config: AuditConfig,
        *,
        session_factory: SessionFactory | None = None,
        progress: AuditProgress | None = None,
    ) -> None:
        self.config = config
        self._session_factory = session_factory or _default_session_factory
        self._progress = progress or AuditProgress(enabled=False)
        self.phase = "idle"

    async def run(self) -> AuditReport:
        """Run the audit within ``overall_timeout_ms`` and return the report.

        Raises ``BrowserLaunchError`` when no browser could be started,
        ``AuditPhaseError`` when navigation or evaluation fails, and
        ``AuditTimeoutError`` when the budget runs out.
        """
        timeout_s = self.config.overall_timeout_ms / 1000
        try:
            return await asyncio.wait_for(self._run(), timeout=timeout_s)
        except asyncio.TimeoutError as exc:
            logger.error("Audit timed out during %s phase", self.phase)
            self._progress.fail_phase(self.phase, "timed out")
            raise AuditTimeoutError(self.phase, self.config.overall_timeout_ms) from exc

    @asynccontextmanager
    async def _phase(self, name: str) -> AsyncIterator[None]:
        self.phase = name
        self._progress.start_phase(name)
        try:
            yield
        except BrowserInteractionError as exc:
            self._progress.fail_phase(name, str(exc))
            raise AuditPhaseError(f"{name} phase failed", phase=name, cause=exc) from exc
        else:
            self._progress.finish_phase(name)

    async def _run(self) -> AuditReport:
        cfg = self.config
        tags = resolve_tags(cfg.conformance_level)
        logger.info("Auditing %s at WCAG %s (%s)", cfg.target_url, cfg.conformance_level.value, ", ".join(tags))

        self.phase = "launch"
        self._progress.start_phase("launch")
        try:
            async with self._session_factory(cfg) as session:
                self._progress.finish_phase("launch")
                scan, walk, video = await self._run_phases(session, tags)
        except BrowserLaunchError as exc:
            self._progress.fail_phase("launch", str(exc.cause or exc.message))
            raise

        self.phase = "report"
        return self._build_report(tags, scan, walk, video)

    async def _run_phases(
        self, session: BrowserSession, tags: list[str],
    ) -> tuple[ScanResult, KeyboardWalkResult | None, VideoAccessibility | None]:
        cfg = self.config

        async with self._phase("navigate"):
            await session.navigate(cfg.target_url)

        if cfg.wait_for_selector:
            async with self._phase("wait"):
                await session.wait_for(cfg.wait_for_selector)

        async with self._phase("scan"):
            self._progress.update_phase("scan", "running axe-core")
            scan = await run_axe(
                session, tags,
                script_path=cfg.axe_script_path,
                script_url=cfg.axe_script_url,
            )
        self._progress.log_event(
            f"{len(scan.violations)} violation(s), {scan.passes} passing rule(s)"
        )

        walk: KeyboardWalkResult | None = None
        if cfg.run_keyboard_walk:
            async with self._phase("keyboard"):
                walker = FocusWalker(
                    session,
                    step_budget=cfg.keyboard_step_budget,
                    stop_on_wrap=cfg.stop_on_wrap,
                )
                walk = await walker.walk()
            if walk.state is WalkState.ABORTED:
                self._progress.log_event(f"Keyboard walk aborted: {walk.abort_reason}", style="yellow")
            else:
                self._progress.log_event(
                    f"Keyboard walk {walk.state.value}: {len(walk.tab_order)} stop(s), "
                    f"{len(walk.focus_traps)} trap(s)"
                )

        video: VideoAccessibility | None = None
        if cfg.run_caption_check:
            async with self._phase("media"):
                elements = await detect_media(session)
            analysis = analyze_captions(
                elements,
                caption_language=cfg.caption_language,
                subtitle_language=cfg.subtitle_language,
            )
            video = VideoAccessibility(elements=elements, remediations=analysis.remediations)
            self._progress.log_event(
                f"{len(elements)} media element(s), {len(analysis.gaps)} without tracks"
            )

        return scan, walk, video

    def _build_report(
        self,
        tags: list[str],
        scan: ScanResult,
        walk: KeyboardWalkResult | None,
        video: VideoAccessibility | None,
    ) -> AuditReport:
        issues = keyboard_issues(walk) if walk else []
        report = AuditReport(
            url=self.config.target_url,
            conformance_level=self.config.conformance_level,
            tags=tags,
            summary=build_summary(scan),
            copy_paste_fixes=build_fixes(scan.violations),
            keyboard=walk,
            keyboard_issues=issues,
            focus_fixes=focus_fixes(walk.missing_focus_indicators) if walk else [],
            video_accessibility=video,
            violations=scan.violations,
        )
        logger.info(
            "Report: %d fix(es), %d keyboard issue(s), %d caption gap(s)",
            len(report.copy_paste_fixes),
            len(report.keyboard_issues),
            len(video.remediations) if video else 0,
        )
        return report


async def quick_scan(
    url: str,
    *,
    level: ConformanceLevel | str = ConformanceLevel.AA,
    run_keyboard_walk: bool = True,
    run_caption_check: bool = True,
) -> AuditReport:
    """Audit ``url`` with default settings and return the report."""
    config = AuditConfig(
        target_url=url,
        conformance_level=level,
        run_keyboard_walk=run_keyboard_walk,
        run_caption_check=run_caption_check,
    )
    return await AuditOrchestrator(config).run()
