"""Unified audit report model."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from axefix.schemas.config import ConformanceLevel
from axefix.schemas.keyboard import FocusStep, KeyboardWalkResult
from axefix.schemas.media import CaptionRemediation, MediaElement
from axefix.schemas.violations import Fix, Violation


class ImpactSummary(BaseModel):
    """Violation counts by impact level plus the scanner's rule tallies."""

    critical: int = 0
    serious: int = 0
    moderate: int = 0
    minor: int = 0
    unknown: int = 0
    total_violations: int = 0
    affected_nodes: int = 0
    passes: int = 0
    incomplete: int = 0
    inapplicable: int = 0


class VideoAccessibility(BaseModel):
    """Discovered media plus caption remediations for those lacking tracks."""

    elements: list[MediaElement] = []
    remediations: list[CaptionRemediation] = []


class AuditReport(BaseModel):
    """The complete output of one audit."""

    url: str
    generated_at: str = Field(default_factory=lambda: datetime.now().isoformat())
    conformance_level: ConformanceLevel = ConformanceLevel.AA
    tags: list[str] = []
    summary: ImpactSummary = ImpactSummary()
    copy_paste_fixes: list[Fix] = []
    keyboard: KeyboardWalkResult | None = None
    keyboard_issues: list[FocusStep] = []
    focus_fixes: list[str] = []
    video_accessibility: VideoAccessibility | None = None
    violations: list[Violation] = []
