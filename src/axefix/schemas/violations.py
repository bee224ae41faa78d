"""Pydantic models for axe-core scan output and the fixes derived from it."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

# Severity order used for sorting and summaries (lower = more severe).
IMPACT_ORDER: dict[str, int] = {"critical": 0, "serious": 1, "moderate": 2, "minor": 3}


class DomNodeDescriptor(BaseModel):
    """One affected element occurrence inside a violation."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    html: str = ""
    target: list[str] = []  # CSS selectors, first entry is canonical
    failure_summary: str = Field("", alias="failureSummary")
    data: dict[str, Any] = {}

    @field_validator("target", mode="before")
    @classmethod
    def flatten_target(cls, v: object) -> list[str]:
        # axe emits nested lists for elements inside iframes / shadow roots
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        flat: list[str] = []
        for item in v:  # type: ignore[union-attr]
            if isinstance(item, (list, tuple)):
                flat.append(" >>> ".join(str(part) for part in item))
            else:
                flat.append(str(item))
        return flat

    @field_validator("data", mode="before")
    @classmethod
    def coerce_data(cls, v: object) -> dict[str, Any]:
        return v if isinstance(v, dict) else {}

    @field_validator("html", "failure_summary", mode="before")
    @classmethod
    def none_to_empty(cls, v: object) -> str:
        return "" if v is None else str(v)

    @property
    def selector(self) -> str:
        return self.target[0] if self.target else ""


class Violation(BaseModel):
    """One failing axe rule, as reported by the scanner. Immutable."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    rule_id: str = Field("unknown", alias="id")
    impact: str | None = None  # "critical", "serious", "moderate", "minor"
    description: str = ""
    help: str = ""
    help_url: str = Field("", alias="helpUrl")
    tags: list[str] = []
    nodes: list[DomNodeDescriptor] = []

    @field_validator("rule_id", mode="before")
    @classmethod
    def missing_rule_id(cls, v: object) -> str:
        return str(v) if v not in (None, "") else "unknown"

    @field_validator("description", "help", "help_url", mode="before")
    @classmethod
    def none_to_empty(cls, v: object) -> str:
        return "" if v is None else str(v)

    @field_validator("tags", "nodes", mode="before")
    @classmethod
    def none_to_list(cls, v: object) -> object:
        return [] if v is None else v

    @property
    def wcag_tags(self) -> list[str]:
        return [t for t in self.tags if t.startswith("wcag")]

    @property
    def severity_rank(self) -> int:
        return IMPACT_ORDER.get(self.impact or "", len(IMPACT_ORDER))


class ScanResult(BaseModel):
    """Normalized output of one axe-core run."""

    violations: list[Violation] = []
    passes: int = 0
    incomplete: int = 0
    inapplicable: int = 0

    @field_validator("passes", "incomplete", "inapplicable", mode="before")
    @classmethod
    def count_lists(cls, v: object) -> int:
        # axe returns full rule lists for these; only the count is kept
        if isinstance(v, (list, tuple)):
            return len(v)
        if isinstance(v, int):
            return v
        if isinstance(v, str) and v.strip().isdigit():
            return int(v)
        if v is not None:
            logger.debug("Unreadable axe rule count %r, using 0", v)
        return 0


class Fix(BaseModel):
    """Copy-paste remediation generated for a single violation."""

    rule_id: str
    issue: str
    impact: str = "unknown"
    wcag_criteria: list[str] = []
    affected_element_count: int = 0
    help_url: str = ""
    fix_text: str
