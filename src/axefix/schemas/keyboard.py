"""Pydantic models for the keyboard focus walk."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WalkState(str, Enum):
    IDLE = "idle"
    STEPPING = "stepping"
    TRAPPED = "trapped"
    EXHAUSTED = "exhausted"
    ABORTED = "aborted"


class FocusStep(BaseModel):
    """One observed focus position during a keyboard walk."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    sequence_index: int
    tag_name: str = Field("", alias="tagName")
    element_id: str = Field("", alias="id")
    class_name: str = Field("", alias="className")
    text_snippet: str = Field("", alias="text")
    has_focus_indicator: bool = Field(False, alias="hasFocusIndicator")
    # Element id, or a key stamped on the element when it has none
    identity: str = ""

    @field_validator("tag_name", "element_id", "class_name", "text_snippet", "identity", mode="before")
    @classmethod
    def coerce_str(cls, v: object) -> str:
        # SVG elements report className as an SVGAnimatedString object
        return v if isinstance(v, str) else ""

    @property
    def label(self) -> str:
        """Short human-readable element reference, e.g. ``button#save.primary``."""
        out = self.tag_name.lower() or "?"
        if self.element_id:
            out += f"#{self.element_id}"
        first_class = self.class_name.split()[0] if self.class_name.split() else ""
        if first_class:
            out += f".{first_class}"
        return out


class KeyboardWalkResult(BaseModel):
    """Aggregate of a completed (or interrupted) keyboard walk."""

    model_config = ConfigDict(frozen=True)

    state: WalkState
    steps_taken: int = 0  # Tab presses dispatched
    tab_order: list[FocusStep] = []
    missing_focus_indicators: list[FocusStep] = []
    focus_traps: list[FocusStep] = []
    abort_reason: str = ""
