"""Configuration schema: validates audit-config.yml and CLI overrides."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, field_validator, model_validator

# Pinned so audits are reproducible when no vendored copy is configured.
DEFAULT_AXE_SCRIPT_URL = "https://cdnjs.cloudflare.com/ajax/libs/axe-core/4.10.2/axe.min.js"


class ConformanceLevel(str, Enum):
    A = "A"
    AA = "AA"
    AAA = "AAA"


class Viewport(BaseModel):
    """Browser viewport size in CSS pixels."""

    width: int = 1920
    height: int = 1080

    @model_validator(mode="after")
    def check_positive(self) -> "Viewport":
        if self.width <= 0 or self.height <= 0:
            raise ValueError("viewport width and height must be positive")
        return self


class AuditConfig(BaseModel):
    """Top-level configuration for a single audit.

    ``target_url`` is required. Everything else has a default that matches
    a typical CI run: WCAG AA, keyboard walk and caption check enabled,
    one minute overall budget.
    """

    target_url: str

    conformance_level: ConformanceLevel = ConformanceLevel.AA
    run_keyboard_walk: bool = True
    run_caption_check: bool = True
    wait_for_selector: str = ""

    # Timing and browser
    overall_timeout_ms: int = 60_000
    viewport: Viewport = Viewport()
    headless: bool = True

    # Keyboard walk tuning
    keyboard_step_budget: int = 30
    stop_on_wrap: bool = False

    # Caption remediation languages (empty subtitle_language skips the subtitle track)
    caption_language: str = "en"
    subtitle_language: str = "es"

    # axe-core source: a local vendored file wins over the URL
    axe_script_path: str = ""
    axe_script_url: str = DEFAULT_AXE_SCRIPT_URL

    # Output
    output_directory: str = "./output"

    @field_validator("conformance_level", mode="before")
    @classmethod
    def normalize_level(cls, v: object) -> object:
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("wait_for_selector", "axe_script_path", "subtitle_language", mode="before")
    @classmethod
    def none_to_empty(cls, v: object) -> object:
        return "" if v is None else v

    @model_validator(mode="after")
    def check_target_url(self) -> "AuditConfig":
        if not self.target_url.startswith(("http://", "https://", "file://")):
            raise ValueError(
                f"target_url must be an http(s) or file URL, got: {self.target_url!r}"
            )
        return self

    @model_validator(mode="after")
    def check_budgets(self) -> "AuditConfig":
        if self.overall_timeout_ms <= 0:
            raise ValueError("overall_timeout_ms must be positive")
        if self.keyboard_step_budget <= 0:
            raise ValueError("keyboard_step_budget must be positive")
        return self

    @model_validator(mode="after")
    def check_axe_source(self) -> "AuditConfig":
        if not self.axe_script_path and not self.axe_script_url.strip():
            raise ValueError("axe_script_url must be set when axe_script_path is empty")
        return self

    @model_validator(mode="after")
    def check_axe_script_path_exists(self) -> "AuditConfig":
        if self.axe_script_path and not Path(self.axe_script_path).is_file():
            raise ValueError(f"axe_script_path does not exist: {self.axe_script_path}")
        return self
