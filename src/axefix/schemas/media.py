"""Pydantic models for media elements and their caption remediations."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TrackDescriptor(BaseModel):
    """A ``<track>`` already attached to a media element."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: str = ""
    label: str = ""
    source_url: str = Field("", alias="src")


class MediaElement(BaseModel):
    """A ``<video>`` or embedded player discovered on the page."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: Literal["VIDEO", "IFRAME"] = Field("VIDEO", alias="type")
    source_url: str = Field("", alias="src")
    has_caption_track: bool = Field(False, alias="hasTrack")
    track_descriptors: list[TrackDescriptor] = Field([], alias="trackKinds")

    @field_validator("kind", mode="before")
    @classmethod
    def normalize_kind(cls, v: object) -> str:
        return str(v or "VIDEO").upper()

    @field_validator("source_url", mode="before")
    @classmethod
    def none_to_empty(cls, v: object) -> str:
        return "" if v is None else str(v)

    @property
    def has_tracks(self) -> bool:
        return self.has_caption_track or bool(self.track_descriptors)

    @property
    def provider(self) -> str:
        """``youtube``, ``vimeo``, ``wistia`` for embeds, ``native`` otherwise."""
        if self.kind == "VIDEO":
            return "native"
        src = self.source_url.lower()
        for name in ("youtube", "vimeo", "wistia"):
            if name in src:
                return name
        return "embed"


class TrackSuggestion(BaseModel):
    """A ``<track>`` element the analyzer recommends adding."""

    kind: str  # "captions", "subtitles", "descriptions"
    src: str
    srclang: str
    label: str
    default: bool = False

    def to_html(self, indent: str = "  ") -> str:
        lines = [
            f"{indent}<track",
            f'{indent}  kind="{self.kind}"',
            f'{indent}  src="{self.src}"',
            f'{indent}  srclang="{self.srclang}"',
            f'{indent}  label="{self.label}"',
        ]
        if self.default:
            lines.append(f"{indent}  default")
        lines.append(f"{indent}/>")
        return "\n".join(lines)


class CaptionRemediation(BaseModel):
    """Generated remediation for one media element that has no tracks."""

    element: MediaElement
    filename_stem: str
    tracks: list[TrackSuggestion] = []
    caption_file_name: str = ""
    caption_file: str = ""  # WebVTT skeleton
    markup: str = ""  # full copy-paste fix


class CaptionAnalysis(BaseModel):
    """Result of a caption gap analysis over a batch of media elements."""

    gaps: list[MediaElement] = []
    remediations: list[CaptionRemediation] = []
