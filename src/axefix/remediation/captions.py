"""Caption gap analysis for ``<video>`` elements and embedded players."""

from __future__ import annotations

import logging
from pathlib import PurePosixPath
from typing import Iterable
from urllib.parse import unquote, urlparse

from axefix.schemas.media import (
    CaptionAnalysis,
    CaptionRemediation,
    MediaElement,
    TrackSuggestion,
)

logger = logging.getLogger(__name__)

DEFAULT_STEM = "video"

_LANGUAGE_NAMES = {
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "it": "Italian",
    "pt": "Portuguese",
    "ja": "Japanese",
    "zh": "Chinese",
}

VTT_SKELETON = """\
WEBVTT

1
00:00:00.000 --> 00:00:03.000
[Speaker name] First line of dialogue.

2
00:00:03.500 --> 00:00:07.000
Second line of dialogue continues here.

3
00:00:07.500 --> 00:00:10.000
[Sound effect description in brackets]
"""


def filename_stem(source_url: str) -> str:
    """Derive a caption filename stem from a media URL.

    ``/media/intro.mp4?v=2`` → ``intro``. Falls back to ``video`` when the
    URL is empty or has no usable path segment.
    """
    if not source_url:
        return DEFAULT_STEM
    try:
        path = urlparse(source_url).path
    except ValueError:
        logger.debug("Unparsable media URL %r, using default stem", source_url)
        return DEFAULT_STEM
    name = PurePosixPath(unquote(path)).name
    stem = name.rsplit(".", 1)[0] if "." in name else name
    return stem or DEFAULT_STEM


def _language_label(code: str) -> str:
    return _LANGUAGE_NAMES.get(code.split("-")[0].lower(), code)


def suggest_tracks(
    stem: str,
    *,
    caption_language: str = "en",
    subtitle_language: str = "es",
) -> list[TrackSuggestion]:
    """Caption (default), optional subtitle, and audio-description tracks for ``stem``."""
    tracks = [
        TrackSuggestion(
            kind="captions",
            src=f"/captions/{stem}.vtt",
            srclang=caption_language,
            label=f"{_language_label(caption_language)} Captions",
            default=True,
        )
    ]
    if subtitle_language:
        tracks.append(TrackSuggestion(
            kind="subtitles",
            src=f"/subtitles/{stem}-{subtitle_language}.vtt",
            srclang=subtitle_language,
            label=f"{_language_label(subtitle_language)} Subtitles",
        ))
    tracks.append(TrackSuggestion(
        kind="descriptions",
        src=f"/descriptions/{stem}-descriptions.vtt",
        srclang=caption_language,
        label="Audio Descriptions",
    ))
    return tracks


def _render_markup(element: MediaElement, stem: str, tracks: list[TrackSuggestion]) -> str:
    src = element.source_url or f"/media/{stem}.mp4"
    comments = {
        "captions": "Captions for deaf/hard-of-hearing users",
        "subtitles": "Subtitles for non-native speakers (optional)",
        "descriptions": "Audio descriptions for blind users (optional but recommended)",
    }
    track_blocks = "\n\n".join(
        f"  <!-- {comments.get(t.kind, t.kind)} -->\n{t.to_html()}" for t in tracks
    )

    provider_note = ""
    if element.kind == "IFRAME":
        provider_note = (
            f"<!-- Embedded {element.provider} player: upload {stem}.vtt through the "
            f"provider's caption manager, or self-host the video as below. -->\n"
        )

    return f"""\
<!-- Video missing captions: {element.source_url or "unknown"} -->
<!-- WCAG: 1.2.2 Captions (Prerecorded) Level A -->
<!-- WCAG: 1.2.3 Audio Description or Media Alternative (Prerecorded) Level A -->
{provider_note}
<!-- Before: -->
<video src="{src}"></video>

<!-- After: Add caption and description tracks -->
<video src="{src}" controls>
{track_blocks}

  <!-- Fallback for browsers without HTML5 video -->
  <p>
    Your browser doesn't support HTML5 video.
    <a href="{src}">Download the video</a> or
    <a href="/transcripts/{stem}.html">read the transcript</a>.
  </p>
</video>

<!-- WebVTT caption file template ({stem}.vtt): -->
<!--
{VTT_SKELETON}-->
"""


def generate_caption_fix(
    element: MediaElement,
    *,
    caption_language: str = "en",
    subtitle_language: str = "es",
) -> CaptionRemediation:
    """Build the caption remediation for a single media element."""
    stem = filename_stem(element.source_url)
    tracks = suggest_tracks(
        stem, caption_language=caption_language, subtitle_language=subtitle_language,
    )
    return CaptionRemediation(
        element=element,
        filename_stem=stem,
        tracks=tracks,
        caption_file_name=f"{stem}.vtt",
        caption_file=VTT_SKELETON,
        markup=_render_markup(element, stem, tracks),
    )


def analyze_captions(
    elements: Iterable[MediaElement],
    *,
    caption_language: str = "en",
    subtitle_language: str = "es",
) -> CaptionAnalysis:
    """Find media without tracks and generate remediation for each.

    Elements that already carry any track are skipped entirely so the
    output never suggests redundant tracks.
    """
    gaps: list[MediaElement] = []
    remediations: list[CaptionRemediation] = []
    for element in elements:
        if element.has_tracks:
            continue
        gaps.append(element)
        remediations.append(generate_caption_fix(
            element,
            caption_language=caption_language,
            subtitle_language=subtitle_language,
        ))
    logger.debug("Caption analysis: %d gap(s)", len(gaps))
    return CaptionAnalysis(gaps=gaps, remediations=remediations)
