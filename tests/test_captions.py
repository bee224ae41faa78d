"""Tests for the caption gap analyzer."""

from __future__ import annotations

import pytest

from axefix.remediation.captions import (
    DEFAULT_STEM,
    VTT_SKELETON,
    analyze_captions,
    filename_stem,
    generate_caption_fix,
)
from axefix.schemas.media import MediaElement, TrackDescriptor


def _video(src: str = "/media/intro.mp4", *, tracks: bool = False, kind: str = "VIDEO") -> MediaElement:
    return MediaElement(kind=kind, source_url=src, has_caption_track=tracks)


class TestFilenameStem:
    @pytest.mark.parametrize(
        "src, expected",
        [
            ("/media/intro.mp4", "intro"),
            ("https://cdn.example.com/v/launch-2024.webm?token=abc#t=10", "launch-2024"),
            ("https://www.youtube.com/embed/dQw4w9WgXcQ", "dQw4w9WgXcQ"),
            ("/media/My%20Clip.mov", "My Clip"),
            ("", DEFAULT_STEM),
            ("https://example.com/", DEFAULT_STEM),
            ("/media/.mp4", DEFAULT_STEM),
        ],
    )
    def test_stems(self, src: str, expected: str) -> None:
        assert filename_stem(src) == expected

    def test_unparsable_url_falls_back(self) -> None:
        assert filename_stem("http://[::1") == DEFAULT_STEM


class TestGenerateCaptionFix:
    def test_caption_track_src(self) -> None:
        rem = generate_caption_fix(_video())
        captions = rem.tracks[0]
        assert captions.kind == "captions"
        assert "intro.vtt" in captions.src
        assert captions.default is True
        assert captions.srclang == "en"
        assert 'src="/captions/intro.vtt"' in rem.markup

    def test_track_kinds(self) -> None:
        rem = generate_caption_fix(_video())
        assert [t.kind for t in rem.tracks] == ["captions", "subtitles", "descriptions"]
        assert rem.tracks[1].src == "/subtitles/intro-es.vtt"
        assert rem.tracks[2].src == "/descriptions/intro-descriptions.vtt"

    def test_subtitle_track_optional(self) -> None:
        rem = generate_caption_fix(_video(), subtitle_language="")
        assert [t.kind for t in rem.tracks] == ["captions", "descriptions"]

    def test_custom_language(self) -> None:
        rem = generate_caption_fix(_video(), caption_language="fr", subtitle_language="de")
        assert rem.tracks[0].label == "French Captions"
        assert rem.tracks[1].srclang == "de"

    def test_vtt_skeleton(self) -> None:
        rem = generate_caption_fix(_video())
        assert rem.caption_file_name == "intro.vtt"
        assert rem.caption_file.startswith("WEBVTT")
        assert "00:00:00.000 --> 00:00:03.000" in rem.caption_file
        assert VTT_SKELETON in rem.markup

    def test_markup_cites_criteria(self) -> None:
        markup = generate_caption_fix(_video()).markup
        assert "1.2.2" in markup
        assert "1.2.3" in markup
        assert "default" in markup

    def test_iframe_gets_provider_note(self) -> None:
        rem = generate_caption_fix(_video("https://player.vimeo.com/video/12345", kind="IFRAME"))
        assert "vimeo" in rem.markup
        assert rem.filename_stem == "12345"

    def test_missing_source_uses_placeholder(self) -> None:
        rem = generate_caption_fix(_video(""))
        assert rem.filename_stem == DEFAULT_STEM
        assert "/captions/video.vtt" in rem.markup


class TestAnalyzeCaptions:
    def test_elements_with_tracks_excluded(self) -> None:
        covered = _video("/media/covered.mp4", tracks=True)
        bare = _video("/media/bare.mp4")
        result = analyze_captions([covered, bare])
        assert result.gaps == [bare]
        assert [r.element for r in result.remediations] == [bare]
        assert all(r.element.source_url != covered.source_url for r in result.remediations)

    def test_track_descriptors_count_as_tracks(self) -> None:
        el = MediaElement(
            kind="VIDEO",
            source_url="/media/x.mp4",
            track_descriptors=[TrackDescriptor(kind="subtitles", label="EN", source_url="/x.vtt")],
        )
        assert analyze_captions([el]).gaps == []

    def test_bad_url_does_not_fail_batch(self) -> None:
        result = analyze_captions([_video("http://[::1"), _video("/media/ok.mp4")])
        assert [r.filename_stem for r in result.remediations] == [DEFAULT_STEM, "ok"]

    def test_empty_input(self) -> None:
        result = analyze_captions([])
        assert result.gaps == []
        assert result.remediations == []


class TestMediaElementParsing:
    def test_from_browser_payload(self) -> None:
        el = MediaElement.model_validate({
            "type": "iframe",
            "src": "https://www.youtube.com/embed/abc",
            "hasTrack": False,
            "trackKinds": [],
        })
        assert el.kind == "IFRAME"
        assert el.provider == "youtube"
        assert el.has_tracks is False

    def test_native_provider(self) -> None:
        assert _video().provider == "native"
