"""Unit tests for stream auto-selection and priority resolution."""

from pathlib import Path

import pytest
from conftest import audio, subtitle, video

from mediaprep.core.selector import PriorityResolver, StreamSelector
from mediaprep.models.track import Track, TrackType


class TestPriorityResolver:
    """Test path-based priority resolution."""

    def test_global_priority_when_no_override_matches(self, default_config):
        resolver = PriorityResolver(default_config)
        priority = resolver.resolve_priority(Path("/media/movies/Movie.mkv"))
        assert priority == ["eng", "jpn"]

    def test_path_override(self, default_config):
        resolver = PriorityResolver(default_config)
        priority = resolver.resolve_priority(Path("/media/anime/Show/S01E01.mkv"))
        assert priority == ["jpn", "eng"]


class TestVideoSelection:
    def test_first_video_track(self):
        tracks = [audio(0), video(1), video(2)]
        assert StreamSelector().select_video(tracks).index == 1

    def test_no_video_track(self):
        result = StreamSelector().select([audio(0)], ["eng"])
        assert result.video_track is None
        assert result.audio_indices == [0]


class TestAudioSelection:
    """Per-language audio selection."""

    def test_standard_quality_picks_best_stereo_or_surround(self):
        tracks = [
            audio(1, "eng", channels=8, bitrate_kb=4000),
            audio(2, "eng", channels=6, bitrate_kb=640),
            audio(3, "eng", channels=2, bitrate_kb=192),
        ]
        selected = StreamSelector().select_audio(tracks, ["eng"])
        assert [t.index for t in selected] == [2]

    def test_high_quality_adds_best_overall(self):
        tracks = [
            audio(1, "eng", channels=8, bitrate_kb=4000),
            audio(2, "eng", channels=6, bitrate_kb=640),
        ]
        selected = StreamSelector().select_audio(tracks, ["eng"], high_quality=True)
        assert [t.index for t in selected] == [1, 2]

    def test_high_quality_same_track_kept_once(self):
        tracks = [audio(1, "eng", channels=6, bitrate_kb=640), audio(2, "eng", channels=2)]
        selected = StreamSelector().select_audio(tracks, ["eng"], high_quality=True)
        assert [t.index for t in selected] == [1]

    def test_language_order_is_selection_order(self):
        tracks = [audio(1, "eng"), audio(2, "jpn")]
        selected = StreamSelector().select_audio(tracks, ["jpn", "eng"])
        assert [t.index for t in selected] == [2, 1]

    def test_two_and_three_letter_codes_match(self, sample_tracks):
        selected = StreamSelector().select_audio(sample_tracks, ["jpn"])
        assert [t.index for t in selected] == [2]

    def test_fallback_prefers_channels_then_bitrate(self):
        tracks = [
            audio(1, "fre", channels=2, bitrate_kb=320),
            audio(2, "ger", channels=6, bitrate_kb=384),
            audio(3, "ger", channels=6, bitrate_kb=640),
        ]
        selected = StreamSelector().select_audio(tracks, ["eng"])
        assert [t.index for t in selected] == [3]

    def test_missing_bitrate_treated_as_zero(self):
        tracks = [audio(1, "eng", bitrate_kb=None), audio(2, "eng", bitrate_kb=96)]
        selected = StreamSelector().select_audio(tracks, ["eng"])
        assert [t.index for t in selected] == [2]

    def test_no_audio(self):
        assert StreamSelector().select_audio([video(0)], ["eng"]) == []


class TestSubtitleSelection:
    """Forced/full subtitle heuristics."""

    def test_size_heuristic_marks_smallest_forced(self):
        tracks = [
            subtitle(3, "eng", size_bytes=40_000_000),
            subtitle(4, "eng", size_bytes=1_000_000),
        ]
        selected, forced = StreamSelector().select_subtitles(tracks, ["eng"])
        assert [t.index for t in selected] == [4, 3]
        assert forced == {4}

    def test_size_heuristic_uses_bytes_when_megabytes_round_to_zero(self, sample_tracks):
        selected, forced = StreamSelector().select_subtitles(sample_tracks, ["eng"])
        assert [t.index for t in selected] == [4, 5]
        assert forced == {4}

    def test_same_size_emits_one_track(self):
        tracks = [subtitle(3, "eng", size_bytes=500), subtitle(4, "eng", size_bytes=500)]
        selected, forced = StreamSelector().select_subtitles(tracks, ["eng"])
        assert len(selected) == 1
        assert forced == set()

    def test_explicit_forced_flag_wins(self):
        tracks = [
            subtitle(3, "eng", size_bytes=100),
            subtitle(4, "eng", size_bytes=900, forced=True),
            subtitle(5, "eng", size_bytes=5000),
            subtitle(6, "eng", size_bytes=300, forced=True),
        ]
        selected, forced = StreamSelector().select_subtitles(tracks, ["eng"])
        assert [t.index for t in selected] == [4, 5]
        assert forced == {4}

    def test_single_candidate_included_as_is(self):
        tracks = [subtitle(3, "eng", forced=True, size_bytes=10)]
        selected, forced = StreamSelector().select_subtitles(tracks, ["eng"])
        assert [t.index for t in selected] == [3]
        assert forced == set()

    def test_multiple_languages(self):
        tracks = [subtitle(3, "eng", size_bytes=10), subtitle(4, "jpn", size_bytes=10)]
        selected, _ = StreamSelector().select_subtitles(tracks, ["jpn", "eng", "ita"])
        assert [t.index for t in selected] == [4, 3]

    def test_fallback_prefers_forced_then_size(self):
        tracks = [
            subtitle(3, "fre", size_bytes=5000),
            subtitle(4, "ger", size_bytes=10, forced=True),
        ]
        selected, forced = StreamSelector().select_subtitles(tracks, ["eng"])
        assert [t.index for t in selected] == [4]
        assert forced == {4}

    def test_fallback_unforced_largest(self):
        tracks = [subtitle(3, "fre", size_bytes=5000), subtitle(4, "ger", size_bytes=10)]
        selected, forced = StreamSelector().select_subtitles(tracks, ["eng"])
        assert [t.index for t in selected] == [3]
        assert forced == set()

    def test_no_text_tracks(self):
        assert StreamSelector().select_subtitles([audio(0)], ["eng"]) == ([], set())


class TestAttachmentSelection:
    def test_general_then_video_deduplicated(self):
        general = Track(type=TrackType.GENERAL, index=-1, attachments_raw="a.ttf / b.ttf")
        vid = video(0, attachments_raw="b.ttf / c.otf")
        attachments = StreamSelector().select_attachments([general, vid], vid)
        assert [(t.index, t.title) for t in attachments] == [
            (0, "a.ttf"),
            (1, "b.ttf"),
            (2, "c.otf"),
        ]
        assert all(t.type is TrackType.ATTACHMENT for t in attachments)

    def test_video_fallback(self):
        vid = video(0, attachments_raw="font.ttf")
        attachments = StreamSelector().select_attachments([vid], vid)
        assert [t.title for t in attachments] == ["font.ttf"]

    def test_none(self):
        assert StreamSelector().select_attachments([video(0)], None) == []


class TestSelect:
    """Full selection over a probed file."""

    def test_select_sample(self, sample_tracks, default_config):
        result = StreamSelector(default_config).select(
            sample_tracks, file_path=Path("/media/anime/Show/S01E01.mkv")
        )
        assert result.video_track.index == 0
        # jpn first (path override), then eng
        assert result.audio_indices == [2, 3]
        assert result.subtitle_indices == [4, 5]
        assert result.forced_subtitle_indices == {4}
        assert [t.title for t in result.attachment_tracks] == ["OpenSans.ttf", "Roboto-Bold.ttf"]

    def test_selection_is_duplicate_free(self, sample_tracks):
        result = StreamSelector().select(sample_tracks, ["eng", "en", "jpn"], high_quality=True)
        indexes = result.audio_indices + result.subtitle_indices
        assert len(indexes) == len(set(indexes))

    def test_explicit_languages_override_config(self, sample_tracks, default_config):
        result = StreamSelector(default_config).select(sample_tracks, ["eng"])
        assert result.audio_indices == [3]
