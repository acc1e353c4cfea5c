"""Unit tests for the track model normalizer."""

import pytest

from mediaprep.core.normalizer import (
    KILOBITS,
    MEGABYTES,
    normalize_tracks,
    parse_flag,
    parse_int,
    parse_scaled,
    parse_scan_type,
)
from mediaprep.models.track import TrackType


class TestFieldParsing:
    """Total field extraction never raises."""

    @pytest.mark.parametrize("raw", ["N/A", "", "unknown", None, "   ", "nan", "inf"])
    def test_unparsable_scaled_values_are_none(self, raw):
        assert parse_scaled(raw, KILOBITS) is None
        assert parse_scaled(raw, MEGABYTES) is None

    def test_bitrate_is_rounded_kilobits(self):
        assert parse_scaled("640000", KILOBITS) == 640
        assert parse_scaled("127600", KILOBITS) == 128

    def test_size_is_rounded_megabytes(self):
        assert parse_scaled("40200000", MEGABYTES) == 40
        assert parse_scaled("1499999", MEGABYTES) == 1

    def test_multi_value_takes_first(self):
        assert parse_int("8 / 6") == 8

    def test_parse_int_accepts_numeric_strings(self):
        assert parse_int("1080") == 1080
        assert parse_int(2160) == 2160
        assert parse_int("abc") is None

    def test_flags(self):
        assert parse_flag("Yes") is True
        assert parse_flag("no") is False
        assert parse_flag(None) is False

    def test_scan_type(self):
        assert parse_scan_type("Interlaced") == "interlaced"
        assert parse_scan_type("MBAFF") == "interlaced"
        assert parse_scan_type("Progressive") == "progressive"
        assert parse_scan_type(None, "TFF") == "interlaced"
        assert parse_scan_type(None) is None


class TestNormalizeTracks:
    """Track list normalization."""

    def test_indexes_skip_general_and_menu(self, sample_tracks):
        general = sample_tracks[0]
        assert general.type is TrackType.GENERAL
        assert general.index == -1

        streams = [t for t in sample_tracks if t.type.is_stream]
        assert [t.index for t in streams] == [0, 1, 2, 3, 4, 5]

        menu = sample_tracks[-1]
        assert menu.type is TrackType.MENU
        assert menu.index == -1

    def test_indexes_are_unique(self, sample_tracks):
        indexes = [t.index for t in sample_tracks if t.index >= 0]
        assert len(indexes) == len(set(indexes))

    def test_video_fields(self, sample_tracks):
        video = sample_tracks[1]
        assert video.type is TrackType.VIDEO
        assert video.width == 3840
        assert video.height == 2160
        assert video.fps == "23.976"
        assert video.bitrate_kb == 15000
        assert video.size_mb == 4500
        assert video.scan_type == "progressive"
        assert video.color_primaries == "BT.2020"
        assert video.hdr_format == "SMPTE ST 2086"
        assert video.type_order == 1  # no @typeorder supplied

    def test_audio_fields(self, sample_tracks):
        truehd, ac3, eac3 = sample_tracks[2:5]
        assert truehd.channels == 8
        assert truehd.bitrate_kb == 4200
        assert truehd.language_code == "ja"
        assert truehd.language_name == "Japanese"
        assert ac3.type_order == 2
        assert eac3.bitrate_kb is None
        assert eac3.size_mb is None

    def test_subtitle_fields(self, sample_tracks):
        small, large = sample_tracks[5:7]
        assert small.type is TrackType.TEXT
        assert small.forced is False
        assert small.size_bytes == 15000
        assert small.size_mb == 0
        assert large.element_count == 410

    def test_general_attachments_kept_raw(self, sample_tracks):
        assert sample_tracks[0].attachments_raw == "OpenSans.ttf / Roboto-Bold.ttf"

    def test_language_string_wins_over_lookup(self):
        tracks = normalize_tracks(
            [{"@type": "Audio", "Language": "en", "Language_String": "English (US)"}]
        )
        assert tracks[0].language_name == "English (US)"

    def test_unknown_types_still_take_an_index(self):
        tracks = normalize_tracks([{"@type": "Other"}, {"@type": "Audio"}])
        assert [t.index for t in tracks] == [0, 1]
        assert tracks[0].type is TrackType.OTHER

    def test_non_mapping_records_are_skipped(self):
        tracks = normalize_tracks(["garbage", {"@type": "Video"}])
        assert len(tracks) == 1
        assert tracks[0].index == 0
