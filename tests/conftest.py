"""Shared pytest fixtures for mediaprep tests."""

import json
from pathlib import Path

import pytest

from mediaprep.config import Config, PathOverride
from mediaprep.core.normalizer import normalize_tracks
from mediaprep.models.track import Track, TrackType


@pytest.fixture
def default_config():
    """Create a default configuration for testing."""
    return Config(
        language_priority=["eng", "jpn"],
        path_overrides=[
            PathOverride(path="/media/anime/**", language_priority=["jpn", "eng"]),
        ],
    )


@pytest.fixture
def mediainfo_records():
    """Raw MediaInfo ``media.track`` records for an anime episode."""
    return [
        {
            "@type": "General",
            "Title": "Old Title",
            "extra": {"Attachments": "OpenSans.ttf / Roboto-Bold.ttf"},
        },
        {
            "@type": "Video",
            "CodecID": "V_MPEGH/ISO/HEVC",
            "Format": "HEVC",
            "Width": "3840",
            "Height": "2160",
            "FrameRate": "23.976",
            "BitRate": "15000000",
            "StreamSize": "4500000000",
            "ScanType": "Progressive",
            "colour_primaries": "BT.2020",
            "transfer_characteristics": "PQ",
            "matrix_coefficients": "BT.2020 non-constant",
            "HDR_Format": "SMPTE ST 2086",
            "Default": "Yes",
        },
        {
            "@type": "Audio",
            "@typeorder": "1",
            "CodecID": "A_TRUEHD",
            "Format": "MLP FBA",
            "Language": "ja",
            "Channels": "8",
            "BitRate": "4200000",
            "StreamSize": "1200000000",
        },
        {
            "@type": "Audio",
            "@typeorder": "2",
            "CodecID": "A_AC3",
            "Format": "AC-3",
            "Language": "ja",
            "Channels": "6",
            "BitRate": "640000",
            "StreamSize": "180000000",
        },
        {
            "@type": "Audio",
            "@typeorder": "3",
            "CodecID": "A_EAC3",
            "Format": "E-AC-3",
            "Language": "en",
            "Channels": "6",
            "BitRate": "N/A",
            "StreamSize": "",
        },
        {
            "@type": "Text",
            "@typeorder": "1",
            "CodecID": "S_TEXT/ASS",
            "Format": "ASS",
            "Language": "en",
            "StreamSize": "15000",
            "ElementCount": "40",
        },
        {
            "@type": "Text",
            "@typeorder": "2",
            "CodecID": "S_TEXT/ASS",
            "Format": "ASS",
            "Language": "en",
            "StreamSize": "92000",
            "ElementCount": "410",
        },
        {
            "@type": "Menu",
        },
    ]


@pytest.fixture
def sample_tracks(mediainfo_records):
    """Normalized tracks for ``mediainfo_records``."""
    return normalize_tracks(mediainfo_records)


@pytest.fixture
def mediainfo_json(mediainfo_records):
    """MediaInfo JSON document as printed by ``mediainfo --Output=JSON``."""
    return json.dumps({"media": {"@ref": "/media/in.mkv", "track": mediainfo_records}})


@pytest.fixture
def source_file(tmp_path):
    """An (empty) source file on disk."""
    path = tmp_path / "incoming" / "Series Name - S01E02 - Episode Title.mkv"
    path.parent.mkdir(parents=True)
    path.write_bytes(b"\x1a\x45\xdf\xa3")
    return path


def video(index=0, **kwargs):
    return Track(type=TrackType.VIDEO, index=index, **kwargs)


def audio(index, language="eng", channels=2, bitrate_kb=192, type_order=1, **kwargs):
    return Track(
        type=TrackType.AUDIO,
        index=index,
        type_order=type_order,
        language_code=language,
        channels=channels,
        bitrate_kb=bitrate_kb,
        **kwargs,
    )


def subtitle(index, language="eng", size_bytes=None, forced=False, type_order=1, **kwargs):
    return Track(
        type=TrackType.TEXT,
        index=index,
        type_order=type_order,
        language_code=language,
        size_bytes=size_bytes,
        size_mb=round(size_bytes / 1_000_000) if size_bytes else None,
        forced=forced,
        **kwargs,
    )
