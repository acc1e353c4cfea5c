"""Unit tests for subtitle and attachment argument compilation."""

from conftest import subtitle

from mediaprep.core.subtitles import compile_attachments, compile_subtitles, subtitle_codec
from mediaprep.models.encoding import Container
from mediaprep.models.track import Track, TrackType


def _after(args, flag):
    args = list(args)
    return args[args.index(flag) + 1]


def test_subtitle_codec():
    assert subtitle_codec(subtitle(1, codec_id="S_TEXT/ASS")) == "copy"
    assert subtitle_codec(subtitle(1, codec_id="tx3g")) == "srt"
    assert subtitle_codec(subtitle(1, codec_id="tx3g"), Container.MP4) == "mov_text"


def test_forced_and_full_track():
    tracks = [
        subtitle(4, "eng", language_name="English", codec_id="S_TEXT/ASS"),
        subtitle(5, "eng", language_name="English", codec_id="S_TEXT/ASS", type_order=2),
    ]
    params = compile_subtitles(tracks, [4, 5], {4})
    args = list(params.encoder_args)

    assert args[:6] == ["-map", "0:4", "-c:s:0", "copy", "-metadata:s:s:0", "language=eng"]
    assert "title=Subtitles - English - Forced" in args
    assert "title=Subtitles - English" in args
    assert _after(args, "-disposition:s:0") == "forced"
    assert _after(args, "-disposition:s:1") == "default"
    assert list(params.tag_editor_args) == [
        "--edit",
        "track:s1",
        "--set",
        "flag-default=0",
        "--set",
        "flag-forced=1",
        "--edit",
        "track:s2",
        "--set",
        "flag-default=1",
        "--set",
        "flag-forced=0",
    ]


def test_only_first_unforced_is_default():
    tracks = [subtitle(3, "eng"), subtitle(4, "jpn"), subtitle(5, "ita")]
    params = compile_subtitles(tracks, [3, 4, 5], set())
    args = list(params.encoder_args)

    assert _after(args, "-disposition:s:0") == "default"
    assert _after(args, "-disposition:s:1") == "0"
    assert _after(args, "-disposition:s:2") == "0"


def test_all_forced_has_no_default():
    params = compile_subtitles([subtitle(3)], [3], {3})
    assert "flag-default=1" not in params.tag_editor_args


def test_unknown_language_title():
    params = compile_subtitles([subtitle(3, language=None)], [3], set())
    assert "title=Subtitles - Unknown" in params.encoder_args
    assert "language=und" in params.encoder_args


def test_two_letter_language_is_normalized():
    params = compile_subtitles([subtitle(3, language="ja")], [3], set())
    assert "language=jpn" in params.encoder_args


def test_legacy_timed_text_converted_for_mp4():
    params = compile_subtitles([subtitle(2, codec_id="tx3g")], [2], set(), Container.MP4)
    assert _after(params.encoder_args, "-c:s:0") == "mov_text"


def test_attachments():
    attachments = [
        Track(type=TrackType.ATTACHMENT, index=0, title="a.ttf"),
        Track(type=TrackType.ATTACHMENT, index=1, title="b.ttf"),
    ]
    params = compile_attachments(attachments)
    assert list(params.encoder_args) == ["-map", "0:t:0", "-map", "0:t:1", "-c:t", "copy"]


def test_no_attachments():
    assert compile_attachments([]).encoder_args == ()
