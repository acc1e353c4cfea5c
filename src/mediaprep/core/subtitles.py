"""Subtitle stream argument compilation for ffmpeg and mkvpropedit."""

from typing import AbstractSet, Sequence

from mediaprep.models.encoding import CompiledParameters, Container
from mediaprep.models.track import Track
from mediaprep.utils.language import normalize_language_code
from mediaprep.utils.logger import get_logger

logger = get_logger(__name__)

# 3GPP timed text cannot be copied into Matroska
LEGACY_TIMED_TEXT = {"tx3g"}
TEXT_CODECS = {Container.MKV: "srt", Container.MP4: "mov_text"}


def subtitle_codec(track: Track, container: Container = Container.MKV) -> str:
    """Output codec for a subtitle track: convert legacy timed text, else copy."""
    if (track.codec_id or "").lower() in LEGACY_TIMED_TEXT:
        return TEXT_CODECS[container]
    return "copy"


def compile_subtitles(
    tracks: Sequence[Track],
    indices: Sequence[int],
    forced_indices: AbstractSet[int],
    container: Container = Container.MKV,
) -> CompiledParameters:
    """Compile per-slot subtitle arguments.

    Forced tracks are never default; the first non-forced track resolved is
    the only default one.

    Args:
        tracks: All tracks of the probed file
        indices: Selected subtitle stream indexes, in output order
        forced_indices: Indexes of the selections that are forced
        container: Output container

    Returns:
        CompiledParameters
    """
    by_index = {t.index: t for t in tracks if t.index >= 0}
    encoder_args: list[str] = []
    tag_args: list[str] = []
    default_assigned = False
    slot = 0

    for index in indices:
        track = by_index.get(index)
        if track is None:
            logger.warning("Selected subtitle index not found, skipping", track_index=index)
            continue

        language = track.language_name or track.language_code or "Unknown"
        encoder_args.extend(
            [
                "-map",
                f"0:{track.index}",
                f"-c:s:{slot}",
                subtitle_codec(track, container),
                f"-metadata:s:s:{slot}",
                f"language={normalize_language_code(track.language_code) or 'und'}",
            ]
        )

        flags = []
        if index in forced_indices:
            title = f"Subtitles - {language} - Forced"
            is_forced, is_default = True, False
            flags.append("forced")
        else:
            title = f"Subtitles - {language}"
            is_forced, is_default = False, not default_assigned
            default_assigned = default_assigned or is_default
            if is_default:
                flags.append("default")

        encoder_args.extend(
            [
                f"-metadata:s:s:{slot}",
                f"title={title}",
                f"-disposition:s:{slot}",
                "+".join(flags) if flags else "0",
            ]
        )
        tag_args.extend(
            [
                "--edit",
                f"track:s{slot + 1}",
                "--set",
                f"flag-default={1 if is_default else 0}",
                "--set",
                f"flag-forced={1 if is_forced else 0}",
            ]
        )

        logger.debug(
            "Subtitle slot compiled",
            slot=slot,
            track_index=track.index,
            forced=is_forced,
            default=is_default,
            title=title,
        )
        slot += 1

    return CompiledParameters(tuple(encoder_args), tuple(tag_args))


def compile_attachments(attachments: Sequence[Track]) -> CompiledParameters:
    """Map attachment (font) streams by their position among attachments."""
    if not attachments:
        return CompiledParameters()

    encoder_args: list[str] = []
    for attachment in attachments:
        encoder_args.extend(["-map", f"0:t:{attachment.index}"])
    encoder_args.extend(["-c:t", "copy"])
    return CompiledParameters(tuple(encoder_args))
