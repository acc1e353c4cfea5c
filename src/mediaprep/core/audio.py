"""Audio stream argument compilation for ffmpeg and mkvpropedit."""

from typing import Optional, Sequence

from mediaprep.models.encoding import CompiledParameters
from mediaprep.models.track import Track
from mediaprep.utils.language import normalize_language_code
from mediaprep.utils.logger import get_logger

logger = get_logger(__name__)

AAC_BITRATE = "192k"
CHANNEL_LABELS = {1: "Mono", 2: "Stereo", 6: "5.1", 8: "7.1"}


def channel_label(channels: Optional[int]) -> Optional[str]:
    return CHANNEL_LABELS.get(channels) if channels is not None else None


def compile_audio(
    tracks: Sequence[Track],
    indices: Sequence[int],
    copy: bool = False,
) -> CompiledParameters:
    """Compile per-slot audio arguments.

    Output slot order is the order of ``indices``. Exactly one track, the
    first one resolved, gets the default disposition.

    Args:
        tracks: All tracks of the probed file
        indices: Selected audio stream indexes, in output order
        copy: Stream-copy instead of re-encoding to AAC (remux/copy-audio)

    Returns:
        CompiledParameters
    """
    by_index = {t.index: t for t in tracks if t.index >= 0}
    encoder_args: list[str] = []
    tag_args: list[str] = []
    slot = 0

    for index in indices:
        track = by_index.get(index)
        if track is None:
            logger.warning("Selected audio index not found, skipping", track_index=index)
            continue

        is_default = slot == 0
        encoder_args.extend(
            [
                "-map",
                f"0:{track.index}",
                f"-metadata:s:a:{slot}",
                f"language={normalize_language_code(track.language_code) or 'und'}",
                f"-disposition:a:{slot}",
                "default" if is_default else "0",
            ]
        )
        tag_args.extend(
            [
                "--edit",
                f"track:a{slot + 1}",
                "--set",
                "flag-forced=0",
                "--set",
                f"flag-default={1 if is_default else 0}",
            ]
        )

        if copy:
            encoder_args.extend([f"-c:a:{slot}", "copy"])
            codec_label = track.format
        else:
            encoder_args.extend([f"-c:a:{slot}", "aac", f"-b:a:{slot}", AAC_BITRATE])
            if track.format:
                encoder_args.extend([f"-metadata:s:a:{slot}", f"comment=Converted from {track.format}"])
            codec_label = "AAC"

        title = " - ".join(
            part for part in ("Audio", codec_label, channel_label(track.channels)) if part
        )
        encoder_args.extend([f"-metadata:s:a:{slot}", f"title={title}"])

        logger.debug(
            "Audio slot compiled",
            slot=slot,
            track_index=track.index,
            language=track.language_code,
            default=is_default,
            title=title,
        )
        slot += 1

    return CompiledParameters(tuple(encoder_args), tuple(tag_args))
