"""Tag edits for retagging an existing Matroska file in place."""

from typing import Sequence

from mediaprep.core.audio import channel_label
from mediaprep.core.video import format_label
from mediaprep.models.encoding import CompiledParameters, SelectionResult
from mediaprep.models.track import Track, TrackType
from mediaprep.utils.language import normalize_language_code


def _language_edits(track: Track) -> list[str]:
    code = normalize_language_code(track.language_code)
    return ["--set", f"language={code}"] if code else []


def compile_retag(
    tracks: Sequence[Track],
    selection: SelectionResult,
    title: str,
) -> CompiledParameters:
    """Compile mkvpropedit edits that rename and re-flag every track.

    Unlike encoding, no stream is dropped: tracks are addressed by their
    position within their type. The selection only decides which audio and
    subtitle tracks become default or forced.

    Args:
        tracks: All tracks of the probed file
        selection: Auto-selection for the file
        title: New segment title

    Returns:
        CompiledParameters with tag-editor arguments only
    """
    args = ["--edit", "info", "--set", f"title={title}"]

    default_audio = selection.audio_tracks[0].index if selection.audio_tracks else None
    forced = selection.forced_subtitle_indices
    default_subtitle = next(
        (t.index for t in selection.subtitle_tracks if t.index not in forced and not t.forced),
        None,
    )

    for track in tracks:
        if track.type is TrackType.VIDEO:
            args.extend(
                [
                    "--edit",
                    f"track:v{track.type_order}",
                    "--set",
                    f"name=Video - {format_label(track.codec_id)}",
                    "--set",
                    "flag-forced=0",
                    "--set",
                    "flag-default=0",
                ]
            )
        elif track.type is TrackType.AUDIO:
            name = " - ".join(
                part for part in ("Audio", track.format, channel_label(track.channels)) if part
            )
            args.extend(["--edit", f"track:a{track.type_order}", "--set", f"name={name}"])
            args.extend(_language_edits(track))
            args.extend(
                [
                    "--set",
                    "flag-forced=0",
                    "--set",
                    f"flag-default={1 if track.index == default_audio else 0}",
                ]
            )
        elif track.type is TrackType.TEXT:
            is_forced = track.index in forced or track.forced
            language = track.language_name or track.language_code or "Unknown"
            name = f"Subtitles - {language}" + (" - Forced" if is_forced else "")
            args.extend(["--edit", f"track:s{track.type_order}", "--set", f"name={name}"])
            args.extend(_language_edits(track))
            args.extend(
                [
                    "--set",
                    f"flag-forced={1 if is_forced else 0}",
                    "--set",
                    f"flag-default={1 if track.index == default_subtitle else 0}",
                ]
            )

    return CompiledParameters(tag_editor_args=tuple(args))
