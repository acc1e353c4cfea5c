"""Stream auto-selection with path-based language priority resolution."""

from fnmatch import fnmatch
from pathlib import Path
from typing import Iterable, Optional, Sequence

from mediaprep.config import Config
from mediaprep.models.encoding import SelectionResult
from mediaprep.models.track import Track, TrackType
from mediaprep.utils.language import languages_match
from mediaprep.utils.logger import get_logger

logger = get_logger(__name__)

ATTACHMENT_SEPARATOR = " / "
MAX_STANDARD_CHANNELS = 6


class PriorityResolver:
    """Resolve language priority based on file path and configuration."""

    def __init__(self, config: Config):
        """Initialize priority resolver.

        Args:
            config: Application configuration
        """
        self.global_priority = config.language_priority
        self.overrides = config.path_overrides

    def resolve_priority(self, file_path: Path) -> list[str]:
        """Resolve language priority for a file based on path overrides.

        Checks path overrides in order. First matching pattern wins.
        Falls back to global priority if no override matches.

        Args:
            file_path: Path to the file

        Returns:
            List of language codes in priority order
        """
        file_path_str = str(file_path)

        for override in self.overrides:
            if fnmatch(file_path_str, override.path):
                logger.info(
                    "Using path-specific language priority",
                    file=file_path_str,
                    pattern=override.path,
                    priority=override.language_priority,
                )
                return override.language_priority

        logger.debug(
            "Using global language priority",
            file=file_path_str,
            priority=self.global_priority,
        )
        return self.global_priority


def _bitrate(track: Track) -> int:
    return track.bitrate_kb or 0


def _size(track: Track) -> tuple[int, int]:
    # Byte size first: MB rounding makes small subtitle tracks look equal
    return (track.size_bytes or 0, track.element_count or 0)


def _of_type(tracks: Iterable[Track], track_type: TrackType) -> list[Track]:
    return [t for t in tracks if t.type is track_type]


def _matching(tracks: Iterable[Track], language: str) -> list[Track]:
    return [t for t in tracks if languages_match(t.language_code, language)]


class StreamSelector:
    """Select video, audio, subtitle and attachment streams to keep."""

    def __init__(self, config: Optional[Config] = None):
        """Initialize stream selector.

        Args:
            config: Application configuration (used for language priority
                when the caller does not pass languages explicitly)
        """
        self.config = config or Config.from_defaults()
        self.priority_resolver = PriorityResolver(self.config)

    def select(
        self,
        tracks: Sequence[Track],
        languages: Optional[Sequence[str]] = None,
        high_quality: bool = False,
        file_path: Optional[Path] = None,
    ) -> SelectionResult:
        """Select the streams to keep.

        Args:
            tracks: Normalized tracks of one probed file
            languages: Preferred language codes in priority order; resolved
                from configuration (and ``file_path`` overrides) when None
            high_quality: Also keep the best track of any channel count
            file_path: Source file, for path-based priority overrides

        Returns:
            SelectionResult
        """
        if languages is None:
            if file_path is not None:
                languages = self.priority_resolver.resolve_priority(file_path)
            else:
                languages = self.config.language_priority

        video = self.select_video(tracks)
        audio = self.select_audio(tracks, languages, high_quality)
        subtitles, forced = self.select_subtitles(tracks, languages)
        attachments = self.select_attachments(tracks, video)

        result = SelectionResult(
            video_track=video,
            audio_tracks=tuple(audio),
            subtitle_tracks=tuple(subtitles),
            forced_subtitle_indices=frozenset(forced),
            attachment_tracks=tuple(attachments),
        )

        logger.info(
            "Streams selected",
            file=str(file_path) if file_path else None,
            languages=list(languages),
            video=video.index if video else None,
            audio=result.audio_indices,
            subtitles=result.subtitle_indices,
            forced=sorted(result.forced_subtitle_indices),
            attachments=len(attachments),
        )
        return result

    def select_video(self, tracks: Sequence[Track]) -> Optional[Track]:
        """First video track in probe order, or None."""
        videos = _of_type(tracks, TrackType.VIDEO)
        if not videos:
            logger.warning("No video track found")
            return None
        return videos[0]

    def select_audio(
        self,
        tracks: Sequence[Track],
        languages: Sequence[str],
        high_quality: bool = False,
    ) -> list[Track]:
        """Select audio tracks per language.

        For each language: with ``high_quality`` the highest-bitrate track of
        any channel count, then the highest-bitrate track with at most 6
        channels. Falls back to the single track with the most channels (then
        highest bitrate) when no language matched.
        """
        audio = _of_type(tracks, TrackType.AUDIO)
        if not audio:
            logger.warning("No audio tracks found")
            return []

        selected: list[Track] = []

        def add(track: Optional[Track]) -> None:
            if track is not None and all(t.index != track.index for t in selected):
                selected.append(track)

        for language in languages:
            candidates = _matching(audio, language)
            if not candidates:
                continue

            if high_quality:
                add(max(candidates, key=_bitrate))

            standard = [t for t in candidates if (t.channels or 0) <= MAX_STANDARD_CHANNELS]
            if standard:
                add(max(standard, key=_bitrate))

        if not selected:
            fallback = max(audio, key=lambda t: (t.channels or 0, _bitrate(t)))
            logger.info(
                "No audio track matched preferred languages, using best available",
                track_index=fallback.index,
                language=fallback.language_code,
                channels=fallback.channels,
            )
            selected.append(fallback)

        return selected

    def select_subtitles(
        self,
        tracks: Sequence[Track],
        languages: Sequence[str],
    ) -> tuple[list[Track], set[int]]:
        """Select subtitle tracks per language and mark the forced ones.

        Returns:
            (selected subtitle tracks, indices of forced selections)
        """
        texts = _of_type(tracks, TrackType.TEXT)
        if not texts:
            return [], set()

        selected: list[Track] = []
        forced: set[int] = set()

        def add(track: Track, is_forced: bool = False) -> None:
            if any(t.index == track.index for t in selected):
                return
            selected.append(track)
            if is_forced:
                forced.add(track.index)

        for language in languages:
            candidates = _matching(texts, language)
            if not candidates:
                continue

            if len(candidates) == 1:
                add(candidates[0])
                continue

            flagged = [t for t in candidates if t.forced]
            if flagged:
                forced_pick = flagged[0]
                remainder = [t for t in candidates if t.index != forced_pick.index]
                add(forced_pick, is_forced=True)
                add(max(remainder, key=_size))
                continue

            # No explicit flag: the smallest track is usually signs/songs only
            smallest = min(candidates, key=_size)
            largest = max(candidates, key=_size)
            if smallest.index == largest.index:
                add(largest)
            else:
                add(smallest, is_forced=True)
                add(largest)

        if not selected:
            fallback = max(texts, key=lambda t: (t.forced, _size(t)))
            logger.info(
                "No subtitle track matched preferred languages, using best available",
                track_index=fallback.index,
                language=fallback.language_code,
                forced=fallback.forced,
            )
            add(fallback, is_forced=fallback.forced)

        return selected, forced

    def select_attachments(
        self,
        tracks: Sequence[Track],
        video: Optional[Track] = None,
    ) -> list[Track]:
        """Turn attachment (font) lists into synthetic Attachment tracks.

        The General track's list is used first, then the video track's;
        names appearing in both are kept once. Each attachment's index is
        its position in the combined list.
        """
        sources = [t for t in tracks if t.type is TrackType.GENERAL]
        if video is not None:
            sources.append(video)

        names: list[str] = []
        for source in sources:
            if not source.attachments_raw:
                continue
            for name in source.attachments_raw.split(ATTACHMENT_SEPARATOR):
                name = name.strip()
                if name and name not in names:
                    names.append(name)

        return [
            Track(type=TrackType.ATTACHMENT, index=position, type_order=position + 1, title=name)
            for position, name in enumerate(names)
        ]
