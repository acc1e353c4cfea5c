"""Encoding target and compiled-argument models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from mediaprep.models.track import Track


class VideoCodec(Enum):
    """Target video encoders."""

    X264 = "x264"
    X265 = "x265"
    H264_NVENC = "h264_nvenc"
    HEVC_NVENC = "hevc_nvenc"

    @property
    def is_hardware(self) -> bool:
        return self in (VideoCodec.H264_NVENC, VideoCodec.HEVC_NVENC)


class TargetFormat(Enum):
    """Target output resolution."""

    P720 = "720p"
    P1080 = "1080p"
    NONE = "none"

    @property
    def height(self) -> Optional[int]:
        return {TargetFormat.P720: 720, TargetFormat.P1080: 1080}.get(self)


class Container(Enum):
    """Output container formats."""

    MKV = "mkv"
    MP4 = "mp4"

    @property
    def is_taggable(self) -> bool:
        """Whether mkvpropedit can edit files of this container."""
        return self is Container.MKV


@dataclass(frozen=True)
class SelectionResult:
    """Streams chosen by the auto-selector."""

    video_track: Optional[Track] = None
    audio_tracks: tuple[Track, ...] = ()
    subtitle_tracks: tuple[Track, ...] = ()
    forced_subtitle_indices: frozenset[int] = frozenset()
    attachment_tracks: tuple[Track, ...] = ()

    def __post_init__(self):
        subtitle_indices = {t.index for t in self.subtitle_tracks}
        if not self.forced_subtitle_indices <= subtitle_indices:
            raise ValueError("Forced subtitle indices must be selected subtitle tracks")

    @property
    def audio_indices(self) -> list[int]:
        return [t.index for t in self.audio_tracks]

    @property
    def subtitle_indices(self) -> list[int]:
        return [t.index for t in self.subtitle_tracks]


@dataclass(frozen=True)
class CompiledParameters:
    """Ordered argument lists produced by one compiler."""

    encoder_args: tuple[str, ...] = ()
    tag_editor_args: tuple[str, ...] = ()


@dataclass(frozen=True)
class VideoParameters(CompiledParameters):
    """Video compiler output with the resolved format label."""

    format_label: str = "H264"


@dataclass(frozen=True)
class EncodePlan:
    """Complete encoder and tag-editor invocations for one file."""

    input_path: str
    output_path: str
    container: Container
    title: str
    encoder_args: tuple[str, ...] = field(default_factory=tuple)
    tag_editor_args: tuple[str, ...] = field(default_factory=tuple)

    @property
    def needs_tagging(self) -> bool:
        return self.container.is_taggable and bool(self.tag_editor_args)
