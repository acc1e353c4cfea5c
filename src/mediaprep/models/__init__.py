"""Data models shared by the mediaprep pipelines."""

from mediaprep.models.encoding import (
    CompiledParameters,
    Container,
    EncodePlan,
    SelectionResult,
    TargetFormat,
    VideoCodec,
    VideoParameters,
)
from mediaprep.models.file import ProcessResult, Stage
from mediaprep.models.metadata import EpisodeMetadata, NamingProfile, Scraper, SeriesInfo
from mediaprep.models.track import Track, TrackType

__all__ = [
    "CompiledParameters",
    "Container",
    "EncodePlan",
    "EpisodeMetadata",
    "NamingProfile",
    "ProcessResult",
    "Scraper",
    "SelectionResult",
    "SeriesInfo",
    "Stage",
    "TargetFormat",
    "Track",
    "TrackType",
    "VideoCodec",
    "VideoParameters",
]
