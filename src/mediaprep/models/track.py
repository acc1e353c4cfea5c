"""Normalized track data models."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TrackType(Enum):
    """Track kinds reported by the probe tool."""

    GENERAL = "General"
    VIDEO = "Video"
    AUDIO = "Audio"
    TEXT = "Text"
    ATTACHMENT = "Attachment"
    MENU = "Menu"
    OTHER = "Other"

    @classmethod
    def from_tag(cls, tag: Optional[str]) -> "TrackType":
        """Map a probe ``@type`` tag to a TrackType (unknown tags are OTHER)."""
        for member in cls:
            if member.value == tag:
                return member
        return cls.OTHER

    @property
    def is_stream(self) -> bool:
        """Whether the encoder numbers this track as a stream."""
        return self not in (TrackType.GENERAL, TrackType.MENU)


@dataclass(frozen=True)
class Track:
    """One stream (or pseudo-stream) inside a container.

    ``index`` is the encoder's absolute stream index (``-map 0:<index>``);
    ``type_order`` is the 1-based position within the track's type and is
    what the tag editor addresses (``track:a<type_order>``).
    """

    type: TrackType
    index: int  # Encoder stream index, -1 for General and Menu tracks
    type_order: int = 1
    codec_id: Optional[str] = None
    language_code: Optional[str] = None
    language_name: Optional[str] = None
    format: Optional[str] = None  # Display codec name (e.g. "AVC", "E-AC-3")
    title: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    fps: Optional[str] = None
    channels: Optional[int] = None
    bitrate_kb: Optional[int] = None
    size_mb: Optional[int] = None
    size_bytes: Optional[int] = None
    element_count: Optional[int] = None
    scan_type: Optional[str] = None  # "interlaced", "progressive" or None
    forced: bool = False
    color_primaries: Optional[str] = None
    color_matrix: Optional[str] = None
    color_transfer: Optional[str] = None
    hdr_format: Optional[str] = None
    hdr_profile: Optional[str] = None
    attachments_raw: Optional[str] = None

    @property
    def is_interlaced(self) -> bool:
        return self.scan_type == "interlaced"

    def __str__(self) -> str:
        """Human-readable representation."""
        lang = f" {self.language_code}" if self.language_code else ""
        fmt = f" {self.format}" if self.format else ""
        forced = " [FORCED]" if self.forced else ""
        return f"{self.type.value} #{self.index}:{lang}{fmt}{forced}"
