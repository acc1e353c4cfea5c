"""Series and naming metadata models."""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


class NamingProfile(Enum):
    """Library naming conventions used when relocating files."""

    STANDARD = "standard"
    PLEX = "plex"
    EMBY = "emby"
    JELLYFIN = "jellyfin"


class Scraper(Enum):
    """Online episode metadata sources."""

    NONE = "none"
    TMDB = "tmdb"
    TVDB = "tvdb"


@dataclass(frozen=True)
class SeriesInfo:
    """Series identity parsed from a filename.

    Season 0 is the specials bucket.
    """

    series: str
    season: int
    episode: int
    episode_name: Optional[str] = None

    def with_episode_name(self, name: Optional[str]) -> "SeriesInfo":
        return replace(self, episode_name=name)

    def __str__(self) -> str:
        """Human-readable representation."""
        name = f" - {self.episode_name}" if self.episode_name else ""
        return f"{self.series} S{self.season:02d}E{self.episode:02d}{name}"


@dataclass(frozen=True)
class EpisodeMetadata:
    """Episode record returned by a scraper."""

    title: str
    source: Scraper
    air_date: Optional[str] = None
    overview: Optional[str] = None
