"""Output path computation and materialization.

``build_output_path`` is pure; ``materialize`` is the single step that
touches the filesystem.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from mediaprep.metadata.filename import parse_series
from mediaprep.models.encoding import Container
from mediaprep.models.metadata import NamingProfile, SeriesInfo
from mediaprep.utils.logger import get_logger

logger = get_logger(__name__)

if os.name == "nt":
    INVALID_CHARACTERS = frozenset('<>:"/\\|?*') | frozenset(chr(c) for c in range(32))
else:
    INVALID_CHARACTERS = frozenset("/\0")


def sanitize(value: str, invalid: frozenset[str] = INVALID_CHARACTERS) -> str:
    """Replace characters invalid in a path segment with ``_`` and trim."""
    return "".join("_" if ch in invalid else ch for ch in value).strip()


@dataclass(frozen=True)
class OutputPath:
    """Where an output file goes and how it is titled."""

    directory: Path
    filename: str
    title: str

    @property
    def path(self) -> Path:
        return self.directory / self.filename


def season_folder(season: int) -> str:
    """Season folder name; season 0 holds specials."""
    return "Specials" if season == 0 else f"Season {season:02d}"


def episode_names(info: SeriesInfo, profile: Optional[NamingProfile]) -> tuple[str, str]:
    """Return ``(file stem, title)`` for an episode under a naming profile.

    ``profile=None`` is the encode-output convention.
    """
    season, episode = info.season, info.episode
    if profile is None:
        stem = f"{info.series} - S{season:02d}E{episode:02d}"
        title = f"{info.series} - S{season:02d} E{episode:03d}"
    elif profile is NamingProfile.STANDARD:
        stem = f"{info.series} S{season:02d}E{episode:03d}"
        title = f"{info.series} - S{season:02d} E{episode:03d}"
    elif profile in (NamingProfile.PLEX, NamingProfile.EMBY, NamingProfile.JELLYFIN):
        stem = title = f"{info.series} - s{season:02d}e{episode:02d}"
    else:
        raise ValueError(f"Unsupported naming profile: {profile}")

    if info.episode_name:
        title = f"{title} - {info.episode_name}"
    return stem, title


def build_output_path(
    base_dir: Path,
    stem: str,
    container: Container,
    profile: Optional[NamingProfile] = None,
    series_info: Optional[SeriesInfo] = None,
) -> OutputPath:
    """Compute the output directory, filename and display title.

    Series files go to ``base/<series>/Season NN`` (or ``Specials``);
    anything else goes to ``base/<stem>``.

    Args:
        base_dir: Base output directory
        stem: Source filename without extension
        container: Output container (sets the extension)
        profile: Naming profile, or None for the encode convention
        series_info: Pre-resolved series info (e.g. with a scraped episode
            name); parsed from ``stem`` when omitted

    Returns:
        OutputPath
    """
    info = series_info or parse_series(stem)
    extension = container.value

    if info is None:
        return OutputPath(
            directory=Path(base_dir) / sanitize(stem),
            filename=sanitize(f"{stem}.{extension}"),
            title=sanitize(stem),
        )

    file_stem, title = episode_names(info, profile)
    return OutputPath(
        directory=Path(base_dir) / sanitize(info.series) / sanitize(season_folder(info.season)),
        filename=sanitize(f"{file_stem}.{extension}"),
        title=sanitize(title),
    )


def materialize(output: OutputPath) -> Path:
    """Create the output directory if needed and return the full file path."""
    output.directory.mkdir(parents=True, exist_ok=True)
    logger.debug("Output directory ready", directory=str(output.directory))
    return output.path
