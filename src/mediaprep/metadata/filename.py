"""Filename heuristics for extracting series/season/episode information."""

import re
from typing import Optional

import structlog

from mediaprep.models.metadata import SeriesInfo

logger = structlog.get_logger(__name__)

SEASON_EPISODE_MARKER = re.compile(r"S\d+E\d+", re.IGNORECASE)

# Most specific first: a looser pattern would swallow the episode name
# into the series field.
SERIES_PATTERNS = (
    re.compile(
        r"^(?P<series>.+?)\s*-\s*S(?P<season>\d+)E(?P<episode>\d+)\s*-\s*(?P<name>.+)$",
        re.IGNORECASE,
    ),
    re.compile(
        r"^(?P<series>.+?)\s*-\s*S(?P<season>\d+)E(?P<episode>\d+)\s*$",
        re.IGNORECASE,
    ),
    re.compile(
        r"^(?P<series>.+?)\s*S(?P<season>\d+)E(?P<episode>\d+)\s*$",
        re.IGNORECASE,
    ),
)


def parse_series(stem: str) -> Optional[SeriesInfo]:
    """Parse a filename (without extension) into series information.

    Supported shapes, tried in order:
    - "Show Name - S01E02 - Episode Title"
    - "Show Name - S01E02"
    - "Show NameS01E02" / "Show Name S01E02"

    Args:
        stem: Filename without extension

    Returns:
        SeriesInfo, or None when the name is not a series episode
    """
    if not stem or not SEASON_EPISODE_MARKER.search(stem):
        return None

    for pattern in SERIES_PATTERNS:
        match = pattern.match(stem.strip())
        if not match:
            continue

        series = match.group("series").strip()
        if not series:
            continue

        groups = match.groupdict()
        name = groups.get("name")
        info = SeriesInfo(
            series=series,
            season=int(match.group("season")),
            episode=int(match.group("episode")),
            episode_name=name.strip() if name and name.strip() else None,
        )
        logger.debug("Parsed series from filename", filename=stem, series=str(info))
        return info

    logger.debug("Season/episode marker found but no pattern matched", filename=stem)
    return None
