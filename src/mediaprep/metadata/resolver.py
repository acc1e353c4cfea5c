"""Episode title resolution from filename and online scrapers."""

from pathlib import Path
from typing import Optional

import httpx
import structlog

from mediaprep.config import Config
from mediaprep.metadata.cache import ResponseCache
from mediaprep.metadata.tmdb import TMDBClient, TMDBError
from mediaprep.models.metadata import Scraper, SeriesInfo

logger = structlog.get_logger(__name__)


class EpisodeResolver:
    """Fill in missing episode titles from a scraper.

    Scraper problems never fail the caller: the filename-derived
    information is kept and a warning is returned instead.
    """

    def __init__(self, tmdb_client: Optional[TMDBClient] = None):
        """Initialize episode resolver.

        Args:
            tmdb_client: TMDB API client (None if TMDB is disabled)
        """
        self.tmdb_client = tmdb_client

    @classmethod
    def from_config(cls, config: Config) -> "EpisodeResolver":
        """Build a resolver, creating a cached TMDB client when enabled."""
        if config.tmdb.enabled and config.tmdb.api_key:
            cache = ResponseCache(Path(config.tmdb.cache_path), config.tmdb.cache_ttl_days)
            return cls(TMDBClient(config.tmdb.api_key, cache))
        return cls(None)

    async def close(self):
        if self.tmdb_client:
            await self.tmdb_client.close()

    async def resolve(
        self, info: SeriesInfo, scraper: Scraper
    ) -> tuple[SeriesInfo, Optional[str]]:
        """Resolve the episode title for a parsed series file.

        The scraper is only consulted when the filename has no episode title.

        Args:
            info: Series info parsed from the filename
            scraper: Scraper to use

        Returns:
            (series info, warning message or None)
        """
        if info.episode_name or scraper is Scraper.NONE:
            return info, None

        if scraper is Scraper.TMDB:
            if self.tmdb_client is None:
                return info, self._degrade(info, scraper, "TMDB is not configured")
            try:
                episode = await self.tmdb_client.find_episode(
                    info.series, info.season, info.episode
                )
            except (TMDBError, httpx.HTTPError) as e:
                return info, self._degrade(info, scraper, f"lookup failed: {e}")

            if episode is None:
                return info, self._degrade(info, scraper, "episode not found")

            logger.info(
                "Resolved episode title",
                series=info.series,
                season=info.season,
                episode=info.episode,
                title=episode.title,
                source=episode.source.value,
            )
            return info.with_episode_name(episode.title), None

        return info, self._degrade(info, scraper, "scraper not implemented")

    @staticmethod
    def _degrade(info: SeriesInfo, scraper: Scraper, reason: str) -> str:
        message = f"{scraper.value}: {reason}, using filename metadata"
        logger.warning(
            "Scraper unavailable, using filename metadata",
            scraper=scraper.value,
            series=info.series,
            season=info.season,
            episode=info.episode,
            reason=reason,
        )
        return message
