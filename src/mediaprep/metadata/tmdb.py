"""TMDB API client for episode titles, with caching and retry logic."""

from typing import Optional

import httpx
import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from mediaprep.metadata.cache import ResponseCache
from mediaprep.models.metadata import EpisodeMetadata, Scraper

logger = structlog.get_logger(__name__)

_RETRY = dict(
    stop=stop_after_attempt(3),
    wait=wait_exponential(min=1, max=10),
    retry=retry_if_exception_type((httpx.TransportError, httpx.TimeoutException)),
    reraise=True,
)


class TMDBError(Exception):
    """Base exception for TMDB API errors."""

    pass


class TMDBClient:
    """TMDB API client for TV series and episode lookups."""

    base_url = "https://api.themoviedb.org/3"

    def __init__(
        self,
        api_key: str,
        cache: Optional[ResponseCache] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize TMDB client.

        Args:
            api_key: TMDB API key
            cache: Optional cache for API responses
            client: Optional preconfigured HTTP client
        """
        self.api_key = api_key
        self.cache = cache
        self.client = client or httpx.AsyncClient(timeout=10.0)

    async def close(self):
        """Close HTTP client."""
        await self.client.aclose()

    async def _get(self, path: str, **params) -> Optional[dict]:
        """GET a TMDB endpoint; None on 404, TMDBError on other HTTP errors."""
        response = await self.client.get(
            f"{self.base_url}{path}",
            params={"api_key": self.api_key, **params},
        )
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                return None
            logger.error(
                "TMDB API error",
                path=path,
                status_code=e.response.status_code,
                error=str(e),
            )
            raise TMDBError(f"TMDB API error: {e}") from e
        return response.json()

    @retry(**_RETRY)
    async def search_tv(self, query: str) -> list[dict]:
        """Search for TV series on TMDB.

        Args:
            query: Series title

        Returns:
            List of search results (may be empty)
        """
        cache_key = f"tmdb_search_tv_{query.lower()}"
        if self.cache and (cached := self.cache.get(cache_key)):
            return cached.get("results", [])

        data = await self._get("/search/tv", query=query) or {}
        results = data.get("results", [])
        logger.info("Searched TMDB for TV series", query=query, result_count=len(results))

        if self.cache and results:
            self.cache.set(cache_key, {"results": results})
        return results

    @retry(**_RETRY)
    async def get_episode(self, tv_id: int, season: int, episode: int) -> Optional[dict]:
        """Get episode details from TMDB.

        Args:
            tv_id: TMDB series ID
            season: Season number
            episode: Episode number

        Returns:
            Episode details, or None if not found
        """
        cache_key = f"tmdb_episode_{tv_id}_{season}_{episode}"
        if self.cache and (cached := self.cache.get(cache_key)):
            logger.debug("TMDB cache hit for episode", cache_key=cache_key)
            return cached

        data = await self._get(f"/tv/{tv_id}/season/{season}/episode/{episode}")
        if data is None:
            logger.warning("Episode not found on TMDB", tv_id=tv_id, season=season, episode=episode)
            return None

        logger.info(
            "Fetched episode from TMDB",
            tv_id=tv_id,
            season=season,
            episode=episode,
            title=data.get("name"),
        )
        if self.cache:
            self.cache.set(cache_key, data)
        return data

    async def find_episode(
        self, series: str, season: int, episode: int
    ) -> Optional[EpisodeMetadata]:
        """Look up an episode by series title, season and episode number."""
        results = await self.search_tv(series)
        if not results:
            logger.info("No TMDB series match", series=series)
            return None

        data = await self.get_episode(results[0]["id"], season, episode)
        if not data or not data.get("name"):
            return None

        return EpisodeMetadata(
            title=data["name"],
            source=Scraper.TMDB,
            air_date=data.get("air_date"),
            overview=data.get("overview"),
        )
