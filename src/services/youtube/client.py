import asyncio
import logging
import re
from typing import Any, Dict, List, Optional, Sequence

import httpx

from src.core.cache import DEFAULT_TTL_S, ResultCache, make_cache_key
from src.core.config import ApiSettings
from src.core.schemas import Itinerary, VideoResult
from src.services.youtube.schemas import DestinationQuery

logger = logging.getLogger(__name__)

_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")

_ACTIVITY_SUFFIXES = (
    (("eat", "food", "restaurant"), "food guide"),
    (("beach", "sea"), "beach travel"),
    (("museum", "historical"), "museum tour"),
    (("market", "souk"), "market shopping"),
)


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


class YouTubeClient:
    """Thin async wrapper around the YouTube Data API v3 search endpoint.

    Results are memoised in a ``ResultCache`` keyed by the normalised query
    and result count. Video suggestions are decorative, so every failure is
    logged and turned into an empty list; failures are never cached.
    """

    def __init__(
        self,
        api_key: Optional[str],
        *,
        cache: Optional[ResultCache[List[VideoResult]]] = None,
        base_url: str = "https://www.googleapis.com/youtube/v3",
        timeout_s: float = 10.0,
    ) -> None:
        self.api_key = api_key
        self.cache: ResultCache[List[VideoResult]] = cache if cache is not None else ResultCache(DEFAULT_TTL_S)
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"accept": "application/json"},
            timeout=httpx.Timeout(timeout_s, connect=5.0),
        )

    async def aclose(self) -> None:
        """Close the underlying HTTPX client."""

        await self._client.aclose()

    async def __aenter__(self) -> "YouTubeClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self._client.aclose()

    async def _aget(self, path: str, params: Dict[str, Any]) -> Any:
        """Execute a GET request and return the parsed JSON."""

        response = await self._client.get(path, params=params)
        response.raise_for_status()
        return response.json()

    async def _fetch(self, query: str, max_results: int) -> List[VideoResult]:
        data = await self._aget(
            "/search",
            {
                "part": "snippet",
                "maxResults": max_results,
                "q": query,
                "key": self.api_key,
                "type": "video",
                "videoDuration": "medium",
            },
        )
        if not isinstance(data, dict) or not isinstance(data.get("items", []), list):
            raise ValueError(f"unexpected search response shape: {type(data).__name__}")
        videos: List[VideoResult] = []
        for item in data.get("items", []):
            if not isinstance(item, dict):
                continue
            ids = item.get("id")
            video_id = ids.get("videoId") if isinstance(ids, dict) else None
            if not video_id or not isinstance(video_id, str):
                continue
            snippet = _as_dict(item.get("snippet"))
            thumbnail = _as_dict(_as_dict(snippet.get("thumbnails")).get("medium")).get("url")
            videos.append(
                VideoResult(
                    id=video_id,
                    title=_as_str(snippet.get("title")),
                    thumbnail=_as_str(thumbnail),
                    channel=_as_str(snippet.get("channelTitle")),
                )
            )
        logger.info("Found %s videos for %r", len(videos), query)
        return videos

    async def search_videos(self, query: str, max_results: int = 2) -> List[VideoResult]:
        """Return up to ``max_results`` videos for ``query`` (cached for the TTL)."""

        if not query or not query.strip():
            return []
        if not self.api_key:
            logger.warning("YouTube API key not configured; skipping video search")
            return []

        key = make_cache_key(query, max_results)
        try:
            return await self.cache.get_or_fetch(key, lambda: self._fetch(query, max_results))
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("YouTube search failed for %r: %s", query, exc)
            return []


def create_destination_search_query(name: str, country: str, activity: Optional[str] = None) -> str:
    """Build a video search query tuned to what the traveller does at the stop."""

    clean_name = _WHITESPACE.sub(" ", _NON_WORD.sub(" ", name)).strip()
    activity_lower = (activity or "").lower()
    for keywords, suffix in _ACTIVITY_SUFFIXES:
        if any(keyword in activity_lower for keyword in keywords):
            return f"{clean_name} {country} {suffix}"
    return f"{clean_name} {country} travel guide"


async def batch_fetch_videos(
    client: YouTubeClient,
    destinations: Sequence[DestinationQuery],
    *,
    max_results: int = 2,
    delay_s: float = 0.3,
) -> Dict[str, List[VideoResult]]:
    """Look up videos one destination at a time, pausing between requests."""

    results: Dict[str, List[VideoResult]] = {}
    for idx, destination in enumerate(destinations):
        if destination.name in results:
            continue
        query = create_destination_search_query(destination.name, destination.country, destination.activity)
        results[destination.name] = await client.search_videos(query, max_results)
        if delay_s and idx < len(destinations) - 1:
            await asyncio.sleep(delay_s)
    return results


async def enrich_itinerary_with_videos(
    itinerary: Itinerary,
    client: YouTubeClient,
    *,
    max_results: int = 2,
    delay_s: float = 0.3,
) -> Itinerary:
    """Return a copy of ``itinerary`` with ``videos`` filled in on every stop."""

    destinations = [
        DestinationQuery(name=stop.name, country=itinerary.country, activity=stop.activity)
        for day in itinerary.days
        for stop in day.destinations
    ]
    if not destinations:
        return itinerary

    videos = await batch_fetch_videos(client, destinations, max_results=max_results, delay_s=delay_s)
    days = [
        day.model_copy(
            update={
                "destinations": [
                    stop.model_copy(update={"videos": videos.get(stop.name, [])})
                    for stop in day.destinations
                ]
            }
        )
        for day in itinerary.days
    ]
    return itinerary.model_copy(update={"days": days})


def create_youtube_client(settings: ApiSettings) -> YouTubeClient:
    """Instantiate the YouTube client; a missing key yields a client that returns no videos."""

    return YouTubeClient(
        settings.youtube_api_key,
        cache=ResultCache(settings.video_cache_ttl_s),
    )
