"""YouTube Data API integration for itinerary video suggestions.

Public API:
    - YouTubeClient: Async HTTP client with TTL-cached search
    - create_youtube_client: Factory function to create the client from settings
    - create_destination_search_query: Build a search query for an itinerary stop
    - batch_fetch_videos: Sequential, rate-friendly lookups for many stops
    - enrich_itinerary_with_videos: Attach video results to every itinerary stop
"""
from src.services.youtube.client import (
    YouTubeClient,
    batch_fetch_videos,
    create_destination_search_query,
    create_youtube_client,
    enrich_itinerary_with_videos,
)
from src.services.youtube.schemas import DestinationQuery

__all__ = [
    "YouTubeClient",
    "batch_fetch_videos",
    "create_destination_search_query",
    "create_youtube_client",
    "enrich_itinerary_with_videos",
    "DestinationQuery",
]
