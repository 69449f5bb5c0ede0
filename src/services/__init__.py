"""External service integrations for content generation.

This package provides the clients used by the generation pipeline:

- OpenRouter: Hosted LLM calls with per-kind model selection, timeouts and retries
- YouTube: Video suggestions for itinerary stops, memoised in a TTL cache

Each service module exports:
    - create_*: Factory to build the client from ``ApiSettings``
    - Input/output schemas: Pydantic models and dataclasses for the calls

Example Usage:
    >>> from src.services.openrouter import ModelGateway, create_openrouter_llm
    >>> from src.core.config import ApiSettings
    >>>
    >>> settings = ApiSettings.from_env()
    >>> gateway = ModelGateway(create_openrouter_llm(settings))
"""

# OpenRouter model gateway
from src.services.openrouter import (
    CHAT_CALL_SPEC,
    MODEL_CALL_SPECS,
    ChatTurn,
    ModelCallSpec,
    ModelGateway,
    RawModelResponse,
    create_openrouter_llm,
    resolve_call_spec,
)

# YouTube video suggestions
from src.services.youtube import (
    DestinationQuery,
    YouTubeClient,
    batch_fetch_videos,
    create_destination_search_query,
    create_youtube_client,
    enrich_itinerary_with_videos,
)

__all__ = [
    # OpenRouter
    "CHAT_CALL_SPEC",
    "MODEL_CALL_SPECS",
    "ChatTurn",
    "ModelCallSpec",
    "ModelGateway",
    "RawModelResponse",
    "create_openrouter_llm",
    "resolve_call_spec",
    # YouTube
    "DestinationQuery",
    "YouTubeClient",
    "batch_fetch_videos",
    "create_destination_search_query",
    "create_youtube_client",
    "enrich_itinerary_with_videos",
]
