import logging
from typing import List, Optional, Sequence

from langchain_core.language_models.chat_models import BaseChatModel
from tenacity.wait import wait_base

from src.core.config import ApiSettings
from src.core.errors import ProviderUnavailable
from src.core.prompts import build_concierge_prompt
from src.core.schemas import (
    ContentKind,
    HeritageRecognitionResult,
    Itinerary,
    SustainabilityInsights,
    TranslationResult,
    VideoResult,
)
from src.pipelines.generation import GenerationPipeline, build_request
from src.services.openrouter import (
    CHAT_CALL_SPEC,
    ChatTurn,
    ModelGateway,
    create_openrouter_llm,
)
from src.services.youtube import (
    YouTubeClient,
    create_youtube_client,
    enrich_itinerary_with_videos,
)

logger = logging.getLogger(__name__)

REQUIRED_SETTINGS = [
    "openrouter_api_key",
]

BATCH_SEPARATOR = "---SEPARATOR---"
MAX_VIDEO_RESULTS = 10


def _ensure_configuration(settings: ApiSettings) -> None:
    missing = [field for field in REQUIRED_SETTINGS if not getattr(settings, field)]
    if missing:
        joined = ", ".join(missing)
        raise RuntimeError(
            f"Missing required environment variables for the content service: {joined}"
        )


class GenerationService:
    """Container for the generation pipeline and its collaborators.

    This class owns everything a request handler needs:
    - the process-wide chat client and the gateway built around it
    - the generation pipeline (prompt, call, extraction, normalization)
    - the YouTube client and its TTL cache used for itinerary enrichment

    ``llm`` and ``video_client`` may be injected, which is how tests swap in
    fakes without touching the network.

    Attributes:
        settings: API configuration with external service credentials
        llm: Chat model shared by every request
        gateway: Timeout/retry/classification wrapper around ``llm``
        pipeline: Dispatch table runner for the content kinds
        video_client: YouTube search client used for enrichment
    """

    def __init__(
        self,
        settings: ApiSettings,
        *,
        llm: Optional[BaseChatModel] = None,
        video_client: Optional[YouTubeClient] = None,
        retry_wait: Optional[wait_base] = None,
    ) -> None:
        if llm is None:
            _ensure_configuration(settings)
            llm = create_openrouter_llm(settings)

        self.settings = settings
        self.llm = llm
        self.gateway = ModelGateway(llm, retry_wait=retry_wait)
        self.pipeline = GenerationPipeline(self.gateway)
        self.video_client = video_client if video_client is not None else create_youtube_client(settings)

    def __repr__(self) -> str:
        llm_name = getattr(self.llm, "model_name", None) or type(self.llm).__name__
        return (
            f"GenerationService(llm='{llm_name}', "
            f"video_cache_entries={len(self.video_client.cache)}, "
            f"production={self.settings.is_production})"
        )

    async def generate_itinerary(
        self,
        *,
        country: Optional[str],
        days: int = 7,
        travel_style: str = "cultural",
        budget: str = "mid-range",
        interests: Sequence[str] = (),
        special_requests: Optional[str] = None,
        include_videos: bool = False,
    ) -> Itinerary:
        request = build_request(
            ContentKind.ITINERARY,
            country=country,
            days=days,
            travel_style=travel_style,
            budget=budget,
            interests=list(interests),
            special_requests=special_requests,
            include_videos=include_videos,
        )
        itinerary = await self.pipeline.run(request)
        if include_videos:
            logger.info("Enriching itinerary with videos")
            itinerary = await enrich_itinerary_with_videos(itinerary, self.video_client)
        return itinerary

    async def recognize_heritage_text(
        self,
        description: str,
        country_hint: Optional[str] = None,
    ) -> HeritageRecognitionResult:
        request = build_request(
            ContentKind.HERITAGE_TEXT,
            description=description,
            country_hint=country_hint or "Tunisia",
        )
        return await self.pipeline.run(request)

    async def recognize_heritage_image(
        self,
        *,
        image_url: Optional[str] = None,
        image_bytes: Optional[bytes] = None,
        mime_type: str = "image/jpeg",
        country: Optional[str] = None,
        prompt: Optional[str] = None,
    ) -> HeritageRecognitionResult:
        request = build_request(
            ContentKind.HERITAGE_IMAGE,
            image_url=image_url,
            image_bytes=image_bytes,
            mime_type=mime_type,
            country=country or "Tunisia",
            prompt=prompt or "Identify this heritage site",
        )
        return await self.pipeline.run(request)

    async def sustainability_insights(
        self,
        *,
        name: Optional[str],
        country: Optional[str],
        month: Optional[str],
        visitor_count: Optional[int] = None,
    ) -> SustainabilityInsights:
        request = build_request(
            ContentKind.SUSTAINABILITY,
            name=name,
            country=country,
            month=month,
            visitor_count=visitor_count,
        )
        return await self.pipeline.run(request)

    async def translate(
        self,
        text: str,
        target_lang: str,
        source_lang: Optional[str] = None,
    ) -> TranslationResult:
        request = build_request(
            ContentKind.TRANSLATION,
            text=text,
            target_lang=target_lang,
            source_lang=source_lang,
        )
        if not text.strip():
            return TranslationResult(translatedText=text)
        return await self.pipeline.run(request)

    async def translate_batch(
        self,
        texts: Sequence[str],
        target_lang: str,
        source_lang: Optional[str] = None,
    ) -> List[str]:
        """Translate several strings in one model call.

        When the model does not return one segment per input the originals are
        returned unchanged.
        """
        if not texts:
            return []
        joined = f"\n{BATCH_SEPARATOR}\n".join(texts)
        result = await self.translate(joined, target_lang, source_lang)
        segments = [segment.strip() for segment in result.translatedText.split(BATCH_SEPARATOR)]
        if len(segments) != len(texts):
            logger.warning(
                "Batch translation returned %s segments for %s inputs; keeping originals",
                len(segments),
                len(texts),
            )
            return list(texts)
        return segments

    async def chat(
        self,
        messages: Sequence[ChatTurn],
        *,
        country: Optional[str] = None,
        interests: Sequence[str] = (),
    ) -> str:
        system_prompt = build_concierge_prompt(country, interests)
        response = await self.gateway.converse(CHAT_CALL_SPEC, system_prompt, messages)
        reply = response.text.strip()
        if not reply:
            raise ProviderUnavailable("Empty response from the chat model")
        return reply

    async def search_videos(self, query: str, max_results: int = 2) -> List[VideoResult]:
        max_results = min(max(max_results, 1), MAX_VIDEO_RESULTS)
        return await self.video_client.search_videos(query, max_results)

    async def close(self) -> None:
        await self.video_client.aclose()
