"""FastAPI surface for the Rihla AI content service."""
from __future__ import annotations

import os
# Load environment variables from .env file
from dotenv import load_dotenv

# Load .env file before any other imports that might need environment variables
load_dotenv()


from typing import Dict, Any, Optional
from fastapi import FastAPI, File, Form, Query, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging
from fastapi.middleware.cors import CORSMiddleware

from src.api.dependencies import lifespan, get_generation_service
from src.api.response_builder import _error_to_response, _unexpected_error_response
from src.api.schemas import (
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    HeritageRequest,
    ItineraryRequest,
    SustainabilityRequest,
    TranslateBatchRequest,
    TranslateBatchResponse,
    TranslateRequest,
    VideoSearchResponse,
)
from src.core.config import ApiSettings
from src.core.errors import GenerationError, InputValidationError
from src.core.schemas import (
    MAX_IMAGE_BYTES,
    HeritageRecognitionResult,
    Itinerary,
    SustainabilityInsights,
    TranslationResult,
)
from src.pipelines.generation import describe_validation_error
from src.services.openrouter import CHAT_CALL_SPEC, MODEL_CALL_SPECS
from src.services.openrouter.catalog import MODEL_VISION

logger = logging.getLogger(__name__)

settings = ApiSettings.from_env()

try:  # pragma: no cover - exercised through import side effects
    import sentry_sdk
except ImportError:  # pragma: no cover - only triggers in lean environments
    sentry_sdk = None  # type: ignore[assignment]
else:  # pragma: no cover - runtime configuration
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.environment,
            send_default_pii=False,
            traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.1")),
        )

app = FastAPI(title="Rihla AI Content API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

ERROR_RESPONSES: Dict[int | str, Dict[str, Any]] = {
    status: {"model": ErrorResponse} for status in (400, 401, 429, 500, 503, 504)
}


@app.exception_handler(GenerationError)
async def handle_generation_error(request: Request, exc: GenerationError) -> JSONResponse:
    return _error_to_response(exc, production=settings.is_production)


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = InputValidationError(describe_validation_error(exc))
    return _error_to_response(error, production=settings.is_production)


@app.post("/ai/itinerary", response_model=Itinerary, responses=ERROR_RESPONSES)
async def generate_itinerary(payload: ItineraryRequest):
    """Generate a personalised day-by-day itinerary.

    The model is asked for a strict JSON itinerary; whatever it returns is
    normalised into a complete ``Itinerary`` (missing days become an empty
    list, missing fields get defaults). With ``include_videos`` every stop
    gets up to two video suggestions, served from a one-hour cache.

    Raises:
        400 for invalid input, 401/429/503/504 for provider failures

    Example JSON payload:
        ```json
        {
            "country": "Tunisia",
            "days": 5,
            "style": "cultural",
            "budget": "mid-range",
            "interests": ["history", "food"],
            "special": "Vegetarian meals",
            "include_videos": true
        }
        ```
    """
    logger.info(f"Itinerary request: {payload.country}, {payload.days} days, style={payload.style}")

    service = get_generation_service()
    try:
        return await service.generate_itinerary(
            country=payload.country,
            days=payload.days,
            travel_style=payload.style,
            budget=payload.budget,
            interests=payload.interests,
            special_requests=payload.special,
            include_videos=payload.include_videos,
        )
    except GenerationError:
        raise
    except Exception as exc:
        logger.error(f"Unexpected error during itinerary generation: {str(exc)}", exc_info=True)
        return _unexpected_error_response(exc, production=settings.is_production)


@app.post("/ai/heritage", response_model=HeritageRecognitionResult, responses=ERROR_RESPONSES)
async def recognize_heritage(payload: HeritageRequest):
    """Identify a heritage site from a description or a hosted image URL."""
    logger.info(f"Heritage request: type={payload.type}, country_hint={payload.country_hint}")

    service = get_generation_service()
    try:
        if payload.type == "image_url":
            return await service.recognize_heritage_image(
                image_url=payload.value,
                country=payload.country_hint,
            )
        return await service.recognize_heritage_text(payload.value, payload.country_hint)
    except GenerationError:
        raise
    except Exception as exc:
        logger.error(f"Unexpected error during heritage recognition: {str(exc)}", exc_info=True)
        return _unexpected_error_response(exc, production=settings.is_production)


@app.post("/ai/heritage-vision", response_model=HeritageRecognitionResult, responses=ERROR_RESPONSES)
async def recognize_heritage_photo(
    image: Optional[UploadFile] = File(default=None),
    country: str = Form(default="Tunisia"),
    prompt: str = Form(default="Identify this heritage site"),
):
    """Identify a heritage site from an uploaded photo (max 10 MB)."""
    if image is None:
        raise InputValidationError("Image is required")

    # One byte past the ceiling is enough to reject oversize uploads.
    data = await image.read(MAX_IMAGE_BYTES + 1)
    logger.info(f"Heritage vision request: {len(data) // 1024} KB, country={country}")

    service = get_generation_service()
    try:
        return await service.recognize_heritage_image(
            image_bytes=data,
            mime_type=image.content_type or "image/jpeg",
            country=country,
            prompt=prompt,
        )
    except GenerationError:
        raise
    except Exception as exc:
        logger.error(f"Unexpected error during heritage vision: {str(exc)}", exc_info=True)
        return _unexpected_error_response(exc, production=settings.is_production)


@app.get("/ai/heritage-vision")
async def heritage_vision_info() -> Dict[str, str]:
    return {
        "message": "Heritage vision recognition",
        "model": MODEL_VISION,
        "status": "running",
    }


@app.post("/ai/sustainability", response_model=SustainabilityInsights, responses=ERROR_RESPONSES)
async def sustainability_insights(payload: SustainabilityRequest):
    """Crowd forecast and sustainability indicators for a destination and month."""
    logger.info(f"Sustainability request: {payload.name}, {payload.country} in {payload.month}")

    service = get_generation_service()
    try:
        return await service.sustainability_insights(
            name=payload.name,
            country=payload.country,
            month=payload.month,
            visitor_count=payload.visitor_count,
        )
    except GenerationError:
        raise
    except Exception as exc:
        logger.error(f"Unexpected error during sustainability insights: {str(exc)}", exc_info=True)
        return _unexpected_error_response(exc, production=settings.is_production)


@app.post("/ai/translate", response_model=TranslationResult, responses=ERROR_RESPONSES)
async def translate(payload: TranslateRequest):
    logger.info(f"Translation request to {payload.targetLang} ({len(payload.text)} chars)")

    service = get_generation_service()
    try:
        return await service.translate(payload.text, payload.targetLang, payload.sourceLang)
    except GenerationError:
        raise
    except Exception as exc:
        logger.error(f"Unexpected error during translation: {str(exc)}", exc_info=True)
        return _unexpected_error_response(exc, production=settings.is_production)


@app.post("/ai/translate/batch", response_model=TranslateBatchResponse, responses=ERROR_RESPONSES)
async def translate_batch(payload: TranslateBatchRequest):
    logger.info(f"Batch translation request to {payload.targetLang} ({len(payload.texts)} texts)")

    service = get_generation_service()
    try:
        translations = await service.translate_batch(payload.texts, payload.targetLang, payload.sourceLang)
    except GenerationError:
        raise
    except Exception as exc:
        logger.error(f"Unexpected error during batch translation: {str(exc)}", exc_info=True)
        return _unexpected_error_response(exc, production=settings.is_production)
    return TranslateBatchResponse(translations=translations)


@app.post("/ai/chat", response_model=ChatResponse, responses=ERROR_RESPONSES)
async def chat(payload: ChatRequest):
    """Free-form travel concierge conversation."""
    logger.info(f"Chat request with {len(payload.messages)} messages")

    context = payload.context
    service = get_generation_service()
    try:
        message = await service.chat(
            payload.messages,
            country=context.country if context else None,
            interests=context.interests if context else (),
        )
    except GenerationError:
        raise
    except Exception as exc:
        logger.error(f"Unexpected error during chat: {str(exc)}", exc_info=True)
        return _unexpected_error_response(exc, production=settings.is_production)
    return ChatResponse(message=message)


@app.get("/youtube/search", response_model=VideoSearchResponse)
async def search_videos(
    q: Optional[str] = Query(default=None),
    maxResults: int = Query(default=2),
):
    """Video suggestions for a destination; failures yield an empty list."""
    if not q or not q.strip():
        return JSONResponse(
            status_code=400,
            content={"error": InputValidationError.kind, "message": "Query parameter required", "videos": []},
        )

    service = get_generation_service()
    videos = await service.search_videos(q, maxResults)
    return VideoSearchResponse(videos=videos)


@app.get("/health")
async def health_check() -> Dict[str, str]:
    """Simple health endpoint used for readiness probes."""

    return {"status": "healthy", "service": "rihla-ai-api"}


@app.get("/ai/models")
async def get_model_info() -> Dict[str, Any]:
    """List the model used for each content kind."""

    return {
        "models": {
            f"{kind.value}:{modality.value}": spec.model_id
            for (kind, modality), spec in MODEL_CALL_SPECS.items()
        },
        "chat": CHAT_CALL_SPEC.model_id,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
