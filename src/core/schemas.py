"""Pydantic data models for the AI content generation service.

This module contains the request models accepted by the generation pipeline
and the canonical records it hands back to callers. Canonical records are the
only objects that leave the pipeline, so every field carries a default and a
declared range: downstream code renders them without further null-checking.

Key model categories:
- ContentKind / Modality: what is being generated and whether an image rides along
- *Params: kind-specific request payloads, validated before any network call
- GenerationRequest: immutable envelope created once per inbound call
- Canonical records: Itinerary, HeritageRecognitionResult,
  SustainabilityInsights, TranslationResult
"""
from __future__ import annotations

import base64
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.core.types import (
    LanguageCode,
    Level,
    MonthAbbr,
    NonBlankStr,
    NonNegFloat,
    NonNegInt,
    Percent,
    SustainabilityRating,
)

MAX_IMAGE_BYTES = 10 * 1024 * 1024


class ContentKind(str, Enum):
    """The fixed set of generation tasks served by the pipeline."""

    ITINERARY = "itinerary"
    HERITAGE_TEXT = "heritage_text"
    HERITAGE_IMAGE = "heritage_image"
    SUSTAINABILITY = "sustainability"
    TRANSLATION = "translation"


class Modality(str, Enum):
    TEXT = "text"
    IMAGE = "image"


# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class ItineraryParams(BaseModel):
    """Traveller profile used to generate a day-by-day itinerary."""

    country: NonBlankStr = Field(description="Destination country")
    days: int = Field(default=7, ge=1, le=30, description="Trip length in days")
    travel_style: str = Field(default="cultural", description="adventure, cultural, relaxation, ...")
    budget: str = Field(default="mid-range", description="budget, mid-range or luxury")
    interests: List[str] = Field(default_factory=list)
    special_requests: Optional[str] = None
    include_videos: bool = Field(
        default=False, description="Attach video suggestions to every stop"
    )

    model_config = ConfigDict(frozen=True, extra="forbid")


class HeritageTextParams(BaseModel):
    """A traveller's free-text description of a landmark."""

    description: NonBlankStr
    country_hint: str = "Tunisia"

    model_config = ConfigDict(frozen=True, extra="forbid")


class HeritageImageParams(BaseModel):
    """A photo of a landmark, either hosted (``image_url``) or uploaded (``image_bytes``)."""

    image_url: Optional[str] = None
    image_bytes: Optional[bytes] = Field(default=None, repr=False)
    mime_type: str = "image/jpeg"
    country: str = "Tunisia"
    prompt: str = "Identify this heritage site"

    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="after")
    def _check_image(self) -> "HeritageImageParams":
        if not (self.image_url and self.image_url.strip()) and not self.image_bytes:
            raise ValueError("An image URL or an uploaded image is required")
        if self.image_bytes is not None and len(self.image_bytes) > MAX_IMAGE_BYTES:
            raise ValueError(
                f"Image is {len(self.image_bytes)} bytes; the limit is {MAX_IMAGE_BYTES} bytes"
            )
        if not self.mime_type.startswith("image/"):
            raise ValueError(f"Unsupported content type: {self.mime_type}")
        return self

    @property
    def image_ref(self) -> str:
        """Return the reference sent to the vision model (URL or base64 data URL)."""

        if self.image_bytes:
            encoded = base64.b64encode(self.image_bytes).decode("ascii")
            return f"data:{self.mime_type};base64,{encoded}"
        return (self.image_url or "").strip()


class SustainabilityParams(BaseModel):
    """Destination and month for crowd and sustainability insights."""

    name: NonBlankStr
    country: NonBlankStr
    month: MonthAbbr
    visitor_count: Optional[NonNegInt] = None

    model_config = ConfigDict(frozen=True, extra="forbid")


class TranslationParams(BaseModel):
    text: str
    target_lang: LanguageCode
    source_lang: Optional[LanguageCode] = None

    model_config = ConfigDict(frozen=True, extra="forbid")


GenerationPayload = Union[
    ItineraryParams,
    HeritageTextParams,
    HeritageImageParams,
    SustainabilityParams,
    TranslationParams,
]

PAYLOAD_TYPES: Dict[ContentKind, type] = {
    ContentKind.ITINERARY: ItineraryParams,
    ContentKind.HERITAGE_TEXT: HeritageTextParams,
    ContentKind.HERITAGE_IMAGE: HeritageImageParams,
    ContentKind.SUSTAINABILITY: SustainabilityParams,
    ContentKind.TRANSLATION: TranslationParams,
}

KIND_MODALITY: Dict[ContentKind, Modality] = {
    ContentKind.ITINERARY: Modality.TEXT,
    ContentKind.HERITAGE_TEXT: Modality.TEXT,
    ContentKind.HERITAGE_IMAGE: Modality.IMAGE,
    ContentKind.SUSTAINABILITY: Modality.TEXT,
    ContentKind.TRANSLATION: Modality.TEXT,
}


class GenerationRequest(BaseModel):
    """Immutable envelope for one inbound generation call.

    ``modality`` defaults to the natural modality of ``kind``; a payload that
    does not belong to ``kind`` is rejected at construction time.
    """

    kind: ContentKind
    payload: GenerationPayload
    modality: Modality

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _bind_payload(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        kind = ContentKind(data.get("kind"))
        payload_type = PAYLOAD_TYPES[kind]
        payload = data.get("payload")
        if isinstance(payload, dict):
            data["payload"] = payload_type.model_validate(payload)
        elif not isinstance(payload, payload_type):
            raise ValueError(
                f"Payload {type(payload).__name__} does not match content kind '{kind.value}'"
            )
        if data.get("modality") is None:
            data["modality"] = KIND_MODALITY[kind]
        return data


# ---------------------------------------------------------------------------
# Canonical records
# ---------------------------------------------------------------------------


class VideoResult(BaseModel):
    """A video suggestion attached to an itinerary stop."""

    id: str
    title: str
    thumbnail: str = ""
    channel: str = ""


class ItineraryStop(BaseModel):
    name: str = Field(description="Place name")
    duration_hours: NonNegFloat = Field(description="Time to spend at the stop")
    activity: str = ""
    notes: str = ""
    order: int = Field(description="Position of the stop within the day")
    videos: List[VideoResult] = Field(default_factory=list)


class ItineraryDay(BaseModel):
    day: int
    title: str
    theme: str = ""
    tips: str = ""
    accommodation: str = ""
    destinations: List[ItineraryStop] = Field(default_factory=list)


class Itinerary(BaseModel):
    """Complete itinerary returned by the itinerary generator.

    The request context (country, duration, style, budget, interests) is echoed
    back so the record can be stored or rendered without the original request.
    """

    title: str
    country: str
    duration_days: int
    travel_style: str
    budget: str
    interests: List[str] = Field(default_factory=list)
    ai_highlights: List[str] = Field(default_factory=list)
    estimated_cost: str
    sustainability_tips: List[str] = Field(default_factory=list)
    days: List[ItineraryDay] = Field(default_factory=list)


class HeritageRecognitionResult(BaseModel):
    """Identification of a heritage site from a description or a photo.

    ``identified`` is False when the answer was rejected by the confidence
    gate; in that case ``site_name`` holds the "not identified" sentinel.
    """

    site_name: str
    confidence: Percent
    identified: bool = True
    country: str
    city: str
    period: str
    civilization: str
    description: str
    historical_context: str
    fun_facts: List[str] = Field(default_factory=list)
    visitor_tips: str
    nearby_sites: List[str] = Field(default_factory=list)
    best_time_to_visit: str
    unesco: bool = False
    significance: str = ""


class MonthlyTrendPoint(BaseModel):
    month: str
    visitors: NonNegInt
    eco_score: Percent


class SustainabilityInsights(BaseModel):
    """Crowd and sustainability indicators for one destination and month."""

    crowd_forecast: Level
    crowd_score: Percent
    eco_score: Percent
    carbon_estimate_kg: NonNegFloat
    water_stress: Level
    sustainability_rating: SustainabilityRating
    carrying_capacity_alert: bool = False
    best_visit_times: List[str] = Field(default_factory=list)
    green_practices: List[str] = Field(default_factory=list)
    responsible_tips: List[str] = Field(default_factory=list)
    avoid_periods: List[str] = Field(default_factory=list)
    local_initiatives: List[str] = Field(default_factory=list)
    alternative_destinations: List[str] = Field(default_factory=list)
    monthly_trend: List[MonthlyTrendPoint] = Field(default_factory=list)


class TranslationResult(BaseModel):
    translatedText: str
    detectedLanguage: Optional[str] = None
    confidence: Optional[Percent] = None


CanonicalRecord = Union[
    Itinerary,
    HeritageRecognitionResult,
    SustainabilityInsights,
    TranslationResult,
]

__all__ = [
    "MAX_IMAGE_BYTES",
    "ContentKind",
    "Modality",
    "ItineraryParams",
    "HeritageTextParams",
    "HeritageImageParams",
    "SustainabilityParams",
    "TranslationParams",
    "GenerationPayload",
    "PAYLOAD_TYPES",
    "KIND_MODALITY",
    "GenerationRequest",
    "VideoResult",
    "ItineraryStop",
    "ItineraryDay",
    "Itinerary",
    "HeritageRecognitionResult",
    "MonthlyTrendPoint",
    "SustainabilityInsights",
    "TranslationResult",
    "CanonicalRecord",
]
