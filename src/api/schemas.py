from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from src.core.schemas import VideoResult
from src.services.openrouter import ChatTurn


class ItineraryRequest(BaseModel):
    """Request payload used to generate a personalised itinerary."""

    country: Optional[str] = Field(default=None, description="Destination country")
    days: int = Field(default=7, description="Trip length in days (1-30)")
    style: str = Field(default="cultural", description="Travel style")
    budget: str = Field(default="mid-range", description="budget, mid-range or luxury")
    interests: List[str] = Field(default_factory=list)
    special: Optional[str] = Field(default=None, description="Special requests")
    include_videos: bool = Field(
        default=False, description="Attach video suggestions to each stop"
    )


class HeritageRequest(BaseModel):
    """Identify a heritage site from a description or a hosted image."""

    type: Literal["description", "image_url"]
    value: str = Field(default="", description="Description text or image URL")
    country_hint: Optional[str] = None


class SustainabilityRequest(BaseModel):
    name: Optional[str] = None
    country: Optional[str] = None
    month: Optional[str] = Field(default=None, description="Three-letter month, e.g. Jan")
    visitor_count: Optional[int] = None


class TranslateRequest(BaseModel):
    text: str
    targetLang: str
    sourceLang: Optional[str] = None


class TranslateBatchRequest(BaseModel):
    texts: List[str]
    targetLang: str
    sourceLang: Optional[str] = None


class TranslateBatchResponse(BaseModel):
    translations: List[str]


class ChatContext(BaseModel):
    country: Optional[str] = None
    interests: List[str] = Field(default_factory=list)


class ChatRequest(BaseModel):
    messages: List[ChatTurn] = Field(min_length=1)
    context: Optional[ChatContext] = None


class ChatResponse(BaseModel):
    message: str


class VideoSearchResponse(BaseModel):
    videos: List[VideoResult] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Error body returned for every failed request."""

    error: str = Field(..., description="Machine-readable error kind")
    message: str = Field(..., description="Human-readable explanation")
    details: Optional[str] = Field(
        default=None, description="Internal error text, omitted in production"
    )
