"""Turn a parsed (or missing) model object into a complete canonical record.

Every function here is pure and total: whatever the model produced, the
caller gets a fully populated record. Values are only accepted when they
already have the expected shape; anything else falls back to the field's
default. Numbers are clamped into their declared range.
"""
from __future__ import annotations

import logging
import math
from typing import Any, Iterable, List, Mapping, Optional

from src.core.post_processing import find_json_candidate
from src.core.schemas import (
    GenerationRequest,
    HeritageImageParams,
    HeritageRecognitionResult,
    HeritageTextParams,
    Itinerary,
    ItineraryDay,
    ItineraryParams,
    ItineraryStop,
    MonthlyTrendPoint,
    SustainabilityInsights,
    TranslationParams,
    TranslationResult,
)

logger = logging.getLogger(__name__)

RAW_EXCERPT_CHARS = 500

# Heritage recognition
NOT_IDENTIFIED_SITE_NAME = "Not identified"
NOT_IDENTIFIED_CONFIDENCE = 40
MIN_ACCEPTED_CONFIDENCE = 40
DEFAULT_HERITAGE_CONFIDENCE = 70
NOT_IDENTIFIED_MESSAGE = (
    "We could not confidently identify this site. Try a clearer photo or add "
    "more detail, such as the city or a distinctive feature."
)
SITE_NAME_SENTINELS = frozenset(
    {"unknown", "heritage site", "unknown heritage site", "not identified", "n/a", "none"}
)

# Sustainability
LEVELS = ("low", "moderate", "high")
RATINGS = ("A", "B", "C", "D")

# Translation
DEFAULT_TRANSLATION_CONFIDENCE = 85


# ---------------------------------------------------------------------------
# Conservative accessors
# ---------------------------------------------------------------------------


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _text(data: Mapping[str, Any], key: str, default: str) -> str:
    value = data.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def _text_list(data: Mapping[str, Any], key: str) -> List[str]:
    value = data.get(key)
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def _number(value: Any) -> Optional[float]:
    # bool is an int subclass; "true" is not a count
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def _clamped_int(data: Mapping[str, Any], key: str, default: int, low: int, high: Optional[int] = None) -> int:
    number = _number(data.get(key))
    if number is None:
        return default
    result = max(low, int(round(number)))
    return min(result, high) if high is not None else result


def _clamped_float(data: Mapping[str, Any], key: str, default: float, low: float = 0.0) -> float:
    number = _number(data.get(key))
    if number is None:
        return default
    return max(low, number)


def _choice(data: Mapping[str, Any], key: str, choices: Iterable[str], default: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        return default
    lookup = {choice.lower(): choice for choice in choices}
    return lookup.get(value.strip().lower(), default)


def _flag(data: Mapping[str, Any], key: str, default: bool = False) -> bool:
    value = data.get(key)
    return value if isinstance(value, bool) else default


def _excerpt(raw_text: str) -> str:
    return raw_text.strip()[:RAW_EXCERPT_CHARS].strip()


# ---------------------------------------------------------------------------
# Itinerary
# ---------------------------------------------------------------------------


def _normalize_stop(item: Mapping[str, Any], position: int) -> ItineraryStop:
    return ItineraryStop(
        name=_text(item, "name", f"Stop {position}"),
        duration_hours=_clamped_float(item, "duration_hours", 1.0),
        activity=_text(item, "activity", ""),
        notes=_text(item, "notes", ""),
        order=_clamped_int(item, "order", position, 0),
    )


def _normalize_day(item: Mapping[str, Any], position: int) -> ItineraryDay:
    raw_stops = item.get("destinations")
    stops: List[ItineraryStop] = []
    if isinstance(raw_stops, list):
        for stop in raw_stops:
            if isinstance(stop, Mapping):
                stops.append(_normalize_stop(stop, len(stops) + 1))
    day_number = _clamped_int(item, "day", position, 1)
    return ItineraryDay(
        day=day_number,
        title=_text(item, "title", f"Day {day_number}"),
        theme=_text(item, "theme", ""),
        tips=_text(item, "tips", ""),
        accommodation=_text(item, "accommodation", ""),
        destinations=stops,
    )


def normalize_itinerary(
    extracted: Optional[Mapping[str, Any]],
    request: GenerationRequest,
    raw_text: str = "",
) -> Itinerary:
    """Build a complete itinerary; missing days stay an empty list."""

    params = request.payload
    if not isinstance(params, ItineraryParams):
        raise TypeError(f"Itinerary normalizer received {type(params).__name__}")

    data = _as_mapping(extracted)
    if extracted is None:
        logger.warning("No itinerary object extracted for %s; returning an empty plan", params.country)

    days: List[ItineraryDay] = []
    raw_days = data.get("days")
    if isinstance(raw_days, list):
        for item in raw_days:
            if isinstance(item, Mapping):
                days.append(_normalize_day(item, len(days) + 1))

    return Itinerary(
        title=_text(data, "title", f"{params.days}-day {params.travel_style} trip to {params.country}"),
        country=params.country,
        duration_days=params.days,
        travel_style=params.travel_style,
        budget=params.budget,
        interests=list(params.interests),
        ai_highlights=_text_list(data, "ai_highlights"),
        estimated_cost=_text(data, "estimated_cost", "Not available"),
        sustainability_tips=_text_list(data, "sustainability_tips"),
        days=days,
    )


# ---------------------------------------------------------------------------
# Heritage recognition
# ---------------------------------------------------------------------------


def _heritage_country(request: GenerationRequest) -> str:
    params = request.payload
    if isinstance(params, HeritageTextParams):
        return params.country_hint.strip() or "Unknown"
    if isinstance(params, HeritageImageParams):
        return params.country.strip() or "Unknown"
    raise TypeError(f"Heritage normalizer received {type(params).__name__}")


def not_identified_result(country: str, raw_text: str = "") -> HeritageRecognitionResult:
    """The canonical answer when the model could not (or should not) be trusted."""

    return HeritageRecognitionResult(
        site_name=NOT_IDENTIFIED_SITE_NAME,
        confidence=NOT_IDENTIFIED_CONFIDENCE,
        identified=False,
        country=country,
        city="Unknown",
        period="Unknown",
        civilization="Unknown",
        description=_excerpt(raw_text) or NOT_IDENTIFIED_MESSAGE,
        historical_context=NOT_IDENTIFIED_MESSAGE,
        fun_facts=[],
        visitor_tips="Ask a local guide or the site's visitor centre for more information.",
        nearby_sites=[],
        best_time_to_visit="Spring or Autumn",
    )


def _is_sentinel(site_name: str) -> bool:
    return site_name.strip().lower() in SITE_NAME_SENTINELS


def normalize_heritage(
    extracted: Optional[Mapping[str, Any]],
    request: GenerationRequest,
    raw_text: str = "",
) -> HeritageRecognitionResult:
    """Apply confidence-gated acceptance, then default every missing field.

    A missing or placeholder ``site_name`` or a self-reported confidence below
    the acceptance floor produces the "not identified" record rather than
    the model's guess.
    """
    country = _heritage_country(request)
    if extracted is None:
        return not_identified_result(country, raw_text)

    data = _as_mapping(extracted)
    site_name = _text(data, "site_name", "")
    confidence = _clamped_int(data, "confidence", DEFAULT_HERITAGE_CONFIDENCE, 0, 100)

    if not site_name or _is_sentinel(site_name):
        logger.info("Heritage answer rejected: placeholder site name %r", data.get("site_name"))
        return not_identified_result(country)
    if confidence < MIN_ACCEPTED_CONFIDENCE:
        logger.info("Heritage answer %r rejected: confidence %s", site_name, confidence)
        return not_identified_result(country)

    return HeritageRecognitionResult(
        site_name=site_name,
        confidence=confidence,
        identified=True,
        country=_text(data, "country", country),
        city=_text(data, "city", "Unknown"),
        period=_text(data, "period", "Historical period"),
        civilization=_text(data, "civilization", "Unknown"),
        description=_text(data, "description", "Description not available"),
        historical_context=_text(data, "historical_context", "Historical context not available"),
        fun_facts=_text_list(data, "fun_facts"),
        visitor_tips=_text(data, "visitor_tips", "Visit during daylight hours"),
        nearby_sites=_text_list(data, "nearby_sites"),
        best_time_to_visit=_text(data, "best_time_to_visit", "Spring or Autumn"),
        unesco=_flag(data, "unesco"),
        significance=_text(data, "significance", ""),
    )


# ---------------------------------------------------------------------------
# Sustainability
# ---------------------------------------------------------------------------


def _normalize_trend(value: Any) -> List[MonthlyTrendPoint]:
    if not isinstance(value, list):
        return []
    points: List[MonthlyTrendPoint] = []
    for item in value:
        if not isinstance(item, Mapping):
            continue
        month = _text(item, "month", "")
        if not month:
            continue
        points.append(
            MonthlyTrendPoint(
                month=month,
                visitors=_clamped_int(item, "visitors", 0, 0),
                eco_score=_clamped_int(item, "eco_score", 50, 0, 100),
            )
        )
    return points


def normalize_sustainability(
    extracted: Optional[Mapping[str, Any]],
    request: GenerationRequest,
    raw_text: str = "",
) -> SustainabilityInsights:
    data = _as_mapping(extracted)
    if extracted is None:
        logger.warning("No sustainability object extracted; returning neutral insights")

    return SustainabilityInsights(
        crowd_forecast=_choice(data, "crowd_forecast", LEVELS, "moderate"),
        crowd_score=_clamped_int(data, "crowd_score", 50, 0, 100),
        eco_score=_clamped_int(data, "eco_score", 50, 0, 100),
        carbon_estimate_kg=_clamped_float(data, "carbon_estimate_kg", 0.0),
        water_stress=_choice(data, "water_stress", LEVELS, "moderate"),
        sustainability_rating=_choice(data, "sustainability_rating", RATINGS, "C"),
        carrying_capacity_alert=_flag(data, "carrying_capacity_alert"),
        best_visit_times=_text_list(data, "best_visit_times"),
        green_practices=_text_list(data, "green_practices"),
        responsible_tips=_text_list(data, "responsible_tips"),
        avoid_periods=_text_list(data, "avoid_periods"),
        local_initiatives=_text_list(data, "local_initiatives"),
        alternative_destinations=_text_list(data, "alternative_destinations"),
        monthly_trend=_normalize_trend(data.get("monthly_trend")),
    )


# ---------------------------------------------------------------------------
# Translation
# ---------------------------------------------------------------------------


def _bare_translation(raw_text: str) -> str:
    # A reply shaped like JSON that failed to parse is not a translation.
    if find_json_candidate(raw_text) is not None:
        logger.warning("Unparseable JSON translation reply; falling back to the source text")
        return ""
    return raw_text.strip()


def normalize_translation(
    extracted: Optional[Mapping[str, Any]],
    request: GenerationRequest,
    raw_text: str = "",
) -> TranslationResult:
    """Prefer the structured answer, then the bare model text, then the input."""

    params = request.payload
    if not isinstance(params, TranslationParams):
        raise TypeError(f"Translation normalizer received {type(params).__name__}")

    data = _as_mapping(extracted)
    translated = _text(data, "translatedText", "")
    if not translated:
        translated = _bare_translation(raw_text) if extracted is None else ""
    if not translated:
        logger.warning("Empty translation returned; echoing the source text")
        return TranslationResult(translatedText=params.text, detectedLanguage=params.source_lang)

    return TranslationResult(
        translatedText=translated,
        detectedLanguage=params.source_lang or _text(data, "detectedLanguage", "") or None,
        confidence=_clamped_int(data, "confidence", DEFAULT_TRANSLATION_CONFIDENCE, 0, 100),
    )
