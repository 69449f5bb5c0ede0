"""Tests for the per-kind normalizers."""
from __future__ import annotations

import pytest

from src.core.normalizers import (
    DEFAULT_HERITAGE_CONFIDENCE,
    NOT_IDENTIFIED_CONFIDENCE,
    NOT_IDENTIFIED_SITE_NAME,
    RAW_EXCERPT_CHARS,
    normalize_heritage,
    normalize_itinerary,
    normalize_sustainability,
    normalize_translation,
)
from src.core.post_processing import extract_json
from src.core.schemas import (
    ContentKind,
    GenerationRequest,
    HeritageImageParams,
    HeritageTextParams,
    ItineraryParams,
    SustainabilityParams,
    TranslationParams,
)


@pytest.fixture
def itinerary_request() -> GenerationRequest:
    return GenerationRequest(
        kind=ContentKind.ITINERARY,
        payload=ItineraryParams(country="Tunisia", days=3, interests=["history"]),
    )


@pytest.fixture
def heritage_request() -> GenerationRequest:
    return GenerationRequest(
        kind=ContentKind.HERITAGE_TEXT,
        payload=HeritageTextParams(description="Roman theatre on a hill", country_hint="Tunisia"),
    )


@pytest.fixture
def sustainability_request() -> GenerationRequest:
    return GenerationRequest(
        kind=ContentKind.SUSTAINABILITY,
        payload=SustainabilityParams(name="Djerba", country="Tunisia", month="Jul"),
    )


@pytest.fixture
def translation_request() -> GenerationRequest:
    return GenerationRequest(
        kind=ContentKind.TRANSLATION,
        payload=TranslationParams(text="Bonjour", target_lang="en", source_lang="fr"),
    )


# ---------------------------------------------------------------------------
# Itinerary
# ---------------------------------------------------------------------------


def test_itinerary_day_missing_fields_are_defaulted(itinerary_request):
    extracted = {
        "title": "Ancient Tunisia",
        "days": [{"day": 1, "title": "Carthage", "theme": "History", "destinations": "Carthage ruins"}],
    }

    itinerary = normalize_itinerary(extracted, itinerary_request)

    day = itinerary.days[0]
    assert day.accommodation == ""
    assert day.tips == ""
    assert day.destinations == []
    assert day.title == "Carthage"


def test_itinerary_without_object_is_fully_populated(itinerary_request):
    itinerary = normalize_itinerary(None, itinerary_request, "I cannot plan that.")

    assert itinerary.title == "3-day cultural trip to Tunisia"
    assert itinerary.country == "Tunisia"
    assert itinerary.duration_days == 3
    assert itinerary.interests == ["history"]
    assert itinerary.days == []
    assert itinerary.ai_highlights == []
    assert itinerary.sustainability_tips == []
    assert itinerary.estimated_cost == "Not available"


def test_itinerary_stops_are_coerced_conservatively(itinerary_request):
    extracted = {
        "ai_highlights": ["Medina walk", 42, None, "  "],
        "sustainability_tips": "Use trains",
        "days": [
            "not a day",
            {
                "title": "Tunis",
                "destinations": [
                    {"name": "Bardo Museum", "duration_hours": "2", "order": 3},
                    "junk",
                    {"duration_hours": -1.5, "activity": "Lunch"},
                ],
            },
        ],
    }

    itinerary = normalize_itinerary(extracted, itinerary_request)

    assert itinerary.ai_highlights == ["Medina walk"]
    assert itinerary.sustainability_tips == []
    assert len(itinerary.days) == 1
    day = itinerary.days[0]
    assert day.day == 1
    first, second = day.destinations
    assert first.name == "Bardo Museum"
    assert first.duration_hours == 1.0
    assert first.order == 3
    assert second.name == "Stop 2"
    assert second.duration_hours == 0.0
    assert second.order == 2
    assert second.activity == "Lunch"
    assert second.videos == []


# ---------------------------------------------------------------------------
# Heritage
# ---------------------------------------------------------------------------


def test_heritage_dougga_scenario(heritage_request):
    raw = 'Here is your answer:\n```json\n{"site_name":"Dougga","confidence":88}\n```\nHope that helps!'
    extracted = extract_json(raw)

    result = normalize_heritage(extracted.data, heritage_request, raw)

    assert result.site_name == "Dougga"
    assert result.confidence == 88
    assert result.identified is True
    assert result.country == "Tunisia"
    assert result.city == "Unknown"
    assert result.period == "Historical period"
    assert result.civilization == "Unknown"
    assert result.description == "Description not available"
    assert result.historical_context == "Historical context not available"
    assert result.fun_facts == []
    assert result.nearby_sites == []
    assert result.visitor_tips == "Visit during daylight hours"
    assert result.best_time_to_visit == "Spring or Autumn"
    assert result.unesco is False


def test_heritage_without_object_is_not_identified(heritage_request):
    raw = "I'm not sure what this is."

    result = normalize_heritage(extract_json(raw), heritage_request, raw)

    assert result.site_name == NOT_IDENTIFIED_SITE_NAME
    assert result.confidence == NOT_IDENTIFIED_CONFIDENCE
    assert result.identified is False
    assert result.fun_facts == []
    assert result.nearby_sites == []
    assert result.description == raw


def test_heritage_raw_excerpt_is_bounded(heritage_request):
    raw = "x" * (RAW_EXCERPT_CHARS * 3)

    result = normalize_heritage(None, heritage_request, raw)

    assert len(result.description) == RAW_EXCERPT_CHARS


@pytest.mark.parametrize("site_name", ["Unknown", "Heritage Site", "  heritage site ", "", None, 7])
def test_heritage_sentinel_names_are_rejected(heritage_request, site_name):
    extracted = {"site_name": site_name, "confidence": 95, "fun_facts": ["A guess"]}

    result = normalize_heritage(extracted, heritage_request)

    assert result.site_name == NOT_IDENTIFIED_SITE_NAME
    assert result.confidence == NOT_IDENTIFIED_CONFIDENCE
    assert result.fun_facts == []


def test_heritage_low_confidence_is_rejected(heritage_request):
    result = normalize_heritage({"site_name": "El Jem", "confidence": 15}, heritage_request)

    assert result.identified is False
    assert result.site_name == NOT_IDENTIFIED_SITE_NAME


def test_heritage_confidence_is_defaulted_and_clamped(heritage_request):
    missing = normalize_heritage({"site_name": "El Jem"}, heritage_request)
    textual = normalize_heritage({"site_name": "El Jem", "confidence": "high"}, heritage_request)
    too_high = normalize_heritage({"site_name": "El Jem", "confidence": 250}, heritage_request)

    assert missing.confidence == DEFAULT_HERITAGE_CONFIDENCE
    assert textual.confidence == DEFAULT_HERITAGE_CONFIDENCE
    assert too_high.confidence == 100


def test_heritage_image_uses_request_country():
    request = GenerationRequest(
        kind=ContentKind.HERITAGE_IMAGE,
        payload=HeritageImageParams(image_url="https://example.com/site.jpg", country="Morocco"),
    )

    result = normalize_heritage({"site_name": "Volubilis", "confidence": 81}, request)

    assert result.country == "Morocco"


# ---------------------------------------------------------------------------
# Sustainability
# ---------------------------------------------------------------------------


def test_sustainability_defaults_without_object(sustainability_request):
    insights = normalize_sustainability(None, sustainability_request)

    assert insights.crowd_forecast == "moderate"
    assert insights.water_stress == "moderate"
    assert insights.crowd_score == 50
    assert insights.eco_score == 50
    assert insights.carbon_estimate_kg == 0.0
    assert insights.sustainability_rating == "C"
    assert insights.responsible_tips == []
    assert insights.monthly_trend == []


def test_sustainability_values_are_clamped_and_matched(sustainability_request):
    extracted = {
        "crowd_forecast": "HIGH",
        "crowd_score": 140,
        "eco_score": -3,
        "carbon_estimate_kg": 12.5,
        "water_stress": "extreme",
        "sustainability_rating": "b",
        "carrying_capacity_alert": "yes",
        "monthly_trend": [
            {"month": "Jul", "visitors": 5500.4, "eco_score": 45},
            {"month": "Aug", "visitors": -10, "eco_score": True},
            {"visitors": 10},
            "Sep",
        ],
    }

    insights = normalize_sustainability(extracted, sustainability_request)

    assert insights.crowd_forecast == "high"
    assert insights.crowd_score == 100
    assert insights.eco_score == 0
    assert insights.carbon_estimate_kg == 12.5
    assert insights.water_stress == "moderate"
    assert insights.sustainability_rating == "B"
    assert insights.carrying_capacity_alert is False
    assert [point.month for point in insights.monthly_trend] == ["Jul", "Aug"]
    assert insights.monthly_trend[0].visitors == 5500
    assert insights.monthly_trend[1].visitors == 0
    assert insights.monthly_trend[1].eco_score == 50


# ---------------------------------------------------------------------------
# Translation
# ---------------------------------------------------------------------------


def test_translation_uses_structured_answer(translation_request):
    result = normalize_translation(
        {"translatedText": "Hello", "detectedLanguage": "fr", "confidence": 97},
        translation_request,
    )

    assert result.translatedText == "Hello"
    assert result.detectedLanguage == "fr"
    assert result.confidence == 97


def test_translation_falls_back_to_bare_text(translation_request):
    result = normalize_translation(None, translation_request, "  Hello  ")

    assert result.translatedText == "Hello"
    assert result.confidence == 85


def test_translation_echoes_source_when_empty(translation_request):
    result = normalize_translation(None, translation_request, "")

    assert result.translatedText == "Bonjour"


def test_translation_unparseable_json_reply_echoes_source(translation_request):
    raw = '{"translatedText": "Hello\nworld", "confidence": 90}'

    result = normalize_translation(extract_json(raw), translation_request, raw)

    assert result.translatedText == "Bonjour"
    assert "{" not in result.translatedText


# ---------------------------------------------------------------------------
# Idempotence
# ---------------------------------------------------------------------------


def test_normalization_is_idempotent(itinerary_request, heritage_request, sustainability_request):
    itinerary_data = {"title": "Trip", "days": [{"destinations": [{"name": "Sousse"}]}]}
    heritage_data = {"site_name": "Kairouan", "confidence": 77, "fun_facts": ["Great Mosque"]}
    sustainability_data = {"crowd_forecast": "low", "monthly_trend": [{"month": "Jan", "visitors": 10}]}

    assert normalize_itinerary(itinerary_data, itinerary_request) == normalize_itinerary(
        itinerary_data, itinerary_request
    )
    assert normalize_heritage(heritage_data, heritage_request) == normalize_heritage(
        heritage_data, heritage_request
    )
    assert normalize_sustainability(sustainability_data, sustainability_request) == normalize_sustainability(
        sustainability_data, sustainability_request
    )
