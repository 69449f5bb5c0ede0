"""Prompt templates and per-kind prompt builders.

Every user prompt embeds the exact JSON shape expected back, with an example
value per field, so the model has an unambiguous target. Builders are pure:
the same request always yields the same prompt pair.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from src.core.schemas import (
    GenerationRequest,
    HeritageImageParams,
    HeritageTextParams,
    ItineraryParams,
    SustainabilityParams,
    TranslationParams,
)

LANGUAGE_NAMES = {"en": "English", "fr": "French", "ar": "Arabic"}


@dataclass(frozen=True)
class PromptPair:
    system_prompt: str
    user_prompt: str
    image_ref: Optional[str] = None


JSON_ONLY_INSTRUCTION = (
    "IMPORTANT: You must respond with ONLY valid JSON. Do not include any other text, "
    "markdown, or explanations."
)

concierge_system_prompt = """You are Rihla AI, an expert travel concierge specialising in Tunisia, North Africa and the Maghreb region.
You have deep knowledge of: Tunisian culture, history, cuisine, geography, hidden gems, Sahara Desert, Medinas, Carthage, Djerba, Sidi Bou Said, Kairouan, Douz, Tataouine, Tozeur, Cap Bon, and beyond.
You also know Morocco, Algeria, Libya, Egypt and the broader MENA region.
{focus}{interests}
Be warm, knowledgeable, and inspiring. Give specific, actionable advice. Mention exact places, local dishes, cultural customs.
Respond in 2-4 paragraphs. Use markdown formatting where helpful. Never be generic."""

itinerary_system_prompt = """You are Rihla AI, an expert travel planner for Tunisia, North Africa and the Mediterranean.
You design realistic, culturally rich day-by-day itineraries and always answer with a single JSON object."""

itinerary_prompt = """Create a detailed {days}-day travel itinerary for {country}.

Traveller profile:
- Style: {travel_style}
- Budget: {budget}
- Interests: {interests}
{special_requests}
{json_only}

The JSON must follow this exact structure:
{{
  "title": "A descriptive title for this itinerary",
  "ai_highlights": ["Highlight 1", "Highlight 2", "Highlight 3"],
  "estimated_cost": "Budget estimate in local currency or USD",
  "sustainability_tips": ["Tip 1", "Tip 2", "Tip 3"],
  "days": [
    {{
      "day": 1,
      "title": "Day title",
      "theme": "Theme of the day",
      "tips": "Practical tips for the day",
      "accommodation": "Recommended accommodation",
      "destinations": [
        {{
          "name": "Place name",
          "duration_hours": 2,
          "activity": "Activity description",
          "notes": "Additional notes",
          "order": 1
        }}
      ]
    }}
  ]
}}

Return exactly {days} entries in "days".
Make it deeply specific to {country}. Include local cuisine recommendations, cultural etiquette, hidden gems.
For Tunisia: include medinas, archaeological sites, desert experiences, coastal towns as appropriate."""

heritage_system_prompt = """You are Rihla AI, a heritage recognition expert specializing in North African and Maghrebi cultural sites.
Identify monuments, landmarks, and heritage sites. Provide rich historical context and practical information.
If you cannot identify the site, set "site_name" to "Unknown" and "confidence" below 40 rather than guessing.
Always respond in valid JSON format."""

heritage_schema = """{{
  "site_name": "Name of the site",
  "confidence": 85,
  "country": "{country}",
  "city": "City name",
  "period": "Historical period",
  "civilization": "Civilization name",
  "description": "Detailed description",
  "historical_context": "Historical context information",
  "fun_facts": ["Fun fact 1", "Fun fact 2", "Fun fact 3"],
  "visitor_tips": "Tips for visitors",
  "nearby_sites": ["Nearby site 1", "Nearby site 2", "Nearby site 3"],
  "best_time_to_visit": "Best time information",
  "unesco": true,
  "significance": "Cultural significance"
}}"""

heritage_text_prompt = """A traveller describes this heritage site or landmark: "{description}"
It may be in: {country}

Identify the site and provide rich cultural context.

{json_only}

The JSON must follow this exact structure:
{schema}"""

heritage_image_prompt = """{user_prompt} in {country}.
Identify and describe the cultural heritage site shown in the attached image.

{json_only}

The JSON must follow this exact structure:
{schema}"""

sustainability_system_prompt = """You are Rihla AI, a sustainable tourism analyst for the Mediterranean and North Africa.
You estimate crowding, environmental pressure and responsible-travel practices, and always answer with a single JSON object."""

sustainability_prompt = """Provide sustainability and crowd management insights for "{name}", {country} in {month}.
{visitor_count}
{json_only}

The JSON must follow this exact structure:
{{
  "crowd_forecast": "low|moderate|high",
  "crowd_score": 65,
  "best_visit_times": ["Early morning (7-9am)", "Late afternoon (4-6pm)"],
  "eco_score": 72,
  "carbon_estimate_kg": 12.5,
  "water_stress": "low|moderate|high",
  "sustainability_rating": "A|B|C|D",
  "green_practices": ["Use public transport", "Support local businesses"],
  "responsible_tips": ["Bring reusable water bottle", "Respect local customs"],
  "avoid_periods": ["Peak tourist season (Jul-Aug)", "Weekend afternoons"],
  "local_initiatives": ["Beach cleanup program", "Local conservation project"],
  "alternative_destinations": ["Nearby less-visited site 1", "Nearby less-visited site 2"],
  "carrying_capacity_alert": false,
  "monthly_trend": [
    {{"month": "Jan", "visitors": 1200, "eco_score": 85}},
    {{"month": "Feb", "visitors": 1100, "eco_score": 87}}
  ]
}}

Scores are integers from 0 to 100. Include all twelve months in "monthly_trend".
Base your response on typical Mediterranean/North African tourism patterns.
For {name} in {country}, consider:
- Peak tourist seasons (spring and autumn for cultural sites, summer for coastal)
- Local climate and environmental pressures
- Typical visitor patterns
- Local sustainability initiatives"""

translation_system_prompt = """You are a professional translator. Translate accurately while preserving meaning, tone, and cultural nuances.
Preserve all formatting, emojis, and special characters."""

translation_prompt = """{instruction}

{json_only}

The JSON must follow this exact structure:
{{
  "translatedText": "The translated text",
  "detectedLanguage": "en|fr|ar",
  "confidence": 90
}}

Text: "{text}\""""


def build_itinerary_prompt(request: GenerationRequest) -> PromptPair:
    params = request.payload
    if not isinstance(params, ItineraryParams):
        raise TypeError(f"Itinerary prompt builder received {type(params).__name__}")
    user_prompt = itinerary_prompt.format(
        days=params.days,
        country=params.country,
        travel_style=params.travel_style,
        budget=params.budget,
        interests=", ".join(params.interests) if params.interests else "General sightseeing",
        special_requests=f"- Special requests: {params.special_requests}\n" if params.special_requests else "",
        json_only=JSON_ONLY_INSTRUCTION,
    )
    return PromptPair(system_prompt=itinerary_system_prompt, user_prompt=user_prompt)


def build_heritage_text_prompt(request: GenerationRequest) -> PromptPair:
    params = request.payload
    if not isinstance(params, HeritageTextParams):
        raise TypeError(f"Heritage text prompt builder received {type(params).__name__}")
    user_prompt = heritage_text_prompt.format(
        description=params.description,
        country=params.country_hint or "North Africa / Mediterranean",
        json_only=JSON_ONLY_INSTRUCTION,
        schema=heritage_schema.format(country=params.country_hint or "Country name"),
    )
    return PromptPair(system_prompt=heritage_system_prompt, user_prompt=user_prompt)


def build_heritage_image_prompt(request: GenerationRequest) -> PromptPair:
    params = request.payload
    if not isinstance(params, HeritageImageParams):
        raise TypeError(f"Heritage image prompt builder received {type(params).__name__}")
    user_prompt = heritage_image_prompt.format(
        user_prompt=params.prompt.strip() or "Identify this heritage site",
        country=params.country or "North Africa / Mediterranean",
        json_only=JSON_ONLY_INSTRUCTION,
        schema=heritage_schema.format(country=params.country or "Country name"),
    )
    return PromptPair(
        system_prompt=heritage_system_prompt,
        user_prompt=user_prompt,
        image_ref=params.image_ref,
    )


def build_sustainability_prompt(request: GenerationRequest) -> PromptPair:
    params = request.payload
    if not isinstance(params, SustainabilityParams):
        raise TypeError(f"Sustainability prompt builder received {type(params).__name__}")
    user_prompt = sustainability_prompt.format(
        name=params.name,
        country=params.country,
        month=params.month,
        visitor_count=(
            f"Current monthly visitors: {params.visitor_count}\n" if params.visitor_count else ""
        ),
        json_only=JSON_ONLY_INSTRUCTION,
    )
    return PromptPair(system_prompt=sustainability_system_prompt, user_prompt=user_prompt)


def build_translation_prompt(request: GenerationRequest) -> PromptPair:
    params = request.payload
    if not isinstance(params, TranslationParams):
        raise TypeError(f"Translation prompt builder received {type(params).__name__}")
    target = LANGUAGE_NAMES[params.target_lang]
    if params.source_lang:
        instruction = f"Translate the following text from {LANGUAGE_NAMES[params.source_lang]} to {target}."
    else:
        instruction = f"Detect the language of the following text and translate it to {target}."
    user_prompt = translation_prompt.format(
        instruction=instruction,
        json_only=JSON_ONLY_INSTRUCTION,
        text=params.text,
    )
    return PromptPair(system_prompt=translation_system_prompt, user_prompt=user_prompt)


def build_concierge_prompt(country: Optional[str] = None, interests: Sequence[str] = ()) -> str:
    """System prompt for the free-form travel chat (no JSON contract)."""

    return concierge_system_prompt.format(
        focus=f"Current focus: {country}\n" if country else "",
        interests=f"Traveller interests: {', '.join(interests)}\n" if interests else "",
    )
