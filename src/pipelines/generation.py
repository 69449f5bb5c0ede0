"""Generation-and-extraction pipeline shared by every content kind.

request -> prompt builder -> model gateway -> JSON extractor -> normalizer

Prompt builders and normalizers are looked up per kind in ``CONTENT_HANDLERS``;
the gateway and the extractor are shared unconditionally.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

from pydantic import ValidationError

from src.core.errors import InputValidationError
from src.core.normalizers import (
    normalize_heritage,
    normalize_itinerary,
    normalize_sustainability,
    normalize_translation,
)
from src.core.post_processing import extract_json
from src.core.prompts import (
    PromptPair,
    build_heritage_image_prompt,
    build_heritage_text_prompt,
    build_itinerary_prompt,
    build_sustainability_prompt,
    build_translation_prompt,
)
from src.core.schemas import PAYLOAD_TYPES, CanonicalRecord, ContentKind, GenerationRequest
from src.services.openrouter import ModelGateway, resolve_call_spec

logger = logging.getLogger(__name__)

Normalizer = Callable[[Optional[Mapping[str, Any]], GenerationRequest, str], CanonicalRecord]


@dataclass(frozen=True)
class ContentHandler:
    build_prompt: Callable[[GenerationRequest], PromptPair]
    normalize: Normalizer


CONTENT_HANDLERS: Dict[ContentKind, ContentHandler] = {
    ContentKind.ITINERARY: ContentHandler(build_itinerary_prompt, normalize_itinerary),
    ContentKind.HERITAGE_TEXT: ContentHandler(build_heritage_text_prompt, normalize_heritage),
    ContentKind.HERITAGE_IMAGE: ContentHandler(build_heritage_image_prompt, normalize_heritage),
    ContentKind.SUSTAINABILITY: ContentHandler(build_sustainability_prompt, normalize_sustainability),
    ContentKind.TRANSLATION: ContentHandler(build_translation_prompt, normalize_translation),
}


def describe_validation_error(exc: ValidationError) -> str:
    """Flatten a pydantic error into one readable sentence."""

    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request"


def build_request(kind: ContentKind, **fields: Any) -> GenerationRequest:
    """Validate caller fields for ``kind`` and wrap them in a request.

    Raises:
        InputValidationError: before any network call when fields are invalid.
    """
    try:
        payload = PAYLOAD_TYPES[kind](**fields)
        return GenerationRequest(kind=kind, payload=payload)
    except ValidationError as exc:
        raise InputValidationError(describe_validation_error(exc)) from exc


class GenerationPipeline:
    """Runs one request through prompt, model, extraction and normalization."""

    def __init__(self, gateway: ModelGateway) -> None:
        self.gateway = gateway

    async def run(self, request: GenerationRequest) -> CanonicalRecord:
        handler = CONTENT_HANDLERS[request.kind]
        spec = resolve_call_spec(request.kind, request.modality)
        prompt = handler.build_prompt(request)

        logger.info("Generating %s with %s", request.kind.value, spec.model_id)
        raw = await self.gateway.invoke(
            spec,
            prompt.system_prompt,
            prompt.user_prompt,
            image_ref=prompt.image_ref,
        )

        extracted = extract_json(raw.text)
        if extracted is None:
            logger.warning(
                "No JSON object recovered for %s (truncated=%s); degrading to defaults",
                request.kind.value,
                raw.truncated,
            )
        return handler.normalize(extracted.data if extracted else None, request, raw.text)
