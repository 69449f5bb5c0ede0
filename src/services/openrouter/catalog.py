"""Static model selection per content kind and modality."""
from typing import Dict, Tuple

from src.core.errors import InputValidationError
from src.core.schemas import ContentKind, Modality
from src.services.openrouter.schemas import ModelCallSpec

MODEL_GENERAL = "meta-llama/llama-3.3-70b-instruct"
MODEL_FAST = "meta-llama/llama-3.2-3b-instruct"
MODEL_VISION = "anthropic/claude-3-haiku"
MODEL_TRANSLATION = "arcee-ai/trinity-large-preview:free"

MODEL_CALL_SPECS: Dict[Tuple[ContentKind, Modality], ModelCallSpec] = {
    (ContentKind.ITINERARY, Modality.TEXT): ModelCallSpec(
        model_id=MODEL_GENERAL,
        max_output_tokens=3000,
        temperature=0.7,
        timeout_s=45.0,
        max_retries=2,
    ),
    (ContentKind.HERITAGE_TEXT, Modality.TEXT): ModelCallSpec(
        model_id=MODEL_FAST,
        max_output_tokens=1500,
        temperature=0.7,
        timeout_s=30.0,
        max_retries=2,
    ),
    (ContentKind.HERITAGE_IMAGE, Modality.IMAGE): ModelCallSpec(
        model_id=MODEL_VISION,
        max_output_tokens=1500,
        temperature=0.7,
        timeout_s=45.0,
        max_retries=2,
    ),
    (ContentKind.SUSTAINABILITY, Modality.TEXT): ModelCallSpec(
        model_id=MODEL_FAST,
        max_output_tokens=1500,
        temperature=0.7,
        timeout_s=30.0,
        max_retries=2,
    ),
    (ContentKind.TRANSLATION, Modality.TEXT): ModelCallSpec(
        model_id=MODEL_TRANSLATION,
        max_output_tokens=1000,
        temperature=0.3,
        timeout_s=30.0,
        max_retries=2,
    ),
}

CHAT_CALL_SPEC = ModelCallSpec(
    model_id=MODEL_GENERAL,
    max_output_tokens=900,
    temperature=0.7,
    timeout_s=30.0,
    max_retries=2,
)


def resolve_call_spec(kind: ContentKind, modality: Modality) -> ModelCallSpec:
    """Return the call parameters for ``kind``; unsupported pairs are caller errors."""

    try:
        return MODEL_CALL_SPECS[(kind, modality)]
    except KeyError:
        raise InputValidationError(
            f"Content kind '{kind.value}' does not support {modality.value} input"
        ) from None
