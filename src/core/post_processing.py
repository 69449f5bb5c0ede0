"""Recovery of a single JSON object from free-form model output."""
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# Three backticks plus an optional language tag (```json, ```JSON, ```js ...)
_CODE_FENCE_PATTERN = re.compile(r"```[A-Za-z0-9_+-]*")
_PREVIEW_CHARS = 200


@dataclass(frozen=True)
class ExtractedJson:
    """The candidate substring and the object it parsed to."""

    text: str
    data: Dict[str, Any]


def strip_code_fences(raw_text: str) -> str:
    """Remove every code-fence marker, wherever it appears."""

    return _CODE_FENCE_PATTERN.sub("", raw_text)


def find_json_candidate(raw_text: Optional[str]) -> Optional[str]:
    """Return the fence-stripped span from the first ``{`` to the last ``}``, if any."""

    if not raw_text:
        return None
    text = strip_code_fences(raw_text)
    start_idx = text.find("{")
    end_idx = text.rfind("}")
    if start_idx == -1 or end_idx == -1 or end_idx < start_idx:
        return None
    return text[start_idx : end_idx + 1]


def extract_json(raw_text: Optional[str]) -> Optional[ExtractedJson]:
    """Isolate and parse the JSON object embedded in ``raw_text``.

    The candidate spans from the first ``{`` to the last ``}`` once fences are
    removed. This assumes the model emitted at most one object surrounded by
    prose: a response holding two sibling objects yields a candidate that
    covers both, fails to parse, and is reported as ``None``.

    Returns ``None`` when nothing usable is found; that is the normal outcome
    for a model that did not comply, not an error.
    """
    candidate = find_json_candidate(raw_text)
    if candidate is None:
        logger.debug("No JSON object boundaries in model output: %r", (raw_text or "")[:_PREVIEW_CHARS])
        return None

    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as exc:
        logger.warning(
            "Failed to parse model output as JSON (%s); preview: %r",
            exc,
            raw_text[:_PREVIEW_CHARS],
        )
        return None

    if not isinstance(parsed, dict):
        logger.warning("Model output parsed to %s, expected an object", type(parsed).__name__)
        return None
    return ExtractedJson(text=candidate, data=parsed)
