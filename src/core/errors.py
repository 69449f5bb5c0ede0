"""Closed error taxonomy surfaced to the HTTP layer.

Only input validation and the model/network layer can fail a request.
Extraction and normalization problems never show up here: they degrade to a
complete, low-confidence canonical record instead.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

import openai

logger = logging.getLogger(__name__)


class GenerationError(Exception):
    """Base class for failures that abort a generation request."""

    kind: str = "provider_unavailable"
    status_code: int = 503
    public_message: str = "The AI service is temporarily unavailable. Please try again later."

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.public_message)
        self.message = message or self.public_message


class InputValidationError(GenerationError):
    """Caller payload rejected before any network call was made."""

    kind = "input_validation"
    status_code = 400
    public_message = "The request is missing required fields or contains invalid values."


class AuthError(GenerationError):
    kind = "auth"
    status_code = 401
    public_message = "The AI provider rejected the configured credentials."


class RateLimitError(GenerationError):
    kind = "rate_limit"
    status_code = 429
    public_message = "Rate limit exceeded. Please try again in a moment."


class ProviderTimeoutError(GenerationError):
    kind = "timeout"
    status_code = 504
    public_message = "The AI service took too long to respond. Please try again."


class ProviderUnavailable(GenerationError):
    kind = "provider_unavailable"
    status_code = 503


def _status_code(exc: BaseException) -> Optional[int]:
    if isinstance(exc, openai.APIStatusError):
        return exc.status_code
    status = getattr(exc, "status_code", None) or getattr(exc, "status", None)
    return status if isinstance(status, int) else None


def is_transient(exc: BaseException) -> bool:
    """Return True for provider failures worth retrying (5xx, dropped connections)."""

    if isinstance(exc, (openai.APITimeoutError, asyncio.TimeoutError)):
        return False
    if isinstance(exc, (openai.APIConnectionError, ConnectionError)):
        return True
    status = _status_code(exc)
    return status is not None and status >= 500


def classify_provider_error(exc: BaseException) -> GenerationError:
    """Map a provider/transport exception onto the closed taxonomy."""

    if isinstance(exc, GenerationError):
        return exc
    if isinstance(exc, (openai.APITimeoutError, asyncio.TimeoutError)):
        return ProviderTimeoutError(f"Model call timed out: {exc}")
    if isinstance(exc, (openai.APIConnectionError, ConnectionError)):
        return ProviderUnavailable(f"Could not reach the model provider: {exc}")

    status = _status_code(exc)
    if status in (401, 403):
        return AuthError(f"Provider rejected credentials ({status}): {exc}")
    if status == 429:
        return RateLimitError(f"Provider rate limit hit: {exc}")
    if status == 404:
        return ProviderUnavailable(f"Model not found: {exc}")
    if status is not None:
        return ProviderUnavailable(f"Provider returned HTTP {status}: {exc}")

    logger.error("Unrecognised provider failure: %r", exc)
    return ProviderUnavailable(f"Unexpected provider failure: {exc}")
