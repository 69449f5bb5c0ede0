import asyncio
import logging
from typing import Any, List, Optional, Sequence

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential
from tenacity.wait import wait_base

from src.core.config import ApiSettings
from src.core.errors import classify_provider_error, is_transient
from src.services.openrouter.catalog import MODEL_GENERAL
from src.services.openrouter.schemas import ChatTurn, ModelCallSpec, RawModelResponse

logger = logging.getLogger(__name__)


def _content_to_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: List[str] = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(str(block.get("text", "")))
        return "".join(parts)
    return ""


def _to_raw_response(message: Any) -> RawModelResponse:
    text = _content_to_text(getattr(message, "content", None))
    metadata = getattr(message, "response_metadata", None) or {}
    truncated = metadata.get("finish_reason") == "length"
    if truncated:
        logger.warning("Model output hit the token limit (%s chars received)", len(text))
    return RawModelResponse(text=text, truncated=truncated)


def build_messages(
    system_prompt: str,
    user_prompt: str,
    image_ref: Optional[str] = None,
) -> List[BaseMessage]:
    """Assemble the chat messages; an image travels as its own content block."""

    if image_ref:
        user_message = HumanMessage(
            content=[
                {"type": "image_url", "image_url": {"url": image_ref}},
                {"type": "text", "text": user_prompt},
            ]
        )
    else:
        user_message = HumanMessage(content=user_prompt)
    return [SystemMessage(content=system_prompt), user_message]


class ModelGateway:
    """Issues bounded, retried calls to the hosted model.

    The chat client is created once per process and injected, so tests can
    pass a fake. Model id, token budget and temperature come from the
    ``ModelCallSpec`` of each call. Each attempt is cut off after
    ``spec.timeout_s``; only transient failures (5xx, dropped connections)
    are retried, and every failure leaves as a classified ``GenerationError``.
    """

    def __init__(self, llm: BaseChatModel, *, retry_wait: Optional[wait_base] = None) -> None:
        self.llm = llm
        self._retry_wait = retry_wait or wait_exponential(multiplier=0.5, min=0.5, max=4)

    async def invoke(
        self,
        spec: ModelCallSpec,
        system_prompt: str,
        user_prompt: str,
        image_ref: Optional[str] = None,
    ) -> RawModelResponse:
        messages = build_messages(system_prompt, user_prompt, image_ref)
        return await self._call(spec, messages)

    async def converse(
        self,
        spec: ModelCallSpec,
        system_prompt: str,
        history: Sequence[ChatTurn],
    ) -> RawModelResponse:
        """Continue a multi-turn conversation under the same call policy."""

        messages: List[BaseMessage] = [SystemMessage(content=system_prompt)]
        for turn in history:
            if turn.role == "assistant":
                messages.append(AIMessage(content=turn.content))
            else:
                messages.append(HumanMessage(content=turn.content))
        return await self._call(spec, messages)

    async def _call(self, spec: ModelCallSpec, messages: List[BaseMessage]) -> RawModelResponse:
        bound = self.llm.bind(
            model=spec.model_id,
            max_tokens=spec.max_output_tokens,
            temperature=spec.temperature,
        )
        retrying = AsyncRetrying(
            stop=stop_after_attempt(spec.max_retries + 1),
            wait=self._retry_wait,
            retry=retry_if_exception(is_transient),
            reraise=True,
        )

        attempt_number = 0
        message: Any = None
        try:
            async for attempt in retrying:
                with attempt:
                    attempt_number += 1
                    if attempt_number > 1:
                        logger.warning(
                            "Retrying %s (attempt %s/%s)",
                            spec.model_id,
                            attempt_number,
                            spec.max_retries + 1,
                        )
                    message = await asyncio.wait_for(bound.ainvoke(messages), timeout=spec.timeout_s)
        except Exception as exc:
            error = classify_provider_error(exc)
            logger.error(
                "Model call to %s failed after %s attempt(s): %s (%s)",
                spec.model_id,
                attempt_number,
                error.kind,
                exc,
            )
            raise error from exc

        response = _to_raw_response(message)
        logger.debug("Raw response from %s: %r", spec.model_id, response.text[:200])
        return response


def create_openrouter_llm(settings: ApiSettings) -> ChatOpenAI:
    """Instantiate the shared OpenRouter chat client using project settings."""

    api_key = settings.ensure("openrouter_api_key")
    return ChatOpenAI(
        model=MODEL_GENERAL,
        api_key=api_key,
        base_url=settings.openrouter_base_url,
        default_headers={
            "HTTP-Referer": settings.app_url,
            "X-Title": settings.app_title,
        },
        # Retries and per-attempt deadlines are owned by ModelGateway.
        max_retries=0,
        timeout=120.0,
    )
