"""Pytest configuration for the Rihla AI content service."""
from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

# Ensure the project root is on sys.path so that import src works under pytest.
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import httpx
import pytest
from langchain_core.messages import AIMessage
from tenacity import wait_none

from src.core.cache import ResultCache
from src.core.config import ApiSettings
from src.core.schemas import VideoResult


class StubChatModel:
    """Replays scripted replies in place of the OpenRouter chat client.

    Each reply is a string (returned as the message content), an ``AIMessage``
    or an exception instance (raised). ``calls`` records the bound kwargs and
    the messages of every attempt.
    """

    def __init__(self, replies: Sequence[Any], *, delay_s: float = 0.0) -> None:
        self.replies: List[Any] = list(replies)
        self.delay_s = delay_s
        self.calls: List[Tuple[Dict[str, Any], List[Any]]] = []
        self.model_name = "stub-model"

    def bind(self, **kwargs: Any) -> "_BoundStub":
        return _BoundStub(self, kwargs)


class _BoundStub:
    def __init__(self, parent: StubChatModel, kwargs: Dict[str, Any]) -> None:
        self.parent = parent
        self.kwargs = kwargs

    async def ainvoke(self, messages: List[Any]) -> AIMessage:
        self.parent.calls.append((self.kwargs, messages))
        if self.parent.delay_s:
            await asyncio.sleep(self.parent.delay_s)
        if not self.parent.replies:
            raise AssertionError("StubChatModel ran out of scripted replies")
        reply = self.parent.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        if isinstance(reply, AIMessage):
            return reply
        return AIMessage(content=reply)


class FakeVideoClient:
    """Video client double that serves fixed results per query."""

    def __init__(self, videos: Sequence[VideoResult] = ()) -> None:
        self.videos = list(videos)
        self.queries: List[str] = []
        self.cache: ResultCache = ResultCache()
        self.closed = False

    async def search_videos(self, query: str, max_results: int = 2) -> List[VideoResult]:
        self.queries.append(query)
        return self.videos[:max_results]

    async def aclose(self) -> None:
        self.closed = True


def provider_error(cls: type, status: int) -> Exception:
    """Build an ``openai`` status error carrying ``status``."""

    request = httpx.Request("POST", "https://openrouter.ai/api/v1/chat/completions")
    response = httpx.Response(status, request=request)
    return cls(f"HTTP {status}", response=response, body=None)


@pytest.fixture
def settings() -> ApiSettings:
    return ApiSettings(openrouter_api_key="test-key", youtube_api_key=None)


@pytest.fixture
def make_service(settings):
    """Build a GenerationService around a stub chat model and a fake video client."""

    from src.api.generation_service import GenerationService

    def _make(replies: Sequence[Any], *, videos: Sequence[VideoResult] = (), delay_s: float = 0.0):
        llm = StubChatModel(replies, delay_s=delay_s)
        return GenerationService(
            settings,
            llm=llm,
            video_client=FakeVideoClient(videos),
            retry_wait=wait_none(),
        )

    return _make
