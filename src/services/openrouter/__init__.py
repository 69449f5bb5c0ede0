"""OpenRouter (OpenAI-compatible) model gateway.

This module wraps the hosted LLM endpoint used by the generation pipeline:
one configured chat client per process, a static table mapping each content
kind to its model and call parameters, and a gateway that applies timeouts,
transient-failure retries and error classification.

Public API:
    - create_openrouter_llm: Factory function to create the shared chat client
    - ModelGateway: Bounded, retried model invocation
    - resolve_call_spec: Static (kind, modality) -> ModelCallSpec lookup
    - ModelCallSpec / RawModelResponse: Gateway input and output records
"""
from src.services.openrouter.catalog import CHAT_CALL_SPEC, MODEL_CALL_SPECS, resolve_call_spec
from src.services.openrouter.client import ModelGateway, create_openrouter_llm
from src.services.openrouter.schemas import ChatTurn, ModelCallSpec, RawModelResponse

__all__ = [
    "CHAT_CALL_SPEC",
    "MODEL_CALL_SPECS",
    "resolve_call_spec",
    "ModelGateway",
    "create_openrouter_llm",
    "ChatTurn",
    "ModelCallSpec",
    "RawModelResponse",
]
