from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class ModelCallSpec:
    """Model identifier and call parameters for one content kind."""

    model_id: str
    max_output_tokens: int
    temperature: float
    timeout_s: float
    max_retries: int


@dataclass(frozen=True)
class RawModelResponse:
    """Text returned by the provider; ``truncated`` when the token budget ran out."""

    text: str
    truncated: bool = False


class ChatTurn(BaseModel):
    """One message of a concierge conversation."""

    role: Literal["user", "assistant"]
    content: str = Field(min_length=1)

    model_config = ConfigDict(frozen=True, extra="forbid")
