"""Data models for the story writer module."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class GenerationState(str, Enum):
    """Lifecycle of a single chat-completion call."""
    IDLE = "idle"
    REQUESTING = "requesting"


@dataclass
class WriterConfig:
    """Per-run overrides for story generation.

    Zero, empty or None values fall back to the loaded ``Settings``.
    """
    model: str = ""
    temperature: float | None = None
    max_tokens: int = 0
    example_count: int | None = None


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Literal["system", "user", "assistant"]
    content: str


class GenerationRequest(BaseModel):
    """Request body for the chat-completion endpoint."""

    model_config = ConfigDict(frozen=True)

    model: str = Field(min_length=1)
    messages: list[ChatMessage]
    max_tokens: int = Field(gt=0)
    temperature: float = Field(ge=0, le=2)

    @classmethod
    def build(
        cls,
        model: str,
        system_message: str,
        user_message: str,
        max_tokens: int,
        temperature: float,
    ) -> GenerationRequest:
        return cls(
            model=model,
            messages=[
                ChatMessage(role="system", content=system_message),
                ChatMessage(role="user", content=user_message),
            ],
            max_tokens=max_tokens,
            temperature=temperature,
        )

    def to_payload(self) -> dict:
        return self.model_dump()


# --- Response shape: {"choices": [{"message": {"content": "..."}}]} ---

class ResponseMessage(BaseModel):
    content: str


class ResponseChoice(BaseModel):
    message: ResponseMessage


class ChatCompletionResponse(BaseModel):
    choices: list[ResponseChoice]
