"""Pydantic models for request/response types."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

Role = Literal["system", "user"]


class CompletionRequest(BaseModel):
    """Body of a legacy ``/completions`` call."""
    model: str
    prompt: str
    max_tokens: int | None = None
    temperature: float | None = None
    stop: list[str] | None = None


class ChatMessage(BaseModel):
    role: Role
    content: str


class ChatCompletionRequest(BaseModel):
    """Body of a ``/chat/completions`` call."""
    model: str
    messages: list[ChatMessage]
    max_tokens: int | None = None
    temperature: float | None = None
    stop: list[str] | None = None


class ImageRequest(BaseModel):
    """Body of an ``/images/generations`` call."""
    prompt: str
    size: str = "512x512"
    response_format: Literal["url", "b64_json"] = "b64_json"
