"""AI assistant request/response models."""

from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, Field


class ChatTurn(BaseModel):
    role: Literal["user", "model"]
    text: str


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=8000)
    history: List[ChatTurn] = Field(default_factory=list)


class ChatResponse(BaseModel):
    reply: str
    history: List[ChatTurn]


__all__ = ["ChatTurn", "ChatRequest", "ChatResponse"]
