"""HTTP API route for the vault AI chat."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ...models.assistant import ChatRequest, ChatResponse
from ...services.assistant import VaultAssistant
from ...services.dependencies import get_assistant

router = APIRouter()


@router.post("/api/assistant/chat", response_model=ChatResponse)
async def chat(request: ChatRequest, assistant: VaultAssistant = Depends(get_assistant)):
    reply, history = await assistant.chat(request.history, request.message)
    return ChatResponse(reply=reply, history=history)


__all__ = ["router"]
