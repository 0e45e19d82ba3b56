"""Gemini completion client and the vault-aware chat assistant."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

import httpx

from ..models.assistant import ChatTurn
from .checklist import daily_note_path
from .errors import NotFoundError, RateLimitedError, UnauthorizedError, UnknownStoreError
from .github_store import RemoteFileStore
from .insights import InsightsService

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

HISTORY_LIMIT = 20
HISTORY_KEEP = 16
DAILY_CONTEXT_CHARS = 800
FILE_CONTEXT_CHARS = 500
MAX_CONTEXT_FILES = 3


class GeminiClient:
    """Minimal generateContent client with 429 backoff."""

    GOOGLE_API_BASE = "https://generativelanguage.googleapis.com/v1beta/models"
    DEFAULT_MODEL = "gemini-2.0-flash"
    MAX_ATTEMPTS = 3
    INITIAL_BACKOFF_SECONDS = 2.0

    def __init__(
        self,
        api_key: Optional[str],
        *,
        model: str = DEFAULT_MODEL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Optional[Sleep] = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self._transport = transport
        self._sleep = sleep or asyncio.sleep

    def _payload(self, system_prompt: str, turns: Sequence[ChatTurn]) -> Dict[str, Any]:
        return {
            "systemInstruction": {"parts": [{"text": system_prompt}]},
            "contents": [{"role": t.role, "parts": [{"text": t.text}]} for t in turns],
            "generationConfig": {"temperature": 0.7, "maxOutputTokens": 2048},
        }

    async def complete(self, system_prompt: str, turns: Sequence[ChatTurn]) -> str:
        """
        Return the model's reply text.

        HTTP 429 is retried with exponential backoff (2s, 4s) for at most
        MAX_ATTEMPTS attempts in total; then RateLimitedError is raised.
        """
        if not self.api_key:
            raise UnauthorizedError("No Gemini API key configured. Set it in settings.")

        url = f"{self.GOOGLE_API_BASE}/{self.model}:generateContent"
        delay = self.INITIAL_BACKOFF_SECONDS
        async with httpx.AsyncClient(timeout=60.0, transport=self._transport) as client:
            for attempt in range(1, self.MAX_ATTEMPTS + 1):
                try:
                    response = await client.post(
                        url,
                        params={"key": self.api_key},
                        json=self._payload(system_prompt, turns),
                    )
                except httpx.HTTPError as e:
                    raise UnknownStoreError(f"Gemini request failed: {e}", status=0) from e

                if response.status_code == 429:
                    if attempt == self.MAX_ATTEMPTS:
                        break
                    logger.info(f"Gemini rate limited, retry {attempt}/{self.MAX_ATTEMPTS - 1} in {delay:.0f}s")
                    await self._sleep(delay)
                    delay *= 2
                    continue

                if response.is_error:
                    raise UnknownStoreError(f"Gemini API error: {response.status_code}", status=response.status_code)

                data = response.json()
                candidates = data.get("candidates") or []
                if not candidates:
                    return "No response"
                parts = (candidates[0].get("content") or {}).get("parts") or [{}]
                return parts[0].get("text") or "No response"

        raise RateLimitedError("Gemini API is rate limited; wait a moment and try again.", status=429)


class VaultAssistant:
    """Chat over the vault: gathers context from the store and asks Gemini."""

    def __init__(self, store: RemoteFileStore, insights: InsightsService, client: GeminiClient) -> None:
        self.store = store
        self.insights = insights
        self.client = client

    async def _today_note(self) -> str:
        try:
            return await self.store.read_file(daily_note_path(self.insights.today()))
        except NotFoundError:
            return ""

    async def build_context(self, message: str) -> str:
        stats, today_text, commits = await asyncio.gather(
            self.insights.get_stats(),
            self._today_note(),
            self.store.get_commits(5),
        )
        recent = "\n".join(
            f"{c.headline[:50]} ({c.authored_at.date().isoformat() if c.authored_at else '?'})" for c in commits
        )
        context = (
            f"\n\n[Vault stats] notes: {stats.total}, projects: {stats.projects}, "
            f"daily: {stats.dailies}, knowledge: {stats.knowledge}"
            f"\n[Today's daily note]\n{(today_text or 'Not created yet')[:DAILY_CONTEXT_CHARS]}"
            f"\n[Recent commits]\n{recent}"
        )

        keywords = [w.lower() for w in re.split(r"\s+", message) if len(w) > 2][:3]
        if keywords:
            files = await self.store.list_md_files()
            relevant = [f for f in files if any(k in f.path.lower() for k in keywords)][:MAX_CONTEXT_FILES]
            for f in relevant:
                try:
                    text = await self.store.read_file(f.path)
                except NotFoundError:
                    continue
                context += f"\n\n[{f.path}]\n{text[:FILE_CONTEXT_CHARS]}"
        return context

    def system_prompt(self, context: str) -> str:
        return (
            "You are Vault AI, an assistant with access to the user's Obsidian vault. "
            "Answer conversationally, refer to the vault content concretely, and suggest "
            "adding memos, reviewing TODOs or searching files where it helps." + context
        )

    async def chat(self, history: List[ChatTurn], message: str) -> tuple[str, List[ChatTurn]]:
        """Return the reply and the updated, trimmed history."""
        context = await self.build_context(message)
        turns = list(history) + [ChatTurn(role="user", text=message)]
        reply = await self.client.complete(self.system_prompt(context), turns)
        turns.append(ChatTurn(role="model", text=reply))
        if len(turns) > HISTORY_LIMIT:
            turns = turns[-HISTORY_KEEP:]
        return reply, turns


__all__ = ["GeminiClient", "VaultAssistant"]
