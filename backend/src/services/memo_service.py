"""Memo pad and daily quick notes."""

from __future__ import annotations

from datetime import datetime
import logging
from typing import Callable, List, Optional

from ..models.repo import FileContent, WriteResult
from ..models.tasks import MemoEntry
from .checklist import (
    MEMOS_FILE,
    MemoDocument,
    append_memo,
    append_quick_note,
    daily_note_path,
)
from .errors import NotFoundError
from .github_store import RemoteFileStore
from .notifier import NotificationService

logger = logging.getLogger(__name__)

SUMMARY_LENGTH = 30


class MemoService:
    """Append-only memos in Memos.md plus timestamped lines in today's daily note."""

    def __init__(
        self,
        store: RemoteFileStore,
        notifier: NotificationService,
        *,
        now: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.store = store
        self.notifier = notifier
        self._now = now or datetime.now

    async def _read_fresh(self, path: str) -> FileContent:
        """Fresh read; a missing file comes back with no text and no sha."""
        try:
            return await self.store.read_file_content(path, bypass_cache=True)
        except NotFoundError:
            return FileContent(path=path, text="", sha=None)

    @staticmethod
    def _existing_text(base: FileContent) -> Optional[str]:
        return base.text if base.sha is not None else None

    async def list_memos(self) -> List[MemoEntry]:
        try:
            text = await self.store.read_file(MEMOS_FILE)
        except NotFoundError:
            return []
        return MemoDocument.parse(text).entries

    async def add_memo(self, text: str) -> WriteResult:
        timestamp = self._now().strftime("%Y-%m-%d %H:%M")
        base = await self._read_fresh(MEMOS_FILE)
        updated = append_memo(self._existing_text(base), timestamp, text)
        result = await self.store.write_file(
            MEMOS_FILE, updated, f"memo - {text.strip()[:SUMMARY_LENGTH]}", base=base
        )
        await self.notifier.after_write("Memo added", text.strip())
        return result

    async def delete_memo(self, raw_line: str) -> WriteResult:
        """Remove one memo line, located in a fresh read of the memo file."""
        base = await self.store.read_file_content(MEMOS_FILE, bypass_cache=True)
        document = MemoDocument.parse(base.text)
        document.delete(raw_line)
        result = await self.store.write_file(MEMOS_FILE, document.render(), "memo done", base=base)
        await self.notifier.after_write("Memo done", raw_line)
        return result

    async def add_quick_note(self, text: str) -> WriteResult:
        now = self._now()
        path = daily_note_path(now.date())
        base = await self._read_fresh(path)
        updated = append_quick_note(self._existing_text(base), now.date(), now.strftime("%H:%M"), text)

        actor = self.notifier.actor
        message = f"Quick note: {text.strip()[:SUMMARY_LENGTH]}"
        result = await self.store.write_file(
            path, updated, f"[{actor}] {message}" if actor else message, base=base
        )
        await self.notifier.after_write("Quick note", text.strip())
        return result


__all__ = ["MemoService"]
