"""TODO reads and read-modify-write mutations against the vault."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from ..models.repo import FileContent, RemoteFile, WriteResult
from ..models.tasks import TodoItem, TodoRef
from .checklist import (
    HOME_FILE,
    PROJECTS_PREFIX,
    ChecklistDocument,
    append_todo,
    parse_todos,
    todo_file_for,
)
from .errors import NotFoundError
from .github_store import RemoteFileStore
from .notifier import NotificationService

logger = logging.getLogger(__name__)

TODO_FILE_LIMIT = 20
# Log folders hold historical checkboxes that should not show up as TODOs.
EXCLUDED_PATH_MARKERS = ("ログ",)
SUMMARY_LENGTH = 30


def is_todo_source(f: RemoteFile) -> bool:
    if f.path == HOME_FILE:
        return True
    return f.path.startswith(PROJECTS_PREFIX) and not any(m in f.path for m in EXCLUDED_PATH_MARKERS)


class TodoService:
    """Derive TODOs from project files and apply toggle/delete/add mutations."""

    def __init__(self, store: RemoteFileStore, notifier: NotificationService) -> None:
        self.store = store
        self.notifier = notifier

    def _commit_message(self, summary: str) -> str:
        actor = self.notifier.actor
        return f"[{actor}] {summary}" if actor else summary

    async def _read_optional(self, path: str) -> Optional[str]:
        try:
            return await self.store.read_file(path)
        except NotFoundError:
            logger.info(f"Skipping {path}: removed since the tree was listed")
            return None

    async def get_todos(self) -> List[TodoItem]:
        """Parse TODOs from up to TODO_FILE_LIMIT candidate files, fetched concurrently."""
        files = await self.store.list_md_files()
        targets = [f for f in files if is_todo_source(f)][:TODO_FILE_LIMIT]
        contents = await asyncio.gather(*(self._read_optional(f.path) for f in targets))

        todos: List[TodoItem] = []
        for f, text in zip(targets, contents):
            if text is not None:
                todos.extend(parse_todos(f.path, text))
        return todos

    async def toggle_todo(self, ref: TodoRef) -> WriteResult:
        """Flip a TODO between open and done using a fresh read of its file."""
        base = await self.store.read_file_content(ref.source_file, bypass_cache=True)
        document = ChecklistDocument.parse(ref.source_file, base.text)
        now_done = document.toggle(ref.task, ref.done)

        label = "Done" if now_done else "Reopen"
        result = await self.store.write_file(
            ref.source_file,
            document.render(),
            self._commit_message(f"{label}: {ref.task[:SUMMARY_LENGTH]}"),
            base=base,
        )
        await self.notifier.after_write("TODO done" if now_done else "TODO reopened", ref.task)
        return result

    async def delete_todo(self, ref: TodoRef) -> WriteResult:
        """Remove a TODO line; nothing is written when the line is already gone."""
        base = await self.store.read_file_content(ref.source_file, bypass_cache=True)
        document = ChecklistDocument.parse(ref.source_file, base.text)
        document.delete(ref.task, ref.done)

        result = await self.store.write_file(
            ref.source_file,
            document.render(),
            self._commit_message(f"Delete TODO: {ref.task[:SUMMARY_LENGTH]}"),
            base=base,
        )
        await self.notifier.after_write("TODO deleted", ref.task)
        return result

    async def add_todo(self, task: str, project: Optional[str] = None) -> WriteResult:
        """Append an open TODO to the project's index file (Home.md by default)."""
        path = todo_file_for(project)
        project_name = (project or "").strip() or "Home"
        try:
            base = await self.store.read_file_content(path, bypass_cache=True)
            current: Optional[str] = base.text
        except NotFoundError:
            base = FileContent(path=path, text="", sha=None)
            current = None
        updated = append_todo(current, project_name, task)

        result = await self.store.write_file(
            path,
            updated,
            self._commit_message(f"Add TODO: {task.strip()[:SUMMARY_LENGTH]}"),
            base=base,
        )
        await self.notifier.after_write("TODO added", task.strip())
        return result


__all__ = ["TodoService", "TODO_FILE_LIMIT", "is_todo_source"]
