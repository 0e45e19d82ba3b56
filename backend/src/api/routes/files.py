"""HTTP API routes for raw file operations."""

from __future__ import annotations

from pathlib import PurePosixPath
import re
from typing import Any, Dict

import frontmatter
from fastapi import APIRouter, Depends, Query

from ...models.repo import FileWrite, NoteView, RemoteFile, WriteResult
from ...services.dependencies import get_notifier, get_store
from ...services.errors import ValidationError
from ...services.github_store import RemoteFileStore
from ...services.notifier import NotificationService

router = APIRouter()

INVALID_PATH_CHARS = {'<', '>', ':', '"', '|', '?', '*'}
H1_PATTERN = re.compile(r"^\s*#\s+(.+)$", re.MULTILINE)


def validate_note_path(note_path: str) -> str:
    """Reject paths the vault never contains; raises ValidationError."""
    if not note_path or len(note_path) > 256:
        raise ValidationError("Path must be 1-256 characters")
    if not note_path.endswith(".md"):
        raise ValidationError("Path must end with .md")
    if ".." in note_path:
        raise ValidationError("Path must not contain '..'")
    if "\\" in note_path or note_path.startswith("/"):
        raise ValidationError("Path must be relative and use Unix separators (/)")
    if any(char in INVALID_PATH_CHARS for char in note_path):
        raise ValidationError("Path contains invalid characters")
    return note_path


def _derive_title(note_path: str, metadata: Dict[str, Any], body: str) -> str:
    title = metadata.get("title")
    if isinstance(title, str) and title.strip():
        return title.strip()
    match = H1_PATTERN.search(body or "")
    if match:
        return match.group(1).strip()
    stem = PurePosixPath(note_path).stem
    return stem.replace("-", " ").replace("_", " ").strip() or stem


@router.get("/api/files", response_model=list[RemoteFile])
async def list_files(store: RemoteFileStore = Depends(get_store)):
    """List markdown files in the vault."""
    return await store.list_md_files()


@router.get("/api/files/{path:path}", response_model=NoteView)
async def read_file(
    path: str,
    fresh: bool = Query(False, description="Bypass the response cache"),
    store: RemoteFileStore = Depends(get_store),
):
    """Read a note with its front-matter split out."""
    content = await store.read_file_content(validate_note_path(path), bypass_cache=fresh)
    post = frontmatter.loads(content.text)
    metadata = dict(post.metadata or {})
    return NoteView(
        path=path,
        title=_derive_title(path, metadata, post.content),
        metadata=metadata,
        body=post.content,
        text=content.text,
        sha=content.sha,
    )


@router.put("/api/files/{path:path}", response_model=WriteResult)
async def write_file(
    path: str,
    payload: FileWrite,
    store: RemoteFileStore = Depends(get_store),
    notifier: NotificationService = Depends(get_notifier),
):
    """Create or overwrite a note."""
    result = await store.write_file(validate_note_path(path), payload.content, payload.message)
    await notifier.after_write("File saved" if not result.created else "File created", path)
    return result


__all__ = ["router", "validate_note_path"]
