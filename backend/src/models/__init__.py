"""Pydantic models for data validation and serialization."""

from .assistant import ChatRequest, ChatResponse, ChatTurn
from .insights import ActivityDay, HealthReport, HealthStats, ProjectGroup, SearchHit, VaultStats
from .notification import NotificationRecord, Pin, PinCreate
from .repo import CommitSummary, FileContent, FileWrite, NoteView, RemoteFile, WriteResult
from .tasks import (
    MemoCreate,
    MemoEntry,
    MemoRef,
    QuickNoteCreate,
    TodoCreate,
    TodoItem,
    TodoProgress,
    TodoRef,
)

__all__ = [
    "RemoteFile",
    "FileContent",
    "FileWrite",
    "WriteResult",
    "CommitSummary",
    "NoteView",
    "TodoItem",
    "TodoRef",
    "TodoCreate",
    "TodoProgress",
    "MemoEntry",
    "MemoCreate",
    "MemoRef",
    "QuickNoteCreate",
    "VaultStats",
    "ProjectGroup",
    "SearchHit",
    "HealthStats",
    "HealthReport",
    "ActivityDay",
    "NotificationRecord",
    "Pin",
    "PinCreate",
    "ChatTurn",
    "ChatRequest",
    "ChatResponse",
]
