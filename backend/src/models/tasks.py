"""TODO and memo records derived from markdown lines."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class TodoItem(BaseModel):
    """A checkbox line; recomputed from file content on every parse."""

    task: str
    project: str
    done: bool
    in_progress: bool = Field(False, description="Line used the '- [/]' marker")
    source_file: str
    line: str = Field(..., description="Exact line text as found in the file")
    key: str = Field(..., description="Content-addressed identity: source_file + stripped line")


class TodoRef(BaseModel):
    """Identifies a TODO for mutation; the line is re-located in a fresh read."""

    source_file: str = Field(..., min_length=1)
    task: str = Field(..., min_length=1)
    done: bool = False


class TodoCreate(BaseModel):
    task: str = Field(..., max_length=500)
    project: Optional[str] = Field(None, description="Defaults to Home")


class MemoEntry(BaseModel):
    """One list line of the append-only memo file."""

    timestamp: str = Field("", description="Empty when the line has no bold timestamp")
    text: str
    raw_line: str
    key: str


class MemoCreate(BaseModel):
    text: str = Field(..., max_length=2000)


class MemoRef(BaseModel):
    raw_line: str = Field(..., min_length=1)


class QuickNoteCreate(BaseModel):
    text: str = Field(..., max_length=2000)


class TodoProgress(BaseModel):
    pending: int = Field(..., ge=0)
    done: int = Field(..., ge=0)
    percent: int = Field(..., ge=0, le=100)


__all__ = [
    "TodoItem",
    "TodoRef",
    "TodoCreate",
    "MemoEntry",
    "MemoCreate",
    "MemoRef",
    "QuickNoteCreate",
    "TodoProgress",
]
