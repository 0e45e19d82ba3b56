"""Models describing the remote repository tree and file contents."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RemoteFile(BaseModel):
    """One blob entry of a tree listing."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., min_length=1, description="Slash-delimited path from the repo root")
    size: int = Field(0, ge=0, description="Blob size in bytes")
    sha: str = Field("", description="Blob revision token at listing time")

    @property
    def top_folder(self) -> str:
        return self.path.split("/", 1)[0]

    @property
    def stem(self) -> str:
        name = self.path.rsplit("/", 1)[-1]
        return name[:-3] if name.endswith(".md") else name


class FileContent(BaseModel):
    """Decoded text of a file paired with the revision token needed to overwrite it."""

    path: str
    text: str
    sha: Optional[str] = Field(None, description="None when the file does not exist yet")


class WriteResult(BaseModel):
    """Outcome of a create-or-update call."""

    path: str
    sha: str = Field(..., description="New blob revision token")
    commit_sha: Optional[str] = None
    created: bool = Field(False, description="True when no previous revision existed")


class CommitSummary(BaseModel):
    """Condensed commit history entry."""

    sha: str
    message: str
    author_name: Optional[str] = None
    authored_at: Optional[datetime] = None

    @property
    def headline(self) -> str:
        return self.message.split("\n", 1)[0]


class NoteView(BaseModel):
    """File content with front-matter split out, for previews and the editor."""

    path: str
    title: str
    metadata: dict = Field(default_factory=dict)
    body: str
    text: str = Field(..., description="Raw file content")
    sha: Optional[str] = None


class FileWrite(BaseModel):
    """Request payload to overwrite a file."""

    content: str = Field(..., max_length=1_048_576)
    message: Optional[str] = Field(None, max_length=200)


__all__ = ["RemoteFile", "FileContent", "WriteResult", "CommitSummary", "NoteView", "FileWrite"]
