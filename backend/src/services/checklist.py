"""Line-oriented extraction and mutation of TODO checkboxes and memo entries.

These helpers never build a document model: a file is a list of lines, and
every mutation rewrites only the targeted line(s), so rendering an unmodified
parse reproduces the input byte for byte.
"""

from __future__ import annotations

from datetime import date
import hashlib
import re
from typing import List, Optional

import frontmatter

from ..models.tasks import MemoEntry, TodoItem
from .errors import LineNotFoundError, ValidationError

OPEN_MARKER = "- [ ]"
IN_PROGRESS_MARKER = "- [/]"
DONE_MARKER = "- [x]"
MARKER_LENGTH = len(OPEN_MARKER)

PROJECTS_PREFIX = "Projects/"
HOME_FILE = "Home.md"
HOME_PROJECT = "Home"
MEMOS_FILE = "Memos.md"
DAILY_PREFIX = "Daily/"

MEMO_PATTERN = re.compile(r"^- \*\*(.+?)\*\* — (.+)$")
BLANK_RUN_PATTERN = re.compile(r"\n\n\n+")


def content_key(source: str, line: str) -> str:
    """Stable identity for a derived record: hash of its file and stripped line."""
    digest = hashlib.sha1(f"{source}\n{line.strip()}".encode("utf-8")).hexdigest()
    return digest[:12]


def project_for(path: str) -> str:
    if path.startswith(PROJECTS_PREFIX):
        return path.split("/")[1]
    return HOME_PROJECT


def todo_file_for(project: Optional[str]) -> str:
    """File that receives new TODOs for a project."""
    name = (project or "").strip() or HOME_PROJECT
    if name == HOME_PROJECT:
        return HOME_FILE
    if "/" in name or ".." in name:
        raise ValidationError(f"Invalid project name: {name}")
    return f"{PROJECTS_PREFIX}{name}/{name}.md"


def daily_note_path(day: date) -> str:
    return f"{DAILY_PREFIX}{day.isoformat()}.md"


def _open_markers(done: bool) -> tuple[str, ...]:
    return (DONE_MARKER,) if done else (OPEN_MARKER, IN_PROGRESS_MARKER)


def _task_text(stripped: str) -> str:
    return stripped[MARKER_LENGTH:].strip()


def _split_lines(text: str) -> List[str]:
    return text.split("\n")


def _front_matter_end(lines: List[str]) -> int:
    """Index of the first line after a leading YAML front-matter block (0 if none)."""
    if not lines or lines[0].strip() != "---":
        return 0
    for index in range(1, len(lines)):
        if lines[index].strip() == "---":
            return index + 1
    return 0


class ChecklistDocument:
    """A markdown file viewed as lines, with the TODO items found in it."""

    def __init__(self, path: str, lines: List[str]) -> None:
        self.path = path
        self.lines = lines

    @classmethod
    def parse(cls, path: str, text: str) -> "ChecklistDocument":
        return cls(path, _split_lines(text))

    def render(self) -> str:
        return "\n".join(self.lines)

    @property
    def items(self) -> List[TodoItem]:
        project = project_for(self.path)
        items: List[TodoItem] = []
        for line in self.lines:
            stripped = line.strip()
            if stripped.startswith(OPEN_MARKER) or stripped.startswith(IN_PROGRESS_MARKER):
                done = False
            elif stripped.startswith(DONE_MARKER):
                done = True
            else:
                continue
            items.append(
                TodoItem(
                    task=_task_text(stripped),
                    project=project,
                    done=done,
                    in_progress=stripped.startswith(IN_PROGRESS_MARKER),
                    source_file=self.path,
                    line=line,
                    key=content_key(self.path, line),
                )
            )
        return items

    def _matches(self, line: str, task: str, markers: tuple[str, ...]) -> bool:
        stripped = line.strip()
        return stripped[:MARKER_LENGTH] in markers and _task_text(stripped) == task

    def toggle(self, task: str, done: bool) -> bool:
        """
        Flip the first line carrying ``task`` in state ``done``; return the new state.

        Only the five marker characters change, so toggling twice restores the
        original line (an in-progress line comes back as a plain open one).
        """
        markers = _open_markers(done)
        new_marker = OPEN_MARKER if done else DONE_MARKER
        for index, line in enumerate(self.lines):
            if self._matches(line, task, markers):
                start = line.index(line.strip()[:MARKER_LENGTH])
                self.lines[index] = line[:start] + new_marker + line[start + MARKER_LENGTH:]
                return not done
        raise LineNotFoundError(f"Task not found in {self.path}: {task}", path=self.path)

    def delete(self, task: str, done: bool) -> int:
        """Remove every line holding ``task`` (its marker or in-progress); return the count."""
        markers = (DONE_MARKER if done else OPEN_MARKER, IN_PROGRESS_MARKER)
        kept = [line for line in self.lines if not self._matches(line, task, markers)]
        removed = len(self.lines) - len(kept)
        if removed == 0:
            raise LineNotFoundError(f"Task not found in {self.path}: {task}", path=self.path)
        self.lines = kept
        return removed


def parse_todos(path: str, text: str) -> List[TodoItem]:
    return ChecklistDocument.parse(path, text).items


def new_todo_file(project: str) -> str:
    return f"# {project}\n\n## TODO\n"


def append_todo(text: Optional[str], project: str, task: str) -> str:
    """Append an open TODO, initializing the file when it does not exist yet."""
    task = (task or "").strip()
    if not task:
        raise ValidationError("TODO text must not be empty")
    if "\n" in task:
        raise ValidationError("TODO text must be a single line")
    content = text if text is not None else new_todo_file(project)
    return f"{content}\n{OPEN_MARKER} {task}"


class MemoDocument:
    """The append-only memo file: one entry per ``- `` list line."""

    def __init__(self, text: str) -> None:
        self.text = text

    @classmethod
    def parse(cls, text: str) -> "MemoDocument":
        return cls(text)

    def render(self) -> str:
        return self.text

    @property
    def entries(self) -> List[MemoEntry]:
        entries: List[MemoEntry] = []
        lines = _split_lines(self.text)
        for line in lines[_front_matter_end(lines):]:
            if not line.strip().startswith("- "):
                continue
            match = MEMO_PATTERN.match(line)
            if match:
                timestamp, body = match.group(1), match.group(2)
            else:
                timestamp, body = "", re.sub(r"^\s*- ", "", line)
            entries.append(
                MemoEntry(timestamp=timestamp, text=body, raw_line=line, key=content_key(MEMOS_FILE, line))
            )
        return entries

    def delete(self, raw_line: str) -> None:
        """Drop the exact line and collapse the blank-line run it leaves behind."""
        if not raw_line or raw_line not in _split_lines(self.text):
            raise LineNotFoundError(f"Memo not found: {raw_line}", path=MEMOS_FILE)
        lines = _split_lines(self.text)
        lines.remove(raw_line)
        collapsed = BLANK_RUN_PATTERN.sub("\n\n", "\n".join(lines))
        self.text = collapsed.strip() + "\n"


def format_memo_line(timestamp: str, memo: str) -> str:
    return f"- **{timestamp}** — {memo}"


def new_memo_file() -> str:
    post = frontmatter.Post("# 💡 Memos", tags=["type/memo"])
    return frontmatter.dumps(post) + "\n"


def append_memo(text: Optional[str], timestamp: str, memo: str) -> str:
    memo = (memo or "").strip()
    if not memo:
        raise ValidationError("Memo text must not be empty")
    content = text if text is not None else new_memo_file()
    return f"{content}\n{format_memo_line(timestamp, memo)}"


def new_daily_file(day: date) -> str:
    post = frontmatter.Post(f"# {day.isoformat()}", date=day.isoformat(), tags=["type/daily"])
    return frontmatter.dumps(post) + "\n"


def append_quick_note(text: Optional[str], day: date, clock_time: str, note: str) -> str:
    """Append a ``- HH:MM note`` line to a daily note, creating it when missing."""
    note = (note or "").strip()
    if not note:
        raise ValidationError("Note text must not be empty")
    content = text if text is not None else new_daily_file(day)
    return f"{content}\n- {clock_time} {note}"


__all__ = [
    "ChecklistDocument",
    "MemoDocument",
    "parse_todos",
    "append_todo",
    "append_memo",
    "append_quick_note",
    "format_memo_line",
    "content_key",
    "project_for",
    "todo_file_for",
    "daily_note_path",
    "new_todo_file",
    "new_memo_file",
    "new_daily_file",
    "OPEN_MARKER",
    "IN_PROGRESS_MARKER",
    "DONE_MARKER",
    "PROJECTS_PREFIX",
    "HOME_FILE",
    "HOME_PROJECT",
    "MEMOS_FILE",
    "DAILY_PREFIX",
]
