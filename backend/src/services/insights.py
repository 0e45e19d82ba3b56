"""Read-only aggregate views composed from tree listings and file reads."""

from __future__ import annotations

from collections import Counter
from datetime import date, datetime, timedelta, timezone
import logging
from typing import Callable, Dict, List, Optional, Sequence

from ..models.insights import (
    ActivityDay,
    HealthReport,
    HealthStats,
    ProjectGroup,
    SearchHit,
    VaultStats,
)
from ..models.repo import CommitSummary, RemoteFile
from ..models.tasks import TodoItem, TodoProgress
from .checklist import DAILY_PREFIX, HOME_FILE, PROJECTS_PREFIX, daily_note_path
from .errors import NotFoundError, ValidationError
from .github_store import RemoteFileStore

logger = logging.getLogger(__name__)

SEARCH_RESULT_CAP = 20
SEARCH_SCAN_BUDGET = 40
PREVIEW_LENGTH = 100

MIN_NOTE_BYTES = 10
MISSING_DAILY_PENALTY = 10
MISSING_HOME_PENALTY = 5
EMPTY_FILE_PENALTY = 1
MISSING_PROJECT_INDEX_PENALTY = 3
CROWDED_VAULT_THRESHOLD = 150


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


def compute_stats(files: Sequence[RemoteFile]) -> VaultStats:
    def count(prefix: str) -> int:
        return sum(1 for f in files if f.path.startswith(prefix))

    return VaultStats(
        total=len(files),
        projects=count(PROJECTS_PREFIX),
        dailies=count(DAILY_PREFIX),
        knowledge=count("Knowledge/"),
        weekly=count("Weekly/"),
        total_size=sum(f.size for f in files),
    )


def group_projects(files: Sequence[RemoteFile]) -> List[ProjectGroup]:
    groups: Dict[str, ProjectGroup] = {}
    for f in files:
        if not f.path.startswith(PROJECTS_PREFIX):
            continue
        name = f.path.split("/")[1]
        group = groups.setdefault(name, ProjectGroup(name=name))
        group.files.append(f.path)
        group.total_size += f.size
    return sorted(groups.values(), key=lambda g: len(g.files), reverse=True)


def assess_health(files: Sequence[RemoteFile], today: date) -> HealthReport:
    """Rule-based vault score; pure over a tree listing."""
    paths = {f.path for f in files}
    issues: List[str] = []
    score = 100

    if daily_note_path(today) not in paths:
        issues.append("No daily note for today")
        score -= MISSING_DAILY_PENALTY
    if HOME_FILE not in paths:
        issues.append(f"{HOME_FILE} is missing")
        score -= MISSING_HOME_PENALTY

    empty = [f for f in files if f.size < MIN_NOTE_BYTES]
    if empty:
        issues.append(f"Empty files: {len(empty)}")
        score -= EMPTY_FILE_PENALTY * len(empty)

    projects = list(dict.fromkeys(f.path.split("/")[1] for f in files if f.path.startswith(PROJECTS_PREFIX)))
    for name in projects:
        if f"{PROJECTS_PREFIX}{name}/{name}.md" not in paths:
            issues.append(f"{PROJECTS_PREFIX}{name} has no index file")
            score -= MISSING_PROJECT_INDEX_PENALTY

    if len(files) > CROWDED_VAULT_THRESHOLD:
        issues.append(f"Note count: {len(files)} (consider tidying up)")

    folders = Counter(f.top_folder for f in files)
    return HealthReport(
        score=max(0, min(100, score)),
        issues=issues,
        stats=HealthStats(total=len(files), empty=len(empty), projects=len(projects)),
        folders=dict(folders),
    )


def activity_level(count: int) -> int:
    if count == 0:
        return 0
    if count <= 2:
        return 1
    if count <= 4:
        return 2
    if count <= 7:
        return 3
    return 4


def build_heatmap(commits: Sequence[CommitSummary], today: date, weeks: int = 12) -> List[ActivityDay]:
    """Commit counts per day for the last ``weeks`` weeks, oldest first."""
    counts = Counter(c.authored_at.date().isoformat() for c in commits if c.authored_at)
    days: List[ActivityDay] = []
    for offset in range(weeks * 7 - 1, -1, -1):
        key = (today - timedelta(days=offset)).isoformat()
        count = counts.get(key, 0)
        days.append(ActivityDay(date=key, count=count, level=activity_level(count)))
    return days


def todo_progress(todos: Sequence[TodoItem]) -> TodoProgress:
    done = sum(1 for t in todos if t.done)
    pending = len(todos) - done
    percent = round(done / len(todos) * 100) if todos else 0
    return TodoProgress(pending=pending, done=done, percent=percent)


class InsightsService:
    """Stats, project grouping, search, health and activity over the vault."""

    def __init__(self, store: RemoteFileStore, *, today: Optional[Callable[[], date]] = None) -> None:
        self.store = store
        self._today = today or _utc_today

    async def get_stats(self) -> VaultStats:
        return compute_stats(await self.store.list_md_files())

    async def get_projects(self) -> List[ProjectGroup]:
        return group_projects(await self.store.list_md_files())

    async def search(self, keyword: str) -> List[SearchHit]:
        """
        Two-phase keyword search.

        Filename matches come first and need no content fetch. Content is then
        scanned for at most SEARCH_SCAN_BUDGET files, skipping paths already
        hit, until SEARCH_RESULT_CAP results are collected.
        """
        kw = (keyword or "").strip().lower()
        if not kw:
            raise ValidationError("Search keyword must not be empty")

        files = await self.store.list_md_files()
        results: List[SearchHit] = [
            SearchHit(file=f.path, match="filename", preview=f.path) for f in files if kw in f.stem.lower()
        ][:SEARCH_RESULT_CAP]
        seen = {hit.file for hit in results}

        for f in files[:SEARCH_SCAN_BUDGET]:
            if len(results) >= SEARCH_RESULT_CAP:
                break
            if f.path in seen:
                continue
            try:
                text = await self.store.read_file(f.path)
            except NotFoundError:
                logger.info(f"Search skipped {f.path}: no longer present")
                continue
            line = next((ln for ln in text.split("\n") if kw in ln.lower()), None)
            if line is not None:
                results.append(SearchHit(file=f.path, match="content", preview=line.strip()[:PREVIEW_LENGTH]))
                seen.add(f.path)

        return results

    def today(self) -> date:
        return self._today()

    async def health_check(self) -> HealthReport:
        return assess_health(await self.store.list_md_files(), self.today())

    async def get_commits(self, n: int = 20) -> List[CommitSummary]:
        return await self.store.get_commits(n)

    async def activity_heatmap(self, weeks: int = 12) -> List[ActivityDay]:
        commits = await self.store.get_commits(100)
        return build_heatmap(commits, self.today(), weeks)


__all__ = [
    "InsightsService",
    "compute_stats",
    "group_projects",
    "assess_health",
    "build_heatmap",
    "activity_level",
    "todo_progress",
    "SEARCH_RESULT_CAP",
    "SEARCH_SCAN_BUDGET",
]
