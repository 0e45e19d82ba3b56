from datetime import date, datetime

import pytest

from backend.src.models.repo import CommitSummary, RemoteFile
from backend.src.models.tasks import TodoItem
from backend.src.services import insights as insights_module
from backend.src.services.errors import ValidationError
from backend.src.services.insights import (
    SEARCH_RESULT_CAP,
    InsightsService,
    activity_level,
    assess_health,
    build_heatmap,
    compute_stats,
    group_projects,
    todo_progress,
)

TODAY = date(2026, 10, 18)


@pytest.fixture
def service(store) -> InsightsService:
    return InsightsService(store, today=lambda: TODAY)


def _file(path: str, size: int = 100) -> RemoteFile:
    return RemoteFile(path=path, size=size)


def _commit(day: str) -> CommitSummary:
    return CommitSummary(
        sha=day,
        message="vault backup",
        authored_at=datetime.fromisoformat(f"{day}T12:00:00+00:00"),
    )


def _todo(done: bool) -> TodoItem:
    return TodoItem(task="t", project="Home", done=done, source_file="Home.md", line="- [ ] t", key="k")


def test_compute_stats_counts_by_folder() -> None:
    files = [
        _file("Projects/A/A.md", 10),
        _file("Projects/B/B.md", 20),
        _file("Daily/2026-10-18.md", 30),
        _file("Knowledge/Python.md", 40),
        _file("Weekly/2026-W42.md", 50),
        _file("Home.md", 60),
    ]

    stats = compute_stats(files)

    assert (stats.total, stats.projects, stats.dailies, stats.knowledge, stats.weekly) == (6, 2, 1, 1, 1)
    assert stats.total_size == 210


def test_group_projects_orders_by_file_count() -> None:
    files = [
        _file("Projects/Small/Small.md", 5),
        _file("Projects/Big/Big.md", 5),
        _file("Projects/Big/notes.md", 7),
        _file("Home.md"),
    ]

    groups = group_projects(files)

    assert [g.name for g in groups] == ["Big", "Small"]
    assert groups[0].files == ["Projects/Big/Big.md", "Projects/Big/notes.md"]
    assert groups[0].total_size == 12


def test_health_missing_daily_and_home() -> None:
    files = [_file("Projects/Alpha/Alpha.md"), _file("Knowledge/Python.md")]

    report = assess_health(files, TODAY)

    assert report.score == 85
    assert report.issues == ["No daily note for today", "Home.md is missing"]


def test_health_penalizes_empty_files_and_missing_index() -> None:
    files = [
        _file("Home.md"),
        _file("Daily/2026-10-18.md"),
        _file("Projects/Alpha/notes.md"),
        _file("Knowledge/stub.md", 3),
    ]

    report = assess_health(files, TODAY)

    assert report.score == 100 - 1 - 3
    assert report.issues == ["Empty files: 1", "Projects/Alpha has no index file"]
    assert report.stats.empty == 1
    assert report.folders == {"Home.md": 1, "Daily": 1, "Projects": 1, "Knowledge": 1}


def test_health_score_is_clamped_at_zero() -> None:
    files = [_file(f"Knowledge/empty{i}.md", 0) for i in range(120)]

    assert assess_health(files, TODAY).score == 0


def test_health_flags_crowded_vault_without_penalty() -> None:
    files = [_file("Home.md"), _file("Daily/2026-10-18.md")]
    files += [_file(f"Knowledge/n{i}.md") for i in range(150)]

    report = assess_health(files, TODAY)

    assert report.score == 100
    assert report.issues == ["Note count: 152 (consider tidying up)"]


@pytest.mark.parametrize(
    "count,level",
    [(0, 0), (1, 1), (2, 1), (3, 2), (4, 2), (5, 3), (7, 3), (8, 4), (40, 4)],
)
def test_activity_level_thresholds(count: int, level: int) -> None:
    assert activity_level(count) == level


def test_build_heatmap_covers_trailing_weeks() -> None:
    commits = [_commit("2026-10-18")] * 3 + [_commit("2026-10-16"), _commit("2026-09-01")]

    days = build_heatmap(commits, TODAY, weeks=1)

    assert [d.date for d in days] == [f"2026-10-{n}" for n in range(12, 19)]
    assert [d.count for d in days] == [0, 0, 0, 0, 1, 0, 3]
    assert days[-1].level == 2


def test_todo_progress() -> None:
    assert todo_progress([_todo(True), _todo(False), _todo(False)]).model_dump() == {
        "pending": 2,
        "done": 1,
        "percent": 33,
    }
    assert todo_progress([]).percent == 0


@pytest.mark.asyncio
async def test_search_puts_filename_matches_first(service, fake_github) -> None:
    fake_github.set_file("Daily/2026-10-17.md", "# 2026-10-17\n\nLearned Python decorators\n")
    fake_github.set_file("Knowledge/python-tips.md", "# Tips\n")
    fake_github.set_file("Projects/Alpha/Alpha.md", "# Alpha\n")

    hits = await service.search("python")

    assert [(h.file, h.match) for h in hits] == [
        ("Knowledge/python-tips.md", "filename"),
        ("Daily/2026-10-17.md", "content"),
    ]
    assert hits[1].preview == "Learned Python decorators"
    assert len(hits) <= SEARCH_RESULT_CAP


@pytest.mark.asyncio
async def test_search_caps_results_without_reading_content(service, fake_github) -> None:
    for i in range(SEARCH_RESULT_CAP + 10):
        fake_github.set_file(f"Knowledge/match-{i:02d}.md", "body")

    hits = await service.search("MATCH")

    assert len(hits) == SEARCH_RESULT_CAP
    assert fake_github.requests_for("GET", "contents/") == []


@pytest.mark.asyncio
async def test_search_rejects_empty_keyword(service) -> None:
    with pytest.raises(ValidationError):
        await service.search("  ")


@pytest.mark.asyncio
async def test_health_check_uses_tree_listing(service, fake_github) -> None:
    fake_github.set_file("Projects/Alpha/Alpha.md", "# Alpha\n\nnotes here\n")
    fake_github.set_file("Knowledge/Python.md", "# Python\n\nnotes here\n")

    report = await service.health_check()

    assert report.score == 85
    assert len(report.issues) == 2


@pytest.mark.asyncio
async def test_activity_heatmap_reads_commit_history(service, fake_github) -> None:
    fake_github.commits = [
        {"sha": "a", "commit": {"message": "m", "author": {"name": "x", "date": "2026-10-18T08:00:00Z"}}},
        {"sha": "b", "commit": {"message": "m", "author": {"name": "x", "date": "2026-10-17T08:00:00Z"}}},
    ]

    days = await service.activity_heatmap(weeks=12)

    assert len(days) == 84
    assert days[-1].count == 1
    assert days[-2].count == 1
    assert fake_github.requests_for("GET", "commits")[0].url.params["per_page"] == "100"


@pytest.mark.asyncio
async def test_search_respects_cap_on_three_file_fixture(service, fake_github, monkeypatch) -> None:
    fake_github.set_file("Daily/2026-10-17.md", "reviewed the proj backlog\n")
    fake_github.set_file("Home.md", "# Home\nproj links below\n")
    fake_github.set_file("Knowledge/project-ideas.md", "# Ideas\n")
    monkeypatch.setattr(insights_module, "SEARCH_RESULT_CAP", 2)

    hits = await service.search("proj")

    assert [(h.file, h.match) for h in hits] == [
        ("Knowledge/project-ideas.md", "filename"),
        ("Daily/2026-10-17.md", "content"),
    ]
