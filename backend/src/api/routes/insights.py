"""HTTP API routes for dashboard statistics, search and health."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from ...models.insights import ActivityDay, HealthReport, ProjectGroup, SearchHit, VaultStats
from ...models.repo import CommitSummary
from ...models.tasks import TodoProgress
from ...services.dependencies import get_insights_service, get_todo_service
from ...services.insights import InsightsService, todo_progress
from ...services.todo_service import TodoService

router = APIRouter()


class DashboardSummary(BaseModel):
    stats: VaultStats
    todos: TodoProgress


@router.get("/api/stats", response_model=VaultStats)
async def get_stats(service: InsightsService = Depends(get_insights_service)):
    return await service.get_stats()


@router.get("/api/dashboard", response_model=DashboardSummary)
async def get_dashboard(
    insights: InsightsService = Depends(get_insights_service),
    todos: TodoService = Depends(get_todo_service),
):
    """Stats plus TODO completion for the dashboard header."""
    return DashboardSummary(stats=await insights.get_stats(), todos=todo_progress(await todos.get_todos()))


@router.get("/api/projects", response_model=list[ProjectGroup])
async def get_projects(service: InsightsService = Depends(get_insights_service)):
    return await service.get_projects()


@router.get("/api/search", response_model=list[SearchHit])
async def search(
    q: str = Query(..., min_length=1, max_length=256),
    service: InsightsService = Depends(get_insights_service),
):
    """Filename matches first, then content matches."""
    return await service.search(q)


@router.get("/api/health", response_model=HealthReport)
async def health_check(service: InsightsService = Depends(get_insights_service)):
    return await service.health_check()


@router.get("/api/commits", response_model=list[CommitSummary])
async def get_commits(
    n: int = Query(20, ge=1, le=100),
    service: InsightsService = Depends(get_insights_service),
):
    return await service.get_commits(n)


@router.get("/api/activity", response_model=list[ActivityDay])
async def get_activity(
    weeks: int = Query(12, ge=1, le=52),
    service: InsightsService = Depends(get_insights_service),
):
    """Commit heatmap for the contribution graph."""
    return await service.activity_heatmap(weeks)


__all__ = ["router", "DashboardSummary"]
