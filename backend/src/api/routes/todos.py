"""HTTP API routes for TODO operations."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from ...models.repo import WriteResult
from ...models.tasks import TodoCreate, TodoItem, TodoRef
from ...services.dependencies import get_todo_service
from ...services.todo_service import TodoService

router = APIRouter()


@router.get("/api/todos", response_model=list[TodoItem])
async def list_todos(
    status: str = Query("all", pattern="^(all|pending|done)$"),
    project: str | None = Query(None),
    service: TodoService = Depends(get_todo_service),
):
    """TODOs parsed from project files and Home.md."""
    todos = await service.get_todos()
    if status == "pending":
        todos = [t for t in todos if not t.done]
    elif status == "done":
        todos = [t for t in todos if t.done]
    if project:
        todos = [t for t in todos if t.project == project]
    return todos


@router.post("/api/todos", response_model=WriteResult, status_code=201)
async def add_todo(create: TodoCreate, service: TodoService = Depends(get_todo_service)):
    return await service.add_todo(create.task, create.project)


@router.post("/api/todos/toggle", response_model=WriteResult)
async def toggle_todo(ref: TodoRef, service: TodoService = Depends(get_todo_service)):
    """Flip a TODO; 404 when the line changed remotely, 409 on a stale revision."""
    return await service.toggle_todo(ref)


@router.post("/api/todos/delete", response_model=WriteResult)
async def delete_todo(ref: TodoRef, service: TodoService = Depends(get_todo_service)):
    return await service.delete_todo(ref)


__all__ = ["router"]
