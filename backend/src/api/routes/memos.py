"""HTTP API routes for memos and quick notes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ...models.repo import WriteResult
from ...models.tasks import MemoCreate, MemoEntry, MemoRef, QuickNoteCreate
from ...services.dependencies import get_memo_service
from ...services.memo_service import MemoService

router = APIRouter()


@router.get("/api/memos", response_model=list[MemoEntry])
async def list_memos(service: MemoService = Depends(get_memo_service)):
    return await service.list_memos()


@router.post("/api/memos", response_model=WriteResult, status_code=201)
async def add_memo(create: MemoCreate, service: MemoService = Depends(get_memo_service)):
    return await service.add_memo(create.text)


@router.post("/api/memos/delete", response_model=WriteResult)
async def delete_memo(ref: MemoRef, service: MemoService = Depends(get_memo_service)):
    return await service.delete_memo(ref.raw_line)


@router.post("/api/quick-note", response_model=WriteResult, status_code=201)
async def add_quick_note(create: QuickNoteCreate, service: MemoService = Depends(get_memo_service)):
    """Append a timestamped line to today's daily note."""
    return await service.add_quick_note(create.text)


__all__ = ["router"]
