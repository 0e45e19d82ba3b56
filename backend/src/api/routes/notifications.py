"""HTTP API routes for the notification center and pinned notes."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from ...models.notification import NotificationRecord, Pin, PinCreate
from ...services.dependencies import get_local_state, get_notifier
from ...services.local_state import LocalStateStore
from ...services.notifier import NotificationService

router = APIRouter()


@router.get("/api/notifications", response_model=list[NotificationRecord])
async def list_notifications(notifier: NotificationService = Depends(get_notifier)):
    return notifier.recent()


@router.get("/api/pins", response_model=list[Pin])
async def list_pins(state: LocalStateStore = Depends(get_local_state)):
    return state.get_pins()


@router.post("/api/pins", response_model=list[Pin], status_code=201)
async def add_pin(create: PinCreate, state: LocalStateStore = Depends(get_local_state)):
    pin = Pin(text=create.text.strip(), date=datetime.now(timezone.utc))
    return state.add_pin(pin.model_dump(mode="json"))


@router.delete("/api/pins/{index}", response_model=list[Pin])
async def remove_pin(index: int, state: LocalStateStore = Depends(get_local_state)):
    try:
        return state.remove_pin(index)
    except IndexError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


__all__ = ["router"]
