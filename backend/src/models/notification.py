"""Notification log and pinned-note models."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class NotificationRecord(BaseModel):
    action: str
    detail: str = ""
    actor: Optional[str] = None
    timestamp: datetime


class Pin(BaseModel):
    text: str = Field(..., min_length=1, max_length=2000)
    date: datetime


class PinCreate(BaseModel):
    text: str = Field(..., min_length=1, max_length=2000)


__all__ = ["NotificationRecord", "Pin", "PinCreate"]
