"""Derived, read-only views over the vault tree."""

from __future__ import annotations

from typing import Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field


class VaultStats(BaseModel):
    """File counts by category plus total size."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "total": 142,
                "projects": 40,
                "dailies": 61,
                "knowledge": 22,
                "weekly": 8,
                "total_size": 512000,
            }
        }
    )

    total: int = Field(..., ge=0)
    projects: int = Field(..., ge=0)
    dailies: int = Field(..., ge=0)
    knowledge: int = Field(..., ge=0)
    weekly: int = Field(..., ge=0)
    total_size: int = Field(..., ge=0, description="Sum of blob sizes in bytes")


class ProjectGroup(BaseModel):
    name: str
    files: List[str] = Field(default_factory=list)
    total_size: int = Field(0, ge=0)


class SearchHit(BaseModel):
    file: str
    match: Literal["filename", "content"]
    preview: str


class HealthStats(BaseModel):
    total: int
    empty: int
    projects: int


class HealthReport(BaseModel):
    score: int = Field(..., ge=0, le=100)
    issues: List[str] = Field(default_factory=list)
    stats: HealthStats
    folders: Dict[str, int] = Field(default_factory=dict)


class ActivityDay(BaseModel):
    date: str
    count: int = Field(..., ge=0)
    level: int = Field(..., ge=0, le=4)


__all__ = ["VaultStats", "ProjectGroup", "SearchHit", "HealthStats", "HealthReport", "ActivityDay"]
