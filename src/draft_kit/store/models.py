# src/draft_kit/store/models.py

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ChapterEntry(BaseModel):
    id: str
    title: str
    order: int

    class Config:
        extra = "forbid"


class ProjectMetadata(BaseModel):
    """Contents of a project's `project.json`."""

    name: str
    created: datetime = Field(default_factory=utcnow)
    modified: datetime = Field(default_factory=utcnow)
    chapters: list[ChapterEntry] = Field(default_factory=list)
    settings: dict[str, Any] = Field(default_factory=dict)

    class Config:
        extra = "forbid"
