"""Content page schemas."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PageCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    id: str | None = Field(default=None, max_length=120)
    content: str | None = None


class PageUpdate(BaseModel):
    """Content replacement and/or a move to a new id."""

    content: str | None = None
    id: str | None = Field(default=None, min_length=1, max_length=120)


class PageRename(BaseModel):
    title: str = Field(min_length=1, max_length=255)


class PageSummary(BaseModel):
    id: str
    title: str

    model_config = ConfigDict(from_attributes=True)


class PageRead(PageSummary):
    content: str
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PageHtml(BaseModel):
    id: str
    title: str
    html: str
