"""Pydantic schemas for meeting notes."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from celltrack.common.schemas import RequestModel


class MeetingNoteCreateRequest(RequestModel):
    week_date: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=300)
    content: str = ""


class MeetingNoteUpdateRequest(RequestModel):
    week_date: Optional[str] = None
    title: Optional[str] = Field(None, min_length=1, max_length=300)
    content: Optional[str] = None


class MeetingNoteResponse(BaseModel):
    id: UUID
    week_date: date
    title: str
    content: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
