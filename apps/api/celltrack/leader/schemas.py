"""Pydantic schemas for the Leader API."""

from __future__ import annotations

from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from celltrack.common.schemas import RequestModel


class LeaderRef(BaseModel):
    id: UUID
    name: str

    model_config = {"from_attributes": True}


class RosterMember(BaseModel):
    id: UUID
    name: str
    is_active: bool
    cell_group_id: UUID

    model_config = {"from_attributes": True}


class MyCellGroupResponse(BaseModel):
    id: UUID
    name: str
    leader: LeaderRef
    members: list[RosterMember]


class MemberCreateRequest(RequestModel):
    name: str = Field(..., min_length=1, max_length=200)


class MemberUpdateRequest(RequestModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    is_active: Optional[bool] = None


class ReportBody(BaseModel):
    id: UUID
    member_id: UUID
    week_start: date
    early_sermon: bool
    charis_sermon: bool
    cell_meeting: bool
    bible_chapters_read: int
    prayer_count: int
    notes: Optional[str]

    model_config = {"from_attributes": True}


class WeekFormMember(BaseModel):
    id: UUID
    name: str
    is_active: bool
    report: Optional[ReportBody] = None


class CellGroupRef(BaseModel):
    id: UUID
    name: str


class WeekFormResponse(BaseModel):
    cell_group: CellGroupRef
    week_start: date
    members: list[WeekFormMember]


class ReportEntry(RequestModel):
    """One member's report; omitted fields default to false / 0 / no notes."""

    member_id: UUID
    early_sermon: bool = False
    charis_sermon: bool = False
    cell_meeting: bool = False
    bible_chapters_read: int = Field(default=0, ge=0)
    prayer_count: int = Field(default=0, ge=0)
    notes: Optional[str] = None


class ReportBatchRequest(RequestModel):
    week_start: str = Field(..., min_length=1)
    reports: list[ReportEntry]


class HistoryMember(BaseModel):
    id: UUID
    name: str

    model_config = {"from_attributes": True}


class HistoryReport(ReportBody):
    member: HistoryMember
