"""Pydantic schemas for the Admin API."""

from __future__ import annotations

from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from celltrack.common.schemas import RequestModel


# Cell group schemas
class CellGroupCreateRequest(RequestModel):
    """Create a cell group together with its leader login."""

    name: str = Field(..., min_length=1, max_length=200)
    leader_name: str = Field(..., min_length=1, max_length=200)
    cell_id: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)


class CellGroupUpdateRequest(RequestModel):
    name: str = Field(..., min_length=1, max_length=200)


class LeaderRef(BaseModel):
    id: UUID
    name: str
    cell_id: str

    model_config = {"from_attributes": True}


class CellGroupRef(BaseModel):
    id: UUID
    name: str

    model_config = {"from_attributes": True}


class MemberSummary(BaseModel):
    id: UUID
    name: str
    is_active: bool
    cell_group_id: UUID

    model_config = {"from_attributes": True}


class CellGroupResponse(BaseModel):
    id: UUID
    name: str
    leader_id: UUID
    leader: LeaderRef
    members: list[MemberSummary] = []
    member_count: int = 0


# Leader schemas
class LeaderUpdateRequest(RequestModel):
    """Each field is optional; blank values leave the field unchanged."""

    name: Optional[str] = Field(None, max_length=200)
    cell_id: Optional[str] = Field(None, max_length=100)
    password: Optional[str] = None


class LeaderResponse(BaseModel):
    id: UUID
    name: str
    cell_id: str
    role: str

    model_config = {"from_attributes": True}


# Member schemas
class MemberCreateRequest(RequestModel):
    name: str = Field(..., min_length=1, max_length=200)
    cell_group_id: UUID


class MemberUpdateRequest(RequestModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    is_active: Optional[bool] = None
    cell_group_id: Optional[UUID] = None


class MemberResponse(BaseModel):
    id: UUID
    name: str
    is_active: bool
    cell_group_id: UUID
    cell_group: CellGroupRef

    model_config = {"from_attributes": True}


# Report schemas
class ReportMember(BaseModel):
    id: UUID
    name: str
    is_active: bool
    cell_group: CellGroupRef

    model_config = {"from_attributes": True}


class WeeklyReportResponse(BaseModel):
    id: UUID
    member_id: UUID
    week_start: date
    early_sermon: bool
    charis_sermon: bool
    cell_meeting: bool
    bible_chapters_read: int
    prayer_count: int
    notes: Optional[str]
    member: ReportMember

    model_config = {"from_attributes": True}


class WeekSummaryResponse(BaseModel):
    week_start: date
    report_count: int
    total_bible_chapters: int
    total_prayers: int
    early_sermon_count: int
    charis_sermon_count: int
    cell_meeting_count: int


# Attendance schemas
class AttendanceFlags(BaseModel):
    early_sermon: bool = False
    charis_sermon: bool = False
    cell_meeting: bool = False


class AttendanceMember(BaseModel):
    id: UUID
    name: str
    attendance: AttendanceFlags


class AttendanceGroup(BaseModel):
    id: UUID
    name: str
    leader: LeaderRef
    members: list[AttendanceMember]


class WeekAttendanceResponse(BaseModel):
    week_start: date
    cell_groups: list[AttendanceGroup]


class AttendanceEntry(RequestModel):
    member_id: UUID
    early_sermon: bool = False
    charis_sermon: bool = False
    cell_meeting: bool = False


class AttendanceBatchRequest(RequestModel):
    week_start: str = Field(..., min_length=1)
    attendance: list[AttendanceEntry]
