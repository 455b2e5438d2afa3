"""Admin API routes."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from celltrack.admin import schemas
from celltrack.admin.service import (
    AttendanceService,
    CellGroupService,
    LeaderService,
    MemberService,
    ReportQueryService,
)
from celltrack.auth.dependencies import require_admin
from celltrack.common.db import get_db
from celltrack.common.models import CellGroup
from celltrack.common.schemas import BatchResultResponse, MessageResponse
from celltrack.common.weeks import parse_optional_week, parse_week

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


def _cell_group_response(
    cell_group: CellGroup, include_members: bool = True
) -> schemas.CellGroupResponse:
    members = (
        [m for m in cell_group.members if m.is_active] if include_members else []
    )
    return schemas.CellGroupResponse(
        id=cell_group.id,
        name=cell_group.name,
        leader_id=cell_group.leader_id,
        leader=schemas.LeaderRef.model_validate(cell_group.leader),
        members=[schemas.MemberSummary.model_validate(m) for m in members],
        member_count=len(members),
    )


# Cell group routes
@router.get("/cell-groups", response_model=list[schemas.CellGroupResponse])
async def list_cell_groups(db: Session = Depends(get_db)):
    """All cell groups with their leader and active members."""
    return [_cell_group_response(g) for g in CellGroupService.list_cell_groups(db)]


@router.post(
    "/cell-groups",
    response_model=schemas.CellGroupResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_cell_group(
    request: schemas.CellGroupCreateRequest,
    db: Session = Depends(get_db),
):
    """Create a cell group together with its leader login."""
    cell_group = CellGroupService.create_cell_group(
        db=db,
        name=request.name,
        leader_name=request.leader_name,
        cell_id=request.cell_id,
        password=request.password,
    )
    return _cell_group_response(cell_group)


@router.put("/cell-groups/{cell_group_id}", response_model=schemas.CellGroupResponse)
async def update_cell_group(
    cell_group_id: UUID,
    request: schemas.CellGroupUpdateRequest,
    db: Session = Depends(get_db),
):
    cell_group = CellGroupService.update_cell_group(db, cell_group_id, request.name)
    return _cell_group_response(cell_group)


@router.delete("/cell-groups/{cell_group_id}", response_model=MessageResponse)
async def delete_cell_group(cell_group_id: UUID, db: Session = Depends(get_db)):
    """Delete a cell group and its leader login."""
    CellGroupService.delete_cell_group(db, cell_group_id)
    return MessageResponse(message="Cell group deleted successfully")


# Leader routes
@router.put("/leaders/{leader_id}", response_model=schemas.LeaderResponse)
async def update_leader(
    leader_id: UUID,
    request: schemas.LeaderUpdateRequest,
    db: Session = Depends(get_db),
):
    """Change a leader's name, login identifier or password."""
    leader = LeaderService.update_leader(
        db,
        leader_id,
        name=request.name,
        cell_id=request.cell_id,
        password=request.password,
    )
    return schemas.LeaderResponse.model_validate(leader)


# Member routes
@router.get("/members", response_model=list[schemas.MemberResponse])
async def list_members(
    cell_group_id: Optional[UUID] = Query(None),
    db: Session = Depends(get_db),
):
    members = MemberService.list_members(db, cell_group_id=cell_group_id)
    return [schemas.MemberResponse.model_validate(m) for m in members]


@router.post(
    "/members",
    response_model=schemas.MemberResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_member(
    request: schemas.MemberCreateRequest,
    db: Session = Depends(get_db),
):
    member = MemberService.create_member(db, request.name, request.cell_group_id)
    return schemas.MemberResponse.model_validate(member)


@router.put("/members/{member_id}", response_model=schemas.MemberResponse)
async def update_member(
    member_id: UUID,
    request: schemas.MemberUpdateRequest,
    db: Session = Depends(get_db),
):
    """Rename, (de)activate or move a member to another group."""
    member = MemberService.update_member(
        db, member_id, **request.model_dump(exclude_unset=True)
    )
    return schemas.MemberResponse.model_validate(member)


@router.delete("/members/{member_id}", response_model=MessageResponse)
async def delete_member(member_id: UUID, db: Session = Depends(get_db)):
    MemberService.delete_member(db, member_id)
    return MessageResponse(message="Member deleted successfully")


# Report routes
@router.get("/reports", response_model=list[schemas.WeeklyReportResponse])
async def list_reports(
    cell_group_id: Optional[UUID] = Query(None),
    week_start: Optional[str] = Query(None),
    member_id: Optional[UUID] = Query(None),
    db: Session = Depends(get_db),
):
    reports = ReportQueryService.list_reports(
        db,
        cell_group_id=cell_group_id,
        week_start=parse_optional_week(week_start, "week_start"),
        member_id=member_id,
    )
    return [schemas.WeeklyReportResponse.model_validate(r) for r in reports]


@router.get("/reports/summary", response_model=list[schemas.WeekSummaryResponse])
async def reports_summary(db: Session = Depends(get_db)):
    """Per-week totals for the last 12 report weeks."""
    return [
        schemas.WeekSummaryResponse(**row)
        for row in ReportQueryService.weekly_summary(db)
    ]


# Attendance routes
@router.get(
    "/attendance/week/{week_start}",
    response_model=schemas.WeekAttendanceResponse,
)
async def week_attendance(week_start: str, db: Session = Depends(get_db)):
    """Every active member of every group with their flags for one week."""
    data = AttendanceService.week_attendance(db, parse_week(week_start))
    return schemas.WeekAttendanceResponse(
        week_start=data["week_start"],
        cell_groups=[
            schemas.AttendanceGroup(
                id=group["id"],
                name=group["name"],
                leader=schemas.LeaderRef.model_validate(group["leader"]),
                members=[schemas.AttendanceMember(**m) for m in group["members"]],
            )
            for group in data["cell_groups"]
        ],
    )


@router.post("/attendance/batch", response_model=BatchResultResponse)
async def save_attendance(
    request: schemas.AttendanceBatchRequest,
    db: Session = Depends(get_db),
):
    count = AttendanceService.save_attendance(
        db,
        parse_week(request.week_start),
        [entry.model_dump() for entry in request.attendance],
    )
    return BatchResultResponse(message="Attendance saved successfully", count=count)
