"""Leader API routes."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from celltrack.auth.dependencies import CurrentUser, require_leader
from celltrack.common.db import get_db
from celltrack.common.schemas import BatchResultResponse
from celltrack.common.weeks import parse_week
from celltrack.leader import schemas
from celltrack.leader.service import LeaderCellService

router = APIRouter(prefix="/leader", tags=["leader"])


@router.get("/my-cell-group", response_model=schemas.MyCellGroupResponse)
async def my_cell_group(
    user: CurrentUser = Depends(require_leader),
    db: Session = Depends(get_db),
):
    """The caller's group with its active roster."""
    cell_group = LeaderCellService.get_own_cell_group(db, user.id)
    members = LeaderCellService.active_members(db, cell_group.id)
    return schemas.MyCellGroupResponse(
        id=cell_group.id,
        name=cell_group.name,
        leader=schemas.LeaderRef.model_validate(cell_group.leader),
        members=[schemas.RosterMember.model_validate(m) for m in members],
    )


@router.post(
    "/members",
    response_model=schemas.RosterMember,
    status_code=status.HTTP_201_CREATED,
)
async def add_member(
    request: schemas.MemberCreateRequest,
    user: CurrentUser = Depends(require_leader),
    db: Session = Depends(get_db),
):
    member = LeaderCellService.add_member(db, user.id, request.name)
    return schemas.RosterMember.model_validate(member)


@router.put("/members/{member_id}", response_model=schemas.RosterMember)
async def update_member(
    member_id: UUID,
    request: schemas.MemberUpdateRequest,
    user: CurrentUser = Depends(require_leader),
    db: Session = Depends(get_db),
):
    member = LeaderCellService.update_member(
        db, user.id, member_id, **request.model_dump(exclude_unset=True)
    )
    return schemas.RosterMember.model_validate(member)


@router.get("/reports/week/{week_start}", response_model=schemas.WeekFormResponse)
async def week_form(
    week_start: str,
    user: CurrentUser = Depends(require_leader),
    db: Session = Depends(get_db),
):
    data = LeaderCellService.week_form(db, user.id, parse_week(week_start))
    return schemas.WeekFormResponse(
        cell_group=schemas.CellGroupRef(**data["cell_group"]),
        week_start=data["week_start"],
        members=[
            schemas.WeekFormMember(
                id=m["id"],
                name=m["name"],
                is_active=m["is_active"],
                report=(
                    schemas.ReportBody.model_validate(m["report"])
                    if m["report"] is not None
                    else None
                ),
            )
            for m in data["members"]
        ],
    )


@router.post("/reports/batch", response_model=BatchResultResponse)
async def submit_reports(
    request: schemas.ReportBatchRequest,
    user: CurrentUser = Depends(require_leader),
    db: Session = Depends(get_db),
):
    count = LeaderCellService.submit_reports(
        db,
        user.id,
        parse_week(request.week_start),
        [entry.model_dump() for entry in request.reports],
    )
    return BatchResultResponse(message="Reports saved successfully", count=count)


@router.get(
    "/reports/history",
    response_model=dict[str, list[schemas.HistoryReport]],
)
async def report_history(
    user: CurrentUser = Depends(require_leader),
    db: Session = Depends(get_db),
):
    """Past reports of the caller's group, grouped by week."""
    grouped = LeaderCellService.history(db, user.id)
    return {
        week: [schemas.HistoryReport.model_validate(r) for r in reports]
        for week, reports in grouped.items()
    }
