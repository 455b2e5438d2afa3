from __future__ import annotations

from typing import Union

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from celltrack.auth.dependencies import get_current_user, require_admin
from celltrack.common.db import get_db
from celltrack.common.schemas import MessageResponse
from celltrack.common.weeks import parse_week
from celltrack.week_events import schemas
from celltrack.week_events.service import WeekEventService

router = APIRouter(prefix="/week-events", tags=["week-events"])


@router.get(
    "",
    response_model=list[schemas.WeekEventResponse],
    dependencies=[Depends(get_current_user)],
)
async def list_week_events(db: Session = Depends(get_db)):
    return [
        schemas.WeekEventResponse.model_validate(e)
        for e in WeekEventService.list_events(db)
    ]


@router.post(
    "",
    response_model=Union[schemas.WeekEventResponse, MessageResponse],
    dependencies=[Depends(require_admin)],
)
async def set_week_event(
    request: schemas.WeekEventRequest,
    db: Session = Depends(get_db),
):
    """Set or clear the event label of a week."""
    stored = WeekEventService.set_event(
        db, parse_week(request.week_date, "week_date"), request.event
    )
    if stored is None:
        return MessageResponse(message="Week event cleared")
    return schemas.WeekEventResponse.model_validate(stored)
