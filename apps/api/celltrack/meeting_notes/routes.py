"""Meeting note routes. Everyone signed in can read; only admins write."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from celltrack.auth.dependencies import get_current_user, require_admin
from celltrack.common.db import get_db
from celltrack.common.schemas import MessageResponse
from celltrack.common.weeks import parse_optional_week, parse_week
from celltrack.meeting_notes import schemas
from celltrack.meeting_notes.service import MeetingNoteService

router = APIRouter(prefix="/meeting-notes", tags=["meeting-notes"])


@router.get(
    "",
    response_model=list[schemas.MeetingNoteResponse],
    dependencies=[Depends(get_current_user)],
)
async def list_meeting_notes(db: Session = Depends(get_db)):
    return [
        schemas.MeetingNoteResponse.model_validate(n)
        for n in MeetingNoteService.list_notes(db)
    ]


@router.get(
    "/{note_id}",
    response_model=schemas.MeetingNoteResponse,
    dependencies=[Depends(get_current_user)],
)
async def get_meeting_note(note_id: UUID, db: Session = Depends(get_db)):
    note = MeetingNoteService.require_note(db, note_id)
    return schemas.MeetingNoteResponse.model_validate(note)


@router.post(
    "",
    response_model=schemas.MeetingNoteResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_meeting_note(
    request: schemas.MeetingNoteCreateRequest,
    db: Session = Depends(get_db),
):
    note = MeetingNoteService.create_note(
        db,
        week_date=parse_week(request.week_date, "week_date"),
        title=request.title,
        content=request.content,
    )
    return schemas.MeetingNoteResponse.model_validate(note)


@router.put(
    "/{note_id}",
    response_model=schemas.MeetingNoteResponse,
    dependencies=[Depends(require_admin)],
)
async def update_meeting_note(
    note_id: UUID,
    request: schemas.MeetingNoteUpdateRequest,
    db: Session = Depends(get_db),
):
    note = MeetingNoteService.update_note(
        db,
        note_id,
        week_date=parse_optional_week(request.week_date, "week_date"),
        title=request.title,
        content=request.content,
    )
    return schemas.MeetingNoteResponse.model_validate(note)


@router.delete(
    "/{note_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
async def delete_meeting_note(note_id: UUID, db: Session = Depends(get_db)):
    MeetingNoteService.delete_note(db, note_id)
    return MessageResponse(message="Meeting note deleted successfully")
