"""Meeting note storage. One note per week; content is always stored sanitized."""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from celltrack.common.db import unit_of_work
from celltrack.common.models import MeetingNote
from celltrack.common.sanitize import sanitize_html
from celltrack.core.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


class MeetingNoteService:
    @staticmethod
    def list_notes(db: Session) -> list[MeetingNote]:
        return list(
            db.execute(
                select(MeetingNote).order_by(MeetingNote.week_date.desc())
            ).scalars().all()
        )

    @staticmethod
    def require_note(db: Session, note_id: UUID) -> MeetingNote:
        note = db.get(MeetingNote, note_id)
        if not note:
            raise NotFoundError("Meeting note", note_id)
        return note

    @staticmethod
    def _ensure_week_free(
        db: Session, week_date: date, exclude_id: Optional[UUID] = None
    ) -> None:
        stmt = select(MeetingNote.id).where(MeetingNote.week_date == week_date)
        if exclude_id:
            stmt = stmt.where(MeetingNote.id != exclude_id)
        if db.execute(stmt).first():
            raise ConflictError(
                "A meeting note already exists for this week",
                {"week_date": week_date.isoformat()},
            )

    @staticmethod
    def create_note(
        db: Session, week_date: date, title: str, content: str = ""
    ) -> MeetingNote:
        MeetingNoteService._ensure_week_free(db, week_date)

        with unit_of_work(db):
            note = MeetingNote(
                week_date=week_date,
                title=title,
                content=sanitize_html(content),
            )
            db.add(note)
            db.flush()

        db.refresh(note)
        logger.info(f"Created meeting note {note.id} for week {week_date}")
        return note

    @staticmethod
    def update_note(
        db: Session,
        note_id: UUID,
        week_date: Optional[date] = None,
        title: Optional[str] = None,
        content: Optional[str] = None,
    ) -> MeetingNote:
        """Partial update; only the given fields change."""
        note = MeetingNoteService.require_note(db, note_id)
        if week_date is not None and week_date != note.week_date:
            MeetingNoteService._ensure_week_free(db, week_date, exclude_id=note_id)

        with unit_of_work(db):
            if week_date is not None:
                note.week_date = week_date
            if title is not None:
                note.title = title
            if content is not None:
                note.content = sanitize_html(content)

        db.refresh(note)
        return note

    @staticmethod
    def delete_note(db: Session, note_id: UUID) -> None:
        note = MeetingNoteService.require_note(db, note_id)
        with unit_of_work(db):
            db.delete(note)
        logger.info(f"Deleted meeting note {note_id}")
