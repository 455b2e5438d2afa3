"""Content store: meeting notes and week event labels."""

from __future__ import annotations

from datetime import date, datetime
from uuid import uuid4, UUID

from sqlalchemy import Date, String, Text, TIMESTAMP, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from celltrack.common.models.base import Base, utcnow


class MeetingNote(Base):
    """Rich-text notes for the meeting of one week."""

    __tablename__ = "meeting_notes"

    id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid4
    )
    week_date: Mapped[date] = mapped_column(Date, unique=True, nullable=False)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), default=utcnow, onupdate=utcnow
    )


class WeekEvent(Base):
    """Short label for a special event happening in a week."""

    __tablename__ = "week_events"

    id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid4
    )
    week_date: Mapped[date] = mapped_column(Date, unique=True, nullable=False)
    event: Mapped[str] = mapped_column(String(200), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), default=utcnow, onupdate=utcnow
    )
