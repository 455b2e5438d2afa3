"""Report store: one weekly record per (member, week)."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, TYPE_CHECKING
from uuid import uuid4, UUID

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    Integer,
    Text,
    TIMESTAMP,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from celltrack.common.models.base import Base, utcnow

if TYPE_CHECKING:
    from celltrack.common.models.cells import Member

ATTENDANCE_FLAGS = ("early_sermon", "charis_sermon", "cell_meeting")


class WeeklyReport(Base):
    """Attendance and spiritual activity of a member for one week.

    ``week_start`` always holds the week anchor (the Sunday ending the week).
    """

    __tablename__ = "weekly_reports"

    id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid4
    )
    member_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("members.id", ondelete="CASCADE"),
        nullable=False,
    )
    week_start: Mapped[date] = mapped_column(Date, nullable=False)
    early_sermon: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    charis_sermon: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    cell_meeting: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    bible_chapters_read: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    prayer_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), default=utcnow, onupdate=utcnow
    )

    member: Mapped["Member"] = relationship(back_populates="weekly_reports")

    @property
    def is_present(self) -> bool:
        """True when the member attended any of the week's gatherings."""
        return bool(self.early_sermon or self.charis_sermon or self.cell_meeting)

    __table_args__ = (
        UniqueConstraint("member_id", "week_start", name="uq_weekly_reports_member_week"),
        CheckConstraint("bible_chapters_read >= 0", name="bible_chapters_non_negative"),
        CheckConstraint("prayer_count >= 0", name="prayer_count_non_negative"),
        Index("ix_weekly_reports_week_start", "week_start"),
    )
