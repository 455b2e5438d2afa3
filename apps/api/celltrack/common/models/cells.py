"""Org model: cell groups and their members."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import uuid4, UUID

from sqlalchemy import (
    String,
    Boolean,
    ForeignKey,
    Index,
    TIMESTAMP,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from celltrack.common.models.base import Base, utcnow

if TYPE_CHECKING:
    from celltrack.common.models.reports import WeeklyReport
    from celltrack.common.models.users import User


class CellGroup(Base):
    """A cell group. Exactly one leader per group, one group per leader."""

    __tablename__ = "cell_groups"

    id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid4
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    leader_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        unique=True,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), default=utcnow, onupdate=utcnow
    )

    leader: Mapped["User"] = relationship(back_populates="cell_group")
    members: Mapped[list["Member"]] = relationship(
        back_populates="cell_group",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Member.name",
    )


class Member(Base):
    """A cell group member. ``is_active=False`` is the logical delete."""

    __tablename__ = "members"

    id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid4
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    cell_group_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("cell_groups.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), default=utcnow, onupdate=utcnow
    )

    cell_group: Mapped["CellGroup"] = relationship(back_populates="members")
    weekly_reports: Mapped[list["WeeklyReport"]] = relationship(
        back_populates="member",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("ix_members_group_active", "cell_group_id", "is_active"),
    )
