"""Credential store: administrators and cell group leaders."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, TYPE_CHECKING
from uuid import uuid4, UUID

from sqlalchemy import String, TIMESTAMP, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from celltrack.common.models.base import Base, UserRole, ROLE_LEADER, utcnow

if TYPE_CHECKING:
    from celltrack.common.models.cells import CellGroup


class User(Base):
    """A login. ``cell_id`` is the human-chosen login identifier."""

    __tablename__ = "users"

    id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid4
    )
    cell_id: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    role: Mapped[str] = mapped_column(UserRole, nullable=False, default=ROLE_LEADER)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), default=utcnow, onupdate=utcnow
    )

    cell_group: Mapped[Optional["CellGroup"]] = relationship(
        back_populates="leader", uselist=False
    )
