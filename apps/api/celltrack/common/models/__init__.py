"""Models package - re-exports every model so callers can write:

    from celltrack.common.models import User, CellGroup, Base

Models are organized into:
- base: Base class, metadata, and enums
- users: credential store
- cells: cell groups and members
- reports: weekly reports
- content: meeting notes and week events
"""

from __future__ import annotations

from celltrack.common.models.base import (
    Base,
    metadata,
    NAMING_CONVENTION,
    UserRole,
    ROLE_ADMIN,
    ROLE_LEADER,
)
from celltrack.common.models.users import User
from celltrack.common.models.cells import CellGroup, Member
from celltrack.common.models.reports import WeeklyReport, ATTENDANCE_FLAGS
from celltrack.common.models.content import MeetingNote, WeekEvent

__all__ = [
    "Base",
    "metadata",
    "NAMING_CONVENTION",
    "UserRole",
    "ROLE_ADMIN",
    "ROLE_LEADER",
    "ATTENDANCE_FLAGS",
    "User",
    "CellGroup",
    "Member",
    "WeeklyReport",
    "MeetingNote",
    "WeekEvent",
]
