"""Admin service layer: cell groups, leaders, members, reports, attendance."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Iterable, Optional
from uuid import UUID

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session, joinedload, selectinload, with_loader_criteria

from celltrack.auth.utils import hash_password
from celltrack.common.db import unit_of_work
from celltrack.common.models import (
    CellGroup,
    Member,
    User,
    WeeklyReport,
    ATTENDANCE_FLAGS,
    ROLE_LEADER,
)
from celltrack.core.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

SUMMARY_WEEKS = 12


def _ensure_cell_id_available(
    db: Session, cell_id: str, exclude_user_id: Optional[UUID] = None
) -> None:
    stmt = select(User.id).where(User.cell_id == cell_id)
    if exclude_user_id:
        stmt = stmt.where(User.id != exclude_user_id)
    if db.execute(stmt).first():
        raise ConflictError("Cell ID already exists", {"cell_id": cell_id})


def _count_flag(column) -> Any:
    return func.coalesce(func.sum(case((column.is_(True), 1), else_=0)), 0)


class CellGroupService:
    """Service for managing cell groups and their leader logins."""

    @staticmethod
    def get_cell_group(db: Session, cell_group_id: UUID) -> Optional[CellGroup]:
        return db.execute(
            select(CellGroup)
            .options(joinedload(CellGroup.leader))
            .where(CellGroup.id == cell_group_id)
        ).scalar_one_or_none()

    @staticmethod
    def require_cell_group(db: Session, cell_group_id: UUID) -> CellGroup:
        cell_group = CellGroupService.get_cell_group(db, cell_group_id)
        if not cell_group:
            raise NotFoundError("Cell group", cell_group_id)
        return cell_group

    @staticmethod
    def list_cell_groups(db: Session) -> list[CellGroup]:
        """All groups by name, with leader and active members loaded."""
        stmt = (
            select(CellGroup)
            .options(
                joinedload(CellGroup.leader),
                selectinload(CellGroup.members),
                with_loader_criteria(Member, Member.is_active.is_(True)),
            )
            .order_by(CellGroup.name)
            .execution_options(populate_existing=True)
        )
        return list(db.execute(stmt).unique().scalars().all())

    @staticmethod
    def create_cell_group(
        db: Session,
        name: str,
        leader_name: str,
        cell_id: str,
        password: str,
    ) -> CellGroup:
        """Create the leader login and its cell group as one unit of work."""
        _ensure_cell_id_available(db, cell_id)

        with unit_of_work(db):
            leader = User(
                cell_id=cell_id,
                password_hash=hash_password(password),
                name=leader_name,
                role=ROLE_LEADER,
            )
            db.add(leader)
            db.flush()

            cell_group = CellGroup(name=name, leader_id=leader.id)
            db.add(cell_group)
            db.flush()

        db.refresh(cell_group)
        logger.info(f"Created cell group {cell_group.id} with leader {leader.id}")
        return cell_group

    @staticmethod
    def update_cell_group(db: Session, cell_group_id: UUID, name: str) -> CellGroup:
        cell_group = CellGroupService.require_cell_group(db, cell_group_id)

        with unit_of_work(db):
            cell_group.name = name

        db.refresh(cell_group)
        return cell_group

    @staticmethod
    def delete_cell_group(db: Session, cell_group_id: UUID) -> None:
        """Remove the group and its leader login; both or neither."""
        cell_group = CellGroupService.require_cell_group(db, cell_group_id)
        leader = cell_group.leader

        with unit_of_work(db):
            db.delete(cell_group)
            db.flush()
            db.delete(leader)

        logger.info(f"Deleted cell group {cell_group_id} and leader {leader.id}")


class LeaderService:
    """Service for editing leader credentials."""

    @staticmethod
    def update_leader(
        db: Session,
        leader_id: UUID,
        name: Optional[str] = None,
        cell_id: Optional[str] = None,
        password: Optional[str] = None,
    ) -> User:
        leader = db.get(User, leader_id)
        if not leader or leader.role != ROLE_LEADER:
            raise NotFoundError("Leader", leader_id)

        if cell_id:
            _ensure_cell_id_available(db, cell_id, exclude_user_id=leader_id)

        with unit_of_work(db):
            if name:
                leader.name = name
            if cell_id:
                leader.cell_id = cell_id
            if password:
                leader.password_hash = hash_password(password)

        db.refresh(leader)
        return leader


class MemberService:
    """Service for managing members across all groups."""

    @staticmethod
    def get_member(db: Session, member_id: UUID) -> Optional[Member]:
        return db.execute(
            select(Member)
            .options(joinedload(Member.cell_group))
            .where(Member.id == member_id)
        ).scalar_one_or_none()

    @staticmethod
    def require_member(db: Session, member_id: UUID) -> Member:
        member = MemberService.get_member(db, member_id)
        if not member:
            raise NotFoundError("Member", member_id)
        return member

    @staticmethod
    def list_members(
        db: Session, cell_group_id: Optional[UUID] = None
    ) -> list[Member]:
        """Active and inactive members, by group name then member name."""
        stmt = (
            select(Member)
            .join(Member.cell_group)
            .options(joinedload(Member.cell_group))
        )
        if cell_group_id:
            stmt = stmt.where(Member.cell_group_id == cell_group_id)
        stmt = stmt.order_by(CellGroup.name, Member.name)
        return list(db.execute(stmt).scalars().all())

    @staticmethod
    def create_member(db: Session, name: str, cell_group_id: UUID) -> Member:
        CellGroupService.require_cell_group(db, cell_group_id)

        with unit_of_work(db):
            member = Member(name=name, cell_group_id=cell_group_id)
            db.add(member)
            db.flush()

        return MemberService.require_member(db, member.id)

    @staticmethod
    def update_member(db: Session, member_id: UUID, **updates) -> Member:
        """Partial update of name, is_active and cell_group_id."""
        member = MemberService.require_member(db, member_id)

        if updates.get("cell_group_id") is not None:
            CellGroupService.require_cell_group(db, updates["cell_group_id"])

        with unit_of_work(db):
            for key in ("name", "is_active", "cell_group_id"):
                if updates.get(key) is not None:
                    setattr(member, key, updates[key])

        return MemberService.require_member(db, member_id)

    @staticmethod
    def delete_member(db: Session, member_id: UUID) -> None:
        """Hard delete; the member's reports go with it."""
        member = MemberService.require_member(db, member_id)

        with unit_of_work(db):
            db.delete(member)

        logger.info(f"Deleted member {member_id}")


class ReportQueryService:
    """Read access to weekly reports for administrators."""

    @staticmethod
    def list_reports(
        db: Session,
        cell_group_id: Optional[UUID] = None,
        week_start: Optional[date] = None,
        member_id: Optional[UUID] = None,
    ) -> list[WeeklyReport]:
        stmt = (
            select(WeeklyReport)
            .join(WeeklyReport.member)
            .options(joinedload(WeeklyReport.member).joinedload(Member.cell_group))
        )
        if cell_group_id:
            stmt = stmt.where(Member.cell_group_id == cell_group_id)
        if week_start:
            stmt = stmt.where(WeeklyReport.week_start == week_start)
        if member_id:
            stmt = stmt.where(WeeklyReport.member_id == member_id)

        stmt = stmt.order_by(WeeklyReport.week_start.desc(), Member.name, Member.id)
        return list(db.execute(stmt).scalars().all())

    @staticmethod
    def weekly_summary(db: Session, weeks: int = SUMMARY_WEEKS) -> list[dict[str, Any]]:
        """Counts and sums per week for the most recent ``weeks`` report weeks."""
        stmt = (
            select(
                WeeklyReport.week_start,
                func.count(WeeklyReport.id).label("report_count"),
                func.coalesce(func.sum(WeeklyReport.bible_chapters_read), 0).label(
                    "total_bible_chapters"
                ),
                func.coalesce(func.sum(WeeklyReport.prayer_count), 0).label(
                    "total_prayers"
                ),
                _count_flag(WeeklyReport.early_sermon).label("early_sermon_count"),
                _count_flag(WeeklyReport.charis_sermon).label("charis_sermon_count"),
                _count_flag(WeeklyReport.cell_meeting).label("cell_meeting_count"),
            )
            .group_by(WeeklyReport.week_start)
            .order_by(WeeklyReport.week_start.desc())
            .limit(weeks)
        )
        return [
            {
                "week_start": row.week_start,
                "report_count": int(row.report_count),
                "total_bible_chapters": int(row.total_bible_chapters),
                "total_prayers": int(row.total_prayers),
                "early_sermon_count": int(row.early_sermon_count),
                "charis_sermon_count": int(row.charis_sermon_count),
                "cell_meeting_count": int(row.cell_meeting_count),
            }
            for row in db.execute(stmt).all()
        ]


class AttendanceService:
    """Per-week attendance grid and batch attendance writes."""

    @staticmethod
    def reports_by_member(
        db: Session, week_start: date, member_ids: Iterable[UUID]
    ) -> dict[UUID, WeeklyReport]:
        member_ids = list(member_ids)
        if not member_ids:
            return {}
        reports = db.execute(
            select(WeeklyReport).where(
                WeeklyReport.week_start == week_start,
                WeeklyReport.member_id.in_(member_ids),
            )
        ).scalars().all()
        return {report.member_id: report for report in reports}

    @staticmethod
    def week_attendance(db: Session, week_start: date) -> dict[str, Any]:
        cell_groups = CellGroupService.list_cell_groups(db)
        member_ids = [m.id for group in cell_groups for m in group.members]
        reports = AttendanceService.reports_by_member(db, week_start, member_ids)

        groups = []
        for group in cell_groups:
            members = []
            for member in group.members:
                report = reports.get(member.id)
                members.append(
                    {
                        "id": member.id,
                        "name": member.name,
                        "attendance": {
                            "early_sermon": bool(report and report.early_sermon),
                            "charis_sermon": bool(report and report.charis_sermon),
                            "cell_meeting": bool(report and report.cell_meeting),
                        },
                    }
                )
            groups.append(
                {
                    "id": group.id,
                    "name": group.name,
                    "leader": group.leader,
                    "members": members,
                }
            )

        return {"week_start": week_start, "cell_groups": groups}

    @staticmethod
    def save_attendance(
        db: Session, week_start: date, entries: list[dict[str, Any]]
    ) -> int:
        """Upsert the attendance flags of every entry for ``week_start``.

        Counters and notes of existing reports are left untouched; new
        reports start their counters at zero. Nothing is written unless
        every member exists.
        """
        latest = {entry["member_id"]: entry for entry in entries}
        if not latest:
            return 0

        known = set(
            db.execute(select(Member.id).where(Member.id.in_(list(latest)))).scalars()
        )
        missing = [member_id for member_id in latest if member_id not in known]
        if missing:
            raise NotFoundError("Member", missing[0])

        existing = AttendanceService.reports_by_member(db, week_start, latest)

        with unit_of_work(db):
            for member_id, entry in latest.items():
                report = existing.get(member_id)
                if report is None:
                    report = WeeklyReport(
                        member_id=member_id,
                        week_start=week_start,
                        bible_chapters_read=0,
                        prayer_count=0,
                    )
                    db.add(report)
                for flag in ATTENDANCE_FLAGS:
                    setattr(report, flag, bool(entry.get(flag)))

        logger.info(f"Saved attendance for {len(latest)} members, week {week_start}")
        return len(latest)

