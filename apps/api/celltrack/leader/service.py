"""Leader service layer. Every operation is scoped to the caller's own group."""

from __future__ import annotations

import logging
from collections import OrderedDict
from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from celltrack.admin.service import AttendanceService
from celltrack.common.db import unit_of_work
from celltrack.common.models import ATTENDANCE_FLAGS, CellGroup, Member, WeeklyReport
from celltrack.core.errors import ForbiddenError, NotFoundError

logger = logging.getLogger(__name__)


class LeaderCellService:
    """Operations a leader performs on their own cell group."""

    @staticmethod
    def get_own_cell_group(db: Session, leader_id: UUID) -> CellGroup:
        """Resolve the caller's group from the store, never from token claims."""
        cell_group = db.execute(
            select(CellGroup)
            .options(joinedload(CellGroup.leader))
            .where(CellGroup.leader_id == leader_id)
        ).scalar_one_or_none()
        if not cell_group:
            raise NotFoundError("Cell group")
        return cell_group

    @staticmethod
    def active_members(db: Session, cell_group_id: UUID) -> list[Member]:
        return list(
            db.execute(
                select(Member)
                .where(Member.cell_group_id == cell_group_id, Member.is_active.is_(True))
                .order_by(Member.name)
            ).scalars().all()
        )

    @staticmethod
    def add_member(db: Session, leader_id: UUID, name: str) -> Member:
        cell_group = LeaderCellService.get_own_cell_group(db, leader_id)

        with unit_of_work(db):
            member = Member(name=name, cell_group_id=cell_group.id)
            db.add(member)
            db.flush()

        db.refresh(member)
        return member

    @staticmethod
    def update_member(db: Session, leader_id: UUID, member_id: UUID, **updates) -> Member:
        """Rename or (de)activate a member of the caller's group."""
        cell_group = LeaderCellService.get_own_cell_group(db, leader_id)
        member = db.get(Member, member_id)
        if not member:
            raise NotFoundError("Member", member_id)
        if member.cell_group_id != cell_group.id:
            raise ForbiddenError("Member does not belong to your cell group")

        with unit_of_work(db):
            for key in ("name", "is_active"):
                if updates.get(key) is not None:
                    setattr(member, key, updates[key])

        db.refresh(member)
        return member

    @staticmethod
    def week_form(db: Session, leader_id: UUID, week_start: date) -> dict[str, Any]:
        """Active members merged with their report for ``week_start`` (or None)."""
        cell_group = LeaderCellService.get_own_cell_group(db, leader_id)
        members = LeaderCellService.active_members(db, cell_group.id)
        reports = AttendanceService.reports_by_member(
            db, week_start, [m.id for m in members]
        )
        return {
            "cell_group": {"id": cell_group.id, "name": cell_group.name},
            "week_start": week_start,
            "members": [
                {
                    "id": member.id,
                    "name": member.name,
                    "is_active": member.is_active,
                    "report": reports.get(member.id),
                }
                for member in members
            ],
        }

    @staticmethod
    def submit_reports(
        db: Session, leader_id: UUID, week_start: date, entries: list[dict[str, Any]]
    ) -> int:
        """Upsert one report per entry, or none at all.

        Every member id must belong to the caller's group (active or not);
        a single foreign id rejects the whole batch.
        """
        cell_group = LeaderCellService.get_own_cell_group(db, leader_id)
        own_ids = set(
            db.execute(
                select(Member.id).where(Member.cell_group_id == cell_group.id)
            ).scalars()
        )

        latest = {entry["member_id"]: entry for entry in entries}
        foreign = [member_id for member_id in latest if member_id not in own_ids]
        if foreign:
            logger.warning(
                f"Leader {leader_id} submitted reports for {len(foreign)} foreign members"
            )
            raise ForbiddenError("Some members do not belong to your cell group")

        if not latest:
            return 0

        existing = AttendanceService.reports_by_member(db, week_start, latest)

        with unit_of_work(db):
            for member_id, entry in latest.items():
                report = existing.get(member_id)
                if report is None:
                    report = WeeklyReport(member_id=member_id, week_start=week_start)
                    db.add(report)
                for flag in ATTENDANCE_FLAGS:
                    setattr(report, flag, bool(entry.get(flag)))
                report.bible_chapters_read = entry.get("bible_chapters_read") or 0
                report.prayer_count = entry.get("prayer_count") or 0
                report.notes = entry.get("notes") or None

        logger.info(
            f"Saved {len(latest)} reports for cell group {cell_group.id}, week {week_start}"
        )
        return len(latest)

    @staticmethod
    def history(db: Session, leader_id: UUID) -> "OrderedDict[str, list[WeeklyReport]]":
        """All reports of the group keyed by ISO week, newest week first."""
        cell_group = LeaderCellService.get_own_cell_group(db, leader_id)
        reports = db.execute(
            select(WeeklyReport)
            .join(WeeklyReport.member)
            .options(joinedload(WeeklyReport.member))
            .where(Member.cell_group_id == cell_group.id)
            .order_by(WeeklyReport.week_start.desc(), Member.name)
        ).scalars().all()

        grouped: OrderedDict[str, list[WeeklyReport]] = OrderedDict()
        for report in reports:
            grouped.setdefault(report.week_start.isoformat(), []).append(report)
        return grouped
