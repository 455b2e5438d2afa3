"""Row builders behind the spreadsheet and CSV downloads."""

from __future__ import annotations

from datetime import date
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import case, func, or_, select
from sqlalchemy.orm import Session, joinedload

from celltrack.common.models import CellGroup, Member, WeeklyReport

REPORT_COLUMNS = [
    "Week",
    "Cell Group",
    "Member",
    "Present",
    "Bible Chapters",
    "Prayers",
    "Notes",
]
REPORT_COLUMN_WIDTHS = [12, 20, 20, 10, 15, 10, 40]

SUMMARY_COLUMNS = [
    "Cell Group",
    "Leader",
    "Members",
    "Total Attendance",
    "Total Bible Chapters",
    "Total Prayers",
    "Avg Bible/Member",
    "Avg Prayer/Member",
]


def _week_filter(week_start: Optional[date], week_end: Optional[date]):
    """Range when both bounds are given, exact week when only the start is."""
    if week_start and week_end:
        return WeeklyReport.week_start.between(week_start, week_end)
    if week_start:
        return WeeklyReport.week_start == week_start
    return None


def _present():
    return or_(
        WeeklyReport.early_sermon.is_(True),
        WeeklyReport.charis_sermon.is_(True),
        WeeklyReport.cell_meeting.is_(True),
    )


def _average(total: int, members: int) -> float:
    return round(total / members, 1) if members else 0


class ExportService:
    @staticmethod
    def report_rows(
        db: Session,
        cell_group_id: Optional[UUID] = None,
        week_start: Optional[date] = None,
        week_end: Optional[date] = None,
    ) -> list[dict[str, Any]]:
        """One row per report, newest week first, then group and member name."""
        stmt = (
            select(WeeklyReport)
            .join(WeeklyReport.member)
            .join(Member.cell_group)
            .options(joinedload(WeeklyReport.member).joinedload(Member.cell_group))
        )
        if cell_group_id:
            stmt = stmt.where(Member.cell_group_id == cell_group_id)
        week_clause = _week_filter(week_start, week_end)
        if week_clause is not None:
            stmt = stmt.where(week_clause)
        stmt = stmt.order_by(
            WeeklyReport.week_start.desc(), CellGroup.name, Member.name
        )

        return [
            {
                "Week": report.week_start.isoformat(),
                "Cell Group": report.member.cell_group.name,
                "Member": report.member.name,
                "Present": "Yes" if report.is_present else "No",
                "Bible Chapters": report.bible_chapters_read,
                "Prayers": report.prayer_count,
                "Notes": report.notes or "",
            }
            for report in db.execute(stmt).scalars().all()
        ]

    @staticmethod
    def summary_rows(
        db: Session,
        week_start: Optional[date] = None,
        week_end: Optional[date] = None,
    ) -> list[dict[str, Any]]:
        """Per-group totals over the reports of active members."""
        member_counts = dict(
            db.execute(
                select(Member.cell_group_id, func.count(Member.id))
                .where(Member.is_active.is_(True))
                .group_by(Member.cell_group_id)
            ).all()
        )

        totals_stmt = (
            select(
                Member.cell_group_id,
                func.coalesce(func.sum(case((_present(), 1), else_=0)), 0),
                func.coalesce(func.sum(WeeklyReport.bible_chapters_read), 0),
                func.coalesce(func.sum(WeeklyReport.prayer_count), 0),
            )
            .join(WeeklyReport.member)
            .where(Member.is_active.is_(True))
            .group_by(Member.cell_group_id)
        )
        week_clause = _week_filter(week_start, week_end)
        if week_clause is not None:
            totals_stmt = totals_stmt.where(week_clause)
        totals = {
            row[0]: (int(row[1]), int(row[2]), int(row[3]))
            for row in db.execute(totals_stmt).all()
        }

        cell_groups = db.execute(
            select(CellGroup)
            .options(joinedload(CellGroup.leader))
            .order_by(CellGroup.name)
        ).scalars().all()

        rows = []
        for group in cell_groups:
            members = member_counts.get(group.id, 0)
            attendance, bible, prayers = totals.get(group.id, (0, 0, 0))
            rows.append(
                {
                    "Cell Group": group.name,
                    "Leader": group.leader.name,
                    "Members": members,
                    "Total Attendance": attendance,
                    "Total Bible Chapters": bible,
                    "Total Prayers": prayers,
                    "Avg Bible/Member": _average(bible, members),
                    "Avg Prayer/Member": _average(prayers, members),
                }
            )
        return rows
