"""Week event labels, at most one per week."""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from celltrack.common.db import unit_of_work
from celltrack.common.models import WeekEvent

logger = logging.getLogger(__name__)


class WeekEventService:
    @staticmethod
    def list_events(db: Session) -> list[WeekEvent]:
        return list(
            db.execute(select(WeekEvent).order_by(WeekEvent.week_date.desc()))
            .scalars()
            .all()
        )

    @staticmethod
    def set_event(db: Session, week_date: date, event: Optional[str]) -> Optional[WeekEvent]:
        """Upsert the label for ``week_date``; a blank label deletes it.

        Returns the stored row, or None when the week was cleared.
        """
        label = (event or "").strip()
        existing = db.execute(
            select(WeekEvent).where(WeekEvent.week_date == week_date)
        ).scalar_one_or_none()

        if not label:
            if existing:
                with unit_of_work(db):
                    db.delete(existing)
                logger.info(f"Cleared week event for {week_date}")
            return None

        with unit_of_work(db):
            if existing is None:
                existing = WeekEvent(week_date=week_date, event=label)
                db.add(existing)
            else:
                existing.event = label

        db.refresh(existing)
        return existing
