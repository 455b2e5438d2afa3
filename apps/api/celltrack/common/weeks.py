"""Week anchor helpers.

Every week-keyed value in the system is stored as the Sunday that ends
its Monday-Sunday week. Clients may send any day of the week; the server
normalizes it here before reading or writing.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Union

from celltrack.core.errors import ValidationAPIError

SUNDAY = 6


def week_anchor(day: date) -> date:
    """Return the Sunday ending the week that contains ``day``."""
    if isinstance(day, datetime):
        day = day.date()
    return day + timedelta(days=SUNDAY - day.weekday())


def parse_week(value: Union[str, date], field: str = "week_start") -> date:
    """Parse a ``YYYY-MM-DD`` (or ISO datetime) value and anchor it."""
    if isinstance(value, date):
        return week_anchor(value)

    raw = (value or "").strip()
    try:
        if len(raw) > 10:
            parsed = datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
        else:
            parsed = date.fromisoformat(raw)
    except ValueError:
        raise ValidationAPIError(
            message=f"Invalid date for {field}: {value!r}",
            errors=[{"field": field, "message": "Expected a YYYY-MM-DD date"}],
        ) from None
    return week_anchor(parsed)


def parse_optional_week(value: Optional[str], field: str) -> Optional[date]:
    if value is None or value == "":
        return None
    return parse_week(value, field)


def recent_weeks(count: int, today: Optional[date] = None) -> list[date]:
    """The last ``count`` week anchors, newest first, ending with this week."""
    current = week_anchor(today or date.today())
    return [current - timedelta(weeks=offset) for offset in range(count)]
