from __future__ import annotations

from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from celltrack.common.schemas import RequestModel


class WeekEventRequest(RequestModel):
    """A blank ``event`` clears the label for that week."""

    week_date: str = Field(..., min_length=1)
    event: Optional[str] = Field(None, max_length=200)


class WeekEventResponse(BaseModel):
    id: UUID
    week_date: date
    event: str

    model_config = {"from_attributes": True}
