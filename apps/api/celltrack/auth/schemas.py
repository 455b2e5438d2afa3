from __future__ import annotations

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from celltrack.common.schemas import RequestModel


class LoginRequest(RequestModel):
    cell_id: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)


class CellGroupRef(BaseModel):
    id: UUID
    name: str

    model_config = {"from_attributes": True}


class UserProfile(BaseModel):
    id: UUID
    cell_id: str
    name: str
    role: str
    cell_group: Optional[CellGroupRef] = None

    model_config = {"from_attributes": True}


class LoginResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserProfile
