from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from celltrack.auth.utils import decode_access_token
from celltrack.common.models import ROLE_ADMIN, ROLE_LEADER
from celltrack.core.errors import ForbiddenError, InvalidTokenError, UnauthorizedError

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    """Identity carried by a verified session token."""

    id: UUID
    cell_id: str
    role: str
    name: str
    cell_group_id: Optional[UUID] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


async def get_token_payload(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    if not credentials or not credentials.credentials:
        raise UnauthorizedError("Access token required")
    return decode_access_token(credentials.credentials)


async def get_current_user(payload: dict = Depends(get_token_payload)) -> CurrentUser:
    try:
        cell_group_id = payload.get("cell_group_id")
        return CurrentUser(
            id=UUID(payload["sub"]),
            cell_id=payload.get("cell_id", ""),
            role=payload.get("role", ""),
            name=payload.get("name", ""),
            cell_group_id=UUID(cell_group_id) if cell_group_id else None,
        )
    except (KeyError, ValueError) as e:
        raise InvalidTokenError("Invalid token payload") from e


async def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if user.role != ROLE_ADMIN:
        logger.warning(f"User {user.id} denied admin access")
        raise ForbiddenError("Admin access required")
    return user


async def require_leader(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Leaders and admins; admin access is a superset of leader access."""
    if user.role not in (ROLE_LEADER, ROLE_ADMIN):
        logger.warning(f"User {user.id} denied leader access")
        raise ForbiddenError("Leader access required")
    return user
