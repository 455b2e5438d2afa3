from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from celltrack.auth.utils import create_access_token, verify_password
from celltrack.common.models import User
from celltrack.core.errors import InvalidTokenError, NotFoundError, UnauthorizedError

logger = logging.getLogger(__name__)

# Same message for unknown identifiers and wrong passwords
INVALID_CREDENTIALS = "Invalid credentials"


class AuthService:
    @staticmethod
    def get_user_by_cell_id(db: Session, cell_id: str) -> Optional[User]:
        stmt = (
            select(User)
            .options(joinedload(User.cell_group))
            .where(User.cell_id == cell_id)
        )
        return db.execute(stmt).unique().scalar_one_or_none()

    @staticmethod
    def authenticate_user(db: Session, cell_id: str, password: str) -> Optional[User]:
        user = AuthService.get_user_by_cell_id(db, cell_id)
        if not user or not user.password_hash:
            return None
        if not verify_password(password, user.password_hash):
            return None
        return user

    @staticmethod
    def token_claims(user: User) -> dict:
        return {
            "sub": str(user.id),
            "cell_id": user.cell_id,
            "role": user.role,
            "name": user.name,
            "cell_group_id": str(user.cell_group.id) if user.cell_group else None,
        }

    @staticmethod
    def login(db: Session, cell_id: str, password: str) -> tuple[str, User]:
        """Check credentials and issue a signed session token."""
        user = AuthService.authenticate_user(db, cell_id, password)
        if not user:
            logger.warning("Rejected login", extra={"cell_id": cell_id})
            raise UnauthorizedError(INVALID_CREDENTIALS)

        token = create_access_token(AuthService.token_claims(user))
        logger.info(f"User {user.id} logged in as {user.role}")
        return token, user

    @staticmethod
    def who_am_i(db: Session, payload: dict) -> User:
        """Reload the user a verified token was issued to."""
        try:
            user_id = UUID(payload["sub"])
        except (KeyError, ValueError) as e:
            raise InvalidTokenError("Invalid token payload") from e

        user = db.execute(
            select(User)
            .options(joinedload(User.cell_group))
            .where(User.id == user_id)
        ).unique().scalar_one_or_none()
        if not user:
            raise NotFoundError("User", user_id)
        return user
