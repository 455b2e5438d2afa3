from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError
from pwdlib import PasswordHash

from celltrack.core.config import settings
from celltrack.core.errors import InvalidTokenError

password_hash = PasswordHash.recommended()

TOKEN_TYPE_ACCESS = "access"


def hash_password(password: str) -> str:
    return password_hash.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return password_hash.verify(plain_password, hashed_password)


def create_access_token(
    data: dict, expires_delta: Optional[timedelta] = None
) -> str:
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(hours=settings.access_token_expire_hours)
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode.update({
        "exp": expire,
        "type": TOKEN_TYPE_ACCESS,
        "nonce": secrets.token_urlsafe(16),  # Random nonce for uniqueness
    })
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict:
    """Verify signature and expiry, returning the claims.

    Raises:
        InvalidTokenError: malformed, tampered, expired or not an access token
    """
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
    except JWTError as e:
        raise InvalidTokenError() from e

    if payload.get("type") != TOKEN_TYPE_ACCESS or not payload.get("sub"):
        raise InvalidTokenError("Invalid token payload")
    return payload
