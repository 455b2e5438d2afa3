from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from celltrack.auth.dependencies import get_token_payload
from celltrack.auth.schemas import LoginRequest, LoginResponse, UserProfile
from celltrack.auth.service import AuthService
from celltrack.common.db import get_db

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest, db: Session = Depends(get_db)):
    token, user = AuthService.login(db, request.cell_id, request.password)
    return LoginResponse(token=token, user=UserProfile.model_validate(user))


@router.get("/me", response_model=UserProfile)
async def get_me(
    payload: dict = Depends(get_token_payload),
    db: Session = Depends(get_db),
):
    """Profile of the token's owner, reloaded from the store."""
    user = AuthService.who_am_i(db, payload)
    return UserProfile.model_validate(user)
