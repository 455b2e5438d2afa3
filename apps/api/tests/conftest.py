from __future__ import annotations

import os
from datetime import date
from typing import Generator

# Settings are read at import time
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from celltrack.main import app
from celltrack.auth.service import AuthService
from celltrack.auth.utils import create_access_token, hash_password
from celltrack.common.models import (
    Base,
    CellGroup,
    Member,
    User,
    WeeklyReport,
    ROLE_ADMIN,
    ROLE_LEADER,
)

# In-memory SQLite shared across threads so the TestClient sees the same data
TEST_DB_URL = "sqlite:///:memory:"
engine = create_engine(
    TEST_DB_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# A Sunday, i.e. already a week anchor
WEEK = date(2024, 3, 10)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Fresh schema for every test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create a test client with dependency overrides."""

    def get_test_db():
        yield db

    from celltrack.common.db import get_db

    app.dependency_overrides[get_db] = get_test_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def make_leader(db: Session, cell_id: str, name: str, group_name: str) -> CellGroup:
    leader = User(
        cell_id=cell_id,
        password_hash=hash_password("leader123"),
        name=name,
        role=ROLE_LEADER,
    )
    db.add(leader)
    db.flush()
    group = CellGroup(name=group_name, leader_id=leader.id)
    db.add(group)
    db.commit()
    db.refresh(group)
    return group


def token_for(user: User) -> str:
    return create_access_token(AuthService.token_claims(user))


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_user(db: Session) -> User:
    user = User(
        cell_id="admin",
        password_hash=hash_password("admin123"),
        name="Administrator",
        role=ROLE_ADMIN,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def cell_group(db: Session) -> CellGroup:
    """Faith Cell, led by cell001."""
    return make_leader(db, "cell001", "John Smith", "Faith Cell")


@pytest.fixture
def other_group(db: Session) -> CellGroup:
    """Hope Cell, led by cell002."""
    return make_leader(db, "cell002", "Mary Johnson", "Hope Cell")


@pytest.fixture
def leader_user(cell_group: CellGroup) -> User:
    return cell_group.leader


@pytest.fixture
def members(db: Session, cell_group: CellGroup) -> list[Member]:
    """Two active members and one inactive member of Faith Cell."""
    rows = [
        Member(name="Alice Johnson", cell_group_id=cell_group.id),
        Member(name="Bob Williams", cell_group_id=cell_group.id),
        Member(name="Carol Davis", cell_group_id=cell_group.id, is_active=False),
    ]
    db.add_all(rows)
    db.commit()
    for row in rows:
        db.refresh(row)
    return rows


@pytest.fixture
def other_member(db: Session, other_group: CellGroup) -> Member:
    member = Member(name="Emma Wilson", cell_group_id=other_group.id)
    db.add(member)
    db.commit()
    db.refresh(member)
    return member


@pytest.fixture
def admin_token(admin_user: User) -> str:
    return token_for(admin_user)


@pytest.fixture
def leader_token(leader_user: User) -> str:
    return token_for(leader_user)


@pytest.fixture
def admin_headers(admin_token: str) -> dict[str, str]:
    return auth_headers(admin_token)


@pytest.fixture
def leader_headers(leader_token: str) -> dict[str, str]:
    return auth_headers(leader_token)


def add_report(db: Session, member: Member, week: date = WEEK, **fields) -> WeeklyReport:
    report = WeeklyReport(member_id=member.id, week_start=week, **fields)
    db.add(report)
    db.commit()
    db.refresh(report)
    return report
