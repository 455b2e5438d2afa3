from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from celltrack.auth.utils import hash_password
from celltrack.common.db import SessionLocal
from celltrack.common.models import CellGroup, Member, User, ROLE_ADMIN, ROLE_LEADER
from celltrack.core.config import settings

logger = logging.getLogger(__name__)

SAMPLE_PASSWORD = "leader123"

SAMPLE_GROUPS = [
    {
        "cell_id": "cell001",
        "leader": "John Smith",
        "name": "Faith Cell",
        "members": ["Alice Johnson", "Bob Williams", "Carol Davis", "David Brown"],
    },
    {
        "cell_id": "cell002",
        "leader": "Mary Johnson",
        "name": "Hope Cell",
        "members": ["Emma Wilson", "Frank Miller", "Grace Taylor"],
    },
]


def ensure_user(db: Session, cell_id: str, name: str, password: str, role: str) -> User:
    """Existing users are left untouched, passwords included."""
    user = db.execute(select(User).where(User.cell_id == cell_id)).scalar_one_or_none()
    if user is None:
        user = User(
            cell_id=cell_id,
            password_hash=hash_password(password),
            name=name,
            role=role,
        )
        db.add(user)
        db.flush()
    return user


def ensure_cell_group(db: Session, leader: User, name: str) -> CellGroup:
    group = db.execute(
        select(CellGroup).where(CellGroup.leader_id == leader.id)
    ).scalar_one_or_none()
    if group is None:
        group = CellGroup(name=name, leader_id=leader.id)
        db.add(group)
        db.flush()
    return group


def ensure_members(db: Session, group: CellGroup, names: Sequence[str]) -> int:
    existing = set(
        db.execute(
            select(Member.name).where(Member.cell_group_id == group.id)
        ).scalars()
    )
    created = 0
    for name in names:
        if name not in existing:
            db.add(Member(name=name, cell_group_id=group.id))
            created += 1
    db.flush()
    return created


def seed(db: Session, sample: bool = False) -> None:
    ensure_user(
        db,
        settings.admin_cell_id,
        settings.admin_name,
        settings.admin_password,
        ROLE_ADMIN,
    )
    if not sample:
        return

    for entry in SAMPLE_GROUPS:
        leader = ensure_user(
            db, entry["cell_id"], entry["leader"], SAMPLE_PASSWORD, ROLE_LEADER
        )
        group = ensure_cell_group(db, leader, entry["name"])
        ensure_members(db, group, entry["members"])


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Seed the cell group tracker database")
    parser.add_argument(
        "--sample",
        action="store_true",
        help="also create two sample cell groups with leaders and members",
    )
    args = parser.parse_args(argv)

    with SessionLocal() as db:
        db.begin()
        seed(db, sample=args.sample)
        db.commit()

    print(f"Seeded admin user '{settings.admin_cell_id}'")
    if args.sample:
        for entry in SAMPLE_GROUPS:
            print(
                f"Seeded cell group '{entry['name']}' "
                f"(leader ID: {entry['cell_id']}, password: {SAMPLE_PASSWORD})"
            )


if __name__ == "__main__":
    main()
