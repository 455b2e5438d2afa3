"""initial schema

Revision ID: 202601100900
Revises:
Create Date: 2026-01-10 09:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "202601100900"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    """Create users, cell groups, members, weekly reports and meeting notes."""
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("cell_id", sa.String(length=100), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column(
            "role",
            sa.Enum("admin", "leader", name="user_role"),
            nullable=False,
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("cell_id", name="uq_users_cell_id"),
    )

    op.create_table(
        "cell_groups",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("leader_id", sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["leader_id"], ["users.id"], name="fk_cell_groups_leader_id_users"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_cell_groups"),
        sa.UniqueConstraint("leader_id", name="uq_cell_groups_leader_id"),
    )

    op.create_table(
        "members",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("cell_group_id", sa.Uuid(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["cell_group_id"],
            ["cell_groups.id"],
            name="fk_members_cell_group_id_cell_groups",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_members"),
    )
    op.create_index(
        "ix_members_group_active", "members", ["cell_group_id", "is_active"]
    )

    op.create_table(
        "weekly_reports",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("member_id", sa.Uuid(), nullable=False),
        sa.Column("week_start", sa.Date(), nullable=False),
        sa.Column("is_present", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("bible_chapters_read", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("prayer_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["member_id"],
            ["members.id"],
            name="fk_weekly_reports_member_id_members",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_weekly_reports"),
        sa.UniqueConstraint(
            "member_id", "week_start", name="uq_weekly_reports_member_week"
        ),
        sa.CheckConstraint(
            "bible_chapters_read >= 0",
            name="ck_weekly_reports_bible_chapters_non_negative",
        ),
        sa.CheckConstraint(
            "prayer_count >= 0", name="ck_weekly_reports_prayer_count_non_negative"
        ),
    )
    op.create_index(
        "ix_weekly_reports_week_start", "weekly_reports", ["week_start"]
    )

    op.create_table(
        "meeting_notes",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("week_date", sa.Date(), nullable=False),
        sa.Column("title", sa.String(length=300), nullable=False),
        sa.Column("content", sa.Text(), nullable=False, server_default=""),
        sa.Column("event", sa.String(length=200), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_meeting_notes"),
        sa.UniqueConstraint("week_date", name="uq_meeting_notes_week_date"),
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("meeting_notes")
    op.drop_index("ix_weekly_reports_week_start", table_name="weekly_reports")
    op.drop_table("weekly_reports")
    op.drop_index("ix_members_group_active", table_name="members")
    op.drop_table("members")
    op.drop_table("cell_groups")
    op.drop_table("users")
    sa.Enum(name="user_role").drop(op.get_bind(), checkfirst=True)
