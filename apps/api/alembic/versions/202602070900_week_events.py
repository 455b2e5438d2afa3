"""move week events out of meeting notes

Revision ID: 202602070900
Revises: 202601240900
Create Date: 2026-02-07 09:00:00.000000

"""

from typing import Sequence, Union
from uuid import uuid4

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "202602070900"
down_revision: Union[str, None] = "202601240900"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create week_events and move non-empty meeting_notes.event values into it."""
    week_events = op.create_table(
        "week_events",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("week_date", sa.Date(), nullable=False),
        sa.Column("event", sa.String(length=200), nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_week_events"),
        sa.UniqueConstraint("week_date", name="uq_week_events_week_date"),
    )

    meeting_notes = sa.table(
        "meeting_notes",
        sa.column("week_date", sa.Date),
        sa.column("event", sa.String),
    )
    rows = op.get_bind().execute(
        sa.select(meeting_notes.c.week_date, meeting_notes.c.event).where(
            meeting_notes.c.event.is_not(None)
        )
    ).all()
    events = [
        {"id": uuid4(), "week_date": week_date, "event": event.strip()[:200]}
        for week_date, event in rows
        if event and event.strip()
    ]
    if events:
        op.bulk_insert(week_events, events)

    with op.batch_alter_table("meeting_notes") as batch_op:
        batch_op.drop_column("event")


def downgrade() -> None:
    """Copy week events back onto meeting notes of the same week and drop the table."""
    with op.batch_alter_table("meeting_notes") as batch_op:
        batch_op.add_column(sa.Column("event", sa.String(length=200), nullable=True))

    op.execute(
        "UPDATE meeting_notes SET event = ("
        "SELECT week_events.event FROM week_events "
        "WHERE week_events.week_date = meeting_notes.week_date)"
    )
    op.drop_table("week_events")
