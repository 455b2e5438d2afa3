"""split attendance into three flags

Revision ID: 202601240900
Revises: 202601100900
Create Date: 2026-01-24 09:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "202601240900"
down_revision: Union[str, None] = "202601100900"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

FLAGS = ("early_sermon", "charis_sermon", "cell_meeting")


def upgrade() -> None:
    """Replace is_present with early_sermon, charis_sermon and cell_meeting.

    Existing presence becomes cell meeting attendance.
    """
    with op.batch_alter_table("weekly_reports") as batch_op:
        for flag in FLAGS:
            batch_op.add_column(
                sa.Column(flag, sa.Boolean(), nullable=False, server_default=sa.false())
            )

    op.execute("UPDATE weekly_reports SET cell_meeting = is_present")

    with op.batch_alter_table("weekly_reports") as batch_op:
        batch_op.drop_column("is_present")


def downgrade() -> None:
    """Collapse the three flags back into is_present (any flag set)."""
    with op.batch_alter_table("weekly_reports") as batch_op:
        batch_op.add_column(
            sa.Column("is_present", sa.Boolean(), nullable=False, server_default=sa.false())
        )

    op.execute(
        "UPDATE weekly_reports "
        "SET is_present = (early_sermon OR charis_sermon OR cell_meeting)"
    )

    with op.batch_alter_table("weekly_reports") as batch_op:
        for flag in FLAGS:
            batch_op.drop_column(flag)
