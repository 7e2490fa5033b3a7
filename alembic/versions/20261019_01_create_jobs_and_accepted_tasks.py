"""create jobs and accepted_tasks

Revision ID: 20261019_01
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20261019_01"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "jobs",
        sa.Column("seq", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("posted_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("fields", sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint("seq"),
    )
    op.create_index(op.f("ix_jobs_id"), "jobs", ["id"], unique=True)
    op.create_index(op.f("ix_jobs_email"), "jobs", ["email"], unique=False)

    op.create_table(
        "accepted_tasks",
        sa.Column("seq", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("accepted_by_email", sa.String(length=320), nullable=False),
        sa.Column("accepted_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("job_id", sa.String(length=255), nullable=True),
        sa.Column("fields", sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint("seq"),
    )
    op.create_index(op.f("ix_accepted_tasks_id"), "accepted_tasks", ["id"], unique=True)
    op.create_index(
        op.f("ix_accepted_tasks_accepted_by_email"), "accepted_tasks", ["accepted_by_email"], unique=False
    )
    op.create_index(op.f("ix_accepted_tasks_job_id"), "accepted_tasks", ["job_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_accepted_tasks_job_id"), table_name="accepted_tasks")
    op.drop_index(op.f("ix_accepted_tasks_accepted_by_email"), table_name="accepted_tasks")
    op.drop_index(op.f("ix_accepted_tasks_id"), table_name="accepted_tasks")
    op.drop_table("accepted_tasks")
    op.drop_index(op.f("ix_jobs_email"), table_name="jobs")
    op.drop_index(op.f("ix_jobs_id"), table_name="jobs")
    op.drop_table("jobs")
