"""initial schema

Revision ID: 0001_initial
Revises: 
Create Date: 2026-10-19 10:00:00
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    bind = op.get_bind()
    task_type = postgresql.ENUM("short", "near", "relaxed", "scheduled", name="task_type", create_type=False)
    postgresql.ENUM("short", "near", "relaxed", "scheduled", name="task_type").create(bind, checkfirst=True)

    op.create_table(
        "reminds",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("devices", postgresql.JSONB(), nullable=False),
        sa.Column("task_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("task_type", task_type, nullable=False),
        sa.Column("throttled", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("slide_window_width", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("task_id", "time", name="uq_reminds_task_id_time"),
        sa.CheckConstraint("slide_window_width BETWEEN 60 AND 600", name="ck_reminds_slide_window_width"),
    )
    op.create_index("ix_reminds_time", "reminds", ["time"], unique=False)
    op.create_index("ix_reminds_user_id", "reminds", ["user_id"], unique=False)
    op.create_index("ix_reminds_task_id", "reminds", ["task_id"], unique=False)
    op.create_index("ix_reminds_throttled", "reminds", ["throttled"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_reminds_throttled", table_name="reminds")
    op.drop_index("ix_reminds_task_id", table_name="reminds")
    op.drop_index("ix_reminds_user_id", table_name="reminds")
    op.drop_index("ix_reminds_time", table_name="reminds")
    op.drop_table("reminds")

    sa.Enum(name="task_type").drop(op.get_bind(), checkfirst=True)
