"""create complaint_remarks, technician_remarks and forward_history tables

Revision ID: e3c4d5e6f7a8
Revises: d2b3c4d5e6f7
Create Date: 2026-10-01 09:20:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "e3c4d5e6f7a8"
down_revision = "d2b3c4d5e6f7"
branch_labels = None
depends_on = None

REMARK_TABLES = ("complaint_remarks", "technician_remarks")


def upgrade() -> None:
    for table in REMARK_TABLES:
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
            sa.Column("complaint_id", sa.Integer(), nullable=False),
            sa.Column("remark_by", sa.Uuid(), nullable=False),
            sa.Column("note_transport", sa.Text(), nullable=True),
            sa.Column("checking", sa.Text(), nullable=True),
            sa.Column("remark", sa.Text(), nullable=True),
            sa.Column("status", sa.String(length=20), nullable=True),
            sa.Column(
                "created_at",
                sa.DateTime(timezone=True),
                server_default=sa.text("(CURRENT_TIMESTAMP)"),
                nullable=True,
            ),
            sa.ForeignKeyConstraint(["complaint_id"], ["complaints.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(op.f(f"ix_{table}_complaint_id"), table, ["complaint_id"])
        op.create_index(op.f(f"ix_{table}_remark_by"), table, ["remark_by"])

    op.create_table(
        "forward_history",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("complaint_id", sa.Integer(), nullable=False),
        sa.Column("forward_from", sa.Uuid(), nullable=True),
        sa.Column("forward_to", sa.Uuid(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=True,
        ),
        sa.ForeignKeyConstraint(["complaint_id"], ["complaints.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_forward_history_complaint_id"), "forward_history", ["complaint_id"])
    op.create_index(op.f("ix_forward_history_forward_to"), "forward_history", ["forward_to"])


def downgrade() -> None:
    op.drop_index(op.f("ix_forward_history_forward_to"), table_name="forward_history")
    op.drop_index(op.f("ix_forward_history_complaint_id"), table_name="forward_history")
    op.drop_table("forward_history")
    for table in reversed(REMARK_TABLES):
        op.drop_index(op.f(f"ix_{table}_remark_by"), table_name=table)
        op.drop_index(op.f(f"ix_{table}_complaint_id"), table_name=table)
        op.drop_table(table)
