"""add_permission_audit_log

Revision ID: 8c4d1e7a2b35
Revises: 3f1c2a9b7d10
Create Date: 2026-10-16 10:03:11.502114

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8c4d1e7a2b35'
down_revision: Union[str, None] = '3f1c2a9b7d10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "permission_audit_log",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("action", sa.String(30), nullable=False),
        sa.Column("role_id", sa.Uuid(), sa.ForeignKey("roles.id", ondelete="SET NULL"), nullable=True),
        sa.Column("role_name", sa.String(100), nullable=True),
        sa.Column(
            "permission_id",
            sa.Uuid(),
            sa.ForeignKey("permissions.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("permission_name", sa.String(150), nullable=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column(
            "performed_by_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_permission_audit_log_action", "permission_audit_log", ["action"])
    op.create_index("ix_permission_audit_log_created_at", "permission_audit_log", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_permission_audit_log_created_at", table_name="permission_audit_log")
    op.drop_index("ix_permission_audit_log_action", table_name="permission_audit_log")
    op.drop_table("permission_audit_log")
