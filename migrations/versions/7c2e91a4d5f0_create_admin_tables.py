"""create admins, audit_log and admin_invitations

Revision ID: 7c2e91a4d5f0
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "7c2e91a4d5f0"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ROLE_VALUES = "('SUPER_ADMIN', 'ADMIN', 'SENIOR_MODERATOR', 'MODERATOR')"


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "admins",
        sa.Column("id", sa.BigInteger(), sa.Identity(), primary_key=True),
        sa.Column("telegram_user_id", sa.BigInteger(), nullable=False),
        sa.Column("username", sa.String(length=64), nullable=True),
        sa.Column("first_name", sa.String(length=128), nullable=True),
        sa.Column("role", sa.String(length=32), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint(f"role in {ROLE_VALUES}", name="ck_admins_role"),
    )
    op.create_index("ix_admins_telegram_user_id", "admins", ["telegram_user_id"], unique=True)

    op.create_table(
        "audit_log",
        sa.Column("id", sa.UUID(), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("admin_id", sa.BigInteger(), nullable=False),
        sa.Column("action_type", sa.String(length=100), nullable=False),
        sa.Column("target_user_id", sa.UUID(), nullable=True),
        sa.Column(
            "details",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text("now()")),
    )
    op.create_index("ix_audit_log_admin_id", "audit_log", ["admin_id"], unique=False)
    op.create_index("ix_audit_log_action_type", "audit_log", ["action_type"], unique=False)

    op.create_table(
        "admin_invitations",
        sa.Column("id", sa.UUID(), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("invite_token", sa.String(length=64), nullable=False),
        sa.Column("role", sa.String(length=32), nullable=False),
        sa.Column("created_by", sa.BigInteger(), nullable=False),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("is_used", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("activated_admin_id", sa.BigInteger(), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("used_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.CheckConstraint(f"role in {ROLE_VALUES}", name="ck_admin_invitations_role"),
    )
    op.create_index(
        "uq_admin_invitations_invite_token",
        "admin_invitations",
        ["invite_token"],
        unique=True,
    )
    op.create_index("ix_admin_invitations_created_by", "admin_invitations", ["created_by"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_admin_invitations_created_by", table_name="admin_invitations")
    op.drop_index("uq_admin_invitations_invite_token", table_name="admin_invitations")
    op.drop_table("admin_invitations")

    op.drop_index("ix_audit_log_action_type", table_name="audit_log")
    op.drop_index("ix_audit_log_admin_id", table_name="audit_log")
    op.drop_table("audit_log")

    op.drop_index("ix_admins_telegram_user_id", table_name="admins")
    op.drop_table("admins")
