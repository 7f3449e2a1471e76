"""create record store tables

Revision ID: 5b7e0c2d9a14
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5b7e0c2d9a14"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _table_exists(table_name: str) -> bool:
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    return table_name in inspector.get_table_names()


def upgrade() -> None:
    # AUTO_CREATE_TABLES may already have created these on a dev database.
    if not _table_exists("verified_users"):
        op.create_table(
            "verified_users",
            sa.Column("id", sa.String(length=96), nullable=False),
            sa.Column("user_id", sa.String(length=32), nullable=False),
            sa.Column("username", sa.String(length=255), nullable=False),
            sa.Column("discriminator", sa.String(length=8), server_default="0", nullable=False),
            sa.Column("avatar_url", sa.String(length=512), nullable=True),
            sa.Column("email", sa.String(length=320), nullable=True),
            sa.Column("access_token", sa.Text(), nullable=False),
            sa.Column("refresh_token", sa.Text(), nullable=True),
            sa.Column("token_type", sa.String(length=32), server_default="Bearer", nullable=False),
            sa.Column("scope", sa.String(length=255), nullable=True),
            sa.Column("server_id", sa.String(length=64), nullable=False),
            sa.Column("verified_at", sa.DateTime(timezone=True), nullable=False),
            sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
            sa.Column(
                "created_at",
                sa.DateTime(timezone=True),
                server_default=sa.func.now(),
                nullable=False,
            ),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_verified_users_user_id", "verified_users", ["user_id"])
        op.create_index("ix_verified_users_server_id", "verified_users", ["server_id"])
        op.create_index("ix_verified_users_verified_at", "verified_users", ["verified_at"])

    if not _table_exists("bot_commands"):
        op.create_table(
            "bot_commands",
            sa.Column("id", sa.String(length=64), nullable=False),
            sa.Column("command_type", sa.String(length=32), nullable=False),
            sa.Column("server_id", sa.String(length=64), nullable=False),
            sa.Column("admin_user_id", sa.String(length=64), nullable=False),
            sa.Column("verification_url", sa.String(length=2048), nullable=True),
            sa.Column(
                "created_at",
                sa.DateTime(timezone=True),
                server_default=sa.func.now(),
                nullable=False,
            ),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_bot_commands_command_type", "bot_commands", ["command_type"])
        op.create_index("ix_bot_commands_server_id", "bot_commands", ["server_id"])

    if not _table_exists("admin_sessions"):
        op.create_table(
            "admin_sessions",
            sa.Column("id", sa.String(length=64), nullable=False),
            sa.Column("key_fingerprint", sa.String(length=64), nullable=False),
            sa.Column("is_owner", sa.Boolean(), server_default="false", nullable=False),
            sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
            sa.Column(
                "created_at",
                sa.DateTime(timezone=True),
                server_default=sa.func.now(),
                nullable=False,
            ),
            sa.PrimaryKeyConstraint("id"),
        )


def downgrade() -> None:
    op.drop_table("admin_sessions")
    op.drop_index("ix_bot_commands_server_id", table_name="bot_commands")
    op.drop_index("ix_bot_commands_command_type", table_name="bot_commands")
    op.drop_table("bot_commands")
    op.drop_index("ix_verified_users_verified_at", table_name="verified_users")
    op.drop_index("ix_verified_users_server_id", table_name="verified_users")
    op.drop_index("ix_verified_users_user_id", table_name="verified_users")
    op.drop_table("verified_users")
