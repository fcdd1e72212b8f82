"""create users + backup codes

Revision ID: 5b1e2c7d9a40
Revises:
Create Date: 2026-10-19 10:12:41.382117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5b1e2c7d9a40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("role", sa.Enum("user", "admin", name="roleenum"), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("reset_otp", sa.String(6), nullable=True),
        sa.Column("reset_otp_expiry", sa.DateTime(), nullable=True),
        sa.Column("authenticator_secret", sa.String(64), nullable=True),
        sa.Column("is_authenticator_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint(
            "is_authenticator_enabled = 0 OR authenticator_secret IS NOT NULL",
            name="ck_users_enabled_has_secret",
        ),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # backup_codes
    op.create_table(
        "backup_codes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("code", sa.String(8), nullable=False),
        sa.Column("used", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("used_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_backup_codes_user_id", "backup_codes", ["user_id"])

def downgrade() -> None:
    op.drop_index("ix_backup_codes_user_id", table_name="backup_codes")
    op.drop_table("backup_codes")

    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
