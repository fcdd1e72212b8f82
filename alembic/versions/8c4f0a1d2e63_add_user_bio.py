"""add users.bio

Revision ID: 8c4f0a1d2e63
Revises: 5b1e2c7d9a40
Create Date: 2026-10-20 09:41:07.518224

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8c4f0a1d2e63'
down_revision: Union[str, Sequence[str], None] = '5b1e2c7d9a40'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column("users", sa.Column("bio", sa.String(500), nullable=False, server_default=""))

def downgrade() -> None:
    op.drop_column("users", "bio")
