"""add category_id to posts

Revision ID: e41c7a9d2b15
Revises:
Create Date: 2026-10-12 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'e41c7a9d2b15'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Add numeric category_id column next to the legacy category string."""
    op.add_column('posts', sa.Column('category_id', sa.Integer(), nullable=True))
    op.create_index('ix_posts_category_id', 'posts', ['category_id'])


def downgrade() -> None:
    """Remove category_id column from posts table."""
    op.drop_index('ix_posts_category_id', table_name='posts')
    op.drop_column('posts', 'category_id')
