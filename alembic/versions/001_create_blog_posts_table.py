"""Create blog_posts table

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the `blog_posts` table.
How:   Portable column types (String id, JSON author) so the same migration
       runs on PostgreSQL and SQLite.

Rollback: downgrade() drops the table entirely (destructive, all posts are lost).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the blog_posts table. See blogapi/models/post.py for column docs."""
    op.create_table(
        "blog_posts",
        sa.Column(
            "id",
            sa.String(36),
            nullable=False,
            comment="Unique identifier assigned at creation",
        ),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "author",
            sa.JSON(),
            nullable=False,
            comment="Structured author name: {firstName, lastName}",
        ),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("blog_posts")
