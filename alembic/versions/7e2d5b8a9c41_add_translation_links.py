"""Link translated posts and FAQ rows to their sources.

Revision ID: 7e2d5b8a9c41
Revises: 4c1e9a7d2b10
Create Date: 2026-10-18
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "7e2d5b8a9c41"
down_revision = "4c1e9a7d2b10"
branch_labels = None
depends_on = None


def upgrade() -> None:
  """Upgrade schema."""
  op.add_column("blog_posts", sa.Column("translated_from", sa.String(), nullable=True))
  op.create_foreign_key("fk_blog_posts_translated_from", "blog_posts", "blog_posts", ["translated_from"], ["id"], ondelete="SET NULL")
  op.create_index(op.f("ix_blog_posts_translated_from"), "blog_posts", ["translated_from"], unique=False)

  op.add_column("qa_articles", sa.Column("translated_from", sa.String(), nullable=True))
  op.create_foreign_key("fk_qa_articles_translated_from", "qa_articles", "qa_articles", ["translated_from"], ["id"], ondelete="SET NULL")


def downgrade() -> None:
  """Downgrade schema."""
  op.drop_constraint("fk_qa_articles_translated_from", "qa_articles", type_="foreignkey")
  op.drop_column("qa_articles", "translated_from")
  op.drop_index(op.f("ix_blog_posts_translated_from"), table_name="blog_posts")
  op.drop_constraint("fk_blog_posts_translated_from", "blog_posts", type_="foreignkey")
  op.drop_column("blog_posts", "translated_from")
