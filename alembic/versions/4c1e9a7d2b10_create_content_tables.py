"""Create content cluster, post, FAQ, site settings and citation tables.

Revision ID: 4c1e9a7d2b10
Revises:
Create Date: 2026-10-18
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = "4c1e9a7d2b10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
  """Upgrade schema."""
  op.create_table(
    "content_clusters",
    sa.Column("id", sa.String(), nullable=False),
    sa.Column("topic", sa.Text(), nullable=False),
    sa.Column("primary_keyword", sa.Text(), nullable=False),
    sa.Column("target_audience", sa.Text(), nullable=True),
    sa.Column("language", sa.String(), nullable=False),
    sa.Column("article_count", sa.Integer(), nullable=False),
    sa.Column("stage_plan", sa.JSON(), nullable=False),
    sa.Column("progress", sa.JSON(), nullable=False),
    sa.Column("status", sa.String(), nullable=False),
    sa.Column("created_by", sa.String(), nullable=True),
    sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    sa.PrimaryKeyConstraint("id"),
  )
  op.create_index(op.f("ix_content_clusters_status"), "content_clusters", ["status"], unique=False)

  op.create_table(
    "blog_posts",
    sa.Column("id", sa.String(), nullable=False),
    sa.Column("title", sa.Text(), nullable=False),
    sa.Column("slug", sa.String(), nullable=False),
    sa.Column("content", sa.Text(), nullable=False),
    sa.Column("excerpt", sa.Text(), nullable=True),
    sa.Column("meta_description", sa.Text(), nullable=True),
    sa.Column("category", sa.String(), nullable=True),
    sa.Column("tags", postgresql.ARRAY(sa.String()), nullable=False),
    sa.Column("funnel_stage", sa.String(), nullable=True),
    sa.Column("status", sa.String(), nullable=False),
    sa.Column("group_id", sa.String(), nullable=True),
    sa.Column("language", sa.String(), nullable=False),
    sa.Column("hreflang", sa.String(), nullable=False),
    sa.Column("reading_time", sa.Integer(), nullable=False),
    sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    sa.ForeignKeyConstraint(["group_id"], ["content_clusters.id"], ondelete="SET NULL"),
    sa.PrimaryKeyConstraint("id"),
    sa.UniqueConstraint("slug"),
  )
  op.create_index(op.f("ix_blog_posts_funnel_stage"), "blog_posts", ["funnel_stage"], unique=False)
  op.create_index(op.f("ix_blog_posts_status"), "blog_posts", ["status"], unique=False)
  op.create_index(op.f("ix_blog_posts_group_id"), "blog_posts", ["group_id"], unique=False)

  op.create_table(
    "qa_articles",
    sa.Column("id", sa.String(), nullable=False),
    sa.Column("question", sa.Text(), nullable=False),
    sa.Column("answer", sa.Text(), nullable=False),
    sa.Column("slug", sa.String(), nullable=False),
    sa.Column("status", sa.String(), nullable=False),
    sa.Column("group_id", sa.String(), nullable=True),
    sa.Column("source_blog_id", sa.String(), nullable=True),
    sa.Column("funnel_stage", sa.String(), nullable=True),
    sa.Column("language", sa.String(), nullable=False),
    sa.Column("hreflang", sa.String(), nullable=False),
    sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    sa.ForeignKeyConstraint(["group_id"], ["content_clusters.id"], ondelete="SET NULL"),
    sa.ForeignKeyConstraint(["source_blog_id"], ["blog_posts.id"], ondelete="CASCADE"),
    sa.PrimaryKeyConstraint("id"),
    sa.UniqueConstraint("slug"),
  )
  op.create_index(op.f("ix_qa_articles_group_id"), "qa_articles", ["group_id"], unique=False)
  op.create_index(op.f("ix_qa_articles_source_blog_id"), "qa_articles", ["source_blog_id"], unique=False)

  op.create_table(
    "site_settings",
    sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
    sa.Column("master_prompt", sa.Text(), nullable=True),
    sa.Column("brand_voice", sa.Text(), nullable=True),
    sa.Column("mission_statement", sa.Text(), nullable=True),
    sa.Column("eeat_authority_block", sa.Text(), nullable=True),
    sa.Column("speakable_rules", sa.Text(), nullable=True),
    sa.Column("faq_rules", sa.Text(), nullable=True),
    sa.Column("anti_hallucination_rules", sa.Text(), nullable=True),
    sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    sa.PrimaryKeyConstraint("id"),
  )

  op.create_table(
    "citations",
    sa.Column("id", sa.String(), nullable=False),
    sa.Column("url", sa.Text(), nullable=False),
    sa.Column("title", sa.Text(), nullable=True),
    sa.Column("status", sa.String(), nullable=False),
    sa.Column("authority_score", sa.Integer(), nullable=False),
    sa.Column("last_checked", sa.DateTime(timezone=True), nullable=True),
    sa.PrimaryKeyConstraint("id"),
    sa.UniqueConstraint("url"),
  )


def downgrade() -> None:
  """Downgrade schema."""
  op.drop_table("citations")
  op.drop_table("site_settings")
  op.drop_index(op.f("ix_qa_articles_source_blog_id"), table_name="qa_articles")
  op.drop_index(op.f("ix_qa_articles_group_id"), table_name="qa_articles")
  op.drop_table("qa_articles")
  op.drop_index(op.f("ix_blog_posts_group_id"), table_name="blog_posts")
  op.drop_index(op.f("ix_blog_posts_status"), table_name="blog_posts")
  op.drop_index(op.f("ix_blog_posts_funnel_stage"), table_name="blog_posts")
  op.drop_table("blog_posts")
  op.drop_index(op.f("ix_content_clusters_status"), table_name="content_clusters")
  op.drop_table("content_clusters")
