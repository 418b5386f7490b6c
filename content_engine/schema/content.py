from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from content_engine.core.database import Base


class ContentCluster(Base):
  __tablename__ = "content_clusters"

  id: Mapped[str] = mapped_column(String, primary_key=True)
  topic: Mapped[str] = mapped_column(Text, nullable=False)
  primary_keyword: Mapped[str] = mapped_column(Text, nullable=False)
  target_audience: Mapped[str | None] = mapped_column(Text, nullable=True)
  language: Mapped[str] = mapped_column(String, nullable=False, default="en")
  article_count: Mapped[int] = mapped_column(Integer, nullable=False)
  stage_plan: Mapped[list] = mapped_column(JSON, nullable=False)
  # Plain JSON keeps key order; JSONB would sort the attempt order away.
  progress: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
  status: Mapped[str] = mapped_column(String, nullable=False, default="draft", index=True)
  created_by: Mapped[str | None] = mapped_column(String, nullable=True)
  created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
  updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class BlogPost(Base):
  __tablename__ = "blog_posts"

  id: Mapped[str] = mapped_column(String, primary_key=True)
  title: Mapped[str] = mapped_column(Text, nullable=False)
  slug: Mapped[str] = mapped_column(String, nullable=False, unique=True)
  content: Mapped[str] = mapped_column(Text, nullable=False)
  excerpt: Mapped[str | None] = mapped_column(Text, nullable=True)
  meta_description: Mapped[str | None] = mapped_column(Text, nullable=True)
  category: Mapped[str | None] = mapped_column(String, nullable=True)
  tags: Mapped[list[str]] = mapped_column(ARRAY(String), nullable=False, default=list)
  funnel_stage: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
  status: Mapped[str] = mapped_column(String, nullable=False, default="draft", index=True)
  group_id: Mapped[str | None] = mapped_column(ForeignKey("content_clusters.id", ondelete="SET NULL"), nullable=True, index=True)
  language: Mapped[str] = mapped_column(String, nullable=False, default="en")
  hreflang: Mapped[str] = mapped_column(String, nullable=False, default="en")
  reading_time: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
  translated_from: Mapped[str | None] = mapped_column(ForeignKey("blog_posts.id", ondelete="SET NULL"), nullable=True, index=True)
  created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
  updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class QaArticle(Base):
  __tablename__ = "qa_articles"

  id: Mapped[str] = mapped_column(String, primary_key=True)
  question: Mapped[str] = mapped_column(Text, nullable=False)
  answer: Mapped[str] = mapped_column(Text, nullable=False)
  slug: Mapped[str] = mapped_column(String, nullable=False, unique=True)
  status: Mapped[str] = mapped_column(String, nullable=False, default="draft")
  group_id: Mapped[str | None] = mapped_column(ForeignKey("content_clusters.id", ondelete="SET NULL"), nullable=True, index=True)
  source_blog_id: Mapped[str | None] = mapped_column(ForeignKey("blog_posts.id", ondelete="CASCADE"), nullable=True, index=True)
  funnel_stage: Mapped[str | None] = mapped_column(String, nullable=True)
  language: Mapped[str] = mapped_column(String, nullable=False, default="en")
  hreflang: Mapped[str] = mapped_column(String, nullable=False, default="en")
  translated_from: Mapped[str | None] = mapped_column(ForeignKey("qa_articles.id", ondelete="SET NULL"), nullable=True)
  created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())


class SiteSettings(Base):
  __tablename__ = "site_settings"

  id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
  master_prompt: Mapped[str | None] = mapped_column(Text, nullable=True)
  brand_voice: Mapped[str | None] = mapped_column(Text, nullable=True)
  mission_statement: Mapped[str | None] = mapped_column(Text, nullable=True)
  eeat_authority_block: Mapped[str | None] = mapped_column(Text, nullable=True)
  speakable_rules: Mapped[str | None] = mapped_column(Text, nullable=True)
  faq_rules: Mapped[str | None] = mapped_column(Text, nullable=True)
  anti_hallucination_rules: Mapped[str | None] = mapped_column(Text, nullable=True)
  updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class Citation(Base):
  __tablename__ = "citations"

  id: Mapped[str] = mapped_column(String, primary_key=True)
  url: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
  title: Mapped[str | None] = mapped_column(Text, nullable=True)
  status: Mapped[str] = mapped_column(String, nullable=False)
  authority_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
  last_checked: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
