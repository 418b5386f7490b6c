"""Postgres-backed repositories for posts, FAQ rows, site settings and citations."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from content_engine.clusters.models import StyleProfile
from content_engine.core.database import get_session_factory
from content_engine.schema.content import BlogPost, Citation, QaArticle, SiteSettings
from content_engine.storage.content_repo import BlogPostRecord, CitationStore, ContentStore, NewBlogPost, NewQaArticle, QaArticleRecord, SettingsProvider
from content_engine.utils.ids import generate_record_id


def _require_session_factory(session_factory: async_sessionmaker[AsyncSession] | None) -> async_sessionmaker[AsyncSession]:
  resolved = session_factory or get_session_factory()
  if resolved is None:
    raise RuntimeError("Database not initialized")
  return resolved


class PostgresContentStore(ContentStore):
  """Persist generated posts and FAQ rows."""

  def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None) -> None:
    self._session_factory = _require_session_factory(session_factory)

  async def insert_post_with_faqs(self, post: NewBlogPost, faqs: Sequence[NewQaArticle]) -> tuple[str, list[str]]:
    post_id = generate_record_id()
    faq_ids = [generate_record_id() for _ in faqs]
    async with self._session_factory() as session:
      session.add(
        BlogPost(
          id=post_id,
          title=post.title,
          slug=post.slug,
          content=post.content,
          excerpt=post.excerpt,
          meta_description=post.meta_description,
          category=post.category,
          tags=list(post.tags),
          funnel_stage=post.funnel_stage,
          status=post.status,
          group_id=post.group_id,
          language=post.language,
          hreflang=post.language,
          reading_time=post.reading_time,
          translated_from=post.translated_from,
        )
      )
      # The post row must exist before the FAQ foreign keys are checked.
      await session.flush()
      session.add_all([self._faq_model(faq_id, faq, source_blog_id=post_id) for faq_id, faq in zip(faq_ids, faqs, strict=True)])
      await session.commit()
    return post_id, faq_ids

  async def insert_faqs(self, faqs: Sequence[NewQaArticle]) -> list[str]:
    if not faqs:
      return []
    ids = [generate_record_id() for _ in faqs]
    async with self._session_factory() as session:
      session.add_all([self._faq_model(faq_id, faq, source_blog_id=faq.source_blog_id) for faq_id, faq in zip(ids, faqs, strict=True)])
      await session.commit()
    return ids

  async def list_faqs_for_post(self, post_id: str) -> list[QaArticleRecord]:
    stmt = select(QaArticle).where(QaArticle.source_blog_id == post_id).order_by(QaArticle.created_at, QaArticle.id)
    async with self._session_factory() as session:
      result = await session.execute(stmt)
      rows = result.scalars().all()
    return [
      QaArticleRecord(id=row.id, question=row.question, answer=row.answer, slug=row.slug, status=row.status, group_id=row.group_id, source_blog_id=row.source_blog_id, funnel_stage=row.funnel_stage, language=row.language)
      for row in rows
    ]

  async def get_post(self, post_id: str) -> BlogPostRecord | None:
    async with self._session_factory() as session:
      row = await session.get(BlogPost, post_id)
      if row is None:
        return None
      return self._model_to_record(row)

  async def get_post_by_slug(self, slug: str) -> BlogPostRecord | None:
    async with self._session_factory() as session:
      result = await session.execute(select(BlogPost).where(BlogPost.slug == slug))
      row = result.scalar_one_or_none()
      return self._model_to_record(row) if row is not None else None

  async def list_posts_for_cluster(self, group_id: str) -> list[BlogPostRecord]:
    async with self._session_factory() as session:
      stmt = select(BlogPost).where(BlogPost.group_id == group_id).order_by(BlogPost.created_at, BlogPost.id)
      result = await session.execute(stmt)
      return [self._model_to_record(row) for row in result.scalars().all()]

  async def find_link_candidates(self, *, stages: Sequence[str], exclude_slug: str | None, limit: int = 20) -> list[BlogPostRecord]:
    if not stages:
      return []
    stmt = select(BlogPost).where(BlogPost.status == "published", BlogPost.funnel_stage.in_(list(stages)))
    if exclude_slug:
      stmt = stmt.where(BlogPost.slug != exclude_slug)
    # Newest first; the scorer keeps this order for equal scores.
    stmt = stmt.order_by(BlogPost.created_at.desc(), BlogPost.id).limit(limit)
    async with self._session_factory() as session:
      result = await session.execute(stmt)
      return [self._model_to_record(row) for row in result.scalars().all()]

  @staticmethod
  def _faq_model(faq_id: str, faq: NewQaArticle, *, source_blog_id: str | None) -> QaArticle:
    return QaArticle(
      id=faq_id,
      question=faq.question,
      answer=faq.answer,
      slug=faq.slug,
      status=faq.status,
      group_id=faq.group_id,
      source_blog_id=source_blog_id,
      funnel_stage=faq.funnel_stage,
      language=faq.language,
      hreflang=faq.language,
      translated_from=faq.translated_from,
    )

  @staticmethod
  def _model_to_record(row: BlogPost) -> BlogPostRecord:
    return BlogPostRecord(
      id=row.id,
      title=row.title,
      slug=row.slug,
      content=row.content,
      status=row.status,
      funnel_stage=row.funnel_stage,
      category=row.category,
      tags=tuple(row.tags or ()),
      meta_description=row.meta_description,
      excerpt=row.excerpt,
      group_id=row.group_id,
      language=row.language,
      reading_time=row.reading_time,
      translated_from=row.translated_from,
    )


class PostgresSettingsProvider(SettingsProvider):
  """Read the single site_settings row."""

  def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None) -> None:
    self._session_factory = _require_session_factory(session_factory)

  async def load_style(self) -> StyleProfile:
    async with self._session_factory() as session:
      result = await session.execute(select(SiteSettings).order_by(SiteSettings.id).limit(1))
      row = result.scalar_one_or_none()
    if row is None:
      return StyleProfile()
    return StyleProfile(
      master_prompt=row.master_prompt,
      brand_voice=row.brand_voice,
      mission_statement=row.mission_statement,
      eeat_authority_block=row.eeat_authority_block,
      speakable_rules=row.speakable_rules,
      faq_rules=row.faq_rules,
      anti_hallucination_rules=row.anti_hallucination_rules,
    )


class PostgresCitationStore(CitationStore):
  def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None) -> None:
    self._session_factory = _require_session_factory(session_factory)

  async def upsert_citation(self, *, url: str, title: str | None, status: str, authority_score: int, checked_at: datetime) -> None:
    stmt = pg_insert(Citation).values(id=generate_record_id(), url=url, title=title, status=status, authority_score=authority_score, last_checked=checked_at)
    stmt = stmt.on_conflict_do_update(index_elements=[Citation.url], set_={"title": stmt.excluded.title, "status": stmt.excluded.status, "authority_score": stmt.excluded.authority_score, "last_checked": stmt.excluded.last_checked})
    async with self._session_factory() as session:
      await session.execute(stmt)
      await session.commit()
