"""Storage interfaces for generated posts, FAQ rows, style settings and citations."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from content_engine.clusters.models import StyleProfile


@dataclass(frozen=True)
class NewBlogPost:
  title: str
  slug: str
  content: str
  excerpt: str
  meta_description: str
  tags: tuple[str, ...]
  funnel_stage: str | None
  group_id: str | None
  reading_time: int
  language: str = "en"
  status: str = "draft"
  category: str | None = None
  translated_from: str | None = None


@dataclass(frozen=True)
class NewQaArticle:
  question: str
  answer: str
  slug: str
  group_id: str | None
  # Left as None when the store links the row to a post it inserts alongside.
  source_blog_id: str | None = None
  language: str = "en"
  funnel_stage: str | None = None
  status: str = "draft"
  translated_from: str | None = None


@dataclass(frozen=True)
class BlogPostRecord:
  """Read model for an existing blog post."""

  id: str
  title: str
  slug: str
  content: str
  status: str
  funnel_stage: str | None = None
  category: str | None = None
  tags: tuple[str, ...] = field(default_factory=tuple)
  meta_description: str | None = None
  excerpt: str | None = None
  group_id: str | None = None
  language: str = "en"
  reading_time: int = 0
  translated_from: str | None = None


@dataclass(frozen=True)
class QaArticleRecord:
  id: str
  question: str
  answer: str
  slug: str
  status: str
  group_id: str | None = None
  source_blog_id: str | None = None
  funnel_stage: str | None = None
  language: str = "en"


class ContentStore(Protocol):
  """Repository contract for blog posts and their FAQ rows."""

  async def insert_post_with_faqs(self, post: NewBlogPost, faqs: Sequence[NewQaArticle]) -> tuple[str, list[str]]:
    """Insert a post and its FAQ rows in one transaction.

    Returns the post id and the FAQ ids in input order. Each FAQ row is linked
    to the new post. Nothing is stored when any row fails, and duplicate slugs
    must fail.
    """

  async def insert_faqs(self, faqs: Sequence[NewQaArticle]) -> list[str]:
    """Insert FAQ rows for existing posts and return their ids in input order."""

  async def list_faqs_for_post(self, post_id: str) -> list[QaArticleRecord]:
    """Return the FAQ rows whose source is `post_id`, oldest first."""

  async def get_post(self, post_id: str) -> BlogPostRecord | None:
    """Fetch a post by identifier."""

  async def get_post_by_slug(self, slug: str) -> BlogPostRecord | None:
    """Fetch a post by its unique slug."""

  async def list_posts_for_cluster(self, group_id: str) -> list[BlogPostRecord]:
    """Return the posts generated for a cluster, oldest first."""

  async def find_link_candidates(self, *, stages: Sequence[str], exclude_slug: str | None, limit: int = 20) -> list[BlogPostRecord]:
    """Return published posts in the given stages, skipping `exclude_slug`."""


class SettingsProvider(Protocol):
  """Read-only source of the shared style configuration."""

  async def load_style(self) -> StyleProfile:
    """Return the current style profile; an empty profile when none is configured."""


class CitationStore(Protocol):
  async def upsert_citation(self, *, url: str, title: str | None, status: str, authority_score: int, checked_at: datetime) -> None:
    """Insert or update the citation row keyed by URL."""
