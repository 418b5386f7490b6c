"""Shared fixtures: environment, in-memory stores and a scripted generator."""

from __future__ import annotations

import os

os.environ.setdefault("CONTENT_ENGINE_ALLOWED_ORIGINS", "http://localhost:3000")
os.environ.setdefault("CONTENT_ENGINE_ADMIN_TOKEN", "test-admin-token")
os.environ.setdefault("CONTENT_ENGINE_AI_GATEWAY_KEY", "test-gateway-key")
os.environ.setdefault("CONTENT_ENGINE_PACING_DELAY_SECONDS", "0")
os.environ.setdefault("CONTENT_ENGINE_TRANSLATION_PACING_SECONDS", "0")
os.environ.setdefault("CONTENT_ENGINE_LOG_DIR", os.path.join(os.path.dirname(__file__), ".logs"))

from collections.abc import Callable, Sequence  # noqa: E402
from dataclasses import replace  # noqa: E402
from datetime import datetime  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from content_engine.ai.providers.base import AIModel, StructuredModelResponse, ToolSpec  # noqa: E402
from content_engine.clusters.models import DEFAULT_STAGE_PLAN, ClusterRecord, StyleProfile  # noqa: E402
from content_engine.main import app  # noqa: E402
from content_engine.storage.content_repo import BlogPostRecord, NewBlogPost, NewQaArticle, QaArticleRecord  # noqa: E402

ADMIN_HEADERS = {"x-admin-token": "test-admin-token"}


@pytest.fixture
def anyio_backend() -> str:
  return "asyncio"


class InMemoryClusterStore:
  """Cluster store that keeps every progress write for inspection."""

  def __init__(self) -> None:
    self.clusters: dict[str, ClusterRecord] = {}
    self.writes: list[tuple[str | None, dict[str, str]]] = []
    self.fail_updates = False
    self.fail_on_update: int | None = None
    self.update_calls = 0

  async def create_cluster(self, record: ClusterRecord) -> None:
    self.clusters[record.cluster_id] = replace(record, progress=dict(record.progress), created_at=record.created_at or datetime(2026, 1, 1))

  async def get_cluster(self, cluster_id: str) -> ClusterRecord | None:
    record = self.clusters.get(cluster_id)
    return replace(record, progress=dict(record.progress)) if record else None

  async def list_clusters(self, *, limit: int = 50) -> list[ClusterRecord]:
    return list(self.clusters.values())[:limit]

  async def update_cluster(self, cluster_id: str, *, status: str | None = None, progress: dict[str, str] | None = None) -> ClusterRecord | None:
    self.update_calls += 1
    if self.fail_updates or self.update_calls == self.fail_on_update:
      raise OSError("store unavailable")
    record = self.clusters.get(cluster_id)
    if record is None:
      return None
    if status is not None:
      record.status = status
    if progress is not None:
      record.progress = dict(progress)
    self.writes.append((status, dict(record.progress)))
    return await self.get_cluster(cluster_id)

  async def transition_status(self, cluster_id: str, *, expected: str, target: str) -> ClusterRecord | None:
    record = self.clusters.get(cluster_id)
    if record is None or record.status != expected:
      return None
    record.status = target
    return await self.get_cluster(cluster_id)


class InMemoryContentStore:
  """Content store whose post and FAQ inserts are all-or-nothing."""

  def __init__(self) -> None:
    self.posts: list[NewBlogPost] = []
    self.faqs: list[NewQaArticle] = []
    self.records: dict[str, BlogPostRecord] = {}
    self.faq_records: dict[str, QaArticleRecord] = {}
    self.fail_post_inserts = False
    self.fail_faq_inserts = False
    self._post_counter = 0

  def add_post(self, post: NewBlogPost, *, status: str | None = None) -> str:
    """Seed a post directly, bypassing failure flags."""
    if any(existing.slug == post.slug for existing in self.posts):
      raise OSError(f"duplicate slug {post.slug}")
    self._post_counter += 1
    post_id = f"post-{self._post_counter}"
    self.posts.append(post)
    self.records[post_id] = BlogPostRecord(
      id=post_id,
      title=post.title,
      slug=post.slug,
      content=post.content,
      status=status or post.status,
      funnel_stage=post.funnel_stage,
      category=post.category,
      tags=post.tags,
      meta_description=post.meta_description,
      excerpt=post.excerpt,
      group_id=post.group_id,
      language=post.language,
      reading_time=post.reading_time,
      translated_from=post.translated_from,
    )
    return post_id

  async def insert_post_with_faqs(self, post: NewBlogPost, faqs: Sequence[NewQaArticle]) -> tuple[str, list[str]]:
    if self.fail_post_inserts:
      raise OSError("insert failed")
    if self.fail_faq_inserts and faqs:
      # Raised before anything is kept, as a rolled back transaction would.
      raise OSError("faq insert failed")
    post_id = self.add_post(post)
    return post_id, self._store_faqs([replace(faq, source_blog_id=post_id) for faq in faqs])

  async def insert_faqs(self, faqs: Sequence[NewQaArticle]) -> list[str]:
    if self.fail_faq_inserts:
      raise OSError("faq insert failed")
    return self._store_faqs(list(faqs))

  def _store_faqs(self, faqs: list[NewQaArticle]) -> list[str]:
    ids = []
    for faq in faqs:
      faq_id = f"faq-{len(self.faqs) + 1}"
      self.faqs.append(faq)
      self.faq_records[faq_id] = QaArticleRecord(id=faq_id, question=faq.question, answer=faq.answer, slug=faq.slug, status=faq.status, group_id=faq.group_id, source_blog_id=faq.source_blog_id, funnel_stage=faq.funnel_stage, language=faq.language)
      ids.append(faq_id)
    return ids

  async def list_faqs_for_post(self, post_id: str) -> list[QaArticleRecord]:
    return [record for record in self.faq_records.values() if record.source_blog_id == post_id]

  async def get_post(self, post_id: str) -> BlogPostRecord | None:
    return self.records.get(post_id)

  async def get_post_by_slug(self, slug: str) -> BlogPostRecord | None:
    return next((record for record in self.records.values() if record.slug == slug), None)

  async def list_posts_for_cluster(self, group_id: str) -> list[BlogPostRecord]:
    return [record for record in self.records.values() if record.group_id == group_id]

  async def find_link_candidates(self, *, stages: Sequence[str], exclude_slug: str | None, limit: int = 20) -> list[BlogPostRecord]:
    matches = [record for record in self.records.values() if record.status == "published" and record.funnel_stage in stages and record.slug != exclude_slug]
    return matches[:limit]


class StaticSettingsProvider:
  def __init__(self, style: StyleProfile | None = None, error: BaseException | None = None) -> None:
    self.style = style or StyleProfile()
    self.error = error
    self.calls = 0

  async def load_style(self) -> StyleProfile:
    self.calls += 1
    if self.error is not None:
      raise self.error
    return self.style


class InMemoryCitationStore:
  def __init__(self) -> None:
    self.rows: dict[str, dict[str, Any]] = {}

  async def upsert_citation(self, *, url: str, title: str | None, status: str, authority_score: int, checked_at: datetime) -> None:
    self.rows[url] = {"title": title, "status": status, "authority_score": authority_score, "last_checked": checked_at}


class ScriptedGenerator(AIModel):
  """Replays queued payloads or exceptions, one per call."""

  name = "scripted"

  def __init__(self, script: Sequence[dict[str, Any] | BaseException] | None = None, default: Callable[[int], dict[str, Any]] | None = None) -> None:
    self.script = list(script or [])
    self.default = default
    self.calls: list[tuple[str, str, ToolSpec]] = []

  async def generate_structured(self, system_prompt: str, user_prompt: str, tool: ToolSpec) -> StructuredModelResponse:
    self.calls.append((system_prompt, user_prompt, tool))
    if self.script:
      step = self.script.pop(0)
    elif self.default is not None:
      step = self.default(len(self.calls))
    else:
      raise AssertionError("ScriptedGenerator ran out of responses")
    if isinstance(step, BaseException):
      raise step
    return StructuredModelResponse(content=step)


def article_payload(index: int = 1, **overrides: Any) -> dict[str, Any]:
  payload = {
    "title": f"Article {index}",
    "slug": f"article-{index}",
    "content": " ".join(["word"] * 400),
    "excerpt": "Short excerpt.",
    "meta_description": "Meta description.",
    "tags": ["email", "marketing"],
    "faqs": [{"question": "What is it?", "answer": "It is a thing."}, {"question": "Why?", "answer": "Because."}],
  }
  payload.update(overrides)
  return payload


def draft_cluster(cluster_id: str = "cluster-1", **overrides: Any) -> ClusterRecord:
  values: dict[str, Any] = {
    "cluster_id": cluster_id,
    "topic": "Email marketing for coaches",
    "primary_keyword": "email marketing",
    "target_audience": None,
    "stage_plan": DEFAULT_STAGE_PLAN,
    "status": "draft",
    "progress": {},
  }
  values.update(overrides)
  return ClusterRecord(**values)


@pytest.fixture
def cluster_store() -> InMemoryClusterStore:
  return InMemoryClusterStore()


@pytest.fixture
def content_store() -> InMemoryContentStore:
  return InMemoryContentStore()


@pytest.fixture
def settings_provider() -> StaticSettingsProvider:
  return StaticSettingsProvider(StyleProfile(master_prompt="Write clearly.", brand_voice="Friendly"))


@pytest.fixture
def citation_store() -> InMemoryCitationStore:
  return InMemoryCitationStore()


@pytest.fixture
def make_generator() -> Callable[..., ScriptedGenerator]:
  return ScriptedGenerator


@pytest.fixture
def make_article() -> Callable[..., dict[str, Any]]:
  return article_payload


@pytest.fixture
def make_cluster() -> Callable[..., ClusterRecord]:
  return draft_cluster


@pytest.fixture
def admin_headers() -> dict[str, str]:
  return dict(ADMIN_HEADERS)


@pytest.fixture
async def async_client():
  async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
    yield client
  app.dependency_overrides.clear()


@pytest.fixture
def make_settings_provider() -> Callable[..., StaticSettingsProvider]:
  return StaticSettingsProvider
