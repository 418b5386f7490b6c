"""Turn one plan slot into a stored blog post and its FAQ rows."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

from pydantic import ValidationError

from content_engine.ai.errors import GeneratorError
from content_engine.ai.pipeline.contracts import GeneratedArticle
from content_engine.ai.providers.base import AIModel
from content_engine.clusters.models import ClusterRecord, PlanSlot
from content_engine.clusters.prompts import ARTICLE_TOOL, build_article_system_prompt, build_article_user_prompt
from content_engine.core.database import STORE_ERRORS
from content_engine.storage.content_repo import ContentStore, NewBlogPost, NewQaArticle
from content_engine.utils.ids import short_suffix, slug_token

logger = logging.getLogger(__name__)

FailureKind = Literal["generator", "schema", "persistence", "internal"]

WORDS_PER_MINUTE = 200


def reading_time_minutes(content: str) -> int:
  """Estimate reading time at 200 words per minute, rounded up."""
  return math.ceil(len(content.split()) / WORDS_PER_MINUTE)


@dataclass(frozen=True)
class ItemRequest:
  """Everything the pipeline needs for one slot."""

  cluster: ClusterRecord
  slot: PlanSlot
  total_items: int
  master_prompt: str


@dataclass(frozen=True)
class ItemOutcome:
  ok: bool
  post_id: str | None = None
  faq_ids: tuple[str, ...] = ()
  failure: FailureKind | None = None
  reason: str | None = None

  @classmethod
  def succeeded(cls, post_id: str, faq_ids: list[str]) -> ItemOutcome:
    return cls(ok=True, post_id=post_id, faq_ids=tuple(faq_ids))

  @classmethod
  def failed(cls, failure: FailureKind, reason: str) -> ItemOutcome:
    return cls(ok=False, failure=failure, reason=reason)


class ItemPipeline:
  """Generate, validate and persist a single article.

  Failures are returned as an ItemOutcome rather than raised, tagged with
  which stage failed so the caller can log them apart.
  """

  def __init__(self, *, generator: AIModel, content_store: ContentStore, token_factory: Callable[[], str] = slug_token, faq_suffix: Callable[[], str] = short_suffix) -> None:
    self._generator = generator
    self._content_store = content_store
    self._token_factory = token_factory
    self._faq_suffix = faq_suffix

  async def run(self, request: ItemRequest) -> ItemOutcome:
    cluster = request.cluster
    stage = request.slot.stage
    system_prompt = build_article_system_prompt(
      request.master_prompt,
      slot_index=request.slot.index,
      total_items=request.total_items,
      topic=cluster.topic,
      stage_label=stage.label,
      stage_description=stage.description,
      primary_keyword=cluster.primary_keyword,
      target_audience=cluster.target_audience,
    )
    user_prompt = build_article_user_prompt(slot_index=request.slot.index, total_items=request.total_items, topic=cluster.topic, stage_label=stage.label, primary_keyword=cluster.primary_keyword)

    try:
      response = await self._generator.generate_structured(system_prompt, user_prompt, ARTICLE_TOOL)
    except GeneratorError as exc:
      return ItemOutcome.failed("generator", f"{exc.reason}: {exc}")

    try:
      article = GeneratedArticle.model_validate(response.content)
    except ValidationError as exc:
      fields = sorted({".".join(str(part) for part in error["loc"]) for error in exc.errors()})
      return ItemOutcome.failed("schema", f"invalid fields: {', '.join(fields)}")

    slug = f"{article.slug}-{self._token_factory()}"
    post = NewBlogPost(
      title=article.title,
      slug=slug,
      content=article.content,
      excerpt=article.excerpt,
      meta_description=article.meta_description,
      tags=tuple(article.tags),
      funnel_stage=stage.label,
      group_id=cluster.cluster_id,
      reading_time=reading_time_minutes(article.content),
      language=cluster.language,
    )

    faqs = [
      NewQaArticle(question=faq.question, answer=faq.answer, slug=f"{slug}-faq-{self._faq_suffix()}", group_id=cluster.cluster_id, language=cluster.language, funnel_stage=stage.label)
      for faq in article.faqs
    ]

    # The post and its FAQs are stored together or not at all.
    try:
      post_id, faq_ids = await self._content_store.insert_post_with_faqs(post, faqs)
    except STORE_ERRORS as exc:
      logger.error("Persisting %s for cluster %s failed", slug, cluster.cluster_id, exc_info=True)
      return ItemOutcome.failed("persistence", f"{type(exc).__name__}: {exc}")

    logger.info("Stored post %s (%s) with %s FAQs for cluster %s", post_id, slug, len(faq_ids), cluster.cluster_id)
    return ItemOutcome.succeeded(post_id, faq_ids)
