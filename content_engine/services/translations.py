"""Translate an existing post and its FAQ rows into another language."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from pydantic import ValidationError

from content_engine.ai.errors import GeneratorError, GeneratorMalformedOutputError
from content_engine.ai.pipeline.contracts import TranslatedFaq, TranslatedPost
from content_engine.ai.pipeline.post_prompts import (
  TRANSLATE_POST_TOOL,
  TRANSLATE_QA_TOOL,
  build_faq_translation_system_prompt,
  build_faq_translation_user_prompt,
  build_translation_system_prompt,
  build_translation_user_prompt,
)
from content_engine.ai.providers.base import AIModel
from content_engine.core.errors import PostNotFoundError, TranslationConflictError
from content_engine.storage.content_repo import ContentStore, NewBlogPost, NewQaArticle, SettingsProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TranslationResult:
  translated_post_id: str
  language: str
  faq_count: int
  skipped_faq_ids: tuple[str, ...] = ()


def translated_slug(language: str, slug: str) -> str:
  return f"{language.lower()}-{slug}"


class PostTranslator:
  """Create a draft copy of a post in another language.

  The post is translated first; a malformed post translation aborts the run.
  Each FAQ row is then translated one call at a time with a pause in between.
  A FAQ the model cannot translate is skipped and reported. The new post and
  its translated FAQs are stored in one transaction, linked to their sources
  through `translated_from`.
  """

  def __init__(self, *, content_store: ContentStore, settings_provider: SettingsProvider, generator: AIModel, pacing_delay_seconds: float = 1.0, sleep: Callable[[float], Awaitable[None]] = asyncio.sleep) -> None:
    self._content_store = content_store
    self._settings_provider = settings_provider
    self._generator = generator
    self._pacing_delay_seconds = pacing_delay_seconds
    self._sleep = sleep

  async def translate(self, post_id: str, target_language: str) -> TranslationResult:
    source = await self._content_store.get_post(post_id)
    if source is None:
      raise PostNotFoundError(post_id)
    if source.language == target_language:
      raise TranslationConflictError(post_id, target_language, f"Blog post {post_id} is already in '{target_language}'.")

    slug = translated_slug(target_language, source.slug)
    existing = await self._content_store.get_post_by_slug(slug)
    if existing is not None:
      raise TranslationConflictError(post_id, target_language, f"Blog post {post_id} already has a '{target_language}' translation ({existing.id}).")

    style = await self._settings_provider.load_style()
    response = await self._generator.generate_structured(build_translation_system_prompt(target_language, style), build_translation_user_prompt(source), TRANSLATE_POST_TOOL)
    try:
      translated = TranslatedPost.model_validate(response.content)
    except ValidationError as exc:
      raise GeneratorMalformedOutputError(f"Translated post failed validation: {exc.error_count()} errors") from exc

    source_faqs = await self._content_store.list_faqs_for_post(source.id)
    faqs: list[NewQaArticle] = []
    skipped: list[str] = []
    for position, faq in enumerate(source_faqs):
      if position > 0 and self._pacing_delay_seconds > 0:
        await self._sleep(self._pacing_delay_seconds)
      try:
        faq_response = await self._generator.generate_structured(build_faq_translation_system_prompt(target_language), build_faq_translation_user_prompt(faq), TRANSLATE_QA_TOOL)
        translated_faq = TranslatedFaq.model_validate(faq_response.content)
      except (GeneratorError, ValidationError) as exc:
        logger.warning("Skipping FAQ %s of post %s for %s: %s", faq.id, post_id, target_language, exc)
        skipped.append(faq.id)
        continue
      faqs.append(
        NewQaArticle(
          question=translated_faq.question,
          answer=translated_faq.answer,
          slug=translated_slug(target_language, faq.slug),
          group_id=source.group_id,
          language=target_language,
          funnel_stage=faq.funnel_stage,
          translated_from=faq.id,
        )
      )

    post = NewBlogPost(
      title=translated.title,
      slug=slug,
      content=translated.content,
      excerpt=translated.excerpt,
      meta_description=translated.meta_description,
      tags=source.tags,
      funnel_stage=source.funnel_stage,
      group_id=source.group_id,
      reading_time=source.reading_time,
      language=target_language,
      category=source.category,
      translated_from=source.id,
    )
    new_post_id, faq_ids = await self._content_store.insert_post_with_faqs(post, faqs)
    logger.info("Translated post %s to %s as %s with %s FAQs (%s skipped)", post_id, target_language, new_post_id, len(faq_ids), len(skipped))
    return TranslationResult(translated_post_id=new_post_id, language=target_language, faq_count=len(faq_ids), skipped_faq_ids=tuple(skipped))
