"""FAQ generation for an existing blog post."""

from __future__ import annotations

import logging
from collections.abc import Callable

from pydantic import ValidationError

from content_engine.ai.errors import GeneratorMalformedOutputError
from content_engine.ai.pipeline.contracts import FaqBatch
from content_engine.ai.providers.base import AIModel
from content_engine.clusters.prompts import FAQ_TOOL, build_faq_system_prompt, build_faq_user_prompt
from content_engine.core.errors import PostNotFoundError
from content_engine.storage.content_repo import ContentStore, NewQaArticle, SettingsProvider
from content_engine.utils.ids import slug_token

logger = logging.getLogger(__name__)


async def generate_article_faqs(post_id: str, *, content_store: ContentStore, settings_provider: SettingsProvider, generator: AIModel, token_factory: Callable[[], str] = slug_token) -> int:
  """Generate FAQ rows for `post_id` and return how many were stored."""
  post = await content_store.get_post(post_id)
  if post is None:
    raise PostNotFoundError(post_id)

  style = await settings_provider.load_style()
  response = await generator.generate_structured(build_faq_system_prompt(style), build_faq_user_prompt(title=post.title, content=post.content), FAQ_TOOL)

  try:
    batch = FaqBatch.model_validate(response.content)
  except ValidationError as exc:
    raise GeneratorMalformedOutputError(f"FAQ payload failed validation: {exc.error_count()} errors") from exc

  token = token_factory()
  faqs = [
    NewQaArticle(question=faq.question, answer=faq.answer, slug=f"{post.slug}-faq-{index}-{token}", group_id=post.group_id, source_blog_id=post.id, language=post.language or "en", funnel_stage=post.funnel_stage)
    for index, faq in enumerate(batch.faqs, start=1)
  ]
  ids = await content_store.insert_faqs(faqs)
  logger.info("Stored %s FAQs for post %s", len(ids), post_id)
  return len(ids)
