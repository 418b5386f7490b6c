from __future__ import annotations

import pytest

from content_engine.ai.errors import GeneratorMalformedOutputError
from content_engine.core.errors import PostNotFoundError
from content_engine.services.faqs import generate_article_faqs
from content_engine.storage.content_repo import NewBlogPost

pytestmark = pytest.mark.anyio


def _seed_post(content_store) -> str:
  post = NewBlogPost(title="Email basics", slug="email-basics-1", content="Body " * 50, excerpt="e", meta_description="m", tags=("email",), funnel_stage="TOFU", group_id="cluster-1", reading_time=1, language="fr")
  return content_store.add_post(post)


async def test_faqs_are_stored_against_the_post(content_store, settings_provider, make_generator) -> None:
  post_id = _seed_post(content_store)
  generator = make_generator([{"faqs": [{"question": "Q1", "answer": "A1"}, {"question": "Q2", "answer": "A2"}]}])

  count = await generate_article_faqs(post_id, content_store=content_store, settings_provider=settings_provider, generator=generator, token_factory=lambda: "99")

  assert count == 2
  assert [faq.slug for faq in content_store.faqs] == ["email-basics-1-faq-1-99", "email-basics-1-faq-2-99"]
  assert all(faq.source_blog_id == post_id and faq.group_id == "cluster-1" and faq.language == "fr" and faq.status == "draft" for faq in content_store.faqs)
  system_prompt, user_prompt, tool = generator.calls[0]
  assert tool.name == "generate_faqs"
  assert "Title: Email basics" in user_prompt
  assert "Write clearly." in system_prompt


async def test_missing_post_raises(content_store, settings_provider, make_generator) -> None:
  generator = make_generator()

  with pytest.raises(PostNotFoundError):
    await generate_article_faqs("missing", content_store=content_store, settings_provider=settings_provider, generator=generator)

  assert generator.calls == []


async def test_empty_faq_list_is_malformed(content_store, settings_provider, make_generator) -> None:
  post_id = _seed_post(content_store)

  with pytest.raises(GeneratorMalformedOutputError):
    await generate_article_faqs(post_id, content_store=content_store, settings_provider=settings_provider, generator=make_generator([{"faqs": []}]))

  assert content_store.faqs == []
