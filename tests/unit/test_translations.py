from __future__ import annotations

import pytest

from content_engine.ai.errors import GeneratorMalformedOutputError, GeneratorTransportError
from content_engine.core.errors import PostNotFoundError, TranslationConflictError
from content_engine.services.translations import PostTranslator
from content_engine.storage.content_repo import NewBlogPost, NewQaArticle

pytestmark = pytest.mark.anyio

TRANSLATED_POST = {"title": "Conceptos básicos", "content": "Cuerpo traducido", "excerpt": "Extracto", "meta_description": "Meta"}


async def _seed(content_store) -> str:
  post = NewBlogPost(title="Email basics", slug="email-basics", content="Body " * 50, excerpt="e", meta_description="m", tags=("email",), funnel_stage="MOFU", group_id="cluster-1", reading_time=1, category="Marketing")
  post_id = content_store.add_post(post)
  await content_store.insert_faqs(
    [
      NewQaArticle(question="What is email?", answer="Mail.", slug="email-basics-faq-a", group_id="cluster-1", source_blog_id=post_id, funnel_stage="MOFU"),
      NewQaArticle(question="Why email?", answer="Reach.", slug="email-basics-faq-b", group_id="cluster-1", source_blog_id=post_id, funnel_stage="MOFU"),
    ]
  )
  return post_id


def _translator(content_store, settings_provider, generator, sleeps=None):
  recorded = sleeps if sleeps is not None else []

  async def fake_sleep(delay: float) -> None:
    recorded.append(delay)

  return PostTranslator(content_store=content_store, settings_provider=settings_provider, generator=generator, pacing_delay_seconds=1.0, sleep=fake_sleep)


async def test_post_and_faqs_are_translated_into_a_linked_draft(content_store, settings_provider, make_generator) -> None:
  source_id = await _seed(content_store)
  generator = make_generator([TRANSLATED_POST, {"question": "¿Qué es?", "answer": "Correo."}, {"question": "¿Por qué?", "answer": "Alcance."}])
  sleeps: list[float] = []

  result = await _translator(content_store, settings_provider, generator, sleeps).translate(source_id, "es")

  translated = await content_store.get_post(result.translated_post_id)
  assert translated.slug == "es-email-basics"
  assert translated.language == "es"
  assert translated.translated_from == source_id
  assert translated.status == "draft"
  assert (translated.group_id, translated.funnel_stage, translated.category, translated.tags) == ("cluster-1", "MOFU", "Marketing", ("email",))
  assert translated.title == "Conceptos básicos"

  faqs = await content_store.list_faqs_for_post(result.translated_post_id)
  assert [faq.slug for faq in faqs] == ["es-email-basics-faq-a", "es-email-basics-faq-b"]
  assert all(faq.language == "es" and faq.group_id == "cluster-1" for faq in faqs)
  assert [faq.translated_from for faq in content_store.faqs[2:]] == ["faq-1", "faq-2"]
  assert result.faq_count == 2
  assert result.skipped_faq_ids == ()
  assert sleeps == [1.0]
  assert [tool.name for _, _, tool in generator.calls] == ["translate_post", "translate_qa", "translate_qa"]
  assert "to es" in generator.calls[0][0]
  assert "Friendly" in generator.calls[0][0]


async def test_untranslatable_faq_is_skipped(content_store, settings_provider, make_generator) -> None:
  source_id = await _seed(content_store)
  generator = make_generator([TRANSLATED_POST, GeneratorTransportError("gateway down", status_code=500), {"question": "¿Por qué?", "answer": "Alcance."}])

  result = await _translator(content_store, settings_provider, generator).translate(source_id, "es")

  assert result.faq_count == 1
  assert result.skipped_faq_ids == ("faq-1",)


async def test_malformed_post_translation_stores_nothing(content_store, settings_provider, make_generator) -> None:
  source_id = await _seed(content_store)
  generator = make_generator([{"title": "Only a title"}])

  with pytest.raises(GeneratorMalformedOutputError):
    await _translator(content_store, settings_provider, generator).translate(source_id, "es")

  assert len(content_store.posts) == 1
  assert len(generator.calls) == 1


async def test_faq_store_failure_leaves_no_translated_post(content_store, settings_provider, make_generator) -> None:
  source_id = await _seed(content_store)
  content_store.fail_faq_inserts = True
  generator = make_generator([TRANSLATED_POST, {"question": "Q", "answer": "A"}, {"question": "Q", "answer": "A"}])

  with pytest.raises(OSError):
    await _translator(content_store, settings_provider, generator).translate(source_id, "es")

  assert len(content_store.posts) == 1


async def test_second_translation_into_same_language_conflicts(content_store, settings_provider, make_generator) -> None:
  source_id = await _seed(content_store)
  generator = make_generator([TRANSLATED_POST, {"question": "Q", "answer": "A"}, {"question": "Q", "answer": "A"}])
  translator = _translator(content_store, settings_provider, generator)
  await translator.translate(source_id, "es")

  with pytest.raises(TranslationConflictError) as excinfo:
    await translator.translate(source_id, "es")

  assert excinfo.value.language == "es"
  assert len(generator.calls) == 3


async def test_translation_into_source_language_conflicts(content_store, settings_provider, make_generator) -> None:
  source_id = await _seed(content_store)
  generator = make_generator()

  with pytest.raises(TranslationConflictError):
    await _translator(content_store, settings_provider, generator).translate(source_id, "en")

  assert generator.calls == []


async def test_missing_post_raises(content_store, settings_provider, make_generator) -> None:
  with pytest.raises(PostNotFoundError):
    await _translator(content_store, settings_provider, make_generator()).translate("missing", "es")
