from __future__ import annotations

import pytest

from content_engine.ai.errors import GeneratorMalformedOutputError
from content_engine.core.errors import PostNotFoundError
from content_engine.services.audits import audit_post
from content_engine.storage.content_repo import NewBlogPost

pytestmark = pytest.mark.anyio


def _seed(content_store, **overrides) -> str:
  values = {"title": "Email basics", "slug": "email-basics", "content": "word " * 120, "excerpt": "e", "meta_description": "m", "tags": (), "funnel_stage": "TOFU", "group_id": "cluster-1", "reading_time": 1}
  values.update(overrides)
  return content_store.add_post(NewBlogPost(**values))


def _audit_payload(**overrides):
  payload = {
    "overallScore": 72.6,
    "issues": [{"category": "SEO", "severity": "Major", "description": "No internal links."}],
    "hasImage": False,
    "imageQuality": "missing",
    "wordCount": 1800,
    "readabilityGrade": 8.5,
    "missingElements": ["internal_links"],
    "needsRewrite": False,
    "spellChecked": True,
  }
  payload.update(overrides)
  return payload


async def test_audit_is_scored_and_measured(content_store, settings_provider, make_generator) -> None:
  post_id = _seed(content_store, meta_description="", group_id=None)
  generator = make_generator([_audit_payload()])

  report = await audit_post(post_id, content_store=content_store, settings_provider=settings_provider, generator=generator)

  assert report.post_id == post_id
  assert report.status == "draft"
  assert report.audit.overall_score == 73
  assert report.audit.issues[0].severity == "major"
  assert report.audit.word_count == 120
  assert report.audit.missing_elements == ["internal_links", "meta_description", "group_id"]
  assert report.audit.spell_checked is True
  system_prompt, user_prompt, tool = generator.calls[0]
  assert tool.name == "audit_blog_post"
  assert "Brand Voice: Friendly" in system_prompt
  assert "Group ID: MISSING" in user_prompt


async def test_snake_case_audit_is_accepted(content_store, settings_provider, make_generator) -> None:
  post_id = _seed(content_store)
  generator = make_generator([{"overall_score": 90, "issues": [], "has_image": True, "needs_rewrite": False}])

  report = await audit_post(post_id, content_store=content_store, settings_provider=settings_provider, generator=generator)

  assert report.audit.overall_score == 90
  assert report.audit.missing_elements == []


async def test_out_of_range_score_is_malformed(content_store, settings_provider, make_generator) -> None:
  post_id = _seed(content_store)
  generator = make_generator([_audit_payload(overallScore=140)])

  with pytest.raises(GeneratorMalformedOutputError):
    await audit_post(post_id, content_store=content_store, settings_provider=settings_provider, generator=generator)


async def test_missing_post_raises(content_store, settings_provider, make_generator) -> None:
  generator = make_generator()

  with pytest.raises(PostNotFoundError):
    await audit_post("missing", content_store=content_store, settings_provider=settings_provider, generator=generator)

  assert generator.calls == []
