"""Prompt builders and tool schemas for article and FAQ generation."""

from __future__ import annotations

from content_engine.ai.providers.base import ToolSpec
from content_engine.clusters.models import DEFAULT_TARGET_AUDIENCE, StyleProfile

FAQ_SOURCE_CHAR_LIMIT = 4000
ARTICLE_FAQ_COUNT = 4

_FAQ_ITEM_SCHEMA = {"type": "object", "properties": {"question": {"type": "string"}, "answer": {"type": "string"}}, "required": ["question", "answer"]}

ARTICLE_TOOL = ToolSpec(
  name="create_blog_post",
  description="Create a blog post with structured data",
  parameters={
    "type": "object",
    "properties": {
      "title": {"type": "string"},
      "slug": {"type": "string"},
      "content": {"type": "string"},
      "excerpt": {"type": "string"},
      "meta_description": {"type": "string"},
      "tags": {"type": "array", "items": {"type": "string"}},
      "faqs": {"type": "array", "items": _FAQ_ITEM_SCHEMA},
    },
    "required": ["title", "slug", "content", "excerpt", "meta_description", "tags", "faqs"],
    "additionalProperties": False,
  },
)

FAQ_TOOL = ToolSpec(
  name="generate_faqs",
  description=f"Return {ARTICLE_FAQ_COUNT} FAQ Q&A pairs",
  parameters={"type": "object", "properties": {"faqs": {"type": "array", "items": _FAQ_ITEM_SCHEMA}}, "required": ["faqs"], "additionalProperties": False},
)


def build_master_prompt(style: StyleProfile) -> str:
  """Join the configured style blocks; unset blocks are left out."""
  labelled = [
    (None, style.master_prompt),
    ("Brand Voice", style.brand_voice),
    ("Mission", style.mission_statement),
    ("EEAT", style.eeat_authority_block),
    ("Speakable Rules", style.speakable_rules),
    ("FAQ Rules", style.faq_rules),
    ("Anti-hallucination", style.anti_hallucination_rules),
  ]
  parts: list[str] = []
  for label, value in labelled:
    if not value or not value.strip():
      continue
    parts.append(value.strip() if label is None else f"{label}: {value.strip()}")
  return "\n\n".join(parts)


def build_article_system_prompt(master_prompt: str, *, slot_index: int, total_items: int, topic: str, stage_label: str, stage_description: str, primary_keyword: str, target_audience: str | None) -> str:
  audience = target_audience or DEFAULT_TARGET_AUDIENCE
  lines = [
    f'You are writing article {slot_index} of {total_items} in a content cluster about "{topic}".',
    f"Funnel Stage: {stage_label} ({stage_description})",
    f"Primary Keyword: {primary_keyword}",
    f"Target Audience: {audience}",
    "",
    "Requirements:",
    "- 1500-2000 words",
    "- Use markdown formatting",
    "- Include 5-8 AEO FAQ questions and answers at the end",
    "- Include an EEAT authority block",
    "- Include a speakable summary (40-60 words)",
    "- Use question-based H2 headers",
    "- Start with a direct answer",
  ]
  body = "\n".join(lines)
  if master_prompt:
    return f"{master_prompt}\n\n{body}"
  return body


def build_article_user_prompt(*, slot_index: int, total_items: int, topic: str, stage_label: str, primary_keyword: str) -> str:
  return (
    f'Write a complete {stage_label} blog post about "{topic}" focusing on "{primary_keyword}". '
    f"This is article {slot_index}/{total_items} in the cluster. Make it unique from other articles in this cluster.\n\n"
    "Return the content by calling create_blog_post with title, slug, content, excerpt, meta_description, tags and faqs."
  )


def build_faq_system_prompt(style: StyleProfile) -> str:
  parts = [
    f"You are an FAQ generation expert. Generate {ARTICLE_FAQ_COUNT} contextual Q&A pairs based on the article content. "
    "Each answer must be 80-120 words, starting with a direct answer, using plain language at 8th-9th grade reading level."
  ]
  for block in (style.faq_rules, style.master_prompt):
    if block and block.strip():
      parts.append(block.strip())
  return "\n\n".join(parts)


def build_faq_user_prompt(*, title: str, content: str) -> str:
  return f"Generate {ARTICLE_FAQ_COUNT} FAQ Q&A pairs for this article:\n\nTitle: {title}\n\nContent:\n{content[:FAQ_SOURCE_CHAR_LIMIT]}"
