"""Prompt builders and tool schemas for translating and auditing existing posts."""

from __future__ import annotations

from content_engine.ai.providers.base import ToolSpec
from content_engine.clusters.models import StyleProfile
from content_engine.storage.content_repo import BlogPostRecord, QaArticleRecord

DEFAULT_AUDIT_VOICE = "Intelligent, visionary, empowering, culturally resonant"

TRANSLATE_POST_TOOL = ToolSpec(
  name="translate_post",
  description="Return translated blog post fields",
  parameters={
    "type": "object",
    "properties": {
      "title": {"type": "string"},
      "excerpt": {"type": "string"},
      "meta_description": {"type": "string"},
      "content": {"type": "string"},
    },
    "required": ["title", "content", "excerpt", "meta_description"],
    "additionalProperties": False,
  },
)

TRANSLATE_QA_TOOL = ToolSpec(
  name="translate_qa",
  description="Return translated Q&A",
  parameters={"type": "object", "properties": {"question": {"type": "string"}, "answer": {"type": "string"}}, "required": ["question", "answer"], "additionalProperties": False},
)

_STRING_LIST = {"type": "array", "items": {"type": "string"}}

AUDIT_TOOL = ToolSpec(
  name="audit_blog_post",
  description="Return blog post audit results",
  parameters={
    "type": "object",
    "properties": {
      "overallScore": {"type": "number"},
      "issues": {
        "type": "array",
        "items": {"type": "object", "properties": {"category": {"type": "string"}, "severity": {"type": "string"}, "description": {"type": "string"}}},
      },
      "hasImage": {"type": "boolean"},
      "imageQuality": {"type": "string"},
      "wordCount": {"type": "number"},
      "readabilityGrade": {"type": "number"},
      "missingElements": _STRING_LIST,
      "needsRewrite": {"type": "boolean"},
      "suggestedImprovements": _STRING_LIST,
      "spellingErrors": _STRING_LIST,
      "toneIssues": _STRING_LIST,
      "spellChecked": {"type": "boolean"},
      "toneValidated": {"type": "boolean"},
    },
    "required": ["overallScore", "issues", "hasImage", "needsRewrite"],
    "additionalProperties": False,
  },
)


def build_translation_system_prompt(target_language: str, style: StyleProfile) -> str:
  prompt = (
    f"You are a professional translator. Translate the following blog post to {target_language}. "
    "Preserve all markdown formatting, links, and structure. Do not translate brand names, URLs, or technical terms. "
    "Maintain the same tone and style."
  )
  if style.brand_voice and style.brand_voice.strip():
    return f"{prompt}\n\n{style.brand_voice.strip()}"
  return prompt


def build_translation_user_prompt(post: BlogPostRecord) -> str:
  return f"Translate this blog post:\n\nTitle: {post.title}\nExcerpt: {post.excerpt or ''}\nMeta Description: {post.meta_description or ''}\nContent:\n{post.content}"


def build_faq_translation_system_prompt(target_language: str) -> str:
  return f"Translate this Q&A to {target_language}. Keep it concise."


def build_faq_translation_user_prompt(faq: QaArticleRecord) -> str:
  return f"Question: {faq.question}\nAnswer: {faq.answer}"


def build_audit_system_prompt(style: StyleProfile) -> str:
  """List the audit criteria; the brand voice comes from site settings when set."""
  voice = style.brand_voice.strip() if style.brand_voice and style.brand_voice.strip() else DEFAULT_AUDIT_VOICE
  criteria = [
    "Visual & Readability: Short paragraphs (2-4 lines), proper headers, white space",
    "Structure: Engaging intro, logical flow, FAQ/takeaways, strong CTA",
    f"Brand Voice: {voice}",
    "SEO/AEO: Meta description, semantic keywords, internal/external links, EEAT",
    "Technical: Grammar, 1500-2000 words, readability <= 9, alt text for images",
    "Spell-Check: Flag any spelling errors found in the content",
    "Professional Tone: Flag any informal, unprofessional, or overly casual language",
    "Group ID: Check if the article belongs to a content cluster",
    "Citations: Check for at least 3 authoritative citations",
    "Hreflang: Check if hreflang is set for translated content",
  ]
  numbered = "\n".join(f"{index}. {line}" for index, line in enumerate(criteria, start=1))
  return (
    "You are the Content Quality Auditor. Analyze the following blog post against these standards:\n\n"
    f"{numbered}\n\n"
    "Score the post from 0 to 100 and return the results by calling audit_blog_post. "
    "Use categories Visual, Structure, Voice, SEO, Technical, Spelling or Tone and severities critical, major or minor for each issue."
  )


def build_audit_user_prompt(post: BlogPostRecord) -> str:
  lines = [
    f"Title: {post.title}",
    f"Excerpt: {post.excerpt or 'N/A'}",
    f"Content: {post.content}",
    f"Meta Description: {post.meta_description or 'N/A'}",
    f"Funnel Stage: {post.funnel_stage or 'N/A'}",
    f"Category: {post.category or 'N/A'}",
    f"Group ID: {post.group_id or 'MISSING'}",
    f"Language: {post.language or 'en'}",
    f"Translated From: {post.translated_from or 'N/A'}",
  ]
  return "\n".join(lines)
