"""Validated shapes of generator output."""

from __future__ import annotations

import re

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictStr, field_validator
from pydantic.alias_generators import to_camel

_SLUG_INVALID_RE = re.compile(r"[^a-z0-9]+")


def normalize_slug(raw: str) -> str:
  """Lowercase and hyphenate a model-suggested slug."""
  return _SLUG_INVALID_RE.sub("-", raw.lower()).strip("-")


class GeneratedFaq(BaseModel):
  """A question/answer pair produced alongside an article."""

  model_config = ConfigDict(str_strip_whitespace=True)

  question: StrictStr = Field(min_length=1)
  answer: StrictStr = Field(min_length=1)


class GeneratedArticle(BaseModel):
  """Arguments of the create_blog_post tool call."""

  model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

  title: StrictStr = Field(min_length=1)
  slug: StrictStr = Field(min_length=1)
  content: StrictStr = Field(min_length=1)
  excerpt: StrictStr
  meta_description: StrictStr = Field(validation_alias=AliasChoices("meta_description", "metaDescription"))
  tags: list[StrictStr]
  faqs: list[GeneratedFaq]

  @field_validator("slug")
  @classmethod
  def _normalize_slug(cls, value: str) -> str:
    slug = normalize_slug(value)
    if not slug:
      raise ValueError("slug must contain at least one letter or digit")
    return slug


class FaqBatch(BaseModel):
  """Arguments of the generate_faqs tool call."""

  faqs: list[GeneratedFaq] = Field(min_length=1)


class TranslatedPost(BaseModel):
  """Arguments of the translate_post tool call."""

  model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

  title: StrictStr = Field(min_length=1)
  content: StrictStr = Field(min_length=1)
  excerpt: StrictStr
  meta_description: StrictStr = Field(validation_alias=AliasChoices("meta_description", "metaDescription"))


class TranslatedFaq(GeneratedFaq):
  """Arguments of the translate_qa tool call."""


class AuditIssue(BaseModel):
  category: StrictStr = "General"
  severity: StrictStr = "minor"
  description: StrictStr = ""

  @field_validator("severity", mode="before")
  @classmethod
  def _lower_severity(cls, value: object) -> object:
    return value.strip().lower() if isinstance(value, str) else value


class PostAudit(BaseModel):
  """Arguments of the audit_blog_post tool call.

  The model answers in camelCase; snake_case is accepted as well.
  """

  model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

  overall_score: int = Field(ge=0, le=100)
  issues: list[AuditIssue]
  has_image: bool
  needs_rewrite: bool
  image_quality: StrictStr | None = None
  word_count: int | None = Field(default=None, ge=0)
  readability_grade: float | None = None
  missing_elements: list[StrictStr] = Field(default_factory=list)
  suggested_improvements: list[StrictStr] = Field(default_factory=list)
  spelling_errors: list[StrictStr] = Field(default_factory=list)
  tone_issues: list[StrictStr] = Field(default_factory=list)
  spell_checked: bool = False
  tone_validated: bool = False

  @field_validator("overall_score", mode="before")
  @classmethod
  def _round_score(cls, value: object) -> object:
    # Scores arrive as JSON numbers, sometimes with a fraction.
    if isinstance(value, float):
      return round(value)
    return value
