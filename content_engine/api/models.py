from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictStr

StageLabel = Literal["TOFU", "MOFU", "BOFU"]


class StagePlanEntry(BaseModel):
  """One stage of a cluster plan."""

  stage: StageLabel
  count: int = Field(ge=1, le=12)
  description: StrictStr | None = Field(default=None, min_length=1, max_length=300, description="Angle for the stage; defaults to the standard description for the funnel stage.")
  model_config = ConfigDict(extra="forbid")


class CreateClusterRequest(BaseModel):
  """Payload for creating a draft cluster."""

  topic: StrictStr = Field(min_length=1, max_length=300, examples=["Email marketing for coaches"])
  primary_keyword: StrictStr = Field(min_length=1, max_length=200, examples=["email marketing"])
  target_audience: StrictStr | None = Field(default=None, min_length=1, max_length=300)
  language: StrictStr = Field(default="en", pattern=r"^[a-z]{2}(-[A-Z]{2})?$")
  stage_plan: list[StagePlanEntry] | None = Field(default=None, min_length=1, max_length=3, description="Custom plan; the default is 3 TOFU, 2 MOFU, 1 BOFU.")
  created_by: StrictStr | None = Field(default=None, max_length=200)
  model_config = ConfigDict(extra="forbid")


class ClusterResponse(BaseModel):
  id: str
  topic: str
  primary_keyword: str
  target_audience: str | None
  language: str
  status: str
  article_count: int
  stage_plan: list[StagePlanEntry]
  progress: dict[str, str]
  created_by: str | None = None
  created_at: datetime | None = None
  updated_at: datetime | None = None


class ClusterGenerationResponse(BaseModel):
  """Outcome of a generation or retry request."""

  cluster_id: str
  success: bool
  status: str
  progress: dict[str, str]
  failures: dict[str, str] = Field(default_factory=dict, description="Failure kind per failed item key.")


class ClusterItemResponse(BaseModel):
  id: str
  title: str
  slug: str
  funnel_stage: str | None
  status: str
  reading_time: int


class FunnelLinkRequest(BaseModel):
  current_funnel_stage: StrictStr | None = None
  category: StrictStr | None = None
  tags: list[StrictStr] = Field(default_factory=list, max_length=50)
  current_slug: StrictStr | None = None
  model_config = ConfigDict(extra="forbid")


class LinkSuggestion(BaseModel):
  id: str
  title: str
  slug: str
  funnel_stage: str | None
  category: str | None
  meta_description: str | None
  relevance_score: int
  link_reason: str


class FunnelLinkResponse(BaseModel):
  suggestions: list[LinkSuggestion]
  strategy: str
  total_found: int


class ArticleFaqResponse(BaseModel):
  success: bool
  count: int


class CitationPayload(BaseModel):
  url: StrictStr = Field(min_length=1, max_length=2048)
  title: StrictStr | None = None


class ValidateCitationsRequest(BaseModel):
  citations: list[CitationPayload] = Field(default_factory=list, max_length=100)
  model_config = ConfigDict(extra="forbid")


class CitationResultPayload(BaseModel):
  url: str
  title: str | None
  status: Literal["valid", "broken", "timeout", "error"]
  status_code: int
  response_time_ms: int
  message: str


class CitationSummaryPayload(BaseModel):
  valid: int = 0
  broken: int = 0
  slow: int = 0
  timeout: int = 0
  error: int = 0


class ValidateCitationsResponse(BaseModel):
  results: list[CitationResultPayload]
  summary: CitationSummaryPayload


class TranslatePostRequest(BaseModel):
  target_language: StrictStr = Field(pattern=r"^[a-z]{2}(-[A-Z]{2})?$", examples=["es"])
  model_config = ConfigDict(extra="forbid")


class TranslatePostResponse(BaseModel):
  success: bool
  translated_post_id: str
  language: str
  faq_count: int
  skipped_faq_ids: list[str] = Field(default_factory=list, description="Source FAQ rows the model could not translate.")


class AuditIssuePayload(BaseModel):
  category: str
  severity: str
  description: str


class PostAuditPayload(BaseModel):
  overall_score: int
  issues: list[AuditIssuePayload]
  has_image: bool
  needs_rewrite: bool
  image_quality: str | None = None
  word_count: int | None = None
  readability_grade: float | None = None
  missing_elements: list[str] = Field(default_factory=list)
  suggested_improvements: list[str] = Field(default_factory=list)
  spelling_errors: list[str] = Field(default_factory=list)
  tone_issues: list[str] = Field(default_factory=list)
  spell_checked: bool = False
  tone_validated: bool = False


class PostAuditResponse(BaseModel):
  post_id: str
  title: str
  status: str
  audit: PostAuditPayload
