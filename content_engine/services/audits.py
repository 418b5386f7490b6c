"""Score an existing post against the editorial quality checklist."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pydantic import ValidationError

from content_engine.ai.errors import GeneratorMalformedOutputError
from content_engine.ai.pipeline.contracts import PostAudit
from content_engine.ai.pipeline.post_prompts import AUDIT_TOOL, build_audit_system_prompt, build_audit_user_prompt
from content_engine.ai.providers.base import AIModel
from content_engine.core.errors import PostNotFoundError
from content_engine.storage.content_repo import BlogPostRecord, ContentStore, SettingsProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuditReport:
  post_id: str
  title: str
  status: str
  audit: PostAudit


def detect_missing_elements(post: BlogPostRecord) -> list[str]:
  """Elements whose absence is known from the stored row alone."""
  missing = []
  if not (post.meta_description or "").strip():
    missing.append("meta_description")
  if not (post.excerpt or "").strip():
    missing.append("excerpt")
  if post.group_id is None:
    missing.append("group_id")
  return missing


async def audit_post(post_id: str, *, content_store: ContentStore, settings_provider: SettingsProvider, generator: AIModel) -> AuditReport:
  """Audit `post_id`; nothing is written back."""
  post = await content_store.get_post(post_id)
  if post is None:
    raise PostNotFoundError(post_id)

  style = await settings_provider.load_style()
  response = await generator.generate_structured(build_audit_system_prompt(style), build_audit_user_prompt(post), AUDIT_TOOL)
  try:
    audit = PostAudit.model_validate(response.content)
  except ValidationError as exc:
    raise GeneratorMalformedOutputError(f"Audit payload failed validation: {exc.error_count()} errors") from exc

  # Measured values replace the model's estimates.
  missing = list(audit.missing_elements)
  missing.extend(element for element in detect_missing_elements(post) if element not in missing)
  audit = audit.model_copy(update={"word_count": len(post.content.split()), "missing_elements": missing})

  logger.info("Audited post %s score=%s needs_rewrite=%s issues=%s", post_id, audit.overall_score, audit.needs_rewrite, len(audit.issues))
  return AuditReport(post_id=post.id, title=post.title, status=post.status, audit=audit)
