import logging

from fastapi import APIRouter, Depends

from content_engine.ai.providers.base import AIModel
from content_engine.api.deps import get_content_store, get_generator, get_settings_provider
from content_engine.api.models import ArticleFaqResponse, PostAuditPayload, PostAuditResponse, TranslatePostRequest, TranslatePostResponse
from content_engine.config import Settings, get_settings
from content_engine.core.security import require_admin_token
from content_engine.services.audits import audit_post
from content_engine.services.faqs import generate_article_faqs
from content_engine.services.translations import PostTranslator
from content_engine.storage.content_repo import ContentStore, SettingsProvider

router = APIRouter(dependencies=[Depends(require_admin_token)])
logger = logging.getLogger("content_engine.api.routes.posts")


@router.post("/{post_id}/faqs", response_model=ArticleFaqResponse)
async def create_post_faqs(  # noqa: B008
  post_id: str,
  content_store: ContentStore = Depends(get_content_store),  # noqa: B008
  settings_provider: SettingsProvider = Depends(get_settings_provider),  # noqa: B008
  generator: AIModel = Depends(get_generator),  # noqa: B008
) -> ArticleFaqResponse:
  """Generate FAQ entries for an existing post."""
  count = await generate_article_faqs(post_id, content_store=content_store, settings_provider=settings_provider, generator=generator)
  return ArticleFaqResponse(success=True, count=count)


@router.post("/{post_id}/translate", response_model=TranslatePostResponse)
async def translate_post(  # noqa: B008
  post_id: str,
  request: TranslatePostRequest,
  settings: Settings = Depends(get_settings),  # noqa: B008
  content_store: ContentStore = Depends(get_content_store),  # noqa: B008
  settings_provider: SettingsProvider = Depends(get_settings_provider),  # noqa: B008
  generator: AIModel = Depends(get_generator),  # noqa: B008
) -> TranslatePostResponse:
  """Create a draft translation of a post and its FAQs."""
  logger.info("Translation of post %s to %s requested", post_id, request.target_language)
  translator = PostTranslator(content_store=content_store, settings_provider=settings_provider, generator=generator, pacing_delay_seconds=settings.translation_pacing_seconds)
  result = await translator.translate(post_id, request.target_language)
  return TranslatePostResponse(success=True, translated_post_id=result.translated_post_id, language=result.language, faq_count=result.faq_count, skipped_faq_ids=list(result.skipped_faq_ids))


@router.post("/{post_id}/audit", response_model=PostAuditResponse)
async def audit_existing_post(  # noqa: B008
  post_id: str,
  content_store: ContentStore = Depends(get_content_store),  # noqa: B008
  settings_provider: SettingsProvider = Depends(get_settings_provider),  # noqa: B008
  generator: AIModel = Depends(get_generator),  # noqa: B008
) -> PostAuditResponse:
  report = await audit_post(post_id, content_store=content_store, settings_provider=settings_provider, generator=generator)
  return PostAuditResponse(post_id=report.post_id, title=report.title, status=report.status, audit=PostAuditPayload(**report.audit.model_dump()))
