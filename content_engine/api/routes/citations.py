from fastapi import APIRouter, Depends

from content_engine.api.deps import get_citation_store
from content_engine.api.models import CitationResultPayload, CitationSummaryPayload, ValidateCitationsRequest, ValidateCitationsResponse
from content_engine.config import Settings, get_settings
from content_engine.core.security import require_admin_token
from content_engine.services.citations import validate_citations
from content_engine.storage.content_repo import CitationStore

router = APIRouter(dependencies=[Depends(require_admin_token)])


@router.post("/validate", response_model=ValidateCitationsResponse)
async def validate(  # noqa: B008
  request: ValidateCitationsRequest,
  settings: Settings = Depends(get_settings),  # noqa: B008
  store: CitationStore = Depends(get_citation_store),  # noqa: B008
) -> ValidateCitationsResponse:
  """Check citation URLs and record their health."""
  report = await validate_citations([(citation.url, citation.title) for citation in request.citations], store=store, timeout=settings.citation_timeout_seconds)
  results = [CitationResultPayload(url=r.url, title=r.title, status=r.status, status_code=r.status_code, response_time_ms=r.response_time_ms, message=r.message) for r in report.results]
  summary = report.summary
  return ValidateCitationsResponse(results=results, summary=CitationSummaryPayload(valid=summary.valid, broken=summary.broken, slow=summary.slow, timeout=summary.timeout, error=summary.error))
