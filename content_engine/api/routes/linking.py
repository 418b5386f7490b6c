from fastapi import APIRouter, Depends

from content_engine.api.deps import get_content_store
from content_engine.api.models import FunnelLinkRequest, FunnelLinkResponse
from content_engine.services.linking import suggest_funnel_links
from content_engine.storage.content_repo import ContentStore

router = APIRouter()


@router.post("/funnel-suggestions", response_model=FunnelLinkResponse)
async def funnel_suggestions(request: FunnelLinkRequest, store: ContentStore = Depends(get_content_store)) -> FunnelLinkResponse:  # noqa: B008
  """Suggest published posts in the neighbouring funnel stages."""
  return await suggest_funnel_links(request, store)
