"""Funnel-aware internal link suggestions."""

from __future__ import annotations

import logging

from content_engine.api.models import FunnelLinkRequest, FunnelLinkResponse, LinkSuggestion
from content_engine.linking.scorer import CANDIDATE_LIMIT, LinkCandidate, linking_strategy, rank_candidates, target_stages_for
from content_engine.storage.content_repo import ContentStore

logger = logging.getLogger(__name__)


async def suggest_funnel_links(request: FunnelLinkRequest, store: ContentStore) -> FunnelLinkResponse:
  """Rank published posts in the adjacent funnel stages for linking from the current post."""
  stages = target_stages_for(request.current_funnel_stage)
  posts = await store.find_link_candidates(stages=stages, exclude_slug=request.current_slug, limit=CANDIDATE_LIMIT)
  candidates = [LinkCandidate(id=post.id, title=post.title, slug=post.slug, funnel_stage=post.funnel_stage, category=post.category, tags=post.tags, meta_description=post.meta_description) for post in posts]

  ranked = rank_candidates(current_stage=request.current_funnel_stage, category=request.category, tags=request.tags, candidates=candidates)
  logger.info("Link suggestions stage=%s candidates=%s returned=%s", request.current_funnel_stage, len(candidates), len(ranked))

  suggestions = [
    LinkSuggestion(
      id=item.candidate.id,
      title=item.candidate.title,
      slug=item.candidate.slug,
      funnel_stage=item.candidate.funnel_stage,
      category=item.candidate.category,
      meta_description=item.candidate.meta_description,
      relevance_score=item.score,
      link_reason=item.link_reason,
    )
    for item in ranked
  ]
  return FunnelLinkResponse(suggestions=suggestions, strategy=linking_strategy(request.current_funnel_stage), total_found=len(candidates))
