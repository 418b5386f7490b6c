"""Relevance scoring for funnel-aware internal link suggestions."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

MAX_SUGGESTIONS = 5
CANDIDATE_LIMIT = 20
CATEGORY_MATCH_SCORE = 50
TAG_OVERLAP_SCORE = 15

# (current stage, candidate stage) -> bonus; unlisted directions score 0.
STAGE_TRANSITION_BONUS: dict[tuple[str, str], int] = {
  ("TOFU", "MOFU"): 30,
  ("MOFU", "BOFU"): 35,
  ("MOFU", "TOFU"): 25,
  ("BOFU", "MOFU"): 30,
}

TARGET_STAGES: dict[str, tuple[str, ...]] = {
  "TOFU": ("MOFU",),
  "MOFU": ("TOFU", "BOFU"),
  "BOFU": ("MOFU",),
}

LINKING_STRATEGIES: dict[str, str] = {
  "TOFU": "Guide readers from awareness to consideration with these articles:",
  "MOFU": "Provide context with TOFU content and guide to decision with BOFU:",
  "BOFU": "Provide additional context with these consideration-stage articles:",
}

_TRANSITION_REASONS: dict[tuple[str, str], str] = {
  ("TOFU", "MOFU"): "Guides reader to next step in journey",
  ("MOFU", "BOFU"): "Moves reader toward conversion",
  ("MOFU", "TOFU"): "Provides foundational context",
  ("BOFU", "MOFU"): "Adds supporting detail",
}


@dataclass(frozen=True)
class LinkCandidate:
  id: str
  title: str
  slug: str
  funnel_stage: str | None
  category: str | None = None
  tags: tuple[str, ...] = field(default_factory=tuple)
  meta_description: str | None = None


@dataclass(frozen=True)
class ScoredCandidate:
  candidate: LinkCandidate
  score: int
  link_reason: str


def target_stages_for(stage: str | None) -> tuple[str, ...]:
  return TARGET_STAGES.get(stage or "", ())


def linking_strategy(stage: str | None) -> str:
  return LINKING_STRATEGIES.get(stage or "", "")


def categories_match(left: str | None, right: str | None) -> bool:
  """Case-insensitive match; a missing category never matches."""
  if not left or not right:
    return False
  return left.casefold() == right.casefold()


def tag_overlap(candidate_tags: Iterable[str], current_tags: Iterable[str]) -> int:
  """Count candidate tags that also appear in the current item's tags."""
  wanted = {tag.casefold() for tag in current_tags}
  return sum(1 for tag in candidate_tags if tag.casefold() in wanted)


def score_candidate(*, current_stage: str | None, category: str | None, tags: Sequence[str], candidate: LinkCandidate) -> int:
  score = 0
  if categories_match(candidate.category, category):
    score += CATEGORY_MATCH_SCORE
  score += TAG_OVERLAP_SCORE * tag_overlap(candidate.tags, tags)
  score += STAGE_TRANSITION_BONUS.get((current_stage or "", candidate.funnel_stage or ""), 0)
  return score


def link_reason(current_stage: str | None, target_stage: str | None, same_category: bool) -> str:
  reason = _TRANSITION_REASONS.get((current_stage or "", target_stage or ""), "Related content")
  if same_category:
    return f"{reason} (same topic area)"
  return reason


def rank_candidates(*, current_stage: str | None, category: str | None, tags: Sequence[str], candidates: Sequence[LinkCandidate], limit: int = MAX_SUGGESTIONS) -> list[ScoredCandidate]:
  """Score every candidate and return the best `limit`, highest first.

  sorted() is stable, so candidates with equal scores keep the order in
  which the store returned them.
  """
  scored = [
    ScoredCandidate(
      candidate=candidate,
      score=score_candidate(current_stage=current_stage, category=category, tags=tags, candidate=candidate),
      link_reason=link_reason(current_stage, candidate.funnel_stage, categories_match(candidate.category, category)),
    )
    for candidate in candidates
  ]
  ranked = sorted(scored, key=lambda item: item.score, reverse=True)
  return ranked[:limit]
