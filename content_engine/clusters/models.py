"""Domain models for content clusters and their stage plans."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

ClusterStatus = Literal["draft", "generating", "complete", "error"]
ItemStatus = Literal["generating", "complete", "error"]
FunnelStage = Literal["TOFU", "MOFU", "BOFU"]

FUNNEL_STAGES: tuple[str, ...] = ("TOFU", "MOFU", "BOFU")
DEFAULT_TARGET_AUDIENCE = "business owners, coaches, consultants"

STAGE_DESCRIPTIONS: dict[str, str] = {
  "TOFU": "educational awareness content",
  "MOFU": "solution comparison and evaluation content",
  "BOFU": "decision-focused content with clear CTAs",
}


@dataclass(frozen=True)
class StageSpec:
  """One entry of a stage plan: which funnel stage, how many items, and the angle to write from."""

  label: str
  count: int
  description: str


DEFAULT_STAGE_PLAN: tuple[StageSpec, ...] = (
  StageSpec(label="TOFU", count=3, description=STAGE_DESCRIPTIONS["TOFU"]),
  StageSpec(label="MOFU", count=2, description=STAGE_DESCRIPTIONS["MOFU"]),
  StageSpec(label="BOFU", count=1, description=STAGE_DESCRIPTIONS["BOFU"]),
)


@dataclass(frozen=True)
class PlanSlot:
  """A single item position in the plan, numbered continuously across stages."""

  index: int
  key: str
  stage: StageSpec


@dataclass(frozen=True)
class StyleProfile:
  """Brand voice and editorial rules shared by every prompt in a batch."""

  master_prompt: str | None = None
  brand_voice: str | None = None
  mission_statement: str | None = None
  eeat_authority_block: str | None = None
  speakable_rules: str | None = None
  faq_rules: str | None = None
  anti_hallucination_rules: str | None = None


@dataclass
class ClusterRecord:
  """Represents a persisted content cluster."""

  cluster_id: str
  topic: str
  primary_keyword: str
  target_audience: str | None
  stage_plan: tuple[StageSpec, ...]
  status: ClusterStatus
  progress: dict[str, str] = field(default_factory=dict)
  language: str = "en"
  created_by: str | None = None
  created_at: datetime | None = None
  updated_at: datetime | None = None

  @property
  def article_count(self) -> int:
    return plan_total(self.stage_plan)


def item_key(index: int) -> str:
  """Return the progress key for a 1-indexed plan slot."""
  if index < 1:
    raise ValueError("Plan slots are 1-indexed.")
  return f"article_{index}"


def plan_total(plan: Iterable[StageSpec]) -> int:
  return sum(stage.count for stage in plan)


def iter_slots(plan: Sequence[StageSpec]) -> Iterator[PlanSlot]:
  """Yield slots in stage order, then slot order within the stage."""
  index = 0
  for stage in plan:
    for _ in range(stage.count):
      index += 1
      yield PlanSlot(index=index, key=item_key(index), stage=stage)


def validate_stage_plan(plan: Sequence[StageSpec], *, max_items: int) -> tuple[StageSpec, ...]:
  """Check a plan before it is stored and return it as an immutable tuple."""
  if not plan:
    raise ValueError("Stage plan must contain at least one stage.")

  for stage in plan:
    if stage.label not in FUNNEL_STAGES:
      raise ValueError(f"Unknown funnel stage '{stage.label}'.")
    if stage.count < 1:
      raise ValueError(f"Stage {stage.label} must plan at least one item.")
    if not stage.description.strip():
      raise ValueError(f"Stage {stage.label} needs a description.")

  total = plan_total(plan)
  if total > max_items:
    raise ValueError(f"Stage plan requests {total} items; the limit is {max_items}.")

  return tuple(plan)


def stage_plan_to_json(plan: Iterable[StageSpec]) -> list[dict[str, Any]]:
  return [{"stage": stage.label, "count": stage.count, "description": stage.description} for stage in plan]


def stage_plan_from_json(raw: Sequence[Mapping[str, Any]] | None) -> tuple[StageSpec, ...]:
  """Rebuild a stored plan; rows written before plans were stored fall back to the default."""
  if not raw:
    return DEFAULT_STAGE_PLAN
  return tuple(StageSpec(label=str(entry["stage"]), count=int(entry["count"]), description=str(entry.get("description") or STAGE_DESCRIPTIONS.get(str(entry["stage"]), ""))) for entry in raw)


def aggregate_status(progress: Mapping[str, str]) -> ClusterStatus:
  """Collapse per-item states into the cluster's terminal status."""
  if any(state == "error" for state in progress.values()):
    return "error"
  return "complete"


def failed_keys(progress: Mapping[str, str]) -> list[str]:
  return [key for key, state in progress.items() if state == "error"]
