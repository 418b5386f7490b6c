"""Batch orchestrator that drives a cluster's stage plan to a terminal status."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from content_engine.clusters.models import ClusterRecord, ClusterStatus, StyleProfile, failed_keys, iter_slots, plan_total
from content_engine.clusters.pipeline import ItemOutcome, ItemPipeline, ItemRequest
from content_engine.clusters.progress import ClusterProgressTracker
from content_engine.clusters.prompts import build_master_prompt
from content_engine.core.database import STORE_ERRORS
from content_engine.core.errors import ClusterGenerationError, ClusterNotFoundError, ClusterStateError
from content_engine.storage.clusters_repo import ClusterStore
from content_engine.storage.content_repo import SettingsProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreparedBatch:
  """A cluster already moved to `generating`, with its style snapshot."""

  cluster: ClusterRecord
  style: StyleProfile
  retry: bool = False

  @property
  def pending_keys(self) -> list[str]:
    """Keys this batch will attempt, in plan order."""
    slots = iter_slots(self.cluster.stage_plan)
    if not self.retry:
      return [slot.key for slot in slots]
    return [slot.key for slot in slots if self.cluster.progress.get(slot.key) != "complete"]


@dataclass(frozen=True)
class ClusterGenerationResult:
  cluster_id: str
  success: bool
  status: ClusterStatus
  progress: dict[str, str]
  failures: dict[str, str] = field(default_factory=dict)


class ClusterOrchestrator:
  """Generate every planned item of a cluster, one at a time.

  `begin` performs the checks that may abort a run: the cluster must exist,
  the style settings must load, and the status compare-and-set must win.
  `execute` then attempts each slot in plan order. A failing item is recorded
  as `error` and the batch moves on; only progress-store faults stop it, and
  a stopped batch is left in `error` whenever the store accepts one last write.
  """

  def __init__(self, *, cluster_store: ClusterStore, settings_provider: SettingsProvider, pipeline: ItemPipeline, pacing_delay_seconds: float = 3.0, sleep: Callable[[float], Awaitable[None]] = asyncio.sleep) -> None:
    self._clusters = cluster_store
    self._settings_provider = settings_provider
    self._pipeline = pipeline
    self._pacing_delay_seconds = pacing_delay_seconds
    self._sleep = sleep

  async def run(self, cluster_id: str, *, retry_failed: bool = False) -> ClusterGenerationResult:
    """Start and run a batch to completion."""
    batch = await self.begin(cluster_id, retry_failed=retry_failed)
    return await self.execute(batch)

  async def begin(self, cluster_id: str, *, retry_failed: bool = False) -> PreparedBatch:
    expected: ClusterStatus = "error" if retry_failed else "draft"

    try:
      cluster = await self._clusters.get_cluster(cluster_id)
    except STORE_ERRORS as exc:
      raise ClusterGenerationError(f"Could not read cluster {cluster_id}.") from exc
    if cluster is None:
      raise ClusterNotFoundError(cluster_id)
    if cluster.status != expected:
      raise ClusterStateError(cluster_id, expected=expected, actual=cluster.status)

    # Snapshot the style once so every item in the batch sees the same settings.
    try:
      style = await self._settings_provider.load_style()
    except STORE_ERRORS as exc:
      raise ClusterGenerationError("Could not load site settings.") from exc

    try:
      claimed = await self._clusters.transition_status(cluster_id, expected=expected, target="generating")
    except STORE_ERRORS as exc:
      raise ClusterGenerationError(f"Could not claim cluster {cluster_id}.") from exc
    if claimed is None:
      # Another caller won the compare-and-set between our read and write.
      current = await self._clusters.get_cluster(cluster_id)
      raise ClusterStateError(cluster_id, expected=expected, actual=current.status if current else None)

    if retry_failed:
      logger.info("Cluster %s claimed for retry of %s", cluster_id, ", ".join(failed_keys(claimed.progress)) or "no failed items")
    else:
      logger.info("Cluster %s claimed for generation (%s items)", cluster_id, plan_total(claimed.stage_plan))
    return PreparedBatch(cluster=claimed, style=style, retry=retry_failed)

  async def execute(self, batch: PreparedBatch) -> ClusterGenerationResult:
    cluster = batch.cluster
    tracker = ClusterProgressTracker(cluster_id=cluster.cluster_id, store=self._clusters, initial_progress=cluster.progress if batch.retry else None)
    master_prompt = build_master_prompt(batch.style)
    total_items = plan_total(cluster.stage_plan)
    pending = set(batch.pending_keys)
    slots = [slot for slot in iter_slots(cluster.stage_plan) if slot.key in pending]
    failures: dict[str, str] = {}

    try:
      for position, slot in enumerate(slots):
        await tracker.mark_generating(slot.key)
        outcome = await self._run_item(ItemRequest(cluster=cluster, slot=slot, total_items=total_items, master_prompt=master_prompt))
        if outcome.ok:
          await tracker.mark_complete(slot.key)
        else:
          failures[slot.key] = outcome.failure or "internal"
          logger.warning("Cluster %s item %s (%s) failed kind=%s reason=%s", cluster.cluster_id, slot.key, slot.stage.label, outcome.failure, outcome.reason)
          await tracker.mark_error(slot.key)

        if position < len(slots) - 1 and self._pacing_delay_seconds > 0:
          await self._sleep(self._pacing_delay_seconds)

      status = await tracker.finalize()
    except STORE_ERRORS as exc:
      await self._record_interrupted(cluster.cluster_id, tracker.progress)
      raise ClusterGenerationError(f"Progress store write failed for cluster {cluster.cluster_id}.") from exc

    logger.info("Cluster %s finished status=%s attempted=%s failed=%s", cluster.cluster_id, status, len(slots), len(failures))
    return ClusterGenerationResult(cluster_id=cluster.cluster_id, success=True, status=status, progress=tracker.progress, failures=failures)

  async def _run_item(self, request: ItemRequest) -> ItemOutcome:
    try:
      return await self._pipeline.run(request)
    except Exception as exc:  # noqa: BLE001
      # Unexpected bugs still only fail this item; the traceback goes to the log.
      logger.error("Unexpected failure in cluster %s item %s", request.cluster.cluster_id, request.slot.key, exc_info=True)
      return ItemOutcome.failed("internal", f"{type(exc).__name__}: {exc}")

  async def _record_interrupted(self, cluster_id: str, progress: dict[str, str]) -> None:
    """Move an interrupted batch to `error` so it can be retried."""
    settled = {key: "error" if state == "generating" else state for key, state in progress.items()}
    try:
      await self._clusters.update_cluster(cluster_id, status="error", progress=settled)
    except STORE_ERRORS:
      logger.error("Could not record interrupted batch for cluster %s; it remains in generating", cluster_id, exc_info=True)
      return
    logger.warning("Cluster %s interrupted by a progress store failure; marked error with %s", cluster_id, settled)
