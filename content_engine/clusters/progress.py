"""Per-item progress tracking for a cluster batch."""

from __future__ import annotations

from collections.abc import Mapping

from content_engine.clusters.models import ClusterRecord, ClusterStatus, ItemStatus, aggregate_status
from content_engine.core.errors import ClusterNotFoundError
from content_engine.storage.clusters_repo import ClusterStore


class ProgressRegressionError(RuntimeError):
  """Raised when a batch tries to rewrite an item that already settled."""


class ClusterProgressTracker:
  """Own the progress map for one batch and persist it after every change.

  The store replaces the whole map on each write, so the tracker always sends
  the full accumulated map. Keys settled in this batch, and keys that were
  already complete when the batch started, are frozen.
  """

  def __init__(self, *, cluster_id: str, store: ClusterStore, initial_progress: Mapping[str, str] | None = None) -> None:
    self._cluster_id = cluster_id
    self._store = store
    self._progress: dict[str, str] = dict(initial_progress or {})
    self._frozen: set[str] = {key for key, state in self._progress.items() if state == "complete"}

  @property
  def progress(self) -> dict[str, str]:
    """Return a copy of the current map."""
    return dict(self._progress)

  async def mark_generating(self, key: str) -> ClusterRecord:
    if key in self._frozen:
      raise ProgressRegressionError(f"Item {key} already settled as '{self._progress[key]}'.")
    self._progress[key] = "generating"
    return await self._write()

  async def mark_complete(self, key: str) -> ClusterRecord:
    return await self._settle(key, "complete")

  async def mark_error(self, key: str) -> ClusterRecord:
    return await self._settle(key, "error")

  async def finalize(self) -> ClusterStatus:
    """Persist the terminal status together with the full map in one update."""
    pending = [key for key in self._progress if key not in self._frozen]
    if pending:
      raise ProgressRegressionError(f"Cannot finalize with unsettled items: {', '.join(pending)}")
    status = aggregate_status(self._progress)
    await self._write(status=status)
    return status

  async def _settle(self, key: str, state: ItemStatus) -> ClusterRecord:
    if key in self._frozen:
      raise ProgressRegressionError(f"Item {key} already settled as '{self._progress[key]}'.")
    self._progress[key] = state
    self._frozen.add(key)
    return await self._write()

  async def _write(self, *, status: ClusterStatus | None = None) -> ClusterRecord:
    record = await self._store.update_cluster(self._cluster_id, status=status, progress=dict(self._progress))
    if record is None:
      raise ClusterNotFoundError(self._cluster_id)
    return record
