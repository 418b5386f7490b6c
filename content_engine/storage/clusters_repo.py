"""Storage interface for content clusters."""

from __future__ import annotations

from typing import Protocol

from content_engine.clusters.models import ClusterRecord, ClusterStatus


class ClusterStore(Protocol):
  """Repository contract for cluster persistence."""

  async def create_cluster(self, record: ClusterRecord) -> None:
    """Persist a new cluster in draft."""

  async def get_cluster(self, cluster_id: str) -> ClusterRecord | None:
    """Fetch a cluster by identifier."""

  async def list_clusters(self, *, limit: int = 50) -> list[ClusterRecord]:
    """Return the most recent clusters first."""

  async def update_cluster(self, cluster_id: str, *, status: ClusterStatus | None = None, progress: dict[str, str] | None = None) -> ClusterRecord | None:
    """Overwrite status and/or the whole progress map."""

  async def transition_status(self, cluster_id: str, *, expected: ClusterStatus, target: ClusterStatus) -> ClusterRecord | None:
    """Atomically move from `expected` to `target`; return None when the cluster was not in `expected`."""
