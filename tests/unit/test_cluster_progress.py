from __future__ import annotations

import pytest

from content_engine.clusters.progress import ClusterProgressTracker, ProgressRegressionError
from content_engine.core.errors import ClusterNotFoundError

pytestmark = pytest.mark.anyio


async def test_complete_item_cannot_be_reopened(cluster_store, make_cluster) -> None:
  await cluster_store.create_cluster(make_cluster())
  tracker = ClusterProgressTracker(cluster_id="cluster-1", store=cluster_store)
  await tracker.mark_generating("article_1")
  await tracker.mark_complete("article_1")

  with pytest.raises(ProgressRegressionError):
    await tracker.mark_generating("article_1")
  with pytest.raises(ProgressRegressionError):
    await tracker.mark_error("article_1")


async def test_preexisting_complete_items_are_frozen(cluster_store, make_cluster) -> None:
  await cluster_store.create_cluster(make_cluster(status="error", progress={"article_1": "complete", "article_2": "error"}))
  tracker = ClusterProgressTracker(cluster_id="cluster-1", store=cluster_store, initial_progress={"article_1": "complete", "article_2": "error"})

  with pytest.raises(ProgressRegressionError):
    await tracker.mark_generating("article_1")

  await tracker.mark_generating("article_2")
  await tracker.mark_complete("article_2")
  assert await tracker.finalize() == "complete"
  assert tracker.progress == {"article_1": "complete", "article_2": "complete"}


async def test_finalize_refuses_unsettled_items(cluster_store, make_cluster) -> None:
  await cluster_store.create_cluster(make_cluster())
  tracker = ClusterProgressTracker(cluster_id="cluster-1", store=cluster_store)
  await tracker.mark_generating("article_1")

  with pytest.raises(ProgressRegressionError, match="article_1"):
    await tracker.finalize()


async def test_every_write_carries_the_full_map(cluster_store, make_cluster) -> None:
  await cluster_store.create_cluster(make_cluster())
  tracker = ClusterProgressTracker(cluster_id="cluster-1", store=cluster_store)
  await tracker.mark_generating("article_1")
  await tracker.mark_error("article_1")
  await tracker.mark_generating("article_2")

  assert cluster_store.writes[-1] == (None, {"article_1": "error", "article_2": "generating"})


async def test_vanished_cluster_raises_not_found(cluster_store) -> None:
  tracker = ClusterProgressTracker(cluster_id="gone", store=cluster_store)

  with pytest.raises(ClusterNotFoundError):
    await tracker.mark_generating("article_1")
