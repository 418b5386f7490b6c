"""Run generation for one cluster outside the web process.

Usage:
  python scripts/generate_cluster.py <cluster_id> [--retry]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from content_engine.ai.providers.gateway import build_generator
from content_engine.config import get_settings
from content_engine.core.database import get_db_engine
from content_engine.core.errors import ClusterGenerationError, ClusterStateError, NotFoundError
from content_engine.services.clusters import build_orchestrator
from content_engine.storage.factory import _get_cluster_store, _get_content_store, _get_settings_provider

logger = logging.getLogger("scripts.generate_cluster")


async def _run(cluster_id: str, *, retry_failed: bool) -> int:
  settings = get_settings()
  orchestrator = build_orchestrator(
    settings,
    cluster_store=_get_cluster_store(settings),
    settings_provider=_get_settings_provider(settings),
    content_store=_get_content_store(settings),
    generator=build_generator(settings),
  )
  try:
    result = await orchestrator.run(cluster_id, retry_failed=retry_failed)
  except NotFoundError as exc:
    print(f"Error: {exc}", file=sys.stderr)
    return 2
  except ClusterStateError as exc:
    print(f"Error: {exc} (expected {exc.expected}, found {exc.actual})", file=sys.stderr)
    return 3
  except ClusterGenerationError as exc:
    print(f"Error: {exc}", file=sys.stderr)
    return 4
  finally:
    engine = get_db_engine()
    if engine is not None:
      await engine.dispose()

  print(f"Cluster {result.cluster_id} finished with status {result.status}")
  print(json.dumps(result.progress, indent=2))
  for key, kind in result.failures.items():
    print(f" - {key}: {kind}")
  return 0 if result.status == "complete" else 1


def main() -> None:
  parser = argparse.ArgumentParser(description="Generate every planned item of a content cluster.")
  parser.add_argument("cluster_id", help="Cluster to generate.")
  parser.add_argument("--retry", action="store_true", help="Re-attempt only the failed items of a cluster in error.")
  args = parser.parse_args()

  logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
  sys.exit(asyncio.run(_run(args.cluster_id, retry_failed=args.retry)))


if __name__ == "__main__":
  main()
