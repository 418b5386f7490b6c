"""Shared FastAPI dependencies for stores, the generator and the orchestrator."""

from __future__ import annotations

from fastapi import Depends

from content_engine.ai.providers.base import AIModel
from content_engine.ai.providers.gateway import build_generator
from content_engine.clusters.orchestrator import ClusterOrchestrator
from content_engine.config import Settings, get_settings
from content_engine.services.clusters import build_orchestrator
from content_engine.storage.clusters_repo import ClusterStore
from content_engine.storage.content_repo import CitationStore, ContentStore, SettingsProvider
from content_engine.storage.factory import _get_citation_store, _get_cluster_store, _get_content_store, _get_settings_provider


def get_cluster_store(settings: Settings = Depends(get_settings)) -> ClusterStore:  # noqa: B008
  return _get_cluster_store(settings)


def get_content_store(settings: Settings = Depends(get_settings)) -> ContentStore:  # noqa: B008
  return _get_content_store(settings)


def get_settings_provider(settings: Settings = Depends(get_settings)) -> SettingsProvider:  # noqa: B008
  return _get_settings_provider(settings)


def get_citation_store(settings: Settings = Depends(get_settings)) -> CitationStore:  # noqa: B008
  return _get_citation_store(settings)


def get_generator(settings: Settings = Depends(get_settings)) -> AIModel:  # noqa: B008
  """Build the gateway model for this request."""
  return build_generator(settings)


def get_orchestrator(  # noqa: B008
  settings: Settings = Depends(get_settings),  # noqa: B008
  cluster_store: ClusterStore = Depends(get_cluster_store),  # noqa: B008
  settings_provider: SettingsProvider = Depends(get_settings_provider),  # noqa: B008
  content_store: ContentStore = Depends(get_content_store),  # noqa: B008
  generator: AIModel = Depends(get_generator),  # noqa: B008
) -> ClusterOrchestrator:
  return build_orchestrator(settings, cluster_store=cluster_store, settings_provider=settings_provider, content_store=content_store, generator=generator)
