from content_engine.config import Settings
from content_engine.storage.clusters_repo import ClusterStore
from content_engine.storage.content_repo import CitationStore, ContentStore, SettingsProvider
from content_engine.storage.postgres_clusters_repo import PostgresClusterStore
from content_engine.storage.postgres_content_repo import PostgresCitationStore, PostgresContentStore, PostgresSettingsProvider


def _require_dsn(settings: Settings) -> None:
  if not settings.pg_dsn:
    raise ValueError("CONTENT_ENGINE_PG_DSN must be set to enable Postgres persistence.")


def _get_cluster_store(settings: Settings) -> ClusterStore:
  """Return the active cluster store."""
  _require_dsn(settings)
  return PostgresClusterStore()


def _get_content_store(settings: Settings) -> ContentStore:
  """Return the active post/FAQ store."""
  _require_dsn(settings)
  return PostgresContentStore()


def _get_settings_provider(settings: Settings) -> SettingsProvider:
  _require_dsn(settings)
  return PostgresSettingsProvider()


def _get_citation_store(settings: Settings) -> CitationStore:
  _require_dsn(settings)
  return PostgresCitationStore()
