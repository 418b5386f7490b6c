"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from content_engine.utils.env import default_env_path, load_env_file

load_env_file(default_env_path(), override=False)

DEFAULT_GATEWAY_URL = "https://ai.gateway.lovable.dev/v1"
DEFAULT_MODEL = "google/gemini-2.5-flash"


@dataclass(frozen=True)
class Settings:
  """Typed settings for the content engine service."""

  environment: str
  debug: bool
  allowed_origins: tuple[str, ...]
  log_dir: str
  log_max_bytes: int
  log_backup_count: int
  log_http_4xx: bool
  pg_dsn: str | None
  pg_connect_timeout: int
  ai_gateway_url: str
  ai_gateway_api_key: str | None
  ai_model: str
  pacing_delay_seconds: float
  translation_pacing_seconds: float
  rate_limit_backoff_seconds: tuple[float, ...]
  max_cluster_items: int
  citation_timeout_seconds: float
  admin_token: str | None


@dataclass(frozen=True)
class DatabaseSettings:
  """Typed settings for database connectivity."""

  debug: bool
  pg_dsn: str | None
  pg_connect_timeout: int


def _parse_origins(raw: str | None) -> tuple[str, ...]:
  if not raw:
    raise ValueError("CONTENT_ENGINE_ALLOWED_ORIGINS must be set to one or more origins.")

  origins = [origin.strip() for origin in raw.split(",") if origin.strip()]

  if not origins:
    raise ValueError("CONTENT_ENGINE_ALLOWED_ORIGINS must include at least one origin.")

  if "*" in origins:
    raise ValueError("CONTENT_ENGINE_ALLOWED_ORIGINS must not include wildcard origins.")

  return tuple(origins)


def _parse_bool(raw: str | None) -> bool:
  """Parse a boolean-ish string from environment variables."""

  if raw is None:
    return False

  normalized = raw.strip().lower()
  return normalized in {"1", "true", "yes", "on"}


def _parse_delays(raw: str | None, default: tuple[float, ...]) -> tuple[float, ...]:
  """Parse a comma separated list of non-negative delays in seconds."""
  if raw is None or raw.strip() == "":
    return default

  delays = tuple(float(part) for part in raw.split(",") if part.strip())
  if any(delay < 0 for delay in delays):
    raise ValueError("CONTENT_ENGINE_RATE_LIMIT_BACKOFF must only contain non-negative delays.")

  return delays


def _optional_str(raw: str | None) -> str | None:
  if raw is None:
    return None
  value = raw.strip()
  if value == "":
    return None
  return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  """Load settings once per process."""

  environment = os.getenv("CONTENT_ENGINE_ENV", "development").lower()

  # Toggle verbose error output and SQL echo in non-production environments.
  debug = _parse_bool(os.getenv("CONTENT_ENGINE_DEBUG"))

  log_max_bytes = int(os.getenv("CONTENT_ENGINE_LOG_MAX_BYTES", "5242880"))  # 5MB default
  if log_max_bytes <= 0:
    raise ValueError("CONTENT_ENGINE_LOG_MAX_BYTES must be a positive integer.")

  log_backup_count = int(os.getenv("CONTENT_ENGINE_LOG_BACKUP_COUNT", "10"))
  if log_backup_count < 0:
    raise ValueError("CONTENT_ENGINE_LOG_BACKUP_COUNT must be zero or a positive integer.")

  pg_connect_timeout = int(os.getenv("CONTENT_ENGINE_PG_CONNECT_TIMEOUT", "5"))
  if pg_connect_timeout <= 0:
    raise ValueError("CONTENT_ENGINE_PG_CONNECT_TIMEOUT must be a positive integer.")

  # Pause between generator calls to stay under the gateway rate limit.
  pacing_delay_seconds = float(os.getenv("CONTENT_ENGINE_PACING_DELAY_SECONDS", "3"))
  if pacing_delay_seconds < 0:
    raise ValueError("CONTENT_ENGINE_PACING_DELAY_SECONDS must be zero or positive.")

  translation_pacing_seconds = float(os.getenv("CONTENT_ENGINE_TRANSLATION_PACING_SECONDS", "1"))
  if translation_pacing_seconds < 0:
    raise ValueError("CONTENT_ENGINE_TRANSLATION_PACING_SECONDS must be zero or positive.")

  max_cluster_items = int(os.getenv("CONTENT_ENGINE_MAX_CLUSTER_ITEMS", "12"))
  if max_cluster_items <= 0:
    raise ValueError("CONTENT_ENGINE_MAX_CLUSTER_ITEMS must be a positive integer.")

  citation_timeout_seconds = float(os.getenv("CONTENT_ENGINE_CITATION_TIMEOUT_SECONDS", "10"))
  if citation_timeout_seconds <= 0:
    raise ValueError("CONTENT_ENGINE_CITATION_TIMEOUT_SECONDS must be positive.")

  return Settings(
    environment=environment,
    debug=debug,
    allowed_origins=_parse_origins(os.getenv("CONTENT_ENGINE_ALLOWED_ORIGINS")),
    log_dir=(os.getenv("CONTENT_ENGINE_LOG_DIR") or "logs").strip(),
    log_max_bytes=log_max_bytes,
    log_backup_count=log_backup_count,
    log_http_4xx=_parse_bool(os.getenv("CONTENT_ENGINE_LOG_HTTP_4XX")),
    pg_dsn=os.getenv("CONTENT_ENGINE_PG_DSN") or os.getenv("DATABASE_URL"),
    pg_connect_timeout=pg_connect_timeout,
    ai_gateway_url=(os.getenv("CONTENT_ENGINE_AI_GATEWAY_URL") or DEFAULT_GATEWAY_URL).strip(),
    ai_gateway_api_key=_optional_str(os.getenv("CONTENT_ENGINE_AI_GATEWAY_KEY")),
    ai_model=(os.getenv("CONTENT_ENGINE_AI_MODEL") or DEFAULT_MODEL).strip(),
    pacing_delay_seconds=pacing_delay_seconds,
    translation_pacing_seconds=translation_pacing_seconds,
    rate_limit_backoff_seconds=_parse_delays(os.getenv("CONTENT_ENGINE_RATE_LIMIT_BACKOFF"), (5.0, 20.0, 50.0)),
    max_cluster_items=max_cluster_items,
    citation_timeout_seconds=citation_timeout_seconds,
    admin_token=_optional_str(os.getenv("CONTENT_ENGINE_ADMIN_TOKEN")),
  )


@lru_cache(maxsize=1)
def get_database_settings() -> DatabaseSettings:
  """Load database settings without requiring web-runtime configuration like CORS."""
  # Migrations and offline scripts only need the DSN.
  debug = _parse_bool(os.getenv("CONTENT_ENGINE_DEBUG"))
  pg_connect_timeout = int(os.getenv("CONTENT_ENGINE_PG_CONNECT_TIMEOUT", "5"))
  if pg_connect_timeout <= 0:
    raise ValueError("CONTENT_ENGINE_PG_CONNECT_TIMEOUT must be a positive integer.")

  pg_dsn = os.getenv("CONTENT_ENGINE_PG_DSN") or os.getenv("DATABASE_URL")

  return DatabaseSettings(debug=debug, pg_dsn=pg_dsn, pg_connect_timeout=pg_connect_timeout)
