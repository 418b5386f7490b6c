import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from urllib.parse import urlparse

from fastapi import FastAPI

from content_engine.config import get_settings
from content_engine.core.database import get_db_engine
from content_engine.core.logging import _initialize_logging


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
  """Set up logging on startup and dispose the engine on shutdown."""
  settings = get_settings()
  logger = logging.getLogger("content_engine.core.lifespan")

  try:
    _initialize_logging(settings)
  except RuntimeError:
    # Keep serving on stdout when the log directory is not writable.
    logger.warning("File logging setup failed; continuing with default handlers.", exc_info=True)

  logger.info("Startup complete environment=%s model=%s gateway=%s pg_dsn=%s", settings.environment, settings.ai_model, settings.ai_gateway_url, _redact_dsn(settings.pg_dsn))
  if not settings.ai_gateway_api_key:
    logger.warning("CONTENT_ENGINE_AI_GATEWAY_KEY is not set; generation requests will fail.")

  yield

  engine = get_db_engine()
  if engine is not None:
    await engine.dispose()
    logger.info("Database engine disposed.")


def _redact_dsn(raw: str | None) -> str:
  """Redact credentials from a DSN while keeping host/db visible."""
  if not raw:
    return "<unset>"

  parsed = urlparse(raw)
  if not parsed.scheme:
    return "<invalid>"

  user = parsed.username or ""
  host = parsed.hostname or ""
  port = f":{parsed.port}" if parsed.port else ""
  netloc = f"{user}@{host}{port}" if user else f"{host}{port}"
  database = parsed.path.lstrip("/")
  path = f"/{database}" if database else ""
  return f"{parsed.scheme}://{netloc}{path}"
