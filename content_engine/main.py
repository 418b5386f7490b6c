from __future__ import annotations

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from content_engine.ai.errors import GeneratorError
from content_engine.api.routes import citations, clusters, linking, posts
from content_engine.config import get_settings
from content_engine.core.errors import ClusterGenerationError, ClusterStateError, NotFoundError, TranslationConflictError
from content_engine.core.exceptions import (
  cluster_generation_exception_handler,
  cluster_state_exception_handler,
  generator_exception_handler,
  global_exception_handler,
  http_exception_handler,
  not_found_exception_handler,
  request_validation_exception_handler,
  translation_conflict_exception_handler,
)
from content_engine.core.lifespan import lifespan
from content_engine.core.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware

settings = get_settings()

app = FastAPI(title="Content Engine", lifespan=lifespan, docs_url="/docs" if settings.debug else None, redoc_url=None, openapi_url="/openapi.json" if settings.debug else None)

app.add_middleware(CORSMiddleware, allow_origins=settings.allowed_origins, allow_credentials=True, allow_methods=["GET", "POST", "OPTIONS"], allow_headers=["content-type", "authorization", "x-admin-token"], expose_headers=["content-length", "x-request-id"])


# Add exception handlers
app.add_exception_handler(Exception, global_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
app.add_exception_handler(NotFoundError, not_found_exception_handler)
app.add_exception_handler(ClusterStateError, cluster_state_exception_handler)
app.add_exception_handler(ClusterGenerationError, cluster_generation_exception_handler)
app.add_exception_handler(TranslationConflictError, translation_conflict_exception_handler)
app.add_exception_handler(GeneratorError, generator_exception_handler)

# Add middleware
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)


@app.get("/health", include_in_schema=False)
async def health_check() -> dict[str, str]:
  """Return a simple health status."""
  return {"status": "ok", "version": "0.1.0"}


app.include_router(clusters.router, prefix="/v1/clusters", tags=["clusters"])
app.include_router(linking.router, prefix="/v1/links", tags=["links"])
app.include_router(posts.router, prefix="/v1/posts", tags=["posts"])
app.include_router(citations.router, prefix="/v1/citations", tags=["citations"])
