import logging
from typing import Any

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from content_engine.ai.errors import GeneratorError, GeneratorQuotaExhaustedError, GeneratorRateLimitedError
from content_engine.config import get_settings
from content_engine.core.errors import ClusterGenerationError, ClusterStateError, NotFoundError, TranslationConflictError

logger = logging.getLogger("uvicorn.error")


def _coerce_json_safe(value: Any) -> Any:
  """Convert unsupported values into JSON-safe primitives for error responses."""
  if value is None or isinstance(value, bool | int | float | str):
    return value
  if isinstance(value, dict):
    return {str(key): _coerce_json_safe(item) for key, item in value.items()}
  if isinstance(value, list | tuple | set):
    return [_coerce_json_safe(item) for item in value]
  # Exceptions in validation contexts are rendered by type and message only.
  if isinstance(value, BaseException):
    error_message = str(value)
    if error_message:
      return f"{type(value).__name__}: {error_message}"
    return type(value).__name__
  return str(value)


def _error_payload(detail: Any, *, request_id: str | None = None) -> dict[str, Any]:
  """Build an error body carrying the request id for log correlation."""
  payload: dict[str, Any] = {"detail": detail}
  if request_id:
    payload["requestId"] = request_id
  return payload


def _sanitize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
  """Return validation errors without raw input payloads."""
  sanitized: list[dict[str, Any]] = []
  for error in errors:
    scrubbed = {key: value for key, value in error.items() if key != "input"}
    if "ctx" in scrubbed and isinstance(scrubbed["ctx"], dict):
      scrubbed_ctx = dict(scrubbed["ctx"])
      scrubbed_ctx.pop("input", None)
      scrubbed["ctx"] = scrubbed_ctx

    sanitized.append(_coerce_json_safe(scrubbed))

  return sanitized


def _request_id(request: Request) -> str | None:
  return getattr(request.state, "request_id", None)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
  """Catch unhandled errors without leaking internals."""
  request_id = _request_id(request)
  logger.error("Global exception request_id=%s path=%s error_type=%s", request_id, request.url.path, type(exc).__name__, exc_info=True)
  return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=_error_payload("Internal Server Error", request_id=request_id))


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
  """Log request validation errors without leaking payloads."""
  request_id = _request_id(request)
  sanitized_errors = _sanitize_validation_errors(exc.errors())
  logger.warning("Request validation failed request_id=%s path=%s method=%s errors=%s", request_id, request.url.path, request.method, sanitized_errors)
  return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=_error_payload(sanitized_errors, request_id=request_id))


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
  """Handle HTTPExceptions, hiding 5xx details from callers."""
  settings = get_settings()
  request_id = _request_id(request)
  if exc.status_code >= 500:
    logger.error("HTTPException request_id=%s path=%s status_code=%s detail=%s", request_id, request.url.path, exc.status_code, exc.detail, exc_info=True)
    return JSONResponse(status_code=exc.status_code, content=_error_payload("Internal Server Error", request_id=request_id))

  if settings.log_http_4xx:
    logger.warning("HTTPException request_id=%s path=%s status_code=%s detail=%s", request_id, request.url.path, exc.status_code, exc.detail)

  return JSONResponse(status_code=exc.status_code, content=_error_payload(exc.detail, request_id=request_id), headers=getattr(exc, "headers", None))


async def not_found_exception_handler(request: Request, exc: NotFoundError) -> JSONResponse:
  request_id = _request_id(request)
  logger.info("Not found request_id=%s path=%s error=%s", request_id, request.url.path, exc)
  return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=_error_payload(str(exc), request_id=request_id))


async def cluster_state_exception_handler(request: Request, exc: ClusterStateError) -> JSONResponse:
  """Reject operations on clusters that are already running or finished."""
  request_id = _request_id(request)
  logger.warning("Cluster state conflict request_id=%s cluster_id=%s expected=%s actual=%s", request_id, exc.cluster_id, exc.expected, exc.actual)
  detail = {"message": str(exc), "expected": exc.expected, "actual": exc.actual}
  return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=_error_payload(detail, request_id=request_id))


async def translation_conflict_exception_handler(request: Request, exc: TranslationConflictError) -> JSONResponse:
  request_id = _request_id(request)
  logger.warning("Translation conflict request_id=%s post_id=%s language=%s", request_id, exc.post_id, exc.language)
  return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=_error_payload(str(exc), request_id=request_id))

async def cluster_generation_exception_handler(request: Request, exc: ClusterGenerationError) -> JSONResponse:
  """Report batch-level faults without exposing store details."""
  request_id = _request_id(request)
  logger.error("Cluster generation failure request_id=%s path=%s error_type=%s", request_id, request.url.path, type(exc).__name__, exc_info=True)
  return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=_error_payload("Cluster generation was interrupted.", request_id=request_id))


async def generator_exception_handler(request: Request, exc: GeneratorError) -> JSONResponse:
  """Map gateway failures onto the status the caller can act on."""
  request_id = _request_id(request)
  logger.warning("Generator failure request_id=%s path=%s reason=%s error=%s", request_id, request.url.path, exc.reason, exc)
  if isinstance(exc, GeneratorRateLimitedError):
    return JSONResponse(status_code=status.HTTP_429_TOO_MANY_REQUESTS, content=_error_payload("Rate limits exceeded, please try again later.", request_id=request_id))
  if isinstance(exc, GeneratorQuotaExhaustedError):
    return JSONResponse(status_code=status.HTTP_402_PAYMENT_REQUIRED, content=_error_payload("Payment required, please add funds to your workspace.", request_id=request_id))
  return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content=_error_payload("AI generation failed.", request_id=request_id))
