"""Errors raised by content generators."""

from __future__ import annotations


class GeneratorError(RuntimeError):
  """Base class for generator failures."""

  reason = "generator_error"

  def __init__(self, message: str, *, status_code: int | None = None) -> None:
    super().__init__(message)
    self.status_code = status_code


class GeneratorRateLimitedError(GeneratorError):
  """Gateway answered 429; retrying later may succeed."""

  reason = "rate_limited"


class GeneratorQuotaExhaustedError(GeneratorError):
  """Gateway answered 402; credits must be topped up before retrying."""

  reason = "quota_exhausted"


class GeneratorMalformedOutputError(GeneratorError):
  """The model replied without a usable structured payload."""

  reason = "malformed_output"


class GeneratorTransportError(GeneratorError):
  """Connection failure, timeout or unexpected HTTP status."""

  reason = "transport_error"
