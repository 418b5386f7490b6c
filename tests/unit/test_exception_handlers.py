"""Unit tests for API error mapping and sanitization."""

from __future__ import annotations

import json
from types import SimpleNamespace

import pytest

from content_engine.ai.errors import GeneratorMalformedOutputError, GeneratorQuotaExhaustedError, GeneratorRateLimitedError
from content_engine.core.errors import ClusterGenerationError, ClusterStateError
from content_engine.core.exceptions import _sanitize_validation_errors, cluster_generation_exception_handler, cluster_state_exception_handler, generator_exception_handler

pytestmark = pytest.mark.anyio


def _request(request_id: str = "req-1"):
  return SimpleNamespace(state=SimpleNamespace(request_id=request_id), url=SimpleNamespace(path="/v1/test"), method="POST")


def test_sanitize_validation_errors_removes_input_and_serializes_exception_ctx() -> None:
  """Validation errors stay JSON-serializable and never echo the request payload."""
  errors = [{"type": "value_error", "loc": ("body", "stage_plan"), "msg": "Value error, Unknown funnel stage 'X'.", "input": {"stage": "X"}, "ctx": {"error": ValueError("Unknown funnel stage 'X'."), "input": {"stage": "X"}}}]
  sanitized = _sanitize_validation_errors(errors)
  assert "input" not in sanitized[0]
  assert sanitized[0]["ctx"]["error"] == "ValueError: Unknown funnel stage 'X'."
  assert "input" not in sanitized[0]["ctx"]
  assert sanitized[0]["loc"] == ["body", "stage_plan"]


@pytest.mark.parametrize(("error", "status_code"), [(GeneratorRateLimitedError("x"), 429), (GeneratorQuotaExhaustedError("x"), 402), (GeneratorMalformedOutputError("x"), 502)])
async def test_generator_errors_map_to_status(error, status_code: int) -> None:
  response = await generator_exception_handler(_request(), error)

  assert response.status_code == status_code
  assert json.loads(response.body)["requestId"] == "req-1"


async def test_cluster_state_conflict_reports_expected_and_actual() -> None:
  response = await cluster_state_exception_handler(_request(), ClusterStateError("c1", expected="draft", actual="generating"))

  body = json.loads(response.body)
  assert response.status_code == 409
  assert body["detail"]["expected"] == "draft"
  assert body["detail"]["actual"] == "generating"


async def test_interrupted_generation_hides_store_details() -> None:
  response = await cluster_generation_exception_handler(_request(), ClusterGenerationError("Progress store write failed for cluster c1."))

  body = json.loads(response.body)
  assert response.status_code == 503
  assert body["detail"] == "Cluster generation was interrupted."
