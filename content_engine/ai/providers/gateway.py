"""OpenAI-compatible AI gateway provider using the openai SDK."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Final

import openai
from openai import AsyncOpenAI

from content_engine.ai.backoff import DEFAULT_DELAYS, retry_with_backoff
from content_engine.ai.errors import GeneratorError, GeneratorMalformedOutputError, GeneratorQuotaExhaustedError, GeneratorRateLimitedError, GeneratorTransportError
from content_engine.ai.json_parser import parse_json_with_fallback
from content_engine.ai.providers.base import AIModel, Provider, StructuredModelResponse, ToolSpec
from content_engine.config import DEFAULT_MODEL, Settings

logger = logging.getLogger(__name__)

_REQUEST_TIMEOUT_SECONDS: Final[float] = 120.0


def _translate_error(exc: openai.OpenAIError) -> GeneratorError:
  """Map SDK exceptions onto the generator error taxonomy."""
  if isinstance(exc, openai.RateLimitError):
    return GeneratorRateLimitedError("AI gateway rate limit exceeded.", status_code=429)
  if isinstance(exc, openai.APIStatusError):
    if exc.status_code == 402:
      return GeneratorQuotaExhaustedError("AI gateway credits depleted.", status_code=402)
    return GeneratorTransportError(f"AI gateway returned HTTP {exc.status_code}.", status_code=exc.status_code)
  # APITimeoutError is a subclass of APIConnectionError.
  if isinstance(exc, openai.APIConnectionError):
    return GeneratorTransportError(f"AI gateway unreachable: {exc}")
  return GeneratorTransportError(f"AI gateway call failed: {exc}")


def _extract_tool_arguments(response: Any, tool_name: str) -> dict[str, Any]:
  """Pull the forced tool call's arguments out of a chat completion."""
  choices = getattr(response, "choices", None) or []
  if not choices:
    raise GeneratorMalformedOutputError("AI gateway returned no choices.")

  message = choices[0].message
  raw: str | None = None
  for call in message.tool_calls or []:
    function = getattr(call, "function", None)
    if function is not None and function.name == tool_name:
      raw = function.arguments
      break

  # Some gateway models answer in plain content even when a tool is forced.
  if raw is None:
    raw = message.content
  if not raw:
    raise GeneratorMalformedOutputError(f"AI gateway response has no '{tool_name}' tool call.")

  try:
    parsed = parse_json_with_fallback(raw)
  except json.JSONDecodeError as exc:
    raise GeneratorMalformedOutputError(f"Tool call arguments are not valid JSON: {exc}") from exc

  if not isinstance(parsed, dict):
    raise GeneratorMalformedOutputError("Tool call arguments must be a JSON object.")
  return parsed


class GatewayModel(AIModel):
  """Chat-completions client that forces a single function call per request."""

  def __init__(self, name: str, *, client: AsyncOpenAI, backoff_delays: Sequence[float] = DEFAULT_DELAYS, sleep: Callable[[float], Awaitable[None]] = asyncio.sleep) -> None:
    self.name = name
    self._client = client
    self._backoff_delays = tuple(backoff_delays)
    self._sleep = sleep

  async def generate_structured(self, system_prompt: str, user_prompt: str, tool: ToolSpec) -> StructuredModelResponse:
    """Call the gateway, retrying rate limits with backoff."""
    return await retry_with_backoff(lambda: self._request(system_prompt, user_prompt, tool), delays=self._backoff_delays, sleep=self._sleep)

  async def _request(self, system_prompt: str, user_prompt: str, tool: ToolSpec) -> StructuredModelResponse:
    try:
      response = await self._client.chat.completions.create(
        model=self.name,
        messages=[{"role": "system", "content": system_prompt}, {"role": "user", "content": user_prompt}],
        tools=[{"type": "function", "function": {"name": tool.name, "description": tool.description, "parameters": tool.parameters}}],
        tool_choice={"type": "function", "function": {"name": tool.name}},
      )
    except openai.OpenAIError as exc:
      error = _translate_error(exc)
      logger.warning("AI gateway call failed model=%s tool=%s reason=%s: %s", self.name, tool.name, error.reason, error)
      raise error from exc

    content = _extract_tool_arguments(response, tool.name)
    usage = None
    if getattr(response, "usage", None):
      usage = {"prompt_tokens": response.usage.prompt_tokens, "completion_tokens": response.usage.completion_tokens, "total_tokens": response.usage.total_tokens}
    logger.debug("AI gateway tool=%s usage=%s", tool.name, usage)
    return StructuredModelResponse(content=content, usage=usage)


class GatewayProvider(Provider):
  """Provider for the OpenAI-compatible AI gateway."""

  def __init__(self, *, api_key: str | None, base_url: str, backoff_delays: Sequence[float] = DEFAULT_DELAYS) -> None:
    self.name = "gateway"
    if not api_key:
      raise ValueError("CONTENT_ENGINE_AI_GATEWAY_KEY must be set to call the AI gateway.")
    # Retries are handled by retry_with_backoff so the SDK must not retry on its own.
    self._client = AsyncOpenAI(api_key=api_key, base_url=base_url, max_retries=0, timeout=_REQUEST_TIMEOUT_SECONDS)
    self._backoff_delays = tuple(backoff_delays)

  def get_model(self, model: str | None = None) -> AIModel:
    return GatewayModel(model or DEFAULT_MODEL, client=self._client, backoff_delays=self._backoff_delays)


def build_generator(settings: Settings) -> AIModel:
  """Return the configured content generator."""
  provider = GatewayProvider(api_key=settings.ai_gateway_api_key, base_url=settings.ai_gateway_url, backoff_delays=settings.rate_limit_backoff_seconds)
  return provider.get_model(settings.ai_model)
