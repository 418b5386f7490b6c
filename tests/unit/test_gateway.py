"""Gateway model behaviour against a fake OpenAI client."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from content_engine.ai.errors import GeneratorMalformedOutputError, GeneratorQuotaExhaustedError, GeneratorRateLimitedError, GeneratorTransportError
from content_engine.ai.providers.gateway import GatewayModel, GatewayProvider
from content_engine.clusters.prompts import FAQ_TOOL

pytestmark = pytest.mark.anyio

_REQUEST = httpx.Request("POST", "https://gateway.test/v1/chat/completions")


def _status_error(cls, status_code: int):
  return cls("failed", response=httpx.Response(status_code, request=_REQUEST), body=None)


def _completion(arguments: str | None = None, content: str | None = None, tool_name: str = "generate_faqs"):
  tool_calls = [SimpleNamespace(function=SimpleNamespace(name=tool_name, arguments=arguments))] if arguments is not None else None
  message = SimpleNamespace(tool_calls=tool_calls, content=content)
  usage = SimpleNamespace(prompt_tokens=10, completion_tokens=5, total_tokens=15)
  return SimpleNamespace(choices=[SimpleNamespace(message=message)], usage=usage)


def _model(*responses):
  client = MagicMock()
  client.chat.completions.create = AsyncMock(side_effect=list(responses))
  sleeps: list[float] = []

  async def fake_sleep(delay: float) -> None:
    sleeps.append(delay)

  return GatewayModel("google/gemini-2.5-flash", client=client, backoff_delays=(5.0, 20.0, 50.0), sleep=fake_sleep), client, sleeps


async def test_tool_call_arguments_are_parsed() -> None:
  model, client, _ = _model(_completion('{"faqs": [{"question": "Q", "answer": "A"}]}'))

  response = await model.generate_structured("system", "user", FAQ_TOOL)

  assert response.content == {"faqs": [{"question": "Q", "answer": "A"}]}
  assert response.usage == {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15}
  kwargs = client.chat.completions.create.await_args.kwargs
  assert kwargs["tool_choice"] == {"type": "function", "function": {"name": "generate_faqs"}}
  assert kwargs["messages"][0] == {"role": "system", "content": "system"}


async def test_plain_content_with_fences_is_accepted() -> None:
  model, _, _ = _model(_completion(content='```json\n{"faqs": []}\n```'))

  response = await model.generate_structured("system", "user", FAQ_TOOL)

  assert response.content == {"faqs": []}


async def test_missing_tool_call_is_malformed() -> None:
  model, _, _ = _model(_completion(content=None))

  with pytest.raises(GeneratorMalformedOutputError):
    await model.generate_structured("system", "user", FAQ_TOOL)


async def test_non_object_arguments_are_malformed() -> None:
  model, _, _ = _model(_completion("[1, 2]"))

  with pytest.raises(GeneratorMalformedOutputError):
    await model.generate_structured("system", "user", FAQ_TOOL)


async def test_rate_limit_is_retried_with_backoff() -> None:
  model, client, sleeps = _model(_status_error(openai.RateLimitError, 429), _status_error(openai.RateLimitError, 429), _completion('{"faqs": []}'))

  response = await model.generate_structured("system", "user", FAQ_TOOL)

  assert response.content == {"faqs": []}
  assert sleeps == [5.0, 20.0]
  assert client.chat.completions.create.await_count == 3


async def test_rate_limit_gives_up_after_schedule() -> None:
  model, client, sleeps = _model(*[_status_error(openai.RateLimitError, 429) for _ in range(4)])

  with pytest.raises(GeneratorRateLimitedError) as excinfo:
    await model.generate_structured("system", "user", FAQ_TOOL)

  assert excinfo.value.status_code == 429
  assert sleeps == [5.0, 20.0, 50.0]
  assert client.chat.completions.create.await_count == 4


async def test_payment_required_is_not_retried() -> None:
  model, client, sleeps = _model(_status_error(openai.APIStatusError, 402))

  with pytest.raises(GeneratorQuotaExhaustedError):
    await model.generate_structured("system", "user", FAQ_TOOL)

  assert sleeps == []
  assert client.chat.completions.create.await_count == 1


async def test_server_error_maps_to_transport_error() -> None:
  model, _, _ = _model(_status_error(openai.InternalServerError, 500))

  with pytest.raises(GeneratorTransportError) as excinfo:
    await model.generate_structured("system", "user", FAQ_TOOL)

  assert excinfo.value.status_code == 500


async def test_connection_error_maps_to_transport_error() -> None:
  model, _, _ = _model(openai.APIConnectionError(request=_REQUEST))

  with pytest.raises(GeneratorTransportError):
    await model.generate_structured("system", "user", FAQ_TOOL)


def test_provider_requires_api_key() -> None:
  with pytest.raises(ValueError, match="CONTENT_ENGINE_AI_GATEWAY_KEY"):
    GatewayProvider(api_key=None, base_url="https://gateway.test/v1")


def test_provider_disables_sdk_retries() -> None:
  provider = GatewayProvider(api_key="key", base_url="https://gateway.test/v1")
  model = provider.get_model("some/model")

  assert model.name == "some/model"
  assert model._client.max_retries == 0
