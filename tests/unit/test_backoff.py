from __future__ import annotations

import pytest

from content_engine.ai.backoff import retry_with_backoff
from content_engine.ai.errors import GeneratorRateLimitedError, GeneratorTransportError

pytestmark = pytest.mark.anyio


async def test_other_errors_propagate_immediately() -> None:
  calls = 0
  sleeps: list[float] = []

  async def call() -> str:
    nonlocal calls
    calls += 1
    raise GeneratorTransportError("down")

  async def fake_sleep(delay: float) -> None:
    sleeps.append(delay)

  with pytest.raises(GeneratorTransportError):
    await retry_with_backoff(call, delays=(1.0, 2.0), sleep=fake_sleep)

  assert calls == 1
  assert sleeps == []


async def test_empty_schedule_makes_a_single_attempt() -> None:
  calls = 0

  async def call() -> str:
    nonlocal calls
    calls += 1
    raise GeneratorRateLimitedError("slow down")

  async def fake_sleep(delay: float) -> None:
    raise AssertionError("should not sleep")

  with pytest.raises(GeneratorRateLimitedError):
    await retry_with_backoff(call, delays=(), sleep=fake_sleep)

  assert calls == 1
