"""Retry logic for rate-limited generator calls."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from content_engine.ai.errors import GeneratorRateLimitedError

T = TypeVar("T")
logger = logging.getLogger(__name__)

DEFAULT_DELAYS: tuple[float, ...] = (5.0, 20.0, 50.0)


async def retry_with_backoff(call: Callable[[], Awaitable[T]], *, delays: Sequence[float] = DEFAULT_DELAYS, sleep: Callable[[float], Awaitable[None]] = asyncio.sleep) -> T:
  """
  Run `call`, retrying only on rate-limit errors.

  One retry per configured delay, then a final attempt whose error propagates.
  """
  for attempt, delay in enumerate(delays):
    try:
      return await call()
    except GeneratorRateLimitedError as exc:
      logger.warning("Rate limited (attempt %s/%s): %s. Retrying in %ss", attempt + 1, len(delays) + 1, exc, delay)
      await sleep(delay)

  return await call()
