"""Citation link health checks."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Literal

import httpx

from content_engine.storage.content_repo import CitationStore

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; BlogCitationValidator/1.0)"
SLOW_THRESHOLD_MS = 5000
VALID_AUTHORITY_SCORE = 75

CheckStatus = Literal["valid", "broken", "timeout", "error"]


@dataclass(frozen=True)
class CitationCheck:
  url: str
  title: str | None
  status: CheckStatus
  status_code: int
  response_time_ms: int
  message: str


@dataclass(frozen=True)
class CitationSummary:
  valid: int = 0
  broken: int = 0
  slow: int = 0
  timeout: int = 0
  error: int = 0


@dataclass(frozen=True)
class CitationReport:
  results: list[CitationCheck]
  summary: CitationSummary


def summarize(results: Sequence[CitationCheck]) -> CitationSummary:
  return CitationSummary(
    valid=sum(1 for result in results if result.status == "valid"),
    broken=sum(1 for result in results if result.status == "broken"),
    slow=sum(1 for result in results if result.response_time_ms > SLOW_THRESHOLD_MS),
    timeout=sum(1 for result in results if result.status == "timeout"),
    error=sum(1 for result in results if result.status == "error"),
  )


async def check_citation(client: httpx.AsyncClient, url: str, title: str | None, *, timeout: float) -> CitationCheck:
  """Issue a HEAD request and classify the outcome."""
  start = time.perf_counter()
  try:
    response = await client.head(url, timeout=timeout, follow_redirects=True)
  except httpx.TimeoutException:
    logger.info("Citation %s timed out after %ss", url, timeout)
    return CitationCheck(url=url, title=title, status="timeout", status_code=0, response_time_ms=int(timeout * 1000), message=f"Request timeout (>{timeout:g}s)")
  except (httpx.HTTPError, httpx.InvalidURL) as exc:
    logger.info("Citation %s failed: %s", url, exc)
    return CitationCheck(url=url, title=title, status="error", status_code=0, response_time_ms=0, message=str(exc) or type(exc).__name__)

  elapsed_ms = int((time.perf_counter() - start) * 1000)
  if response.is_success:
    return CitationCheck(url=url, title=title, status="valid", status_code=response.status_code, response_time_ms=elapsed_ms, message=f"Valid ({elapsed_ms}ms)")
  return CitationCheck(url=url, title=title, status="broken", status_code=response.status_code, response_time_ms=elapsed_ms, message=f"HTTP {response.status_code}")


async def validate_citations(citations: Sequence[tuple[str, str | None]], *, store: CitationStore, timeout: float = 10.0, transport: httpx.AsyncBaseTransport | None = None, clock: Callable[[], datetime] = lambda: datetime.now(UTC)) -> CitationReport:
  """Check every (url, title) pair concurrently and record reachable ones."""
  if not citations:
    return CitationReport(results=[], summary=CitationSummary())

  logger.info("Validating %s citations", len(citations))
  async with httpx.AsyncClient(headers={"User-Agent": USER_AGENT}, transport=transport) as client:
    results = list(await asyncio.gather(*(check_citation(client, url, title, timeout=timeout) for url, title in citations)))

  summary = summarize(results)
  logger.info("Citation summary %s", summary)

  # Only results that carry an HTTP status are recorded.
  checked_at = clock()
  for result in results:
    if result.status_code > 0:
      is_valid = result.status == "valid"
      await store.upsert_citation(url=result.url, title=result.title, status="valid" if is_valid else "broken", authority_score=VALID_AUTHORITY_SCORE if is_valid else 0, checked_at=checked_at)

  return CitationReport(results=results, summary=summary)
