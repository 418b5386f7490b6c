from __future__ import annotations

from datetime import UTC, datetime

import httpx
import pytest

from content_engine.services.citations import USER_AGENT, CitationCheck, summarize, validate_citations

pytestmark = pytest.mark.anyio

CHECKED_AT = datetime(2026, 10, 1, tzinfo=UTC)


def _handler(request: httpx.Request) -> httpx.Response:
  assert request.method == "HEAD"
  assert request.headers["user-agent"] == USER_AGENT
  host = request.url.host
  if host == "ok.test":
    return httpx.Response(200)
  if host == "moved.test":
    return httpx.Response(301, headers={"location": "https://ok.test/final"})
  if host == "gone.test":
    return httpx.Response(404)
  if host == "slow.test":
    raise httpx.ConnectTimeout("timed out", request=request)
  raise httpx.ConnectError("connection refused", request=request)


async def test_citations_are_classified_and_recorded(citation_store) -> None:
  citations = [("https://ok.test/a", "Ok"), ("https://moved.test/b", None), ("https://gone.test/c", "Gone"), ("https://slow.test/d", "Slow"), ("https://down.test/e", "Down")]

  report = await validate_citations(citations, store=citation_store, timeout=2.0, transport=httpx.MockTransport(_handler), clock=lambda: CHECKED_AT)

  by_url = {result.url: result for result in report.results}
  assert [result.url for result in report.results] == [url for url, _ in citations]
  assert by_url["https://ok.test/a"].status == "valid"
  assert by_url["https://moved.test/b"].status == "valid"
  assert by_url["https://gone.test/c"].status == "broken"
  assert by_url["https://gone.test/c"].message == "HTTP 404"
  assert by_url["https://slow.test/d"].status == "timeout"
  assert by_url["https://slow.test/d"].response_time_ms == 2000
  assert by_url["https://down.test/e"].status == "error"
  assert by_url["https://down.test/e"].status_code == 0

  assert (report.summary.valid, report.summary.broken, report.summary.timeout, report.summary.error) == (2, 1, 1, 1)

  assert set(citation_store.rows) == {"https://ok.test/a", "https://moved.test/b", "https://gone.test/c"}
  assert citation_store.rows["https://ok.test/a"] == {"title": "Ok", "status": "valid", "authority_score": 75, "last_checked": CHECKED_AT}
  assert citation_store.rows["https://gone.test/c"]["authority_score"] == 0


async def test_empty_input_makes_no_requests(citation_store) -> None:
  def fail(request: httpx.Request) -> httpx.Response:
    raise AssertionError("no request expected")

  report = await validate_citations([], store=citation_store, transport=httpx.MockTransport(fail))

  assert report.results == []
  assert report.summary.valid == 0
  assert citation_store.rows == {}


def test_slow_responses_are_counted_separately() -> None:
  results = [
    CitationCheck(url="a", title=None, status="valid", status_code=200, response_time_ms=6000, message="Valid (6000ms)"),
    CitationCheck(url="b", title=None, status="valid", status_code=200, response_time_ms=100, message="Valid (100ms)"),
  ]

  summary = summarize(results)

  assert summary.valid == 2
  assert summary.slow == 1
