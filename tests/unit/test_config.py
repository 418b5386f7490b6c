from __future__ import annotations

import os

import pytest

from content_engine.config import _parse_delays, _parse_origins, get_settings
from content_engine.utils.env import load_env_file


@pytest.fixture
def fresh_settings(monkeypatch):
  get_settings.cache_clear()
  monkeypatch.setenv("CONTENT_ENGINE_ALLOWED_ORIGINS", "https://a.test, https://b.test")
  yield monkeypatch
  get_settings.cache_clear()


def test_defaults(fresh_settings) -> None:
  for name in ("CONTENT_ENGINE_PACING_DELAY_SECONDS", "CONTENT_ENGINE_TRANSLATION_PACING_SECONDS", "CONTENT_ENGINE_RATE_LIMIT_BACKOFF", "CONTENT_ENGINE_MAX_CLUSTER_ITEMS", "CONTENT_ENGINE_AI_MODEL"):
    fresh_settings.delenv(name, raising=False)

  settings = get_settings()

  assert settings.allowed_origins == ("https://a.test", "https://b.test")
  assert settings.pacing_delay_seconds == 3.0
  assert settings.translation_pacing_seconds == 1.0
  assert settings.rate_limit_backoff_seconds == (5.0, 20.0, 50.0)
  assert settings.max_cluster_items == 12
  assert settings.ai_model == "google/gemini-2.5-flash"


def test_blank_admin_token_counts_as_unset(fresh_settings) -> None:
  fresh_settings.setenv("CONTENT_ENGINE_ADMIN_TOKEN", "   ")
  assert get_settings().admin_token is None


def test_negative_pacing_is_rejected(fresh_settings) -> None:
  fresh_settings.setenv("CONTENT_ENGINE_PACING_DELAY_SECONDS", "-1")
  with pytest.raises(ValueError, match="PACING"):
    get_settings()


def test_origins_must_be_explicit() -> None:
  with pytest.raises(ValueError):
    _parse_origins(None)
  with pytest.raises(ValueError):
    _parse_origins("https://a.test,*")


def test_backoff_schedule_parsing() -> None:
  assert _parse_delays("1, 2.5,4", (5.0,)) == (1.0, 2.5, 4.0)
  assert _parse_delays("", (5.0,)) == (5.0,)
  with pytest.raises(ValueError):
    _parse_delays("1,-2", (5.0,))


def test_env_file_does_not_override_existing_values(tmp_path, monkeypatch) -> None:
  env_file = tmp_path / ".env"
  env_file.write_text("# comment\nexport CE_TEST_NEW='quoted'\nCE_TEST_EXISTING=file\n", encoding="utf-8")
  monkeypatch.setenv("CE_TEST_EXISTING", "process")
  monkeypatch.delenv("CE_TEST_NEW", raising=False)

  load_env_file(env_file)

  assert os.environ["CE_TEST_NEW"] == "quoted"
  assert os.environ["CE_TEST_EXISTING"] == "process"
  monkeypatch.delenv("CE_TEST_NEW")
