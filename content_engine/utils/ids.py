"""Identifier utilities."""

from __future__ import annotations

import secrets
import string
import threading
import time
import uuid

_SLUG_ALPHABET = string.ascii_lowercase + string.digits

_token_lock = threading.Lock()
_last_token = 0


def generate_cluster_id() -> str:
  """Return a new cluster identifier."""
  return str(uuid.uuid4())


def generate_record_id() -> str:
  """Return a new identifier for content, FAQ and citation rows."""
  return str(uuid.uuid4())


def slug_token() -> str:
  """Return a millisecond timestamp token that never repeats within the process."""
  global _last_token
  with _token_lock:
    # Two slugs minted in the same millisecond still receive different tokens.
    token = max(int(time.time() * 1000), _last_token + 1)
    _last_token = token
  return str(token)


def short_suffix(size: int = 6) -> str:
  """Return a short random base36 suffix for derived slugs."""
  return "".join(secrets.choice(_SLUG_ALPHABET) for _ in range(size))
