"""Shared-secret guard for the admin API."""

from __future__ import annotations

import logging
import secrets
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from content_engine.config import Settings, get_settings

logger = logging.getLogger(__name__)


async def require_admin_token(settings: Annotated[Settings, Depends(get_settings)], x_admin_token: Annotated[str | None, Header()] = None) -> None:
  """Reject callers that do not present the configured admin token."""
  # Deny by default so an unset token never opens the admin surface.
  if not settings.admin_token:
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin authentication is not configured.")

  if not secrets.compare_digest(x_admin_token or "", settings.admin_token):
    logger.warning("Rejected admin request with invalid token")
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid admin token.")
