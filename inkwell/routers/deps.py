"""Shared FastAPI dependencies: role gating and the settings store.

Authentication happens upstream at the identity provider's gateway, which
forwards the caller's role in a trusted header (``Settings.role_header``).
"""

import logging
from typing import Callable

from fastapi import HTTPException, Request

from inkwell.config import get_settings
from inkwell.services.email_settings import EmailSettingsStore

logger = logging.getLogger(__name__)

ROLE_OWNER = "OWNER"
ROLE_SCOUT = "SCOUT"

READ_ROLES = (ROLE_OWNER, ROLE_SCOUT)
WRITE_ROLES = (ROLE_OWNER,)


def require_role(*roles: str) -> Callable[[Request], str]:
    """Build a dependency that rejects callers whose role is not in *roles*."""

    def dependency(request: Request) -> str:
        role = request.headers.get(get_settings().role_header, "").strip().upper()
        if not role:
            raise HTTPException(status_code=401, detail="User not authenticated.")
        if role not in roles:
            logger.warning("Role %s denied for %s", role, request.url.path)
            raise HTTPException(status_code=403, detail="Unauthorized.")
        return role

    return dependency


def get_email_settings_store(request: Request) -> EmailSettingsStore:
    return request.app.state.email_settings_store
