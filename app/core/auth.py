from __future__ import annotations

import hmac
import logging

from fastapi import Header, HTTPException

from app.shared.config import get_settings


logger = logging.getLogger(__name__)


def _bearer_token(authorization: str | None) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization header.")
    token = authorization.replace("Bearer ", "", 1).strip()
    if not token:
        raise HTTPException(status_code=401, detail="Missing bearer token.")
    return token


def _require_secret(authorization: str | None, *, expected: str, env_name: str) -> None:
    if not expected:
        raise HTTPException(status_code=500, detail=f"{env_name} is required.")
    token = _bearer_token(authorization)
    if not hmac.compare_digest(token.encode("utf-8"), expected.encode("utf-8")):
        logger.warning("auth: rejected_bearer env=%s", env_name)
        raise HTTPException(status_code=401, detail="Unauthorized.")


def require_cron_secret(authorization: str | None = Header(default=None)) -> None:
    _require_secret(authorization, expected=get_settings().cron_secret, env_name="CRON_SECRET")


def require_admin_token(authorization: str | None = Header(default=None)) -> None:
    _require_secret(authorization, expected=get_settings().admin_api_token, env_name="ADMIN_API_TOKEN")
