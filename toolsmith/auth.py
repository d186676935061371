from __future__ import annotations

import logging
from typing import Any, Optional

import requests
from fastapi import Header, Request

from toolsmith.config import Settings
from toolsmith.errors import Unauthorized

log = logging.getLogger(__name__)


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Token part of an ``Authorization: Bearer <token>`` header, or None."""
    if not authorization:
        return None
    parts = authorization.strip().split(None, 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1].strip() or None


def _member_id(payload: Any) -> Optional[str]:
    if not isinstance(payload, dict):
        return None
    data = payload.get("data")
    if isinstance(data, dict) and data.get("id"):
        return str(data["id"])
    if payload.get("id"):
        return str(payload["id"])
    return None


def verify_member(token: str, settings: Settings) -> str:
    """Resolve a Memberstack member token to the member id; raise Unauthorized otherwise."""
    headers = {
        "Authorization": f"Bearer {token}",
        "X-Memberstack-Key": settings.memberstack_secret_key,
    }
    try:
        resp = requests.get(settings.memberstack_api_url, headers=headers, timeout=10)
    except requests.RequestException as exc:
        log.warning("auth: member lookup failed err=%r", exc)
        raise Unauthorized("Invalid token") from exc
    if resp.status_code != 200:
        log.info("auth: member lookup HTTP %s", resp.status_code)
        raise Unauthorized("Invalid token")
    try:
        member_id = _member_id(resp.json())
    except ValueError:
        member_id = None
    if not member_id:
        log.warning("auth: member lookup returned no id")
        raise Unauthorized("Invalid token")
    return member_id


def require_member(request: Request, authorization: Optional[str] = Header(default=None)) -> str:
    """FastAPI dependency returning the caller's member id."""
    token = bearer_token(authorization)
    if not token:
        raise Unauthorized("No token provided")
    return verify_member(token, request.app.state.settings)
