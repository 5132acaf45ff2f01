"""
Authentication dependency shared by all route modules.

Sign-in is handled by an external auth provider. A request carries the
provider's session token as "Authorization: Bearer <token>"; the token is
resolved to a user by asking the provider's session endpoint.
"""
from __future__ import annotations

import logging
from typing import Optional

import httpx
from fastapi import Header
from pydantic import BaseModel

from travelkitchen.shared.api.errors import ApiError
from travelkitchen.shared.config.settings import settings

log = logging.getLogger("auth")

SIGN_IN_REQUIRED = "You must be signed in"


class AuthenticatedUser(BaseModel):
    id: str
    email: Optional[str] = None


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization or not authorization.startswith("Bearer "):
        return None
    token = authorization[len("Bearer "):].strip()
    return token or None


async def resolve_user(token: str) -> Optional[AuthenticatedUser]:
    """Ask the auth provider who owns `token`. Returns None for unknown tokens."""
    timeout = httpx.Timeout(settings.AUTH_REQUEST_TIMEOUT)
    async with httpx.AsyncClient(timeout=timeout) as client:
        r = await client.get(settings.AUTH_SESSION_URL, headers={"Authorization": f"Bearer {token}"})
    if r.status_code in (401, 403, 404):
        return None
    r.raise_for_status()
    data = r.json() or {}
    user = data.get("user") or {}
    if not user.get("id"):
        return None
    return AuthenticatedUser(id=str(user["id"]), email=user.get("email"))


async def get_optional_user(authorization: Optional[str] = Header(None)) -> Optional[AuthenticatedUser]:
    token = _bearer_token(authorization)
    if token is None:
        return None
    try:
        return await resolve_user(token)
    except (httpx.HTTPError, ValueError) as e:
        log.warning(f"Auth validation failed: {e}")
        return None


def require_user(user: Optional[AuthenticatedUser], message: str = SIGN_IN_REQUIRED) -> AuthenticatedUser:
    """401 with `message` unless a user was resolved."""
    if user is None:
        raise ApiError(401, message)
    return user


async def get_current_user(authorization: Optional[str] = Header(None)) -> AuthenticatedUser:
    return require_user(await get_optional_user(authorization))
