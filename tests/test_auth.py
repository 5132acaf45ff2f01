import asyncio

import httpx
import pytest

from travelkitchen.shared.api.errors import ApiError
from travelkitchen.shared.web import auth


@pytest.mark.parametrize(
    "header, token",
    [
        (None, None),
        ("", None),
        ("Basic abc", None),
        ("Bearer ", None),
        ("Bearer abc123", "abc123"),
    ],
)
def test_bearer_token(header, token):
    assert auth._bearer_token(header) == token


def test_missing_header_is_anonymous():
    assert asyncio.run(auth.get_optional_user(None)) is None


def test_missing_header_is_rejected_when_required():
    with pytest.raises(ApiError) as exc:
        asyncio.run(auth.get_current_user(None))
    assert exc.value.status_code == 401


def test_token_resolves_to_user(monkeypatch):
    async def resolve(token):
        return auth.AuthenticatedUser(id=f"user-for-{token}")

    monkeypatch.setattr(auth, "resolve_user", resolve)
    user = asyncio.run(auth.get_current_user("Bearer t0k"))
    assert user.id == "user-for-t0k"


def test_auth_provider_outage_is_anonymous(monkeypatch):
    async def resolve(token):
        raise httpx.ConnectError("auth down")

    monkeypatch.setattr(auth, "resolve_user", resolve)
    assert asyncio.run(auth.get_optional_user("Bearer t0k")) is None


def test_health(client):
    body = client.get("/health").json()
    assert body["ok"] is True
    assert body["llm_configured"] is True


def test_require_user_uses_the_given_message():
    with pytest.raises(ApiError) as exc:
        auth.require_user(None, "You must be signed in to generate recipes")
    assert exc.value.status_code == 401
    assert exc.value.message == "You must be signed in to generate recipes"

    user = auth.AuthenticatedUser(id="user-1")
    assert auth.require_user(user) is user
