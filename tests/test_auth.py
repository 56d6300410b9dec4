from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from types import SimpleNamespace
from typing import Any
from uuid import UUID, uuid4

import pytest
from httpx import AsyncClient

from agriplanum.auth.dependencies import extract_identity_hint, hash_password, verify_password
from agriplanum.auth.jwt import AuthError, create_access_token, create_refresh_token, decode_token
from agriplanum.main import app
from tests.conftest import FakeAsyncSession, FakeRedis, scalar_result


def _stored_user(user_id: UUID, password: str = "correct-horse", is_active: bool = True) -> SimpleNamespace:
    return SimpleNamespace(
        id=user_id,
        email="grower@test.local",
        hashed_password=hash_password(password),
        is_active=is_active,
        created_at=datetime(2026, 1, 1, tzinfo=UTC),
    )


@pytest.mark.asyncio
async def test_missing_jwt_rejected_on_protected_endpoint(auth_client: AsyncClient) -> None:
    response = await auth_client.get("/api/v1/fields")
    assert response.status_code == 401
    assert response.json()["detail"]["error"] == "auth_required"
    assert response.headers["www-authenticate"] == "Bearer"


def test_jwt_create_decode_roundtrip(auth_user_id: UUID) -> None:
    token = create_access_token(str(auth_user_id), expires_minutes=5)
    payload = decode_token(token, expected_type="access")
    assert payload["sub"] == str(auth_user_id)
    assert payload["typ"] == "access"


def test_decode_invalid_token_raises_auth_error() -> None:
    with pytest.raises(AuthError) as exc_info:
        decode_token("invalid.token.payload", expected_type="access")
    assert exc_info.value.code == "token_invalid"


def test_refresh_token_is_not_an_access_token(auth_user_id: UUID) -> None:
    token = create_refresh_token(str(auth_user_id))
    with pytest.raises(AuthError) as exc_info:
        decode_token(token, expected_type="access")
    assert exc_info.value.code == "token_type_invalid"


def test_expired_token_rejected(auth_user_id: UUID) -> None:
    token = create_access_token(str(auth_user_id), expires_minutes=-1)
    with pytest.raises(AuthError) as exc_info:
        decode_token(token, expected_type="access")
    assert exc_info.value.code == "token_expired"


def test_password_hashing() -> None:
    hashed = hash_password("correct-horse")
    assert hashed != "correct-horse"
    assert verify_password("correct-horse", hashed)
    assert not verify_password("wrong-horse", hashed)
    assert not verify_password("correct-horse", "not-a-bcrypt-hash")


@pytest.mark.asyncio
async def test_register_creates_user(auth_client: AsyncClient, fake_db_session: FakeAsyncSession) -> None:
    fake_db_session.execute.return_value = scalar_result(None)

    async def _refresh(obj: Any) -> None:
        obj.id = uuid4()
        obj.is_active = True
        obj.created_at = datetime(2026, 1, 1, tzinfo=UTC)

    fake_db_session.refresh.side_effect = _refresh

    response = await auth_client.post(
        "/api/v1/auth/register",
        json={"email": "  Grower@Test.Local ", "password": "correct-horse"},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "grower@test.local"
    assert "hashed_password" not in body

    added_user = fake_db_session.add.call_args.args[0]
    assert verify_password("correct-horse", added_user.hashed_password)


@pytest.mark.asyncio
async def test_register_duplicate_email_conflicts(auth_client: AsyncClient, fake_db_session: FakeAsyncSession) -> None:
    fake_db_session.execute.return_value = scalar_result(uuid4())
    response = await auth_client.post(
        "/api/v1/auth/register",
        json={"email": "grower@test.local", "password": "correct-horse"},
    )
    assert response.status_code == 409
    assert response.json()["detail"]["error"] == "email_taken"


@pytest.mark.asyncio
async def test_register_rejects_short_password(auth_client: AsyncClient) -> None:
    response = await auth_client.post(
        "/api/v1/auth/register",
        json={"email": "grower@test.local", "password": "short"},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_login_returns_token_pair(
    auth_client: AsyncClient,
    fake_db_session: FakeAsyncSession,
    auth_user_id: UUID,
) -> None:
    fake_db_session.execute.return_value = scalar_result(_stored_user(auth_user_id))

    response = await auth_client.post(
        "/api/v1/auth/login",
        json={"email": "grower@test.local", "password": "correct-horse"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert decode_token(body["access_token"], expected_type="access")["sub"] == str(auth_user_id)
    assert decode_token(body["refresh_token"], expected_type="refresh")["sub"] == str(auth_user_id)


@pytest.mark.asyncio
async def test_login_wrong_password(
    auth_client: AsyncClient,
    fake_db_session: FakeAsyncSession,
    auth_user_id: UUID,
) -> None:
    fake_db_session.execute.return_value = scalar_result(_stored_user(auth_user_id))

    response = await auth_client.post(
        "/api/v1/auth/login",
        json={"email": "grower@test.local", "password": "wrong-horse"},
    )
    assert response.status_code == 401
    assert response.json()["detail"]["error"] == "invalid_credentials"


@pytest.mark.asyncio
async def test_refresh_issues_new_access_token(auth_client: AsyncClient, auth_user_id: UUID) -> None:
    refresh_token = create_refresh_token(str(auth_user_id))
    response = await auth_client.post("/api/v1/auth/refresh", json={"refresh_token": refresh_token})
    assert response.status_code == 200
    body = response.json()
    assert body["refresh_token"] is None
    assert decode_token(body["access_token"], expected_type="access")["sub"] == str(auth_user_id)


@pytest.mark.asyncio
async def test_refresh_rejects_access_token(auth_client: AsyncClient, access_token: str) -> None:
    response = await auth_client.post("/api/v1/auth/refresh", json={"refresh_token": access_token})
    assert response.status_code == 401
    assert response.json()["detail"]["error"] == "token_type_invalid"


@pytest.mark.asyncio
async def test_me_resolves_bearer_token(
    auth_client: AsyncClient,
    fake_db_session: FakeAsyncSession,
    access_token: str,
    auth_user_id: UUID,
) -> None:
    fake_db_session.execute.return_value = scalar_result(_stored_user(auth_user_id))
    response = await auth_client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {access_token}"})
    assert response.status_code == 200
    assert response.json()["id"] == str(auth_user_id)


@pytest.mark.asyncio
async def test_inactive_user_rejected(
    auth_client: AsyncClient,
    fake_db_session: FakeAsyncSession,
    access_token: str,
    auth_user_id: UUID,
) -> None:
    fake_db_session.execute.return_value = scalar_result(_stored_user(auth_user_id, is_active=False))
    response = await auth_client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {access_token}"})
    assert response.status_code == 401
    assert response.json()["detail"]["error"] == "user_invalid"


@pytest.mark.asyncio
async def test_rate_limit_per_client(
    fake_redis: FakeRedis,
    client: AsyncClient,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    app.state.redis = fake_redis

    @dataclass
    class _SettingsStub:
        rate_limit_per_minute: int = 1

    monkeypatch.setattr("agriplanum.middleware.rate_limit.get_settings", lambda: _SettingsStub())

    first = await client.get("/api/v1/regions")
    second = await client.get("/api/v1/regions")

    assert first.status_code == 200
    assert second.status_code == 429
    assert second.json()["detail"]["error"] == "rate_limited"
    assert second.headers["retry-after"] == "60"
    fake_redis.expire.assert_awaited_once()


@pytest.mark.asyncio
async def test_rate_limit_skips_non_api_paths(
    fake_redis: FakeRedis,
    client: AsyncClient,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    app.state.redis = fake_redis

    @dataclass
    class _SettingsStub:
        rate_limit_per_minute: int = 0

    monkeypatch.setattr("agriplanum.middleware.rate_limit.get_settings", lambda: _SettingsStub())

    response = await client.get("/health")
    assert response.status_code == 200
    fake_redis.incr.assert_not_awaited()


def test_identity_hint_hashes_bearer_token() -> None:
    with_token = SimpleNamespace(headers={"authorization": "Bearer secret-token"}, client=None)
    anonymous = SimpleNamespace(headers={}, client=SimpleNamespace(host="10.0.0.7"))

    hint = extract_identity_hint(with_token)  # type: ignore[arg-type]
    assert hint.startswith("token:")
    assert "secret-token" not in hint
    assert extract_identity_hint(anonymous) == "ip:10.0.0.7"  # type: ignore[arg-type]
