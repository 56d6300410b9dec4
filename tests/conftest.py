"""Shared pytest fixtures — async test client, fake DB session, fake Redis."""

from __future__ import annotations

import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from agriplanum.auth.dependencies import get_current_user
from agriplanum.auth.jwt import create_access_token
from agriplanum.database import get_db
from agriplanum.main import app
from agriplanum.routes.reference import get_reference_provider
from agriplanum.services.reference_service import StaticReferenceProvider


class FakeAsyncSession:
	def __init__(self) -> None:
		self.commit = AsyncMock()
		self.rollback = AsyncMock()
		self.close = AsyncMock()
		self.execute = AsyncMock()
		self.flush = AsyncMock()
		self.refresh = AsyncMock()
		self.delete = AsyncMock()
		self.add = MagicMock()


class FakeRedis:
	def __init__(self) -> None:
		self._store: dict[str, str] = {}
		self._counter: dict[str, int] = {}
		self.setex = AsyncMock(side_effect=self._setex)
		self.get = AsyncMock(side_effect=self._get)
		self.incr = AsyncMock(side_effect=self._incr)
		self.expire = AsyncMock(return_value=True)

	async def _setex(self, key: str, _ttl: int, value: str) -> bool:
		self._store[key] = value
		return True

	async def _get(self, key: str) -> str | None:
		return self._store.get(key)

	async def _incr(self, key: str) -> int:
		value = self._counter.get(key, 0) + 1
		self._counter[key] = value
		return value

	def reset_counters(self) -> None:
		self._counter.clear()


def scalar_result(value: Any) -> MagicMock:
	"""Mimic ``Result.scalar_one_or_none()`` for a single-row select."""
	result = MagicMock()
	result.scalar_one_or_none.return_value = value
	return result


def scalars_result(values: list[Any]) -> MagicMock:
	"""Mimic ``Result.scalars().all()`` for a multi-row select."""
	result = MagicMock()
	result.scalars.return_value.all.return_value = values
	return result


@pytest.fixture
def fake_db_session() -> FakeAsyncSession:
	"""A lightweight async-session stub for dependency overrides in API tests."""
	return FakeAsyncSession()


@pytest.fixture
def fake_redis() -> FakeRedis:
	"""Reusable fake Redis client with counters and a key/value store."""
	return FakeRedis()


@pytest.fixture
def reference_provider() -> StaticReferenceProvider:
	return StaticReferenceProvider()


@pytest.fixture
def current_user() -> SimpleNamespace:
	return SimpleNamespace(
		id=uuid.UUID("22222222-2222-2222-2222-222222222222"),
		email="grower@test.local",
		is_active=True,
		created_at=datetime(2026, 1, 1, tzinfo=UTC),
	)


@asynccontextmanager
async def _noop_lifespan(_: Any) -> AsyncGenerator[None, None]:
	yield


@asynccontextmanager
async def _test_client(overrides: dict[Any, Any]) -> AsyncGenerator[AsyncClient, None]:
	app.dependency_overrides.update(overrides)
	original_lifespan = app.router.lifespan_context
	app.router.lifespan_context = _noop_lifespan
	app.state.redis = None

	transport = ASGITransport(app=app)
	try:
		async with AsyncClient(transport=transport, base_url="http://test") as test_client:
			yield test_client
	finally:
		app.router.lifespan_context = original_lifespan
		app.dependency_overrides.clear()
		app.state.redis = None


@pytest.fixture
async def client(
	fake_db_session: FakeAsyncSession,
	reference_provider: StaticReferenceProvider,
	current_user: SimpleNamespace,
) -> AsyncGenerator[AsyncClient, None]:
	"""HTTPX async client with lifespan disabled, DB mocked and a fixed current user."""

	async def override_get_db() -> AsyncGenerator[Any, None]:
		yield fake_db_session

	async def override_current_user() -> Any:
		return current_user

	async def override_reference_provider() -> StaticReferenceProvider:
		return reference_provider

	overrides = {
		get_db: override_get_db,
		get_current_user: override_current_user,
		get_reference_provider: override_reference_provider,
	}
	async with _test_client(overrides) as test_client:
		yield test_client


@pytest.fixture
async def auth_client(
	fake_db_session: FakeAsyncSession,
	reference_provider: StaticReferenceProvider,
) -> AsyncGenerator[AsyncClient, None]:
	"""HTTPX async client with DB override only (real auth dependencies active)."""

	async def override_get_db() -> AsyncGenerator[Any, None]:
		yield fake_db_session

	async def override_reference_provider() -> StaticReferenceProvider:
		return reference_provider

	overrides = {
		get_db: override_get_db,
		get_reference_provider: override_reference_provider,
	}
	async with _test_client(overrides) as test_client:
		yield test_client


@pytest.fixture
def auth_user_id() -> uuid.UUID:
	return uuid.UUID("11111111-1111-1111-1111-111111111111")


@pytest.fixture
def access_token(auth_user_id: uuid.UUID) -> str:
	return create_access_token(str(auth_user_id), expires_minutes=30)


@pytest.fixture
def now_utc() -> datetime:
	return datetime.now(UTC)
