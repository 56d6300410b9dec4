"""Authentication dependencies — password hashing, bearer token, get_current_user."""

from __future__ import annotations

import hashlib
import uuid

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agriplanum.auth.jwt import AuthError, decode_token
from agriplanum.auth.models import User
from agriplanum.database import get_db

bearer_scheme = HTTPBearer(auto_error=False)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(plaintext: str) -> str:
	return pwd_context.hash(plaintext)


def verify_password(plaintext: str, hashed: str) -> bool:
	try:
		return pwd_context.verify(plaintext, hashed)
	except ValueError:
		return False


def raise_auth(exc: AuthError) -> HTTPException:
	return HTTPException(
		status_code=exc.status_code,
		detail={"error": exc.code, "message": exc.detail},
		headers={"WWW-Authenticate": "Bearer"},
	)


def extract_identity_hint(request: Request) -> str:
	"""Stable per-client bucket name for rate limiting.

	Bearer tokens are hashed so the raw credential never reaches Redis keys;
	anonymous callers fall back to the client address.
	"""
	auth_header = request.headers.get("authorization", "")
	if auth_header.lower().startswith("bearer ") and len(auth_header) > 7:
		digest = hashlib.sha256(auth_header[7:].strip().encode("utf-8")).hexdigest()
		return f"token:{digest[:16]}"
	host = request.client.host if request.client is not None else "unknown"
	return f"ip:{host}"


async def _resolve_user_from_token(
	db: AsyncSession,
	credentials: HTTPAuthorizationCredentials | None,
) -> User:
	if credentials is None or credentials.scheme.lower() != "bearer":
		raise raise_auth(AuthError(code="auth_required", detail="Bearer token is required"))

	try:
		payload = decode_token(credentials.credentials, expected_type="access")
	except AuthError as exc:
		raise raise_auth(exc) from exc

	try:
		user_id = uuid.UUID(str(payload["sub"]))
	except (ValueError, KeyError) as exc:
		raise raise_auth(AuthError(code="token_invalid", detail="Token subject is invalid")) from exc

	row = await db.execute(select(User).where(User.id == user_id))
	user = row.scalar_one_or_none()
	if user is None or not user.is_active:
		raise raise_auth(AuthError(code="user_invalid", detail="User is not active"))
	return user


async def get_current_user(
	request: Request,
	db: AsyncSession = Depends(get_db),
) -> User:
	credentials = await bearer_scheme(request)
	return await _resolve_user_from_token(db, credentials)
