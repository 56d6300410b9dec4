"""Account registration and token issuance."""

from __future__ import annotations

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agriplanum.auth.dependencies import hash_password, verify_password
from agriplanum.auth.jwt import AuthError, TokenPair, create_access_token, decode_token, issue_token_pair
from agriplanum.auth.models import User
from agriplanum.config import get_settings
from agriplanum.schemas.auth import Credentials, TokenResponse

logger = structlog.get_logger("agriplanum.auth")


class AuthService:
	def __init__(self, db: AsyncSession):
		self.db = db

	async def register(self, credentials: Credentials) -> User:
		existing = await self.db.execute(select(User.id).where(User.email == credentials.email))
		if existing.scalar_one_or_none() is not None:
			raise AuthError(code="email_taken", detail="Email is already registered", status_code=409)

		user = User(email=credentials.email, hashed_password=hash_password(credentials.password))
		self.db.add(user)
		await self.db.flush()
		await self.db.refresh(user)
		logger.info("user_registered", user_id=str(user.id))
		return user

	async def login(self, credentials: Credentials) -> TokenPair:
		row = await self.db.execute(select(User).where(User.email == credentials.email))
		user = row.scalar_one_or_none()
		if user is None or not verify_password(credentials.password, user.hashed_password):
			logger.info("login_failed", email=credentials.email)
			raise AuthError(code="invalid_credentials", detail="Email or password is incorrect")
		if not user.is_active:
			raise AuthError(code="user_invalid", detail="User is not active")

		logger.info("user_logged_in", user_id=str(user.id))
		return issue_token_pair(str(user.id))

	async def refresh(self, refresh_token: str) -> TokenResponse:
		payload = decode_token(refresh_token, expected_type="refresh")
		subject = str(payload["sub"])
		return TokenResponse(
			access_token=create_access_token(subject),
			expires_in=get_settings().jwt_access_token_expire_minutes * 60,
		)
