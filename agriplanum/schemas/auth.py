"""Pydantic schemas for registration, login and token refresh."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Credentials(BaseModel):
	email: str = Field(min_length=3, max_length=320)
	password: str = Field(min_length=8, max_length=72)

	@field_validator("email")
	@classmethod
	def _normalize_email(cls, value: str) -> str:
		value = value.strip().lower()
		local, sep, domain = value.partition("@")
		if not sep or not local or "." not in domain:
			raise ValueError("email address is not valid")
		return value


class RefreshRequest(BaseModel):
	refresh_token: str = Field(min_length=1)


class TokenResponse(BaseModel):
	access_token: str
	refresh_token: str | None = None
	token_type: str = "bearer"
	expires_in: int


class UserRead(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: uuid.UUID
	email: str
	is_active: bool
	created_at: datetime
