"""Registration, login, token refresh and current-user routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from agriplanum.auth.dependencies import get_current_user, raise_auth
from agriplanum.auth.jwt import AuthError
from agriplanum.auth.models import User
from agriplanum.database import get_db
from agriplanum.schemas.auth import Credentials, RefreshRequest, TokenResponse, UserRead
from agriplanum.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


def _map_error(exc: Exception) -> HTTPException:
	if isinstance(exc, AuthError):
		return raise_auth(exc)
	if isinstance(exc, IntegrityError):
		return HTTPException(
			status_code=status.HTTP_409_CONFLICT,
			detail={"error": "email_taken", "message": "Email is already registered"},
		)
	return HTTPException(
		status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
		detail="Unexpected auth service failure",
	)


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register(payload: Credentials, db: AsyncSession = Depends(get_db)) -> UserRead:
	service = AuthService(db)
	try:
		user = await service.register(payload)
	except Exception as exc:
		raise _map_error(exc) from exc
	return UserRead.model_validate(user)


@router.post("/login", response_model=TokenResponse)
async def login(payload: Credentials, db: AsyncSession = Depends(get_db)) -> TokenResponse:
	service = AuthService(db)
	try:
		pair = await service.login(payload)
	except Exception as exc:
		raise _map_error(exc) from exc
	return TokenResponse(
		access_token=pair.access_token,
		refresh_token=pair.refresh_token,
		token_type=pair.token_type,
		expires_in=pair.expires_in,
	)


@router.post("/refresh", response_model=TokenResponse)
async def refresh(payload: RefreshRequest, db: AsyncSession = Depends(get_db)) -> TokenResponse:
	service = AuthService(db)
	try:
		return await service.refresh(payload.refresh_token)
	except Exception as exc:
		raise _map_error(exc) from exc


@router.get("/me", response_model=UserRead)
async def me(user: User = Depends(get_current_user)) -> UserRead:
	return UserRead.model_validate(user)
