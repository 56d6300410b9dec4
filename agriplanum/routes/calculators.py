"""Agronomic calculator routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from agriplanum.auth.dependencies import get_current_user
from agriplanum.auth.models import User
from agriplanum.core.errors import CalculatorError, MissingMeasurementError
from agriplanum.database import get_db
from agriplanum.routes.reference import get_reference_provider
from agriplanum.schemas.calculators import (
	CycleRequest,
	CycleResponse,
	PlantingWindowRequest,
	PlantingWindowResponse,
	SeedRequest,
	SeedResponse,
	SoilRequest,
	SoilResponse,
)
from agriplanum.services.calculator_service import CalculatorService
from agriplanum.services.field_service import FieldService
from agriplanum.services.reference_service import ReferenceProvider

router = APIRouter(prefix="/calculators", tags=["calculators"])


def _map_error(exc: Exception) -> HTTPException:
	if isinstance(exc, LookupError):
		return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
	if isinstance(exc, CalculatorError):
		detail: dict[str, object] = {"error": exc.code, "message": str(exc)}
		if isinstance(exc, MissingMeasurementError):
			detail["missing"] = exc.missing
		return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)
	if isinstance(exc, ValueError):
		return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
	return HTTPException(
		status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
		detail="Unexpected calculator failure",
	)


@router.post("/planting-window", response_model=PlantingWindowResponse)
async def planting_window(
	payload: PlantingWindowRequest,
	reference: ReferenceProvider = Depends(get_reference_provider),
	_user: User = Depends(get_current_user),
) -> PlantingWindowResponse:
	service = CalculatorService(reference)
	try:
		return await service.planting_window(payload)
	except Exception as exc:
		raise _map_error(exc) from exc


@router.post("/cycle", response_model=CycleResponse)
async def cycle(
	payload: CycleRequest,
	reference: ReferenceProvider = Depends(get_reference_provider),
	_user: User = Depends(get_current_user),
) -> CycleResponse:
	service = CalculatorService(reference)
	try:
		return await service.cycle(payload)
	except Exception as exc:
		raise _map_error(exc) from exc


@router.post("/seeds", response_model=SeedResponse)
async def seeds(
	payload: SeedRequest,
	reference: ReferenceProvider = Depends(get_reference_provider),
	db: AsyncSession = Depends(get_db),
	user: User = Depends(get_current_user),
) -> SeedResponse:
	service = CalculatorService(reference, FieldService(db, user.id))
	try:
		return await service.seeds(payload)
	except Exception as exc:
		raise _map_error(exc) from exc


@router.post("/soil", response_model=SoilResponse)
async def soil(
	payload: SoilRequest,
	reference: ReferenceProvider = Depends(get_reference_provider),
	_user: User = Depends(get_current_user),
) -> SoilResponse:
	service = CalculatorService(reference)
	try:
		return await service.soil(payload)
	except Exception as exc:
		raise _map_error(exc) from exc
