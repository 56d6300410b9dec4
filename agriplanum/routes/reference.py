"""Reference data routes: seed varieties and regional planting calendars."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from agriplanum.auth.dependencies import get_current_user
from agriplanum.auth.models import User
from agriplanum.core.errors import CalculatorError
from agriplanum.core.types import RegionCalendar, VarietyProfile
from agriplanum.database import get_db
from agriplanum.schemas.reference import (
	GrowthStageRead,
	IdealRangeRead,
	RegionListRead,
	RegionRead,
	VarietyListRead,
	VarietyRead,
)
from agriplanum.services.reference_service import ReferenceProvider, build_reference_provider

router = APIRouter(tags=["reference"])


async def get_reference_provider(
	request: Request,
	db: AsyncSession = Depends(get_db),
) -> ReferenceProvider:
	redis_client = getattr(request.app.state, "redis", None)
	return build_reference_provider(db, redis_client)


def _map_error(exc: Exception) -> HTTPException:
	if isinstance(exc, LookupError):
		return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
	if isinstance(exc, CalculatorError):
		return HTTPException(
			status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
			detail={"error": exc.code, "message": str(exc)},
		)
	return HTTPException(
		status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
		detail="Unexpected reference data failure",
	)


def to_variety_read(variety: VarietyProfile) -> VarietyRead:
	return VarietyRead(
		key=variety.key,
		name=variety.name,
		description=variety.description,
		growth_stages=[
			GrowthStageRead(name=stage.name, duration_days=stage.duration_days)
			for stage in variety.growth_stages
		],
		total_cycle_days=variety.total_cycle_days,
		target_population=variety.target_population,
		ideal_soil={
			nutrient.value: IdealRangeRead(
				min=ideal.min,
				max=ideal.max,
				reversed=ideal.reversed,
				description=ideal.description,
			)
			for nutrient, ideal in variety.ideal_soil.items()
		},
		details=dict(variety.details),
	)


def to_region_read(calendar: RegionCalendar) -> RegionRead:
	return RegionRead(
		key=calendar.key,
		name=calendar.name,
		preferential_start=str(calendar.preferential_start),
		preferential_end=str(calendar.preferential_end),
		tolerated_start=str(calendar.tolerated_start),
		tolerated_end=str(calendar.tolerated_end),
	)


@router.get("/varieties", response_model=VarietyListRead)
async def list_varieties(
	reference: ReferenceProvider = Depends(get_reference_provider),
	_user: User = Depends(get_current_user),
) -> VarietyListRead:
	try:
		varieties = await reference.list_varieties()
	except Exception as exc:
		raise _map_error(exc) from exc
	return VarietyListRead(items=[to_variety_read(variety) for variety in varieties])


@router.get("/varieties/{variety_key}", response_model=VarietyRead)
async def get_variety(
	variety_key: str,
	reference: ReferenceProvider = Depends(get_reference_provider),
	_user: User = Depends(get_current_user),
) -> VarietyRead:
	try:
		variety = await reference.get_variety(variety_key)
	except Exception as exc:
		raise _map_error(exc) from exc
	return to_variety_read(variety)


@router.get("/regions", response_model=RegionListRead)
async def list_regions(
	reference: ReferenceProvider = Depends(get_reference_provider),
	_user: User = Depends(get_current_user),
) -> RegionListRead:
	try:
		regions = await reference.list_regions()
	except Exception as exc:
		raise _map_error(exc) from exc
	return RegionListRead(items=[to_region_read(region) for region in regions])
