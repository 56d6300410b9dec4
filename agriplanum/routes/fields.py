"""Field and plant CRUD routes (owner-scoped)."""

from __future__ import annotations

import uuid
from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from agriplanum.auth.dependencies import get_current_user
from agriplanum.auth.models import User
from agriplanum.core.errors import CalculatorError
from agriplanum.database import get_db
from agriplanum.schemas.fields import (
	DeleteResponse,
	FieldCreate,
	FieldDetailRead,
	FieldFromPlantsCreate,
	FieldListRead,
	FieldRead,
	Location,
	PlantCreate,
	PlantListRead,
	PlantRead,
)
from agriplanum.services.field_service import FieldService, geometry_to_geojson, location_to_latlng

router = APIRouter(tags=["fields"])
logger = structlog.get_logger("agriplanum.fields")


def _map_error(exc: Exception) -> HTTPException:
	if isinstance(exc, LookupError):
		return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
	if isinstance(exc, IntegrityError):
		return HTTPException(
			status_code=status.HTTP_409_CONFLICT,
			detail={"error": "conflict", "message": "Record conflicts with an existing one"},
		)
	if isinstance(exc, CalculatorError):
		return HTTPException(
			status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
			detail={"error": exc.code, "message": str(exc)},
		)
	if isinstance(exc, ValueError):
		return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
	logger.error("field_service_failure", error=str(exc), error_type=type(exc).__name__)
	return HTTPException(
		status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
		detail="Unexpected field service failure",
	)


def _to_plant_read(plant: Any) -> PlantRead:
	return PlantRead(
		id=plant.id,
		field_id=plant.field_id,
		unique_tag=plant.unique_tag,
		location=Location(**location_to_latlng(plant.location)),
		plant_type=plant.plant_type,
		custom_data=plant.custom_data or {},
		created_at=plant.created_at,
		updated_at=plant.updated_at,
	)


def _to_field_read(field: Any) -> FieldRead:
	return FieldRead(
		id=field.id,
		name=field.name,
		geometry=geometry_to_geojson(field.geometry),
		area_hectares=field.area_hectares,
		created_at=field.created_at,
		updated_at=field.updated_at,
	)


def _to_field_detail_read(field: Any) -> FieldDetailRead:
	return FieldDetailRead(
		**_to_field_read(field).model_dump(),
		plants=[_to_plant_read(plant) for plant in field.plants],
	)


# ── Fields ──────────────────────────────────────────────────────────────────


@router.post("/fields", response_model=FieldRead, status_code=status.HTTP_201_CREATED)
async def create_field(
	payload: FieldCreate,
	db: AsyncSession = Depends(get_db),
	user: User = Depends(get_current_user),
) -> FieldRead:
	service = FieldService(db, user.id)
	try:
		field = await service.create_field(payload)
	except Exception as exc:
		raise _map_error(exc) from exc
	return _to_field_read(field)


@router.post("/fields/from-plants", response_model=FieldRead, status_code=status.HTTP_201_CREATED)
async def create_field_from_plants(
	payload: FieldFromPlantsCreate,
	db: AsyncSession = Depends(get_db),
	user: User = Depends(get_current_user),
) -> FieldRead:
	service = FieldService(db, user.id)
	try:
		field = await service.create_field_from_plants(payload)
	except Exception as exc:
		raise _map_error(exc) from exc
	return _to_field_read(field)


@router.get("/fields", response_model=FieldListRead)
async def list_fields(
	db: AsyncSession = Depends(get_db),
	user: User = Depends(get_current_user),
) -> FieldListRead:
	service = FieldService(db, user.id)
	try:
		fields = await service.list_fields()
	except Exception as exc:
		raise _map_error(exc) from exc
	return FieldListRead(items=[_to_field_read(field) for field in fields])


@router.get("/fields/{field_id}", response_model=FieldDetailRead)
async def get_field(
	field_id: uuid.UUID,
	db: AsyncSession = Depends(get_db),
	user: User = Depends(get_current_user),
) -> FieldDetailRead:
	service = FieldService(db, user.id)
	try:
		field = await service.get_field(field_id)
	except Exception as exc:
		raise _map_error(exc) from exc
	return _to_field_detail_read(field)


@router.delete("/fields/{field_id}", response_model=DeleteResponse)
async def delete_field(
	field_id: uuid.UUID,
	db: AsyncSession = Depends(get_db),
	user: User = Depends(get_current_user),
) -> DeleteResponse:
	service = FieldService(db, user.id)
	try:
		deleted_id = await service.delete_field(field_id)
	except Exception as exc:
		raise _map_error(exc) from exc
	return DeleteResponse(id=deleted_id)


# ── Plants ──────────────────────────────────────────────────────────────────


@router.post("/plants", response_model=PlantRead, status_code=status.HTTP_201_CREATED)
async def create_plant(
	payload: PlantCreate,
	db: AsyncSession = Depends(get_db),
	user: User = Depends(get_current_user),
) -> PlantRead:
	service = FieldService(db, user.id)
	try:
		plant = await service.create_plant(payload)
	except Exception as exc:
		raise _map_error(exc) from exc
	return _to_plant_read(plant)


@router.get("/plants", response_model=PlantListRead)
async def list_plants(
	db: AsyncSession = Depends(get_db),
	user: User = Depends(get_current_user),
) -> PlantListRead:
	service = FieldService(db, user.id)
	try:
		plants = await service.list_plants()
	except Exception as exc:
		raise _map_error(exc) from exc
	return PlantListRead(items=[_to_plant_read(plant) for plant in plants])


@router.get("/plants/{plant_id}", response_model=PlantRead)
async def get_plant(
	plant_id: uuid.UUID,
	db: AsyncSession = Depends(get_db),
	user: User = Depends(get_current_user),
) -> PlantRead:
	service = FieldService(db, user.id)
	try:
		plant = await service.get_plant(plant_id)
	except Exception as exc:
		raise _map_error(exc) from exc
	return _to_plant_read(plant)


@router.delete("/plants/{plant_id}", response_model=DeleteResponse)
async def delete_plant(
	plant_id: uuid.UUID,
	db: AsyncSession = Depends(get_db),
	user: User = Depends(get_current_user),
) -> DeleteResponse:
	service = FieldService(db, user.id)
	try:
		deleted_id = await service.delete_plant(plant_id)
	except Exception as exc:
		raise _map_error(exc) from exc
	return DeleteResponse(id=deleted_id)
