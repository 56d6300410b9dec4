"""Field and plant CRUD, always scoped to the owning user."""

from __future__ import annotations

import uuid
from typing import Any

import structlog
from geoalchemy2.elements import WKBElement, WKTElement
from geoalchemy2.shape import from_shape, to_shape
from shapely.geometry import Point, mapping
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from agriplanum.core.geometry import field_from_points, polygon_area, to_polygon
from agriplanum.models.fields import Field, Plant
from agriplanum.schemas.fields import FieldCreate, FieldFromPlantsCreate, PlantCreate

logger = structlog.get_logger("agriplanum.fields")

SRID = 4326


def geometry_to_geojson(value: Any) -> dict[str, Any]:
	"""Render a stored geography (or an already-decoded dict) as GeoJSON."""
	if isinstance(value, dict):
		return value
	if isinstance(value, (WKBElement, WKTElement)):
		return dict(mapping(to_shape(value)))
	raise TypeError(f"unsupported geometry value {type(value).__name__}")


def location_to_latlng(value: Any) -> dict[str, float]:
	if isinstance(value, dict):
		return {"lat": float(value["lat"]), "lng": float(value["lng"])}
	point = to_shape(value)
	return {"lat": point.y, "lng": point.x}


class FieldService:
	"""Service for the user's fields and plants."""

	def __init__(self, db: AsyncSession, user_id: uuid.UUID):
		self.db = db
		self.user_id = user_id

	# ── Fields ──────────────────────────────────────────────────────────

	async def create_field(self, payload: FieldCreate) -> Field:
		polygon = to_polygon(payload.geometry.model_dump())
		area_hectares = payload.area_hectares
		if area_hectares is None:
			area_hectares = polygon_area(polygon).hectares
		return await self._insert_field(payload.name, from_shape(polygon, srid=SRID), area_hectares)

	async def create_field_from_plants(self, payload: FieldFromPlantsCreate) -> Field:
		plant_ids = list(dict.fromkeys(payload.plant_ids))
		stmt = select(Plant).where(Plant.user_id == self.user_id, Plant.id.in_(plant_ids))
		rows = await self.db.execute(stmt)
		plants = list(rows.scalars().all())
		if len(plants) != len(plant_ids):
			found = {plant.id for plant in plants}
			missing = ", ".join(str(pid) for pid in plant_ids if pid not in found)
			raise LookupError(f"Plants not found: {missing}")

		points = []
		for plant in plants:
			location = location_to_latlng(plant.location)
			points.append((location["lng"], location["lat"]))
		outline = field_from_points(points)

		polygon = to_polygon(outline.geometry)
		return await self._insert_field(
			payload.name,
			from_shape(polygon, srid=SRID),
			round(outline.area.hectares, 4),
		)

	async def list_fields(self) -> list[Field]:
		stmt = (
			select(Field)
			.where(Field.user_id == self.user_id)
			.order_by(Field.created_at.desc())
		)
		rows = await self.db.execute(stmt)
		return list(rows.scalars().all())

	async def get_field(self, field_id: uuid.UUID) -> Field:
		stmt = (
			select(Field)
			.where(Field.id == field_id, Field.user_id == self.user_id)
			.options(selectinload(Field.plants))
		)
		row = await self.db.execute(stmt)
		field = row.scalar_one_or_none()
		if field is None:
			raise LookupError(f"Field {field_id} not found")
		return field

	async def delete_field(self, field_id: uuid.UUID) -> uuid.UUID:
		field = await self.get_field(field_id)
		await self.db.delete(field)
		await self.db.flush()
		logger.info("field_deleted", field_id=str(field_id), user_id=str(self.user_id))
		return field_id

	# ── Plants ──────────────────────────────────────────────────────────

	async def create_plant(self, payload: PlantCreate) -> Plant:
		if payload.field_id is not None:
			await self.get_field(payload.field_id)

		point = Point(payload.location.lng, payload.location.lat)
		plant = Plant(
			user_id=self.user_id,
			field_id=payload.field_id,
			unique_tag=payload.unique_tag,
			location=from_shape(point, srid=SRID),
			plant_type=payload.plant_type,
			custom_data=payload.custom_data,
		)
		self.db.add(plant)
		await self.db.flush()
		await self.db.refresh(plant)
		logger.info("plant_created", plant_id=str(plant.id), field_id=str(plant.field_id))
		return plant

	async def list_plants(self) -> list[Plant]:
		stmt = (
			select(Plant)
			.where(Plant.user_id == self.user_id)
			.order_by(Plant.created_at.desc())
		)
		rows = await self.db.execute(stmt)
		return list(rows.scalars().all())

	async def get_plant(self, plant_id: uuid.UUID) -> Plant:
		stmt = select(Plant).where(Plant.id == plant_id, Plant.user_id == self.user_id)
		row = await self.db.execute(stmt)
		plant = row.scalar_one_or_none()
		if plant is None:
			raise LookupError(f"Plant {plant_id} not found")
		return plant

	async def delete_plant(self, plant_id: uuid.UUID) -> uuid.UUID:
		plant = await self.get_plant(plant_id)
		await self.db.delete(plant)
		await self.db.flush()
		logger.info("plant_deleted", plant_id=str(plant_id), user_id=str(self.user_id))
		return plant_id

	async def _insert_field(self, name: str, geometry: WKBElement, area_hectares: float) -> Field:
		field = Field(
			user_id=self.user_id,
			name=name,
			geometry=geometry,
			area_hectares=area_hectares,
		)
		self.db.add(field)
		await self.db.flush()
		await self.db.refresh(field)
		logger.info(
			"field_created",
			field_id=str(field.id),
			user_id=str(self.user_id),
			area_hectares=area_hectares,
		)
		return field
