"""Pydantic request/response schemas for fields and plants."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


class PolygonGeometry(BaseModel):
	"""GeoJSON Polygon, coordinates in ``[lng, lat]`` order."""

	type: Literal["Polygon"] = "Polygon"
	coordinates: list[list[list[float]]] = Field(min_length=1)


class Location(BaseModel):
	lat: float = Field(ge=-90, le=90)
	lng: float = Field(ge=-180, le=180)


class FieldCreate(BaseModel):
	name: str = Field(min_length=1, max_length=255)
	geometry: PolygonGeometry
	area_hectares: float | None = Field(default=None, gt=0)


class FieldFromPlantsCreate(BaseModel):
	name: str = Field(min_length=1, max_length=255)
	plant_ids: list[uuid.UUID] = Field(min_length=3)


class PlantCreate(BaseModel):
	location: Location
	plant_type: str = Field(min_length=1, max_length=100)
	field_id: uuid.UUID | None = None
	unique_tag: str | None = Field(default=None, min_length=1, max_length=100)
	custom_data: dict[str, Any] = Field(default_factory=dict)


class PlantRead(BaseModel):
	id: uuid.UUID
	field_id: uuid.UUID | None
	unique_tag: str | None
	location: Location
	plant_type: str
	custom_data: dict[str, Any] = Field(default_factory=dict)
	created_at: datetime
	updated_at: datetime


class FieldRead(BaseModel):
	id: uuid.UUID
	name: str
	geometry: dict[str, Any]
	area_hectares: float
	created_at: datetime
	updated_at: datetime


class FieldDetailRead(FieldRead):
	plants: list[PlantRead] = Field(default_factory=list)


class FieldListRead(BaseModel):
	items: list[FieldRead]


class PlantListRead(BaseModel):
	items: list[PlantRead]


class DeleteResponse(BaseModel):
	id: uuid.UUID
	deleted: bool = True
