"""Pydantic schemas for the agronomic calculator endpoints.

Dates and measurements are accepted loosely and validated by the calculators
themselves, so malformed values surface as calculator errors (``invalid_date``,
``missing_measurement``) rather than generic validation failures.
"""

from __future__ import annotations

import uuid
from datetime import date
from typing import Any

from pydantic import BaseModel, Field, model_validator

from agriplanum.core.types import FieldCondition, PlantingCategory, SoilStatus


class PlantingWindowRequest(BaseModel):
	region_key: str = Field(min_length=1, max_length=100)
	planting_date: str


class PlantingWindowResponse(BaseModel):
	region_key: str
	planting_date: date
	category: PlantingCategory


class CycleRequest(BaseModel):
	variety_key: str = Field(min_length=1, max_length=100)
	region_key: str = Field(min_length=1, max_length=100)
	planting_date: str


class StageRead(BaseModel):
	name: str
	start_date: date
	end_date: date
	duration_days: int


class CycleResponse(BaseModel):
	variety_key: str
	variety_name: str
	region_key: str
	planting_date: date
	category: PlantingCategory
	total_cycle_days: int
	harvest_date: date
	stages: list[StageRead] = Field(default_factory=list)


class SeedRequest(BaseModel):
	variety_key: str = Field(min_length=1, max_length=100)
	germination_rate_percent: float
	field_condition: str = FieldCondition.good.value
	area_hectares: float | None = None
	field_id: uuid.UUID | None = None

	@model_validator(mode="after")
	def _validate_area_source(self) -> "SeedRequest":
		if (self.area_hectares is None) == (self.field_id is None):
			raise ValueError("provide exactly one of area_hectares or field_id")
		return self


class SeedResponse(BaseModel):
	variety_key: str
	area_hectares: float
	field_id: uuid.UUID | None = None
	target_population: float
	germination_rate_percent: float
	field_condition: FieldCondition
	seeds: int


class SoilRequest(BaseModel):
	variety_key: str = Field(min_length=1, max_length=100)
	measurements: dict[str, Any]


class SoilLineRead(BaseModel):
	nutrient: str
	label: str
	unit: str
	measured_value: float
	ideal_range: str
	status: SoilStatus


class SoilResponse(BaseModel):
	variety_key: str
	lines: list[SoilLineRead] = Field(default_factory=list)
	deficient: list[str] = Field(default_factory=list)
	excessive: list[str] = Field(default_factory=list)
