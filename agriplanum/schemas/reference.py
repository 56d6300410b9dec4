"""Pydantic schemas for reference varieties and region calendars."""

from __future__ import annotations

from pydantic import BaseModel, Field


class GrowthStageRead(BaseModel):
	name: str
	duration_days: int


class IdealRangeRead(BaseModel):
	min: float
	max: float | None = None
	reversed: bool = False
	description: str


class VarietyRead(BaseModel):
	key: str
	name: str
	description: str = ""
	growth_stages: list[GrowthStageRead]
	total_cycle_days: int
	target_population: float | None = None
	ideal_soil: dict[str, IdealRangeRead] = Field(default_factory=dict)
	details: dict[str, str] = Field(default_factory=dict)


class VarietyListRead(BaseModel):
	items: list[VarietyRead]


class RegionRead(BaseModel):
	key: str
	name: str
	preferential_start: str
	preferential_end: str
	tolerated_start: str
	tolerated_end: str


class RegionListRead(BaseModel):
	items: list[RegionRead]
