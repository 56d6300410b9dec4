"""Read-only reference data: varieties and region calendars.

Calculators never reach for module-level tables; callers resolve the records
they need through a ``ReferenceProvider`` and pass them in explicitly.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from functools import lru_cache
from typing import Any, Protocol

import structlog
from redis.asyncio import Redis
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agriplanum import reference_catalog
from agriplanum.config import ReferenceSource, get_settings
from agriplanum.core.types import (
	IdealRange,
	Nutrient,
	RegionCalendar,
	VarietyProfile,
	validate_slug,
)
from agriplanum.models.enums import RegionKeyEnum
from agriplanum.models.reference import Region, Variety

logger = structlog.get_logger("agriplanum.reference")

VARIETY_CACHE_KEY = "reference:varieties"

# Soil keys used by older stored records, mapped onto canonical nutrients.
_LEGACY_SOIL_KEYS: dict[str, Nutrient] = {
	"v_percent": Nutrient.base_saturation,
	"al_cmolc": Nutrient.aluminum,
	"p_ppm": Nutrient.phosphorus,
	"k_ppm": Nutrient.potassium,
	"ca_cmolc": Nutrient.calcium,
	"mg_cmolc": Nutrient.magnesium,
	"s_ppm": Nutrient.sulfur,
	"b_ppm": Nutrient.boron,
	"zn_ppm": Nutrient.zinc,
	"n_ppm": Nutrient.nitrogen,
}


class ReferenceProvider(Protocol):
	async def list_varieties(self) -> list[VarietyProfile]: ...

	async def get_variety(self, key: str) -> VarietyProfile: ...

	async def list_regions(self) -> list[RegionCalendar]: ...

	async def get_region(self, key: str) -> RegionCalendar: ...


def _soil_nutrient(key: str) -> Nutrient | None:
	if key in _LEGACY_SOIL_KEYS:
		return _LEGACY_SOIL_KEYS[key]
	try:
		return Nutrient(key)
	except ValueError:
		return None


def variety_from_record(record: Mapping[str, Any]) -> VarietyProfile:
	"""Convert a stored variety (ORM row dict or catalog entry) into a profile."""
	ideal_soil: dict[Nutrient, IdealRange] = {}
	for raw_key, raw_range in (record.get("ideal_soil") or {}).items():
		nutrient = _soil_nutrient(raw_key)
		if nutrient is None:
			logger.warning("unknown_soil_key", variety=record.get("key"), soil_key=raw_key)
			continue
		ideal_soil[nutrient] = IdealRange.from_mapping(raw_range)

	population = record.get("target_population")
	return VarietyProfile(
		key=record["key"],
		name=record["name"],
		growth_stages=VarietyProfile.stages_from(record.get("growth_stages") or []),
		target_population=float(population) if population is not None else None,
		ideal_soil=ideal_soil,
		description=record.get("description") or "",
		details={str(k): str(v) for k, v in (record.get("details") or {}).items()},
	)


def region_from_record(record: Mapping[str, Any]) -> RegionCalendar:
	return RegionCalendar.from_mapping(str(record["key"]), record, name=record.get("name") or "")


def _variety_row_to_record(row: Variety) -> dict[str, Any]:
	return {
		"key": row.key,
		"name": row.name,
		"description": row.description,
		"growth_stages": row.growth_stages,
		"target_population": row.target_population,
		"ideal_soil": row.ideal_soil,
		"details": row.details,
	}


def _region_row_to_record(row: Region) -> dict[str, Any]:
	return {
		"key": RegionKeyEnum(row.key).value,
		"name": row.name,
		"preferential_start": row.preferential_start,
		"preferential_end": row.preferential_end,
		"tolerated_start": row.tolerated_start,
		"tolerated_end": row.tolerated_end,
	}


class StaticReferenceProvider:
	"""In-memory provider over a fixed set of records (the built-in catalog by default)."""

	def __init__(
		self,
		varieties: Iterable[Mapping[str, Any]] | None = None,
		regions: Iterable[Mapping[str, Any]] | None = None,
	):
		variety_records = reference_catalog.VARIETIES if varieties is None else varieties
		region_records = reference_catalog.REGIONS if regions is None else regions
		self._varieties = {record["key"]: variety_from_record(record) for record in variety_records}
		self._regions = {str(record["key"]): region_from_record(record) for record in region_records}

	async def list_varieties(self) -> list[VarietyProfile]:
		return sorted(self._varieties.values(), key=lambda item: item.name)

	async def get_variety(self, key: str) -> VarietyProfile:
		validate_slug(key)
		try:
			return self._varieties[key]
		except KeyError:
			raise LookupError(f"Variety {key!r} not found") from None

	async def list_regions(self) -> list[RegionCalendar]:
		return list(self._regions.values())

	async def get_region(self, key: str) -> RegionCalendar:
		try:
			return self._regions[key]
		except KeyError:
			raise LookupError(f"Region {key!r} not found") from None


class DatabaseReferenceProvider:
	"""Provider backed by the ``varieties`` / ``regions`` tables.

	The full variety listing is cached in Redis; single lookups always hit
	the database.
	"""

	def __init__(
		self,
		db: AsyncSession,
		redis_client: Redis | None = None,
		cache_seconds: int | None = None,
	):
		self.db = db
		self.redis_client = redis_client
		self.cache_seconds = cache_seconds or get_settings().reference_cache_seconds

	async def list_varieties(self) -> list[VarietyProfile]:
		if self.redis_client is not None:
			cached = await self.redis_client.get(VARIETY_CACHE_KEY)
			if cached is not None:
				return [variety_from_record(record) for record in json.loads(cached)]

		rows = await self.db.execute(select(Variety).order_by(Variety.name.asc()))
		records = [_variety_row_to_record(row) for row in rows.scalars().all()]

		if self.redis_client is not None:
			await self.redis_client.setex(VARIETY_CACHE_KEY, self.cache_seconds, json.dumps(records))
		return [variety_from_record(record) for record in records]

	async def get_variety(self, key: str) -> VarietyProfile:
		validate_slug(key)
		row = await self.db.execute(select(Variety).where(Variety.key == key))
		variety = row.scalar_one_or_none()
		if variety is None:
			raise LookupError(f"Variety {key!r} not found")
		return variety_from_record(_variety_row_to_record(variety))

	async def list_regions(self) -> list[RegionCalendar]:
		rows = await self.db.execute(select(Region).order_by(Region.name.asc()))
		return [region_from_record(_region_row_to_record(row)) for row in rows.scalars().all()]

	async def get_region(self, key: str) -> RegionCalendar:
		try:
			region_key = RegionKeyEnum(key)
		except ValueError:
			raise LookupError(f"Region {key!r} not found") from None
		row = await self.db.execute(select(Region).where(Region.key == region_key))
		region = row.scalar_one_or_none()
		if region is None:
			raise LookupError(f"Region {key!r} not found")
		return region_from_record(_region_row_to_record(region))


@lru_cache
def builtin_reference_provider() -> StaticReferenceProvider:
	return StaticReferenceProvider()


def build_reference_provider(db: AsyncSession, redis_client: Redis | None = None) -> ReferenceProvider:
	if get_settings().reference_source == ReferenceSource.builtin:
		return builtin_reference_provider()
	return DatabaseReferenceProvider(db, redis_client)
