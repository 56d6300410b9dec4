"""Seed the reference tables from the built-in catalog.

Usage::

    python -m scripts.seed_db            # upsert varieties and regions
    python -m scripts.seed_db --dry-run  # validate the catalog only

Rows are upserted on their natural key, so the script is safe to re-run
after editing ``agriplanum/reference_catalog.py``.
"""

from __future__ import annotations

import argparse
import asyncio
from collections.abc import Iterable, Mapping
from typing import Any

import structlog
from sqlalchemy.dialects.postgresql import insert

from agriplanum import reference_catalog
from agriplanum.database import async_session_factory, engine
from agriplanum.middleware.logging import configure_structured_logging
from agriplanum.models.enums import RegionKeyEnum
from agriplanum.models.reference import Region, Variety
from agriplanum.services.reference_service import region_from_record, variety_from_record

logger = structlog.get_logger("agriplanum.seed")

_VARIETY_COLUMNS = ("name", "description", "growth_stages", "target_population", "ideal_soil", "details")
_REGION_COLUMNS = ("name", "preferential_start", "preferential_end", "tolerated_start", "tolerated_end")


def _build_variety_rows(records: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
	"""Validate catalog varieties and shape them as ``varieties`` rows."""
	rows: list[dict[str, Any]] = []
	seen: set[str] = set()
	for record in records:
		profile = variety_from_record(record)
		if profile.key in seen:
			raise ValueError(f"duplicate variety key {profile.key!r}")
		seen.add(profile.key)
		rows.append(
			{
				"key": profile.key,
				"name": profile.name,
				"description": profile.description or None,
				"growth_stages": [
					{"name": stage.name, "duration_days": stage.duration_days}
					for stage in profile.growth_stages
				],
				"target_population": profile.target_population,
				"ideal_soil": {str(key): dict(value) for key, value in record["ideal_soil"].items()},
				"details": dict(record.get("details") or {}),
			}
		)
	return rows


def _build_region_rows(records: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
	"""Validate catalog regions and shape them as ``regions`` rows."""
	rows: list[dict[str, Any]] = []
	for record in records:
		calendar = region_from_record(record)
		rows.append(
			{
				"key": RegionKeyEnum(calendar.key),
				"name": calendar.name,
				"preferential_start": str(calendar.preferential_start),
				"preferential_end": str(calendar.preferential_end),
				"tolerated_start": str(calendar.tolerated_start),
				"tolerated_end": str(calendar.tolerated_end),
			}
		)
	return rows


async def seed(dry_run: bool = False) -> tuple[int, int]:
	variety_rows = _build_variety_rows(reference_catalog.VARIETIES)
	region_rows = _build_region_rows(reference_catalog.REGIONS)
	if dry_run:
		logger.info("seed_dry_run", varieties=len(variety_rows), regions=len(region_rows))
		return len(variety_rows), len(region_rows)

	async with async_session_factory() as session:
		variety_stmt = insert(Variety).values(variety_rows)
		variety_stmt = variety_stmt.on_conflict_do_update(
			index_elements=[Variety.key],
			set_={column: variety_stmt.excluded[column] for column in _VARIETY_COLUMNS},
		)
		await session.execute(variety_stmt)

		region_stmt = insert(Region).values(region_rows)
		region_stmt = region_stmt.on_conflict_do_update(
			index_elements=[Region.key],
			set_={column: region_stmt.excluded[column] for column in _REGION_COLUMNS},
		)
		await session.execute(region_stmt)
		await session.commit()

	logger.info("seed_complete", varieties=len(variety_rows), regions=len(region_rows))
	return len(variety_rows), len(region_rows)


async def _main(dry_run: bool) -> None:
	try:
		await seed(dry_run=dry_run)
	finally:
		await engine.dispose()


if __name__ == "__main__":
	parser = argparse.ArgumentParser(description="Seed AgriPlanum reference data")
	parser.add_argument("--dry-run", action="store_true", help="validate the catalog without writing")
	args = parser.parse_args()
	configure_structured_logging()
	asyncio.run(_main(args.dry_run))
