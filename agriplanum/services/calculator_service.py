from __future__ import annotations

import structlog

from agriplanum.core.cycle_timeline import compute_timeline, parse_date
from agriplanum.core.planting_window import classify
from agriplanum.core.soil import analyze
from agriplanum.core.sowing import compute_seed_count
from agriplanum.core.types import FieldCondition, SoilStatus
from agriplanum.schemas.calculators import (
	CycleRequest,
	CycleResponse,
	PlantingWindowRequest,
	PlantingWindowResponse,
	SeedRequest,
	SeedResponse,
	SoilLineRead,
	SoilRequest,
	SoilResponse,
	StageRead,
)
from agriplanum.services.field_service import FieldService
from agriplanum.services.reference_service import ReferenceProvider

logger = structlog.get_logger("agriplanum.calculators")


class CalculatorService:
	"""Resolves reference records, runs the pure calculators and shapes responses."""

	def __init__(self, reference: ReferenceProvider, fields: FieldService | None = None):
		self.reference = reference
		self.fields = fields

	async def planting_window(self, payload: PlantingWindowRequest) -> PlantingWindowResponse:
		planting_date = parse_date(payload.planting_date)
		calendar = await self.reference.get_region(payload.region_key)
		category = classify(planting_date.month, planting_date.day, calendar)
		return PlantingWindowResponse(
			region_key=calendar.key,
			planting_date=planting_date,
			category=category,
		)

	async def cycle(self, payload: CycleRequest) -> CycleResponse:
		variety = await self.reference.get_variety(payload.variety_key)
		calendar = await self.reference.get_region(payload.region_key)
		timeline = compute_timeline(payload.planting_date, variety, calendar)
		logger.info(
			"cycle_computed",
			variety_key=variety.key,
			region_key=calendar.key,
			category=timeline.category.value,
			harvest_date=timeline.harvest_date.isoformat(),
		)
		return CycleResponse(
			variety_key=variety.key,
			variety_name=variety.name,
			region_key=calendar.key,
			planting_date=timeline.start_date,
			category=timeline.category,
			total_cycle_days=timeline.total_cycle_days,
			harvest_date=timeline.harvest_date,
			stages=[
				StageRead(
					name=stage.name,
					start_date=stage.start_date,
					end_date=stage.end_date,
					duration_days=stage.duration_days,
				)
				for stage in timeline.stages
			],
		)

	async def seeds(self, payload: SeedRequest) -> SeedResponse:
		variety = await self.reference.get_variety(payload.variety_key)

		area_hectares = payload.area_hectares
		if payload.field_id is not None:
			if self.fields is None:
				raise LookupError(f"Field {payload.field_id} not found")
			field = await self.fields.get_field(payload.field_id)
			area_hectares = field.area_hectares

		seeds = compute_seed_count(
			area_hectares,
			variety,
			payload.germination_rate_percent,
			payload.field_condition,
		)
		return SeedResponse(
			variety_key=variety.key,
			area_hectares=area_hectares,
			field_id=payload.field_id,
			target_population=variety.target_population,
			germination_rate_percent=payload.germination_rate_percent,
			field_condition=FieldCondition(payload.field_condition),
			seeds=seeds,
		)

	async def soil(self, payload: SoilRequest) -> SoilResponse:
		variety = await self.reference.get_variety(payload.variety_key)
		report = analyze(payload.measurements, variety)
		lines = [
			SoilLineRead(
				nutrient=line.nutrient.value,
				label=line.label,
				unit=line.unit,
				measured_value=line.measured_value,
				ideal_range=line.ideal_range,
				status=line.status,
			)
			for line in report.lines
		]
		return SoilResponse(
			variety_key=variety.key,
			lines=lines,
			deficient=[line.nutrient for line in lines if line.status == SoilStatus.low],
			excessive=[line.nutrient for line in lines if line.status == SoilStatus.high],
		)
