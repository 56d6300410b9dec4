"""Pure agronomic calculators: no I/O and no shared state."""

from agriplanum.core.cycle_timeline import compute_timeline, parse_date
from agriplanum.core.errors import (
    CalculatorError,
    EmptyVarietyError,
    InvalidDateError,
    InvalidInputError,
    MissingMeasurementError,
    MissingRegionError,
)
from agriplanum.core.geometry import field_from_points, polygon_area
from agriplanum.core.planting_window import classify
from agriplanum.core.soil import analyze
from agriplanum.core.sowing import compute_seed_count
from agriplanum.core.types import (
    FieldCondition,
    GrowthStage,
    IdealRange,
    MonthDay,
    Nutrient,
    PlantingCategory,
    RegionCalendar,
    SoilReport,
    SoilStatus,
    TimelineResult,
    VarietyProfile,
)

__all__ = [
    "CalculatorError",
    "EmptyVarietyError",
    "FieldCondition",
    "GrowthStage",
    "IdealRange",
    "InvalidDateError",
    "InvalidInputError",
    "MissingMeasurementError",
    "MissingRegionError",
    "MonthDay",
    "Nutrient",
    "PlantingCategory",
    "RegionCalendar",
    "SoilReport",
    "SoilStatus",
    "TimelineResult",
    "VarietyProfile",
    "analyze",
    "classify",
    "compute_seed_count",
    "compute_timeline",
    "field_from_points",
    "parse_date",
    "polygon_area",
]
