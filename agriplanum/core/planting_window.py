"""Planting window classification against a region calendar."""

from __future__ import annotations

from agriplanum.core.errors import InvalidInputError, MissingRegionError
from agriplanum.core.types import MonthDay, PlantingCategory, RegionCalendar


def in_window(target: int, start: MonthDay, end: MonthDay) -> bool:
    """Return True when the encoded ``target`` (``month*100 + day``) lies in [start, end].

    A window whose start is later in the year than its end wraps across
    December 31st.
    """
    lower = start.encoded
    upper = end.encoded
    if lower > upper:
        return target >= lower or target <= upper
    return lower <= target <= upper


def classify(month: int, day: int, calendar: RegionCalendar | None) -> PlantingCategory:
    """Classify a planting day as preferential, tolerated or not recommended."""
    if calendar is None:
        raise MissingRegionError("a region calendar is required to classify a planting date")
    if not 1 <= month <= 12:
        raise InvalidInputError(f"month must be 1-12, got {month}")
    if not 1 <= day <= 31:
        raise InvalidInputError(f"day must be 1-31, got {day}")

    target = month * 100 + day
    if in_window(target, calendar.preferential_start, calendar.preferential_end):
        return PlantingCategory.preferential
    if in_window(target, calendar.tolerated_start, calendar.tolerated_end):
        return PlantingCategory.tolerated
    return PlantingCategory.not_recommended
