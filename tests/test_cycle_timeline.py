from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from agriplanum.core.cycle_timeline import compute_timeline, parse_date
from agriplanum.core.errors import EmptyVarietyError, InvalidDateError, InvalidInputError, MissingRegionError
from agriplanum.core.types import GrowthStage, MonthDay, PlantingCategory, RegionCalendar, VarietyProfile


def _variety(*durations: int) -> VarietyProfile:
    return VarietyProfile(
        key="test-variety",
        name="Test Variety",
        growth_stages=tuple(GrowthStage(name, days) for name, days in zip("ABCD", durations)),
        target_population=110000,
    )


@pytest.fixture
def calendar() -> RegionCalendar:
    return RegionCalendar(
        key="mt-south",
        preferential_start=MonthDay(1, 1),
        preferential_end=MonthDay(1, 31),
        tolerated_start=MonthDay(12, 15),
        tolerated_end=MonthDay(2, 15),
    )


def test_four_stage_timeline(calendar: RegionCalendar) -> None:
    result = compute_timeline("2025-01-01", _variety(35, 25, 40, 50), calendar)

    assert result.start_date == date(2025, 1, 1)
    assert result.category == PlantingCategory.preferential
    assert result.stages[0].start_date == date(2025, 1, 1)
    assert result.stages[0].end_date == date(2025, 2, 5)
    assert result.total_cycle_days == 150
    # January 31 + February 28 + March 31 + April 30 + May 30 days.
    assert result.harvest_date == date(2025, 5, 31)


def test_stages_are_contiguous_and_additive(calendar: RegionCalendar) -> None:
    result = compute_timeline(date(2024, 12, 20), _variety(30, 25, 40, 45), calendar)

    for previous, current in zip(result.stages, result.stages[1:]):
        assert current.start_date == previous.end_date
    for stage in result.stages:
        assert stage.end_date - stage.start_date == timedelta(days=stage.duration_days)
    assert result.harvest_date == result.stages[-1].end_date
    assert (result.harvest_date - result.start_date).days == result.total_cycle_days
    assert result.category == PlantingCategory.tolerated


def test_single_stage_variety(calendar: RegionCalendar) -> None:
    result = compute_timeline("2025-06-01", _variety(90), calendar)
    assert len(result.stages) == 1
    assert result.harvest_date == date(2025, 8, 30)
    assert result.category == PlantingCategory.not_recommended


def test_leap_year_february_is_counted(calendar: RegionCalendar) -> None:
    result = compute_timeline("2024-02-01", _variety(30), calendar)
    assert result.harvest_date == date(2024, 3, 2)


def test_datetime_start_is_truncated_to_date(calendar: RegionCalendar) -> None:
    result = compute_timeline(datetime(2025, 1, 1, 18, 30), _variety(10), calendar)
    assert result.start_date == date(2025, 1, 1)
    assert result.harvest_date == date(2025, 1, 11)


@pytest.mark.parametrize(
    "value",
    ["2025-02-30", "01/01/2025", "", "not-a-date", "20250101", "2025-W01-1", "2025-001", "+025-01-01"],
)
def test_invalid_date_rejected(calendar: RegionCalendar, value: str) -> None:
    with pytest.raises(InvalidDateError) as exc_info:
        compute_timeline(value, _variety(35), calendar)
    assert exc_info.value.code == "invalid_date"
    assert isinstance(exc_info.value, InvalidInputError)


def test_parse_date_rejects_non_string_values() -> None:
    with pytest.raises(InvalidDateError):
        parse_date(20250101)  # type: ignore[arg-type]


def test_harvest_past_last_calendar_day_rejected(calendar: RegionCalendar) -> None:
    with pytest.raises(InvalidDateError) as exc_info:
        compute_timeline("9999-12-01", _variety(150), calendar)
    assert exc_info.value.code == "invalid_date"


def test_timeline_ending_on_last_calendar_day(calendar: RegionCalendar) -> None:
    result = compute_timeline("9999-12-01", _variety(30), calendar)
    assert result.harvest_date == date(9999, 12, 31)


def test_empty_variety_rejected(calendar: RegionCalendar) -> None:
    with pytest.raises(EmptyVarietyError):
        compute_timeline("2025-01-01", _variety(), calendar)


def test_missing_calendar_rejected() -> None:
    with pytest.raises(MissingRegionError):
        compute_timeline("2025-01-01", _variety(35), None)


def test_non_positive_stage_duration_rejected() -> None:
    with pytest.raises(InvalidInputError):
        GrowthStage("A", 0)
    with pytest.raises(InvalidInputError):
        GrowthStage("A", True)  # type: ignore[arg-type]
