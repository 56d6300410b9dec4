from __future__ import annotations

import pytest

from agriplanum.core.errors import InvalidInputError, MissingRegionError
from agriplanum.core.planting_window import classify, in_window
from agriplanum.core.types import MonthDay, PlantingCategory, RegionCalendar


@pytest.fixture
def mt_south() -> RegionCalendar:
    return RegionCalendar(
        key="mt-south",
        preferential_start=MonthDay(1, 1),
        preferential_end=MonthDay(1, 31),
        tolerated_start=MonthDay(12, 15),
        tolerated_end=MonthDay(2, 15),
        name="Mato Grosso (South)",
    )


@pytest.mark.parametrize(
    ("month", "day", "expected"),
    [
        (1, 1, PlantingCategory.preferential),
        (1, 10, PlantingCategory.preferential),
        (1, 31, PlantingCategory.preferential),
        (12, 15, PlantingCategory.tolerated),
        (12, 20, PlantingCategory.tolerated),
        (2, 15, PlantingCategory.tolerated),
        (2, 16, PlantingCategory.not_recommended),
        (12, 14, PlantingCategory.not_recommended),
        (6, 1, PlantingCategory.not_recommended),
    ],
)
def test_classify_mt_south(mt_south: RegionCalendar, month: int, day: int, expected: PlantingCategory) -> None:
    assert classify(month, day, mt_south) == expected


def test_window_wrapping_year_end_includes_both_sides() -> None:
    start, end = MonthDay(12, 1), MonthDay(1, 15)
    assert in_window(1220, start, end)
    assert in_window(110, start, end)
    assert not in_window(601, start, end)


def test_preferential_takes_precedence_over_tolerated() -> None:
    calendar = RegionCalendar(
        key="overlap",
        preferential_start=MonthDay(3, 1),
        preferential_end=MonthDay(3, 31),
        tolerated_start=MonthDay(2, 1),
        tolerated_end=MonthDay(4, 30),
    )
    assert classify(3, 15, calendar) == PlantingCategory.preferential
    assert classify(2, 15, calendar) == PlantingCategory.tolerated


def test_missing_calendar_fails_loudly() -> None:
    with pytest.raises(MissingRegionError) as exc_info:
        classify(1, 10, None)
    assert exc_info.value.code == "missing_region"


@pytest.mark.parametrize(("month", "day"), [(0, 10), (13, 1), (5, 0), (5, 32)])
def test_out_of_range_month_or_day_rejected(mt_south: RegionCalendar, month: int, day: int) -> None:
    with pytest.raises(InvalidInputError):
        classify(month, day, mt_south)


def test_month_day_parse_and_format() -> None:
    parsed = MonthDay.parse("12-15")
    assert parsed == MonthDay(12, 15)
    assert parsed.encoded == 1215
    assert str(MonthDay(1, 5)) == "01-05"
    assert MonthDay.parse("02-29").day == 29

    with pytest.raises(InvalidInputError):
        MonthDay.parse("1215")
    with pytest.raises(InvalidInputError):
        MonthDay.parse("04-31")
