"""Crop cycle timeline: stage-by-stage dates from a planting date."""

from __future__ import annotations

from datetime import date, datetime, timedelta

from agriplanum.core.errors import EmptyVarietyError, InvalidDateError
from agriplanum.core.planting_window import classify
from agriplanum.core.types import RegionCalendar, StageWindow, TimelineResult, VarietyProfile


def parse_date(value: date | str) -> date:
    """Coerce ``value`` to a naive calendar date.

    Datetimes are truncated to their date; strings must be ISO ``YYYY-MM-DD``.
    Compact (``20250101``) and week-date (``2025-W01-1``) ISO forms are refused.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidDateError(f"unsupported date value {value!r}")
    text = value.strip()
    if len(text) != 10 or text[4] != "-" or text[7] != "-" or not text.replace("-", "").isdigit():
        raise InvalidDateError(f"invalid date {value!r}: expected YYYY-MM-DD")
    try:
        return date.fromisoformat(text)
    except ValueError as exc:
        raise InvalidDateError(f"invalid date {value!r}: expected YYYY-MM-DD") from exc


def compute_timeline(
    start_date: date | str,
    variety: VarietyProfile,
    calendar: RegionCalendar | None,
) -> TimelineResult:
    """Lay the variety's growth stages end to end starting at ``start_date``.

    Each stage starts where the previous one ended; the harvest date is the
    end of the final stage, so ``harvest_date - start_date`` always equals
    ``total_cycle_days``.
    """
    start = parse_date(start_date)
    if not variety.growth_stages:
        raise EmptyVarietyError(f"variety {variety.key!r} has no growth stages")

    category = classify(start.month, start.day, calendar)

    cursor = start
    windows: list[StageWindow] = []
    for stage in variety.growth_stages:
        try:
            stage_end = cursor + timedelta(days=stage.duration_days)
        except OverflowError as exc:
            raise InvalidDateError(
                f"stage {stage.name!r} starting {cursor.isoformat()} ends after {date.max.isoformat()}"
            ) from exc
        windows.append(
            StageWindow(
                name=stage.name,
                start_date=cursor,
                end_date=stage_end,
                duration_days=stage.duration_days,
            )
        )
        cursor = stage_end

    total = sum(window.duration_days for window in windows)
    return TimelineResult(
        variety_key=variety.key,
        start_date=start,
        category=category,
        stages=tuple(windows),
        harvest_date=cursor,
        total_cycle_days=total,
    )
