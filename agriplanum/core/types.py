"""Value objects shared by the agronomic calculators.

All of these are immutable and built fresh per request from caller input plus
a read-only reference record; none carry identity.
"""

from __future__ import annotations

import calendar
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from typing import Any

from agriplanum.core.errors import InvalidInputError

_SLUG_RE = re.compile(r"^[a-z0-9]+(?:[-_][a-z0-9]+)*$")


class PlantingCategory(StrEnum):
    """Where a planting date falls relative to a region's calendar."""

    preferential = "preferential"
    tolerated = "tolerated"
    not_recommended = "not_recommended"


class FieldCondition(StrEnum):
    """Expected stand-establishment conditions of the field."""

    good = "good"
    average = "average"
    poor = "poor"


class SoilStatus(StrEnum):
    low = "low"
    ok = "ok"
    high = "high"


class Nutrient(StrEnum):
    """Soil properties collected in a standard analysis, in report order."""

    ph = "ph"
    base_saturation = "v"
    aluminum = "al"
    phosphorus = "p"
    potassium = "k"
    calcium = "ca"
    magnesium = "mg"
    sulfur = "s"
    boron = "b"
    zinc = "zn"
    nitrogen = "n"


def validate_slug(value: str) -> str:
    """Return ``value`` if it is a lowercase slug, else raise ``InvalidInputError``."""
    if not isinstance(value, str) or not _SLUG_RE.match(value):
        raise InvalidInputError(f"invalid key {value!r}: expected a lowercase slug")
    return value


@dataclass(frozen=True, slots=True)
class MonthDay:
    """A day of the year without a year, e.g. ``MonthDay(12, 15)``."""

    month: int
    day: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise InvalidInputError(f"month must be 1-12, got {self.month}")
        # 2000 is a leap year, so Feb 29 stays representable.
        last_day = calendar.monthrange(2000, self.month)[1]
        if not 1 <= self.day <= last_day:
            raise InvalidInputError(f"day must be 1-{last_day} for month {self.month}, got {self.day}")

    @property
    def encoded(self) -> int:
        return self.month * 100 + self.day

    @classmethod
    def parse(cls, value: str) -> MonthDay:
        """Parse the ``MM-DD`` form used by the stored calendars."""
        try:
            month_token, day_token = value.split("-")
            month, day = int(month_token), int(day_token)
        except (AttributeError, ValueError) as exc:
            raise InvalidInputError(f"invalid month-day {value!r}: expected MM-DD") from exc
        return cls(month, day)

    def __str__(self) -> str:
        return f"{self.month:02d}-{self.day:02d}"


@dataclass(frozen=True, slots=True)
class RegionCalendar:
    """Preferential and tolerated planting windows for one region."""

    key: str
    preferential_start: MonthDay
    preferential_end: MonthDay
    tolerated_start: MonthDay
    tolerated_end: MonthDay
    name: str = ""

    @classmethod
    def from_mapping(cls, key: str, data: Mapping[str, Any], name: str = "") -> RegionCalendar:
        return cls(
            key=key,
            preferential_start=MonthDay.parse(data["preferential_start"]),
            preferential_end=MonthDay.parse(data["preferential_end"]),
            tolerated_start=MonthDay.parse(data["tolerated_start"]),
            tolerated_end=MonthDay.parse(data["tolerated_end"]),
            name=name,
        )


@dataclass(frozen=True, slots=True)
class GrowthStage:
    name: str
    duration_days: int

    def __post_init__(self) -> None:
        if isinstance(self.duration_days, bool) or not isinstance(self.duration_days, int):
            raise InvalidInputError(f"stage {self.name!r} duration must be an integer")
        if self.duration_days <= 0:
            raise InvalidInputError(f"stage {self.name!r} duration must be positive")


@dataclass(frozen=True, slots=True)
class IdealRange:
    """Target range for one soil property.

    With only ``min`` set, ``reversed`` turns the floor into a ceiling: the
    value must stay at or below ``min`` (aluminum toxicity, for instance).
    """

    min: float
    max: float | None = None
    reversed: bool = False

    @property
    def description(self) -> str:
        if self.max is not None:
            return f"{_fmt(self.min)}–{_fmt(self.max)}"
        if self.reversed:
            return f"< {_fmt(self.min)}"
        return f"> {_fmt(self.min)}"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> IdealRange:
        """Build a range from ``{min, max?, reversed?}``.

        A bare ``{max: x}`` is the stored ceiling form and becomes
        ``IdealRange(min=x, reversed=True)``.
        """
        if "min" not in data and data.get("max") is not None:
            return cls(min=float(data["max"]), reversed=True)
        if data.get("min") is None:
            raise InvalidInputError("ideal range requires a min or max bound")
        upper = data.get("max")
        return cls(
            min=float(data["min"]),
            max=float(upper) if upper is not None else None,
            reversed=bool(data.get("reversed", False)),
        )


@dataclass(frozen=True, slots=True)
class VarietyProfile:
    """Agronomic reference record for one cultivar."""

    key: str
    name: str
    growth_stages: tuple[GrowthStage, ...]
    target_population: float | None
    ideal_soil: Mapping[Nutrient, IdealRange] = field(default_factory=dict)
    description: str = ""
    details: Mapping[str, str] = field(default_factory=dict)

    @property
    def total_cycle_days(self) -> int:
        return sum(stage.duration_days for stage in self.growth_stages)

    @staticmethod
    def stages_from(raw: Sequence[Mapping[str, Any]] | Mapping[str, int]) -> tuple[GrowthStage, ...]:
        """Accept either ``[{name, duration_days}, ...]`` or an ordered ``{name: days}``."""
        if isinstance(raw, Mapping):
            return tuple(GrowthStage(name, days) for name, days in raw.items())
        return tuple(GrowthStage(item["name"], item["duration_days"]) for item in raw)


@dataclass(frozen=True, slots=True)
class StageWindow:
    name: str
    start_date: date
    end_date: date
    duration_days: int


@dataclass(frozen=True, slots=True)
class TimelineResult:
    variety_key: str
    start_date: date
    category: PlantingCategory
    stages: tuple[StageWindow, ...]
    harvest_date: date
    total_cycle_days: int


@dataclass(frozen=True, slots=True)
class SoilReportLine:
    nutrient: Nutrient
    label: str
    unit: str
    measured_value: float
    ideal_range: str
    status: SoilStatus


@dataclass(frozen=True, slots=True)
class SoilReport:
    variety_key: str
    lines: tuple[SoilReportLine, ...]

    def by_nutrient(self, nutrient: Nutrient) -> SoilReportLine:
        for line in self.lines:
            if line.nutrient == nutrient:
                return line
        raise KeyError(nutrient)


def _fmt(value: float) -> str:
    return f"{value:g}"
