"""Soil adequacy analysis against a variety's ideal ranges."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from agriplanum.core.errors import InvalidInputError, MissingMeasurementError
from agriplanum.core.types import (
    IdealRange,
    Nutrient,
    SoilReport,
    SoilReportLine,
    SoilStatus,
    VarietyProfile,
)

# Canonical report order with display label and unit.
NUTRIENT_LABELS: dict[Nutrient, tuple[str, str]] = {
    Nutrient.ph: ("pH (CaCl₂)", ""),
    Nutrient.base_saturation: ("Base Saturation (V%)", "%"),
    Nutrient.aluminum: ("Aluminum (Al³⁺)", "cmolc"),
    Nutrient.phosphorus: ("Phosphorus (P)", "ppm"),
    Nutrient.potassium: ("Potassium (K)", "ppm"),
    Nutrient.calcium: ("Calcium (Ca)", "cmolc"),
    Nutrient.magnesium: ("Magnesium (Mg)", "cmolc"),
    Nutrient.sulfur: ("Sulfur (S)", "ppm"),
    Nutrient.boron: ("Boron (B)", "ppm"),
    Nutrient.zinc: ("Zinc (Zn)", "ppm"),
    Nutrient.nitrogen: ("Nitrogen (N)", "ppm"),
}


def classify_value(value: float, ideal: IdealRange) -> SoilStatus:
    if ideal.max is not None:
        if value < ideal.min:
            return SoilStatus.low
        if value > ideal.max:
            return SoilStatus.high
        return SoilStatus.ok
    if ideal.reversed:
        return SoilStatus.high if value > ideal.min else SoilStatus.ok
    return SoilStatus.low if value < ideal.min else SoilStatus.ok


def _numeric(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _coerce_measurement(measurement: Mapping[Any, Any]) -> dict[Nutrient, float]:
    values: dict[Nutrient, float] = {}
    for key, value in measurement.items():
        try:
            nutrient = Nutrient(key)
        except ValueError:
            continue
        values[nutrient] = value

    missing = [n.value for n in NUTRIENT_LABELS if n not in values or not _numeric(values[n])]
    if missing:
        raise MissingMeasurementError(missing)
    return {nutrient: float(value) for nutrient, value in values.items()}


def analyze(measurement: Mapping[Any, Any], variety: VarietyProfile) -> SoilReport:
    """Classify every nutrient as low / ok / high.

    All eleven nutrients must be present and numeric; otherwise the whole
    analysis fails with ``MissingMeasurementError``.
    """
    values = _coerce_measurement(measurement)

    lines: list[SoilReportLine] = []
    for nutrient, (label, unit) in NUTRIENT_LABELS.items():
        ideal = variety.ideal_soil.get(nutrient)
        if ideal is None:
            raise InvalidInputError(
                f"variety {variety.key!r} has no ideal range for {nutrient.name}"
            )
        value = values[nutrient]
        lines.append(
            SoilReportLine(
                nutrient=nutrient,
                label=label,
                unit=unit,
                measured_value=value,
                ideal_range=ideal.description,
                status=classify_value(value, ideal),
            )
        )
    return SoilReport(variety_key=variety.key, lines=tuple(lines))
