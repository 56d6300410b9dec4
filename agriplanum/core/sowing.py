"""Seed quantity needed to reach a variety's target population."""

from __future__ import annotations

import math

from agriplanum.core.errors import InvalidInputError
from agriplanum.core.types import FieldCondition, VarietyProfile

CONDITION_FACTORS: dict[FieldCondition, float] = {
    FieldCondition.good: 1.00,
    FieldCondition.average: 1.05,
    FieldCondition.poor: 1.10,
}

# Relative slack for float representation error in the product, a few dozen
# ulps. Fractions above it round up.
_FLOAT_NOISE = 1e-14


def _positive_finite(value: float, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"{name} must be a number")
    if not math.isfinite(value) or value <= 0:
        raise InvalidInputError(f"{name} must be greater than zero")
    return float(value)


def _condition(value: FieldCondition | str) -> FieldCondition:
    try:
        return FieldCondition(value)
    except ValueError as exc:
        allowed = ", ".join(item.value for item in FieldCondition)
        raise InvalidInputError(f"field condition must be one of: {allowed}") from exc


def compute_seed_count(
    area_hectares: float,
    variety: VarietyProfile,
    germination_rate_percent: float,
    field_condition: FieldCondition | str,
) -> int:
    """Return the number of seeds to buy, always rounded up."""
    area = _positive_finite(area_hectares, "area_hectares")
    germination = _positive_finite(germination_rate_percent, "germination_rate_percent")
    if germination > 100:
        raise InvalidInputError("germination_rate_percent must not exceed 100")
    if variety.target_population is None:
        raise InvalidInputError(f"variety {variety.key!r} has no target population")
    population = _positive_finite(variety.target_population, "target_population")

    condition_factor = CONDITION_FACTORS[_condition(field_condition)]
    germination_factor = 100 / germination
    raw_seeds = area * population * germination_factor * condition_factor
    return math.ceil(raw_seeds - raw_seeds * _FLOAT_NOISE)
