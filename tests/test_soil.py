from __future__ import annotations

from typing import Any

import pytest

from agriplanum import reference_catalog
from agriplanum.core.errors import InvalidInputError, MissingMeasurementError
from agriplanum.core.soil import NUTRIENT_LABELS, analyze, classify_value
from agriplanum.core.types import IdealRange, Nutrient, SoilStatus, VarietyProfile
from agriplanum.services.reference_service import variety_from_record


@pytest.fixture
def tmg() -> VarietyProfile:
    return variety_from_record(reference_catalog.VARIETIES[0])


@pytest.fixture
def adequate_measurement() -> dict[str, Any]:
    return {
        "ph": 6.2,
        "v": 65,
        "al": 0.2,
        "p": 25,
        "k": 160,
        "ca": 3.0,
        "mg": 1.0,
        "s": 12,
        "b": 0.6,
        "zn": 1.5,
        "n": 120,
    }


def test_adequate_soil_reports_every_nutrient_ok(tmg: VarietyProfile, adequate_measurement: dict[str, Any]) -> None:
    report = analyze(adequate_measurement, tmg)

    assert report.variety_key == "tmg-84-b3xf"
    assert [line.nutrient for line in report.lines] == list(NUTRIENT_LABELS)
    assert all(line.status == SoilStatus.ok for line in report.lines)


@pytest.mark.parametrize(("value", "expected"), [(0.5, SoilStatus.high), (0.2, SoilStatus.ok), (0.3, SoilStatus.ok)])
def test_aluminum_ceiling(
    tmg: VarietyProfile,
    adequate_measurement: dict[str, Any],
    value: float,
    expected: SoilStatus,
) -> None:
    adequate_measurement["al"] = value
    report = analyze(adequate_measurement, tmg)
    line = report.by_nutrient(Nutrient.aluminum)
    assert line.status == expected
    assert line.ideal_range == "< 0.3"
    assert line.unit == "cmolc"


def test_ph_band_low_and_high(tmg: VarietyProfile, adequate_measurement: dict[str, Any]) -> None:
    adequate_measurement["ph"] = 5.5
    assert analyze(adequate_measurement, tmg).by_nutrient(Nutrient.ph).status == SoilStatus.low

    adequate_measurement["ph"] = 7.0
    line = analyze(adequate_measurement, tmg).by_nutrient(Nutrient.ph)
    assert line.status == SoilStatus.high
    assert line.ideal_range == "6–6.5"


def test_floor_nutrient_below_minimum_is_low(tmg: VarietyProfile, adequate_measurement: dict[str, Any]) -> None:
    adequate_measurement["p"] = 12
    line = analyze(adequate_measurement, tmg).by_nutrient(Nutrient.phosphorus)
    assert line.status == SoilStatus.low
    assert line.ideal_range == "> 20"


def test_missing_nutrient_fails_the_whole_analysis(tmg: VarietyProfile, adequate_measurement: dict[str, Any]) -> None:
    del adequate_measurement["zn"]
    adequate_measurement["b"] = "n/a"

    with pytest.raises(MissingMeasurementError) as exc_info:
        analyze(adequate_measurement, tmg)
    assert exc_info.value.missing == ["b", "zn"]
    assert exc_info.value.code == "missing_measurement"


@pytest.mark.parametrize("bad_value", [None, True, float("nan")])
def test_non_numeric_values_are_missing(
    tmg: VarietyProfile,
    adequate_measurement: dict[str, Any],
    bad_value: Any,
) -> None:
    adequate_measurement["k"] = bad_value
    with pytest.raises(MissingMeasurementError):
        analyze(adequate_measurement, tmg)


def test_variety_without_a_range_is_rejected(adequate_measurement: dict[str, Any]) -> None:
    record = dict(reference_catalog.VARIETIES[0])
    record["ideal_soil"] = {key: value for key, value in record["ideal_soil"].items() if key != "n"}
    variety = variety_from_record(record)

    with pytest.raises(InvalidInputError):
        analyze(adequate_measurement, variety)


def test_classify_value_boundaries_are_inclusive() -> None:
    band = IdealRange(min=6.0, max=6.5)
    assert classify_value(6.0, band) == SoilStatus.ok
    assert classify_value(6.5, band) == SoilStatus.ok
    assert classify_value(20, IdealRange(min=20)) == SoilStatus.ok


def test_ceiling_only_range_is_read_as_reversed() -> None:
    ideal = IdealRange.from_mapping({"max": 0.3})
    assert ideal == IdealRange(min=0.3, reversed=True)
    assert classify_value(0.4, ideal) == SoilStatus.high
