"""Built-in reference catalog: cotton cultivars and regional planting calendars.

Used by ``StaticReferenceProvider`` and by ``scripts/seed_db.py`` to populate
the ``varieties`` and ``regions`` tables.
"""

from __future__ import annotations

from typing import Any

_COTTON_STAGES = (
    "Emergence to First Square (V0 to B1/B3)",
    "First Square to First Flower (B1/B3 to F1)",
    "Flowering Period (F1 to FN)",
    "Boll Development & Maturation (C1 to CN)",
)


def _stages(*durations: int) -> list[dict[str, Any]]:
    return [
        {"name": name, "duration_days": days}
        for name, days in zip(_COTTON_STAGES, durations, strict=True)
    ]


VARIETIES: list[dict[str, Any]] = [
    {
        "key": "tmg-84-b3xf",
        "name": "TMG 84 B3XF",
        "description": "High productive potential and excellent fiber quality.",
        "growth_stages": _stages(35, 25, 40, 50),
        "target_population": 110000,
        "details": {
            "Cycle": "Medium",
            "RNC": "2400IB3XF",
            "1st Season": "Recommended",
            "Boll Weight (g)": "4.4",
            "Regulator Demand": "Medium",
            "Fertility Demand": "High",
        },
        "ideal_soil": {
            "ph": {"min": 6.0, "max": 6.5},
            "v": {"min": 60},
            "al": {"min": 0.3, "reversed": True},
            "p": {"min": 20},
            "k": {"min": 150},
            "ca": {"min": 2.5},
            "mg": {"min": 0.8},
            "s": {"min": 10},
            "b": {"min": 0.5},
            "zn": {"min": 1.2},
            "n": {"min": 100},
        },
    },
    {
        "key": "brs-433",
        "name": "BRS 433",
        "description": "Medium cycle cultivar, adapted to the Cerrado biome.",
        "growth_stages": _stages(30, 25, 40, 45),
        "target_population": 100000,
        "details": {
            "Cycle": "Medium",
            "Fiber": "Long",
            "Resistance": "Ramularia and Blue Disease",
            "Boll Weight (g)": "5.0",
            "Regulator Demand": "Low",
            "Fertility Demand": "Medium",
        },
        "ideal_soil": {
            "ph": {"min": 5.8, "max": 6.5},
            "v": {"min": 60},
            "al": {"min": 0.3, "reversed": True},
            "p": {"min": 25},
            "k": {"min": 120},
            "ca": {"min": 2.0},
            "mg": {"min": 0.8},
            "s": {"min": 10},
            "b": {"min": 0.6},
            "zn": {"min": 1.4},
            "n": {"min": 120},
        },
    },
]


def _region(key: str, name: str, pref: tuple[str, str], tol: tuple[str, str]) -> dict[str, str]:
    return {
        "key": key,
        "name": name,
        "preferential_start": pref[0],
        "preferential_end": pref[1],
        "tolerated_start": tol[0],
        "tolerated_end": tol[1],
    }


REGIONS: list[dict[str, str]] = [
    _region("mt-south", "Mato Grosso (South)", ("01-01", "01-31"), ("12-15", "02-15")),
    _region("mt-mid-north", "Mato Grosso (Mid-North)", ("01-01", "01-31"), ("12-15", "02-15")),
    _region("mt-west", "Mato Grosso (West)", ("01-01", "01-31"), ("12-15", "01-31")),
    _region("mt-araguaia-valley", "Mato Grosso (Araguaia Valley)", ("01-01", "01-20"), ("12-15", "01-31")),
    _region("ba-rainfed", "Bahia (Rainfed)", ("12-15", "12-31"), ("12-01", "01-15")),
    _region("ba-irrigated", "Bahia (Irrigated)", ("01-01", "02-15"), ("12-15", "02-28")),
    _region("go-ms", "Goiás / Mato Grosso do Sul", ("12-15", "01-15"), ("12-01", "01-31")),
    _region("mg-sp", "Minas Gerais / São Paulo", ("12-15", "01-15"), ("12-01", "01-31")),
    _region("ma-pi-1st", "Maranhão / Piauí (1st season)", ("12-15", "01-15"), ("12-01", "01-31")),
    _region("ma-pi-2nd", "Maranhão / Piauí (2nd season)", ("01-15", "02-10"), ("01-01", "02-20")),
]
