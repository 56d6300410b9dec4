"""PostgreSQL-backed enum types for the ORM models.

Each StrEnum maps 1:1 to a PostgreSQL CREATE TYPE ... AS ENUM.
Calculator enums (planting category, soil status, …) live in
``agriplanum.core.types`` and are never stored.
"""

from enum import StrEnum


class RegionKeyEnum(StrEnum):
    """Cotton zoning regions with a published planting calendar."""

    mt_south = "mt-south"
    mt_mid_north = "mt-mid-north"
    mt_west = "mt-west"
    mt_araguaia_valley = "mt-araguaia-valley"
    ba_rainfed = "ba-rainfed"
    ba_irrigated = "ba-irrigated"
    go_ms = "go-ms"
    mg_sp = "mg-sp"
    ma_pi_1st = "ma-pi-1st"
    ma_pi_2nd = "ma-pi-2nd"
