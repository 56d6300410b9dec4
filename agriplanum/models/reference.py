"""Variety and Region ORM models — agronomic reference tables.

``growth_stages`` (JSONB) is an ordered list; order is the phenological
sequence and must be preserved::

    [
        {"name": "Emergence to First Square (V0 to B1/B3)", "duration_days": 35},
        {"name": "First Square to First Flower (B1/B3 to F1)", "duration_days": 25},
        ...
    ]

``ideal_soil`` (JSONB) maps nutrient keys to ``{min, max?, reversed?}``.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import Enum, Float, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from agriplanum.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from agriplanum.models.enums import RegionKeyEnum


class Variety(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A cultivar with growth stages, target population and soil targets."""

    __tablename__ = "varieties"

    key: Mapped[str] = mapped_column(
        String(100), unique=True, nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    growth_stages: Mapped[list[dict[str, Any]]] = mapped_column(JSONB, nullable=False)
    target_population: Mapped[float | None] = mapped_column(Float, nullable=True)
    ideal_soil: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False)
    details: Mapped[dict | None] = mapped_column(JSONB, nullable=True)

    def __repr__(self) -> str:
        return f"<Variety id={self.id} key={self.key!r}>"


class Region(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Planting calendar for one zoning region; bounds stored as ``MM-DD``."""

    __tablename__ = "regions"

    key: Mapped[RegionKeyEnum] = mapped_column(
        Enum(
            RegionKeyEnum,
            name="region_key",
            create_constraint=False,
            native_enum=True,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        unique=True,
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    preferential_start: Mapped[str] = mapped_column(String(5), nullable=False)
    preferential_end: Mapped[str] = mapped_column(String(5), nullable=False)
    tolerated_start: Mapped[str] = mapped_column(String(5), nullable=False)
    tolerated_end: Mapped[str] = mapped_column(String(5), nullable=False)

    def __repr__(self) -> str:
        return f"<Region id={self.id} key={self.key}>"
