"""Field and Plant ORM models — user-owned map features.

Fields are polygons, plants are points; both are stored as PostGIS
geography (SRID 4326) and always scoped to their owning user.
"""

from __future__ import annotations

import uuid
from typing import Any

from geoalchemy2 import Geography
from sqlalchemy import Float, ForeignKey, Index, String, text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from agriplanum.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

# ═══════════════════════════════════════════════════════════════════════════
# Field
# ═══════════════════════════════════════════════════════════════════════════


class Field(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A cultivated area drawn on the map.

    ``area_hectares`` is the geodesic area of ``geometry`` computed at
    creation time (or supplied by the client).
    """

    __tablename__ = "fields"
    __table_args__ = (Index("ix_fields_user_id", "user_id"),)

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    geometry: Mapped[Any] = mapped_column(
        Geography(geometry_type="POLYGON", srid=4326),
        nullable=False,
    )
    area_hectares: Mapped[float] = mapped_column(Float, nullable=False)

    # ── Relationships ────────────────────────────────────────────────────
    plants: Mapped[list[Plant]] = relationship(
        back_populates="field",
        passive_deletes=True,
        lazy="selectin",
        order_by="Plant.created_at",
    )

    def __repr__(self) -> str:
        return f"<Field id={self.id} name={self.name!r} user={self.user_id}>"


# ═══════════════════════════════════════════════════════════════════════════
# Plant
# ═══════════════════════════════════════════════════════════════════════════


class Plant(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """An individually tagged plant.

    ``field_id`` is nullable; plants can be registered before any field
    exists.  ``custom_data`` (JSONB) holds user-defined tag fields.
    """

    __tablename__ = "plants"
    __table_args__ = (
        Index("ix_plants_user_id", "user_id"),
        Index("ix_plants_field_id", "field_id"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    field_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("fields.id", ondelete="SET NULL"),
        nullable=True,
    )
    unique_tag: Mapped[str | None] = mapped_column(
        String(100), unique=True, nullable=True
    )
    location: Mapped[Any] = mapped_column(
        Geography(geometry_type="POINT", srid=4326),
        nullable=False,
    )
    plant_type: Mapped[str] = mapped_column(String(100), nullable=False)
    custom_data: Mapped[dict] = mapped_column(
        JSONB,
        nullable=False,
        default=dict,
        server_default=text("'{}'::jsonb"),
    )

    # ── Relationships ────────────────────────────────────────────────────
    field: Mapped[Field | None] = relationship(back_populates="plants")

    def __repr__(self) -> str:
        return f"<Plant id={self.id} tag={self.unique_tag!r} field={self.field_id}>"
