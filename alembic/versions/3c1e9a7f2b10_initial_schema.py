"""initial_schema

Revision ID: 3c1e9a7f2b10
Revises:
Create Date: 2026-10-19 00:00:00.000000

Creates the users, reference (varieties, regions) and map (fields, plants)
tables plus the region_key enum.  Expects a PostgreSQL 16 + PostGIS 3.4
database with the uuid-ossp and postgis extensions enabled.
"""

from collections.abc import Sequence

import geoalchemy2
import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3c1e9a7f2b10"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

ENUM_REGION_KEY = postgresql.ENUM(
    "mt-south",
    "mt-mid-north",
    "mt-west",
    "mt-araguaia-valley",
    "ba-rainfed",
    "ba-irrigated",
    "go-ms",
    "mg-sp",
    "ma-pi-1st",
    "ma-pi-2nd",
    name="region_key",
    create_type=False,
)


def _id_column() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        server_default=sa.text("uuid_generate_v4()"),
        nullable=False,
    )


def _timestamp_columns() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    # ── 1. Enum types ───────────────────────────────────────────────────
    ENUM_REGION_KEY.create(op.get_bind(), checkfirst=True)

    # ── 2. Users ────────────────────────────────────────────────────────
    op.create_table(
        "users",
        _id_column(),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("hashed_password", sa.String(128), nullable=False),
        sa.Column(
            "is_active",
            sa.Boolean(),
            server_default=sa.text("true"),
            nullable=False,
        ),
        *_timestamp_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # ── 3. Reference tables ─────────────────────────────────────────────
    op.create_table(
        "varieties",
        _id_column(),
        sa.Column("key", sa.String(100), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("growth_stages", postgresql.JSONB(), nullable=False),
        sa.Column("target_population", sa.Float(), nullable=True),
        sa.Column("ideal_soil", postgresql.JSONB(), nullable=False),
        sa.Column("details", postgresql.JSONB(), nullable=True),
        *_timestamp_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_varieties_key", "varieties", ["key"], unique=True)

    op.create_table(
        "regions",
        _id_column(),
        sa.Column("key", ENUM_REGION_KEY, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("preferential_start", sa.String(5), nullable=False),
        sa.Column("preferential_end", sa.String(5), nullable=False),
        sa.Column("tolerated_start", sa.String(5), nullable=False),
        sa.Column("tolerated_end", sa.String(5), nullable=False),
        *_timestamp_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("key"),
    )

    # ── 4. Map features ─────────────────────────────────────────────────
    op.create_table(
        "fields",
        _id_column(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column(
            "geometry",
            geoalchemy2.types.Geography(
                geometry_type="POLYGON", srid=4326, from_text="ST_GeogFromText"
            ),
            nullable=False,
        ),
        sa.Column("area_hectares", sa.Float(), nullable=False),
        *_timestamp_columns(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_fields_user_id", "fields", ["user_id"])

    op.create_table(
        "plants",
        _id_column(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("field_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("unique_tag", sa.String(100), nullable=True),
        sa.Column(
            "location",
            geoalchemy2.types.Geography(
                geometry_type="POINT", srid=4326, from_text="ST_GeogFromText"
            ),
            nullable=False,
        ),
        sa.Column("plant_type", sa.String(100), nullable=False),
        sa.Column(
            "custom_data",
            postgresql.JSONB(),
            server_default=sa.text("'{}'::jsonb"),
            nullable=False,
        ),
        *_timestamp_columns(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["field_id"], ["fields.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("unique_tag"),
    )
    op.create_index("ix_plants_user_id", "plants", ["user_id"])
    op.create_index("ix_plants_field_id", "plants", ["field_id"])


def downgrade() -> None:
    op.drop_table("plants")
    op.drop_table("fields")
    op.drop_table("regions")
    op.drop_table("varieties")
    op.drop_table("users")

    ENUM_REGION_KEY.drop(op.get_bind(), checkfirst=True)
