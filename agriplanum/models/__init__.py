"""ORM model registry — importing this module registers the domain tables on Base.metadata.

``User`` lives in ``agriplanum.auth.models`` (which itself imports
``agriplanum.models.base``), so it is not re-exported here; Alembic
``env.py`` imports both modules so autogenerate sees every table.
Application code can do::

    from agriplanum.models import Field, Plant, Variety, ...
"""

# ── Base & Mixins ───────────────────────────────────────────────────────────
from agriplanum.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

# ── Enums ───────────────────────────────────────────────────────────────────
from agriplanum.models.enums import RegionKeyEnum

# ── User map features ───────────────────────────────────────────────────────
from agriplanum.models.fields import Field, Plant

# ── Reference data ──────────────────────────────────────────────────────────
from agriplanum.models.reference import Region, Variety

__all__ = [
    # Base & mixins
    "Base",
    # Map features
    "Field",
    "Plant",
    # Reference
    "Region",
    "RegionKeyEnum",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "Variety",
]
