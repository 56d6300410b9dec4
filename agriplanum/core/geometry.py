"""Field geometry helpers: geodesic area and convex hulls of plant points."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from pyproj import Geod
from shapely.errors import GeometryTypeError
from shapely.geometry import MultiPoint, Polygon, mapping, shape

from agriplanum.core.errors import InvalidInputError

_GEOD = Geod(ellps="WGS84")
SQUARE_METERS_PER_HECTARE = 10_000.0


@dataclass(frozen=True, slots=True)
class FieldArea:
    square_meters: float

    @property
    def hectares(self) -> float:
        return self.square_meters / SQUARE_METERS_PER_HECTARE


@dataclass(frozen=True, slots=True)
class FieldOutline:
    geometry: dict[str, Any]
    area: FieldArea


def to_polygon(geometry: Mapping[str, Any]) -> Polygon:
    """Parse a GeoJSON polygon (lng/lat order) into a shapely ``Polygon``."""
    try:
        geom = shape(geometry)
    except (GeometryTypeError, KeyError, TypeError, ValueError) as exc:
        raise InvalidInputError(f"invalid GeoJSON geometry: {exc}") from exc
    if not isinstance(geom, Polygon):
        raise InvalidInputError(f"expected a Polygon geometry, got {geom.geom_type}")
    if geom.is_empty or not geom.is_valid:
        raise InvalidInputError("polygon geometry is empty or self-intersecting")
    return geom


def polygon_area(geometry: Mapping[str, Any] | Polygon) -> FieldArea:
    """Geodesic area of a lng/lat polygon on the WGS84 ellipsoid."""
    polygon = geometry if isinstance(geometry, Polygon) else to_polygon(geometry)
    area, _perimeter = _GEOD.geometry_area_perimeter(polygon)
    return FieldArea(square_meters=abs(area))


def field_from_points(points: Iterable[tuple[float, float]]) -> FieldOutline:
    """Convex hull around plant locations, given as ``(lng, lat)`` pairs."""
    coords = list(points)
    if len(coords) < 3:
        raise InvalidInputError("at least 3 plants are required to outline a field")

    hull = MultiPoint(coords).convex_hull
    if not isinstance(hull, Polygon):
        raise InvalidInputError("selected plants are collinear; cannot outline a field")

    return FieldOutline(geometry=dict(mapping(hull)), area=polygon_area(hull))
