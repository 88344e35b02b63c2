"""
Per-feature measurements.

Given one entity and the store that knows its geometry, compute the raw quantities
the panel displays: length (or perimeter), spherical area for closed features, and
the spherical centroid. Points only report their location.

Length is measured along the feature's outer boundary only: a polygon contributes
its first ring, a multipolygon the first ring of its first polygon. Holes and
further polygons are ignored for length.
"""

from __future__ import annotations

from typing import Any

from geomeasure.core.geo import spherical_centroid, spherical_length
from geomeasure.core.units import radians_to_meters, steradians_to_square_meters
from geomeasure.domain.models import GeometryKind, RawMeasurement
from geomeasure.store.protocol import Entity, FeatureStore

MEASURABLE_GEOMETRIES = frozenset({"line", "area"})


def to_line_string(feature: dict[str, Any]) -> dict[str, Any]:
    """Reduce a GeoJSON geometry to the line string whose length is reported."""
    if feature.get("type") == "LineString":
        return feature

    coordinates: list = []
    if feature.get("type") == "Polygon":
        coordinates = (feature.get("coordinates") or [[]])[0]
    elif feature.get("type") == "MultiPolygon":
        coordinates = (feature.get("coordinates") or [[[]]])[0][0]
    return {"type": "LineString", "coordinates": coordinates}


def is_closed_feature(entity: Entity, store: FeatureStore) -> bool:
    """Relations are always closed; ways only when their ring encloses something."""
    if entity.type == "relation":
        return True
    return store.is_closed(entity) and not store.is_degenerate(entity)


class FeatureAnalyzer:
    """Computes a `RawMeasurement` for a single resolved entity."""

    def analyze(self, entity: Entity, store: FeatureStore) -> RawMeasurement:
        geometry = store.geometry(entity)

        if geometry not in MEASURABLE_GEOMETRIES:
            return RawMeasurement(
                geometry=geometry,
                geometry_kind=GeometryKind.POINT,
                location=store.extent(entity).center(),
            )

        closed = is_closed_feature(entity, store)
        feature = store.as_geojson(entity)
        length = radians_to_meters(spherical_length(to_line_string(feature)))
        area = steradians_to_square_meters(store.area(entity)) if closed else None

        return RawMeasurement(
            geometry=geometry,
            geometry_kind=GeometryKind.CLOSED_AREA if closed else GeometryKind.LINE,
            closed=closed,
            length_meters=length,
            area_sq_meters=area,
            centroid=spherical_centroid(feature),
        )
