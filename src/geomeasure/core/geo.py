"""
Spherical geometry on a unit sphere.

Results are angles (radians) and solid angles (steradians); `geomeasure.core.units`
scales them to the Earth. Inputs are GeoJSON-like dicts with `(lon, lat)` degree
coordinates. Polygon rings are expected closed (first == last), and exterior rings
wound clockwise, so a small polygon has a small area.

The algorithms follow d3-geo (`geoLength`, `geoArea`, `geoCentroid`) so numbers agree
with browser-side renderings of the same data.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import asin, atan2, cos, degrees, hypot, inf, pi, radians, sin, sqrt
from typing import Any, Iterable

EPSILON = 1e-6
EPSILON2 = 1e-12
TAU = 2 * pi
QUARTER_PI = pi / 4

Position = tuple[float, float]


@dataclass(frozen=True)
class Extent:
    """A lon/lat bounding box. The default instance is empty."""

    min_lon: float = inf
    min_lat: float = inf
    max_lon: float = -inf
    max_lat: float = -inf

    @classmethod
    def from_positions(cls, positions: Iterable[Iterable[float]]) -> "Extent":
        ext = cls()
        for pos in positions:
            lon, lat = _lon_lat(pos)
            ext = ext.union(cls(lon, lat, lon, lat))
        return ext

    def is_empty(self) -> bool:
        return self.min_lon > self.max_lon or self.min_lat > self.max_lat

    def union(self, other: "Extent") -> "Extent":
        return Extent(
            min(self.min_lon, other.min_lon),
            min(self.min_lat, other.min_lat),
            max(self.max_lon, other.max_lon),
            max(self.max_lat, other.max_lat),
        )

    def center(self) -> Position:
        return ((self.min_lon + self.max_lon) / 2, (self.min_lat + self.max_lat) / 2)


def _lon_lat(pos: Iterable[float]) -> Position:
    lon, lat = list(pos)[:2]
    return float(lon), float(lat)


class _Sink:
    """Receiver for `stream_geometry`; subclasses override what they need."""

    def point(self, lon: float, lat: float) -> None:
        pass

    def line_start(self) -> None:
        pass

    def line_end(self) -> None:
        pass

    def polygon_start(self) -> None:
        pass

    def polygon_end(self) -> None:
        pass


def _stream_line(coordinates: list, sink: _Sink, closed: bool) -> None:
    # Closed rings repeat their first position; the sink closes them itself.
    end = len(coordinates) - 1 if closed else len(coordinates)
    sink.line_start()
    for pos in coordinates[:max(end, 0)]:
        sink.point(*_lon_lat(pos))
    sink.line_end()


def _stream_polygon(rings: list, sink: _Sink) -> None:
    sink.polygon_start()
    for ring in rings:
        _stream_line(ring, sink, closed=True)
    sink.polygon_end()


def stream_geometry(obj: dict[str, Any] | None, sink: _Sink) -> None:
    """Walk a GeoJSON object, feeding its points/lines/polygons into `sink`."""
    if not obj:
        return
    kind = obj.get("type")
    coords = obj.get("coordinates") or []
    if kind == "Feature":
        stream_geometry(obj.get("geometry"), sink)
    elif kind == "FeatureCollection":
        for feature in obj.get("features") or []:
            stream_geometry(feature, sink)
    elif kind == "GeometryCollection":
        for geometry in obj.get("geometries") or []:
            stream_geometry(geometry, sink)
    elif kind == "Point":
        if coords:
            sink.point(*_lon_lat(coords))
    elif kind == "MultiPoint":
        for pos in coords:
            sink.point(*_lon_lat(pos))
    elif kind == "LineString":
        _stream_line(coords, sink, closed=False)
    elif kind == "MultiLineString":
        for line in coords:
            _stream_line(line, sink, closed=False)
    elif kind == "Polygon":
        _stream_polygon(coords, sink)
    elif kind == "MultiPolygon":
        for polygon in coords:
            _stream_polygon(polygon, sink)


class _LengthSink(_Sink):
    def __init__(self) -> None:
        self.total = 0.0
        self._in_polygon = False
        self._first = True
        self._lambda0 = self._sin_phi0 = self._cos_phi0 = 0.0

    def polygon_start(self) -> None:
        self._in_polygon = True

    def polygon_end(self) -> None:
        self._in_polygon = False

    def line_start(self) -> None:
        self._first = True

    def point(self, lon: float, lat: float) -> None:
        if self._in_polygon:
            return
        lam, phi = radians(lon), radians(lat)
        sin_phi, cos_phi = sin(phi), cos(phi)
        if not self._first:
            delta = abs(lam - self._lambda0)
            cos_delta, sin_delta = cos(delta), sin(delta)
            x = cos_phi * sin_delta
            y = self._cos_phi0 * sin_phi - self._sin_phi0 * cos_phi * cos_delta
            z = self._sin_phi0 * sin_phi + self._cos_phi0 * cos_phi * cos_delta
            self.total += atan2(sqrt(x * x + y * y), z)
        self._first = False
        self._lambda0, self._sin_phi0, self._cos_phi0 = lam, sin_phi, cos_phi


def spherical_length(obj: dict[str, Any] | None) -> float:
    """Great-circle length (radians) of the line strings in `obj`; polygons count as 0."""
    sink = _LengthSink()
    stream_geometry(obj, sink)
    return sink.total


class _AreaSink(_Sink):
    def __init__(self) -> None:
        self.total = 0.0
        self._ring_sum = 0.0
        self._in_polygon = False
        self._first = True
        self._lambda00 = self._phi00 = 0.0
        self._lambda0 = self._cos_phi0 = self._sin_phi0 = 0.0

    def polygon_start(self) -> None:
        self._in_polygon = True
        self._ring_sum = 0.0

    def polygon_end(self) -> None:
        self._in_polygon = False
        ring = self._ring_sum
        self.total += TAU + ring if ring < 0 else ring

    def line_start(self) -> None:
        self._first = True

    def line_end(self) -> None:
        if self._in_polygon and not self._first:
            self._add(self._lambda00, self._phi00)

    def point(self, lon: float, lat: float) -> None:
        if not self._in_polygon:
            return
        if self._first:
            self._first = False
            self._lambda00, self._phi00 = lon, lat
            phi = radians(lat) / 2 + QUARTER_PI
            self._lambda0, self._cos_phi0, self._sin_phi0 = radians(lon), cos(phi), sin(phi)
            return
        self._add(lon, lat)

    def _add(self, lon: float, lat: float) -> None:
        # Half the angular distance from the south pole.
        lam, phi = radians(lon), radians(lat) / 2 + QUARTER_PI
        d_lambda = lam - self._lambda0
        sd_lambda = 1 if d_lambda >= 0 else -1
        ad_lambda = sd_lambda * d_lambda
        cos_phi, sin_phi = cos(phi), sin(phi)
        k = self._sin_phi0 * sin_phi
        u = self._cos_phi0 * cos_phi + k * cos(ad_lambda)
        v = k * sd_lambda * sin(ad_lambda)
        self._ring_sum += atan2(v, u)
        self._lambda0, self._cos_phi0, self._sin_phi0 = lam, cos_phi, sin_phi


def spherical_area(obj: dict[str, Any] | None) -> float:
    """Solid angle (steradians) enclosed by the polygons in `obj`."""
    sink = _AreaSink()
    stream_geometry(obj, sink)
    return sink.total * 2


def ring_area(ring: list) -> float:
    """Solid angle of a single closed ring, in [0, 4π)."""
    return spherical_area({"type": "Polygon", "coordinates": [ring]})


class _CentroidSink(_Sink):
    def __init__(self) -> None:
        # Point, line and area accumulators (vector mean, length-weighted, area-weighted).
        self.w0 = self.x0 = self.y0 = self.z0 = 0.0
        self.w1 = self.x1 = self.y1 = self.z1 = 0.0
        self.x2 = self.y2 = self.z2 = 0.0
        self._mode = "point"
        self._in_polygon = False
        self._first = True
        self._lambda00 = self._phi00 = 0.0
        self._cx = self._cy = self._cz = 0.0

    def polygon_start(self) -> None:
        self._in_polygon = True

    def polygon_end(self) -> None:
        self._in_polygon = False

    def line_start(self) -> None:
        self._mode = "ring" if self._in_polygon else "line"
        self._first = True

    def line_end(self) -> None:
        if self._mode == "ring" and not self._first:
            self._ring_point(self._lambda00, self._phi00)
        self._mode = "point"

    def point(self, lon: float, lat: float) -> None:
        if self._mode == "point":
            self._add_cartesian(*_cartesian(lon, lat))
        elif self._first:
            self._first = False
            self._lambda00, self._phi00 = lon, lat
            self._cx, self._cy, self._cz = _cartesian(lon, lat)
            self._add_cartesian(self._cx, self._cy, self._cz)
        elif self._mode == "line":
            self._line_point(lon, lat)
        else:
            self._ring_point(lon, lat)

    def _add_cartesian(self, x: float, y: float, z: float) -> None:
        self.w0 += 1
        self.x0 += (x - self.x0) / self.w0
        self.y0 += (y - self.y0) / self.w0
        self.z0 += (z - self.z0) / self.w0

    def _advance(self, w: float, x: float, y: float, z: float) -> None:
        self.w1 += w
        self.x1 += w * (self._cx + x)
        self.y1 += w * (self._cy + y)
        self.z1 += w * (self._cz + z)
        self._cx, self._cy, self._cz = x, y, z
        self._add_cartesian(x, y, z)

    def _line_point(self, lon: float, lat: float) -> None:
        x, y, z = _cartesian(lon, lat)
        x0, y0, z0 = self._cx, self._cy, self._cz
        w = atan2(
            sqrt((y0 * z - z0 * y) ** 2 + (z0 * x - x0 * z) ** 2 + (x0 * y - y0 * x) ** 2),
            x0 * x + y0 * y + z0 * z,
        )
        self._advance(w, x, y, z)

    def _ring_point(self, lon: float, lat: float) -> None:
        x, y, z = _cartesian(lon, lat)
        x0, y0, z0 = self._cx, self._cy, self._cz
        cx = y0 * z - z0 * y
        cy = z0 * x - x0 * z
        cz = x0 * y - y0 * x
        m = hypot(cx, cy, cz)
        w = asin(min(m, 1.0))  # line weight = angle
        v = -w / m if m else 0.0  # area weight multiplier
        self.x2 += v * cx
        self.y2 += v * cy
        self.z2 += v * cz
        self._advance(w, x, y, z)


def _cartesian(lon: float, lat: float) -> tuple[float, float, float]:
    lam, phi = radians(lon), radians(lat)
    cos_phi = cos(phi)
    return cos_phi * cos(lam), cos_phi * sin(lam), sin(phi)


def spherical_centroid(obj: dict[str, Any] | None) -> Position | None:
    """Spherical centroid `(lon, lat)` of `obj`, or None when it is undefined.

    Areas dominate lines, lines dominate points: a lower-dimensional accumulator is
    only used when the higher one is degenerate.
    """
    sink = _CentroidSink()
    stream_geometry(obj, sink)

    x, y, z = sink.x2, sink.y2, sink.z2
    m2 = x * x + y * y + z * z
    if m2 < EPSILON2:
        x, y, z = sink.x1, sink.y1, sink.z1
        if sink.w1 < EPSILON:
            x, y, z = sink.x0, sink.y0, sink.z0
        m2 = x * x + y * y + z * z
        if m2 < EPSILON2:
            return None
    return degrees(atan2(y, x)), degrees(asin(max(-1.0, min(1.0, z / sqrt(m2)))))
