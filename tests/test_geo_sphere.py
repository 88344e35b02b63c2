from math import pi, radians, sin

import pytest

from geomeasure.core.geo import Extent, ring_area, spherical_area, spherical_centroid, spherical_length

# Clockwise (exterior) winding: north, east, south, west.
UNIT_SQUARE_CW = [[0.0, 0.0], [0.0, 1.0], [1.0, 1.0], [1.0, 0.0], [0.0, 0.0]]

# Lat/lon cell area; great-circle edges differ from parallels only marginally at 1°.
UNIT_SQUARE_SR = radians(1) * sin(radians(1))


def test_length_of_quarter_equator_and_meridian():
    equator = {"type": "LineString", "coordinates": [[0, 0], [90, 0]]}
    meridian = {"type": "LineString", "coordinates": [[0, 0], [0, 90]]}
    assert spherical_length(equator) == pytest.approx(pi / 2)
    assert spherical_length(meridian) == pytest.approx(pi / 2)


def test_length_sums_segments_and_ignores_polygons():
    line = {"type": "LineString", "coordinates": [[0, 0], [1, 0], [2, 0]]}
    assert spherical_length(line) == pytest.approx(radians(2))
    assert spherical_length({"type": "Polygon", "coordinates": [UNIT_SQUARE_CW]}) == 0
    assert spherical_length({"type": "LineString", "coordinates": []}) == 0
    assert spherical_length(None) == 0


def test_length_of_multilinestring():
    multi = {"type": "MultiLineString", "coordinates": [[[0, 0], [1, 0]], [[5, 0], [6, 0]]]}
    assert spherical_length(multi) == pytest.approx(radians(2))


def test_area_of_clockwise_square_is_small():
    area = spherical_area({"type": "Polygon", "coordinates": [UNIT_SQUARE_CW]})
    assert area == pytest.approx(UNIT_SQUARE_SR, rel=1e-3)


def test_area_of_counter_clockwise_square_is_the_complement():
    ring = list(reversed(UNIT_SQUARE_CW))
    assert ring_area(ring) == pytest.approx(4 * pi - UNIT_SQUARE_SR, rel=1e-6)


def test_hole_subtracts_from_area():
    hole = [[0.25, 0.25], [0.75, 0.25], [0.75, 0.75], [0.25, 0.75], [0.25, 0.25]]  # counter-clockwise
    with_hole = spherical_area({"type": "Polygon", "coordinates": [UNIT_SQUARE_CW, hole]})
    assert with_hole == pytest.approx(UNIT_SQUARE_SR * 0.75, rel=1e-2)


def test_centroid_of_line_is_length_weighted_midpoint():
    lon, lat = spherical_centroid({"type": "LineString", "coordinates": [[0, 0], [1, 0]]})
    assert lon == pytest.approx(0.5)
    assert lat == pytest.approx(0.0, abs=1e-12)


def test_centroid_of_polygon_is_area_weighted():
    lon, lat = spherical_centroid({"type": "Polygon", "coordinates": [UNIT_SQUARE_CW]})
    assert lon == pytest.approx(0.5, abs=1e-3)
    assert lat == pytest.approx(0.5, abs=1e-3)


def test_centroid_of_points_is_vector_mean():
    lon, lat = spherical_centroid({"type": "MultiPoint", "coordinates": [[0, 0], [10, 0]]})
    assert lon == pytest.approx(5.0)
    assert lat == pytest.approx(0.0, abs=1e-12)


def test_centroid_walks_feature_collections():
    collection = {
        "type": "FeatureCollection",
        "features": [
            {"type": "Feature", "geometry": {"type": "LineString", "coordinates": [[10, 0], [12, 0]]}},
            {"type": "Feature", "geometry": {"type": "Point", "coordinates": [50, 50]}},
        ],
    }
    lon, _ = spherical_centroid(collection)
    # The line outweighs the point.
    assert lon == pytest.approx(11.0)


def test_centroid_of_nothing_is_undefined():
    assert spherical_centroid(None) is None
    assert spherical_centroid({"type": "LineString", "coordinates": []}) is None


def test_extent_union_and_center():
    ext = Extent()
    assert ext.is_empty()

    ext = ext.union(Extent.from_positions([[0, 0]]))
    ext = ext.union(Extent.from_positions([[3, -2]]))
    ext = ext.union(Extent.from_positions([[5, 1], [6, 4]]))
    assert not ext.is_empty()
    assert ext == Extent(0, -2, 6, 4)
    assert ext.center() == (3.0, 1.0)
