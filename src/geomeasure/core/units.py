"""
Angular → SI conversions on the authalic sphere.

Lengths and areas are computed on a unit sphere (radians / steradians) and scaled
here, so both use the same Earth model.
"""

from __future__ import annotations

from math import pi

# WGS84 authalic mean radius (m).
EARTH_AUTHALIC_RADIUS_M = 6371007.1809

# WGS84 ellipsoid surface area (m²).
EARTH_SURFACE_AREA_M2 = 510065621724000


def radians_to_meters(r: float) -> float:
    """Convert a great-circle angle to meters along the Earth's surface."""
    return r * EARTH_AUTHALIC_RADIUS_M


def steradians_to_square_meters(sr: float) -> float:
    """Convert a solid angle to m² of Earth surface (see gis.stackexchange.com/a/124857)."""
    return sr / (4 * pi) * EARTH_SURFACE_AREA_M2
