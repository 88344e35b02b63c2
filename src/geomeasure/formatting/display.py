"""
Human-readable length/area strings.

Unit switching and precision rules:
- length: ft → mi at 5280 ft, m → km at 1000 m
- area: ft² → mi² at 0.25 mi², m² → km² at 0.25 km²; an acre/hectare annex is
  appended for 0.1–1000 ac / ha (exclusive bounds)
- precision: 0 decimals above 1000, 1 above 100, else 2 (on the displayed value)

Numbers are rendered like JavaScript's `Number.prototype.toFixed` so that the same
measurement prints identically here and in a browser.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from geomeasure.domain.models import UnitSystem

FEET_PER_METER = 3.28084
SQ_FEET_PER_SQ_METER = 10.7639111056

FEET_PER_MILE = 5280
SQ_FEET_PER_SQ_MILE = 27878400
SQ_FEET_PER_ACRE = 43560


def to_fixed(value: float, digits: int) -> str:
    """Format like JS `toFixed`: round half away from zero on the exact binary value."""
    if value == 0:
        value = 0.0  # drop the sign of -0.0
    quantum = Decimal(1).scaleb(-digits)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def display_precision(value: float) -> int:
    """Decimal places to show for an already-converted display value."""
    if value > 1000:
        return 0
    if value > 100:
        return 1
    return 2


def format_length(meters: float, system: UnitSystem) -> str:
    imperial = system is UnitSystem.IMPERIAL
    d = meters * (FEET_PER_METER if imperial else 1)

    if imperial:
        if d >= FEET_PER_MILE:
            d /= FEET_PER_MILE
            unit = "mi"
        else:
            unit = "ft"
    else:
        if d >= 1000:
            d /= 1000
            unit = "km"
        else:
            unit = "m"

    return f"{to_fixed(d, display_precision(d))} {unit}"


def format_area(sq_meters: float, system: UnitSystem) -> str:
    imperial = system is UnitSystem.IMPERIAL
    d = sq_meters * (SQ_FEET_PER_SQ_METER if imperial else 1)
    d2: float | None = None
    unit2 = ""

    if imperial:
        if d >= 6969600:  # 0.25 mi²
            d1 = d / SQ_FEET_PER_SQ_MILE
            unit1 = "mi²"
        else:
            d1 = d
            unit1 = "ft²"
        if 4356 < d < 43560000:  # 0.1 - 1000 ac
            d2 = d / SQ_FEET_PER_ACRE
            unit2 = "ac"
    else:
        if d >= 250000:  # 0.25 km²
            d1 = d / 1000000
            unit1 = "km²"
        else:
            d1 = d
            unit1 = "m²"
        if 1000 < d < 10000000:  # 0.1 - 1000 ha
            d2 = d / 10000
            unit2 = "ha"

    text = f"{to_fixed(d1, display_precision(d1))} {unit1}"
    if d2 is not None:
        text += f" ({to_fixed(d2, display_precision(d2))} {unit2})"
    return text


def format_coordinates(position: tuple[float, float]) -> str:
    """Render a `(lon, lat)` pair at 5 decimals (~1 m)."""
    lon, lat = position
    return f"{to_fixed(lon, 5)}, {to_fixed(lat, 5)}"
