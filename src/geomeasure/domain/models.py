"""
Domain models (Pydantic).

These types are the contract between the layers of the measurement engine:
- analysis output (`RawMeasurement`), a pure function of one feature's geometry
- display output (`FormattedMeasurement`), a pure function of a raw measurement + unit system
- the panel result handed to whatever renders it (`MeasurementResult`)

Coordinates are always `(lon, lat)` in decimal degrees, matching GeoJSON order.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class UnitSystem(str, Enum):
    """Unit family used for display."""

    METRIC = "metric"
    IMPERIAL = "imperial"

    def toggled(self) -> "UnitSystem":
        return UnitSystem.METRIC if self is UnitSystem.IMPERIAL else UnitSystem.IMPERIAL


class GeometryKind(str, Enum):
    POINT = "point"
    LINE = "line"
    CLOSED_AREA = "closed_area"


class PanelMode(str, Enum):
    """Which branch of the measurement panel produced a result."""

    IDLE = "idle"
    AGGREGATE = "aggregate"
    SINGLE_OPEN = "single_open"
    SINGLE_CLOSED = "single_closed"
    SINGLE_POINT = "single_point"


class RawMeasurement(BaseModel):
    """Geometric quantities computed for one feature (SI units)."""

    model_config = ConfigDict(frozen=True)

    geometry: str
    geometry_kind: GeometryKind
    closed: bool = False
    length_meters: float | None = None
    area_sq_meters: float | None = None
    centroid: tuple[float, float] | None = None
    location: tuple[float, float] | None = None


class FormattedMeasurement(BaseModel):
    """Display lines for one feature; absent lines are None."""

    model_config = ConfigDict(frozen=True)

    geometry_label: str
    area_label: str | None = None
    length_label: str | None = None
    centroid_label: str | None = None
    location_label: str | None = None

    def items(self) -> list[str]:
        """Return the present lines in display order."""
        lines = [
            self.geometry_label,
            self.area_label,
            self.length_label,
            self.centroid_label,
            self.location_label,
        ]
        return [line for line in lines if line is not None]


class MeasurementResult(BaseModel):
    """Everything the presentation layer needs to draw the panel once."""

    model_config = ConfigDict(frozen=True)

    mode: PanelMode
    heading: str
    count: int
    items: list[str] = []
    measurement: FormattedMeasurement | None = None
    toggle_label: str | None = None
