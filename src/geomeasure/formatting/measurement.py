"""Turn a `RawMeasurement` into the display lines of the measurement panel."""

from __future__ import annotations

from geomeasure.domain.models import FormattedMeasurement, GeometryKind, RawMeasurement, UnitSystem
from geomeasure.formatting.display import format_area, format_coordinates, format_length
from geomeasure.locale.strings import Lookup, lookup_string


def _line(lookup: Lookup, key: str, value: str) -> str:
    return f"{lookup('infobox.measurement.' + key)}: {value}"


def format_measurement(
    raw: RawMeasurement,
    system: UnitSystem,
    lookup: Lookup = lookup_string,
    *,
    entity_type: str = "node",
) -> FormattedMeasurement:
    """Render display lines for one feature.

    `entity_type` only matters for point kinds: nodes report a "Location", anything
    else (e.g. a relation without area semantics) a "Center".
    """
    geometry_name = lookup("geometry." + raw.geometry)

    if raw.geometry_kind is GeometryKind.POINT:
        caption = "location" if entity_type == "node" else "center"
        return FormattedMeasurement(
            geometry_label=_line(lookup, "geometry", geometry_name),
            location_label=_line(lookup, caption, format_coordinates(raw.location)) if raw.location else None,
        )

    closed_prefix = lookup("infobox.measurement.closed") + " " if raw.closed else ""
    area_label = None
    if raw.closed and raw.area_sq_meters is not None:
        area_label = _line(lookup, "area", format_area(raw.area_sq_meters, system))

    length_label = None
    if raw.length_meters is not None:
        caption = "perimeter" if raw.closed else "length"
        length_label = _line(lookup, caption, format_length(raw.length_meters, system))

    return FormattedMeasurement(
        geometry_label=_line(lookup, "geometry", closed_prefix + geometry_name),
        area_label=area_label,
        length_label=length_label,
        centroid_label=_line(lookup, "centroid", format_coordinates(raw.centroid)) if raw.centroid else None,
    )
