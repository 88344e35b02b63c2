"""
API routes.

Endpoints:
- GET  `/api/widget`: widget identity (id, title, shortcut key) and default units.
- POST `/api/measurements`: measure a selection within an inline feature graph.
- GET  `/api/format/length`, `/api/format/area`: format a raw SI value.

The HTTP surface is stateless: each request builds its own store and panel, so the
change gate never suppresses a response.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from geomeasure.config.settings import get_settings
from geomeasure.domain.models import MeasurementResult, UnitSystem
from geomeasure.formatting.display import format_area, format_length
from geomeasure.locale.strings import resolve_unit_system, string_lookup_for
from geomeasure.panel.measurement import MeasurementPanel
from geomeasure.store.memory import FeatureGraph, MemoryStore

router = APIRouter()


class MeasurementRequest(BaseModel):
    """Inline feature graph plus the ids selected in it."""

    features: FeatureGraph = Field(default_factory=FeatureGraph)
    selection: list[str] = Field(default_factory=list)
    unit_system: UnitSystem | None = None


def _units(unit_system: UnitSystem | None) -> UnitSystem:
    return unit_system or resolve_unit_system(get_settings())


@router.get("/api/widget")
def get_widget() -> dict:
    settings = get_settings()
    lookup = string_lookup_for(settings.app.locale)
    return {
        "id": MeasurementPanel.widget_id,
        "title": lookup("infobox.measurement.title"),
        "key": lookup("infobox.measurement.key"),
        "unit_system": resolve_unit_system(settings).value,
    }


@router.post("/api/measurements", response_model=MeasurementResult)
def post_measurements(req: MeasurementRequest) -> MeasurementResult:
    settings = get_settings()
    store = MemoryStore(req.features, area_keys=settings.store.area_keys)
    selection = list(req.selection)
    panel = MeasurementPanel.from_settings(store, lambda: selection, settings, unit_system=_units(req.unit_system))
    result = panel.evaluate()
    if result is None:
        raise HTTPException(status_code=503, detail="measurement panel is hidden")
    return result


@router.get("/api/format/length")
def get_format_length(
    meters: float = Query(..., ge=0),
    unit_system: UnitSystem | None = None,
) -> dict:
    units = _units(unit_system)
    return {"unit_system": units.value, "text": format_length(meters, units)}


@router.get("/api/format/area")
def get_format_area(
    sq_meters: float = Query(..., ge=0),
    unit_system: UnitSystem | None = None,
) -> dict:
    units = _units(unit_system)
    return {"unit_system": units.value, "text": format_area(sq_meters, units)}
