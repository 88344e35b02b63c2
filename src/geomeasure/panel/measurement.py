"""
Measurement panel.

The panel watches the current selection and, when it changes, produces a
`MeasurementResult` for the presentation layer:
- nothing selected: a "0 selected" heading only
- several features (or one the store no longer knows): the center of their combined extent
- one feature: geometry, area (closed features), length/perimeter and centroid,
  or just the location for points

Recomputation is gated: the panel redraws on every "drawn" signal, but the work is
only redone when the selection size changes or a single selection switches to a
different id. Toggling the unit system forces the next evaluation through the gate.

All mutable state lives in `PanelState`; `evaluate_selection` is the evaluation step
over that state, and `MeasurementPanel` wires it to a signal source and a renderer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Sequence

from geomeasure.analysis.feature import FeatureAnalyzer
from geomeasure.config.settings import Settings, get_settings
from geomeasure.core.geo import Extent
from geomeasure.domain.models import GeometryKind, MeasurementResult, PanelMode, UnitSystem
from geomeasure.formatting.display import format_coordinates
from geomeasure.formatting.measurement import format_measurement
from geomeasure.locale.strings import Lookup, lookup_string, resolve_unit_system, string_lookup_for
from geomeasure.panel.signals import ViewSignal
from geomeasure.store.protocol import Entity, FeatureStore, GeometryUnavailableError

logger = logging.getLogger(__name__)

# Never equal to a real selection size.
FORCE_REFRESH = -1

Renderer = Callable[[MeasurementResult], None]
SelectionProvider = Callable[[], Sequence[str]]


@dataclass
class ChangeGate:
    last_size: int | None = None
    last_singular: str | None = None

    def check(self, selection: Sequence[str]) -> bool:
        """Record `selection` and report whether it differs from the previous one."""
        size = len(selection)
        singular = selection[0] if size == 1 else None
        changed = size != self.last_size or (size == 1 and singular != self.last_singular)
        self.last_size = size
        self.last_singular = singular
        return changed

    def force(self) -> None:
        self.last_size = FORCE_REFRESH


@dataclass
class PanelState:
    unit_system: UnitSystem
    gate: ChangeGate = field(default_factory=ChangeGate)
    visible: bool = True
    last_result: MeasurementResult | None = None
    # Bumped on every recompute; lets callers tell a fresh result from a cached one.
    revision: int = 0


def evaluate_selection(
    state: PanelState,
    selection: Sequence[str],
    store: FeatureStore,
    *,
    analyzer: FeatureAnalyzer,
    lookup: Lookup = lookup_string,
) -> MeasurementResult | None:
    """Evaluate the panel for `selection`; returns None while the panel is hidden."""
    if not state.visible:
        return None

    ids = list(selection)
    if not state.gate.check(ids):
        logger.debug("Selection unchanged (%d selected); reusing previous result", len(ids))
        return state.last_result

    result = _measure(ids, store, state.unit_system, analyzer, lookup)
    state.last_result = result
    state.revision += 1
    logger.debug("Measured %d selected feature(s) as %s", len(ids), result.mode.value)
    return result


def _measure(
    ids: list[str],
    store: FeatureStore,
    system: UnitSystem,
    analyzer: FeatureAnalyzer,
    lookup: Lookup,
) -> MeasurementResult:
    if not ids:
        return MeasurementResult(
            mode=PanelMode.IDLE,
            heading=lookup("infobox.measurement.selected", n=0),
            count=0,
        )

    entity = store.resolve(ids[0]) if len(ids) == 1 else None
    if entity is not None:
        try:
            return _measure_single(entity, store, system, analyzer, lookup)
        except GeometryUnavailableError as e:
            logger.warning("Geometry unavailable for %s: %s", e.entity_id, e.reason)

    return _measure_aggregate(ids, store, lookup)


def _measure_aggregate(ids: list[str], store: FeatureStore, lookup: Lookup) -> MeasurementResult:
    extent = Extent()
    for entity_id in ids:
        entity = store.resolve(entity_id)
        if entity is None:
            continue
        try:
            extent = extent.union(store.extent(entity))
        except GeometryUnavailableError as e:
            logger.warning("Skipping %s in selection extent: %s", entity_id, e.reason)

    items = []
    if not extent.is_empty():
        items.append(f"{lookup('infobox.measurement.center')}: {format_coordinates(extent.center())}")

    return MeasurementResult(
        mode=PanelMode.AGGREGATE,
        heading=lookup("infobox.measurement.selected", n=len(ids)),
        count=len(ids),
        items=items,
    )


def _measure_single(
    entity: Entity,
    store: FeatureStore,
    system: UnitSystem,
    analyzer: FeatureAnalyzer,
    lookup: Lookup,
) -> MeasurementResult:
    raw = analyzer.analyze(entity, store)
    formatted = format_measurement(raw, system, lookup, entity_type=entity.type)

    if raw.geometry_kind is GeometryKind.POINT:
        mode = PanelMode.SINGLE_POINT
        toggle_label = None
    else:
        mode = PanelMode.SINGLE_CLOSED if raw.closed else PanelMode.SINGLE_OPEN
        # The toggle is labelled with the system currently in use.
        toggle_label = lookup("infobox.measurement." + system.value)

    return MeasurementResult(
        mode=mode,
        heading=entity.id,
        count=1,
        items=formatted.items(),
        measurement=formatted,
        toggle_label=toggle_label,
    )


class MeasurementPanel:
    """Long-lived measurement widget bound to a store and a selection provider."""

    widget_id = "measurement"

    def __init__(
        self,
        store: FeatureStore,
        selection: SelectionProvider,
        *,
        unit_system: UnitSystem,
        render: Renderer | None = None,
        lookup: Lookup = lookup_string,
        analyzer: FeatureAnalyzer | None = None,
        namespace: str = "info-measurement",
    ) -> None:
        self.state = PanelState(unit_system=unit_system)
        self.store = store
        self._selection = selection
        self._render = render
        self._lookup = lookup
        self._analyzer = analyzer or FeatureAnalyzer()
        self._namespace = namespace
        self._source: ViewSignal | None = None

    @classmethod
    def from_settings(
        cls,
        store: FeatureStore,
        selection: SelectionProvider,
        settings: Settings | None = None,
        **kwargs,
    ) -> "MeasurementPanel":
        settings = settings or get_settings()
        kwargs.setdefault("unit_system", resolve_unit_system(settings))
        kwargs.setdefault("lookup", string_lookup_for(settings.app.locale))
        kwargs.setdefault("namespace", settings.measurement.signal_namespace)
        return cls(store, selection, **kwargs)

    @property
    def title(self) -> str:
        return self._lookup("infobox.measurement.title")

    @property
    def key(self) -> str:
        return self._lookup("infobox.measurement.key")

    @property
    def unit_system(self) -> UnitSystem:
        return self.state.unit_system

    @property
    def listener_key(self) -> str:
        return f"drawn.{self._namespace}"

    @property
    def attached(self) -> bool:
        return self._source is not None

    def evaluate(self, selection: Sequence[str] | None = None) -> MeasurementResult | None:
        ids = self._selection() if selection is None else selection
        return evaluate_selection(self.state, ids, self.store, analyzer=self._analyzer, lookup=self._lookup)

    def redraw(self) -> None:
        """Evaluate the current selection and hand a recomputed result to the renderer."""
        revision = self.state.revision
        result = self.evaluate()
        if result is not None and self.state.revision != revision and self._render is not None:
            self._render(result)

    def toggle_unit_system(self) -> UnitSystem:
        """Switch metric/imperial; the redraw runs on the signal source's next turn."""
        self.state.unit_system = self.state.unit_system.toggled()
        self.state.gate.force()
        logger.info("Measurement units switched to %s", self.state.unit_system.value)
        if self._source is not None:
            self._source.call_soon(self._deferred_redraw)
        return self.state.unit_system

    def _deferred_redraw(self) -> None:
        # Detached in the meantime: nothing to draw into.
        if self._source is not None:
            self.redraw()

    def show(self) -> None:
        self.state.visible = True
        if self._source is not None:
            self._source.call_soon(self._deferred_redraw)

    def hide(self) -> None:
        self.state.visible = False

    def attach(self, source: ViewSignal) -> None:
        if self._source is not None:
            self.detach()
        self._source = source
        source.on(self.listener_key, self.redraw)
        self.redraw()

    def detach(self) -> None:
        if self._source is None:
            return
        self._source.on(self.listener_key, None)
        self._source = None
