"""
Data-store contract consumed by the measurement engine.

The engine never walks a feature graph itself; it asks the store to resolve ids and
to describe an entity's geometry. Any store failure for one entity (dangling
references, malformed rings) is reported as `GeometryUnavailableError` so callers
can skip that entity and keep going.
"""

from __future__ import annotations

from typing import Any, Protocol

from geomeasure.core.geo import Extent


class GeometryUnavailableError(Exception):
    """The store cannot build geometry for an entity."""

    def __init__(self, entity_id: str, reason: str) -> None:
        super().__init__(f"geometry unavailable for {entity_id}: {reason}")
        self.entity_id = entity_id
        self.reason = reason


class Entity(Protocol):
    id: str
    type: str  # "node" | "way" | "relation"


class FeatureStore(Protocol):
    def resolve(self, entity_id: str) -> Entity | None: ...

    def extent(self, entity: Entity) -> Extent: ...

    def geometry(self, entity: Entity) -> str: ...

    def as_geojson(self, entity: Entity) -> dict[str, Any]: ...

    def area(self, entity: Entity) -> float: ...

    def is_closed(self, entity: Entity) -> bool: ...

    def is_degenerate(self, entity: Entity) -> bool: ...
