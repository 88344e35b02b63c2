"""
In-memory OSM-style feature graph.

Nodes carry a `loc` (`[lon, lat]`), ways reference nodes in order, relations reference
members with roles. Geometry rules:
- a way is closed when its first and last node ids match
- a way is an area when tagged `area=yes` (closed or not), or when it is closed, not
  tagged `area=no`, and has one of the configured area keys
- a way is degenerate when it has fewer than 3 distinct nodes (areas) or 2 (lines),
  or when it is closed but its ring encloses no surface (retraced or collinear)
- `type=multipolygon` relations are areas assembled from their outer/inner members

Polygon rings are emitted closed, with exterior rings clockwise (holes
counter-clockwise), the winding the spherical routines in `geomeasure.core.geo`
expect. An unclosed `area=yes` way gets its closing edge added.
"""

from __future__ import annotations

from math import isfinite, pi
from typing import Any, Iterable, Literal, Union

from pydantic import BaseModel, Field

from geomeasure.core.geo import Extent, ring_area, spherical_area
from geomeasure.store.protocol import GeometryUnavailableError

DEFAULT_AREA_KEYS = ("building", "landuse", "natural", "leisure", "amenity", "area:highway")

# Rings enclosing less than this (about 0.4 m²) are treated as enclosing nothing.
ZERO_AREA_SR = 1e-14


class Node(BaseModel):
    type: Literal["node"] = "node"
    id: str
    loc: tuple[float, float]
    tags: dict[str, str] = Field(default_factory=dict)


class Way(BaseModel):
    type: Literal["way"] = "way"
    id: str
    nodes: list[str]
    tags: dict[str, str] = Field(default_factory=dict)


class Member(BaseModel):
    ref: str
    role: str = ""


class Relation(BaseModel):
    type: Literal["relation"] = "relation"
    id: str
    members: list[Member] = Field(default_factory=list)
    tags: dict[str, str] = Field(default_factory=dict)


OsmEntity = Union[Node, Way, Relation]


class FeatureGraph(BaseModel):
    """Serialized form of a store (see `geomeasure.store.loader`)."""

    nodes: list[Node] = Field(default_factory=list)
    ways: list[Way] = Field(default_factory=list)
    relations: list[Relation] = Field(default_factory=list)


class MemoryStore:
    def __init__(self, graph: FeatureGraph, *, area_keys: Iterable[str] = DEFAULT_AREA_KEYS) -> None:
        self._entities: dict[str, OsmEntity] = {}
        for entity in [*graph.nodes, *graph.ways, *graph.relations]:
            self._entities[entity.id] = entity
        self._area_keys = frozenset(area_keys)
        self._way_nodes = {node_id for way in graph.ways for node_id in way.nodes}

    def resolve(self, entity_id: str) -> OsmEntity | None:
        return self._entities.get(entity_id)

    # --- topology ---

    def is_closed(self, entity: OsmEntity) -> bool:
        if isinstance(entity, Way):
            return len(entity.nodes) > 1 and entity.nodes[0] == entity.nodes[-1]
        return isinstance(entity, Relation) and entity.tags.get("type") == "multipolygon"

    def is_area(self, entity: OsmEntity) -> bool:
        if isinstance(entity, Relation):
            return entity.tags.get("type") == "multipolygon"
        if not isinstance(entity, Way):
            return False
        area = entity.tags.get("area")
        if area == "yes":
            return True
        if area == "no" or not self.is_closed(entity):
            return False
        return any(key in self._area_keys and value != "no" for key, value in entity.tags.items())

    def is_degenerate(self, entity: OsmEntity) -> bool:
        if isinstance(entity, Node):
            return not all(isfinite(v) for v in entity.loc)
        if isinstance(entity, Way):
            if len(set(entity.nodes)) < (3 if self.is_area(entity) else 2):
                return True
            return self.is_closed(entity) and _encloses_nothing(self._locs(entity.nodes, entity.id))
        return not entity.members

    def geometry(self, entity: OsmEntity) -> str:
        if isinstance(entity, Node):
            return "vertex" if entity.id in self._way_nodes else "point"
        if isinstance(entity, Way):
            return "area" if self.is_area(entity) else "line"
        return "area" if self.is_area(entity) else "relation"

    # --- geometry ---

    def _node(self, node_id: str, owner: str) -> Node:
        node = self._entities.get(node_id)
        if not isinstance(node, Node):
            raise GeometryUnavailableError(owner, f"missing node {node_id}")
        return node

    def _member(self, ref: str, owner: str) -> OsmEntity:
        member = self._entities.get(ref)
        if member is None:
            raise GeometryUnavailableError(owner, f"missing member {ref}")
        return member

    def _locs(self, node_ids: Iterable[str], owner: str) -> list[list[float]]:
        return [list(self._node(node_id, owner).loc) for node_id in node_ids]

    def extent(self, entity: OsmEntity, _seen: frozenset[str] = frozenset()) -> Extent:
        if isinstance(entity, Node):
            return Extent.from_positions([entity.loc])
        if isinstance(entity, Way):
            return Extent.from_positions(self._locs(entity.nodes, entity.id))
        ext = Extent()
        seen = _seen | {entity.id}
        for member in entity.members:
            if member.ref in seen:
                continue
            ext = ext.union(self.extent(self._member(member.ref, entity.id), seen))
        return ext

    def as_geojson(self, entity: OsmEntity, _seen: frozenset[str] = frozenset()) -> dict[str, Any]:
        if isinstance(entity, Node):
            return {"type": "Point", "coordinates": list(entity.loc)}
        if isinstance(entity, Way):
            locs = self._locs(entity.nodes, entity.id)
            if self.is_area(entity):
                if locs and locs[0] != locs[-1]:
                    locs.append(locs[0])
                return {"type": "Polygon", "coordinates": [_wind(locs, exterior=True)]}
            return {"type": "LineString", "coordinates": locs}
        if self.is_area(entity):
            return self._multipolygon(entity)

        seen = _seen | {entity.id}
        features = []
        for m in entity.members:
            if m.ref in seen:
                continue
            member = self._member(m.ref, entity.id)
            features.append(
                {
                    "type": "Feature",
                    "id": m.ref,
                    "properties": {"role": m.role},
                    "geometry": self.as_geojson(member, seen),
                }
            )
        return {"type": "FeatureCollection", "features": features}

    def area(self, entity: OsmEntity) -> float:
        """Enclosed solid angle in steradians (0 for nodes and open geometry)."""
        if isinstance(entity, Node):
            return 0.0
        if isinstance(entity, Way):
            locs = self._locs(entity.nodes, entity.id)
            if not locs:
                return 0.0
            if not self.is_closed(entity):
                locs.append(locs[0])
            return spherical_area({"type": "Polygon", "coordinates": [_wind(locs, exterior=True)]})
        if not self.is_area(entity):
            return 0.0
        return spherical_area(self._multipolygon(entity))

    def _multipolygon(self, relation: Relation) -> dict[str, Any]:
        outer_ways: list[list[str]] = []
        inner_ways: list[list[str]] = []
        for m in relation.members:
            member = self._member(m.ref, relation.id)
            if not isinstance(member, Way):
                continue
            (inner_ways if m.role == "inner" else outer_ways).append(member.nodes)

        outers = [self._locs(ring, relation.id) for ring in _join_rings(outer_ways, relation.id)]
        inners = [self._locs(ring, relation.id) for ring in _join_rings(inner_ways, relation.id)]
        if not outers:
            raise GeometryUnavailableError(relation.id, "no outer ring")

        polygons = [[_wind(ring, exterior=True)] for ring in outers]
        for ring in inners:
            target = next((p for p in polygons if _contains(p[0], ring[0])), polygons[0])
            target.append(_wind(ring, exterior=False))

        if len(polygons) == 1:
            return {"type": "Polygon", "coordinates": polygons[0]}
        return {"type": "MultiPolygon", "coordinates": polygons}


def _wind(ring: list[list[float]], *, exterior: bool) -> list[list[float]]:
    # Assumes no polygon spans a hemisphere: the small side is the inside.
    small = ring_area(ring) <= 2 * pi
    return ring if small == exterior else list(reversed(ring))


def _encloses_nothing(ring: list[list[float]]) -> bool:
    # Zero-area rings can come out as ~0 or ~4π depending on rounding, in either winding.
    areas = (ring_area(ring), ring_area(ring[::-1]))
    return min(min(a, 4 * pi - a) for a in areas) < ZERO_AREA_SR


def _join_rings(sequences: list[list[str]], owner: str) -> list[list[str]]:
    """Chain node-id sequences end to end until every chain closes."""
    pending = [list(seq) for seq in sequences if seq]
    rings: list[list[str]] = []
    while pending:
        current = pending.pop(0)
        while current[0] != current[-1]:
            for i, seq in enumerate(pending):
                if seq[0] == current[-1]:
                    current += seq[1:]
                elif seq[-1] == current[-1]:
                    current += seq[-2::-1]
                else:
                    continue
                pending.pop(i)
                break
            else:
                raise GeometryUnavailableError(owner, "unclosed multipolygon ring")
        rings.append(current)
    return rings


def _contains(ring: list[list[float]], point: list[float]) -> bool:
    """Planar even-odd point-in-ring test on lon/lat."""
    x, y = point[0], point[1]
    inside = False
    j = len(ring) - 1
    for i in range(len(ring)):
        xi, yi = ring[i][0], ring[i][1]
        xj, yj = ring[j][0], ring[j][1]
        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            inside = not inside
        j = i
    return inside
