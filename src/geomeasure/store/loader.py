"""
Feature file loader.

A feature file is a local JSON document (default: `data/features.json`):

    {"nodes": [{"id": "n1", "loc": [lon, lat], "tags": {...}}, ...],
     "ways": [{"id": "w1", "nodes": ["n1", "n2", ...], "tags": {...}}, ...],
     "relations": [{"id": "r1", "members": [{"ref": "w1", "role": "outer"}], "tags": {...}}]}

It is validated into typed Pydantic models before a `MemoryStore` is built on it.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

from pydantic import TypeAdapter

from geomeasure.core.env import resolve_project_path
from geomeasure.store.memory import DEFAULT_AREA_KEYS, FeatureGraph, MemoryStore


_GRAPH_ADAPTER = TypeAdapter(FeatureGraph)


def parse_feature_graph(payload: Any) -> FeatureGraph:
    """Validate an already-decoded feature payload."""
    return _GRAPH_ADAPTER.validate_python(payload)


def load_feature_graph(path: str | Path) -> FeatureGraph:
    """Load and validate a feature JSON file."""
    resolved = resolve_project_path(path)
    return parse_feature_graph(json.loads(resolved.read_text(encoding="utf-8")))


def load_store(path: str | Path, *, area_keys: Iterable[str] = DEFAULT_AREA_KEYS) -> MemoryStore:
    return MemoryStore(load_feature_graph(path), area_keys=area_keys)
