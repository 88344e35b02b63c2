import pytest

from geomeasure.config.settings import get_settings
from geomeasure.core.env import get_project_root, load_dotenv_if_present
from geomeasure.store.loader import parse_feature_graph
from geomeasure.store.memory import MemoryStore

# A 1°x1° park at the origin (counter-clockwise as drawn), a forest multipolygon
# reusing it as outer ring with a small inner ring, a 1° road on the equator, a
# way that runs there and back (closed but degenerate), a bench, and a route relation.
FEATURES = {
    "nodes": [
        {"id": "n1", "loc": [0.0, 0.0]},
        {"id": "n2", "loc": [1.0, 0.0]},
        {"id": "n3", "loc": [1.0, 1.0]},
        {"id": "n4", "loc": [0.0, 1.0]},
        {"id": "n10", "loc": [12.5, -7.25], "tags": {"amenity": "bench"}},
        {"id": "n20", "loc": [2.0, 0.0]},
        {"id": "n21", "loc": [3.0, 0.0]},
        {"id": "n30", "loc": [0.2, 0.2]},
        {"id": "n31", "loc": [0.4, 0.2]},
        {"id": "n32", "loc": [0.4, 0.4]},
        {"id": "n33", "loc": [0.2, 0.4]},
    ],
    "ways": [
        {"id": "w1", "nodes": ["n1", "n2", "n3", "n4", "n1"], "tags": {"leisure": "park"}},
        {"id": "w2", "nodes": ["n20", "n21"], "tags": {"highway": "residential"}},
        {"id": "w3", "nodes": ["n20", "n21", "n20"], "tags": {"building": "yes"}},
        {"id": "w4", "nodes": ["n30", "n31", "n32", "n33", "n30"]},
    ],
    "relations": [
        {
            "id": "r1",
            "members": [{"ref": "w1", "role": "outer"}, {"ref": "w4", "role": "inner"}],
            "tags": {"type": "multipolygon", "landuse": "forest"},
        },
        {
            "id": "r2",
            "members": [{"ref": "w2", "role": ""}, {"ref": "n10", "role": "stop"}],
            "tags": {"type": "route"},
        },
    ],
}


# Closed ways that enclose nothing: a path walked there and back along the equator,
# and a building whose corners all sit on it.
ZERO_AREA_FEATURES = {
    "nodes": [*FEATURES["nodes"], {"id": "n22", "loc": [4.0, 0.0]}],
    "ways": [
        {"id": "back", "nodes": ["n20", "n21", "n20"], "tags": {"highway": "path"}},
        {"id": "flat", "nodes": ["n20", "n21", "n22", "n20"], "tags": {"building": "yes"}},
    ],
}


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore(parse_feature_graph(FEATURES))


@pytest.fixture
def zero_area_store() -> MemoryStore:
    return MemoryStore(parse_feature_graph(ZERO_AREA_FEATURES))


@pytest.fixture
def fresh_settings():
    """Clear cached settings so env overrides set by a test take effect."""
    get_settings.cache_clear()
    get_project_root.cache_clear()
    load_dotenv_if_present.cache_clear()
    yield get_settings
    get_settings.cache_clear()
    get_project_root.cache_clear()
    load_dotenv_if_present.cache_clear()
