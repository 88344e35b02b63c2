from starlette.testclient import TestClient

from geomeasure.api.app import app

from conftest import FEATURES


def _measure(c, selection, unit_system="metric"):
    resp = c.post(
        "/api/measurements",
        json={"features": FEATURES, "selection": selection, "unit_system": unit_system},
    )
    assert resp.status_code == 200
    return resp.json()


def test_widget_identity():
    with TestClient(app) as c:
        resp = c.get("/api/widget")
    assert resp.status_code == 200
    data = resp.json()
    assert data["id"] == "measurement"
    assert data["title"] == "Measurement"
    assert data["key"] == "M"
    assert data["unit_system"] in {"metric", "imperial"}


def test_measure_single_closed_area():
    with TestClient(app) as c:
        data = _measure(c, ["w1"])
    assert data["mode"] == "single_closed"
    assert data["heading"] == "w1"
    assert data["items"][0] == "Geometry: closed area"
    assert data["items"][2] == "Perimeter: 444.8 km"
    assert data["toggle_label"] == "Metric"


def test_identical_requests_are_measured_independently():
    with TestClient(app) as c:
        first = _measure(c, ["w2"])
        second = _measure(c, ["w2"], unit_system="imperial")
    assert first["items"][1] == "Length: 111.2 km"
    assert second["items"][1] == "Length: 69.09 mi"


def test_measure_empty_and_aggregate_selection():
    with TestClient(app) as c:
        idle = _measure(c, [])
        many = _measure(c, ["n10", "n20", "w1"])
    assert idle["mode"] == "idle"
    assert idle["heading"] == "0 selected"
    assert many["items"] == ["Center: 6.25000, -3.12500"]


def test_measure_rejects_malformed_graph():
    with TestClient(app) as c:
        resp = c.post("/api/measurements", json={"features": {"nodes": [{"id": "n1"}]}, "selection": ["n1"]})
    assert resp.status_code == 422


def test_format_endpoints():
    with TestClient(app) as c:
        length = c.get("/api/format/length", params={"meters": 999, "unit_system": "metric"})
        area = c.get("/api/format/area", params={"sq_meters": 4_000_000, "unit_system": "imperial"})
        negative = c.get("/api/format/length", params={"meters": -1})
    assert length.json() == {"unit_system": "metric", "text": "999.0 m"}
    assert area.json() == {"unit_system": "imperial", "text": "1.54 mi² (988.4 ac)"}
    assert negative.status_code == 422
