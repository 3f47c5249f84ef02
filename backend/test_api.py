"""
HTTP surface, driven through FastAPI's TestClient with a fake renderer.
Run with: pytest backend/test_api.py
"""

import pytest
from fastapi.testclient import TestClient

from conftest import SAMPLE_SOURCE, SAMPLE_SVG, FakeBackend, FakeGenerator
from studio.api.routes import get_controller
from studio.main import app
from studio.renderer import RendererAdapter
from studio.sync.controller import SyncController


@pytest.fixture
def api():
    backend = FakeBackend()
    backend.failures["BROKEN"] = "Parse error on line 1"
    generator = FakeGenerator({"textual": SAMPLE_SOURCE, "visual": "not json"})
    controller = SyncController(RendererAdapter(backend), generator=generator, source=SAMPLE_SOURCE)

    app.dependency_overrides[get_controller] = lambda: controller
    try:
        yield TestClient(app), controller
    finally:
        app.dependency_overrides.clear()


def test_render_success(api):
    client, _ = api
    body = client.post("/render", json={"source": SAMPLE_SOURCE}).json()

    assert body["status"] == "success"
    assert body["render"]["nodes"] == 2
    assert body["state"]["status"] == "idle"


def test_render_failure_is_reported_in_body(api):
    client, _ = api
    body = client.post("/render", json={"source": "BROKEN"}).json()

    assert body["status"] == "error"
    assert body["render"]["error"] == "Parse error on line 1"
    assert body["state"]["status"] == "error"
    assert body["state"]["diagram"]["source_text"] == "BROKEN"


def test_render_with_unknown_theme(api):
    client, _ = api
    body = client.post("/render", json={"source": SAMPLE_SOURCE, "theme": "neon"}).json()
    assert body["status"] == "error"
    assert body["code"] == "STUDIO_ERROR"


def test_edit_flow(api):
    client, controller = api
    client.post("/render", json={"source": SAMPLE_SOURCE})

    located = client.post("/edit/locate", json={"x": 100, "y": 30}).json()
    assert located["status"] == "success"
    assert located["session"]["target_label"] == "Box"
    assert located["session"]["overlay"] == {"x": 60, "y": 10, "width": 100, "height": 40}

    committed = client.post("/edit/commit", json={"text": "Renamed"}).json()
    assert committed["changed"]
    assert controller.source == "graph TD\n    A[Renamed] --> B{Other}"


def test_locate_miss(api):
    client, _ = api
    client.post("/render", json={"source": SAMPLE_SOURCE})
    body = client.post("/edit/locate", json={"x": 1, "y": 1}).json()
    assert body["status"] == "miss"


def test_orientation_and_inject(api):
    client, controller = api

    client.post("/orientation/toggle")
    assert controller.source.startswith("graph LR")

    body = client.post("/inject", json={"kind": "connector"}).json()
    assert body["status"] == "success"
    assert controller.source.endswith("\n --> ")

    body = client.post("/inject", json={"kind": "hexagon"}).json()
    assert body["code"] == "UNKNOWN_SHAPE"


def test_viewport_endpoints(api):
    client, _ = api

    body = client.post("/viewport/zoom", json={"delta": 0.5, "pivot": {"x": 10, "y": 10}}).json()
    assert body["viewport"]["scale"] == 1.5

    body = client.post("/viewport/zoom", json={"wheel_delta_y": 100000}).json()
    assert body["viewport"]["scale"] == 0.1

    body = client.post("/viewport/pan", json={"dx": 5, "dy": -5}).json()
    assert body["viewport"]["percent"] == 10

    body = client.post("/viewport/reset").json()
    assert body["viewport"]["scale"] == 1.0


def test_normalize_endpoint(api):
    client, _ = api

    body = client.post("/elements/normalize", json={"elements": [{"type": "rectangle"}]}).json()
    assert body["status"] == "success"
    assert body["elements"][0]["strokeColor"] == "#e2e8f0"

    body = client.post("/elements/normalize", json={"raw": "[1, 2"}).json()
    assert body == {"status": "error", "code": "SCHEMA_ERROR", "message": "invalid data structure"}


def test_convert_endpoint(api):
    client, _ = api
    client.post("/render", json={"source": SAMPLE_SOURCE})

    body = client.post("/convert").json()

    assert body["status"] == "success"
    assert [e["type"] for e in body["elements"]] == ["rectangle", "diamond", "arrow"]
    assert body["state"]["active_tab"] == "visual"


def test_generate_and_history(api):
    client, _ = api

    body = client.post("/generate", json={"prompt": "box and decision", "type": "textual"}).json()
    assert body["status"] == "success"
    entry_id = body["entry"]["id"]

    bad = client.post("/generate", json={"prompt": "shapes", "type": "visual"}).json()
    assert bad["code"] == "SCHEMA_ERROR"

    history = client.get("/history").json()["entries"]
    assert [e["id"] for e in history] == [entry_id]

    selected = client.post("/history/select", json={"id": entry_id}).json()
    assert selected["status"] == "success"
    assert client.post("/history/select", json={"id": "nope"}).json()["code"] == "NOT_FOUND"


def test_templates(api):
    client, _ = api
    body = client.get("/templates").json()

    assert "Flowchart" in [t["name"] for t in body["templates"]]
    assert body["models"][0]["id"] == "gemini-2.5-flash"
    assert "decision" in body["shapes"]


def test_export_svg(api):
    client, _ = api

    empty = client.get("/export/svg").json()
    assert empty["code"] == "RENDER_ERROR"

    client.post("/render", json={"source": SAMPLE_SOURCE})
    response = client.get("/export/svg")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("image/svg+xml")
    assert response.text == SAMPLE_SVG


def test_state_and_mode(api):
    client, _ = api

    body = client.post("/mode", json={"pan_mode": True, "dark_mode": False}).json()
    assert body["state"]["pan_mode"] is True
    assert body["state"]["theme"] == "default"

    state = client.get("/state").json()
    assert state["canvas_background"] == "#f1f5f9"
