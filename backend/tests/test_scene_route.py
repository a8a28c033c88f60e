import pytest
from fastapi.testclient import TestClient

import rigidscene.sim.world as world_module
from rigidscene.examples import EXAMPLES
from rigidscene.main import app
from rigidscene.models.settings import settings


@pytest.fixture
def client(monkeypatch):
  monkeypatch.setattr(settings, "WORLD_BOUNDARIES", False)
  app.state.scene_session = None
  yield TestClient(app)
  app.state.scene_session = None


def test_health(client):
  r = client.get("/health")
  assert r.status_code == 200
  assert r.json()["status"] == "ok"


def test_examples_and_grammar(client):
  r = client.get("/scene/examples")
  assert r.status_code == 200
  assert [e["name"] for e in r.json()] == list(EXAMPLES)

  r = client.get("/scene/grammar")
  assert r.status_code == 200
  assert "composite" in r.json()["grammar"]


def test_run_returns_hydrated_world(client):
  r = client.post("/scene/run", json={"program": "a: rectangle 0 0 10 10; b: rectangle 50 0 10 10; a -- b;"})
  assert r.status_code == 200
  data = r.json()
  assert data["status"] == "started"
  assert data["counts"] == {"bodies": 2, "constraints": 1, "composites": 0}
  world = data["world"]["world"]
  assert [b["label"] for b in world["bodies"]] == ["a", "b"]
  assert world["constraints"][0]["stiffness"] == 1


def test_run_reports_parse_errors(client):
  r = client.post("/scene/run", json={"program": "a: rectangle 0 0 10 10 @;"})
  assert r.status_code == 400
  detail = r.json()["detail"]
  assert detail["error"] == "parse_error"
  assert detail["line"] == 1


def test_run_reports_missing_functions(client):
  r = client.post("/scene/run", json={"program": "k: 1; (nope 2);"})
  assert r.status_code == 400
  detail = r.json()["detail"]
  assert detail["error"] == "function_not_found"
  assert detail["fn_name"] == "nope"
  assert detail["labels"] == ["k"]


def test_run_strict_mode(client):
  program = "a: circle 0 0 1; a -- ghost;"
  r = client.post("/scene/run", json={"program": program})
  assert r.status_code == 200
  assert r.json()["counts"]["constraints"] == 0

  r = client.post("/scene/run", json={"program": program, "strict": True})
  assert r.status_code == 400
  assert r.json()["detail"]["error"] == "unresolved_endpoint"


def test_failed_run_keeps_previous_world(client):
  assert client.post("/scene/run", json={"program": "circle 400 200 5;"}).status_code == 200
  assert client.post("/scene/run", json={"program": "(nope);"}).status_code == 400

  r = client.post("/scene/rotate")
  assert r.status_code == 200
  assert r.json()["counts"]["bodies"] == 1


def test_explode_needs_a_world(client):
  assert client.post("/scene/explode").status_code == 409

  client.post("/scene/run", json={"program": "circle 400 200 5;"})
  r = client.post("/scene/explode")
  assert r.status_code == 200
  velocity = r.json()["world"]["world"]["bodies"][0]["velocity"]
  assert velocity != {"x": 0.0, "y": 0.0}


def test_simulate(client, monkeypatch):
  def fake_simulate(payload, duration_s, frame_rate):
    return {"frames": [{"t": 0.0, "bodies": []}], "meta": {"frame_rate": frame_rate}}

  monkeypatch.setattr(world_module, "simulate_world", fake_simulate)
  r = client.post("/scene/simulate", json={"program": "circle 0 0 1;", "duration_s": 1.0, "frame_rate": 24})
  assert r.status_code == 200
  data = r.json()
  assert data["status"] == "simulated"
  assert data["counts"]["bodies"] == 1
  assert data["simulation"]["meta"]["frame_rate"] == 24


def test_simulate_failure_is_500(client, monkeypatch):
  def failing(*args, **kwargs):
    raise RuntimeError("Node.js runtime not found")

  monkeypatch.setattr(world_module, "simulate_world", failing)
  r = client.post("/scene/simulate", json={"program": "circle 0 0 1;"})
  assert r.status_code == 500
  assert "Node.js" in r.json()["detail"]


def test_simulate_rejects_bad_programs(client):
  r = client.post("/scene/simulate", json={"program": "rectangle"})
  assert r.status_code == 400


def test_run_reports_non_numeric_angle(client):
  r = client.post("/scene/run", json={"program": "circle 0 0 5 [angle=steep];"})
  assert r.status_code == 400
  detail = r.json()["detail"]
  assert detail["error"] == "hydration_error"
  assert "'angle'" in detail["message"]


def test_simulate_reports_non_numeric_offset(client):
  r = client.post("/scene/simulate", json={"program": "{circle 0 0 5;} [x=left];"})
  assert r.status_code == 400
  assert r.json()["detail"]["error"] == "hydration_error"
