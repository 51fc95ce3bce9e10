# HTTP 래퍼 (FastAPI TestClient)
import pytest
from fastapi.testclient import TestClient

from fitcoach.core.config import settings
from fitcoach.main import app

@pytest.fixture
def client():
    return TestClient(app)

def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}

def test_decode_repaired_record(client):
    body = {"text": 'Résultat :\n```json\n{name: "Omelette", calories: "320", tags: ["léger",]}\n```'}
    res = client.post("/decode", json=body)
    assert res.status_code == 200
    data = res.json()
    assert data["ok"] is True
    assert data["count"] == 1
    rec = data["records"][0]
    assert rec["name"] == "Omelette"
    assert rec["nutrition"]["calories"] == 320.0
    assert rec["provenance"]["source"] == "repaired"
    assert "qualityScore" in rec["provenance"]

def test_decode_heuristic_uses_context(client):
    body = {"text": "Salade de quinoa aux légumes", "goal": "lose_weight", "timePreference": "quick"}
    data = client.post("/decode", json=body).json()
    assert data["ok"] is True
    rec = data["records"][0]
    assert rec["provenance"]["source"] == "heuristic"
    assert rec["time"] == 15
    assert rec["nutrition"]["calories"] == 330.0

def test_decode_failure_is_empty_not_error(client):
    data = client.post("/decode", json={"text": "rien du tout"}).json()
    assert data == {"ok": False, "count": 0, "records": []}

def test_decode_too_large(client, monkeypatch):
    monkeypatch.setattr(settings, "DECODER_MAX_INPUT_BYTES", 10)
    res = client.post("/decode", json={"text": '{"name": "A", "time": 1}'})
    assert res.status_code == 413

def test_decode_bad_schema_hint(client):
    res = client.post("/decode", json={"text": "[]", "schemaHint": "nope"})
    assert res.status_code == 422

def test_normalize_endpoint(client):
    res = client.post("/decode/normalize", json=[{"name": "A", "time": "12 min"}, {"name": ""}])
    data = res.json()
    assert data["count"] == 1
    assert data["records"][0]["time"] == 12

def test_programs_endpoint(client):
    text = "Full body\nsquat 4x10, pompes 3x12, planche"
    data = client.post("/decode/programs", json={"text": text}).json()
    assert data["ok"] is True
    assert data["programs"][0]["title"] == "Full body"
    assert data["programs"][0]["exercises"] == ["squat 4x10", "pompes 3x12", "planche"]

def test_stats_endpoint(client):
    client.post("/decode", json={"text": '{"name": "A", "time": 1}'})
    data = client.get("/decode/stats").json()
    assert data["totalCalls"] >= 1
    assert data["directSuccess"] >= 1
