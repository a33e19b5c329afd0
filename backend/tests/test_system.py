from fastapi.testclient import TestClient
from eduvault.main import app

client = TestClient(app)

def test_health_ok():
    r = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "ok"
    assert data["database"] == "ok"
    assert data["request_id"] == "req-123"
    assert r.headers["X-Request-ID"] == "req-123"

def test_version_ok():
    r = client.get("/version")
    assert r.status_code == 200
    data = r.json()
    assert "version" in data and "git_sha" in data
    assert data["execution_backend"] in ("judge0", "piston")

def test_unknown_route_uses_envelope():
    r = client.get("/nope")
    assert r.status_code == 404
    assert r.json() == {"success": False, "message": "Not Found"}
