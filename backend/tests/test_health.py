from fastapi.testclient import TestClient

from returndesk.main import app

client = TestClient(app)


def test_health_ok():
    res = client.get("/api/health")
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "ok"
    assert body["db"] is True


def test_health_needs_no_token():
    res = client.get("/api/health", headers={"Authorization": "Bearer garbage"})
    assert res.status_code == 200
