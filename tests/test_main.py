from fastapi.testclient import TestClient

from gymmonitor.main import app


def test_app_serves_routes_under_api_prefix():
    client = TestClient(app)

    assert client.get("/api/health").json() == {"status": "ok"}
    response = client.get("/api/member/dashboard")
    assert response.status_code == 401
    assert "error" in response.json()
