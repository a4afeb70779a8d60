from fastapi.testclient import TestClient
from review_system.main import app


def test_health_ok():
    """Test health check endpoint"""
    client = TestClient(app)
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_root_endpoint():
    """Test root endpoint"""
    client = TestClient(app)
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Review System Backend"
    assert data["status"] == "ok"
    assert "docs" in data
    assert "health" in data


def test_test_endpoints_are_public():
    client = TestClient(app)
    expected = {
        "/api/auth/test": "Auth endpoint is working!",
        "/api/organizations/test": "Organization endpoint is working!",
        "/api/departments/test": "Department endpoint is working!",
        "/api/users/test": "User endpoint is working!",
    }
    for path, text in expected.items():
        r = client.get(path)
        assert r.status_code == 200, path
        assert r.text == text
