"""API endpoint tests."""


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_unauthorized_access(client):
    """Test that protected endpoints require auth."""
    response = client.get("/api/v1/users/me")
    assert response.status_code == 401
    assert response.json()["detail"] == "No token provided"


def test_malformed_bearer_token(client):
    response = client.get("/api/v1/users/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token"


def test_validation_error_shape(client):
    """Invalid bodies get a 400 with per-field details."""
    response = client.post("/api/v1/users/register", json={"email": "not-an-email"})
    assert response.status_code == 400
    data = response.json()
    assert data["success"] is False
    assert data["message"] == "Validation failed"
    paths = {detail["path"] for detail in data["details"]}
    assert "body.email" in paths
    assert "body.password" in paths
