# =============================================================================
# tests/test_health.py - Health & Public Config Endpoint Tests
# =============================================================================

from app.config import settings


class TestHealth:
    """Test /health and /api/health."""

    def test_root_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["checks"]["database"] == "healthy"
        assert body["env"]["database_url"] is True

    def test_api_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200

    def test_database_down(self, client, monkeypatch):
        monkeypatch.setattr("app.routers.health.check_database", lambda: False)

        response = client.get("/api/health")

        assert response.status_code == 503
        assert response.json()["status"] == "degraded"
        assert response.json()["checks"]["database"] == "unhealthy"

    def test_secrets_are_never_exposed(self, client, monkeypatch):
        monkeypatch.setattr(settings, "SQUARE_ACCESS_TOKEN", "sq-secret")

        response = client.get("/health")

        assert response.json()["env"]["square_access_token"] is True
        assert "sq-secret" not in response.text

    def test_liveness(self, client):
        response = client.get("/api/health/live")

        assert response.status_code == 200
        assert response.json()["status"] == "alive"


class TestRoot:
    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["name"] == "Gisabo API"


class TestSquareConfig:
    """Test GET /api/square-config."""

    def test_public_identifiers_only(self, client, monkeypatch):
        monkeypatch.setattr(settings, "SQUARE_APPLICATION_ID", "sandbox-app")
        monkeypatch.setattr(settings, "SQUARE_LOCATION_ID", "LOC-1")
        monkeypatch.setattr(settings, "SQUARE_ACCESS_TOKEN", "sq-secret")

        response = client.get("/api/square-config")

        assert response.status_code == 200
        assert response.json() == {
            "applicationId": "sandbox-app",
            "locationId": "LOC-1",
            "environment": settings.SQUARE_ENVIRONMENT,
        }
