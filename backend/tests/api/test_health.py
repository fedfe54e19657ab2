"""Tests for the health check endpoint."""

from fastapi.testclient import TestClient

from api.app import create_app


class TestHealth:
    def test_health_returns_200(self):
        """Should report healthy without any sampler or storage configured."""
        client = TestClient(create_app())

        response = client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "0.1.0"
        assert data["panel_size"] == 9
