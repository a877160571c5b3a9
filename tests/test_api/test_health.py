"""Tests for the health and root endpoints."""


class TestHealth:
    def test_healthy_with_embeddings(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "0.1.0"
        assert data["providers"]["embedding"] is True
        assert data["providers"]["search"] is True

    def test_degraded_without_embeddings(self, failing_client):
        response = failing_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["providers"] == {"embedding": False, "fetch": True}

    def test_root(self, client):
        data = client.get("/").json()

        assert data["service"] == "News Analytics API"
        assert data["docs"] == "/docs"
