"""Tests for the settings endpoints."""

from fastapi.testclient import TestClient


class TestScanPathEndpoints:
    """GET/PUT /api/settings/scan-path"""

    def test_unset_by_default(self, client: TestClient) -> None:
        response = client.get("/api/settings/scan-path")

        assert response.status_code == 200
        assert response.json() == {"scan_path": None}

    def test_put_then_get(self, client: TestClient) -> None:
        put = client.put("/api/settings/scan-path", json={"scan_path": " /srv/art "})
        get = client.get("/api/settings/scan-path")

        assert put.status_code == 200
        assert put.json() == {"scan_path": "/srv/art"}
        assert get.json() == {"scan_path": "/srv/art"}

    def test_last_write_wins(self, client: TestClient) -> None:
        client.put("/api/settings/scan-path", json={"scan_path": "/first"})
        client.put("/api/settings/scan-path", json={"scan_path": "/second"})

        assert client.get("/api/settings/scan-path").json() == {"scan_path": "/second"}

    def test_empty_value_rejected(self, client: TestClient) -> None:
        response = client.put("/api/settings/scan-path", json={"scan_path": ""})

        assert response.status_code == 422

    def test_blank_value_rejected(self, client: TestClient) -> None:
        response = client.put("/api/settings/scan-path", json={"scan_path": "   "})

        assert response.status_code == 422
        assert response.json() == {"detail": "Scan path must not be blank"}
        assert client.get("/api/settings/scan-path").json() == {"scan_path": None}

    def test_database_unavailable_returns_503(self, client: TestClient) -> None:
        client.app.state.db_ready = False

        response = client.get("/api/settings/scan-path")

        assert response.status_code == 503
