"""Tests for the library scan endpoints."""

import asyncio
from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from artshelf.application.services.library_scanner_service import LibraryScannerService


class TestStartLibraryScan:
    """POST /api/library/scan"""

    def test_unset_scan_path_returns_skipped_summary(self, client: TestClient) -> None:
        response = client.post("/api/library/scan")

        assert response.status_code == 200
        data = response.json()
        assert data["skipped"] is True
        assert data["status"] == "skipped"
        assert data["artists_scanned"] == 0
        assert data["artworks_scanned"] == 0

    def test_scan_returns_summary(
        self,
        client: TestClient,
        make_library: Callable[[dict[str, list[str]]], Path],
    ) -> None:
        root = make_library({"Alice": ["1.jpg", "2.mp4", "readme.txt"]})
        client.put("/api/settings/scan-path", json={"scan_path": str(root)})

        response = client.post("/api/library/scan")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "completed"
        assert data["artists_created"] == 1
        assert data["artworks_created"] == 2
        assert data["artworks_skipped"] == 1
        assert data["writes"] == 3
        assert data["scan_path"] == str(root)

    def test_missing_scan_path_is_a_structured_failure(
        self, client: TestClient, tmp_path: Path
    ) -> None:
        client.put("/api/settings/scan-path", json={"scan_path": str(tmp_path / "gone")})

        response = client.post("/api/library/scan")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "failed"
        assert "does not exist" in data["error"]

    def test_concurrent_scan_is_rejected(self, client: TestClient) -> None:
        busy_lock = MagicMock(spec=asyncio.Lock)
        busy_lock.locked.return_value = True
        client.app.state.scan_lock = busy_lock

        response = client.post("/api/library/scan")

        assert response.status_code == 409


class TestCancelLibraryScan:
    """POST /api/library/scan/cancel"""

    def test_nothing_running(self, client: TestClient) -> None:
        response = client.post("/api/library/scan/cancel")

        assert response.status_code == 200
        assert response.json()["cancelled"] is False

    def test_cancels_running_scan(self, client: TestClient) -> None:
        busy_lock = MagicMock(spec=asyncio.Lock)
        busy_lock.locked.return_value = True
        scanner = MagicMock(spec=LibraryScannerService)
        client.app.state.scan_lock = busy_lock
        client.app.state.library_scanner = scanner

        response = client.post("/api/library/scan/cancel")

        assert response.status_code == 200
        assert response.json()["cancelled"] is True
        scanner.cancel.assert_called_once()


class TestLibraryScanStatus:
    """GET /api/library/scan/status"""

    def test_idle(self, client: TestClient) -> None:
        response = client.get("/api/library/scan/status")

        assert response.status_code == 200
        assert response.json() == {"scanning": False, "message": None}

    def test_reports_running_scan(self, client: TestClient) -> None:
        scanner = MagicMock(spec=LibraryScannerService)
        scanner.scanning = True
        scanner.last_progress_message = "Processed 3 artists (last: Alice)"
        client.app.state.library_scanner = scanner

        response = client.get("/api/library/scan/status")

        assert response.json() == {
            "scanning": True,
            "message": "Processed 3 artists (last: Alice)",
        }


class TestDatabaseUnavailable:
    """Endpoints answer 503 when the startup connectivity check failed."""

    def test_scan_returns_503(self, client: TestClient) -> None:
        client.app.state.db_ready = False

        response = client.post("/api/library/scan")

        assert response.status_code == 503
        assert response.json() == {"detail": "Database connection unavailable"}

    def test_history_returns_503(self, client: TestClient) -> None:
        client.app.state.db_ready = False

        response = client.get("/api/library/scans")

        assert response.status_code == 503


class TestListLibraryScans:
    """GET /api/library/scans"""

    def test_empty_history(self, client: TestClient) -> None:
        response = client.get("/api/library/scans")

        assert response.status_code == 200
        assert response.json() == []

    def test_lists_finished_scans(
        self,
        client: TestClient,
        make_library: Callable[[dict[str, list[str]]], Path],
    ) -> None:
        root = make_library({"Alice": ["1.jpg"]})
        client.put("/api/settings/scan-path", json={"scan_path": str(root)})
        client.post("/api/library/scan")
        client.post("/api/library/scan")

        response = client.get("/api/library/scans", params={"limit": 1})

        assert response.status_code == 200
        scans = response.json()
        assert len(scans) == 1
        assert scans[0]["status"] == "completed"
        assert scans[0]["artworks_created"] == 0
