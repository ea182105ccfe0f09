"""Tests for the artwork query endpoint."""

from collections.abc import Callable
from pathlib import Path

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def scanned_client(
    client: TestClient, make_library: Callable[[dict[str, list[str]]], Path]
) -> TestClient:
    """Client whose library was scanned once (3 images, 1 video, 1 tagged artwork)."""
    root = make_library({"Alice": ["10.jpg", "11_p2.png", "clip.mp4"], "Bob": ["b.gif"]})
    (root / "Alice" / "10-meta.txt").write_text("Tags\n#sky\n")
    client.put("/api/settings/scan-path", json={"scan_path": str(root)})
    assert client.post("/api/library/scan").json()["status"] == "completed"
    return client


class TestListArtworks:
    """GET /api/artworks"""

    def test_all_is_no_filter(self, scanned_client: TestClient) -> None:
        default = scanned_client.get("/api/artworks").json()
        explicit = scanned_client.get("/api/artworks", params={"media_type": "all"}).json()

        assert len(default["items"]) == 4
        assert default["items"] == explicit["items"]

    def test_filter_by_media_type(self, scanned_client: TestClient) -> None:
        videos = scanned_client.get("/api/artworks", params={"media_type": "video"}).json()
        images = scanned_client.get("/api/artworks", params={"media_type": "image"}).json()

        assert [a["file_path"] for a in videos["items"]] == ["Alice/clip.mp4"]
        assert len(images["items"]) == 3

    def test_filter_by_artist(self, scanned_client: TestClient) -> None:
        bob_id = next(
            a["artist_id"]
            for a in scanned_client.get("/api/artworks").json()["items"]
            if a["file_path"] == "Bob/b.gif"
        )

        items = scanned_client.get("/api/artworks", params={"artist_id": bob_id}).json()[
            "items"
        ]

        assert [a["file_path"] for a in items] == ["Bob/b.gif"]

    def test_filter_by_tag(self, scanned_client: TestClient) -> None:
        items = scanned_client.get("/api/artworks", params={"tag": "sky"}).json()["items"]

        assert [a["file_path"] for a in items] == ["Alice/10.jpg"]
        assert items[0]["tags"] == ["sky"]

    def test_invalid_media_type(self, client: TestClient) -> None:
        response = client.get("/api/artworks", params={"media_type": "audio"})

        assert response.status_code == 422
