"""Tests for domain entities."""

import pytest

from artshelf.domain.entities import Artist, Artwork, Tag
from artshelf.domain.value_objects import MediaType


class TestArtist:
    def test_generates_id(self) -> None:
        first = Artist(name="Alice", directory_key="Alice-1")
        second = Artist(name="Alice", directory_key="Alice-1")
        assert first.id != second.id

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValueError):
            Artist(name=" ", directory_key="x")

    def test_empty_directory_key_rejected(self) -> None:
        with pytest.raises(ValueError):
            Artist(name="Alice", directory_key="")


class TestArtwork:
    def test_all_is_not_a_storable_type(self) -> None:
        """MediaType.ALL is a filter sentinel only."""
        with pytest.raises(ValueError):
            Artwork(artist_id="a", file_path="A/x.jpg", media_type=MediaType.ALL)

    def test_negative_order_rejected(self) -> None:
        with pytest.raises(ValueError):
            Artwork(
                artist_id="a",
                file_path="A/x.jpg",
                media_type=MediaType.IMAGE,
                order_index=-1,
            )

    def test_needs_update(self) -> None:
        artwork = Artwork(
            artist_id="a",
            file_path="A/x_2.jpg",
            media_type=MediaType.IMAGE,
            order_index=2,
        )
        assert not artwork.needs_update(MediaType.IMAGE, 2)
        assert artwork.needs_update(MediaType.IMAGE, 3)
        assert artwork.needs_update(MediaType.VIDEO, 2)


class TestTag:
    def test_name_is_stripped(self) -> None:
        assert Tag(name="  sky ").name == "sky"

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValueError):
            Tag(name="   ")
