"""Tests for the SQLAlchemy repositories against a real SQLite file."""

import pytest
from sqlalchemy.exc import IntegrityError

from artshelf.domain.entities import Artist, Artwork
from artshelf.domain.exceptions import EntityNotFoundException
from artshelf.domain.value_objects import MediaType
from artshelf.infrastructure.persistence import Database
from artshelf.infrastructure.persistence.repositories import (
    ArtistRepository,
    ArtworkRepository,
    TagRepository,
)


async def _seed(db: Database) -> tuple[Artist, Artist]:
    """Two artists with a mix of images and videos."""
    alice = Artist(name="Alice", directory_key="Alice")
    bob = Artist(name="Bob", directory_key="Bob")
    async with db.session_scope() as session:
        artists = ArtistRepository(session)
        artworks = ArtworkRepository(session)
        await artists.add(alice)
        await artists.add(bob)
        await artworks.add(
            Artwork(alice.id, "Alice/2.jpg", MediaType.IMAGE, title="2", order_index=2)
        )
        await artworks.add(
            Artwork(alice.id, "Alice/1.mp4", MediaType.VIDEO, title="1", order_index=1)
        )
        await artworks.add(
            Artwork(bob.id, "Bob/1.png", MediaType.IMAGE, title="1", order_index=1)
        )
    return alice, bob


class TestArtistRepository:
    @pytest.mark.asyncio
    async def test_get_by_directory_key(self, db: Database) -> None:
        alice, _bob = await _seed(db)

        async with db.session_scope() as session:
            repo = ArtistRepository(session)
            found = await repo.get_by_directory_key("Alice")
            assert found is not None
            assert found.id == alice.id
            assert await repo.get_by_directory_key("alice") is None
            assert await repo.count_all() == 2

    @pytest.mark.asyncio
    async def test_directory_key_is_unique(self, db: Database) -> None:
        await _seed(db)

        with pytest.raises(IntegrityError):
            async with db.session_scope() as session:
                await ArtistRepository(session).add(
                    Artist(name="Alice again", directory_key="Alice")
                )


class TestArtworkRepository:
    @pytest.mark.asyncio
    async def test_get_by_artist_is_ordered(self, db: Database) -> None:
        alice, _bob = await _seed(db)

        async with db.session_scope() as session:
            artworks = await ArtworkRepository(session).get_by_artist(alice.id)

        assert [a.file_path for a in artworks] == ["Alice/1.mp4", "Alice/2.jpg"]

    @pytest.mark.asyncio
    async def test_list_filtered_all_means_no_filter(self, db: Database) -> None:
        await _seed(db)

        async with db.session_scope() as session:
            repo = ArtworkRepository(session)
            everything = await repo.list_filtered(media_type=MediaType.ALL)
            images = await repo.list_filtered(media_type=MediaType.IMAGE)
            videos = await repo.list_filtered(media_type=MediaType.VIDEO)

        assert len(everything) == 3
        assert sorted(a.file_path for a in images) == ["Alice/2.jpg", "Bob/1.png"]
        assert [a.file_path for a in videos] == ["Alice/1.mp4"]

    @pytest.mark.asyncio
    async def test_list_filtered_by_artist_and_type(self, db: Database) -> None:
        alice, _bob = await _seed(db)

        async with db.session_scope() as session:
            result = await ArtworkRepository(session).list_filtered(
                artist_id=alice.id, media_type=MediaType.IMAGE
            )

        assert [a.file_path for a in result] == ["Alice/2.jpg"]

    @pytest.mark.asyncio
    async def test_update_changes_scanner_fields(self, db: Database) -> None:
        alice, _bob = await _seed(db)
        async with db.session_scope() as session:
            artwork = (await ArtworkRepository(session).get_by_artist(alice.id))[0]

        artwork.order_index = 5
        artwork.size = 1024
        async with db.session_scope() as session:
            await ArtworkRepository(session).update(artwork)

        async with db.session_scope() as session:
            reloaded = await ArtworkRepository(session).get_by_artist(alice.id)
        updated = next(a for a in reloaded if a.id == artwork.id)
        assert updated.order_index == 5
        assert updated.size == 1024

    @pytest.mark.asyncio
    async def test_update_unknown_artwork_raises(self, db: Database) -> None:
        alice, _bob = await _seed(db)
        ghost = Artwork(alice.id, "Alice/ghost.jpg", MediaType.IMAGE)

        with pytest.raises(EntityNotFoundException):
            async with db.session_scope() as session:
                await ArtworkRepository(session).update(ghost)

    @pytest.mark.asyncio
    async def test_file_path_unique_per_artist(self, db: Database) -> None:
        alice, _bob = await _seed(db)

        with pytest.raises(IntegrityError):
            async with db.session_scope() as session:
                await ArtworkRepository(session).add(
                    Artwork(alice.id, "Alice/2.jpg", MediaType.IMAGE)
                )


class TestTagRepository:
    @pytest.mark.asyncio
    async def test_get_or_create_is_lazy(self, db: Database) -> None:
        async with db.session_scope() as session:
            repo = TagRepository(session)
            first, created = await repo.get_or_create("sky")
            second, created_again = await repo.get_or_create("sky")

        assert created is True
        assert created_again is False
        assert first.id == second.id

    @pytest.mark.asyncio
    async def test_link_and_filter_by_tag(self, db: Database) -> None:
        alice, _bob = await _seed(db)
        async with db.session_scope() as session:
            artwork = (await ArtworkRepository(session).get_by_artist(alice.id))[0]
            tags = TagRepository(session)
            tag, _ = await tags.get_or_create("sky")
            await tags.link(artwork.id, tag.id)

        async with db.session_scope() as session:
            tagged = await ArtworkRepository(session).list_filtered(tag="sky")
            names = await TagRepository(session).get_tag_names_for_artworks([artwork.id])

        assert [a.id for a in tagged] == [artwork.id]
        assert names == {artwork.id: {"sky"}}

    @pytest.mark.asyncio
    async def test_tag_names_for_no_artworks(self, db: Database) -> None:
        async with db.session_scope() as session:
            assert await TagRepository(session).get_tag_names_for_artworks([]) == {}
