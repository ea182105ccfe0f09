"""Repository implementations for domain entities."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from artshelf.domain.entities import Artist, Artwork, Tag
from artshelf.domain.exceptions import EntityNotFoundException
from artshelf.domain.ports import (
    IAppSettingsRepository,
    IArtistRepository,
    IArtworkRepository,
    ITagRepository,
)
from artshelf.domain.value_objects import MediaType

from .models import (
    AppSettingsModel,
    ArtistModel,
    ArtworkModel,
    ArtworkTagModel,
    LibraryScanModel,
    TagModel,
    ensure_utc_aware,
)


def _artist_from_model(model: ArtistModel) -> Artist:
    return Artist(
        id=model.id,
        name=model.name,
        directory_key=model.directory_key,
        username=model.username,
        user_id=model.user_id,
        bio=model.bio,
        avatar=model.avatar,
        background_img=model.background_img,
        created_at=ensure_utc_aware(model.created_at),
        updated_at=ensure_utc_aware(model.updated_at),
    )


def _artwork_from_model(model: ArtworkModel) -> Artwork:
    return Artwork(
        id=model.id,
        artist_id=model.artist_id,
        file_path=model.file_path,
        title=model.title,
        media_type=MediaType(model.media_type),
        order_index=model.order_index,
        size=model.size,
        created_at=ensure_utc_aware(model.created_at),
        updated_at=ensure_utc_aware(model.updated_at),
    )


class ArtistRepository(IArtistRepository):
    """SQLAlchemy implementation of Artist repository."""

    # Hey future me, this is the Repository pattern! The session is NOT committed here - the
    # caller's session_scope() does that. Repos only stage changes.
    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with session."""
        self.session = session

    async def add(self, artist: Artist) -> None:
        """Add a new artist."""
        model = ArtistModel(
            id=artist.id,
            name=artist.name,
            directory_key=artist.directory_key,
            username=artist.username,
            user_id=artist.user_id,
            bio=artist.bio,
            avatar=artist.avatar,
            background_img=artist.background_img,
            created_at=artist.created_at,
            updated_at=artist.updated_at,
        )
        self.session.add(model)
        # Flush so artworks added in the same transaction can reference the FK
        await self.session.flush()

    async def get_by_id(self, artist_id: str) -> Artist | None:
        """Get an artist by ID."""
        model = await self.session.get(ArtistModel, artist_id)
        return _artist_from_model(model) if model else None

    async def get_by_directory_key(self, directory_key: str) -> Artist | None:
        """Get an artist by directory key."""
        stmt = select(ArtistModel).where(ArtistModel.directory_key == directory_key)
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()
        return _artist_from_model(model) if model else None

    async def list_all(self, limit: int = 100, offset: int = 0) -> list[Artist]:
        """List all artists with pagination."""
        stmt = (
            select(ArtistModel).order_by(ArtistModel.name).limit(limit).offset(offset)
        )
        result = await self.session.execute(stmt)
        return [_artist_from_model(m) for m in result.scalars().all()]

    async def count_all(self) -> int:
        """Count all artists."""
        result = await self.session.execute(select(func.count(ArtistModel.id)))
        return result.scalar_one()


class ArtworkRepository(IArtworkRepository):
    """SQLAlchemy implementation of Artwork repository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(self, artwork: Artwork) -> None:
        """Add a new artwork."""
        model = ArtworkModel(
            id=artwork.id,
            artist_id=artwork.artist_id,
            file_path=artwork.file_path,
            title=artwork.title,
            media_type=artwork.media_type.value,
            order_index=artwork.order_index,
            size=artwork.size,
            created_at=artwork.created_at,
            updated_at=artwork.updated_at,
        )
        self.session.add(model)

    # Hey future me - only media_type, order_index and size are scanner-owned. Title stays as it
    # was on first import so manual edits (future UI) don't get clobbered by every rescan.
    async def update(self, artwork: Artwork) -> None:
        """Update scanner-owned fields of an existing artwork."""
        model = await self.session.get(ArtworkModel, artwork.id)
        if not model:
            raise EntityNotFoundException("Artwork", artwork.id)

        model.media_type = artwork.media_type.value
        model.order_index = artwork.order_index
        model.size = artwork.size
        model.updated_at = datetime.now(UTC)

    async def get_by_artist(self, artist_id: str) -> list[Artwork]:
        """Get all artworks of an artist, ordered for display."""
        stmt = (
            select(ArtworkModel)
            .where(ArtworkModel.artist_id == artist_id)
            .order_by(ArtworkModel.order_index, ArtworkModel.file_path)
        )
        result = await self.session.execute(stmt)
        return [_artwork_from_model(m) for m in result.scalars().all()]

    # Listen up, this is the query surface the UI uses. MediaType.ALL must turn into "no filter"
    # HERE - never compare the column against 'all', nothing is stored with that value!
    async def list_filtered(
        self,
        artist_id: str | None = None,
        media_type: MediaType = MediaType.ALL,
        tag: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Artwork]:
        """List artworks with optional filters, ordered by artist then order_index."""
        stmt = select(ArtworkModel)

        if artist_id is not None:
            stmt = stmt.where(ArtworkModel.artist_id == artist_id)

        media_filter = media_type.to_filter()
        if media_filter is not None:
            stmt = stmt.where(ArtworkModel.media_type == media_filter.value)

        if tag:
            stmt = (
                stmt.join(ArtworkTagModel, ArtworkTagModel.artwork_id == ArtworkModel.id)
                .join(TagModel, TagModel.id == ArtworkTagModel.tag_id)
                .where(TagModel.name == tag)
            )

        stmt = (
            stmt.order_by(
                ArtworkModel.artist_id, ArtworkModel.order_index, ArtworkModel.file_path
            )
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return [_artwork_from_model(m) for m in result.scalars().all()]


class TagRepository(ITagRepository):
    """SQLAlchemy implementation of Tag repository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_or_create(self, name: str) -> tuple[Tag, bool]:
        """Get a tag by name or create it lazily."""
        stmt = select(TagModel).where(TagModel.name == name)
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()
        if model:
            tag = Tag(
                id=model.id,
                name=model.name,
                created_at=ensure_utc_aware(model.created_at),
            )
            return tag, False

        tag = Tag(name=name)
        self.session.add(TagModel(id=tag.id, name=tag.name, created_at=tag.created_at))
        await self.session.flush()
        return tag, True

    async def get_tag_names_for_artworks(
        self, artwork_ids: list[str]
    ) -> dict[str, set[str]]:
        """Map artwork id → set of linked tag names."""
        if not artwork_ids:
            return {}
        stmt = (
            select(ArtworkTagModel.artwork_id, TagModel.name)
            .join(TagModel, TagModel.id == ArtworkTagModel.tag_id)
            .where(ArtworkTagModel.artwork_id.in_(artwork_ids))
        )
        result = await self.session.execute(stmt)
        links: dict[str, set[str]] = {}
        for artwork_id, tag_name in result.all():
            links.setdefault(artwork_id, set()).add(tag_name)
        return links

    async def link(self, artwork_id: str, tag_id: str) -> None:
        """Link a tag to an artwork."""
        self.session.add(ArtworkTagModel(artwork_id=artwork_id, tag_id=tag_id))


class AppSettingsRepository(IAppSettingsRepository):
    """SQLAlchemy implementation of the key/value settings store."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, key: str) -> str | None:
        model = await self.session.get(AppSettingsModel, key)
        return model.value if model else None

    async def upsert(self, key: str, value: str, value_type: str = "string") -> None:
        """Create or overwrite a setting (last write wins)."""
        model = await self.session.get(AppSettingsModel, key)
        if model:
            model.value = value
            model.value_type = value_type
        else:
            self.session.add(AppSettingsModel(key=key, value=value, value_type=value_type))
        await self.session.flush()

    async def list_all(self) -> dict[str, str]:
        result = await self.session.execute(select(AppSettingsModel))
        return {m.key: m.value or "" for m in result.scalars().all()}


class LibraryScanRepository:
    """Scan history rows (one per finished scan)."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(self, model: LibraryScanModel) -> None:
        self.session.add(model)

    async def list_recent(self, limit: int = 20) -> list[LibraryScanModel]:
        stmt = (
            select(LibraryScanModel)
            .order_by(LibraryScanModel.started_at.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
