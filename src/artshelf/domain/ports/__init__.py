"""Domain ports (interfaces) for dependency inversion."""

from abc import ABC, abstractmethod

from artshelf.domain.entities import Artist, Artwork, Tag
from artshelf.domain.value_objects import MediaType


# Hey future me, these are PORTS (Hexagonal Architecture)! The scanner only talks to these
# interfaces; the SQLAlchemy implementations live in infrastructure/persistence. Repos NEVER
# commit - the caller owns the transaction (one session_scope per artist in the scanner).
class IArtistRepository(ABC):
    """Repository interface for Artist entities."""

    @abstractmethod
    async def add(self, artist: Artist) -> None:
        """Add a new artist."""
        pass

    @abstractmethod
    async def get_by_id(self, artist_id: str) -> Artist | None:
        """Get an artist by ID."""
        pass

    @abstractmethod
    async def get_by_directory_key(self, directory_key: str) -> Artist | None:
        """Get an artist by the directory name it was discovered under."""
        pass

    @abstractmethod
    async def list_all(self, limit: int = 100, offset: int = 0) -> list[Artist]:
        """List artists ordered by name."""
        pass


class IArtworkRepository(ABC):
    """Repository interface for Artwork entities."""

    @abstractmethod
    async def add(self, artwork: Artwork) -> None:
        """Add a new artwork."""
        pass

    @abstractmethod
    async def update(self, artwork: Artwork) -> None:
        """Update media type, order index and size of an existing artwork."""
        pass

    @abstractmethod
    async def get_by_artist(self, artist_id: str) -> list[Artwork]:
        """Get all artworks of an artist, ordered by order_index."""
        pass

    @abstractmethod
    async def list_filtered(
        self,
        artist_id: str | None = None,
        media_type: MediaType = MediaType.ALL,
        tag: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Artwork]:
        """List artworks with optional artist/media type/tag filters."""
        pass


class ITagRepository(ABC):
    """Repository interface for Tag entities and artwork links."""

    @abstractmethod
    async def get_or_create(self, name: str) -> tuple[Tag, bool]:
        """Get a tag by name or create it. Returns (tag, created)."""
        pass

    @abstractmethod
    async def get_tag_names_for_artworks(
        self, artwork_ids: list[str]
    ) -> dict[str, set[str]]:
        """Map artwork id → set of tag names already linked."""
        pass

    @abstractmethod
    async def link(self, artwork_id: str, tag_id: str) -> None:
        """Link a tag to an artwork (caller checks for existing links)."""
        pass


class IAppSettingsRepository(ABC):
    """Repository interface for the key/value settings table."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        pass

    @abstractmethod
    async def upsert(self, key: str, value: str, value_type: str = "string") -> None:
        pass

    @abstractmethod
    async def list_all(self) -> dict[str, str]:
        pass


__all__ = [
    "IArtistRepository",
    "IArtworkRepository",
    "ITagRepository",
    "IAppSettingsRepository",
]
