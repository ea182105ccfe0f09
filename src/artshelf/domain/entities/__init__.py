"""Domain entities."""

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime

from artshelf.domain.value_objects import MediaType


def _new_id() -> str:
    return str(uuid.uuid4())


def _utc_now() -> datetime:
    return datetime.now(UTC)


# Yo, Artist is the DOMAIN ENTITY (not DB model)! directory_key is the raw folder name under the
# scan path and is the identity the scanner matches on. Renaming the folder on disk = a NEW artist
# (we don't try to guess renames). user_id is the id embedded in the folder name, if any.
@dataclass
class Artist:
    """Artist entity - one per top-level directory of the scan path."""

    name: str
    directory_key: str
    id: str = field(default_factory=_new_id)
    username: str | None = None
    user_id: str | None = None
    bio: str | None = None
    avatar: str | None = None
    background_img: str | None = None
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Artist name cannot be empty")
        if not self.directory_key:
            raise ValueError("Artist directory_key cannot be empty")


# Hey future me - file_path is RELATIVE to the scan path ("ArtistDir/file.jpg", POSIX slashes) so
# the library survives being mounted somewhere else. (artist_id, file_path) is unique in the DB.
# media_type is only ever IMAGE or VIDEO here - ALL is a query sentinel!
@dataclass
class Artwork:
    """Artwork entity - one media file owned by an Artist."""

    artist_id: str
    file_path: str
    media_type: MediaType
    title: str = ""
    order_index: int = 0
    size: int | None = None
    id: str = field(default_factory=_new_id)
    tags: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        if self.media_type is MediaType.ALL:
            raise ValueError("MediaType.ALL is a query filter, not an artwork type")
        if self.order_index < 0:
            raise ValueError(f"order_index must be non-negative, got {self.order_index}")

    def needs_update(self, media_type: MediaType, order_index: int) -> bool:
        """Check whether rescanned values differ from what is stored."""
        return self.media_type != media_type or self.order_index != order_index


@dataclass
class Tag:
    """Name-keyed label shared by many artworks."""

    name: str
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        self.name = self.name.strip()
        if not self.name:
            raise ValueError("Tag name cannot be empty")


__all__ = ["Artist", "Artwork", "Tag"]
