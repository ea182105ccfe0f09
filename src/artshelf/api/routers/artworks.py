"""Artwork query endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from artshelf.api.dependencies import get_db_session
from artshelf.domain.entities import Artwork
from artshelf.domain.value_objects import MediaType
from artshelf.infrastructure.persistence.repositories import (
    ArtworkRepository,
    TagRepository,
)

router = APIRouter()


class ArtworkResponse(BaseModel):
    id: str
    artist_id: str
    file_path: str
    title: str
    media_type: MediaType
    order_index: int
    size: int | None = None
    tags: list[str] = []
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, artwork: Artwork, tags: set[str]) -> "ArtworkResponse":
        return cls(
            id=artwork.id,
            artist_id=artwork.artist_id,
            file_path=artwork.file_path,
            title=artwork.title,
            media_type=artwork.media_type,
            order_index=artwork.order_index,
            size=artwork.size,
            tags=sorted(tags),
            created_at=artwork.created_at,
            updated_at=artwork.updated_at,
        )


class ArtworkListResponse(BaseModel):
    items: list[ArtworkResponse]
    limit: int
    offset: int


@router.get("", response_model=ArtworkListResponse)
async def list_artworks(
    artist_id: str | None = Query(None, description="Only artworks of this artist"),
    media_type: MediaType = Query(MediaType.ALL, description="all, image or video"),
    tag: str | None = Query(None, description="Only artworks linked to this tag"),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_db_session),
) -> ArtworkListResponse:
    """List artworks ordered by artist, then order index."""
    artworks = await ArtworkRepository(session).list_filtered(
        artist_id=artist_id,
        media_type=media_type,
        tag=tag,
        limit=limit,
        offset=offset,
    )
    tag_names = await TagRepository(session).get_tag_names_for_artworks(
        [a.id for a in artworks]
    )
    return ArtworkListResponse(
        items=[ArtworkResponse.from_entity(a, tag_names.get(a.id, set())) for a in artworks],
        limit=limit,
        offset=offset,
    )
