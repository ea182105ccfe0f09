"""SQLAlchemy ORM models for artshelf."""

import uuid
from datetime import UTC, datetime

import sqlalchemy as sa
from sqlalchemy import (
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


# Hey future me, utc_now() ensures ALL timestamps are UTC! Never use datetime.now() without
# timezone - naive datetimes cause bugs as soon as two machines disagree about local time.
def utc_now() -> datetime:
    """Get current UTC time."""
    return datetime.now(UTC)


# Hey future me - SQLite doesn't preserve timezone info! Datetimes come back naive. Use this
# before comparing DB datetimes with datetime.now(UTC).
def ensure_utc_aware(dt: datetime) -> datetime:
    """Ensure datetime is UTC-aware, assuming naive datetimes are UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


# Listen up, directory_key is the scanner's identity key (raw folder name) and is UNIQUE.
# cascade="all, delete-orphan" on artworks: deleting an artist wipes its artworks. The scanner
# itself never deletes anything - this only matters for admin actions.
class ArtistModel(Base):
    """SQLAlchemy model for Artist entity."""

    __tablename__ = "artists"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    directory_key: Mapped[str] = mapped_column(
        String(512), nullable=False, unique=True, index=True
    )
    username: Mapped[str | None] = mapped_column(String(255), nullable=True)
    user_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    avatar: Mapped[str | None] = mapped_column(String(512), nullable=True)
    background_img: Mapped[str | None] = mapped_column(String(512), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )

    artworks: Mapped[list["ArtworkModel"]] = relationship(
        "ArtworkModel", back_populates="artist", cascade="all, delete-orphan"
    )


class ArtworkModel(Base):
    """SQLAlchemy model for Artwork entity."""

    __tablename__ = "artworks"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    artist_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("artists.id", ondelete="CASCADE"), nullable=False
    )
    file_path: Mapped[str] = mapped_column(String(1024), nullable=False)
    title: Mapped[str] = mapped_column(String(512), nullable=False, default="")
    # 'image' or 'video' - never 'all'
    media_type: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    size: Mapped[int | None] = mapped_column(sa.BigInteger, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )

    artist: Mapped["ArtistModel"] = relationship("ArtistModel", back_populates="artworks")
    tag_links: Mapped[list["ArtworkTagModel"]] = relationship(
        "ArtworkTagModel", back_populates="artwork", cascade="all, delete-orphan"
    )

    __table_args__ = (
        UniqueConstraint("artist_id", "file_path", name="uq_artworks_artist_file_path"),
        Index("ix_artworks_artist_order", "artist_id", "order_index"),
    )


# Hey future me - tags are created lazily the first time a sidecar mentions them and are NEVER
# auto-deleted, even when no artwork references them anymore.
class TagModel(Base):
    """SQLAlchemy model for Tag entity."""

    __tablename__ = "tags"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=utc_now, nullable=False
    )

    artwork_links: Mapped[list["ArtworkTagModel"]] = relationship(
        "ArtworkTagModel", back_populates="tag", cascade="all, delete-orphan"
    )


class ArtworkTagModel(Base):
    """Association between Artwork and Tag."""

    __tablename__ = "artwork_tags"

    artwork_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("artworks.id", ondelete="CASCADE"), primary_key=True
    )
    tag_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=utc_now, nullable=False
    )

    artwork: Mapped["ArtworkModel"] = relationship(
        "ArtworkModel", back_populates="tag_links"
    )
    tag: Mapped["TagModel"] = relationship("TagModel", back_populates="artwork_links")

    __table_args__ = (Index("ix_artwork_tags_tag_id", "tag_id"),)


class LibraryScanModel(Base):
    """SQLAlchemy model for library scan history."""

    __tablename__ = "library_scans"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    status: Mapped[str] = mapped_column(String(50), nullable=False)
    scan_path: Mapped[str] = mapped_column(String(1024), nullable=False)
    artists_scanned: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    artists_created: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    artists_failed: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    artworks_scanned: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    artworks_created: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    artworks_updated: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    artworks_skipped: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    artworks_missing: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    started_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        sa.DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=utc_now, nullable=False
    )

    __table_args__ = (Index("ix_library_scans_started_at", "started_at"),)


# =============================================================================
# APP SETTINGS TABLE
# =============================================================================
# Key-value store for runtime configuration that can change without restart.
# value_type hints how the service layer parses the string:
# - 'string': Plain text
# - 'boolean': 'true'/'false'
# - 'integer': Numeric strings
# =============================================================================


class AppSettingsModel(Base):
    """Dynamic application settings stored in DB.

    Example keys:
    - 'scanPath' (string) - library root the scanner walks
    """

    __tablename__ = "app_settings"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    value: Mapped[str | None] = mapped_column(Text, nullable=True)
    value_type: Mapped[str] = mapped_column(
        String(20), nullable=False, server_default="string", default="string"
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
