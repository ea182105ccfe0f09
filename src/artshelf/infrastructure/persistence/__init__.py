"""Infrastructure persistence layer."""

from .database import Database
from .models import (
    AppSettingsModel,
    ArtistModel,
    ArtworkModel,
    ArtworkTagModel,
    Base,
    LibraryScanModel,
    TagModel,
)
from .repositories import (
    AppSettingsRepository,
    ArtistRepository,
    ArtworkRepository,
    LibraryScanRepository,
    TagRepository,
)

__all__ = [
    # Database
    "Database",
    "Base",
    # Models
    "AppSettingsModel",
    "ArtistModel",
    "ArtworkModel",
    "ArtworkTagModel",
    "LibraryScanModel",
    "TagModel",
    # Repositories
    "AppSettingsRepository",
    "ArtistRepository",
    "ArtworkRepository",
    "LibraryScanRepository",
    "TagRepository",
]
