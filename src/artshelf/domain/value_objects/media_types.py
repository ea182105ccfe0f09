"""Media type classification by file extension.

Usage:
    from artshelf.domain.value_objects.media_types import MediaCategory, classify

    classify("IMG.PNG")     # MediaCategory.IMAGE
    classify("clip.mp4")    # MediaCategory.VIDEO
    classify("readme.txt")  # MediaCategory.UNRECOGNIZED
"""

from enum import Enum
from pathlib import PurePath

# Supported extensions (lowercase, with leading dot)
IMAGE_EXTENSIONS = frozenset(
    {
        ".jpg",
        ".jpeg",
        ".png",
        ".gif",
        ".webp",
        ".bmp",
        ".tiff",
        ".tif",
    }
)

VIDEO_EXTENSIONS = frozenset(
    {
        ".mp4",
        ".webm",
        ".mov",
        ".avi",
        ".wmv",
        ".flv",
        ".mkv",
        ".m4v",
    }
)


# Hey future me - MediaType is what gets STORED and FILTERED on. ALL is a query sentinel only,
# it must never end up in the artworks table. Use to_filter() at the query boundary!
class MediaType(str, Enum):
    """Media type of an artwork, plus the "all" query sentinel."""

    ALL = "all"
    IMAGE = "image"
    VIDEO = "video"

    def to_filter(self) -> "MediaType | None":
        """Translate to a column filter value (None means no restriction)."""
        if self is MediaType.ALL:
            return None
        return self


class MediaCategory(str, Enum):
    """Result of classifying a file on disk."""

    IMAGE = "image"
    VIDEO = "video"
    UNRECOGNIZED = "unrecognized"

    @property
    def is_media(self) -> bool:
        return self is not MediaCategory.UNRECOGNIZED

    @property
    def media_type(self) -> MediaType | None:
        """Storable MediaType for this category (None when unrecognized)."""
        if self is MediaCategory.IMAGE:
            return MediaType.IMAGE
        if self is MediaCategory.VIDEO:
            return MediaType.VIDEO
        return None


def classify(name: str | PurePath) -> MediaCategory:
    """Classify a file by extension (case-insensitive)."""
    suffix = PurePath(str(name)).suffix.lower()
    if suffix in IMAGE_EXTENSIONS:
        return MediaCategory.IMAGE
    if suffix in VIDEO_EXTENSIONS:
        return MediaCategory.VIDEO
    return MediaCategory.UNRECOGNIZED
