"""Domain value objects and pure parsing helpers."""

from .filename_order import extract_order
from .folder_parsing import ParsedArtistFolder, is_hidden_name, parse_artist_folder
from .media_types import (
    IMAGE_EXTENSIONS,
    VIDEO_EXTENSIONS,
    MediaCategory,
    MediaType,
    classify,
)
from .sidecar import (
    SidecarMetadata,
    belongs_to_artwork,
    is_sidecar_file,
    parse_sidecar_text,
    sidecar_artwork_id,
)

__all__ = [
    "extract_order",
    "ParsedArtistFolder",
    "is_hidden_name",
    "parse_artist_folder",
    "IMAGE_EXTENSIONS",
    "VIDEO_EXTENSIONS",
    "MediaCategory",
    "MediaType",
    "classify",
    "SidecarMetadata",
    "belongs_to_artwork",
    "is_sidecar_file",
    "parse_sidecar_text",
    "sidecar_artwork_id",
]
