"""ArtShelf - artist/artwork media library with filesystem reconciliation."""

__version__ = "0.1.0"
