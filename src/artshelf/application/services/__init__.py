"""Application services."""

from artshelf.application.services.app_settings_service import (
    SCAN_PATH_KEY,
    AppSettingsService,
)
from artshelf.application.services.directory_walker import (
    ArtistDirectory,
    LibraryWalker,
    ScannedEntry,
)

# Hey future me - LibraryScannerService is THE reconciliation engine (disk → DB).
# Everything else in this package exists to feed it or to expose its results.
from artshelf.application.services.library_scanner_service import (
    ArtistOutcome,
    LibraryScannerService,
    ScanConfig,
    ScanSummary,
)

__all__ = [
    "SCAN_PATH_KEY",
    "AppSettingsService",
    "ArtistDirectory",
    "LibraryWalker",
    "ScannedEntry",
    "ArtistOutcome",
    "LibraryScannerService",
    "ScanConfig",
    "ScanSummary",
]
