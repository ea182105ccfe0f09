# Hey future me - this is the LOW-LEVEL filesystem part of the library scan. It knows nothing
# about the database. Layout is exactly two levels:
#
#   <scan path>/<artist dir>/<artwork file>
#
# Anything deeper (folders inside an artist folder) is ignored on purpose - see DESIGN.md.
"""Two-level directory walker for the artwork library."""

import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from artshelf.domain.exceptions import (
    ArtistDirectoryUnreadableError,
    ScanPathUnavailableError,
)
from artshelf.domain.value_objects import is_hidden_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArtistDirectory:
    """Immediate subdirectory of the scan root."""

    name: str
    path: Path


@dataclass(frozen=True)
class ScannedEntry:
    """One file directly inside an artist directory."""

    artist_dir: str
    file_name: str
    full_path: Path
    size: int | None = None

    @property
    def relative_path(self) -> str:
        """Stable path relative to the scan root, always with forward slashes."""
        return f"{self.artist_dir}/{self.file_name}"


@dataclass
class LibraryWalker:
    """Lazy, restartable walker over ``root/<artist>/<file>``.

    Every ``iter()`` starts a fresh traversal. Nothing is materialized beyond one
    artist directory's file list at a time.
    """

    root: Path | None
    include_hidden: bool = False
    skipped_directories: list[dict[str, str]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.root is not None and not isinstance(self.root, Path):
            self.root = Path(self.root)

    # =========================================================================
    # ROOT CHECK
    # =========================================================================

    def check_available(self) -> None:
        """Verify the root can be walked.

        Raises:
            ScanPathUnavailableError: Root unset, missing, not a directory, or unreadable
        """
        if self.root is None or not str(self.root).strip():
            raise ScanPathUnavailableError(None, "scan path is not configured")

        root_str = str(self.root)
        if not self.root.exists():
            raise ScanPathUnavailableError(root_str, "path does not exist")
        if not self.root.is_dir():
            raise ScanPathUnavailableError(root_str, "path is not a directory")
        if not os.access(self.root, os.R_OK | os.X_OK):
            raise ScanPathUnavailableError(root_str, "permission denied")

    # =========================================================================
    # TRAVERSAL
    # =========================================================================

    def iter_artist_directories(self) -> Iterator[ArtistDirectory]:
        """Yield immediate subdirectories of the root, sorted by name.

        A missing or unreadable root yields nothing (logged, never raised).
        """
        if self.root is None:
            return

        try:
            with os.scandir(self.root) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            logger.warning("Cannot list scan path %s: %s", self.root, e)
            return

        for entry in entries:
            if not self.include_hidden and is_hidden_name(entry.name):
                continue
            try:
                is_dir = entry.is_dir(follow_symlinks=True)
            except OSError as e:
                logger.warning("Cannot stat %s: %s", entry.path, e)
                continue
            if is_dir:
                yield ArtistDirectory(name=entry.name, path=Path(entry.path))

    def list_entries(self, artist: ArtistDirectory) -> list[ScannedEntry]:
        """List regular files directly inside an artist directory, sorted by name.

        Raises:
            ArtistDirectoryUnreadableError: If the directory can't be listed
        """
        try:
            with os.scandir(artist.path) as it:
                dir_entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            raise ArtistDirectoryUnreadableError(str(artist.path), str(e)) from e

        entries: list[ScannedEntry] = []
        for entry in dir_entries:
            if not self.include_hidden and is_hidden_name(entry.name):
                continue
            try:
                if entry.is_dir(follow_symlinks=True):
                    logger.debug("Ignoring nested directory %s", entry.path)
                    continue
                if not entry.is_file(follow_symlinks=True):
                    continue
                size = entry.stat(follow_symlinks=True).st_size
            except OSError as e:
                logger.warning("Cannot stat %s: %s", entry.path, e)
                continue
            entries.append(
                ScannedEntry(
                    artist_dir=artist.name,
                    file_name=entry.name,
                    full_path=Path(entry.path),
                    size=size,
                )
            )
        return entries

    def record_skipped(self, artist: ArtistDirectory, reason: str) -> None:
        """Remember an artist directory that could not be read."""
        self.skipped_directories.append({"path": str(artist.path), "reason": reason})

    def __iter__(self) -> Iterator[ScannedEntry]:
        """Yield every (artist_dir, file_name, full_path) entry under the root."""
        for artist in self.iter_artist_directories():
            try:
                entries = self.list_entries(artist)
            except ArtistDirectoryUnreadableError as e:
                logger.warning("Skipping artist directory: %s", e.message)
                self.record_skipped(artist, e.reason)
                continue
            yield from entries
