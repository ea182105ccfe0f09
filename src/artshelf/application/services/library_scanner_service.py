# Hey future me - this service reconciles the artwork folders on disk with the DB!
# Key rules:
# 1. ONE TRANSACTION PER ARTIST - a failing artist is rolled back alone, everybody else stays committed
# 2. IDEMPOTENT - rescanning an unchanged tree does ZERO writes
# 3. NEVER DELETES - artworks that vanished from disk are only reported as "missing"
# 4. NEVER RAISES to the caller - everything ends up in the ScanSummary
"""Library scanner service: walk the scan path and reconcile artists/artworks."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from pathlib import Path, PurePath
from typing import Any

from artshelf.application.services.app_settings_service import AppSettingsService
from artshelf.application.services.directory_walker import (
    ArtistDirectory,
    LibraryWalker,
    ScannedEntry,
)
from artshelf.config import Settings
from artshelf.domain.entities import Artist, Artwork
from artshelf.domain.exceptions import (
    ArtistDirectoryUnreadableError,
    PersistenceFailure,
    ScanPathUnavailableError,
)
from artshelf.domain.value_objects import (
    belongs_to_artwork,
    classify,
    extract_order,
    parse_artist_folder,
    parse_sidecar_text,
    sidecar_artwork_id,
)
from artshelf.infrastructure.observability import set_correlation_id
from artshelf.infrastructure.persistence.database import Database
from artshelf.infrastructure.persistence.models import LibraryScanModel
from artshelf.infrastructure.persistence.repositories import (
    ArtistRepository,
    ArtworkRepository,
    LibraryScanRepository,
    TagRepository,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, "ScanSummary"], Awaitable[None]]

# SQLite INTEGER is a signed 64-bit value. A file named "page-99999999999999999999.jpg" would
# otherwise blow up the whole artist batch with OverflowError.
MAX_ORDER_INDEX = 2**63 - 1


@dataclass(frozen=True)
class ScanConfig:
    """Everything a scan needs, resolved ONCE at scan start."""

    scan_path: str | None
    max_concurrency: int = 1
    include_hidden: bool = False
    missing_files_report_limit: int = 200

    def __post_init__(self) -> None:
        if self.max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {self.max_concurrency}")
        if self.missing_files_report_limit < 0:
            raise ValueError("missing_files_report_limit must not be negative")


@dataclass
class ArtistOutcome:
    """Counters for one committed artist batch."""

    artist: str
    artist_created: bool = False
    artworks_scanned: int = 0
    artworks_created: int = 0
    artworks_updated: int = 0
    artworks_unchanged: int = 0
    artworks_skipped: int = 0
    tags_linked: int = 0
    missing_files: list[str] = field(default_factory=list)


@dataclass
class ScanSummary:
    """Structured result of one scan run."""

    scan_path: str | None = None
    skipped: bool = False
    cancelled: bool = False
    error: str | None = None
    artists_scanned: int = 0
    artists_created: int = 0
    artists_unchanged: int = 0
    artworks_scanned: int = 0
    artworks_created: int = 0
    artworks_updated: int = 0
    artworks_unchanged: int = 0
    artworks_skipped: int = 0
    artworks_missing: int = 0
    tags_linked: int = 0
    missing_files: list[str] = field(default_factory=list)
    failed_artists: list[dict[str, str]] = field(default_factory=list)
    skipped_directories: list[dict[str, str]] = field(default_factory=list)
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    completed_at: datetime | None = None

    @property
    def writes(self) -> int:
        """Number of rows inserted or updated (0 on an idempotent rescan)."""
        return (
            self.artists_created
            + self.artworks_created
            + self.artworks_updated
            + self.tags_linked
        )

    @property
    def status(self) -> str:
        if self.error and self.skipped:
            return "failed"
        if self.skipped:
            return "skipped"
        if self.cancelled:
            return "cancelled"
        if self.failed_artists:
            return "completed_with_errors"
        return "completed"

    def add_outcome(self, outcome: ArtistOutcome, report_limit: int) -> None:
        self.artists_scanned += 1
        if outcome.artist_created:
            self.artists_created += 1
        else:
            self.artists_unchanged += 1
        self.artworks_scanned += outcome.artworks_scanned
        self.artworks_created += outcome.artworks_created
        self.artworks_updated += outcome.artworks_updated
        self.artworks_unchanged += outcome.artworks_unchanged
        self.artworks_skipped += outcome.artworks_skipped
        self.artworks_missing += len(outcome.missing_files)
        self.tags_linked += outcome.tags_linked
        room = report_limit - len(self.missing_files)
        if room > 0:
            self.missing_files.extend(outcome.missing_files[:room])

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["started_at"] = self.started_at.isoformat()
        data["completed_at"] = (
            self.completed_at.isoformat() if self.completed_at else None
        )
        data["status"] = self.status
        data["writes"] = self.writes
        return data


class LibraryScannerService:
    """Reconcile the artwork library on disk with the database.

    This service handles:
    1. Reading the scan path ONCE (AppSettingsService) into a ScanConfig
    2. Walking <scan path>/<artist>/<file> with LibraryWalker
    3. Classifying files (image/video/unrecognized) and deriving order_index
    4. Upserting artists and artworks, one transaction per artist
    5. Linking tags from ``{id}-meta.txt`` sidecars
    6. Writing a library_scans history row

    Call cancel() from another task to stop after the in-flight artist batches finish.
    """

    def __init__(self, db: Database, settings: Settings) -> None:
        """Initialize scanner service.

        Args:
            db: Database (each artist batch gets its own session_scope)
            settings: Application settings (scanner tuning + scan path fallback)
        """
        self.db = db
        self.settings = settings
        self._cancel_event = asyncio.Event()
        # Read by GET /library/scan/status while a scan runs
        self.scanning = False
        self.last_progress_message: str | None = None

    # =========================================================================
    # CANCELLATION
    # =========================================================================

    def cancel(self) -> None:
        """Request cooperative cancellation at the next artist boundary."""
        self._cancel_event.set()
        if self.scanning:
            self.last_progress_message = "Cancelling after the current artist"

    @property
    def is_cancelled(self) -> bool:
        return self._cancel_event.is_set()

    # =========================================================================
    # PROGRESS
    # =========================================================================

    async def _report_progress(
        self,
        processed: int,
        summary: ScanSummary,
        artist: str,
        progress_callback: ProgressCallback | None,
    ) -> None:
        """Update the status message and notify the caller's callback.

        Hey future me - the callback is foreign code. If it raises we log and carry on,
        otherwise the exception would tear down asyncio.gather and abandon in-flight artists.
        """
        self.last_progress_message = f"Processed {processed} artists (last: {artist})"
        if progress_callback is None:
            return
        try:
            await progress_callback(processed, summary)
        except Exception as e:
            logger.warning("Scan progress callback failed: %s", e, exc_info=True)

    # =========================================================================
    # MAIN SCAN METHODS
    # =========================================================================

    async def load_config(self) -> ScanConfig:
        """Resolve the scan configuration (scan path read once from settings)."""
        async with self.db.session_scope() as session:
            scan_path = await AppSettingsService(session, self.settings).get_scan_path()
        scanner = self.settings.scanner
        return ScanConfig(
            scan_path=scan_path,
            max_concurrency=scanner.max_concurrency,
            include_hidden=scanner.include_hidden,
            missing_files_report_limit=scanner.missing_files_report_limit,
        )

    async def run_scan(
        self,
        config: ScanConfig | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> ScanSummary:
        """Scan the library and reconcile it with the database.

        This is the MAIN entry point! Admin API and background jobs call this.

        Args:
            config: Pre-resolved config. None = read from settings now.
            progress_callback: Awaited after every artist batch with
                (artists_processed, summary)

        Returns:
            ScanSummary - always, even if artists failed or the path is gone
        """
        set_correlation_id()
        self._cancel_event.clear()
        self.scanning = True
        self.last_progress_message = "Starting library scan"
        try:
            return await self._run_scan(config, progress_callback)
        finally:
            self.scanning = False
            self.last_progress_message = None

    async def _run_scan(
        self,
        config: ScanConfig | None,
        progress_callback: ProgressCallback | None,
    ) -> ScanSummary:
        if config is None:
            try:
                config = await self.load_config()
            except Exception as e:
                logger.error("Could not load scan configuration: %s", e, exc_info=True)
                summary = ScanSummary(skipped=True, error=f"Configuration unavailable: {e}")
                summary.completed_at = datetime.now(UTC)
                return summary

        summary = ScanSummary(scan_path=config.scan_path)

        if not config.scan_path:
            logger.info("Scan path not configured, skipping library scan")
            summary.skipped = True
            summary.completed_at = datetime.now(UTC)
            return summary

        walker = LibraryWalker(Path(config.scan_path), include_hidden=config.include_hidden)
        try:
            await asyncio.to_thread(walker.check_available)
        except ScanPathUnavailableError as e:
            logger.warning("Library scan skipped: %s", e.message)
            summary.skipped = True
            summary.error = e.message
            summary.completed_at = datetime.now(UTC)
            return summary

        logger.info(
            "Scanning library at %s (concurrency=%d)",
            config.scan_path,
            config.max_concurrency,
        )

        await self._scan_artists(walker, config, summary, progress_callback)

        summary.skipped_directories = list(walker.skipped_directories)
        summary.completed_at = datetime.now(UTC)

        logger.info(
            "Library scan %s: %d artists (%d new), %d artworks "
            "(%d new, %d updated, %d unchanged, %d skipped, %d missing), %d failed artists",
            summary.status,
            summary.artists_scanned,
            summary.artists_created,
            summary.artworks_scanned,
            summary.artworks_created,
            summary.artworks_updated,
            summary.artworks_unchanged,
            summary.artworks_skipped,
            summary.artworks_missing,
            len(summary.failed_artists),
        )

        await self._record_history(summary)
        return summary

    async def _scan_artists(
        self,
        walker: LibraryWalker,
        config: ScanConfig,
        summary: ScanSummary,
        progress_callback: ProgressCallback | None,
    ) -> None:
        """Schedule one task per artist directory, at most max_concurrency at a time.

        Hey future me - the semaphore is acquired BEFORE the next directory is pulled from the
        walker, so with max_concurrency=1 this is a plain sequential loop and the cancel check
        runs between every artist. Each artist directory is yielded exactly once, so no two
        tasks ever touch the same artist.
        """
        semaphore = asyncio.Semaphore(config.max_concurrency)
        tasks: set[asyncio.Task[None]] = set()
        processed = 0
        artists = walker.iter_artist_directories()

        async def _run(artist: ArtistDirectory) -> None:
            nonlocal processed
            try:
                await self._process_artist(walker, artist, config, summary)
            finally:
                semaphore.release()
            processed += 1
            await self._report_progress(processed, summary, artist.name, progress_callback)

        while True:
            await semaphore.acquire()
            if self.is_cancelled:
                semaphore.release()
                summary.cancelled = True
                logger.info("Library scan cancelled after %d artists", processed)
                break

            artist = await asyncio.to_thread(next, artists, None)
            if artist is None:
                semaphore.release()
                break

            task = asyncio.create_task(_run(artist))
            tasks.add(task)
            task.add_done_callback(tasks.discard)

        if tasks:
            await asyncio.gather(*tasks)

    async def _process_artist(
        self,
        walker: LibraryWalker,
        artist: ArtistDirectory,
        config: ScanConfig,
        summary: ScanSummary,
    ) -> None:
        """List, reconcile and account for one artist. Never raises."""
        try:
            entries = await asyncio.to_thread(walker.list_entries, artist)
        except ArtistDirectoryUnreadableError as e:
            logger.warning("Skipping artist directory: %s", e.message)
            walker.record_skipped(artist, e.reason)
            return

        sidecar_tags = await asyncio.to_thread(self._read_sidecar_tags, entries)

        try:
            outcome = await self._reconcile_artist(artist, entries, sidecar_tags)
        except Exception as e:
            failure = PersistenceFailure(artist.name, e)
            logger.warning("%s (rolled back)", failure.message, exc_info=True)
            summary.failed_artists.append(failure.to_dict())
            return

        summary.add_outcome(outcome, config.missing_files_report_limit)

    # =========================================================================
    # RECONCILIATION (one transaction per artist)
    # =========================================================================

    async def _reconcile_artist(
        self,
        artist_dir: ArtistDirectory,
        entries: list[ScannedEntry],
        sidecar_tags: dict[str, list[str]],
    ) -> ArtistOutcome:
        """Upsert the artist and its artworks inside ONE transaction."""
        outcome = ArtistOutcome(artist=artist_dir.name)

        async with self.db.session_scope() as session:
            artist_repo = ArtistRepository(session)
            artwork_repo = ArtworkRepository(session)
            tag_repo = TagRepository(session)

            artist = await artist_repo.get_by_directory_key(artist_dir.name)
            if artist is None:
                parsed = parse_artist_folder(artist_dir.name)
                artist = Artist(
                    name=parsed.name,
                    directory_key=artist_dir.name,
                    username=parsed.username,
                    user_id=parsed.user_id,
                )
                await artist_repo.add(artist)
                outcome.artist_created = True
                logger.debug("New artist: %s (%s)", artist.name, artist_dir.name)

            existing = {a.file_path: a for a in await artwork_repo.get_by_artist(artist.id)}
            seen: set[str] = set()
            by_file_name: dict[str, Artwork] = {}

            for entry in entries:
                if sidecar_artwork_id(entry.file_name) is not None:
                    continue

                media_type = classify(entry.file_name).media_type
                if media_type is None:
                    outcome.artworks_skipped += 1
                    continue

                outcome.artworks_scanned += 1
                order_index = self._clamp_order(
                    extract_order(PurePath(entry.file_name).stem), entry.relative_path
                )
                seen.add(entry.relative_path)
                current = existing.get(entry.relative_path)

                if current is None:
                    current = Artwork(
                        artist_id=artist.id,
                        file_path=entry.relative_path,
                        title=PurePath(entry.file_name).stem,
                        media_type=media_type,
                        order_index=order_index,
                        size=entry.size,
                    )
                    await artwork_repo.add(current)
                    outcome.artworks_created += 1
                elif current.needs_update(media_type, order_index):
                    current.media_type = media_type
                    current.order_index = order_index
                    current.size = entry.size
                    await artwork_repo.update(current)
                    outcome.artworks_updated += 1
                else:
                    outcome.artworks_unchanged += 1

                by_file_name[entry.file_name] = current

            outcome.missing_files = sorted(set(existing) - seen)
            if outcome.missing_files:
                logger.info(
                    "Artist %s: %d artworks missing on disk (kept in library)",
                    artist_dir.name,
                    len(outcome.missing_files),
                )

            if sidecar_tags and by_file_name:
                outcome.tags_linked = await self._link_tags(
                    tag_repo, by_file_name, sidecar_tags
                )

        return outcome

    async def _link_tags(
        self,
        tag_repo: TagRepository,
        by_file_name: dict[str, Artwork],
        sidecar_tags: dict[str, list[str]],
    ) -> int:
        """Attach sidecar tags to matching artworks. Existing links are left alone."""
        linked_names = await tag_repo.get_tag_names_for_artworks(
            [a.id for a in by_file_name.values()]
        )
        tag_ids: dict[str, str] = {}
        linked = 0

        for artwork_key, tag_names in sidecar_tags.items():
            for file_name, artwork in by_file_name.items():
                if not belongs_to_artwork(file_name, artwork_key):
                    continue
                have = linked_names.setdefault(artwork.id, set())
                for name in tag_names:
                    if name in have:
                        continue
                    if name not in tag_ids:
                        tag, _created = await tag_repo.get_or_create(name)
                        tag_ids[name] = tag.id
                    await tag_repo.link(artwork.id, tag_ids[name])
                    have.add(name)
                    linked += 1
        return linked

    @staticmethod
    def _clamp_order(order_index: int, relative_path: str) -> int:
        if order_index > MAX_ORDER_INDEX:
            logger.warning(
                "Order number in %s exceeds %d, storing the maximum instead",
                relative_path,
                MAX_ORDER_INDEX,
            )
            return MAX_ORDER_INDEX
        return order_index

    @staticmethod
    def _read_sidecar_tags(entries: list[ScannedEntry]) -> dict[str, list[str]]:
        """Read ``{id}-meta.txt`` files of one artist → {artwork id: tags}."""
        tags: dict[str, list[str]] = {}
        for entry in entries:
            artwork_key = sidecar_artwork_id(entry.file_name)
            if artwork_key is None:
                continue
            try:
                content = entry.full_path.read_text(encoding="utf-8", errors="replace")
            except OSError as e:
                logger.warning("Cannot read sidecar %s: %s", entry.full_path, e)
                continue
            metadata = parse_sidecar_text(content)
            if metadata.tags:
                tags[artwork_key] = metadata.tags
        return tags

    # =========================================================================
    # HISTORY
    # =========================================================================

    async def _record_history(self, summary: ScanSummary) -> None:
        """Store a library_scans row. Failure here never fails the scan."""
        try:
            async with self.db.session_scope() as session:
                await LibraryScanRepository(session).add(
                    LibraryScanModel(
                        status=summary.status,
                        scan_path=summary.scan_path or "",
                        artists_scanned=summary.artists_scanned,
                        artists_created=summary.artists_created,
                        artists_failed=len(summary.failed_artists),
                        artworks_scanned=summary.artworks_scanned,
                        artworks_created=summary.artworks_created,
                        artworks_updated=summary.artworks_updated,
                        artworks_skipped=summary.artworks_skipped,
                        artworks_missing=summary.artworks_missing,
                        error_message=summary.error,
                        started_at=summary.started_at,
                        completed_at=summary.completed_at,
                    )
                )
        except Exception as e:
            logger.warning("Could not record scan history: %s", e)
