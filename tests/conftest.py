"""Shared pytest fixtures."""

from collections.abc import AsyncGenerator, Callable
from pathlib import Path

import pytest

from artshelf.config import DatabaseSettings, Settings, StorageSettings
from artshelf.infrastructure.persistence import Database


# Hey future me - every test gets its OWN SQLite file under tmp_path. No shared state, no
# cleanup, and foreign keys/unique constraints behave exactly like production.
@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway SQLite file and no scan path."""
    return Settings(
        database=DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"),
        storage=StorageSettings(scan_path=None),
    )


@pytest.fixture
async def db(settings: Settings) -> AsyncGenerator[Database, None]:
    """Database with all tables created."""
    database = Database(settings)
    await database.create_tables()
    yield database
    await database.close()


@pytest.fixture
def library_root(tmp_path: Path) -> Path:
    """Empty library root directory."""
    root = tmp_path / "library"
    root.mkdir()
    return root


@pytest.fixture
def make_library(library_root: Path) -> Callable[[dict[str, list[str]]], Path]:
    """Factory creating ``library_root/<artist>/<file>`` from a layout dict."""

    def _make(layout: dict[str, list[str]]) -> Path:
        for artist, files in layout.items():
            artist_dir = library_root / artist
            artist_dir.mkdir(parents=True, exist_ok=True)
            for name in files:
                (artist_dir / name).write_bytes(b"data")
        return library_root

    return _make
