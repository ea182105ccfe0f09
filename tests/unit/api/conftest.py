"""Fixtures for API tests."""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from artshelf.config import Settings
from artshelf.main import create_app


@pytest.fixture
def client(settings: Settings) -> Generator[TestClient, None, None]:
    """Test client with the lifespan running against a throwaway SQLite file."""
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client
