"""Test configuration and fixtures for the media gallery.

This module provides isolated test environments:
- Temporary database (SQLite) per test
- Repository and storage fixtures for seeding media
- A TestClient bound to the isolated database
"""
import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Dict, Generator

import pytest
from fastapi.testclient import TestClient

# Ensure the package is importable
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment BEFORE importing app modules
os.environ["MEDIAHUB_BASE_URL"] = ""
os.environ["MEDIAHUB_LOG_LEVEL"] = "DEBUG"

BASE_MTIME = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="function")
def isolated_environment(tmp_path: Path) -> Dict:
    """Create completely isolated environment for a single test.

    Returns:
        Dict with paths: db_path, base_dir
    """
    return {
        "db_path": tmp_path / "test.db",
        "base_dir": tmp_path,
    }


@pytest.fixture(scope="function")
def patched_config(isolated_environment: Dict):
    """Monkey-patch app configuration to use the isolated database."""
    import mediahub.config as config
    import mediahub.database as db_module

    originals = {
        "CONFIG_DATABASE_PATH": config.DATABASE_PATH,
        "DATABASE_PATH": db_module.DATABASE_PATH,
    }

    config.DATABASE_PATH = isolated_environment["db_path"]
    db_module.DATABASE_PATH = isolated_environment["db_path"]

    yield isolated_environment

    config.DATABASE_PATH = originals["CONFIG_DATABASE_PATH"]
    db_module.DATABASE_PATH = originals["DATABASE_PATH"]


@pytest.fixture(scope="function")
def fresh_database(patched_config: Dict) -> Generator[Path, None, None]:
    """Initialize fresh database with schema for each test."""
    from mediahub.database import close_db, create_connection, init_db

    # Reset any existing thread-local connection
    close_db()

    conn = create_connection()
    try:
        init_db(conn)
    finally:
        conn.close()

    yield patched_config["db_path"]

    close_db()


@pytest.fixture(scope="function")
def db(fresh_database: Path):
    """Connection to the isolated database, closed after the test."""
    from mediahub.database import create_connection

    conn = create_connection()
    yield conn
    conn.close()


@pytest.fixture(scope="function")
def media_repo(db):
    from mediahub.infrastructure.repositories import MediaRepository

    return MediaRepository(db)


@pytest.fixture(scope="function")
def local_storage(media_repo) -> int:
    """ID of an enabled local storage backend."""
    return media_repo.create_storage("local", "Local library")


@pytest.fixture(scope="function")
def seed_photos(media_repo, local_storage) -> Callable[..., list[int]]:
    """Factory that creates published JPEG photos, newest first.

    Usage:
        ids = seed_photos(13)
        # ids[0] has the newest mtime, so it is first in the gallery
    """
    offset = {"hours": 0}

    def _seed(count: int, storage_id: int = None, **overrides) -> list[int]:
        ids = []
        for _ in range(count):
            fields = {
                "user_storage_id": storage_id or local_storage,
                "path": f"photos/{offset['hours']:04d}.jpg",
                "title": f"Photo {offset['hours']}",
                "media_type": "image",
                "mime_type": "image/jpeg",
                "url": f"/media/{offset['hours']:04d}.jpg",
                "mtime": BASE_MTIME - timedelta(hours=offset["hours"]),
            }
            fields.update(overrides)
            ids.append(media_repo.create_file(**fields))
            offset["hours"] += 1
        return ids

    return _seed


@pytest.fixture(scope="function")
def client(fresh_database: Path) -> Generator[TestClient, None, None]:
    """Create test client with fresh isolated environment.

    Usage:
        def test_something(client):
            response = client.get("/gallery")
            assert response.status_code == 200
    """
    from mediahub.main import app

    with TestClient(app) as test_client:
        yield test_client
