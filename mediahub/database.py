import sqlite3
import threading
from datetime import datetime, timezone

from .config import DATABASE_PATH


# SQLite3 datetime adapter (the default one is deprecated since Python 3.12)
def _adapt_datetime(dt: datetime) -> str:
    """Adapt datetime to an ISO 8601 UTC string for SQLite.

    Stored timestamps share one offset so they sort as text. Naive values are taken as UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat()


def to_utc_timestamp(value: datetime | str | None) -> datetime | str | None:
    """Bring an ISO 8601 timestamp string to UTC; other values are returned unchanged."""
    if not isinstance(value, str):
        return value
    try:
        return _adapt_datetime(datetime.fromisoformat(value.strip()))
    except ValueError:
        return value


sqlite3.register_adapter(datetime, _adapt_datetime)

# Thread-local storage for database connections
_local = threading.local()


def create_connection() -> sqlite3.Connection:
    """Open a new connection; the caller is responsible for closing it."""
    conn = sqlite3.connect(DATABASE_PATH)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def get_db() -> sqlite3.Connection:
    """Get thread-local database connection"""
    if not hasattr(_local, 'connection') or _local.connection is None:
        _local.connection = create_connection()
    return _local.connection


def close_db() -> None:
    """Close the thread-local connection if one is open."""
    conn = getattr(_local, 'connection', None)
    if conn is not None:
        conn.close()
        _local.connection = None


SCHEMA = [
    # Storage backends (local, nas, s3, qiniu); config lives with the adapters
    """
    CREATE TABLE IF NOT EXISTS user_storages (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        type TEXT NOT NULL,
        name TEXT,
        is_disabled INTEGER DEFAULT 0,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS files (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_storage_id INTEGER NOT NULL,
        path TEXT NOT NULL,
        title TEXT,
        size INTEGER,
        mime_type TEXT,
        media_type TEXT DEFAULT 'image',
        url TEXT,
        thumb_url TEXT,
        blur_hash TEXT,
        mtime TIMESTAMP,
        is_published INTEGER DEFAULT 0,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (user_storage_id) REFERENCES user_storages(id) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS photo_metadata (
        file_id INTEGER PRIMARY KEY,
        resolution_width INTEGER,
        resolution_height INTEGER,
        description TEXT,
        camera TEXT,
        maker TEXT,
        lens TEXT,
        date_shot TIMESTAMP,
        exposure REAL,
        aperture REAL,
        iso INTEGER,
        focal_length REAL,
        white_balance TEXT,
        color_space TEXT,
        gps_latitude REAL,
        gps_longitude REAL,
        location_name TEXT,
        live_type TEXT DEFAULT 'none',
        video_duration REAL,
        FOREIGN KEY (file_id) REFERENCES files(id) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS video_metadata (
        file_id INTEGER PRIMARY KEY,
        width INTEGER,
        height INTEGER,
        duration REAL,
        FOREIGN KEY (file_id) REFERENCES files(id) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS collections (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT NOT NULL,
        description TEXT,
        type TEXT NOT NULL DEFAULT 'mixed',
        is_published INTEGER DEFAULT 0,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS collection_media (
        collection_id INTEGER NOT NULL,
        file_id INTEGER NOT NULL,
        position INTEGER DEFAULT 0,
        PRIMARY KEY (collection_id, file_id),
        FOREIGN KEY (collection_id) REFERENCES collections(id) ON DELETE CASCADE,
        FOREIGN KEY (file_id) REFERENCES files(id) ON DELETE CASCADE
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_files_published_mtime ON files(is_published, mtime)",
    "CREATE INDEX IF NOT EXISTS idx_collection_media_position ON collection_media(collection_id, position)",
]


def init_db(conn: sqlite3.Connection = None):
    """Initialize database schema"""
    db = conn or get_db()
    for statement in SCHEMA:
        db.execute(statement)

    # Migration: add type to collections created before it existed
    collection_columns = [row[1] for row in db.execute("PRAGMA table_info(collections)").fetchall()]
    if "type" not in collection_columns:
        db.execute("ALTER TABLE collections ADD COLUMN type TEXT NOT NULL DEFAULT 'mixed'")

    db.commit()
