"""Media repository - the gallery's record source.

Reads published media files joined with their storage backend and
photo/video metadata, producing flat row dicts that the gallery
normalizer consumes. Ordering is part of the contract:
- public gallery: newest modification time first
- collections: collection position
"""
from datetime import datetime

from ...config import COLLECTION_TYPES, GALLERY_MEDIA_TYPES
from ...database import to_utc_timestamp
from .base import Repository, AsyncRepository

_MEDIA_TYPE_PLACEHOLDERS = ", ".join("?" for _ in GALLERY_MEDIA_TYPES)

RECORD_COLUMNS = """
    f.id, f.title, f.path, f.size, f.mime_type, f.media_type,
    f.url, f.thumb_url, f.blur_hash, f.mtime,
    s.type AS storage_type,
    pm.resolution_width, pm.resolution_height, pm.description,
    pm.camera, pm.maker, pm.lens, pm.date_shot,
    pm.exposure, pm.aperture, pm.iso, pm.focal_length,
    pm.white_balance, pm.color_space,
    pm.gps_latitude, pm.gps_longitude, pm.location_name,
    pm.live_type,
    vm.width AS video_width, vm.height AS video_height,
    COALESCE(vm.duration, pm.video_duration) AS video_duration
"""

RECORD_JOINS = """
    FROM files f
    JOIN user_storages s ON f.user_storage_id = s.id
    LEFT JOIN photo_metadata pm ON pm.file_id = f.id
    LEFT JOIN video_metadata vm ON vm.file_id = f.id
"""

VISIBLE_FILTER = f"""
    f.is_published = 1
    AND f.media_type IN ({_MEDIA_TYPE_PLACEHOLDERS})
    AND COALESCE(s.is_disabled, 0) = 0
"""

PUBLISHED_QUERY = f"""
    SELECT {RECORD_COLUMNS}
    {RECORD_JOINS}
    WHERE {VISIBLE_FILTER}
    ORDER BY f.mtime DESC, f.id DESC
    LIMIT ? OFFSET ?
"""

COLLECTION_QUERY = f"""
    SELECT {RECORD_COLUMNS}
    {RECORD_JOINS}
    JOIN collection_media cm ON cm.file_id = f.id
    WHERE cm.collection_id = ? AND {VISIBLE_FILTER}
    ORDER BY cm.position ASC, f.id ASC
    LIMIT ? OFFSET ?
"""

PUBLISHED_COLLECTIONS_QUERY = f"""
    SELECT c.id, c.title, c.description, c.type, c.created_at,
        (SELECT COUNT(*)
         FROM collection_media cm
         JOIN files f ON cm.file_id = f.id
         JOIN user_storages s ON f.user_storage_id = s.id
         WHERE cm.collection_id = c.id AND {VISIBLE_FILTER}) AS item_count
    FROM collections c
    WHERE c.is_published = 1
    ORDER BY c.created_at DESC, c.id DESC
"""

PHOTO_METADATA_FIELDS = (
    "resolution_width", "resolution_height", "description", "camera", "maker",
    "lens", "date_shot", "exposure", "aperture", "iso", "focal_length",
    "white_balance", "color_space", "gps_latitude", "gps_longitude",
    "location_name", "live_type", "video_duration",
)


def _window(limit: int | None, offset: int | None) -> tuple[int, int]:
    """SQLite treats a negative LIMIT as unbounded."""
    return (limit if limit is not None else -1, max(offset or 0, 0))


class MediaRepository(Repository):
    """Repository for published media and collections.

    Examples:
        >>> repo = MediaRepository(db)
        >>> records = repo.fetch_published(limit=13, offset=0)
        >>> records = repo.fetch_collection_media(collection_id, limit=13, offset=12)
    """

    def fetch_published(self, limit: int = None, offset: int = 0) -> list[dict]:
        """Get a window of published media, newest first.

        Args:
            limit: Maximum rows (None for all)
            offset: Rows to skip

        Returns:
            List of raw media record dicts
        """
        cursor = self._execute(
            PUBLISHED_QUERY,
            (*GALLERY_MEDIA_TYPES, *_window(limit, offset))
        )
        return [dict(row) for row in cursor.fetchall()]

    def fetch_collection_media(
        self,
        collection_id: int,
        limit: int = None,
        offset: int = 0
    ) -> list[dict]:
        """Get a window of a collection's published media in collection order."""
        cursor = self._execute(
            COLLECTION_QUERY,
            (collection_id, *GALLERY_MEDIA_TYPES, *_window(limit, offset))
        )
        return [dict(row) for row in cursor.fetchall()]

    def get_collection(self, collection_id: int) -> dict | None:
        """Get collection by ID."""
        cursor = self._execute(
            "SELECT * FROM collections WHERE id = ?",
            (collection_id,)
        )
        return self._row_to_dict(cursor.fetchone())

    def list_published_collections(self) -> list[dict]:
        """Get published collections, newest first.

        item_count counts only media the public gallery would show.
        Covers are not included; read them with fetch_collection_media().
        """
        cursor = self._execute(PUBLISHED_COLLECTIONS_QUERY, GALLERY_MEDIA_TYPES)
        return [dict(row) for row in cursor.fetchall()]

    def create_storage(self, storage_type: str, name: str = None, is_disabled: bool = False) -> int:
        """Register a storage backend and return its ID."""
        cursor = self._execute(
            "INSERT INTO user_storages (type, name, is_disabled) VALUES (?, ?, ?)",
            (storage_type, name, 1 if is_disabled else 0)
        )
        self._commit()
        return cursor.lastrowid

    def create_file(
        self,
        user_storage_id: int,
        path: str,
        title: str = None,
        media_type: str = "image",
        mime_type: str = None,
        url: str = None,
        thumb_url: str = None,
        size: int = None,
        blur_hash: str = None,
        mtime: datetime | str = None,
        is_published: bool = True
    ) -> int:
        """Create new file record.

        Args:
            user_storage_id: Storage backend holding the file
            path: Path relative to the storage root
            title: Display title
            media_type: 'image', 'animated' or 'video'
            mime_type: MIME type reported by the storage scan
            url: Direct URL (public buckets, CDN)
            thumb_url: Pre-generated thumbnail URL
            size: File size in bytes
            blur_hash: BlurHash placeholder string
            mtime: File modification time, stored as UTC
            is_published: Visible in the public gallery

        Returns:
            New file ID
        """
        cursor = self._execute(
            """INSERT INTO files
               (user_storage_id, path, title, size, mime_type, media_type,
                url, thumb_url, blur_hash, mtime, is_published)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                user_storage_id, path, title, size, mime_type, media_type,
                url, thumb_url, blur_hash, to_utc_timestamp(mtime), 1 if is_published else 0
            )
        )
        self._commit()
        return cursor.lastrowid

    def add_photo_metadata(self, file_id: int, **fields) -> None:
        """Attach EXIF/photo metadata to a file.

        Raises:
            ValueError: On unknown metadata fields
        """
        unknown = set(fields) - set(PHOTO_METADATA_FIELDS)
        if unknown:
            raise ValueError(f"Unknown photo metadata fields: {', '.join(sorted(unknown))}")

        columns = ["file_id", *fields]
        placeholders = ", ".join("?" for _ in columns)
        self._execute(
            f"INSERT OR REPLACE INTO photo_metadata ({', '.join(columns)}) VALUES ({placeholders})",
            (file_id, *fields.values())
        )
        self._commit()

    def add_video_metadata(
        self,
        file_id: int,
        width: int = None,
        height: int = None,
        duration: float = None
    ) -> None:
        """Attach video stream metadata to a file."""
        self._execute(
            """INSERT OR REPLACE INTO video_metadata (file_id, width, height, duration)
               VALUES (?, ?, ?, ?)""",
            (file_id, width, height, duration)
        )
        self._commit()

    def create_collection(
        self,
        title: str,
        description: str = None,
        is_published: bool = True,
        collection_type: str = "mixed"
    ) -> int:
        """Create collection and return its ID.

        Raises:
            ValueError: If collection_type is not photo, video or mixed
        """
        if collection_type not in COLLECTION_TYPES:
            raise ValueError(f"Unknown collection type: {collection_type}")

        cursor = self._execute(
            "INSERT INTO collections (title, description, type, is_published) VALUES (?, ?, ?, ?)",
            (title, description, collection_type, 1 if is_published else 0)
        )
        self._commit()
        return cursor.lastrowid

    def add_to_collection(self, collection_id: int, file_id: int, position: int = None) -> None:
        """Add file to collection, appending when no position is given."""
        if position is None:
            cursor = self._execute(
                "SELECT COALESCE(MAX(position), -1) + 1 FROM collection_media WHERE collection_id = ?",
                (collection_id,)
            )
            position = cursor.fetchone()[0]

        self._execute(
            """INSERT OR REPLACE INTO collection_media (collection_id, file_id, position)
               VALUES (?, ?, ?)""",
            (collection_id, file_id, position)
        )
        self._commit()


class AsyncMediaRepository(AsyncRepository):
    """Async variant of MediaRepository's read side."""

    async def fetch_published(self, limit: int = None, offset: int = 0) -> list[dict]:
        """Get a window of published media, newest first."""
        return await self._fetchall(
            PUBLISHED_QUERY,
            (*GALLERY_MEDIA_TYPES, *_window(limit, offset))
        )

    async def fetch_collection_media(
        self,
        collection_id: int,
        limit: int = None,
        offset: int = 0
    ) -> list[dict]:
        """Get a window of a collection's published media in collection order."""
        return await self._fetchall(
            COLLECTION_QUERY,
            (collection_id, *GALLERY_MEDIA_TYPES, *_window(limit, offset))
        )

    async def get_collection(self, collection_id: int) -> dict | None:
        """Get collection by ID."""
        return await self._fetchone(
            "SELECT * FROM collections WHERE id = ?",
            (collection_id,)
        )
