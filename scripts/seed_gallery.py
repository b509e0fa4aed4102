#!/usr/bin/env python3
"""
Seed the gallery database with sample media.
Creates one local and one S3 storage, a mix of photos, videos,
animated images and HEIC files, and a published collection.

Usage:
    python scripts/seed_gallery.py
    python scripts/seed_gallery.py --count 40 --db /tmp/mediahub.db
"""
import argparse
import sqlite3
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from mediahub import config  # noqa: E402
from mediahub.database import init_db  # noqa: E402
from mediahub.infrastructure.repositories import MediaRepository  # noqa: E402

KINDS = [
    # (media_type, mime_type, extension)
    ("image", "image/jpeg", ".jpg"),
    ("image", "image/heic", ".heic"),
    ("video", "video/mp4", ".mp4"),
    ("animated", "image/gif", ".gif"),
]


def seed(conn: sqlite3.Connection, count: int) -> None:
    repo = MediaRepository(conn)
    local_id = repo.create_storage("local", "Local library")
    s3_id = repo.create_storage("s3", "Archive bucket")
    collection_id = repo.create_collection("Highlights", "A few favourites")

    start = datetime.now(timezone.utc)
    for i in range(count):
        media_type, mime_type, ext = KINDS[i % len(KINDS)]
        on_s3 = i % 5 == 0
        file_id = repo.create_file(
            user_storage_id=s3_id if on_s3 else local_id,
            path=f"sample/{i:04d}{ext}",
            title=f"Sample {i + 1}",
            media_type=media_type,
            mime_type=mime_type,
            url=f"https://cdn.example.com/sample/{i:04d}{ext}" if on_s3 else None,
            size=1024 * (i + 1),
            mtime=start - timedelta(hours=i),
        )
        if media_type == "video":
            repo.add_video_metadata(file_id, width=1920, height=1080, duration=12.5)
        else:
            repo.add_photo_metadata(
                file_id,
                resolution_width=4032,
                resolution_height=3024,
                camera="Sample Camera",
                iso=100,
                date_shot=(start - timedelta(days=i)).isoformat(),
            )
        if i % 3 == 0:
            repo.add_to_collection(collection_id, file_id)

    print(f"Seeded {count} files into storages {local_id}, {s3_id}; collection {collection_id}")


def main():
    parser = argparse.ArgumentParser(description="Seed the gallery with sample media")
    parser.add_argument("--count", type=int, default=30, help="Number of files to create")
    parser.add_argument("--db", type=Path, default=config.DATABASE_PATH, help="Database path")
    args = parser.parse_args()

    conn = sqlite3.connect(args.db)
    conn.row_factory = sqlite3.Row
    try:
        init_db(conn)
        seed(conn, args.count)
    finally:
        conn.close()


if __name__ == "__main__":
    main()
