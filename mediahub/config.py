"""Application configuration and constants."""
import os
from pathlib import Path

# Directory paths
BASE_DIR = Path(__file__).resolve().parent.parent
DATABASE_PATH = Path(os.environ.get("MEDIAHUB_DATABASE_PATH", str(BASE_DIR / "mediahub.db")))

# Base URL configuration (for running under a subpath like /gallery-site)
# Set via environment variable MEDIAHUB_BASE_URL, e.g., "photos" or "/photos"
BASE_URL = os.environ.get("MEDIAHUB_BASE_URL", "").strip("/")
ROOT_PATH = f"/{BASE_URL}" if BASE_URL else ""

# Logging
LOG_LEVEL = os.environ.get("MEDIAHUB_LOG_LEVEL", "INFO").upper()

# Gallery pagination
GALLERY_DEFAULT_PAGE_SIZE = 12
GALLERY_MIN_PAGE_SIZE = 6
GALLERY_MAX_PAGE_SIZE = 60

# URL prefixes of the media services, keyed by file id
THUMB_URL_PREFIX = os.environ.get("MEDIAHUB_THUMB_URL_PREFIX", "/api/media/thumb")
STREAM_URL_PREFIX = os.environ.get("MEDIAHUB_STREAM_URL_PREFIX", "/api/media/stream")
LOCAL_FILE_URL_PREFIX = os.environ.get("MEDIAHUB_LOCAL_FILE_URL_PREFIX", "/api/local-files")

# Storage backends whose files the local-file service can read directly
LOCAL_STORAGE_TYPES = {"local", "nas"}

# Media types shown in the public gallery
GALLERY_MEDIA_TYPES = ("image", "photo", "animated", "video")
HEIC_MIME_TYPES = {"image/heic", "image/heif"}
HEIC_EXTENSIONS = (".heic", ".heif")

UNNAMED_TITLE = "Untitled"

# Collection listing
COLLECTION_TYPES = ("photo", "video", "mixed")
COLLECTION_COVER_COUNT = 3

# Shown on the first gallery load when the library is empty or unreachable
FALLBACK_GALLERY_ITEMS = [
    {
        "id": "placeholder-1",
        "type": "photo",
        "src": "/static/placeholders/mountains.svg",
        "title": "Mountains at dawn",
        "width": 1600,
        "height": 1067,
    },
    {
        "id": "placeholder-2",
        "type": "photo",
        "src": "/static/placeholders/coast.svg",
        "title": "Coastline",
        "width": 1600,
        "height": 1067,
    },
    {
        "id": "placeholder-3",
        "type": "photo",
        "src": "/static/placeholders/city.svg",
        "title": "City lights",
        "width": 1067,
        "height": 1600,
    },
]
