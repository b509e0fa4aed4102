"""Gallery item normalizer.

Turns raw media records (row dicts from MediaRepository) into GalleryItem
display models. Pure functions: no I/O, input order preserved.

Records without any usable image source are omitted from the output.
Callers that care about omissions use normalize_records(), which also
returns the ids that were dropped.
"""
from datetime import date, datetime, timezone
from typing import Any, Iterable, Mapping, NamedTuple, Optional

from ...config import (
    HEIC_EXTENSIONS,
    HEIC_MIME_TYPES,
    LOCAL_FILE_URL_PREFIX,
    LOCAL_STORAGE_TYPES,
    STREAM_URL_PREFIX,
    THUMB_URL_PREFIX,
    UNNAMED_TITLE,
)
from ...schemas import GalleryItem

# Formats accepted after ISO 8601 has been tried
DATE_FORMATS = [
    '%Y:%m:%d %H:%M:%S',      # EXIF standard
    '%Y:%m:%d',
    '%d/%m/%Y %H:%M:%S',
]

PASSTHROUGH_FIELDS = (
    "description", "mime_type", "camera", "maker", "lens", "aperture", "iso",
    "exposure", "focal_length", "color_space", "white_balance",
    "gps_latitude", "gps_longitude", "location_name", "size", "blur_hash",
    "live_type", "video_duration",
)


class MediaUrls(NamedTuple):
    """URL prefixes of the id-keyed media services."""
    thumb: str = THUMB_URL_PREFIX
    stream: str = STREAM_URL_PREFIX
    local_file: str = LOCAL_FILE_URL_PREFIX


DEFAULT_URLS = MediaUrls()


class MediaKind(NamedTuple):
    """Resolved classification of a record. The only source of type truth."""
    type: str           # 'photo' or 'video'
    is_animated: bool
    is_heic: bool

    @property
    def is_video(self) -> bool:
        return self.type == "video"


class NormalizedBatch(NamedTuple):
    items: list[GalleryItem]
    dropped_ids: list[Any]


def resolve_media_kind(media_type: str = None, mime_type: str = None, path: str = None) -> MediaKind:
    """Classify a record as photo or video, plus animated/HEIC flags.

    Animated images stay photos for layout purposes but keep is_animated.
    """
    mime = (mime_type or "").lower()
    is_video = media_type == "video" or mime.startswith("video/")
    is_animated = media_type == "animated" or mime == "image/gif"
    is_heic = not is_video and (
        mime in HEIC_MIME_TYPES
        or (path or "").lower().endswith(HEIC_EXTENSIONS)
    )
    return MediaKind("video" if is_video else "photo", is_animated, is_heic)


def _coalesce(*values):
    """First value that is not None."""
    for value in values:
        if value is not None:
            return value
    return None


def _first_non_empty(*values) -> Optional[str]:
    for value in values:
        if value:
            return value
    return None


def _dimension(*values) -> Optional[int]:
    """First value usable as a pixel size. Unreadable sizes become None."""
    value = _coalesce(*values)
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None


def _parse_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, (int, float)):
        # Epoch milliseconds
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    if not isinstance(value, str):
        return None

    date_str = value.strip()
    try:
        return datetime.fromisoformat(date_str)
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(date_str, fmt)
        except ValueError:
            continue

    return None


def normalize_date(value: Any) -> Optional[str]:
    """Format a date as ISO 8601 UTC with milliseconds, e.g. 2024-01-15T00:00:00.000Z.

    Naive values are taken as UTC. Anything unparsable becomes None.
    """
    if value is None or value == "":
        return None
    try:
        parsed = _parse_datetime(value)
        if parsed is None:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        parsed = parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError, OSError):
        return None
    return parsed.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _is_local_file_eligible(record: Mapping) -> bool:
    if record.get("id") is None:
        return False
    storage_type = record.get("storage_type")
    return storage_type is None or storage_type in LOCAL_STORAGE_TYPES


def _keyed(prefix: str, record_id: Any) -> Optional[str]:
    if record_id is None:
        return None
    return f"{prefix.rstrip('/')}/{record_id}"


def normalize_record(record: Mapping, urls: MediaUrls = DEFAULT_URLS) -> Optional[GalleryItem]:
    """Build a GalleryItem from one raw record, or None if it has no source."""
    record_id = record.get("id")
    kind = resolve_media_kind(record.get("media_type"), record.get("mime_type"), record.get("path"))
    local_file_url = _keyed(urls.local_file, record_id) if _is_local_file_eligible(record) else None

    src = _first_non_empty(
        record.get("thumb_url"),
        _keyed(urls.thumb, record_id) if (kind.is_video or kind.is_animated or kind.is_heic) else None,
        record.get("url") if not kind.is_video else None,
        local_file_url if not kind.is_video else None,
    )
    if not src:
        return None

    fields = {name: record.get(name) for name in PASSTHROUGH_FIELDS}
    return GalleryItem(
        id=str(record_id),
        type=kind.type,
        is_animated=kind.is_animated,
        src=src,
        video_url=_keyed(urls.stream, record_id) if kind.is_video else None,
        animated_url=_first_non_empty(record.get("url"), local_file_url) if kind.is_animated else None,
        width=_dimension(record.get("resolution_width"), record.get("video_width")),
        height=_dimension(record.get("resolution_height"), record.get("video_height")),
        title=_coalesce(record.get("title"), record.get("path"), UNNAMED_TITLE),
        date_shot=normalize_date(_coalesce(record.get("date_shot"), record.get("mtime"))),
        created_at=normalize_date(record.get("mtime")),
        **fields,
    )


def normalize_records(records: Iterable[Mapping], urls: MediaUrls = DEFAULT_URLS) -> NormalizedBatch:
    """Normalize records in order, collecting ids of the ones without a source."""
    items = []
    dropped = []
    for record in records:
        item = normalize_record(record, urls)
        if item is None:
            dropped.append(record.get("id"))
        else:
            items.append(item)
    return NormalizedBatch(items, dropped)


def build_gallery_items(records: Iterable[Mapping], urls: MediaUrls = DEFAULT_URLS) -> list[GalleryItem]:
    return normalize_records(records, urls).items
