"""Application services - business logic layer."""

from .normalizer import (
    MediaKind,
    MediaUrls,
    NormalizedBatch,
    build_gallery_items,
    normalize_date,
    normalize_record,
    normalize_records,
    resolve_media_kind,
)
from .gallery_service import (
    AsyncGalleryService,
    GalleryService,
    clamp_page_size,
    parse_positive_int,
    resolve_page_params,
)
from .collection_service import CollectionService
from .scroll_driver import HttpPageFetcher, InfiniteScrollDriver, ScrollSnapshot, ScrollState

__all__ = [
    "MediaKind",
    "MediaUrls",
    "NormalizedBatch",
    "build_gallery_items",
    "normalize_date",
    "normalize_record",
    "normalize_records",
    "resolve_media_kind",
    "AsyncGalleryService",
    "GalleryService",
    "clamp_page_size",
    "parse_positive_int",
    "resolve_page_params",
    "CollectionService",
    "HttpPageFetcher",
    "InfiniteScrollDriver",
    "ScrollSnapshot",
    "ScrollState",
]
