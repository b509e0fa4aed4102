"""Gallery service - page windows over a media record source.

This service encapsulates:
- Parsing and clamping page/pageSize request parameters
- Translating a page request into a limit/offset window
- Detecting a next page by over-fetching one record (no COUNT query)
- The empty-library fallback for the initial server-rendered page

Record source errors are not caught here; they propagate to the caller.
"""
import logging
from typing import Any, Awaitable, Callable, Iterable, Mapping

from ...config import GALLERY_DEFAULT_PAGE_SIZE, GALLERY_MAX_PAGE_SIZE, GALLERY_MIN_PAGE_SIZE
from ...schemas import GalleryItem, GalleryPage, PaginationState
from .normalizer import DEFAULT_URLS, MediaUrls, normalize_records

logger = logging.getLogger(__name__)

RecordFetcher = Callable[[int, int], list[dict]]
AsyncRecordFetcher = Callable[[int, int], Awaitable[list[dict]]]


def parse_positive_int(value: Any, fallback: int) -> int:
    """Parse a query value as a positive integer, else return fallback."""
    if value is None or isinstance(value, bool):
        return fallback
    try:
        parsed = int(str(value).strip())
    except ValueError:
        return fallback
    return parsed if parsed > 0 else fallback


def clamp_page_size(value: int) -> int:
    return min(GALLERY_MAX_PAGE_SIZE, max(GALLERY_MIN_PAGE_SIZE, value))


def resolve_page_params(page: Any = None, page_size: Any = None) -> tuple[int, int]:
    """Turn raw query values into a valid (page, page_size) pair. Never raises."""
    return (
        parse_positive_int(page, 1),
        clamp_page_size(parse_positive_int(page_size, GALLERY_DEFAULT_PAGE_SIZE)),
    )


def page_window(page: int, page_size: int) -> tuple[int, int]:
    """Return (limit, offset); limit includes one extra record to detect a next page."""
    return page_size + 1, (page - 1) * page_size


def coerce_fallback_items(fallback_items: Iterable[GalleryItem | Mapping]) -> list[GalleryItem]:
    return [
        item if isinstance(item, GalleryItem) else GalleryItem.model_validate(item)
        for item in fallback_items
    ]


class GalleryService:
    """Pagination over a synchronous record source.

    Examples:
        >>> repo = MediaRepository(db)
        >>> service = GalleryService(repo.fetch_published)
        >>> page = service.get_page(2, 12)
        >>> page.has_next
        True
    """

    def __init__(self, fetch_records: RecordFetcher, urls: MediaUrls = DEFAULT_URLS):
        self.fetch_records = fetch_records
        self.urls = urls

    def fetch_window(self, page: int, page_size: int) -> tuple[list[dict], PaginationState]:
        """Fetch the raw records of one page and its pagination state.

        Args:
            page: Page number, 1-based
            page_size: Clamped page size

        Returns:
            (visible records, PaginationState)
        """
        limit, offset = page_window(page, page_size)
        records = self.fetch_records(limit, offset)
        return _split_window(records, page, page_size)

    def get_page(self, page: int = 1, page_size: int = GALLERY_DEFAULT_PAGE_SIZE) -> GalleryPage:
        """Get one normalized gallery page."""
        page, page_size = resolve_page_params(page, page_size)
        records, state = self.fetch_window(page, page_size)
        return _build_page(records, state, self.urls)

    def get_initial_page(
        self,
        page_size: int = GALLERY_DEFAULT_PAGE_SIZE,
        fallback_items: Iterable[GalleryItem | Mapping] = ()
    ) -> GalleryPage:
        """Get page 1 for the server-rendered gallery.

        When the source has no records at all, the fixed fallback set is
        returned instead, with no next page.
        """
        _, page_size = resolve_page_params(1, page_size)
        records, state = self.fetch_window(1, page_size)
        if not records:
            return _fallback_page(fallback_items)
        return _build_page(records, state, self.urls)


class AsyncGalleryService:
    """Same contract as GalleryService over an async record source."""

    def __init__(self, fetch_records: AsyncRecordFetcher, urls: MediaUrls = DEFAULT_URLS):
        self.fetch_records = fetch_records
        self.urls = urls

    async def fetch_window(self, page: int, page_size: int) -> tuple[list[dict], PaginationState]:
        limit, offset = page_window(page, page_size)
        records = await self.fetch_records(limit, offset)
        return _split_window(records, page, page_size)

    async def get_page(self, page: int = 1, page_size: int = GALLERY_DEFAULT_PAGE_SIZE) -> GalleryPage:
        page, page_size = resolve_page_params(page, page_size)
        records, state = await self.fetch_window(page, page_size)
        return _build_page(records, state, self.urls)

    async def get_initial_page(
        self,
        page_size: int = GALLERY_DEFAULT_PAGE_SIZE,
        fallback_items: Iterable[GalleryItem | Mapping] = ()
    ) -> GalleryPage:
        _, page_size = resolve_page_params(1, page_size)
        records, state = await self.fetch_window(1, page_size)
        if not records:
            return _fallback_page(fallback_items)
        return _build_page(records, state, self.urls)


def _split_window(records: list[dict], page: int, page_size: int) -> tuple[list[dict], PaginationState]:
    has_next = len(records) > page_size
    state = PaginationState(page=page, page_size=page_size, has_next=has_next)
    return records[:page_size], state


def _build_page(records: list[dict], state: PaginationState, urls: MediaUrls) -> GalleryPage:
    batch = normalize_records(records, urls)
    if batch.dropped_ids:
        logger.info(
            "Gallery page %d: dropped %d of %d records without a displayable source",
            state.page, len(batch.dropped_ids), len(records)
        )
        logger.debug("Dropped record ids: %s", batch.dropped_ids)
    return GalleryPage(items=batch.items, has_next=state.has_next, page=state.page)


def _fallback_page(fallback_items: Iterable[GalleryItem | Mapping]) -> GalleryPage:
    items = coerce_fallback_items(fallback_items)
    logger.info("Gallery source is empty, serving %d fallback items", len(items))
    return GalleryPage(items=items, has_next=False, page=1)
