"""Infinite scroll driver - accumulates gallery pages for one view.

The driver is a small state machine:

    IDLE --sentinel visible--> LOADING --ok, has next--> IDLE
                                       --ok, last page-> EXHAUSTED
                                       --failure------> EXHAUSTED

At most one page request is in flight: the LOADING state is set
synchronously before the fetch task is created, so sentinel events that
arrive while loading are ignored. EXHAUSTED is terminal. After close(),
the in-flight task is cancelled and late results never touch state.

Consumers subscribe to snapshots instead of reading driver internals.
"""
import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, Iterable, NamedTuple, Optional

import httpx

from ...config import GALLERY_DEFAULT_PAGE_SIZE
from ...schemas import GalleryItem, GalleryPage

logger = logging.getLogger(__name__)

PageFetcher = Callable[[int, int], Awaitable[GalleryPage]]


class ScrollState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    EXHAUSTED = "exhausted"


class ScrollSnapshot(NamedTuple):
    state: ScrollState
    items: tuple[GalleryItem, ...]
    current_page: int
    page_size: int


Listener = Callable[[ScrollSnapshot], None]


class HttpPageFetcher:
    """Fetch gallery pages from the page-fetch endpoint.

    Non-2xx responses raise httpx.HTTPStatusError, which the driver
    treats as the end of the gallery.

    Example:
        async with httpx.AsyncClient(base_url="http://localhost:8000") as client:
            driver = InfiniteScrollDriver(HttpPageFetcher(client), ...)
    """

    def __init__(self, client: httpx.AsyncClient, path: str = "/gallery"):
        self._client = client
        self._path = path

    async def __call__(self, page: int, page_size: int) -> GalleryPage:
        response = await self._client.get(
            self._path,
            params={"page": page, "pageSize": page_size},
            headers={"Cache-Control": "no-store"},
        )
        response.raise_for_status()
        return GalleryPage.model_validate(response.json())


class InfiniteScrollDriver:
    """Client-side page accumulator driven by sentinel visibility.

    Args:
        fetch_page: Async callable (page, page_size) -> GalleryPage
        initial_items: Items of the server-rendered first page
        initial_page: Page those items belong to
        page_size: Page size fixed for the lifetime of the driver
        has_next: Whether the server reported more pages after initial_page
        retries: Extra attempts per page before giving up (0 = fail on first error)
        retry_backoff: Delay before the first retry in seconds, doubled each time
    """

    def __init__(
        self,
        fetch_page: PageFetcher,
        initial_items: Iterable[GalleryItem] = (),
        initial_page: int = 1,
        page_size: int = GALLERY_DEFAULT_PAGE_SIZE,
        has_next: bool = True,
        retries: int = 0,
        retry_backoff: float = 0.5
    ):
        self._fetch_page = fetch_page
        self._items: list[GalleryItem] = list(initial_items)
        self._current_page = initial_page
        self._page_size = page_size
        self._state = ScrollState.IDLE if has_next else ScrollState.EXHAUSTED
        self._retries = max(retries, 0)
        self._retry_backoff = retry_backoff
        self._closed = False
        self._task: Optional[asyncio.Task] = None
        self._listeners: list[Listener] = []

    @property
    def state(self) -> ScrollState:
        return self._state

    @property
    def items(self) -> tuple[GalleryItem, ...]:
        return tuple(self._items)

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def is_observing(self) -> bool:
        """Whether the sentinel should still be watched."""
        return not self._closed and self._state is not ScrollState.EXHAUSTED

    def snapshot(self) -> ScrollSnapshot:
        return ScrollSnapshot(self._state, self.items, self._current_page, self._page_size)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener for state changes; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def on_sentinel_visible(self) -> Optional[asyncio.Task]:
        """Handle the sentinel entering the viewport.

        Must be called from a running event loop. Returns the fetch task,
        or None when the event is ignored (already loading, exhausted, closed).
        """
        if self._closed or self._state is not ScrollState.IDLE:
            return None

        loop = asyncio.get_running_loop()
        self._set_state(ScrollState.LOADING)
        next_page = self._current_page + 1
        self._task = loop.create_task(self._load(next_page))
        return self._task

    async def load_more(self) -> bool:
        """Trigger and await one page load. Returns True if items were appended."""
        task = self.on_sentinel_visible()
        if task is None:
            return False
        return await task

    def close(self) -> None:
        """Tear down observation; any in-flight result is discarded."""
        if self._closed:
            return
        self._closed = True
        self._listeners.clear()
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _load(self, page: int) -> bool:
        try:
            result = await self._fetch_with_retry(page)
        except Exception as exc:
            if self._closed:
                return False
            logger.warning("Gallery page %d failed, stopping infinite scroll: %s", page, exc)
            self._task = None
            self._set_state(ScrollState.EXHAUSTED)
            return False

        if self._closed:
            return False

        self._items.extend(result.items)
        self._current_page = page
        self._task = None
        self._set_state(ScrollState.IDLE if result.has_next else ScrollState.EXHAUSTED)
        return True

    async def _fetch_with_retry(self, page: int) -> GalleryPage:
        attempt = 0
        while True:
            try:
                return await self._fetch_page(page, self._page_size)
            except Exception as exc:
                if attempt >= self._retries or self._closed:
                    raise
                delay = self._retry_backoff * (2 ** attempt)
                attempt += 1
                logger.debug("Retrying gallery page %d in %.2fs (attempt %d): %s", page, delay, attempt, exc)
                await asyncio.sleep(delay)

    def _set_state(self, state: ScrollState) -> None:
        self._state = state
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)
