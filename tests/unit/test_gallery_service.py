"""Tests for GalleryService pagination.

The record source is mocked; these tests check the window arithmetic,
has_next detection, parameter clamping and the first-load fallback.
"""
import logging
import sqlite3
from unittest.mock import Mock

import pytest

from mediahub.application.services import (
    AsyncGalleryService,
    GalleryService,
    clamp_page_size,
    parse_positive_int,
    resolve_page_params,
)
from mediahub.schemas import GalleryItem


def make_records(count: int, start: int = 1) -> list[dict]:
    return [
        {"id": i, "media_type": "photo", "url": f"/photos/{i}.jpg"}
        for i in range(start, start + count)
    ]


def window_source(total: int) -> Mock:
    """Mock record source backed by `total` records."""
    records = make_records(total)
    return Mock(side_effect=lambda limit, offset: records[offset:offset + limit])


class TestParameterParsing:
    def test_oversized_page_size_is_clamped(self):
        assert clamp_page_size(1000) == 60

    def test_undersized_page_size_is_clamped(self):
        assert clamp_page_size(2) == 6

    def test_negative_page_size_defaults(self):
        assert resolve_page_params(1, -5) == (1, 12)

    @pytest.mark.parametrize("raw", [None, "", "abc", "0", "-3", "1.5", True])
    def test_invalid_values_fall_back(self, raw):
        assert parse_positive_int(raw, 7) == 7

    def test_numeric_strings_are_parsed(self):
        assert resolve_page_params("3", "24") == (3, 24)
        assert resolve_page_params(" 2 ", "1000") == (2, 60)


class TestGalleryService:
    """Over-fetch pagination over a mocked record source."""

    def test_thirteen_records_means_next_page(self):
        source = window_source(13)
        service = GalleryService(source)

        page = service.get_page(1, 12)

        assert page.has_next is True
        assert len(page.items) == 12
        assert page.page == 1
        source.assert_called_once_with(13, 0)

    def test_exactly_twelve_records_means_last_page(self):
        page = GalleryService(window_source(12)).get_page(1, 12)

        assert page.has_next is False
        assert len(page.items) == 12

    def test_window_for_later_page(self):
        source = window_source(100)
        page = GalleryService(source).get_page(3, 10)

        source.assert_called_once_with(11, 20)
        assert [item.id for item in page.items] == [str(i) for i in range(21, 31)]
        assert page.page == 3

    def test_sentinel_record_is_not_returned(self):
        page = GalleryService(window_source(7)).get_page(1, 6)
        assert [item.id for item in page.items] == ["1", "2", "3", "4", "5", "6"]

    def test_page_size_is_clamped_before_fetching(self):
        source = window_source(0)
        GalleryService(source).get_page(1, 1000)
        source.assert_called_once_with(61, 0)

    def test_fetch_window_returns_pagination_state(self):
        records, state = GalleryService(window_source(9)).fetch_window(2, 6)
        assert len(records) == 3
        assert (state.page, state.page_size, state.has_next) == (2, 6, False)

    def test_dropped_records_are_logged(self, caplog):
        records = make_records(2) + [{"id": 99, "media_type": "photo", "storage_type": "s3"}]
        service = GalleryService(Mock(return_value=records))

        with caplog.at_level(logging.DEBUG, logger="mediahub.application.services.gallery_service"):
            page = service.get_page(1, 12)

        assert len(page.items) == 2
        assert "dropped 1 of 3" in caplog.text
        assert "99" in caplog.text

    def test_source_errors_propagate(self):
        service = GalleryService(Mock(side_effect=sqlite3.OperationalError("database is locked")))

        with pytest.raises(sqlite3.OperationalError):
            service.get_page(1, 12)


class TestInitialPage:
    FALLBACK = [
        {"id": "placeholder-1", "type": "photo", "src": "/static/p1.jpg", "title": "One"},
        GalleryItem(id="placeholder-2", type="photo", src="/static/p2.jpg", title="Two"),
    ]

    def test_empty_source_serves_fallback(self):
        page = GalleryService(window_source(0)).get_initial_page(12, self.FALLBACK)

        assert [item.id for item in page.items] == ["placeholder-1", "placeholder-2"]
        assert page.has_next is False
        assert page.page == 1

    def test_non_empty_source_ignores_fallback(self):
        page = GalleryService(window_source(20)).get_initial_page(12, self.FALLBACK)

        assert page.items[0].id == "1"
        assert page.has_next is True

    def test_all_records_dropped_is_not_empty_source(self):
        records = [{"id": 1, "media_type": "photo", "storage_type": "s3"}]
        page = GalleryService(Mock(return_value=records)).get_initial_page(12, self.FALLBACK)

        assert page.items == []


class TestAsyncGalleryService:
    @pytest.mark.asyncio
    async def test_same_contract_as_sync_service(self):
        records = make_records(13)

        async def fetch(limit, offset):
            return records[offset:offset + limit]

        service = AsyncGalleryService(fetch)
        first = await service.get_page(1, 12)
        second = await service.get_page(2, 12)

        assert (len(first.items), first.has_next) == (12, True)
        assert (len(second.items), second.has_next) == (1, False)
        assert second.items[0].id == "13"

    @pytest.mark.asyncio
    async def test_initial_page_fallback(self):
        async def fetch(limit, offset):
            return []

        page = await AsyncGalleryService(fetch).get_initial_page(
            12, [{"id": "p", "type": "photo", "src": "/p.jpg", "title": "P"}]
        )
        assert [item.id for item in page.items] == ["p"]
        assert page.has_next is False
