"""Tests for CollectionService summaries.

The repository is mocked; these tests check cover resolution, the
cover limit and the mapping of repository rows to summaries.
"""
import sqlite3
from unittest.mock import Mock

import pytest

from mediahub.application.services import CollectionService, MediaUrls


def make_repository(rows, media):
    repository = Mock()
    repository.list_published_collections.return_value = rows
    repository.fetch_collection_media.side_effect = lambda collection_id, limit, offset: media.get(collection_id, [])
    return repository


class TestCollectionService:
    def test_summary_from_row_and_media(self):
        repository = make_repository(
            [{"id": 4, "title": "Nights", "description": None, "type": "video", "item_count": 9}],
            {4: [
                {"id": 40, "media_type": "video", "url": "/v.mp4"},
                {"id": 41, "media_type": "image", "thumb_url": "/t.jpg", "url": "/p.jpg"},
            ]},
        )

        summary, = CollectionService(repository).list_published()

        assert summary.id == "4"
        assert summary.type == "video"
        assert summary.count == 9
        assert summary.cover == "/api/media/thumb/40"
        assert summary.covers == ["/api/media/thumb/40", "/t.jpg"]
        repository.fetch_collection_media.assert_called_once_with(4, 3, 0)

    def test_media_without_source_is_skipped_for_covers(self):
        repository = make_repository(
            [{"id": 1, "title": "Remote", "type": "photo", "item_count": 2}],
            {1: [
                {"id": 10, "media_type": "image", "storage_type": "s3"},
                {"id": 11, "media_type": "image", "url": "/b.jpg"},
            ]},
        )

        summary, = CollectionService(repository).list_published()

        assert summary.cover == "/b.jpg"
        assert summary.covers == ["/b.jpg"]

    def test_custom_url_prefixes(self):
        repository = make_repository(
            [{"id": 2, "title": "Clips", "type": "video", "item_count": 1}],
            {2: [{"id": 20, "media_type": "video"}]},
        )

        summary, = CollectionService(repository, MediaUrls(thumb="/cdn/thumbs")).list_published()

        assert summary.cover == "/cdn/thumbs/20"

    def test_missing_type_and_count_use_defaults(self):
        repository = make_repository([{"id": 3, "title": "Legacy"}], {})

        summary, = CollectionService(repository).list_published()

        assert summary.type == "mixed"
        assert summary.count == 0
        assert summary.cover is None

    def test_repository_errors_propagate(self):
        repository = Mock()
        repository.list_published_collections.side_effect = sqlite3.OperationalError("locked")

        with pytest.raises(sqlite3.OperationalError):
            CollectionService(repository).list_published()
