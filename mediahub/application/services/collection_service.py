"""Collection service - the published collections index.

Each summary carries the collection's type, its visible item count and
up to COLLECTION_COVER_COUNT cover images. Covers are the first media in
collection order, resolved through the gallery normalizer so they follow
the same source rules as gallery tiles.
"""
import logging
from typing import Mapping

from ...config import COLLECTION_COVER_COUNT
from ...schemas import CollectionSummary
from .normalizer import DEFAULT_URLS, MediaUrls, normalize_records

logger = logging.getLogger(__name__)


class CollectionService:
    """Builds collection summaries from a MediaRepository.

    Args:
        repository: Object with list_published_collections() and
            fetch_collection_media(collection_id, limit, offset)
        urls: Media service URL prefixes used for cover sources
    """

    def __init__(self, repository, urls: MediaUrls = DEFAULT_URLS):
        self.repository = repository
        self.urls = urls

    def list_published(self) -> list[CollectionSummary]:
        return [self._summarize(row) for row in self.repository.list_published_collections()]

    def get_covers(self, collection_id: int) -> list[str]:
        """Sources of the first displayable media of a collection."""
        records = self.repository.fetch_collection_media(collection_id, COLLECTION_COVER_COUNT, 0)
        batch = normalize_records(records, self.urls)
        if batch.dropped_ids:
            logger.debug("Collection %s: no cover source for %s", collection_id, batch.dropped_ids)
        return [item.src for item in batch.items]

    def _summarize(self, row: Mapping) -> CollectionSummary:
        covers = self.get_covers(row["id"])
        return CollectionSummary(
            id=str(row["id"]),
            type=row.get("type") or "mixed",
            title=row["title"],
            description=row.get("description"),
            cover=covers[0] if covers else None,
            covers=covers,
            count=row.get("item_count") or 0,
        )
