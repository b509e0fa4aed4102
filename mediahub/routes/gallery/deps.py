"""Shared dependencies for gallery routes.

This module contains factory functions for creating services
used across all gallery sub-modules.
"""
from ...application.services import CollectionService, GalleryService
from ...infrastructure.repositories import MediaRepository


def get_gallery_service(db) -> GalleryService:
    """Create GalleryService over all published media."""
    return GalleryService(MediaRepository(db).fetch_published)


def get_collection_gallery_service(db, collection_id: int) -> GalleryService:
    """Create GalleryService scoped to one collection."""
    repo = MediaRepository(db)
    return GalleryService(
        lambda limit, offset: repo.fetch_collection_media(collection_id, limit, offset)
    )


def get_collection_service(db) -> CollectionService:
    """Create CollectionService for the published collections index."""
    return CollectionService(MediaRepository(db))
