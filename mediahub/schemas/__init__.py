"""Pydantic schemas shared by services and routes."""
from .collection import CollectionSummary
from .gallery import GalleryItem, GalleryPage, PaginationState

__all__ = ["CollectionSummary", "GalleryItem", "GalleryPage", "PaginationState"]
