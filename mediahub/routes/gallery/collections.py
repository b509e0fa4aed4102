"""Collection routes: the published collections index and collection-scoped gallery pages."""
from fastapi import APIRouter, HTTPException, Query

from ...application.services import resolve_page_params
from ...database import create_connection
from ...infrastructure.repositories import MediaRepository
from ...schemas import CollectionSummary, GalleryPage
from .deps import get_collection_gallery_service, get_collection_service

router = APIRouter()


@router.get("/api/collections", response_model=list[CollectionSummary])
def list_collections():
    """List published collections, newest first, with type, covers and item count."""
    db = create_connection()
    try:
        return get_collection_service(db).list_published()
    finally:
        db.close()


@router.get("/api/collections/{collection_id}/gallery", response_model=GalleryPage)
def get_collection_gallery_page(
    collection_id: int,
    page: str = None,
    page_size: str = Query(None, alias="pageSize")
):
    """Get one page of a published collection's media."""
    page_number, size = resolve_page_params(page, page_size)

    db = create_connection()
    try:
        collection = MediaRepository(db).get_collection(collection_id)
        if not collection or not collection["is_published"]:
            raise HTTPException(status_code=404, detail="Collection not found")

        return get_collection_gallery_service(db, collection_id).get_page(page_number, size)
    finally:
        db.close()
