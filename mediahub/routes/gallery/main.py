"""Main gallery routes - page view and page-fetch API."""
import logging
import sqlite3

from fastapi import APIRouter, Query, Request
from fastapi.templating import Jinja2Templates

from ... import config
from ...application.services import resolve_page_params
from ...database import create_connection
from ...schemas import GalleryPage
from .deps import get_gallery_service

logger = logging.getLogger(__name__)

router = APIRouter()

templates = Jinja2Templates(directory=config.BASE_DIR / "mediahub" / "templates")
templates.env.globals["base_url"] = config.ROOT_PATH


def embed_json(page: GalleryPage) -> str:
    """Serialize a page for a <script type="application/json"> block."""
    return page.model_dump_json(by_alias=True).replace("</", "<\\/")


@router.get("/")
def gallery(request: Request, page_size: str = Query(None, alias="pageSize")):
    """Public gallery page with the first page embedded.

    Falls back to the placeholder set when the library is empty or
    the database cannot be read.
    """
    _, size = resolve_page_params(1, page_size)

    try:
        db = create_connection()
        try:
            initial = get_gallery_service(db).get_initial_page(
                size, fallback_items=config.FALLBACK_GALLERY_ITEMS
            )
        finally:
            db.close()
    except sqlite3.Error:
        logger.exception("Initial gallery load failed, serving fallback items")
        initial = GalleryPage(
            items=config.FALLBACK_GALLERY_ITEMS, has_next=False, page=1
        )

    return templates.TemplateResponse(request, "gallery.html", {
        "items": initial.items,
        "has_next": initial.has_next,
        "page": initial.page,
        "page_size": size,
        "initial_json": embed_json(initial),
    })


@router.get("/gallery", response_model=GalleryPage)
@router.get("/api/gallery", response_model=GalleryPage)
def get_gallery_page(
    page: str = None,
    page_size: str = Query(None, alias="pageSize")
):
    """Get one page of published media as JSON (infinite scroll)."""
    page_number, size = resolve_page_params(page, page_size)

    db = create_connection()
    try:
        return get_gallery_service(db).get_page(page_number, size)
    finally:
        db.close()
