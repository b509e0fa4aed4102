"""Media Gallery Application - FastAPI Entry Point."""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from .config import BASE_DIR
from .database import init_db, close_db
from .logging_config import setup_logging

# Import routers
from .routes.gallery import router as gallery_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    setup_logging()
    init_db()
    yield
    close_db()


app = FastAPI(title="Media Gallery", lifespan=lifespan)

# Static files
app.mount("/static", StaticFiles(directory=BASE_DIR / "mediahub" / "static"), name="static")

# Include routers
app.include_router(gallery_router)
