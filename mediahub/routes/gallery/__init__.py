"""Gallery routes package.

This module aggregates all gallery-related routes:
- main: Public gallery page and page-fetch API
- collections: Collection-scoped page-fetch API
"""
from fastapi import APIRouter

from . import main, collections

# Create main router with all routes
router = APIRouter()

router.include_router(main.router)
router.include_router(collections.router)

__all__ = ["router"]
