"""Collection listing models."""
from typing import Literal, Optional

from .gallery import CamelModel


class CollectionSummary(CamelModel):
    """One published collection as shown on the collections index."""

    id: str
    type: Literal["photo", "video", "mixed"] = "mixed"
    title: str
    description: Optional[str] = None
    cover: Optional[str] = None
    covers: list[str] = []
    count: int = 0
