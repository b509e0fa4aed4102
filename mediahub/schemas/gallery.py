"""Gallery display models.

Field names are snake_case in Python and camelCase on the wire
(``video_url`` <-> ``videoUrl``). Both spellings are accepted on input.
"""
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# EXIF values arrive as numbers or as text such as "1/125"
MetadataValue = Union[int, float, str]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GalleryItem(CamelModel):
    """Render-ready representation of one media asset."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: Literal["photo", "video"]
    src: str = Field(min_length=1)
    title: str
    is_animated: bool = False
    video_url: Optional[str] = None
    animated_url: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    date_shot: Optional[str] = None
    created_at: Optional[str] = None

    # Passthrough metadata
    description: Optional[str] = None
    mime_type: Optional[str] = None
    camera: Optional[str] = None
    maker: Optional[str] = None
    lens: Optional[str] = None
    aperture: Optional[MetadataValue] = None
    iso: Optional[MetadataValue] = None
    exposure: Optional[MetadataValue] = None
    focal_length: Optional[MetadataValue] = None
    color_space: Optional[str] = None
    white_balance: Optional[str] = None
    gps_latitude: Optional[MetadataValue] = None
    gps_longitude: Optional[MetadataValue] = None
    location_name: Optional[str] = None
    size: Optional[MetadataValue] = None
    blur_hash: Optional[str] = None
    live_type: Optional[str] = None
    video_duration: Optional[MetadataValue] = None


class PaginationState(BaseModel):
    """Window of one page fetch. has_next comes from over-fetching one record."""

    page: int = Field(ge=1)
    page_size: int
    has_next: bool


class GalleryPage(CamelModel):
    """Body of the page-fetch endpoint: {items, hasNext, page}."""

    items: list[GalleryItem]
    has_next: bool
    page: int = Field(ge=1)
