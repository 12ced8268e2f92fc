from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

PublishStatus = Literal["created", "skipped-duplicate", "failed"]


class SourcePost(BaseModel):
    """Canonical fields of one source article, produced by the extractor."""

    model_config = ConfigDict(frozen=True)

    url: str
    title: str = Field(..., min_length=1)
    body_html: str
    image_url: Optional[str] = None
    publish_date: datetime
    tags: tuple[str, ...] = ()
    slug: str
    author: Optional[str] = None

    @field_validator("slug")
    @classmethod
    def _check_slug(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("slug must not be empty")
        if "/" in v or "\\" in v:
            raise ValueError("slug must not contain path separators")
        return v


class MediaReference(BaseModel):
    source_image_url: Optional[str] = None
    platform_media_id: Optional[int] = None


class TagResolution(BaseModel):
    name: str
    platform_tag_id: int


class PublishResult(BaseModel):
    slug: str
    link: Optional[str] = None
    status: PublishStatus
    source_url: Optional[str] = None
    title: Optional[str] = None
