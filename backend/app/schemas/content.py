"""Pydantic schemas for content item requests and responses."""

from pydantic import BaseModel, field_validator
from typing import Any, List, Literal, Optional
from datetime import datetime


ContentType = Literal["sop", "guide", "announcement", "resource", "training", "policy"]
ContentStatus = Literal["draft", "published"]


def _dedupe_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    if tags is None:
        return None
    seen = []
    for tag in tags:
        text = str(tag).strip()
        if text and text not in seen:
            seen.append(text)
    return seen


class ContentBase(BaseModel):
    title: str
    slug: str
    body: Any = ""
    type: ContentType
    status: ContentStatus = "draft"
    tags: List[str] = []

    @field_validator("tags")
    @classmethod
    def unique_tags(cls, v):
        return _dedupe_tags(v)


class ContentCreate(ContentBase):
    department_id: int


class ContentUpdate(BaseModel):
    title: Optional[str] = None
    slug: Optional[str] = None
    body: Any = None
    type: Optional[ContentType] = None
    status: Optional[ContentStatus] = None
    tags: Optional[List[str]] = None
    changes_summary: Optional[str] = None

    @field_validator("tags")
    @classmethod
    def unique_tags(cls, v):
        return _dedupe_tags(v)


class ContentStatusUpdate(BaseModel):
    status: ContentStatus


class ContentOut(BaseModel):
    content_id: int
    department_id: int
    title: str
    slug: str
    body: str
    type: str
    status: str
    tags: List[str]
    author_id: int
    version: int
    published_at: Optional[datetime]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}
