"""Pydantic schemas for content version history, comparison and restore."""

from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel

from app.schemas.content import ContentOut


class VersionAuthor(BaseModel):
    user_id: int
    username: str
    email: str
    game_character_name: Optional[str] = None

    model_config = {"from_attributes": True}


class ContentVersionOut(BaseModel):
    version_id: int
    content_id: int
    version: int
    title: str
    slug: str
    body: str
    type: str
    status: str
    tags: List[str]
    author_id: int
    is_current_version: bool
    changes_summary: Optional[str]
    published_at: Optional[datetime]
    created_at: Optional[datetime]
    author: Optional[VersionAuthor] = None

    model_config = {"from_attributes": True}


class VersionStats(BaseModel):
    total_versions: int
    unique_authors: int
    first_version: Optional[ContentVersionOut]
    latest_version: Optional[ContentVersionOut]
    published_versions: int


class VersionHistoryOut(BaseModel):
    versions: List[ContentVersionOut]
    stats: VersionStats


class VersionDiff(BaseModel):
    field: str
    old_value: Any
    new_value: Any
    change_type: Literal["added", "removed", "modified"]


class VersionComparison(BaseModel):
    from_version: int
    to_version: int
    from_version_data: ContentVersionOut
    to_version_data: ContentVersionOut
    diffs: List[VersionDiff]
    total_changes: int


class VersionRestoreRequest(BaseModel):
    version_number: int


class VersionRestoreResult(BaseModel):
    message: str
    restored_from: int
    content: ContentOut


class VersionConsistencyReport(BaseModel):
    content_id: int
    consistent: bool
    issues: List[str]
