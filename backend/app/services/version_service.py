"""Content version history domain service: snapshots, current pointer, diff and restore."""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.content import ContentItem
from app.models.content_version import ContentVersion
from app.models.user import User
from app.services import activity_log_service
from app.utils.helpers import utc_now

logger = logging.getLogger(__name__)

# Order matters: diffs are reported in this order.
COMPARED_FIELDS = ("title", "slug", "body", "type", "status", "tags")
SNAPSHOT_FIELDS = (
    *COMPARED_FIELDS,
    "author_id",
    "version",
    "is_current_version",
    "changes_summary",
    "published_at",
    "created_at",
)

READ_OK = "ok"
READ_EMPTY = "empty"
READ_FAILED = "failed"


@dataclass
class ReadResult:
    status: str
    data: List[ContentVersion] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.status == READ_FAILED


def create_version(db: Session, content_id: int, snapshot: Dict[str, Any]) -> ContentVersion:
    """Persist one immutable snapshot.

    The caller owns the version number; duplicates are not rejected here.
    The row is flushed, not committed, so it joins the caller's transaction.
    """
    values = {name: snapshot[name] for name in SNAPSHOT_FIELDS if snapshot.get(name) is not None}
    values.setdefault("tags", [])
    values.setdefault("created_at", utc_now())
    row = ContentVersion(content_id=content_id, **values)
    db.add(row)
    db.flush()
    return row


def _versions_query(db: Session, content_id: int):
    return (
        db.query(ContentVersion)
        .filter(ContentVersion.content_id == content_id)
        .order_by(ContentVersion.version.desc(), ContentVersion.version_id.desc())
    )


def get_versions_by_content_id(db: Session, content_id: int) -> List[ContentVersion]:
    # A failed read looks like "no history" to callers; use read_versions to tell them apart.
    try:
        return _versions_query(db, content_id).all()
    except SQLAlchemyError:
        logger.exception("[versions] failed to load versions for content %s", content_id)
        return []


def read_versions(db: Session, content_id: int) -> ReadResult:
    try:
        rows = _versions_query(db, content_id).all()
    except SQLAlchemyError as exc:
        logger.exception("[versions] failed to load versions for content %s", content_id)
        return ReadResult(status=READ_FAILED, error=str(exc))
    if not rows:
        return ReadResult(status=READ_EMPTY)
    return ReadResult(status=READ_OK, data=rows)


def get_version_by_number(db: Session, content_id: int, version_number: int) -> Optional[ContentVersion]:
    try:
        return (
            db.query(ContentVersion)
            .filter(
                ContentVersion.content_id == content_id,
                ContentVersion.version == version_number,
            )
            .order_by(ContentVersion.version_id.desc())
            .first()
        )
    except SQLAlchemyError:
        logger.exception("[versions] failed to load version %s of content %s", version_number, content_id)
        return None


def get_current_version(db: Session, content_id: int) -> Optional[ContentVersion]:
    try:
        return (
            db.query(ContentVersion)
            .filter(
                ContentVersion.content_id == content_id,
                ContentVersion.is_current_version == True,  # noqa: E712
            )
            .order_by(ContentVersion.version.desc())
            .first()
        )
    except SQLAlchemyError:
        logger.exception("[versions] failed to load current version of content %s", content_id)
        return None


def mark_previous_versions_as_not_current(db: Session, content_id: int, current_version_number: int) -> int:
    """Clear every stale current flag, not only the one from the previous edit.

    Safe to repeat. Returns how many rows were flipped.
    """
    flipped = 0
    for row in get_versions_by_content_id(db, content_id):
        if row.version != current_version_number and row.is_current_version:
            row.is_current_version = False
            flipped += 1
    if flipped:
        db.flush()
    return flipped


def restore_version(db: Session, content_id: int, version_number: int, author_id: int) -> ContentItem:
    target = get_version_by_number(db, content_id, version_number)
    if not target:
        raise HTTPException(status_code=404, detail="Version not found")

    item = db.query(ContentItem).filter(ContentItem.content_id == content_id).first()
    if not item:
        raise HTTPException(status_code=404, detail="Content not found")

    new_version_number = (item.version or 1) + 1
    now = utc_now()
    summary = f"Restored from version {version_number}"
    restored_tags = list(target.tags or [])

    try:
        item.title = target.title
        item.slug = target.slug
        item.body = target.body
        item.type = target.type
        item.status = target.status
        item.tags = restored_tags
        item.published_at = target.published_at
        item.version = new_version_number
        item.updated_at = now
        db.flush()

        create_version(
            db,
            content_id,
            {
                "title": target.title,
                "slug": target.slug,
                "body": target.body,
                "type": target.type,
                "status": target.status,
                "tags": restored_tags,
                "author_id": author_id,
                "version": new_version_number,
                "is_current_version": True,
                "changes_summary": summary,
                "published_at": target.published_at,
                "created_at": now,
            },
        )
        mark_previous_versions_as_not_current(db, content_id, new_version_number)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(item)

    logger.info("[versions] content %s restored from v%s as v%s", content_id, version_number, new_version_number)
    activity_log_service.log_activity(
        db,
        author_id,
        "version_restored",
        "content",
        f"Restored content to version {version_number}",
        resource_id=content_id,
        metadata={
            "version_number": new_version_number,
            "previous_version": version_number,
            "changes_summary": summary,
        },
    )
    return item


def _serialize(value: Any) -> str:
    return json.dumps(value, sort_keys=True, ensure_ascii=False, default=str)


def diff_snapshots(old: Any, new: Any) -> List[Dict[str, Any]]:
    diffs = []
    for name in COMPARED_FIELDS:
        old_value = getattr(old, name, None)
        new_value = getattr(new, name, None)
        if _serialize(old_value) == _serialize(new_value):
            continue
        if old_value is None:
            change_type = "added"
        elif new_value is None:
            change_type = "removed"
        else:
            change_type = "modified"
        diffs.append({
            "field": name,
            "old_value": old_value,
            "new_value": new_value,
            "change_type": change_type,
        })
    return diffs


def compare_versions(db: Session, content_id: int, from_version: int, to_version: int) -> Dict[str, Any]:
    from_row = get_version_by_number(db, content_id, from_version)
    to_row = get_version_by_number(db, content_id, to_version)
    if not from_row or not to_row:
        raise HTTPException(status_code=404, detail="One or both versions not found")

    diffs = diff_snapshots(from_row, to_row)
    return {
        "from_version": from_version,
        "to_version": to_version,
        "from_version_data": from_row,
        "to_version_data": to_row,
        "diffs": diffs,
        "total_changes": len(diffs),
    }


def get_version_stats(db: Session, content_id: int) -> Dict[str, Any]:
    versions = get_versions_by_content_id(db, content_id)
    authors = {row.author_id for row in versions}
    return {
        "total_versions": len(versions),
        "unique_authors": len(authors),
        "first_version": versions[-1] if versions else None,
        "latest_version": versions[0] if versions else None,
        "published_versions": sum(1 for row in versions if row.status == "published"),
    }


def delete_all_versions(db: Session, content_id: int) -> int:
    deleted = (
        db.query(ContentVersion)
        .filter(ContentVersion.content_id == content_id)
        .delete()
    )
    db.flush()
    return deleted


def find_version_inconsistencies(db: Session, content_id: int) -> List[str]:
    """Offline consistency sweep for one content item.

    Concurrent updates are not serialized, so two writers can both append the
    same version number; this reports that and the other states a partial
    failure could leave behind.
    """
    issues: List[str] = []
    versions = _versions_query(db, content_id).all()
    item = db.query(ContentItem).filter(ContentItem.content_id == content_id).first()

    if item is None and versions:
        issues.append(f"{len(versions)} version(s) belong to missing content {content_id}")
    if item is not None and not versions:
        issues.append(f"content {content_id} has no version history")
    if not versions:
        return issues

    numbers = [row.version for row in versions]
    duplicates = sorted({n for n in numbers if numbers.count(n) > 1})
    for number in duplicates:
        issues.append(f"duplicate version number {number} ({numbers.count(number)} rows)")

    expected = set(range(1, max(numbers) + 1))
    missing = sorted(expected - set(numbers))
    if missing:
        issues.append(f"missing version numbers {missing}")

    current = [row for row in versions if row.is_current_version]
    if not current:
        issues.append("no current version")
    elif len(current) > 1:
        issues.append(f"{len(current)} versions flagged current: {sorted(row.version for row in current)}")
    elif current[0].version != max(numbers):
        issues.append(f"current version {current[0].version} is not the highest ({max(numbers)})")

    if item is not None and item.version not in numbers:
        issues.append(f"content counter {item.version} has no matching version")
    return issues


def _author_summary(author: Optional[User]) -> Optional[Dict[str, Any]]:
    if author is None:
        return None
    return {
        "user_id": author.user_id,
        "username": author.username,
        "email": author.email,
        "game_character_name": author.game_character_name,
    }


def to_response(row: ContentVersion, author: Optional[User] = None) -> Dict[str, Any]:
    return {
        "version_id": row.version_id,
        "content_id": row.content_id,
        "version": row.version,
        "title": row.title,
        "slug": row.slug,
        "body": row.body,
        "type": row.type,
        "status": row.status,
        "tags": list(row.tags or []),
        "author_id": row.author_id,
        "is_current_version": row.is_current_version,
        "changes_summary": row.changes_summary,
        "published_at": row.published_at,
        "created_at": row.created_at,
        "author": _author_summary(author),
    }
