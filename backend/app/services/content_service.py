"""Content service layer. The only path that mutates versioned content fields."""

import logging
from typing import Any, Dict, List, Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.content import ContentItem
from app.services import activity_log_service, version_service
from app.utils.helpers import serialize_body, utc_now

logger = logging.getLogger(__name__)

VERSIONED_FIELDS = ("title", "slug", "body", "type", "status", "tags")
UPDATABLE_FIELDS = (*VERSIONED_FIELDS, "published_at")

_UNSET = object()


def _snapshot(item: ContentItem) -> Dict[str, Any]:
    return {
        "title": item.title,
        "slug": item.slug,
        "body": item.body,
        "type": item.type,
        "status": item.status,
        "tags": list(item.tags or []),
        "published_at": item.published_at,
    }


def get_by_id(db: Session, content_id: int) -> Optional[ContentItem]:
    try:
        return db.query(ContentItem).filter(ContentItem.content_id == content_id).first()
    except SQLAlchemyError:
        logger.exception("[content] failed to load content %s", content_id)
        return None


def get_or_404(db: Session, content_id: int) -> ContentItem:
    item = get_by_id(db, content_id)
    if not item:
        raise HTTPException(status_code=404, detail="Content not found")
    return item


def get_by_slug(db: Session, department_id: int, slug: str) -> Optional[ContentItem]:
    try:
        return (
            db.query(ContentItem)
            .filter(ContentItem.department_id == department_id, ContentItem.slug == slug)
            .first()
        )
    except SQLAlchemyError:
        logger.exception("[content] failed to load content by slug %s/%s", department_id, slug)
        return None


def get_by_department(db: Session, department_id: int, status: Optional[str] = None) -> List[ContentItem]:
    try:
        q = db.query(ContentItem).filter(ContentItem.department_id == department_id)
        if status:
            q = q.filter(ContentItem.status == status)
        return q.order_by(ContentItem.updated_at.desc(), ContentItem.content_id.desc()).all()
    except SQLAlchemyError:
        logger.exception("[content] failed to list content of department %s", department_id)
        return []


def get_by_type(
    db: Session,
    department_id: int,
    content_type: str,
    status: str = "published",
) -> List[ContentItem]:
    try:
        return (
            db.query(ContentItem)
            .filter(
                ContentItem.department_id == department_id,
                ContentItem.type == content_type,
                ContentItem.status == status,
            )
            .order_by(ContentItem.updated_at.desc(), ContentItem.content_id.desc())
            .all()
        )
    except SQLAlchemyError:
        logger.exception("[content] failed to list %s content of department %s", content_type, department_id)
        return []


def get_all(db: Session, status: Optional[str] = None) -> List[ContentItem]:
    try:
        q = db.query(ContentItem)
        if status:
            q = q.filter(ContentItem.status == status)
        return q.order_by(ContentItem.updated_at.desc(), ContentItem.content_id.desc()).all()
    except SQLAlchemyError:
        logger.exception("[content] failed to list content")
        return []


def search(db: Session, department_id: int, term: str, status: str = "published") -> List[ContentItem]:
    keyword = (term or "").strip()
    if not keyword:
        return []
    try:
        return (
            db.query(ContentItem)
            .filter(
                ContentItem.department_id == department_id,
                ContentItem.status == status,
                ContentItem.title.ilike(f"%{keyword}%"),
            )
            .order_by(ContentItem.updated_at.desc())
            .all()
        )
    except SQLAlchemyError:
        logger.exception("[content] search failed for %r in department %s", keyword, department_id)
        return []


def create(db: Session, fields: Dict[str, Any], author_id: int) -> ContentItem:
    now = utc_now()
    status = fields.get("status") or "draft"
    published_at = now if status == "published" else None
    item = ContentItem(
        department_id=fields["department_id"],
        title=fields["title"],
        slug=fields["slug"],
        body=serialize_body(fields.get("body")),
        type=fields["type"],
        status=status,
        tags=list(fields.get("tags") or []),
        author_id=author_id,
        version=1,
        published_at=published_at,
        created_at=now,
        updated_at=now,
    )
    try:
        db.add(item)
        db.flush()
        version_service.create_version(
            db,
            item.content_id,
            {
                **_snapshot(item),
                "author_id": author_id,
                "version": 1,
                "is_current_version": True,
                "changes_summary": "Initial version",
                "created_at": now,
            },
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(item)

    logger.info("[content] created content %s (%s) in department %s", item.content_id, item.type, item.department_id)
    activity_log_service.log_activity(
        db,
        author_id,
        "create",
        "content",
        f"Created {item.type}: {item.title}",
        resource_id=item.content_id,
    )
    return item


def _resolve_published_at(current: ContentItem, updates: Dict[str, Any], now) -> Any:
    explicit = updates.get("published_at", _UNSET)
    next_status = updates.get("status") or current.status
    if next_status != "published":
        # Unpublishing clears the stamp so a later publish gets a fresh one.
        return None if explicit is _UNSET else explicit
    if current.published_at is not None:
        return current.published_at
    return now if explicit is _UNSET or explicit is None else explicit


def update(
    db: Session,
    content_id: int,
    field_updates: Dict[str, Any],
    author_id: int,
    changes_summary: Optional[str] = None,
) -> ContentItem:
    """Apply a partial update and append one complete snapshot for it.

    Updates are resolved against the full previous state before snapshotting,
    so every version can be restored on its own. The counter is read and then
    written without a guard: concurrent callers can produce duplicate version
    numbers (see ``version_service.find_version_inconsistencies``).
    """
    current = get_or_404(db, content_id)
    previous_version = current.version or 1
    new_version = previous_version + 1
    now = utc_now()

    updates = {k: v for k, v in field_updates.items() if k in UPDATABLE_FIELDS}
    # A null body means "unchanged", like every other null field.
    if updates.get("body") is None:
        updates.pop("body", None)
    else:
        updates["body"] = serialize_body(updates["body"])
    if "tags" in updates:
        updates["tags"] = list(updates["tags"] or [])
    merged = _snapshot(current)
    for name in VERSIONED_FIELDS:
        if updates.get(name) is not None:
            merged[name] = updates[name]
    merged["published_at"] = _resolve_published_at(current, updates, now)

    try:
        for name, value in merged.items():
            setattr(current, name, value)
        current.version = new_version
        current.updated_at = now
        db.flush()

        version_service.create_version(
            db,
            content_id,
            {
                **merged,
                "author_id": author_id,
                "version": new_version,
                "is_current_version": True,
                "changes_summary": changes_summary,
                "created_at": now,
            },
        )
        version_service.mark_previous_versions_as_not_current(db, content_id, new_version)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(current)

    logger.info("[content] content %s updated to v%s by user %s", content_id, new_version, author_id)
    activity_log_service.log_activity(
        db,
        author_id,
        "version_created",
        "content",
        f'Created version {new_version} of "{current.title}"',
        resource_id=content_id,
        metadata={
            "version_number": new_version,
            "previous_version": previous_version,
            "changes_summary": changes_summary,
        },
    )
    return current


def publish(db: Session, content_id: int, author_id: int) -> ContentItem:
    return update(db, content_id, {"status": "published"}, author_id, "Published content")


def unpublish(db: Session, content_id: int, author_id: int) -> ContentItem:
    return update(db, content_id, {"status": "draft", "published_at": None}, author_id, "Unpublished content")


def delete(db: Session, content_id: int, author_id: Optional[int] = None) -> None:
    item = get_or_404(db, content_id)
    title = item.title
    try:
        # Children first: an interrupted delete must never leave versions without a parent.
        removed = version_service.delete_all_versions(db, content_id)
        db.delete(item)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info("[content] deleted content %s with %s version(s)", content_id, removed)
    if author_id is not None:
        activity_log_service.log_activity(
            db,
            author_id,
            "delete",
            "content",
            f"Deleted content: {title}",
            resource_id=content_id,
            metadata={"versions_removed": removed},
        )
