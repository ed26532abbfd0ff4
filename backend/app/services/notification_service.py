"""Notification service layer. Department fan-out and per-user inbox operations."""

import logging
from typing import Any, Dict, List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.config import settings
from app.models.content import ContentItem
from app.models.department import Department
from app.models.notification import Notification
from app.models.user import User
from app.utils.helpers import utc_now

logger = logging.getLogger(__name__)

NOTIFICATION_TYPES = {
    "profile_updated",
    "content_created",
    "content_updated",
    "content_published",
    "role_changed",
    "department_announcement",
}
PRIORITIES = {"low", "medium", "high", "urgent"}

CONTENT_MESSAGES = {
    "content_created": "New content has been created",
    "content_updated": "Content has been updated",
    "content_published": "Content has been published",
}


def _build(
    user_id: int,
    noti_type: str,
    title: str,
    message: str,
    priority: str = "medium",
    action_url: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Notification:
    if noti_type not in NOTIFICATION_TYPES:
        raise ValueError(f"Unknown notification type: {noti_type}")
    return Notification(
        user_id=user_id,
        type=noti_type,
        title=title,
        message=message,
        priority=priority if priority in PRIORITIES else "medium",
        action_url=action_url,
        meta=metadata,
        is_read=False,
        created_at=utc_now(),
    )


def create_notification(
    db: Session,
    user_id: int,
    noti_type: str,
    title: str,
    message: str,
    priority: str = "medium",
    action_url: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Notification:
    noti = _build(user_id, noti_type, title, message, priority, action_url, metadata)
    db.add(noti)
    db.commit()
    db.refresh(noti)
    return noti


def create_for_department(
    db: Session,
    department: str,
    noti_type: str,
    title: str,
    message: str,
    priority: str = "medium",
    action_url: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
    exclude_user_id: Optional[int] = None,
) -> int:
    users = (
        db.query(User)
        .filter(User.department == department, User.is_active == True)  # noqa: E712
        .all()
    )
    count = 0
    for user in users:
        if user.user_id == exclude_user_id:
            continue
        db.add(_build(user.user_id, noti_type, title, message, priority, action_url, metadata))
        count += 1
    db.commit()
    return count


def create_content_notification(
    db: Session,
    item: ContentItem,
    author_name: str,
    noti_type: str,
    exclude_user_id: Optional[int] = None,
) -> int:
    if noti_type not in CONTENT_MESSAGES:
        raise ValueError(f"Not a content notification type: {noti_type}")
    if not settings.NOTIFICATIONS_ENABLED:
        return 0
    department = db.query(Department).filter(Department.department_id == item.department_id).first()
    if not department:
        logger.warning("[notifications] content %s has unknown department %s", item.content_id, item.department_id)
        return 0
    return create_for_department(
        db,
        department.slug,
        noti_type,
        CONTENT_MESSAGES[noti_type],
        f'"{item.title}" by {author_name}',
        priority="high" if noti_type == "content_published" else "medium",
        action_url=f"/{department.slug}/{item.type}/{item.slug}",
        metadata={
            "content_id": item.content_id,
            "content_title": item.title,
            "author_name": author_name,
        },
        exclude_user_id=exclude_user_id,
    )


def create_profile_update_notification(db: Session, user_id: int, updated_fields: List[str]) -> Notification:
    return create_notification(
        db,
        user_id,
        "profile_updated",
        "Profile Updated",
        f"Your profile has been updated. Fields changed: {', '.join(updated_fields)}",
    )


def create_role_change_notification(db: Session, user: User, old_role: str) -> Notification:
    return create_notification(
        db,
        user.user_id,
        "role_changed",
        "Role Changed",
        f"Your role has been changed from {old_role} to {user.role}.",
        priority="high",
        metadata={"old_role": old_role, "new_role": user.role},
    )


def get_by_user_id(db: Session, user_id: int, limit: int = 50, offset: int = 0) -> List[Notification]:
    return (
        db.query(Notification)
        .filter(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc(), Notification.notification_id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )


def get_unread_count(db: Session, user_id: int) -> int:
    return (
        db.query(Notification)
        .filter(Notification.user_id == user_id, Notification.is_read == False)  # noqa: E712
        .count()
    )


def mark_as_read(db: Session, notification_id: int, user_id: int) -> Notification:
    noti = db.query(Notification).filter(
        Notification.notification_id == notification_id,
        Notification.user_id == user_id,
    ).first()
    if not noti:
        raise HTTPException(status_code=404, detail="Notification not found")
    if not noti.is_read:
        noti.is_read = True
        noti.read_at = utc_now()
        db.commit()
        db.refresh(noti)
    return noti


def mark_all_as_read(db: Session, user_id: int) -> int:
    updated = db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.is_read == False,  # noqa: E712
    ).update({"is_read": True, "read_at": utc_now()})
    db.commit()
    return updated


def delete(db: Session, notification_id: int, user_id: int) -> None:
    noti = db.query(Notification).filter(
        Notification.notification_id == notification_id,
        Notification.user_id == user_id,
    ).first()
    if not noti:
        raise HTTPException(status_code=404, detail="Notification not found")
    db.delete(noti)
    db.commit()
