"""Activity log service layer. Appends audit entries and serves read queries."""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.activity_log import ActivityLog, ACTIVITY_ACTIONS

logger = logging.getLogger(__name__)


def log_activity(
    db: Session,
    user_id: int,
    action: str,
    resource_type: str,
    description: str,
    resource_id: Optional[Any] = None,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Optional[ActivityLog]:
    if action not in ACTIVITY_ACTIONS:
        raise ValueError(f"Unknown activity action: {action}")
    entry = ActivityLog(
        user_id=user_id,
        action=action,
        resource_type=resource_type,
        resource_id=str(resource_id) if resource_id is not None else None,
        description=description,
        ip_address=ip_address,
        user_agent=user_agent,
        meta=metadata,
    )
    try:
        db.add(entry)
        db.commit()
    except SQLAlchemyError as exc:
        # The audited change is already committed; losing the entry must not undo it.
        db.rollback()
        logger.warning("[activity] failed to log %s on %s/%s: %s", action, resource_type, resource_id, exc)
        return None
    db.refresh(entry)
    return entry


def get_by_user(db: Session, user_id: int, limit: int = 50) -> List[ActivityLog]:
    try:
        return (
            db.query(ActivityLog)
            .filter(ActivityLog.user_id == user_id)
            .order_by(ActivityLog.timestamp.desc(), ActivityLog.log_id.desc())
            .limit(limit)
            .all()
        )
    except SQLAlchemyError:
        logger.exception("[activity] failed to load logs for user %s", user_id)
        return []


def get_by_resource(db: Session, resource_type: str, resource_id: Any) -> List[ActivityLog]:
    try:
        return (
            db.query(ActivityLog)
            .filter(
                ActivityLog.resource_type == resource_type,
                ActivityLog.resource_id == str(resource_id),
            )
            .order_by(ActivityLog.timestamp.desc(), ActivityLog.log_id.desc())
            .all()
        )
    except SQLAlchemyError:
        logger.exception("[activity] failed to load logs for %s/%s", resource_type, resource_id)
        return []


def get_recent(db: Session, limit: int = 100) -> List[ActivityLog]:
    try:
        return (
            db.query(ActivityLog)
            .order_by(ActivityLog.timestamp.desc(), ActivityLog.log_id.desc())
            .limit(limit)
            .all()
        )
    except SQLAlchemyError:
        logger.exception("[activity] failed to load recent logs")
        return []
