"""User service layer. Profiles, role changes and the department roster."""

import logging
from typing import Any, Dict, List, Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.models.user import User
from app.schemas.user import UserCreate, UserProfileUpdate, UserRoleUpdate
from app.services import notification_service
from app.utils.permissions import ADMIN, SUPER_ADMIN, can_manage_user, is_super_admin
from app.utils.rank_utils import sort_users_by_rank

logger = logging.getLogger(__name__)


def list_users(db: Session, include_inactive: bool = False, department: Optional[str] = None) -> List[User]:
    q = db.query(User)
    if not include_inactive:
        q = q.filter(User.is_active == True)  # noqa: E712
    if department:
        q = q.filter(User.department == department)
    return sort_users_by_rank(q.order_by(User.user_id.asc()).all())


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def get_by_email(db: Session, email: str) -> Optional[User]:
    try:
        return db.query(User).filter(User.email == email.strip().lower()).first()
    except SQLAlchemyError:
        logger.exception("[users] failed to load user by email")
        return None


def get_by_department(db: Session, department: str) -> List[User]:
    try:
        return (
            db.query(User)
            .filter(User.department == department, User.is_active == True)  # noqa: E712
            .order_by(User.user_id.asc())
            .all()
        )
    except SQLAlchemyError:
        logger.exception("[users] failed to list users of department %s", department)
        return []


def create_user(db: Session, data: UserCreate, actor: User) -> User:
    if not is_super_admin(actor) and (data.department != actor.department or data.role in (ADMIN, SUPER_ADMIN)):
        raise HTTPException(status_code=403, detail="Cannot create users outside your authority")
    email = data.email.strip().lower()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=409, detail="Email already registered")
    user = User(**{**data.model_dump(), "email": email})
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update_profile(db: Session, user_id: int, data: UserProfileUpdate, actor: User) -> User:
    user = get_user(db, user_id)
    if actor.user_id != user.user_id and not can_manage_user(actor, user):
        raise HTTPException(status_code=403, detail="Cannot edit this profile")
    changes: Dict[str, Any] = {
        k: v for k, v in data.model_dump(exclude_unset=True).items()
        if getattr(user, k) != v
    }
    if not changes:
        return user
    for k, v in changes.items():
        setattr(user, k, v)
    db.commit()
    db.refresh(user)
    if actor.user_id != user.user_id and settings.NOTIFICATIONS_ENABLED:
        notification_service.create_profile_update_notification(db, user.user_id, sorted(changes))
    return user


def change_role(db: Session, user_id: int, data: UserRoleUpdate, actor: User) -> User:
    user = get_user(db, user_id)
    if actor.user_id == user.user_id:
        raise HTTPException(status_code=400, detail="Cannot change your own role")
    if not can_manage_user(actor, user):
        raise HTTPException(status_code=403, detail="Cannot change this user's role")
    if not is_super_admin(actor) and (data.role in (ADMIN, SUPER_ADMIN) or data.department not in (None, actor.department)):
        raise HTTPException(status_code=403, detail="Only super admins can grant admin roles or move departments")

    old_role = user.role
    user.role = data.role
    if data.department:
        user.department = data.department
    db.commit()
    db.refresh(user)
    logger.info("[users] user %s role %s -> %s by %s", user.user_id, old_role, user.role, actor.user_id)
    if old_role != user.role and settings.NOTIFICATIONS_ENABLED:
        notification_service.create_role_change_notification(db, user, old_role)
    return user


def deactivate_user(db: Session, user_id: int, actor: User) -> None:
    user = get_user(db, user_id)
    if actor.user_id == user.user_id:
        raise HTTPException(status_code=400, detail="Cannot deactivate yourself")
    if not can_manage_user(actor, user):
        raise HTTPException(status_code=403, detail="Cannot deactivate this user")
    user.is_active = False
    db.commit()


def _roster_entry(user: User) -> Dict[str, Any]:
    return {
        "user_id": user.user_id,
        "name": user.game_character_name or user.username,
        "rank": user.rank or "Unknown",
        "callsign": user.callsign or "",
        "assignment": user.assignment or "",
        "activity": user.activity or "Inactive",
        "status": user.duty_status or "Unknown",
        "fto": bool(user.is_fto),
        "solo_cleared": bool(user.is_solo_cleared),
        "water_rescue": bool(user.is_water_rescue),
        "co_pilot": bool(user.is_co_pilot_cert),
        "aviation": bool(user.is_aviation_cert),
        "psych_neuro": bool(user.is_psych_neuro),
    }


def get_roster(db: Session, department: str) -> Dict[str, Any]:
    members = [
        user for user in get_by_department(db, department)
        if user.role not in settings.ROSTER_EXCLUDED_ROLES
    ]
    entries = [_roster_entry(user) for user in sort_users_by_rank(members)]
    return {"department": department, "users": entries, "total": len(entries)}
