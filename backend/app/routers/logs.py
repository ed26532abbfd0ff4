"""Activity log API router."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from app.database import get_db
from app.middleware.auth_middleware import require_role
from app.models.user import User
from app.schemas.notification import ActivityLogOut
from app.services import activity_log_service
from app.utils.permissions import ADMIN

router = APIRouter(prefix="/api/logs", tags=["logs"])


@router.get("", response_model=List[ActivityLogOut])
def list_logs(
    user_id: Optional[int] = None,
    resource_type: Optional[str] = None,
    resource_id: Optional[str] = None,
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_role(ADMIN)),
):
    if resource_type and resource_id:
        return activity_log_service.get_by_resource(db, resource_type, resource_id)
    if user_id is not None:
        return activity_log_service.get_by_user(db, user_id, limit)
    return activity_log_service.get_recent(db, limit)
