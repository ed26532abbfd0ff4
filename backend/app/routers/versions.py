"""Content version history API router: list, restore, compare and consistency check."""

from typing import Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import get_current_user, require_role
from app.models.user import User
from app.schemas.content import ContentOut
from app.schemas.version import (
    VersionComparison,
    VersionConsistencyReport,
    VersionHistoryOut,
    VersionRestoreRequest,
    VersionRestoreResult,
)
from app.services import content_service, department_service, version_service
from app.utils.permissions import ADMIN, can_edit_content, can_publish_content, can_view_department

router = APIRouter(prefix="/api/content/{content_id}/versions", tags=["versions"])


def _department_slug(db: Session, department_id: int) -> str:
    dept = department_service.get_by_id(db, department_id)
    if not dept:
        raise HTTPException(status_code=404, detail="Department not found")
    return dept.slug


def _authors(db: Session, author_ids) -> Dict[int, Optional[User]]:
    ids = {int(a) for a in author_ids if a is not None}
    if not ids:
        return {}
    rows = db.query(User).filter(User.user_id.in_(ids)).all()
    return {row.user_id: row for row in rows}


def _ensure_history_access(db: Session, content_id: int, user: User) -> str:
    item = content_service.get_or_404(db, content_id)
    slug = _department_slug(db, item.department_id)
    if not can_view_department(user, slug):
        raise HTTPException(status_code=403, detail="Version history is limited to the owning department")
    return slug


@router.get("", response_model=VersionHistoryOut)
def list_versions(
    content_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _ensure_history_access(db, content_id, current_user)
    result = version_service.read_versions(db, content_id)
    if result.failed:
        # Do not present an outage as an empty history.
        raise HTTPException(status_code=503, detail="Version history is temporarily unavailable")

    authors = _authors(db, [row.author_id for row in result.data])
    stats = version_service.get_version_stats(db, content_id)
    for key in ("first_version", "latest_version"):
        if stats[key] is not None:
            stats[key] = version_service.to_response(stats[key], authors.get(stats[key].author_id))
    return {
        "versions": [version_service.to_response(row, authors.get(row.author_id)) for row in result.data],
        "stats": stats,
    }


@router.post("", response_model=VersionRestoreResult)
def restore_version(
    content_id: int,
    data: VersionRestoreRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if data.version_number < 1:
        raise HTTPException(status_code=400, detail="Version number is required")
    item = content_service.get_or_404(db, content_id)
    slug = _department_slug(db, item.department_id)
    if not can_edit_content(current_user.role, current_user.department, slug):
        raise HTTPException(status_code=403, detail="You cannot restore content in this department")
    target = version_service.get_version_by_number(db, content_id, data.version_number)
    if target and target.status != item.status and not can_publish_content(
        current_user.role, current_user.department, slug
    ):
        raise HTTPException(status_code=403, detail="Restoring this version changes its publish status")

    restored = version_service.restore_version(db, content_id, data.version_number, current_user.user_id)
    return {
        "message": f"Successfully restored to version {data.version_number}",
        "restored_from": data.version_number,
        "content": ContentOut.model_validate(restored),
    }


@router.get("/compare", response_model=VersionComparison)
def compare_versions(
    content_id: int,
    from_version: int = Query(..., alias="from", ge=1),
    to_version: int = Query(..., alias="to", ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _ensure_history_access(db, content_id, current_user)
    comparison = version_service.compare_versions(db, content_id, from_version, to_version)
    from_row = comparison["from_version_data"]
    to_row = comparison["to_version_data"]
    authors = _authors(db, [from_row.author_id, to_row.author_id])
    comparison["from_version_data"] = version_service.to_response(from_row, authors.get(from_row.author_id))
    comparison["to_version_data"] = version_service.to_response(to_row, authors.get(to_row.author_id))
    return comparison


@router.get("/check", response_model=VersionConsistencyReport)
def check_versions(
    content_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_role(ADMIN)),
):
    issues = version_service.find_version_inconsistencies(db, content_id)
    return {"content_id": content_id, "consistent": not issues, "issues": issues}
