"""Content API router. Validates requests, checks department permissions and delegates to the service layer."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import get_current_user
from app.models.content import ContentItem
from app.models.department import Department
from app.models.user import User
from app.schemas.content import ContentCreate, ContentOut, ContentStatusUpdate, ContentUpdate
from app.services import content_service, department_service, notification_service
from app.utils.permissions import can_edit_content, can_publish_content, can_view_department, is_super_admin

router = APIRouter(prefix="/api/content", tags=["content"])


def _department_or_404(db: Session, department_id: int) -> Department:
    dept = department_service.get_by_id(db, department_id)
    if not dept:
        raise HTTPException(status_code=404, detail="Department not found")
    return dept


def _ensure_can_view(db: Session, item: ContentItem, user: User) -> Department:
    dept = _department_or_404(db, item.department_id)
    if item.status != "published" and not can_view_department(user, dept.slug):
        raise HTTPException(status_code=403, detail="Content belongs to another department")
    return dept


def _ensure_can_edit(dept: Department, user: User):
    if not can_edit_content(user.role, user.department, dept.slug):
        raise HTTPException(status_code=403, detail="You cannot edit content in this department")


def _ensure_can_publish(dept: Department, user: User):
    if not can_publish_content(user.role, user.department, dept.slug):
        raise HTTPException(status_code=403, detail="You cannot publish content in this department")


def _ensure_slug_free(db: Session, department_id: int, slug: str, content_id: Optional[int] = None):
    existing = content_service.get_by_slug(db, department_id, slug)
    if existing and existing.content_id != content_id:
        raise HTTPException(status_code=409, detail="Slug already used in this department")


def _author_name(user: User) -> str:
    return user.username or user.email


@router.get("", response_model=List[ContentOut])
def list_content(
    status_filter: Optional[str] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if is_super_admin(current_user):
        return content_service.get_all(db, status_filter)
    dept = department_service.get_by_slug(db, current_user.department)
    if not dept:
        raise HTTPException(status_code=404, detail="Department not found")
    return content_service.get_by_department(db, dept.department_id, status_filter)


@router.get("/search", response_model=List[ContentOut])
def search_content(
    department: str,
    q: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    dept = department_service.get_by_slug(db, department)
    if not dept:
        raise HTTPException(status_code=404, detail="Department not found")
    return content_service.search(db, dept.department_id, q)


@router.post("", response_model=ContentOut, status_code=status.HTTP_201_CREATED)
def create_content(
    data: ContentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    dept = _department_or_404(db, data.department_id)
    _ensure_can_edit(dept, current_user)
    if data.status == "published":
        _ensure_can_publish(dept, current_user)
    _ensure_slug_free(db, dept.department_id, data.slug)

    item = content_service.create(db, data.model_dump(), current_user.user_id)
    notification_service.create_content_notification(
        db, item, _author_name(current_user), "content_created", exclude_user_id=current_user.user_id
    )
    return item


@router.get("/{content_id}", response_model=ContentOut)
def get_content(
    content_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    item = content_service.get_or_404(db, content_id)
    _ensure_can_view(db, item, current_user)
    return item


@router.put("/{content_id}", response_model=ContentOut)
def update_content(
    content_id: int,
    data: ContentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    item = content_service.get_or_404(db, content_id)
    dept = _department_or_404(db, item.department_id)
    _ensure_can_edit(dept, current_user)
    if data.status and data.status != item.status:
        _ensure_can_publish(dept, current_user)
    if data.slug and data.slug != item.slug:
        _ensure_slug_free(db, dept.department_id, data.slug, content_id)

    updates = data.model_dump(exclude_unset=True, exclude={"changes_summary"})
    updated = content_service.update(db, content_id, updates, current_user.user_id, data.changes_summary)
    notification_service.create_content_notification(
        db, updated, _author_name(current_user), "content_updated", exclude_user_id=current_user.user_id
    )
    return updated


@router.patch("/{content_id}/status", response_model=ContentOut)
def change_content_status(
    content_id: int,
    data: ContentStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    item = content_service.get_or_404(db, content_id)
    dept = _department_or_404(db, item.department_id)
    _ensure_can_publish(dept, current_user)
    if data.status == item.status:
        return item
    if data.status == "published":
        updated = content_service.publish(db, content_id, current_user.user_id)
        notification_service.create_content_notification(
            db, updated, _author_name(current_user), "content_published", exclude_user_id=current_user.user_id
        )
        return updated
    return content_service.unpublish(db, content_id, current_user.user_id)


@router.delete("/{content_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_content(
    content_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    item = content_service.get_or_404(db, content_id)
    dept = _department_or_404(db, item.department_id)
    _ensure_can_edit(dept, current_user)
    content_service.delete(db, content_id, current_user.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
