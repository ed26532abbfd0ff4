"""Departments API router."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional

from app.database import get_db
from app.middleware.auth_middleware import get_optional_user, require_role
from app.models.user import User
from app.schemas.content import ContentOut
from app.schemas.department import DepartmentCreate, DepartmentOut, DepartmentUpdate
from app.services import content_service, department_service
from app.utils.permissions import SUPER_ADMIN, can_view_department

router = APIRouter(prefix="/api/departments", tags=["departments"])


@router.get("", response_model=List[DepartmentOut])
def list_departments(active_only: bool = True, db: Session = Depends(get_db)):
    if active_only:
        return department_service.get_active(db)
    return department_service.list_departments(db)


@router.post("", response_model=DepartmentOut, status_code=status.HTTP_201_CREATED)
def create_department(
    data: DepartmentCreate,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_role(SUPER_ADMIN)),
):
    return department_service.create(db, data)


@router.patch("/{slug}", response_model=DepartmentOut)
def update_department(
    slug: str,
    data: DepartmentUpdate,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_role(SUPER_ADMIN)),
):
    return department_service.update(db, slug, data)


@router.get("/{slug}/content", response_model=List[ContentOut])
def list_department_content(
    slug: str,
    content_type: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    dept = department_service.get_by_slug(db, slug)
    if not dept:
        raise HTTPException(status_code=404, detail="Department not found")
    # Drafts stay inside the department; everyone else sees published material.
    status_filter = None if current_user and can_view_department(current_user, slug) else "published"
    if content_type:
        return content_service.get_by_type(db, dept.department_id, content_type, status_filter or "published")
    return content_service.get_by_department(db, dept.department_id, status_filter)


@router.get("/{slug}/content/{content_slug}", response_model=ContentOut)
def get_department_content(
    slug: str,
    content_slug: str,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    dept = department_service.get_by_slug(db, slug)
    if not dept:
        raise HTTPException(status_code=404, detail="Department not found")
    item = content_service.get_by_slug(db, dept.department_id, content_slug)
    if not item:
        raise HTTPException(status_code=404, detail="Content not found")
    if item.status != "published" and not (current_user and can_view_department(current_user, slug)):
        raise HTTPException(status_code=404, detail="Content not found")
    return item
