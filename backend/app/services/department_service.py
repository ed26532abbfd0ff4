"""Department service layer."""

import logging
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.department import Department
from app.schemas.department import DepartmentCreate, DepartmentUpdate
from app.utils.helpers import slugify

logger = logging.getLogger(__name__)


def create(db: Session, data: DepartmentCreate) -> Department:
    slug = slugify(data.slug)
    if not slug:
        raise HTTPException(status_code=400, detail="Department slug is required")
    if db.query(Department).filter(Department.slug == slug).first():
        raise HTTPException(status_code=409, detail="Department slug already exists")
    dept = Department(**{**data.model_dump(), "slug": slug})
    db.add(dept)
    db.commit()
    db.refresh(dept)
    return dept


def get_by_slug(db: Session, slug: str) -> Optional[Department]:
    try:
        return db.query(Department).filter(Department.slug == slug).first()
    except SQLAlchemyError:
        logger.exception("[departments] failed to load department %s", slug)
        return None


def get_by_id(db: Session, department_id: int) -> Optional[Department]:
    try:
        return db.query(Department).filter(Department.department_id == department_id).first()
    except SQLAlchemyError:
        logger.exception("[departments] failed to load department %s", department_id)
        return None


def get_active(db: Session) -> List[Department]:
    try:
        return (
            db.query(Department)
            .filter(Department.is_active == True)  # noqa: E712
            .order_by(Department.name.asc())
            .all()
        )
    except SQLAlchemyError:
        logger.exception("[departments] failed to list active departments")
        return []


def list_departments(db: Session) -> List[Department]:
    try:
        return db.query(Department).order_by(Department.name.asc()).all()
    except SQLAlchemyError:
        logger.exception("[departments] failed to list departments")
        return []


def update(db: Session, slug: str, data: DepartmentUpdate) -> Department:
    dept = get_by_slug(db, slug)
    if not dept:
        raise HTTPException(status_code=404, detail="Department not found")
    for k, v in data.model_dump(exclude_none=True).items():
        setattr(dept, k, v)
    db.commit()
    db.refresh(dept)
    return dept
