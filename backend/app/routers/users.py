"""Users and roster API router."""

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session
from typing import List, Optional

from app.database import get_db
from app.middleware.auth_middleware import get_current_user, require_role
from app.models.user import User
from app.schemas.user import RosterOut, UserCreate, UserOut, UserProfileUpdate, UserRoleUpdate
from app.services import user_service
from app.utils.permissions import ADMIN, DEPARTMENTS, EDITOR, is_super_admin

router = APIRouter(tags=["users"])


@router.get("/api/users", response_model=List[UserOut])
def list_users(
    include_inactive: bool = False,
    department: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(EDITOR)),
):
    # Department staff only see their own department.
    if not is_super_admin(current_user):
        department = current_user.department
    return user_service.list_users(db, include_inactive=include_inactive, department=department)


@router.post("/api/users", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    data: UserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(ADMIN)),
):
    return user_service.create_user(db, data, current_user)


@router.get("/api/users/{user_id}", response_model=UserOut)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(get_current_user),
):
    return user_service.get_user(db, user_id)


@router.patch("/api/users/{user_id}", response_model=UserOut)
def update_profile(
    user_id: int,
    data: UserProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return user_service.update_profile(db, user_id, data, current_user)


@router.patch("/api/users/{user_id}/role", response_model=UserOut)
def change_role(
    user_id: int,
    data: UserRoleUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(ADMIN)),
):
    return user_service.change_role(db, user_id, data, current_user)


@router.delete("/api/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def deactivate_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(ADMIN)),
):
    user_service.deactivate_user(db, user_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/api/roster/{department}", response_model=RosterOut)
def get_roster(department: str, db: Session = Depends(get_db)):
    if department not in DEPARTMENTS:
        raise HTTPException(status_code=404, detail="Unknown department")
    return user_service.get_roster(db, department)
