"""Auth API router."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.user import LoginRequest, TokenResponse, UserOut
from app.services import activity_log_service
from app.services.auth_service import create_access_token, login_by_email
from app.middleware.auth_middleware import get_current_user
from app.models.user import User

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, request: Request, db: Session = Depends(get_db)):
    user = login_by_email(db, payload.email)
    token = create_access_token(user.user_id)
    activity_log_service.log_activity(
        db,
        user.user_id,
        "login",
        "user",
        f"{user.username} signed in",
        resource_id=user.user_id,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    return TokenResponse(access_token=token, user=UserOut.model_validate(user))


@router.post("/logout")
def logout(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    activity_log_service.log_activity(
        db, current_user.user_id, "logout", "user", f"{current_user.username} signed out",
        resource_id=current_user.user_id,
    )
    return {"message": "Signed out."}


@router.get("/me", response_model=UserOut)
def me(current_user: User = Depends(get_current_user)):
    return current_user
