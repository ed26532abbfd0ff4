"""Auth service layer. Issues session tokens for known, active users."""

from datetime import timedelta
from jose import jwt
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from app.models.user import User
from app.config import settings
from app.utils.helpers import utc_now

ALGORITHM = "HS256"


def create_access_token(user_id: int) -> str:
    expire = utc_now() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {"sub": str(user_id), "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def login_by_email(db: Session, email: str) -> User:
    # Identity is asserted upstream (OAuth / hosted auth); this only resolves the account.
    user = db.query(User).filter(User.email == email.strip().lower(), User.is_active == True).first()  # noqa: E712
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"No active user registered for '{email}'",
        )
    user.last_login = utc_now()
    db.commit()
    db.refresh(user)
    return user
