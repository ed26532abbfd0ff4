"""Notification domain SQLAlchemy model."""

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey, Index, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class Notification(Base):
    __tablename__ = "notification"

    notification_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    type = Column(String(30), nullable=False)
    # profile_updated/content_created/content_updated/content_published/role_changed/department_announcement
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False)
    priority = Column(String(10), nullable=False, default="medium")  # low/medium/high/urgent
    action_url = Column(String(500))
    meta = Column("metadata", JSON)
    created_at = Column(DateTime, server_default=func.now())
    read_at = Column(DateTime)

    user = relationship("User", back_populates="notifications")

    __table_args__ = (
        Index("idx_notification_user", "user_id", "is_read", "created_at"),
    )
