"""Append-only audit trail SQLAlchemy model."""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index, JSON
from sqlalchemy.sql import func
from app.database import Base


ACTIVITY_ACTIONS = (
    "create", "update", "delete", "view", "login", "logout",
    "version_created", "version_restored",
)


class ActivityLog(Base):
    __tablename__ = "activity_log"

    log_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    action = Column(String(30), nullable=False)
    resource_type = Column(String(30), nullable=False)
    resource_id = Column(String(64))
    description = Column(Text, nullable=False)
    ip_address = Column(String(64))
    user_agent = Column(String(500))
    # "metadata" is reserved on declarative classes.
    meta = Column("metadata", JSON)
    timestamp = Column(DateTime, server_default=func.now())

    __table_args__ = (
        Index("idx_activity_user", "user_id", "timestamp"),
        Index("idx_activity_resource", "resource_type", "resource_id", "timestamp"),
    )
