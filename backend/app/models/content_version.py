"""Immutable content snapshot SQLAlchemy model."""

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey, Index, JSON
from sqlalchemy.sql import func

from app.database import Base


class ContentVersion(Base):
    __tablename__ = "content_version"

    version_id = Column(Integer, primary_key=True, autoincrement=True)
    content_id = Column(Integer, ForeignKey("content.content_id"), nullable=False)
    version = Column(Integer, nullable=False)
    title = Column(String(200), nullable=False)
    slug = Column(String(200), nullable=False)
    body = Column(Text, nullable=False, default="")
    type = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False)
    tags = Column(JSON, nullable=False, default=list)
    author_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    is_current_version = Column(Boolean, nullable=False, default=False)
    changes_summary = Column(String(500))
    published_at = Column(DateTime)
    created_at = Column(DateTime, server_default=func.now())

    # Intentionally not unique: concurrent writers can collide on a version number.
    __table_args__ = (
        Index("idx_content_version_content", "content_id", "version"),
    )
