"""Knowledge-base content item (SOP, guide, policy, ...) SQLAlchemy model."""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index, JSON
from sqlalchemy.sql import func
from app.database import Base


CONTENT_TYPES = ("sop", "guide", "announcement", "resource", "training", "policy")
CONTENT_STATUSES = ("draft", "published")


class ContentItem(Base):
    __tablename__ = "content"

    content_id = Column(Integer, primary_key=True, autoincrement=True)
    department_id = Column(Integer, ForeignKey("department.department_id"), nullable=False)
    title = Column(String(200), nullable=False)
    slug = Column(String(200), nullable=False)
    body = Column(Text, nullable=False, default="")  # opaque to the backend, rendered client-side
    type = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False, default="draft")
    tags = Column(JSON, nullable=False, default=list)
    author_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    version = Column(Integer, nullable=False, default=1)
    published_at = Column(DateTime)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now())

    __table_args__ = (
        Index("idx_content_department", "department_id", "status", "updated_at"),
        Index("idx_content_slug", "department_id", "slug"),
    )
