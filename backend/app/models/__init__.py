"""SQLAlchemy model package initialization."""

from app.models.user import User
from app.models.department import Department
from app.models.content import ContentItem
from app.models.content_version import ContentVersion
from app.models.activity_log import ActivityLog
from app.models.notification import Notification

__all__ = [
    "User",
    "Department",
    "ContentItem",
    "ContentVersion",
    "ActivityLog",
    "Notification",
]
