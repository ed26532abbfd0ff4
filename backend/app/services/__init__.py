"""Service layer package."""

from app.services import (
    activity_log_service,
    auth_service,
    content_service,
    department_service,
    notification_service,
    user_service,
    version_service,
)
