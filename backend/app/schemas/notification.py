"""Pydantic schemas for notification and activity log responses."""

from pydantic import BaseModel, Field
from typing import Any, Dict, Optional
from datetime import datetime


class NotificationOut(BaseModel):
    notification_id: int
    user_id: int
    type: str
    title: str
    message: str
    is_read: bool
    priority: str
    action_url: Optional[str]
    metadata: Optional[Dict[str, Any]] = Field(default=None, validation_alias="meta")
    created_at: datetime
    read_at: Optional[datetime]

    model_config = {"from_attributes": True}


class UnreadCountOut(BaseModel):
    unread: int


class ActivityLogOut(BaseModel):
    log_id: int
    user_id: int
    action: str
    resource_type: str
    resource_id: Optional[str]
    description: str
    ip_address: Optional[str]
    user_agent: Optional[str]
    metadata: Optional[Dict[str, Any]] = Field(default=None, validation_alias="meta")
    timestamp: datetime

    model_config = {"from_attributes": True}
