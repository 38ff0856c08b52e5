"""
Notification schemas.
"""
from datetime import datetime
from typing import Any, Dict, Optional
from app.schemas.base import BaseSchema, TimestampSchema, IDSchema


class NotificationResponse(IDSchema, TimestampSchema):
    type: str
    priority: str
    title: str
    message: str
    data: Dict[str, Any] = {}
    action_url: Optional[str] = None
    is_read: bool
    read_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


class UnreadCountResponse(BaseSchema):
    unread: int
