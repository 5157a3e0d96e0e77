"""Pydantic schemas for Notification."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class NotificationResponse(BaseModel):
    id: UUID
    recipient_id: UUID
    recipient_role: str
    title: str
    message: str
    type: str
    reference_id: int
    is_read: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class RenderedNotificationResponse(NotificationResponse):
    """Notification with title and message resolved through the catalog."""

    rendered_title: str
    rendered_message: str
    structured: bool


class NotificationCountResponse(BaseModel):
    unread_count: int
