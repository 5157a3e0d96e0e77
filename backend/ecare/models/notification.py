"""Notification model - one message delivered to one recipient."""

from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, Uuid, func

from ecare.core.database import Base
from ecare.models.account import generate_uuid


class NotificationType(str, Enum):
    STATUS_UPDATE = "status_update"
    STATUS_UPDATE_DETAILED = "status_update_detailed"
    ASSIGNMENT = "assignment"
    TRANSPORT_UPDATE = "transport_update"
    CHECKING_UPDATE = "checking_update"
    REMARK_UPDATE = "remark_update"


class Notification(Base):
    """Notification model - immutable apart from the read flag."""

    __tablename__ = "notifications"

    id = Column(Uuid, primary_key=True, default=generate_uuid)
    recipient_id = Column(Uuid, nullable=False, index=True)
    recipient_role = Column(String(20), nullable=False)
    title = Column(String(255), nullable=False)
    # Hybrid payload: structured {"key", "params"} JSON or legacy free text.
    message = Column(Text, nullable=False)
    type = Column(String(50), nullable=False, index=True)
    reference_id = Column(Integer, nullable=False, default=0)
    is_read = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
