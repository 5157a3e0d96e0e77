"""Repository for Notification CRUD operations."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.orm import Session

from ecare.models.account import ActorRole
from ecare.models.notification import Notification, NotificationType


class NotificationRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        *,
        recipient_id: UUID,
        recipient_role: ActorRole,
        title: str,
        message: str,
        type: NotificationType = NotificationType.STATUS_UPDATE,
        reference_id: int | None = None,
    ) -> Notification:
        notification = Notification(
            recipient_id=recipient_id,
            recipient_role=recipient_role.value,
            title=title,
            message=message,
            type=type.value,
            reference_id=reference_id or 0,
            is_read=False,
        )
        self.db.add(notification)
        self.db.commit()
        self.db.refresh(notification)
        return notification

    def get_by_id(self, notification_id: UUID) -> Notification | None:
        return (
            self.db.query(Notification)
            .filter(Notification.id == notification_id)
            .first()
        )

    def get_all(
        self,
        recipient_id: UUID,
        skip: int = 0,
        limit: int = 50,
        type: str | None = None,
        is_read: bool | None = None,
    ) -> list[Notification]:
        query = self.db.query(Notification).filter(Notification.recipient_id == recipient_id)
        if type is not None:
            query = query.filter(Notification.type == type)
        if is_read is not None:
            query = query.filter(Notification.is_read == is_read)
        return (
            query.order_by(Notification.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count_unread(self, recipient_id: UUID) -> int:
        return (
            self.db.query(Notification)
            .filter(
                Notification.recipient_id == recipient_id,
                Notification.is_read == False,  # noqa: E712
            )
            .count()
        )

    def mark_as_read(self, notification_id: UUID, recipient_id: UUID) -> Notification | None:
        """Flip the read flag. Only the recipient may mark its own notification."""
        notification = self.get_by_id(notification_id)
        if notification is None or notification.recipient_id != recipient_id:
            return None
        notification.is_read = True  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(notification)
        return notification

    def mark_all_as_read(self, recipient_id: UUID) -> int:
        count = (
            self.db.query(Notification)
            .filter(
                Notification.recipient_id == recipient_id,
                Notification.is_read == False,  # noqa: E712
            )
            .update({"is_read": True})
        )
        self.db.commit()
        return count
