"""Notification fan-out for complaint lifecycle events.

The dispatcher turns one committed complaint mutation into zero or more
notification records, one per recipient. Each record is written on its own:
a failing recipient is logged and skipped, and the complaint mutation that
triggered the event is never touched.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol
from uuid import UUID

from sqlalchemy.orm import Session

from ecare.core.auth import Actor
from ecare.core.clock import (
    Clock,
    format_notification_date,
    format_notification_datetime,
    format_notification_time,
    utc_now,
)
from ecare.models.account import ActorRole
from ecare.models.complaint import Complaint, ComplaintStatus
from ecare.models.notification import Notification, NotificationType
from ecare.repositories.account_repository import (
    AdminRepository,
    TechnicianRepository,
    UserRepository,
)
from ecare.repositories.notification_repository import NotificationRepository
from ecare.schemas.remark import RemarkCreate
from ecare.services import notification_codec as codec

logger = logging.getLogger(__name__)

DEFAULT_USER_NAME = "Customer"
DEFAULT_TECHNICIAN_NAME = "Technician"

# Statuses a technician reports back to the admins and the customer
REPORTED_STATUSES = (ComplaintStatus.IN_PROCESS, ComplaintStatus.CLOSED)


class ComplaintEventType(str, Enum):
    CREATED = "created"
    FORWARDED = "forwarded"
    REMARK_ADDED = "remark_added"
    REMARK_UPDATED = "remark_updated"
    STATUS_CHANGED = "status_changed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class ComplaintEvent:
    """A committed complaint mutation.

    ``status_changed`` tells whether the mutation moved the complaint to a new
    status (for remarks, whether the optional status side-effect applied).
    ``forward_status`` is the status override a forward carried, if any.
    """

    type: ComplaintEventType
    complaint: Complaint
    actor: Actor
    remark: RemarkCreate | None = None
    forward_status: ComplaintStatus | None = None
    previous_status: ComplaintStatus | None = None
    status_changed: bool = False


@dataclass(frozen=True)
class NotificationDraft:
    recipient_id: UUID
    recipient_role: ActorRole
    title: str
    message: str
    type: NotificationType
    reference_id: int


class AdminDirectory(Protocol):
    def list_active(self) -> list[UUID]: ...


def pick_notification_target(admin_ids: Sequence[UUID]) -> UUID | None:
    """Choose the admin who receives single-recipient notices.

    The directory lists admins oldest first, so this is the earliest-created
    admin. Returns None when there are no admins.
    """
    return admin_ids[0] if admin_ids else None


class NotificationDispatcher:
    """Builds and stores notifications for complaint events."""

    def __init__(
        self,
        db: Session,
        admin_directory: AdminDirectory | None = None,
        clock: Clock = utc_now,
    ):
        self.db = db
        self.notification_repo = NotificationRepository(db)
        self.admin_directory = admin_directory or AdminRepository(db)
        self.user_repo = UserRepository(db)
        self.technician_repo = TechnicianRepository(db)
        self.clock = clock

    def dispatch(self, event: ComplaintEvent) -> list[Notification]:
        """Store every notification the event calls for.

        Never raises: failures are logged and the remaining recipients still
        receive their notification.

        Returns:
            list[Notification]: The records that were written.
        """
        complaint_id = event.complaint.id
        try:
            drafts = self.plan(event)
        except Exception:
            logger.exception(
                "Failed to plan %s notifications for complaint %s",
                event.type.value,
                complaint_id,
            )
            self.db.rollback()
            return []

        sent = [n for n in (self._send(draft) for draft in drafts) if n is not None]
        logger.info(
            "Dispatched %d/%d notifications for %s on complaint %s",
            len(sent),
            len(drafts),
            event.type.value,
            complaint_id,
        )
        return sent

    def plan(self, event: ComplaintEvent) -> list[NotificationDraft]:
        """Decide recipients and payloads for an event without writing anything."""
        complaint = event.complaint
        context = _EventContext(
            complaint_id=complaint.id,
            report_number=complaint.report_number,
            owner_id=complaint.user_id,
            status=ComplaintStatus(complaint.status),
            assigned_to=complaint.assigned_to,
        )

        if event.type == ComplaintEventType.FORWARDED:
            return self._plan_forwarded(event, context)

        admin_ids = self.admin_directory.list_active()
        if event.type == ComplaintEventType.CREATED:
            return self._plan_created(context, admin_ids)
        if event.type == ComplaintEventType.STATUS_CHANGED:
            if event.status_changed:
                return self._status_pair(event.actor, context, admin_ids)
            return []
        if event.type in (ComplaintEventType.REMARK_ADDED, ComplaintEventType.REMARK_UPDATED):
            return self._plan_remark(event, context, admin_ids)
        if event.type == ComplaintEventType.CANCELLED:
            return self._plan_cancelled(context, admin_ids)
        return []

    def _send(self, draft: NotificationDraft) -> Notification | None:
        try:
            return self.notification_repo.create(
                recipient_id=draft.recipient_id,
                recipient_role=draft.recipient_role,
                title=draft.title,
                message=draft.message,
                type=draft.type,
                reference_id=draft.reference_id,
            )
        except Exception:
            logger.exception(
                "Failed to notify %s %s about complaint %s",
                draft.recipient_role.value,
                draft.recipient_id,
                draft.reference_id,
            )
            self.db.rollback()
            return None

    # -- event plans --------------------------------------------------------

    def _plan_created(
        self, context: _EventContext, admin_ids: list[UUID]
    ) -> list[NotificationDraft]:
        title = f"New Complaint: {context.report_number}"
        admin_message = codec.encode(
            codec.NEW_COMPLAINT,
            {
                "user_name": self._user_name(context.owner_id),
                "report_number": context.report_number,
            },
        )
        drafts = [
            context.draft(
                admin_id, ActorRole.ADMIN, title, admin_message, NotificationType.STATUS_UPDATE
            )
            for admin_id in admin_ids
        ]
        drafts.append(
            context.draft(
                context.owner_id,
                ActorRole.USER,
                "Complaint Registered",
                codec.encode(codec.COMPLAINT_CREATED, {"report_number": context.report_number}),
                NotificationType.STATUS_UPDATE,
            )
        )
        return drafts

    def _plan_forwarded(
        self, event: ComplaintEvent, context: _EventContext
    ) -> list[NotificationDraft]:
        if context.assigned_to is None:
            return []

        technician_name = self._technician_name(context.assigned_to)
        drafts = [
            context.draft(
                context.assigned_to,
                ActorRole.TECHNICIAN,
                f"Job Assigned: {context.report_number}",
                codec.encode(
                    codec.PROCESSING_TECH,
                    {"id": context.report_number, "userName": self._user_name(context.owner_id)},
                ),
                NotificationType.ASSIGNMENT,
            )
        ]

        if event.forward_status in (None, ComplaintStatus.IN_PROCESS):
            now = self.clock()
            drafts.append(
                context.draft(
                    context.owner_id,
                    ActorRole.USER,
                    f"Status Update: {context.report_number}",
                    codec.encode(
                        codec.PROCESSING_USER,
                        {
                            "id": context.report_number,
                            "name": technician_name,
                            "date": format_notification_date(now),
                            "time": format_notification_time(now),
                        },
                    ),
                    NotificationType.STATUS_UPDATE_DETAILED,
                )
            )
        return drafts

    def _plan_remark(
        self, event: ComplaintEvent, context: _EventContext, admin_ids: list[UUID]
    ) -> list[NotificationDraft]:
        drafts: list[NotificationDraft] = []
        if event.status_changed:
            drafts.extend(self._status_pair(event.actor, context, admin_ids))

        # Facet notices only follow technician remarks
        remark = event.remark
        params = {"id": context.report_number}
        if remark is not None and event.actor.is_technician:
            if remark.note_transport:
                drafts.extend(
                    context.pair(
                        admin_ids,
                        f"Transport Update: {context.report_number}",
                        codec.encode(codec.TRANSPORT_ADMIN, params),
                        codec.encode(codec.TRANSPORT_USER, params),
                        NotificationType.TRANSPORT_UPDATE,
                    )
                )
            if remark.checking:
                drafts.extend(
                    context.pair(
                        admin_ids,
                        f"Checking Update: {context.report_number}",
                        codec.encode(codec.CHECKING_ADMIN, params),
                        codec.encode(codec.CHECKING_USER, params),
                        NotificationType.CHECKING_UPDATE,
                    )
                )
            if remark.remark:
                drafts.extend(
                    context.pair(
                        admin_ids,
                        f"New Remark: {context.report_number}",
                        codec.encode(codec.REMARK_ADMIN, params),
                        codec.encode(codec.REMARK_USER, params),
                        NotificationType.REMARK_UPDATE,
                    )
                )

        if (
            event.type == ComplaintEventType.REMARK_ADDED
            and event.actor.is_admin
            and context.assigned_to is not None
        ):
            drafts.append(
                context.draft(
                    context.assigned_to,
                    ActorRole.TECHNICIAN,
                    f"Job Update: {context.report_number}",
                    codec.encode(
                        codec.JOB_UPDATE_TECH,
                        {"id": context.report_number, "status": context.status.value},
                    ),
                    NotificationType.STATUS_UPDATE,
                )
            )
        return drafts

    def _plan_cancelled(
        self, context: _EventContext, admin_ids: list[UUID]
    ) -> list[NotificationDraft]:
        drafts = [
            context.draft(
                context.owner_id,
                ActorRole.USER,
                f"Status Update: {context.report_number}",
                codec.encode(
                    codec.COMPLAINT_CANCELLED_USER,
                    {
                        "id": context.report_number,
                        "date": format_notification_datetime(self.clock()),
                    },
                ),
                NotificationType.STATUS_UPDATE_DETAILED,
            )
        ]

        target = pick_notification_target(admin_ids)
        if target is None:
            logger.warning(
                "No admin to notify about cancelled complaint %s", context.report_number
            )
            return drafts

        drafts.append(
            context.draft(
                target,
                ActorRole.ADMIN,
                "Complaint Cancelled by User",
                codec.encode(
                    codec.COMPLAINT_CANCELLED_ADMIN,
                    {"id": context.report_number, "user_name": self._user_name(context.owner_id)},
                ),
                NotificationType.STATUS_UPDATE,
            )
        )
        return drafts

    def _status_pair(
        self, actor: Actor, context: _EventContext, admin_ids: list[UUID]
    ) -> list[NotificationDraft]:
        """Admin broadcast and owner notice for a technician-reported status."""
        if not actor.is_technician or context.status not in REPORTED_STATUSES:
            return []

        now = self.clock()
        params = {
            "id": context.report_number,
            "name": self._technician_name(actor.id),
            "date": format_notification_date(now),
            "time": format_notification_time(now),
        }
        if context.status == ComplaintStatus.CLOSED:
            admin_key, user_key = codec.COMPLETED_BODY, codec.COMPLETED_USER
        else:
            admin_key, user_key = codec.PROCESSING_BODY, codec.PROCESSING_BODY

        return context.pair(
            admin_ids,
            f"Status Update: {context.report_number}",
            codec.encode(admin_key, params),
            codec.encode(user_key, params),
            NotificationType.STATUS_UPDATE_DETAILED,
        )

    # -- lookups ------------------------------------------------------------

    def _user_name(self, user_id: UUID) -> str:
        user = self.user_repo.get_by_id(user_id)
        return str(user.full_name) if user and user.full_name else DEFAULT_USER_NAME

    def _technician_name(self, technician_id: UUID) -> str:
        technician = self.technician_repo.get_by_id(technician_id)
        return str(technician.name) if technician and technician.name else DEFAULT_TECHNICIAN_NAME


@dataclass(frozen=True)
class _EventContext:
    """Complaint fields captured once per dispatch."""

    complaint_id: int
    report_number: str
    owner_id: UUID
    status: ComplaintStatus
    assigned_to: UUID | None

    def draft(
        self,
        recipient_id: UUID,
        role: ActorRole,
        title: str,
        message: str,
        type: NotificationType,
    ) -> NotificationDraft:
        return NotificationDraft(
            recipient_id=recipient_id,
            recipient_role=role,
            title=title,
            message=message,
            type=type,
            reference_id=self.complaint_id,
        )

    def pair(
        self,
        admin_ids: list[UUID],
        title: str,
        admin_message: str,
        user_message: str,
        type: NotificationType,
    ) -> list[NotificationDraft]:
        """Same notice to every admin plus the owner, each with its own message."""
        drafts = [
            self.draft(admin_id, ActorRole.ADMIN, title, admin_message, type)
            for admin_id in admin_ids
        ]
        drafts.append(self.draft(self.owner_id, ActorRole.USER, title, user_message, type))
        return drafts
