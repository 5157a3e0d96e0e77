"""Complaint lifecycle: guarded mutations, remark side-effects and read scoping.

Statuses move ``pending -> in_process -> closed``; ``closed`` and ``cancelled``
are terminal and ``cancelled`` is reachable only through ``cancel``. Every
mutation commits before its event is dispatched, so a notification failure
never undoes a complaint change.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ecare.core.auth import Actor
from ecare.core.clock import Clock, utc_now
from ecare.core.errors import Forbidden, InvalidAssignee, InvalidTransition, NotFound
from ecare.models.complaint import TERMINAL_STATUSES, Complaint, ComplaintStatus, ComplaintType
from ecare.models.forward_history import ForwardHistory
from ecare.models.remark import AdminRemark, RemarkKind, TechnicianRemark
from ecare.repositories.account_repository import TechnicianRepository, UserRepository
from ecare.repositories.complaint_repository import ComplaintFilters, ComplaintRepository
from ecare.repositories.forward_history_repository import ForwardHistoryRepository
from ecare.schemas.complaint import ComplaintCreate
from ecare.schemas.remark import RemarkCreate, RemarkResult
from ecare.services.notification_dispatcher import (
    ComplaintEvent,
    ComplaintEventType,
    NotificationDispatcher,
)
from ecare.services.remark_ledger import RemarkLedger
from ecare.services.report_number import ReportNumberGenerator

logger = logging.getLogger(__name__)

REPORT_NUMBER_ATTEMPTS = 5

# Search terms that look like a date: YYYY-MM-DD, DD-MM-YYYY, DD/MM/YYYY, YYYY/MM/DD
SEARCH_DATE_FORMATS = {
    re.compile(r"^\d{4}-\d{2}-\d{2}$"): "%Y-%m-%d",
    re.compile(r"^\d{2}-\d{2}-\d{4}$"): "%d-%m-%Y",
    re.compile(r"^\d{2}/\d{2}/\d{4}$"): "%d/%m/%Y",
    re.compile(r"^\d{4}/\d{2}/\d{2}$"): "%Y/%m/%d",
}


def parse_search_date(term: str) -> date | None:
    """Interpret a search term as a calendar date, if it looks like one."""
    for pattern, fmt in SEARCH_DATE_FORMATS.items():
        if pattern.match(term):
            try:
                return datetime.strptime(term, fmt).date()
            except ValueError:
                return None
    return None


@dataclass
class ComplaintDetail:
    complaint: Complaint
    admin_remarks: list[AdminRemark]
    technician_remarks: list[TechnicianRemark]
    forward_history: list[ForwardHistory]


class ComplaintWorkflowService:
    """Service enforcing who may do what to a complaint, and when."""

    def __init__(
        self,
        db: Session,
        dispatcher: NotificationDispatcher | None = None,
        clock: Clock = utc_now,
    ):
        self.db = db
        self.complaint_repo = ComplaintRepository(db)
        self.user_repo = UserRepository(db)
        self.technician_repo = TechnicianRepository(db)
        self.forward_repo = ForwardHistoryRepository(db)
        self.ledger = RemarkLedger(db)
        self.report_numbers = ReportNumberGenerator(db)
        self.dispatcher = dispatcher or NotificationDispatcher(db, clock=clock)

    # -- mutations ----------------------------------------------------------

    def create(self, actor: Actor, data: ComplaintCreate) -> Complaint:
        """Register a new complaint for the calling user.

        Raises:
            Forbidden: If the actor is not a user.
            NotFound: If the user account does not exist.
        """
        if not actor.is_user:
            raise Forbidden("Only users can register complaints")
        if self.user_repo.get_by_id(actor.id) is None:
            raise NotFound(f"User {actor.id} not found")

        if data.complaint_type == ComplaintType.UNDER_WARRANTY and not (
            data.warranty_file and data.receipt_file
        ):
            logger.warning(
                "Under-warranty complaint from user %s is missing warranty or receipt file",
                actor.id,
            )

        complaint = self._insert(actor.id, data)
        logger.info("Complaint %s registered by user %s", complaint.report_number, actor.id)

        self._notify(
            ComplaintEvent(type=ComplaintEventType.CREATED, complaint=complaint, actor=actor)
        )
        return complaint

    def forward(
        self,
        actor: Actor,
        complaint_id: int,
        technician_id: UUID,
        status: ComplaintStatus | None = None,
    ) -> Complaint:
        """Assign a complaint to a technician.

        The complaint moves to ``status`` (default ``in_process``). Forwarding
        an already assigned complaint re-assigns it and notifies again.

        Raises:
            Forbidden: If the actor is not an admin.
            NotFound: If the complaint does not exist.
            InvalidTransition: If the complaint is closed or cancelled, or the
                override is ``cancelled``.
            InvalidAssignee: If the technician does not exist or is inactive.
        """
        if not actor.is_admin:
            raise Forbidden("Only admins can forward complaints")

        complaint = self._get_complaint(complaint_id)
        if complaint.is_terminal:
            raise InvalidTransition(
                f"Complaint {complaint.report_number} is {complaint.status} and cannot be forwarded"
            )
        if status == ComplaintStatus.CANCELLED:
            raise InvalidTransition("Forwarding cannot cancel a complaint")

        technician = self.technician_repo.get_active_by_id(technician_id)
        if technician is None:
            raise InvalidAssignee(f"Technician {technician_id} is not an active technician")

        target = status or ComplaintStatus.IN_PROCESS
        forward_from = complaint.assigned_to or actor.id

        complaint.assigned_to = technician.id
        complaint.status = target.value  # type: ignore[assignment]
        self.forward_repo.add(complaint.id, forward_from, technician.id)  # type: ignore[arg-type]
        self.db.commit()
        self.db.refresh(complaint)

        logger.info(
            "Complaint %s forwarded to technician %s by admin %s",
            complaint.report_number,
            technician_id,
            actor.id,
        )
        self._notify(
            ComplaintEvent(
                type=ComplaintEventType.FORWARDED,
                complaint=complaint,
                actor=actor,
                forward_status=status,
            )
        )
        return complaint

    def add_remark(self, actor: Actor, complaint_id: int, data: RemarkCreate) -> RemarkResult:
        """Attach a remark, optionally moving the complaint to ``data.status``.

        The remark and its status change are committed together.

        Raises:
            Forbidden: If the actor is a user, or a technician not assigned to
                the complaint.
            NotFound: If the complaint does not exist.
            InvalidTransition: If the complaint is cancelled or the status
                side-effect is not a legal transition.
            RemarkLimitReached: If the complaint already has three remarks.
        """
        if not (actor.is_admin or actor.is_technician):
            raise Forbidden("Only admins and technicians can add remarks")

        complaint = self._get_complaint(complaint_id)
        if actor.is_technician and complaint.assigned_to != actor.id:
            raise Forbidden("Only the assigned technician can add remarks to this complaint")

        kind = RemarkKind.ADMIN if actor.is_admin else RemarkKind.TECHNICIAN
        remark = self.ledger.append(kind, complaint.id, actor.id, data)  # type: ignore[arg-type]
        remark_id = remark.id
        previous_status, changed = self._apply_remark_status(complaint, data)
        self.db.commit()
        self.db.refresh(complaint)

        logger.info(
            "%s remark %s added to complaint %s (status changed: %s)",
            kind.value.capitalize(),
            remark_id,
            complaint.report_number,
            changed,
        )
        self._notify(
            ComplaintEvent(
                type=ComplaintEventType.REMARK_ADDED,
                complaint=complaint,
                actor=actor,
                remark=data,
                previous_status=previous_status,
                status_changed=changed,
            )
        )
        return self._remark_result(remark_id, changed, data)  # type: ignore[arg-type]

    def update_remark(self, actor: Actor, remark_id: int, data: RemarkCreate) -> RemarkResult:
        """Rewrite a technician remark in place.

        Raises:
            Forbidden: If the actor is not the technician who wrote the remark, or
                is no longer assigned to its complaint.
            NotFound: If the remark or its complaint does not exist.
            InvalidTransition: If the complaint is cancelled or the status
                side-effect is not a legal transition.
        """
        if not actor.is_technician:
            raise Forbidden("Only technicians can edit remarks")

        remark = self.ledger.get_technician_remark(remark_id)
        if self.ledger.owner_of(remark_id) != actor.id:
            raise Forbidden("You can only edit your own remarks")

        complaint_id = remark.complaint_id
        complaint = self.complaint_repo.get_for_update(complaint_id)  # type: ignore[arg-type]
        if complaint is None:
            self.db.rollback()
            raise NotFound(f"Complaint {remark.complaint_id} not found")
        if complaint.assigned_to != actor.id:
            self.db.rollback()
            raise Forbidden("Only the assigned technician can edit remarks on this complaint")

        previous_status, changed = self._apply_remark_status(complaint, data)
        self.ledger.update(remark, data)
        self.db.commit()
        self.db.refresh(complaint)

        logger.info(
            "Technician remark %s on complaint %s updated (status changed: %s)",
            remark_id,
            complaint.report_number,
            changed,
        )
        self._notify(
            ComplaintEvent(
                type=ComplaintEventType.REMARK_UPDATED,
                complaint=complaint,
                actor=actor,
                remark=data,
                previous_status=previous_status,
                status_changed=changed,
            )
        )
        return self._remark_result(remark_id, changed, data)

    def delete_remark(self, actor: Actor, remark_id: int) -> None:
        """Delete a technician remark. Deletion sends no notification."""
        if not actor.is_technician:
            raise Forbidden("Only technicians can delete remarks")

        remark = self.ledger.get_technician_remark(remark_id)
        if self.ledger.owner_of(remark_id) != actor.id:
            raise Forbidden("You can only delete your own remarks")

        complaint_id = remark.complaint_id
        self.ledger.delete(remark)
        logger.info("Technician remark %s on complaint %s deleted", remark_id, complaint_id)

    def update_status(self, actor: Actor, complaint_id: int, status: ComplaintStatus) -> Complaint:
        """Set a complaint's status directly.

        Setting the current status again is accepted and changes nothing.

        Raises:
            Forbidden: If the actor is a user, or a technician not assigned to
                the complaint.
            NotFound: If the complaint does not exist.
            InvalidTransition: If the complaint is closed or cancelled, or the
                target is ``cancelled``.
        """
        if not (actor.is_admin or actor.is_technician):
            raise Forbidden("Only admins and technicians can update complaint status")

        complaint = self._get_complaint(complaint_id)
        if actor.is_technician and complaint.assigned_to != actor.id:
            raise Forbidden("Only the assigned technician can update this complaint")

        previous_status = ComplaintStatus(complaint.status)
        changed = self._check_transition(complaint, status)
        if changed:
            complaint.status = status.value  # type: ignore[assignment]
            self.db.commit()
            self.db.refresh(complaint)
            logger.info(
                "Complaint %s status %s -> %s by %s %s",
                complaint.report_number,
                previous_status.value,
                status.value,
                actor.role.value,
                actor.id,
            )

        self._notify(
            ComplaintEvent(
                type=ComplaintEventType.STATUS_CHANGED,
                complaint=complaint,
                actor=actor,
                previous_status=previous_status,
                status_changed=changed,
            )
        )
        return complaint

    def cancel(self, actor: Actor, complaint_id: int) -> Complaint:
        """Cancel a pending complaint on behalf of its owner.

        Raises:
            NotFound: If the complaint does not exist.
            Forbidden: If the actor does not own the complaint.
            InvalidTransition: If the complaint is no longer pending.
        """
        complaint = self._get_complaint(complaint_id)
        if not actor.is_user or complaint.user_id != actor.id:
            raise Forbidden("Only the owner can cancel this complaint")
        if complaint.status != ComplaintStatus.PENDING.value:
            raise InvalidTransition(
                f"Complaint {complaint.report_number} is {complaint.status}; "
                "only pending complaints can be cancelled"
            )

        complaint.status = ComplaintStatus.CANCELLED.value  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(complaint)
        logger.info("Complaint %s cancelled by user %s", complaint.report_number, actor.id)

        self._notify(
            ComplaintEvent(
                type=ComplaintEventType.CANCELLED,
                complaint=complaint,
                actor=actor,
                previous_status=ComplaintStatus.PENDING,
                status_changed=True,
            )
        )
        return complaint

    # -- reads --------------------------------------------------------------

    def get_complaint_detail(self, actor: Actor, complaint_id: int) -> ComplaintDetail:
        """Complaint with its remarks and forward history.

        Visible to the owner, the assigned technician and any admin.
        """
        complaint = self._get_complaint(complaint_id)
        if not self._can_view(actor, complaint):
            raise Forbidden("You do not have access to this complaint")

        return ComplaintDetail(
            complaint=complaint,
            admin_remarks=self.ledger.list_for(complaint_id, RemarkKind.ADMIN),
            technician_remarks=self.ledger.list_for(complaint_id, RemarkKind.TECHNICIAN),
            forward_history=self.forward_repo.get_by_complaint(complaint_id),
        )

    def build_filters(
        self,
        actor: Actor,
        *,
        status: str | None = None,
        search: str | None = None,
        from_date: datetime | None = None,
        to_date: datetime | None = None,
        user_id: UUID | None = None,
        assigned_to: UUID | None = None,
    ) -> ComplaintFilters:
        """Listing filters scoped to what the actor may see.

        Users only see their own complaints and technicians only those assigned
        to them; ``user_id`` and ``assigned_to`` narrow an admin's view.
        """
        filters = ComplaintFilters(status=status, from_date=from_date, to_date=to_date)
        if actor.is_user:
            filters.user_id = actor.id
        elif actor.is_technician:
            filters.assigned_to = actor.id
        else:
            filters.user_id = user_id
            filters.assigned_to = assigned_to

        term = (search or "").strip()
        if term:
            filters.search = term
            filters.search_user_ids = self.user_repo.search_ids(term)
            filters.search_date = parse_search_date(term)
        return filters

    def list_complaints(
        self, filters: ComplaintFilters, skip: int = 0, limit: int = 10
    ) -> list[Complaint]:
        return self.complaint_repo.get_all(filters, skip=skip, limit=limit)

    def count_complaints(self, filters: ComplaintFilters) -> int:
        return self.complaint_repo.count(filters)

    def status_counts(self, actor: Actor) -> dict[str, int]:
        """Dashboard counts within the actor's visibility."""
        if actor.is_user:
            return self.complaint_repo.status_counts(user_id=actor.id)
        if actor.is_technician:
            return self.complaint_repo.status_counts(assigned_to=actor.id)
        return self.complaint_repo.status_counts()

    # -- helpers ------------------------------------------------------------

    def _get_complaint(self, complaint_id: int) -> Complaint:
        complaint = self.complaint_repo.get_by_id(complaint_id)
        if complaint is None:
            raise NotFound(f"Complaint {complaint_id} not found")
        return complaint

    def _insert(self, user_id: UUID, data: ComplaintCreate) -> Complaint:
        """Insert with a fresh report number, retrying when another insert took it."""
        for attempt in range(1, REPORT_NUMBER_ATTEMPTS):
            report_number = self.report_numbers.generate()
            try:
                return self.complaint_repo.create(data, user_id, report_number)
            except IntegrityError:
                self.db.rollback()
                logger.warning(
                    "Report number %s already taken, retrying (attempt %d)",
                    report_number,
                    attempt,
                )
        return self.complaint_repo.create(data, user_id, self.report_numbers.generate())

    def _check_transition(self, complaint: Complaint, target: ComplaintStatus) -> bool:
        """Validate a status change and report whether it changes anything.

        Raises:
            InvalidTransition: If ``target`` is ``cancelled`` or the complaint
                is terminal and ``target`` differs from its status.
        """
        if target == ComplaintStatus.CANCELLED:
            raise InvalidTransition("Only the owner can cancel a complaint")

        current = ComplaintStatus(complaint.status)
        if current == target:
            return False
        if current in TERMINAL_STATUSES:
            raise InvalidTransition(
                f"Complaint {complaint.report_number} is {current.value} and cannot move to "
                f"{target.value}"
            )
        return True

    def _apply_remark_status(
        self, complaint: Complaint, data: RemarkCreate
    ) -> tuple[ComplaintStatus, bool]:
        """Apply a remark's status side-effect inside the open transaction.

        Rolls back the staged remark when the complaint cannot take it.
        """
        previous_status = ComplaintStatus(complaint.status)
        try:
            if previous_status == ComplaintStatus.CANCELLED:
                raise InvalidTransition(
                    f"Complaint {complaint.report_number} is cancelled and cannot take remarks"
                )
            changed = self._check_transition(complaint, data.status) if data.status else False
        except InvalidTransition:
            self.db.rollback()
            raise

        if changed and data.status is not None:
            complaint.status = data.status.value  # type: ignore[assignment]
        return previous_status, changed

    @staticmethod
    def _remark_result(remark_id: int, changed: bool, data: RemarkCreate) -> RemarkResult:
        return RemarkResult(
            remark_id=remark_id,
            status_changed=changed,
            new_status=data.status if changed else None,
        )

    @staticmethod
    def _can_view(actor: Actor, complaint: Complaint) -> bool:
        if actor.is_admin:
            return True
        if actor.is_technician:
            return complaint.assigned_to == actor.id
        return complaint.user_id == actor.id

    def _notify(self, event: ComplaintEvent) -> None:
        self.dispatcher.dispatch(event)
