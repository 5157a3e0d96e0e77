"""Complaint repository for data access."""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from uuid import UUID

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Query, Session

from ecare.models.complaint import Complaint, ComplaintStatus
from ecare.schemas.complaint import ComplaintCreate

NOT_FORWARDED = "not_forwarded"


@dataclass
class ComplaintFilters:
    """Filters for complaint listings.

    ``search`` matches the report number; ``search_user_ids`` and
    ``search_date`` (complaints created that day, UTC) widen the same search
    with an OR.
    """

    user_id: UUID | None = None
    assigned_to: UUID | None = None
    status: str | None = None
    search: str | None = None
    search_user_ids: list[UUID] = field(default_factory=list)
    search_date: date | None = None
    from_date: datetime | None = None
    to_date: datetime | None = None


class ComplaintRepository:
    """Repository for Complaint model."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, data: ComplaintCreate, user_id: UUID, report_number: str) -> Complaint:
        complaint = Complaint(
            report_number=report_number,
            user_id=user_id,
            category_id=data.category_id,
            subcategory=data.subcategory,
            complaint_type=data.complaint_type.value,
            brand_name=data.brand_name,
            model_no=data.model_no or None,
            state=data.state,
            details=data.details,
            warranty_file=data.warranty_file,
            receipt_file=data.receipt_file,
            status=ComplaintStatus.PENDING.value,
            assigned_to=None,
        )
        self.db.add(complaint)
        self.db.commit()
        self.db.refresh(complaint)
        return complaint

    def get_by_id(self, complaint_id: int) -> Complaint | None:
        return self.db.query(Complaint).filter(Complaint.id == complaint_id).first()

    def get_for_update(self, complaint_id: int) -> Complaint | None:
        """Load a complaint and lock its row until the current transaction ends.

        The lock is a no-op on SQLite.
        """
        return (
            self.db.query(Complaint)
            .filter(Complaint.id == complaint_id)
            .with_for_update()
            .populate_existing()
            .first()
        )

    def get_by_report_number(self, report_number: str) -> Complaint | None:
        return (
            self.db.query(Complaint).filter(Complaint.report_number == report_number).first()
        )

    def get_latest_report_number(self) -> str | None:
        """Highest report number issued so far.

        Report numbers sort by length first, so ``AA00001`` ranks above ``Z99999``.
        """
        row = (
            self.db.query(Complaint.report_number)
            .order_by(
                func.length(Complaint.report_number).desc(),
                Complaint.report_number.desc(),
            )
            .first()
        )
        return row[0] if row else None

    def _apply_filters(
        self,
        query: Query,  # type: ignore[type-arg]
        filters: ComplaintFilters,
    ) -> Query:  # type: ignore[type-arg]
        if filters.user_id is not None:
            query = query.filter(Complaint.user_id == filters.user_id)
        if filters.assigned_to is not None:
            query = query.filter(Complaint.assigned_to == filters.assigned_to)

        if filters.status and filters.status != "all":
            if filters.status == NOT_FORWARDED:
                query = query.filter(
                    Complaint.status == ComplaintStatus.PENDING.value,
                    Complaint.assigned_to.is_(None),
                )
            else:
                query = query.filter(Complaint.status == filters.status)

        if filters.from_date is not None:
            query = query.filter(Complaint.created_at >= filters.from_date)
        if filters.to_date is not None:
            query = query.filter(Complaint.created_at <= filters.to_date)

        if filters.search:
            conditions = [Complaint.report_number.ilike(f"%{filters.search}%")]
            if filters.search_user_ids:
                conditions.append(Complaint.user_id.in_(filters.search_user_ids))
            if filters.search_date is not None:
                day_start = datetime.combine(filters.search_date, time.min)
                conditions.append(
                    and_(
                        Complaint.created_at >= day_start,
                        Complaint.created_at < day_start + timedelta(days=1),
                    )
                )
            query = query.filter(or_(*conditions))

        return query

    def get_all(
        self,
        filters: ComplaintFilters | None = None,
        skip: int = 0,
        limit: int = 10,
    ) -> list[Complaint]:
        """Get complaints matching the filters, most recently updated first."""
        query = self._apply_filters(self.db.query(Complaint), filters or ComplaintFilters())
        return (
            query.order_by(Complaint.updated_at.desc(), Complaint.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count(self, filters: ComplaintFilters | None = None) -> int:
        query = self.db.query(func.count(Complaint.id))
        return self._apply_filters(query, filters or ComplaintFilters()).scalar() or 0

    def status_counts(
        self, user_id: UUID | None = None, assigned_to: UUID | None = None
    ) -> dict[str, int]:
        """Count complaints per status, plus pending complaints never forwarded."""
        scope = ComplaintFilters(user_id=user_id, assigned_to=assigned_to)
        query = self._apply_filters(
            self.db.query(Complaint.status, func.count(Complaint.id)), scope
        )

        counts = {status.value: 0 for status in ComplaintStatus}
        for status, count in query.group_by(Complaint.status).all():
            counts[status] = count
        counts["total"] = sum(counts.values())
        counts[NOT_FORWARDED] = self.count(
            ComplaintFilters(user_id=user_id, assigned_to=assigned_to, status=NOT_FORWARDED)
        )
        return counts
