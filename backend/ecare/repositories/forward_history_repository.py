"""ForwardHistory repository for data access."""

from uuid import UUID

from sqlalchemy.orm import Session

from ecare.models.forward_history import ForwardHistory


class ForwardHistoryRepository:
    def __init__(self, db: Session):
        self.db = db

    def add(self, complaint_id: int, forward_from: UUID | None, forward_to: UUID) -> ForwardHistory:
        """Stage a history entry in the current transaction. The caller commits."""
        entry = ForwardHistory(
            complaint_id=complaint_id,
            forward_from=forward_from,
            forward_to=forward_to,
        )
        self.db.add(entry)
        self.db.flush()
        return entry

    def get_by_complaint(self, complaint_id: int) -> list[ForwardHistory]:
        return (
            self.db.query(ForwardHistory)
            .filter(ForwardHistory.complaint_id == complaint_id)
            .order_by(ForwardHistory.created_at.asc(), ForwardHistory.id.asc())
            .all()
        )
