"""Bounded remark log per complaint."""

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from ecare.core.errors import NotFound, RemarkLimitReached
from ecare.models.remark import AdminRemark, RemarkKind, TechnicianRemark
from ecare.repositories.complaint_repository import ComplaintRepository
from ecare.repositories.remark_repository import RemarkRepository
from ecare.schemas.remark import RemarkCreate

logger = logging.getLogger(__name__)

MAX_REMARKS_PER_COMPLAINT = 3


class RemarkLedger:
    """Enforces the remark ceiling and exposes remark ownership.

    Admin and technician remarks share one ceiling per complaint. The count
    check and the insert run in the same transaction, with the parent complaint
    row locked, so two concurrent submissions cannot both take the last slot.
    """

    def __init__(self, db: Session):
        self.db = db
        self.remark_repo = RemarkRepository(db)
        self.complaint_repo = ComplaintRepository(db)

    def count_for(self, complaint_id: int) -> int:
        return self.remark_repo.count_for_complaint(complaint_id)

    def list_for(self, complaint_id: int, kind: RemarkKind) -> list[AdminRemark | TechnicianRemark]:
        return self.remark_repo.get_by_complaint(kind, complaint_id)

    def owner_of(self, remark_id: int) -> UUID:
        """Author of a technician remark.

        Raises:
            NotFound: If the remark does not exist.
        """
        return UUID(str(self.get_technician_remark(remark_id).remark_by))

    def get_technician_remark(self, remark_id: int) -> TechnicianRemark:
        remark = self.remark_repo.get_technician_remark(remark_id)
        if remark is None:
            raise NotFound(f"Remark {remark_id} not found")
        return remark

    def append(
        self,
        kind: RemarkKind,
        complaint_id: int,
        author_id: UUID,
        data: RemarkCreate,
    ) -> AdminRemark | TechnicianRemark:
        """Stage a new remark if the complaint has room for it.

        The remark is flushed but not committed: the caller applies any
        status side-effect and commits both together. On rejection the
        transaction is rolled back and nothing is persisted.

        Raises:
            NotFound: If the complaint does not exist.
            RemarkLimitReached: If the complaint already has the maximum remarks.
        """
        complaint = self.complaint_repo.get_for_update(complaint_id)
        if complaint is None:
            self.db.rollback()
            raise NotFound(f"Complaint {complaint_id} not found")

        existing = self.count_for(complaint_id)
        if existing >= MAX_REMARKS_PER_COMPLAINT:
            self.db.rollback()
            logger.info(
                "Rejected remark on complaint %s: %d remarks already recorded",
                complaint_id,
                existing,
            )
            raise RemarkLimitReached(
                f"Limit reached: Maximum {MAX_REMARKS_PER_COMPLAINT} remarks allowed per complaint."
            )

        return self.remark_repo.add(kind, complaint_id, author_id, data)

    def update(self, remark: TechnicianRemark, data: RemarkCreate) -> TechnicianRemark:
        """Replace the editable fields of a technician remark. The caller commits."""
        return self.remark_repo.replace_fields(remark, data)

    def delete(self, remark: TechnicianRemark) -> None:
        self.remark_repo.delete(remark)
