"""Remark repository for data access across both remark tables."""

from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from ecare.models.remark import REMARK_MODELS, AdminRemark, RemarkKind, TechnicianRemark
from ecare.schemas.remark import RemarkCreate


class RemarkRepository:
    """Repository for AdminRemark and TechnicianRemark models."""

    def __init__(self, db: Session):
        self.db = db

    def count_for_complaint(self, complaint_id: int) -> int:
        """Count remarks of both kinds attached to a complaint."""
        admin_count = (
            self.db.query(func.count(AdminRemark.id))
            .filter(AdminRemark.complaint_id == complaint_id)
            .scalar()
        )
        technician_count = (
            self.db.query(func.count(TechnicianRemark.id))
            .filter(TechnicianRemark.complaint_id == complaint_id)
            .scalar()
        )
        return (admin_count or 0) + (technician_count or 0)

    def add(
        self,
        kind: RemarkKind,
        complaint_id: int,
        remark_by: UUID,
        data: RemarkCreate,
    ) -> AdminRemark | TechnicianRemark:
        """Stage a remark in the current transaction. The caller commits."""
        model = REMARK_MODELS[kind]
        remark = model(
            complaint_id=complaint_id,
            remark_by=remark_by,
            note_transport=data.note_transport,
            checking=data.checking,
            remark=data.remark,
            status=data.status.value if data.status else None,
        )
        self.db.add(remark)
        self.db.flush()
        return remark

    def get_by_complaint(
        self, kind: RemarkKind, complaint_id: int
    ) -> list[AdminRemark | TechnicianRemark]:
        model = REMARK_MODELS[kind]
        return (
            self.db.query(model)
            .filter(model.complaint_id == complaint_id)
            .order_by(model.created_at.asc(), model.id.asc())
            .all()
        )

    def get_technician_remark(self, remark_id: int) -> TechnicianRemark | None:
        return self.db.query(TechnicianRemark).filter(TechnicianRemark.id == remark_id).first()

    def replace_fields(self, remark: TechnicianRemark, data: RemarkCreate) -> TechnicianRemark:
        """Overwrite every editable field of a technician remark. The caller commits."""
        remark.note_transport = data.note_transport  # type: ignore[assignment]
        remark.checking = data.checking  # type: ignore[assignment]
        remark.remark = data.remark  # type: ignore[assignment]
        remark.status = data.status.value if data.status else None  # type: ignore[assignment]
        self.db.flush()
        return remark

    def delete(self, remark: TechnicianRemark) -> None:
        self.db.delete(remark)
        self.db.commit()
