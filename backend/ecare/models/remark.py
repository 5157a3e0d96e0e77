"""Remark models - timestamped staff notes attached to a complaint."""

from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, Uuid, func

from ecare.core.database import Base


class RemarkKind(str, Enum):
    ADMIN = "admin"
    TECHNICIAN = "technician"


class RemarkColumnsMixin:
    """Columns shared by admin and technician remarks."""

    id = Column(Integer, primary_key=True, autoincrement=True)
    complaint_id = Column(
        Integer, ForeignKey("complaints.id", ondelete="CASCADE"), nullable=False, index=True
    )
    remark_by = Column(Uuid, nullable=False, index=True)
    note_transport = Column(Text, nullable=True)
    checking = Column(Text, nullable=True)
    remark = Column(Text, nullable=True)
    status = Column(String(20), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class AdminRemark(RemarkColumnsMixin, Base):
    """Remark left by admin staff. Immutable once created."""

    __tablename__ = "complaint_remarks"


class TechnicianRemark(RemarkColumnsMixin, Base):
    """Remark left by the assigned technician. Editable by its author only."""

    __tablename__ = "technician_remarks"


REMARK_MODELS: dict[RemarkKind, type[AdminRemark] | type[TechnicianRemark]] = {
    RemarkKind.ADMIN: AdminRemark,
    RemarkKind.TECHNICIAN: TechnicianRemark,
}
