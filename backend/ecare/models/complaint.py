"""Complaint model - one customer-reported repair issue and its workflow state."""

from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, Uuid, func

from ecare.core.database import Base

MAX_DETAILS_LENGTH = 2000


class ComplaintStatus(str, Enum):
    PENDING = "pending"
    IN_PROCESS = "in_process"
    CLOSED = "closed"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = frozenset({ComplaintStatus.CLOSED, ComplaintStatus.CANCELLED})


class ComplaintType(str, Enum):
    UNDER_WARRANTY = "Under Warranty"
    OVER_WARRANTY = "Over Warranty"


class Complaint(Base):
    __tablename__ = "complaints"

    id = Column(Integer, primary_key=True, autoincrement=True)
    report_number = Column(String(20), unique=True, index=True, nullable=False)
    user_id = Column(
        Uuid, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True
    )

    category_id = Column(Integer, nullable=True)
    subcategory = Column(String(255), nullable=False)
    complaint_type = Column(String(20), nullable=False)
    brand_name = Column(String(255), nullable=False)
    model_no = Column(String(255), nullable=True)
    state = Column(String(100), nullable=False)
    details = Column(Text, nullable=False)
    warranty_file = Column(String(2048), nullable=True)
    receipt_file = Column(String(2048), nullable=True)

    status = Column(String(20), nullable=False, default=ComplaintStatus.PENDING.value, index=True)
    assigned_to = Column(
        Uuid, ForeignKey("technicians.id", ondelete="SET NULL"), nullable=True, index=True
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @property
    def is_terminal(self) -> bool:
        return ComplaintStatus(self.status) in TERMINAL_STATUSES
