"""ForwardHistory model - append-only audit trail of complaint reassignment."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Uuid, func

from ecare.core.database import Base


class ForwardHistory(Base):
    __tablename__ = "forward_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    complaint_id = Column(
        Integer, ForeignKey("complaints.id", ondelete="CASCADE"), nullable=False, index=True
    )
    forward_from = Column(Uuid, nullable=True)
    forward_to = Column(Uuid, nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
