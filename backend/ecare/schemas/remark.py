"""Remark schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from ecare.models.complaint import ComplaintStatus


class RemarkCreate(BaseModel):
    note_transport: str | None = None
    checking: str | None = None
    remark: str | None = None
    status: ComplaintStatus | None = None

    @field_validator("note_transport", "checking", "remark", mode="before")
    @classmethod
    def blank_to_none(cls, value: str | None) -> str | None:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("status", mode="before")
    @classmethod
    def empty_status_to_none(cls, value: str | None) -> str | None:
        return value or None

    @field_validator("status")
    @classmethod
    def status_not_cancelled(cls, value: ComplaintStatus | None) -> ComplaintStatus | None:
        if value == ComplaintStatus.CANCELLED:
            raise ValueError("Remarks cannot cancel a complaint")
        return value


class RemarkResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    complaint_id: int
    remark_by: UUID
    note_transport: str | None = None
    checking: str | None = None
    remark: str | None = None
    status: str | None = None
    created_at: datetime


class RemarkResult(BaseModel):
    """Outcome of a remark submission, including its status side-effect."""

    remark_id: int
    status_changed: bool = False
    new_status: ComplaintStatus | None = None
