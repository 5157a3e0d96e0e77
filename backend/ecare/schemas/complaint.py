"""Complaint and forward history schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ecare.models.complaint import MAX_DETAILS_LENGTH, ComplaintStatus, ComplaintType
from ecare.schemas.remark import RemarkResponse


class ComplaintCreate(BaseModel):
    category_id: int | None = Field(default=None, gt=0)
    subcategory: str = Field(min_length=1, max_length=255)
    complaint_type: ComplaintType
    state: str = Field(min_length=1, max_length=100)
    brand_name: str = Field(min_length=1, max_length=255)
    model_no: str | None = Field(default=None, max_length=255)
    details: str = Field(min_length=10, max_length=MAX_DETAILS_LENGTH)
    warranty_file: str | None = Field(default=None, max_length=2048)
    receipt_file: str | None = Field(default=None, max_length=2048)


class ComplaintStatusUpdate(BaseModel):
    status: ComplaintStatus


class ComplaintForward(BaseModel):
    technician_id: UUID
    status: ComplaintStatus | None = None


class ComplaintResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    report_number: str
    user_id: UUID
    category_id: int | None = None
    subcategory: str
    complaint_type: str
    brand_name: str
    model_no: str | None = None
    state: str
    details: str
    warranty_file: str | None = None
    receipt_file: str | None = None
    status: str
    assigned_to: UUID | None = None
    created_at: datetime
    updated_at: datetime


class ForwardHistoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    complaint_id: int
    forward_from: UUID | None = None
    forward_to: UUID | None = None
    created_at: datetime


class ComplaintDetailResponse(BaseModel):
    complaint: ComplaintResponse
    admin_remarks: list[RemarkResponse]
    technician_remarks: list[RemarkResponse]
    forward_history: list[ForwardHistoryResponse]


class ComplaintStatsResponse(BaseModel):
    total: int = 0
    pending: int = 0
    in_process: int = 0
    closed: int = 0
    cancelled: int = 0
    not_forwarded: int = 0
