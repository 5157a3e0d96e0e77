"""Complaint API endpoints."""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from ecare.core.auth import Actor, get_current_actor
from ecare.core.database import get_db
from ecare.core.errors import ComplaintWorkflowError
from ecare.models.complaint import Complaint
from ecare.schemas.complaint import (
    ComplaintCreate,
    ComplaintDetailResponse,
    ComplaintForward,
    ComplaintResponse,
    ComplaintStatsResponse,
    ComplaintStatusUpdate,
)
from ecare.schemas.remark import RemarkCreate, RemarkResult
from ecare.services.complaint_workflow import ComplaintWorkflowService

router = APIRouter()

STATUS_FILTER_PATTERN = "^(all|not_forwarded|pending|in_process|closed|cancelled)$"

WORKFLOW_ERRORS = {
    400: {"description": "Remark limit reached or invalid assignee"},
    401: {"description": "Missing actor identity"},
    403: {"description": "Not allowed for this actor"},
    404: {"description": "Complaint or remark not found"},
    409: {"description": "Status transition not allowed"},
}


def _workflow_error(e: ComplaintWorkflowError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.message)


@router.get(
    "/",
    response_model=list[ComplaintResponse],
    summary="List complaints",
    responses={401: {"description": "Missing actor identity"}},
)
async def list_complaints(
    response: Response,
    status: str | None = Query(default=None, pattern=STATUS_FILTER_PATTERN),
    search: str | None = Query(default=None, max_length=255),
    from_date: datetime | None = None,
    to_date: datetime | None = None,
    user_id: UUID | None = None,
    assigned_to: UUID | None = None,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=10, ge=1, le=100),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> list[Complaint]:
    """List the complaints visible to the caller, most recently updated first."""
    service = ComplaintWorkflowService(db)
    filters = service.build_filters(
        actor,
        status=status,
        search=search,
        from_date=from_date,
        to_date=to_date,
        user_id=user_id,
        assigned_to=assigned_to,
    )
    response.headers["X-Total-Count"] = str(service.count_complaints(filters))
    return service.list_complaints(filters, skip=skip, limit=limit)


@router.get(
    "/stats",
    response_model=ComplaintStatsResponse,
    summary="Complaint counts per status",
    responses={401: {"description": "Missing actor identity"}},
)
async def get_complaint_stats(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> ComplaintStatsResponse:
    """Dashboard counts within the caller's visibility."""
    counts = ComplaintWorkflowService(db).status_counts(actor)
    return ComplaintStatsResponse(**counts)


@router.post(
    "/",
    response_model=ComplaintResponse,
    status_code=201,
    summary="Register complaint",
    responses={**WORKFLOW_ERRORS, 422: {"description": "Validation error"}},
)
async def create_complaint(
    data: ComplaintCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> Complaint:
    """Register a complaint for the calling user."""
    try:
        return ComplaintWorkflowService(db).create(actor, data)
    except ComplaintWorkflowError as e:
        raise _workflow_error(e) from None


@router.get(
    "/{complaint_id}",
    response_model=ComplaintDetailResponse,
    summary="Get complaint",
    responses=WORKFLOW_ERRORS,
)
async def get_complaint(
    complaint_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> ComplaintDetailResponse:
    """Get a complaint with its remarks and forward history."""
    try:
        detail = ComplaintWorkflowService(db).get_complaint_detail(actor, complaint_id)
    except ComplaintWorkflowError as e:
        raise _workflow_error(e) from None
    return ComplaintDetailResponse.model_validate(detail, from_attributes=True)


@router.put(
    "/{complaint_id}/status",
    response_model=ComplaintResponse,
    summary="Update complaint status",
    responses=WORKFLOW_ERRORS,
)
async def update_complaint_status(
    complaint_id: int,
    data: ComplaintStatusUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> Complaint:
    """Set a complaint's status (admin or assigned technician)."""
    try:
        return ComplaintWorkflowService(db).update_status(actor, complaint_id, data.status)
    except ComplaintWorkflowError as e:
        raise _workflow_error(e) from None


@router.post(
    "/{complaint_id}/forward",
    response_model=ComplaintResponse,
    summary="Forward complaint to a technician",
    responses=WORKFLOW_ERRORS,
)
async def forward_complaint(
    complaint_id: int,
    data: ComplaintForward,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> Complaint:
    """Assign a complaint to an active technician."""
    try:
        return ComplaintWorkflowService(db).forward(
            actor, complaint_id, data.technician_id, status=data.status
        )
    except ComplaintWorkflowError as e:
        raise _workflow_error(e) from None


@router.post(
    "/{complaint_id}/cancel",
    response_model=ComplaintResponse,
    summary="Cancel complaint",
    responses=WORKFLOW_ERRORS,
)
async def cancel_complaint(
    complaint_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> Complaint:
    """Cancel a pending complaint (owner only)."""
    try:
        return ComplaintWorkflowService(db).cancel(actor, complaint_id)
    except ComplaintWorkflowError as e:
        raise _workflow_error(e) from None


@router.post(
    "/{complaint_id}/remarks",
    response_model=RemarkResult,
    status_code=201,
    summary="Add remark",
    responses={**WORKFLOW_ERRORS, 422: {"description": "Validation error"}},
)
async def add_remark(
    complaint_id: int,
    data: RemarkCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> RemarkResult:
    """Add an admin or technician remark, optionally changing the status."""
    try:
        return ComplaintWorkflowService(db).add_remark(actor, complaint_id, data)
    except ComplaintWorkflowError as e:
        raise _workflow_error(e) from None


@router.put(
    "/remarks/{remark_id}",
    response_model=RemarkResult,
    summary="Update technician remark",
    responses={**WORKFLOW_ERRORS, 422: {"description": "Validation error"}},
)
async def update_remark(
    remark_id: int,
    data: RemarkCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> RemarkResult:
    """Rewrite one of the caller's technician remarks."""
    try:
        return ComplaintWorkflowService(db).update_remark(actor, remark_id, data)
    except ComplaintWorkflowError as e:
        raise _workflow_error(e) from None


@router.delete(
    "/remarks/{remark_id}",
    status_code=204,
    summary="Delete technician remark",
    responses=WORKFLOW_ERRORS,
)
async def delete_remark(
    remark_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> None:
    """Delete one of the caller's technician remarks."""
    try:
        ComplaintWorkflowService(db).delete_remark(actor, remark_id)
    except ComplaintWorkflowError as e:
        raise _workflow_error(e) from None
