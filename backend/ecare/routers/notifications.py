"""Notification API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ecare.core.auth import Actor, get_current_actor
from ecare.core.config import settings
from ecare.core.database import get_db
from ecare.models.notification import NotificationType
from ecare.repositories.notification_repository import NotificationRepository
from ecare.schemas.notification import (
    NotificationCountResponse,
    NotificationResponse,
    RenderedNotificationResponse,
)
from ecare.services.notification_renderer import DictCatalog, load_catalog, render_notification

router = APIRouter()


@router.get(
    "/",
    response_model=list[NotificationResponse],
    summary="List notifications",
    responses={401: {"description": "Missing actor identity"}},
)
async def list_notifications(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=settings.NOTIFICATION_LIST_LIMIT, ge=1, le=200),
    type: NotificationType | None = None,
    is_read: bool | None = None,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> list[NotificationResponse]:
    """List the caller's notifications, newest first."""
    repo = NotificationRepository(db)
    notifications = repo.get_all(
        actor.id,
        skip=skip,
        limit=limit,
        type=type.value if type else None,
        is_read=is_read,
    )
    return [NotificationResponse.model_validate(n) for n in notifications]


@router.get(
    "/rendered",
    response_model=list[RenderedNotificationResponse],
    summary="List notifications with resolved text",
    responses={401: {"description": "Missing actor identity"}},
)
async def list_rendered_notifications(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=settings.NOTIFICATION_LIST_LIMIT, ge=1, le=200),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> list[RenderedNotificationResponse]:
    """List the caller's notifications with title and message resolved.

    Without a configured catalog every notification renders its stored text.
    """
    catalog = load_catalog() or DictCatalog({})
    repo = NotificationRepository(db)
    rendered = []
    for notification in repo.get_all(actor.id, skip=skip, limit=limit):
        text = render_notification(notification, catalog)
        rendered.append(
            RenderedNotificationResponse.model_validate(
                {
                    **NotificationResponse.model_validate(notification).model_dump(),
                    "rendered_title": text.title,
                    "rendered_message": text.message,
                    "structured": text.structured,
                }
            )
        )
    return rendered


@router.get(
    "/unread_count",
    response_model=NotificationCountResponse,
    summary="Get unread notification count",
    responses={401: {"description": "Missing actor identity"}},
)
async def get_unread_count(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> NotificationCountResponse:
    """Get the count of unread notifications."""
    repo = NotificationRepository(db)
    return NotificationCountResponse(unread_count=repo.count_unread(actor.id))


@router.post(
    "/read_all",
    response_model=NotificationCountResponse,
    summary="Mark all notifications as read",
    responses={401: {"description": "Missing actor identity"}},
)
async def mark_all_as_read(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> NotificationCountResponse:
    """Mark all unread notifications as read. Returns how many were updated."""
    repo = NotificationRepository(db)
    return NotificationCountResponse(unread_count=repo.mark_all_as_read(actor.id))


@router.post(
    "/{notification_id}/read",
    response_model=NotificationResponse,
    summary="Mark a notification as read",
    responses={
        401: {"description": "Missing actor identity"},
        404: {"description": "Notification not found"},
    },
)
async def mark_as_read(
    notification_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> NotificationResponse:
    """Mark a single notification as read."""
    repo = NotificationRepository(db)
    updated = repo.mark_as_read(notification_id, actor.id)
    if updated is None:
        raise HTTPException(status_code=404, detail="Notification not found")
    return NotificationResponse.model_validate(updated)
