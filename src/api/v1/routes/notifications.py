"""Notification API routes."""

from enum import StrEnum
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from api.v1.dependencies import get_notification_feed, get_notification_poller
from api.v1.schemas.notification import (
    ClearNotificationsResponse,
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationResponse,
    NotificationStatsResponse,
)
from core.exceptions import NotificationNotFoundError
from domain.entities.notification import Notification, NotificationPriority, NotificationType
from domain.services.notification_feed import NotificationFeed
from domain.services.notification_poller import NotificationPoller

router = APIRouter(prefix="/notifications", tags=["notifications"])


class FeedFilter(StrEnum):
    ALL = "all"
    UNREAD = "unread"
    ACTION_REQUIRED = "action_required"


@router.get(
    "",
    response_model=NotificationListResponse,
    summary="List notifications",
    responses={
        200: {"description": "Current notification feed, highest priority first"},
    },
)
async def list_notifications(
    filter: FeedFilter = Query(FeedFilter.ALL, description="Restrict the feed"),
    type: NotificationType | None = Query(None, description="Only this signal type"),
    priority: NotificationPriority | None = Query(None, description="Only this priority"),
    feed: NotificationFeed = Depends(get_notification_feed),
    poller: NotificationPoller = Depends(get_notification_poller),
) -> NotificationListResponse:
    """List the notifications produced by the latest poll."""
    if filter is FeedFilter.UNREAD:
        notifications = feed.unread()
    elif filter is FeedFilter.ACTION_REQUIRED:
        notifications = feed.action_required()
    else:
        notifications = feed.notifications

    if type is not None:
        notifications = _keep(notifications, feed.by_type(type))
    if priority is not None:
        notifications = _keep(notifications, feed.by_priority(priority))

    return NotificationListResponse(
        data=[NotificationResponse.model_validate(n) for n in notifications],
        meta={
            "total": len(notifications),
            "unread_count": len(feed.unread()),
            "last_polled_at": poller.last_polled_at.isoformat() if poller.last_polled_at else None,
        },
    )


@router.get(
    "/stats",
    response_model=NotificationStatsResponse,
    summary="Notification counters",
)
async def get_notification_stats(
    feed: NotificationFeed = Depends(get_notification_feed),
) -> NotificationStatsResponse:
    """Totals by read state, priority and type."""
    stats = feed.stats()
    return NotificationStatsResponse(
        total=stats.total,
        unread=stats.unread,
        action_required=stats.action_required,
        by_priority=stats.by_priority,
        by_type=stats.by_type,
    )


@router.post(
    "/refresh",
    response_model=NotificationListResponse,
    summary="Poll all signal sources now",
    responses={
        200: {"description": "Feed after an immediate aggregation pass"},
    },
)
async def refresh_notifications(
    feed: NotificationFeed = Depends(get_notification_feed),
    poller: NotificationPoller = Depends(get_notification_poller),
) -> NotificationListResponse:
    """Run one aggregation pass. Failing sources contribute nothing."""
    notifications = await poller.poll_once()
    if notifications is None:
        notifications = feed.notifications

    return NotificationListResponse(
        data=[NotificationResponse.model_validate(n) for n in notifications],
        meta={
            "total": len(notifications),
            "unread_count": len(feed.unread()),
            "last_polled_at": poller.last_polled_at.isoformat() if poller.last_polled_at else None,
        },
    )


@router.patch(
    "/{notification_id}/read",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Mark notification as read",
    responses={
        204: {"description": "Notification marked as read"},
    },
)
async def mark_notification_read(
    notification_id: UUID,
    feed: NotificationFeed = Depends(get_notification_feed),
) -> None:
    """Mark a single notification as read. Unknown ids are ignored."""
    feed.mark_read(notification_id)


@router.post(
    "/read-all",
    response_model=MarkAllReadResponse,
    summary="Mark all notifications as read",
)
async def mark_all_read(
    feed: NotificationFeed = Depends(get_notification_feed),
) -> MarkAllReadResponse:
    return MarkAllReadResponse(count=feed.mark_all_read())


@router.delete(
    "/{notification_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Dismiss a notification",
    responses={
        204: {"description": "Notification hidden until its signal clears"},
        404: {"description": "Notification not found"},
    },
)
async def dismiss_notification(
    notification_id: UUID,
    feed: NotificationFeed = Depends(get_notification_feed),
) -> None:
    if not feed.dismiss(notification_id):
        raise NotificationNotFoundError(str(notification_id))


@router.delete(
    "",
    response_model=ClearNotificationsResponse,
    summary="Clear the notification feed",
    responses={
        200: {"description": "Notifications dropped; signals that persist return unread"},
    },
)
async def clear_notifications(
    feed: NotificationFeed = Depends(get_notification_feed),
) -> ClearNotificationsResponse:
    return ClearNotificationsResponse(count=feed.clear())


def _keep(notifications: list[Notification], allowed: list[Notification]) -> list[Notification]:
    ids = {n.id for n in allowed}
    return [n for n in notifications if n.id in ids]
